"""Notifications emitted by the election controller after a successful mutation."""
from typing import Literal, Union

from pydantic import BaseModel

from ballot.domain.models import WorkflowStatus


class VoterRegistered(BaseModel):
    type: Literal["VoterRegistered"] = "VoterRegistered"
    identity: str


class WorkflowStatusChange(BaseModel):
    type: Literal["WorkflowStatusChange"] = "WorkflowStatusChange"
    previous: WorkflowStatus
    next: WorkflowStatus


class ProposalRegistered(BaseModel):
    type: Literal["ProposalRegistered"] = "ProposalRegistered"
    proposal_id: int


class Voted(BaseModel):
    type: Literal["Voted"] = "Voted"
    identity: str
    proposal_id: int


ElectionEvent = Union[VoterRegistered, WorkflowStatusChange, ProposalRegistered, Voted]

from typing import Optional
from pydantic import BaseModel
from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, String
from ballot.domain.models import WorkflowStatus
from ballot.infrastructure.database import Base


class ElectionState(Base):
    __tablename__ = "election_state"
    id = Column(Integer, primary_key=True)
    status = Column(Enum(WorkflowStatus), nullable=False, default=WorkflowStatus.REGISTERING_VOTERS)
    winning_proposal_id = Column(Integer, nullable=True)


class Proposal(Base):
    __tablename__ = "proposals"
    # the insertion index doubles as the proposal id
    id = Column(Integer, primary_key=True, autoincrement=False)
    description = Column(String, nullable=False, default="")
    vote_count = Column(Integer, nullable=False, default=0)


class Voter(Base):
    __tablename__ = "voters"
    address = Column(String, primary_key=True)
    is_registered = Column(Boolean, default=False, nullable=False)
    has_voted = Column(Boolean, default=False, nullable=False)
    voted_proposal_id = Column(Integer, ForeignKey("proposals.id"), nullable=True)


class ProposalResponse(BaseModel):
    proposal_id: int
    description: str
    vote_count: int


class VoterResponse(BaseModel):
    identity: str
    is_registered: bool
    has_voted: bool
    voted_proposal_id: Optional[int] = None


class WorkflowStatusResponse(BaseModel):
    status: WorkflowStatus


class RegisterVoterRequest(BaseModel):
    identity: str


class SubmitProposalRequest(BaseModel):
    description: str = ""

import logging
from fastapi import APIRouter, Depends, HTTPException
from ballot.application.commands import (
    CountVotesCommand,
    EndProposalRegistrationCommand,
    EndVotingSessionCommand,
    StartProposalRegistrationCommand,
    StartVotingSessionCommand,
)
from ballot.application.queries import GetEventsQuery, GetWinningProposalIdQuery, GetWinningProposalQuery, GetWorkflowStatusQuery
from ballot.domain.errors import ElectionError
from ballot.infrastructure.models import ProposalResponse, WorkflowStatusResponse
from ballot.interfaces.dependencies import get_command_bus, get_query_bus, to_http_exception
from ballot.security import get_caller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workflow", tags=["Workflow"])
events_router = APIRouter(prefix="/events", tags=["Events"])


def _run(command_bus, command):
    try:
        return command_bus.handle(command)
    except ElectionError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error while handling %s", type(command).__name__)
        raise HTTPException(status_code=500, detail="An unexpected error occurred")


@router.get("/", response_model=WorkflowStatusResponse)
def get_workflow_status(query_bus=Depends(get_query_bus)):
    return query_bus.handle(GetWorkflowStatusQuery())


@router.post("/start-proposal-registration")
def start_proposal_registration(caller: str = Depends(get_caller), command_bus=Depends(get_command_bus)):
    return _run(command_bus, StartProposalRegistrationCommand(caller=caller))


@router.post("/end-proposal-registration")
def end_proposal_registration(caller: str = Depends(get_caller), command_bus=Depends(get_command_bus)):
    return _run(command_bus, EndProposalRegistrationCommand(caller=caller))


@router.post("/start-voting-session")
def start_voting_session(caller: str = Depends(get_caller), command_bus=Depends(get_command_bus)):
    return _run(command_bus, StartVotingSessionCommand(caller=caller))


@router.post("/end-voting-session")
def end_voting_session(caller: str = Depends(get_caller), command_bus=Depends(get_command_bus)):
    return _run(command_bus, EndVotingSessionCommand(caller=caller))


@router.post("/count-votes")
def count_votes(caller: str = Depends(get_caller), command_bus=Depends(get_command_bus)):
    return _run(command_bus, CountVotesCommand(caller=caller))


@router.get("/winner/id")
def get_winning_proposal_id(query_bus=Depends(get_query_bus)):
    try:
        return {"winning_proposal_id": query_bus.handle(GetWinningProposalIdQuery())}
    except ElectionError as e:
        raise to_http_exception(e)


@router.get("/winner", response_model=ProposalResponse)
def get_winning_proposal(query_bus=Depends(get_query_bus)):
    try:
        return query_bus.handle(GetWinningProposalQuery())
    except ElectionError as e:
        raise to_http_exception(e)


@events_router.get("/")
def get_events(query_bus=Depends(get_query_bus)):
    return query_bus.handle(GetEventsQuery())

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from ballot.application.commands import CastVoteCommand, RegisterProposalCommand
from ballot.application.queries import GetProposalQuery, GetProposalsQuery
from ballot.domain.errors import ElectionError
from ballot.infrastructure.models import ProposalResponse, SubmitProposalRequest
from ballot.interfaces.dependencies import get_command_bus, get_query_bus, to_http_exception
from ballot.security import get_caller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/proposals", tags=["Proposals"])


@router.get("/", response_model=List[ProposalResponse])
def list_proposals(query_bus=Depends(get_query_bus)):
    return query_bus.handle(GetProposalsQuery())


@router.post("/")
def submit_proposal(request: SubmitProposalRequest, caller: str = Depends(get_caller), command_bus=Depends(get_command_bus)):
    command = RegisterProposalCommand(caller=caller, description=request.description)
    try:
        return command_bus.handle(command)
    except ElectionError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error while handling %s", type(command).__name__)
        raise HTTPException(status_code=500, detail="An unexpected error occurred")


@router.get("/{proposal_id}", response_model=ProposalResponse)
def get_proposal(proposal_id: int, query_bus=Depends(get_query_bus)):
    try:
        return query_bus.handle(GetProposalQuery(proposal_id))
    except ElectionError as e:
        raise to_http_exception(e)


@router.post("/{proposal_id}/vote")
def cast_vote(proposal_id: int, caller: str = Depends(get_caller), command_bus=Depends(get_command_bus)):
    command = CastVoteCommand(caller=caller, proposal_id=proposal_id)
    try:
        return command_bus.handle(command)
    except ElectionError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error while handling %s", type(command).__name__)
        raise HTTPException(status_code=500, detail="An unexpected error occurred")

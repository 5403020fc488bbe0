import logging
from fastapi import APIRouter, Depends, HTTPException
from ballot.application.commands import RegisterVoterCommand
from ballot.application.queries import GetVoterQuery
from ballot.domain.errors import ElectionError
from ballot.infrastructure.models import RegisterVoterRequest, VoterResponse
from ballot.interfaces.dependencies import get_command_bus, get_query_bus, to_http_exception
from ballot.security import get_caller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/voters", tags=["Voters"])


@router.post("/")
def register_voter(request: RegisterVoterRequest, caller: str = Depends(get_caller), command_bus=Depends(get_command_bus)):
    command = RegisterVoterCommand(caller=caller, identity=request.identity)
    try:
        return command_bus.handle(command)
    except ElectionError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error while handling %s", type(command).__name__)
        raise HTTPException(status_code=500, detail="An unexpected error occurred")


@router.get("/{identity}", response_model=VoterResponse)
def get_voter(identity: str, caller: str = Depends(get_caller), query_bus=Depends(get_query_bus)):
    try:
        voter = query_bus.handle(GetVoterQuery(caller=caller, identity=identity))
    except ElectionError as e:
        raise to_http_exception(e)

    if voter is None:
        raise HTTPException(status_code=404, detail="Voter not found")
    return voter

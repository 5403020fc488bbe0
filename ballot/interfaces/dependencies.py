from fastapi import HTTPException, Request
from ballot.domain import errors

ERROR_STATUS_CODES = {
    errors.Unauthorized: 403,
    errors.NotRegistered: 403,
    errors.AlreadyRegistered: 409,
    errors.WrongPhase: 409,
    errors.AlreadyVoted: 409,
    errors.InvalidProposal: 404,
    errors.ResultsNotReady: 409,
    errors.NoProposals: 409,
}


def get_command_bus(request: Request):
    return request.app.state.command_bus


def get_query_bus(request: Request):
    return request.app.state.query_bus


def to_http_exception(error: errors.ElectionError) -> HTTPException:
    status_code = ERROR_STATUS_CODES.get(type(error), 400)
    return HTTPException(status_code=status_code, detail={"message": str(error), "code": error.code})

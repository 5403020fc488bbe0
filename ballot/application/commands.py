from pydantic import BaseModel


class RegisterVoterCommand(BaseModel):
    caller: str
    identity: str


class StartProposalRegistrationCommand(BaseModel):
    caller: str


class EndProposalRegistrationCommand(BaseModel):
    caller: str


class StartVotingSessionCommand(BaseModel):
    caller: str


class EndVotingSessionCommand(BaseModel):
    caller: str


class CountVotesCommand(BaseModel):
    caller: str


class RegisterProposalCommand(BaseModel):
    caller: str
    description: str = ""


class CastVoteCommand(BaseModel):
    caller: str
    proposal_id: int

from pydantic import BaseModel


class GetWorkflowStatusQuery:
    pass  # Readable by anyone at any time

class GetProposalsQuery:
    pass

class GetProposalQuery:
    def __init__(self, proposal_id: int):
        self.proposal_id = proposal_id

class GetVoterQuery(BaseModel):
    caller: str
    identity: str

class GetWinningProposalIdQuery:
    pass

class GetWinningProposalQuery:
    pass

class GetEventsQuery:
    pass

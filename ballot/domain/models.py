import enum
from dataclasses import dataclass
from typing import Optional


class WorkflowStatus(str, enum.Enum):
    REGISTERING_VOTERS = "RegisteringVoters"
    PROPOSALS_REGISTRATION_STARTED = "ProposalsRegistrationStarted"
    PROPOSALS_REGISTRATION_ENDED = "ProposalsRegistrationEnded"
    VOTING_SESSION_STARTED = "VotingSessionStarted"
    VOTING_SESSION_ENDED = "VotingSessionEnded"
    VOTES_TALLIED = "VotesTallied"

    @property
    def next(self) -> Optional["WorkflowStatus"]:
        """The status that follows this one, or None for the terminal status."""
        members = list(WorkflowStatus)
        position = members.index(self)
        if position + 1 == len(members):
            return None
        return members[position + 1]


class Role(str, enum.Enum):
    ADMINISTRATOR = "administrator"
    VOTER = "voter"


@dataclass
class VoterRecord:
    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_id: Optional[int] = None


@dataclass
class Proposal:
    description: str
    vote_count: int = 0

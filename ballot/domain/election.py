"""
The election controller.

One ``Election`` owns one single-winner election: the voter whitelist, the
proposals, the workflow status and the tally result. Every operation takes
the caller's identity as supplied by the outer identity layer, runs under a
single lock and inside one repository transaction, and publishes its events
only once all of its changes are stored.
"""
import logging
import threading
from contextlib import contextmanager
from typing import List, Optional

from ballot.domain.errors import (
    AlreadyRegistered,
    AlreadyVoted,
    InvalidProposal,
    NoProposals,
    NotRegistered,
    ResultsNotReady,
    Unauthorized,
    WrongPhase,
)
from ballot.domain.events import ProposalRegistered, Voted, VoterRegistered, WorkflowStatusChange
from ballot.domain.models import Proposal, Role, VoterRecord, WorkflowStatus
from ballot.infrastructure.election_repo import ElectionRepository, InMemoryElectionRepository

logger = logging.getLogger(__name__)


class Election:
    def __init__(self, administrator: str, repository: Optional[ElectionRepository] = None, sink=None):
        """
        :param administrator: identity allowed to register voters and drive the workflow.
        :param repository: where election data lives; in memory when omitted.
        :param sink: object with a ``publish(event)`` method receiving every notification.
        """
        self.administrator = administrator
        self.repository = repository if repository is not None else InMemoryElectionRepository()
        self.sink = sink
        self._lock = threading.RLock()

    @contextmanager
    def _operation(self, name: str):
        pending = []
        with self._lock:
            try:
                with self.repository.transaction():
                    yield pending
            except Exception as e:
                logger.warning("%s rejected: %s", name, getattr(e, "code", type(e).__name__))
                raise
            logger.info("%s succeeded", name)
            if self.sink is None:
                return
            # changes are committed at this point
            for event in pending:
                try:
                    self.sink.publish(event)
                except Exception:
                    logger.exception("Publishing %s after %s failed", event.type, name)

    # Authorization

    def require_caller(self, identity: str, role: Role) -> None:
        if role == Role.ADMINISTRATOR:
            if identity != self.administrator:
                raise Unauthorized(f"{identity} is not the administrator")
            return
        record = self.repository.get_voter(identity)
        if record is None or not record.is_registered:
            raise NotRegistered(f"{identity} is not a registered voter")

    def _require_status(self, expected: WorkflowStatus, action: str) -> None:
        current = self.repository.get_status()
        if current != expected:
            raise WrongPhase(f"Cannot {action} while status is {current.value}")

    # Administrator operations

    def register_voter(self, caller: str, identity: str) -> None:
        with self._operation("register_voter") as events:
            self.require_caller(caller, Role.ADMINISTRATOR)
            self._require_status(WorkflowStatus.REGISTERING_VOTERS, "register voters")
            record = self.repository.get_voter(identity)
            if record is not None and record.is_registered:
                raise AlreadyRegistered(f"{identity} is already registered")

            self.repository.save_voter(identity, VoterRecord(is_registered=True))
            events.append(VoterRegistered(identity=identity))

    def _advance(self, caller: str, expected: WorkflowStatus, events: list) -> WorkflowStatus:
        self.require_caller(caller, Role.ADMINISTRATOR)
        target = expected.next
        self._require_status(expected, f"move to {target.value}")
        self.repository.set_status(target)
        events.append(WorkflowStatusChange(previous=expected, next=target))
        return target

    def start_proposal_registration(self, caller: str) -> WorkflowStatus:
        with self._operation("start_proposal_registration") as events:
            return self._advance(caller, WorkflowStatus.REGISTERING_VOTERS, events)

    def end_proposal_registration(self, caller: str) -> WorkflowStatus:
        with self._operation("end_proposal_registration") as events:
            return self._advance(caller, WorkflowStatus.PROPOSALS_REGISTRATION_STARTED, events)

    def start_voting_session(self, caller: str) -> WorkflowStatus:
        with self._operation("start_voting_session") as events:
            return self._advance(caller, WorkflowStatus.PROPOSALS_REGISTRATION_ENDED, events)

    def end_voting_session(self, caller: str) -> WorkflowStatus:
        with self._operation("end_voting_session") as events:
            return self._advance(caller, WorkflowStatus.VOTING_SESSION_STARTED, events)

    def count_votes(self, caller: str) -> int:
        """Close the election and store the id of the most voted proposal."""
        with self._operation("count_votes") as events:
            self.require_caller(caller, Role.ADMINISTRATOR)
            self._require_status(WorkflowStatus.VOTING_SESSION_ENDED, "count votes")
            proposals = self.repository.list_proposals()
            if not proposals:
                raise NoProposals()

            self._advance(caller, WorkflowStatus.VOTING_SESSION_ENDED, events)
            winner = tally(proposals)
            self.repository.set_winning_proposal_id(winner)
            return winner

    # Voter operations

    def register_proposal(self, caller: str, description: str) -> int:
        with self._operation("register_proposal") as events:
            self.require_caller(caller, Role.VOTER)
            self._require_status(WorkflowStatus.PROPOSALS_REGISTRATION_STARTED, "register proposals")

            proposal_id = self.repository.add_proposal(Proposal(description=description))
            events.append(ProposalRegistered(proposal_id=proposal_id))
            return proposal_id

    def cast_vote(self, caller: str, proposal_id: int) -> None:
        with self._operation("cast_vote") as events:
            self.require_caller(caller, Role.VOTER)
            self._require_status(WorkflowStatus.VOTING_SESSION_STARTED, "vote")
            record = self.repository.get_voter(caller)
            if record.has_voted:
                raise AlreadyVoted(f"{caller} has already voted")
            proposal = self._find_proposal(proposal_id)

            record.has_voted = True
            record.voted_proposal_id = proposal_id
            proposal.vote_count += 1
            self.repository.save_voter(caller, record)
            self.repository.save_proposal(proposal_id, proposal)
            events.append(Voted(identity=caller, proposal_id=proposal_id))

    # Reads

    def _find_proposal(self, proposal_id: int) -> Proposal:
        proposal = None
        if 0 <= proposal_id < self.repository.count_proposals():
            proposal = self.repository.get_proposal(proposal_id)
        if proposal is None:
            raise InvalidProposal(f"Proposal {proposal_id} not found")
        return proposal

    @property
    def status(self) -> WorkflowStatus:
        with self._lock, self.repository.transaction():
            return self.repository.get_status()

    def get_proposals(self) -> List[Proposal]:
        with self._lock, self.repository.transaction():
            return self.repository.list_proposals()

    def get_proposal(self, proposal_id: int) -> Proposal:
        with self._lock, self.repository.transaction():
            return self._find_proposal(proposal_id)

    def get_voter(self, caller: str, identity: str) -> Optional[VoterRecord]:
        """Voter record for ``identity``, or None when it was never registered."""
        with self._lock, self.repository.transaction():
            self.require_caller(caller, Role.VOTER)
            return self.repository.get_voter(identity)

    def get_winning_proposal_id(self) -> int:
        with self._lock, self.repository.transaction():
            if self.repository.get_status() != WorkflowStatus.VOTES_TALLIED:
                raise ResultsNotReady()
            return self.repository.get_winning_proposal_id()


def tally(proposals: List[Proposal]) -> int:
    """Index of the proposal with the most votes; the earliest one wins a tie."""
    winner = 0
    best = proposals[0].vote_count
    for index, proposal in enumerate(proposals):
        if proposal.vote_count > best:
            winner = index
            best = proposal.vote_count
    return winner

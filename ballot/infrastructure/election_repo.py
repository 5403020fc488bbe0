from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from ballot.domain.models import Proposal, VoterRecord, WorkflowStatus
from ballot.infrastructure import models


class ElectionRepository:
    """
    Storage used by the election controller.

    Every controller operation runs inside ``transaction()``; an exception
    raised inside the block must leave the stored data untouched.
    Getters return copies, writes go through the ``save_*``/``add_*`` methods.
    """

    @contextmanager
    def transaction(self):
        yield self

    def get_status(self) -> WorkflowStatus:
        raise NotImplementedError

    def set_status(self, status: WorkflowStatus):
        raise NotImplementedError

    def get_winning_proposal_id(self) -> Optional[int]:
        raise NotImplementedError

    def set_winning_proposal_id(self, proposal_id: int):
        raise NotImplementedError

    def get_voter(self, identity: str) -> Optional[VoterRecord]:
        raise NotImplementedError

    def save_voter(self, identity: str, record: VoterRecord):
        raise NotImplementedError

    def get_proposal(self, proposal_id: int) -> Optional[Proposal]:
        raise NotImplementedError

    def list_proposals(self) -> List[Proposal]:
        raise NotImplementedError

    def count_proposals(self) -> int:
        raise NotImplementedError

    def add_proposal(self, proposal: Proposal) -> int:
        raise NotImplementedError

    def save_proposal(self, proposal_id: int, proposal: Proposal):
        raise NotImplementedError


class InMemoryElectionRepository(ElectionRepository):
    def __init__(self):
        self.status = WorkflowStatus.REGISTERING_VOTERS
        self.winning_proposal_id: Optional[int] = None
        self.voters: Dict[str, VoterRecord] = {}
        self.proposals: List[Proposal] = []

    def get_status(self) -> WorkflowStatus:
        return self.status

    def set_status(self, status: WorkflowStatus):
        self.status = status

    def get_winning_proposal_id(self) -> Optional[int]:
        return self.winning_proposal_id

    def set_winning_proposal_id(self, proposal_id: int):
        self.winning_proposal_id = proposal_id

    def get_voter(self, identity: str) -> Optional[VoterRecord]:
        record = self.voters.get(identity)
        return replace(record) if record is not None else None

    def save_voter(self, identity: str, record: VoterRecord):
        self.voters[identity] = replace(record)

    def get_proposal(self, proposal_id: int) -> Optional[Proposal]:
        if 0 <= proposal_id < len(self.proposals):
            return replace(self.proposals[proposal_id])
        return None

    def list_proposals(self) -> List[Proposal]:
        return [replace(proposal) for proposal in self.proposals]

    def count_proposals(self) -> int:
        return len(self.proposals)

    def add_proposal(self, proposal: Proposal) -> int:
        self.proposals.append(replace(proposal))
        return len(self.proposals) - 1

    def save_proposal(self, proposal_id: int, proposal: Proposal):
        self.proposals[proposal_id] = replace(proposal)


class SqlElectionRepository(ElectionRepository):
    """Keeps one election in a SQL database, one session per transaction."""

    STATE_ID = 1

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self.db: Optional[Session] = None

    @contextmanager
    def transaction(self):
        if self.db is not None:
            # nested use joins the outer transaction
            yield self
            return
        self.db = self.session_factory()
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        finally:
            self.db.close()
            self.db = None

    def _session(self) -> Session:
        if self.db is None:
            raise RuntimeError("SqlElectionRepository used outside of a transaction")
        return self.db

    def _state(self) -> models.ElectionState:
        db = self._session()
        state = db.get(models.ElectionState, self.STATE_ID)
        if state is None:
            state = models.ElectionState(
                id=self.STATE_ID,
                status=WorkflowStatus.REGISTERING_VOTERS,
                winning_proposal_id=None,
            )
            db.add(state)
            db.flush()
        return state

    def get_status(self) -> WorkflowStatus:
        return WorkflowStatus(self._state().status)

    def set_status(self, status: WorkflowStatus):
        self._state().status = status

    def get_winning_proposal_id(self) -> Optional[int]:
        return self._state().winning_proposal_id

    def set_winning_proposal_id(self, proposal_id: int):
        self._state().winning_proposal_id = proposal_id

    def get_voter(self, identity: str) -> Optional[VoterRecord]:
        voter = self._session().get(models.Voter, identity)
        if voter is None:
            return None
        return VoterRecord(
            is_registered=voter.is_registered,
            has_voted=voter.has_voted,
            voted_proposal_id=voter.voted_proposal_id,
        )

    def save_voter(self, identity: str, record: VoterRecord):
        db = self._session()
        voter = db.get(models.Voter, identity)
        if voter is None:
            voter = models.Voter(address=identity)
            db.add(voter)
        voter.is_registered = record.is_registered
        voter.has_voted = record.has_voted
        voter.voted_proposal_id = record.voted_proposal_id
        db.flush()

    def get_proposal(self, proposal_id: int) -> Optional[Proposal]:
        proposal = self._session().get(models.Proposal, proposal_id)
        if proposal is None:
            return None
        return Proposal(description=proposal.description, vote_count=proposal.vote_count)

    def list_proposals(self) -> List[Proposal]:
        rows = self._session().query(models.Proposal).order_by(models.Proposal.id).all()
        return [Proposal(description=row.description, vote_count=row.vote_count) for row in rows]

    def count_proposals(self) -> int:
        return self._session().query(func.count(models.Proposal.id)).scalar()

    def add_proposal(self, proposal: Proposal) -> int:
        db = self._session()
        proposal_id = self.count_proposals()
        db.add(models.Proposal(id=proposal_id, description=proposal.description, vote_count=proposal.vote_count))
        db.flush()
        return proposal_id

    def save_proposal(self, proposal_id: int, proposal: Proposal):
        row = self._session().get(models.Proposal, proposal_id)
        row.description = proposal.description
        row.vote_count = proposal.vote_count
        self._session().flush()

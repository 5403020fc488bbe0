import pytest
from ballot.domain.election import Election
from ballot.domain.errors import AlreadyVoted, InvalidProposal
from ballot.domain.models import Proposal, VoterRecord, WorkflowStatus
from ballot.infrastructure import models
from ballot.infrastructure.database import create_session_factory
from ballot.infrastructure.election_repo import SqlElectionRepository

ADMIN = "0xadmin"


@pytest.fixture
def session_factory():
    # every call gets its own in-memory database
    return create_session_factory("sqlite:///:memory:")


@pytest.fixture
def repository(session_factory):
    return SqlElectionRepository(session_factory)


@pytest.fixture
def election(repository):
    election = Election(ADMIN, repository=repository)
    for voter in ("A", "B", "C"):
        election.register_voter(ADMIN, voter)
    election.start_proposal_registration(ADMIN)
    election.register_proposal("A", "X")
    election.register_proposal("B", "Y")
    election.end_proposal_registration(ADMIN)
    election.start_voting_session(ADMIN)
    return election


def test_fresh_database_starts_registering_voters(repository):
    with repository.transaction():
        assert repository.get_status() == WorkflowStatus.REGISTERING_VOTERS
        assert repository.get_winning_proposal_id() is None
        assert repository.list_proposals() == []
        assert repository.get_voter("A") is None


def test_use_outside_transaction_fails(repository):
    with pytest.raises(RuntimeError):
        repository.get_status()


def test_voter_and_proposal_rows(repository, session_factory):
    with repository.transaction():
        repository.save_voter("A", VoterRecord(is_registered=True))
        assert repository.add_proposal(Proposal("X")) == 0
        assert repository.add_proposal(Proposal("Y")) == 1

    with session_factory() as db:
        voter = db.get(models.Voter, "A")
        assert voter.is_registered is True
        assert voter.has_voted is False
        assert [p.description for p in db.query(models.Proposal).order_by(models.Proposal.id)] == ["X", "Y"]


def test_failed_transaction_rolls_back(repository):
    with pytest.raises(ValueError):
        with repository.transaction():
            repository.save_voter("A", VoterRecord(is_registered=True))
            repository.set_status(WorkflowStatus.PROPOSALS_REGISTRATION_STARTED)
            raise ValueError("boom")

    with repository.transaction():
        assert repository.get_voter("A") is None
        assert repository.get_status() == WorkflowStatus.REGISTERING_VOTERS


def test_election_on_sql_repository(election, repository):
    election.cast_vote("A", 1)
    election.cast_vote("B", 1)
    election.cast_vote("C", 0)
    election.end_voting_session(ADMIN)

    assert election.count_votes(ADMIN) == 1
    assert election.get_winning_proposal_id() == 1
    assert [(p.description, p.vote_count) for p in election.get_proposals()] == [("X", 1), ("Y", 2)]

    # a second controller on the same database sees the stored election
    reopened = Election(ADMIN, repository=repository)
    assert reopened.status == WorkflowStatus.VOTES_TALLIED
    assert reopened.get_winning_proposal_id() == 1
    assert reopened.get_voter("A", "A") == VoterRecord(is_registered=True, has_voted=True, voted_proposal_id=1)


def test_rejected_vote_leaves_database_untouched(election, session_factory):
    election.cast_vote("A", 0)
    with pytest.raises(AlreadyVoted):
        election.cast_vote("A", 1)
    with pytest.raises(InvalidProposal):
        election.cast_vote("B", 5)

    with session_factory() as db:
        counts = [p.vote_count for p in db.query(models.Proposal).order_by(models.Proposal.id)]
        assert counts == [1, 0]
        assert db.get(models.Voter, "B").has_voted is False


@pytest.mark.parametrize("proposal_id", [2, 2**63, 2**70, -1])
def test_out_of_range_proposal_on_sql_repository(election, proposal_id):
    with pytest.raises(InvalidProposal):
        election.cast_vote("A", proposal_id)
    with pytest.raises(InvalidProposal):
        election.get_proposal(proposal_id)

    assert election.get_voter("A", "A").has_voted is False

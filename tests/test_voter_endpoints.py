import pytest
from fastapi.testclient import TestClient
from ballot.config import Settings
from ballot.main import create_app
from ballot.security import create_access_token

ADMIN = "0xadmin"


@pytest.fixture
def settings():
    return Settings(ADMIN_ADDRESS=ADMIN, SECRET_KEY="test-secret", DATABASE_URL="")


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def auth(settings):
    def _auth(identity):
        return {"Authorization": f"Bearer {create_access_token(identity, settings)}"}
    return _auth


@pytest.fixture
def register_voters(client, auth):
    def _register(identities):
        for identity in identities:
            response = client.post("/voters/", json={"identity": identity}, headers=auth(ADMIN))
            assert response.status_code == 200
    return _register


@pytest.fixture
def transition(client, auth):
    def _transition(name):
        response = client.post(f"/workflow/{name}", headers=auth(ADMIN))
        assert response.status_code == 200, response.json()
        return response.json()
    return _transition


def test_register_voter(client, auth):
    response = client.post("/voters/", json={"identity": "A"}, headers=auth(ADMIN))
    assert response.status_code == 200
    assert response.json() == {"message": "Voter registered successfully", "identity": "A"}

    response = client.get("/voters/A", headers=auth("A"))
    assert response.status_code == 200
    assert response.json() == {
        "identity": "A",
        "is_registered": True,
        "has_voted": False,
        "voted_proposal_id": None,
    }


def test_register_voter_twice(client, auth, register_voters):
    register_voters(["A"])
    response = client.post("/voters/", json={"identity": "A"}, headers=auth(ADMIN))
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "already_registered"


def test_only_admin_registers_voters(client, auth):
    response = client.post("/voters/", json={"identity": "B"}, headers=auth("A"))
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "unauthorized"


def test_get_unknown_voter(client, auth, register_voters):
    register_voters(["A"])
    response = client.get("/voters/nobody", headers=auth("A"))
    assert response.status_code == 404
    assert response.json()["detail"] == "Voter not found"


def test_get_voter_requires_registered_caller(client, auth, register_voters):
    register_voters(["A"])
    response = client.get("/voters/A", headers=auth("stranger"))
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "not_registered"


def test_submit_proposal_during_voter_registration(client, auth, register_voters):
    register_voters(["A"])
    response = client.post("/proposals/", json={"description": "X"}, headers=auth("A"))
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "wrong_phase"


def test_submit_proposal_by_stranger(client, auth, transition):
    transition("start-proposal-registration")
    response = client.post("/proposals/", json={"description": "X"}, headers=auth("stranger"))
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "not_registered"
    assert client.get("/proposals/").json() == []


def test_proposals_are_listed_in_order(client, auth, register_voters, transition):
    register_voters(["A", "B"])
    transition("start-proposal-registration")

    assert client.post("/proposals/", json={"description": "X"}, headers=auth("A")).json()["proposal_id"] == 0
    assert client.post("/proposals/", json={"description": "Y"}, headers=auth("B")).json()["proposal_id"] == 1
    assert client.post("/proposals/", json={}, headers=auth("B")).json()["proposal_id"] == 2

    response = client.get("/proposals/")
    assert response.status_code == 200
    assert response.json() == [
        {"proposal_id": 0, "description": "X", "vote_count": 0},
        {"proposal_id": 1, "description": "Y", "vote_count": 0},
        {"proposal_id": 2, "description": "", "vote_count": 0},
    ]
    assert client.get("/proposals/1").json()["description"] == "Y"


def test_get_unknown_proposal(client):
    response = client.get("/proposals/3")
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "invalid_proposal"


def test_vote_errors(client, auth, register_voters, transition):
    register_voters(["A"])
    transition("start-proposal-registration")
    client.post("/proposals/", json={"description": "X"}, headers=auth("A"))

    response = client.post("/proposals/0/vote", headers=auth("A"))
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "wrong_phase"

    transition("end-proposal-registration")
    transition("start-voting-session")

    response = client.post("/proposals/5/vote", headers=auth("A"))
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "invalid_proposal"

    response = client.post("/proposals/0/vote", headers=auth("stranger"))
    assert response.status_code == 403

    assert client.post("/proposals/0/vote", headers=auth("A")).status_code == 200
    response = client.post("/proposals/0/vote", headers=auth("A"))
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "already_voted"
    assert client.get("/proposals/0").json()["vote_count"] == 1


def test_full_election(client, auth, register_voters, transition):
    register_voters(["A", "B", "C"])
    transition("start-proposal-registration")
    client.post("/proposals/", json={"description": "X"}, headers=auth("A"))
    client.post("/proposals/", json={"description": "Y"}, headers=auth("B"))
    transition("end-proposal-registration")
    transition("start-voting-session")

    for voter, proposal_id in (("A", 1), ("B", 1), ("C", 0)):
        response = client.post(f"/proposals/{proposal_id}/vote", headers=auth(voter))
        assert response.status_code == 200
        assert response.json()["proposal_id"] == proposal_id

    transition("end-voting-session")
    assert client.get("/workflow/winner/id").status_code == 409

    assert transition("count-votes") == {"status": "VotesTallied", "winning_proposal_id": 1}
    assert client.get("/workflow/winner/id").json() == {"winning_proposal_id": 1}
    assert client.get("/workflow/winner").json() == {"proposal_id": 1, "description": "Y", "vote_count": 2}

    voter = client.get("/voters/C", headers=auth("A")).json()
    assert voter["has_voted"] is True
    assert voter["voted_proposal_id"] == 0

    events = client.get("/events/").json()
    assert [event["type"] for event in events] == (
        ["VoterRegistered"] * 3
        + ["WorkflowStatusChange", "ProposalRegistered", "ProposalRegistered"]
        + ["WorkflowStatusChange"] * 2
        + ["Voted"] * 3
        + ["WorkflowStatusChange"] * 2
    )
    assert events[-3] == {"type": "Voted", "identity": "C", "proposal_id": 0}

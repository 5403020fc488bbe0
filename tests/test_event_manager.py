import logging
import pytest
from ballot.domain.election import Election
from ballot.domain.errors import AlreadyRegistered
from ballot.domain.events import VoterRegistered
from ballot.interfaces.managers.event_manager import EventDispatcher, EventLog


def test_events_reach_every_subscriber_in_order():
    dispatcher = EventDispatcher()
    first, second = [], []
    dispatcher.subscribe(first.append)
    dispatcher.subscribe(second.append)

    dispatcher.publish(VoterRegistered(identity="A"))
    dispatcher.publish(VoterRegistered(identity="B"))

    assert [e.identity for e in first] == ["A", "B"]
    assert first == second


def test_failing_subscriber_is_logged_and_skipped(caplog):
    dispatcher = EventDispatcher()
    log = EventLog()

    def broken(event):
        raise RuntimeError("subscriber down")

    dispatcher.subscribe(broken)
    dispatcher.subscribe(log)

    with caplog.at_level(logging.ERROR):
        dispatcher.publish(VoterRegistered(identity="A"))

    assert log.all() == [VoterRegistered(identity="A")]
    assert "failed on VoterRegistered" in caplog.text


def test_unsubscribe():
    dispatcher = EventDispatcher()
    log = EventLog()
    dispatcher.subscribe(log)
    dispatcher.unsubscribe(log)
    dispatcher.publish(VoterRegistered(identity="A"))
    assert log.all() == []


def test_failed_operation_publishes_nothing():
    dispatcher = EventDispatcher()
    log = EventLog()
    dispatcher.subscribe(log)
    election = Election("admin", sink=dispatcher)

    election.register_voter("admin", "A")
    with pytest.raises(AlreadyRegistered):
        election.register_voter("admin", "A")

    assert log.all() == [VoterRegistered(identity="A")]

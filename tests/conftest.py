"""Shared test fixtures for all sigdispatch tests."""

import pytest

from sigdispatch import CallbackDispatcher, EventKind, Payload, ignore, raise_error


class Note(Payload):
    text: str


class Alarm(Payload):
    level: int


class LoudAlarm(Alarm):
    pass


ON_NOTE = EventKind(name="on_note", params=(Note,))
ON_ALARM = EventKind(name="on_alarm", params=(Alarm,), default=ignore)
ON_FAILURE = EventKind(name="on_failure", params=(Exception,), default=raise_error)
ON_IDLE = EventKind(name="on_idle", default=ignore)

KINDS = (ON_NOTE, ON_ALARM, ON_FAILURE, ON_IDLE)


@pytest.fixture
def dispatcher() -> CallbackDispatcher:
    """Dispatcher over the shared test kinds."""
    return CallbackDispatcher(KINDS)


@pytest.fixture
def on_note():
    """A handler for ON_NOTE that records what it receives."""
    received: list[Note] = []

    def record_note(note: Note) -> str:
        received.append(note)
        return note.text

    record_note.received = received  # type: ignore[attr-defined]
    return record_note

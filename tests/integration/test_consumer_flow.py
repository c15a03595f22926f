"""End-to-end: a polling loop driving a consumer binding.

The loop here stands in for a real client: it yields occurrences one at a
time and hands each to the binding.
"""

from collections.abc import Iterator

import pytest

from sigdispatch import HandlerGroup, Occurrence, handler
from sigdispatch.consumer import (
    ON_EOF,
    ON_ERROR,
    ON_MESSAGE,
    ON_TIMEOUT,
    Message,
    PartitionEnd,
    consumer_dispatcher,
)


def fake_poll() -> Iterator[Occurrence]:
    yield ON_MESSAGE.occur(Message(topic="orders", partition=0, offset=0, value=b"a"))
    yield ON_TIMEOUT.occur()
    yield ON_MESSAGE.occur(Message(topic="orders", partition=0, offset=1, value=b"b"))
    yield ON_EOF.occur(PartitionEnd(topic="orders", partition=0, offset=2))


class Collector(HandlerGroup):
    def __init__(self) -> None:
        self.values: list[bytes] = []
        self.ends: list[int] = []

    @handler
    def message(self, msg: Message) -> None:
        self.values.append(msg.value)

    @handler
    def end(self, end: PartitionEnd) -> None:
        self.ends.append(end.offset)


class TestConsumerFlow:
    def test_poll_loop_with_group(self):
        """Messages and EOFs reach the group; timeouts are ignored."""
        collector = Collector()
        binding = collector.bind(consumer_dispatcher())

        for occurrence in fake_poll():
            binding.dispatch(occurrence)

        assert collector.values == [b"a", b"b"]
        assert collector.ends == [2]

    def test_default_error_handler_stops_loop(self):
        """Errors propagate out of the loop when no handler is supplied."""
        seen: list[int] = []

        def on_message(msg: Message) -> None:
            seen.append(msg.offset)

        binding = consumer_dispatcher().bind([on_message])

        def poll() -> Iterator[Occurrence]:
            yield ON_MESSAGE.occur(Message(topic="t", partition=0, offset=7))
            yield ON_ERROR.occur(ConnectionError("broker unreachable"))
            yield ON_MESSAGE.occur(Message(topic="t", partition=0, offset=8))

        with pytest.raises(ConnectionError, match="broker unreachable"):
            for occurrence in poll():
                binding.dispatch(occurrence)
        assert seen == [7]

    def test_supplied_error_handler_keeps_loop_running(self):
        """A supplied error handler replaces the re-raising default."""
        errors: list[str] = []
        offsets: list[int] = []

        def on_message(msg: Message) -> None:
            offsets.append(msg.offset)

        def on_error(exc: Exception) -> None:
            errors.append(str(exc))

        binding = consumer_dispatcher().bind([on_message, on_error])
        occurrences = [
            ON_ERROR.occur(TimeoutError("slow")),
            ON_MESSAGE.occur(Message(topic="t", partition=0, offset=1)),
        ]
        for occurrence in occurrences:
            binding.dispatch(occurrence)

        assert errors == ["slow"]
        assert offsets == [1]

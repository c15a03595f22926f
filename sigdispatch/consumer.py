"""Event kinds for a polling message consumer.

A consumer loop typically reacts to four outcomes of a poll: a message
arrived, an error was reported, a partition reached its end, or the poll
timed out.  Only messages need a caller-supplied handler; errors are
re-raised and the other two are ignored unless a handler is supplied.

Typical usage::

    from sigdispatch.consumer import ON_MESSAGE, Message, consumer_dispatcher

    def print_message(msg: Message) -> None:
        print(msg.topic, msg.value)

    dispatcher = consumer_dispatcher()
    binding = dispatcher.bind([print_message])
    while running:
        binding.dispatch(poll())  # poll() yields Occurrences
"""

from pydantic import Field

from sigdispatch.config import DispatchConfig
from sigdispatch.defaults import ignore, raise_error
from sigdispatch.dispatcher import CallbackDispatcher
from sigdispatch.kinds import EventKind
from sigdispatch.payloads import Payload


class Message(Payload):
    """A record delivered by a poll.

    Attributes:
        topic: Topic the record was read from.
        partition: Partition index within the topic.
        offset: Offset of the record within the partition.
        key: Optional record key.
        value: Record payload.
        headers: Ordered ``(name, value)`` header pairs.
    """

    topic: str = Field(min_length=1)
    partition: int = Field(ge=0)
    offset: int = Field(ge=0)
    key: bytes | None = None
    value: bytes = b""
    headers: tuple[tuple[str, bytes], ...] = ()


class PartitionEnd(Payload):
    """Marker for a partition whose end was reached.

    Attributes:
        topic: Topic of the partition.
        partition: Partition index.
        offset: Offset one past the last available record.
    """

    topic: str = Field(min_length=1)
    partition: int = Field(ge=0)
    offset: int = Field(ge=0)


ON_MESSAGE = EventKind(name="on_message", params=(Message,))
ON_ERROR = EventKind(name="on_error", params=(Exception,), default=raise_error)
ON_EOF = EventKind(name="on_eof", params=(PartitionEnd,), default=ignore)
ON_TIMEOUT = EventKind(name="on_timeout", default=ignore)

CONSUMER_KINDS = (ON_MESSAGE, ON_ERROR, ON_EOF, ON_TIMEOUT)


def consumer_dispatcher(config: DispatchConfig | None = None) -> CallbackDispatcher:
    """Build a dispatcher over :data:`CONSUMER_KINDS`."""
    return CallbackDispatcher(CONSUMER_KINDS, config=config)

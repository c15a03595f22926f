"""Class-based handler groups.

Provides ``handles`` and ``handler`` markers plus the ``HandlerGroup``
mixin, which collects marked methods as an ordered callback sequence.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from loguru import logger

from sigdispatch.exceptions import EventKindError
from sigdispatch.kinds import EventKind
from sigdispatch.signature import TAGGED_KINDS_ATTR

if TYPE_CHECKING:
    from sigdispatch.binding import Binding
    from sigdispatch.dispatcher import CallbackDispatcher

log = logger.bind(source=__name__)

# Attribute stamped by ``@handler`` and ``@handles``.
MARKER_ATTR = "_sig_handler"


def handler[F: Callable[..., Any]](func: F) -> F:
    """Mark a method for collection by :class:`HandlerGroup`.

    The method is matched against event kinds by its parameter
    annotations.  Use :func:`handles` to name its kinds explicitly.
    """
    setattr(func, MARKER_ATTR, True)
    return func


def handles[F: Callable[..., Any]](
    *kinds: EventKind | str,
) -> Callable[[F], F]:
    """Tag a callable with the event kinds it handles.

    A tagged callable matches exactly the named kinds and skips
    annotation matching.  Works on plain functions as well as on
    ``HandlerGroup`` methods.

    Args:
        kinds: Event kinds, or their names.

    Returns:
        Decorator that returns the original callable unchanged.

    Post:
        ``_sig_kinds`` and ``_sig_handler`` stamped on the callable.

    Raises:
        EventKindError: If no kinds are given.
    """
    if not kinds:
        raise EventKindError("handles() needs at least one event kind")
    names = frozenset(k.name if isinstance(k, EventKind) else k for k in kinds)

    def decorator(func: F) -> F:
        setattr(func, TAGGED_KINDS_ATTR, names)
        setattr(func, MARKER_ATTR, True)
        return func

    return decorator


class HandlerGroup:
    """Mixin that turns marked methods into an ordered callback sequence.

    Methods decorated with ``@handler`` or ``@handles(...)`` are collected
    in class definition order, base classes first.  A subclass that
    overrides a marked method keeps the base method's position; the
    override must be marked again to stay collected.

    ``@staticmethod`` and ``@classmethod`` are supported — place them
    **outside** the marker:

    Example::

        class Printer(HandlerGroup):
            @handler
            def message(self, msg: Message) -> None:
                print(msg.value)

            @staticmethod
            @handles(ON_TIMEOUT)
            def idle() -> None: ...

        binding = Printer().bind(consumer_dispatcher())
    """

    def callbacks(self) -> list[Callable[..., Any]]:
        """Return the marked methods bound to this instance, in order."""
        order: dict[str, Any] = {}
        for klass in reversed(type(self).__mro__):
            for name, attr in vars(klass).items():
                # Unwrap staticmethod/classmethod to access inner function
                inner = attr
                if isinstance(attr, (staticmethod, classmethod)):
                    inner = attr.__func__
                if callable(inner) and getattr(inner, MARKER_ATTR, False):
                    order[name] = attr
                elif name in order:
                    # Unmarked override hides the base handler
                    del order[name]

        bound = [getattr(self, name) for name in order]
        log.debug(
            "Collected {} handler(s) on {}",
            len(bound),
            type(self).__qualname__,
        )
        return bound

    def bind(self, dispatcher: "CallbackDispatcher") -> "Binding":
        """Bind this group's handlers with ``dispatcher``."""
        return dispatcher.bind(self.callbacks())

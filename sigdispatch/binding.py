"""Resolved kind-to-handler table.

A :class:`Binding` is produced by :meth:`CallbackDispatcher.bind` and is
immutable afterwards.  Dispatching through it is a plain dictionary
lookup followed by the call.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from loguru import logger

from sigdispatch._types import Callback, OccurrenceLike
from sigdispatch.exceptions import UnknownEventKindError
from sigdispatch.kinds import EventKind, Occurrence
from sigdispatch.utils import callable_name

log = logger.bind(source=__name__)


class Binding(Mapping[EventKind, Callback]):
    """Immutable mapping from each event kind to exactly one handler.

    Besides the table itself, a binding remembers which kinds fell back
    to their default handler and which supplied callbacks lost a kind to
    an earlier match.  Two bindings compare equal when their tables do.
    """

    def __init__(
        self,
        table: Mapping[EventKind, Callback],
        *,
        defaulted: frozenset[EventKind] = frozenset(),
        shadowed: Mapping[EventKind, tuple[Callback, ...]] | None = None,
    ) -> None:
        self._table = MappingProxyType(dict(table))
        self._by_name = MappingProxyType({kind.name: kind for kind in self._table})
        # name -> (kind, handler); dispatch compares kinds only on a name hit
        self._routes = MappingProxyType(
            {kind.name: (kind, cb) for kind, cb in self._table.items()}
        )
        self._defaulted = defaulted
        self._shadowed = MappingProxyType(dict(shadowed or {}))

    # -- Mapping protocol -----------------------------------------------------

    def __getitem__(self, kind: EventKind) -> Callback:
        return self._table[kind]

    def __iter__(self) -> Iterator[EventKind]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        entries = ", ".join(
            f"{kind.name}: {callable_name(cb)}" for kind, cb in self._table.items()
        )
        return f"Binding({{{entries}}})"

    # -- Introspection --------------------------------------------------------

    def kind(self, name: str) -> EventKind:
        """Look up a bound kind by name.

        Raises:
            UnknownEventKindError: If no bound kind has that name.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownEventKindError(f"no event kind named '{name}'") from None

    def is_default(self, kind: EventKind) -> bool:
        """True when ``kind`` is served by its default handler."""
        return kind in self._defaulted

    @property
    def defaulted(self) -> frozenset[EventKind]:
        return self._defaulted

    def shadowed(self, kind: EventKind) -> tuple[Callback, ...]:
        """Return supplied callbacks that matched ``kind`` but lost to an earlier one."""
        return self._shadowed.get(kind, ())

    # -- Dispatch -------------------------------------------------------------

    def dispatch(self, occurrence: OccurrenceLike) -> Any:
        """Invoke the handler bound to the occurrence's kind.

        No signature checking happens here; all matching was settled when
        the binding was built.  Exceptions raised by the handler propagate
        unmodified.

        Args:
            occurrence: An :class:`Occurrence`, or a ``(kind, args)`` pair.

        Returns:
            Whatever the handler returns.

        Raises:
            UnknownEventKindError: If the kind is not part of this binding.
        """
        kind, args = _unpack(occurrence)
        route = self._routes.get(kind.name)
        if route is None or (route[0] is not kind and route[0] != kind):
            raise UnknownEventKindError(f"event kind '{kind.name}' is not bound")
        callback = route[1]
        log.trace("Dispatch {} -> {}", kind.name, callable_name(callback))
        return callback(*args)

    __call__ = dispatch


def _unpack(occurrence: OccurrenceLike) -> tuple[EventKind, tuple[Any, ...]]:
    if isinstance(occurrence, Occurrence):
        return occurrence.kind, occurrence.args
    kind, args = occurrence
    return kind, tuple(args)


"""Signature-based callback dispatcher.

Resolves, once per ``bind()`` call, which caller-supplied callback handles
each event kind.  Matching is recorded in a bipartite NetworkX graph whose
edges run from callback positions to the kinds they fit; selection then
reads the lowest-positioned predecessor of every kind.
"""

from collections.abc import Iterable
from typing import Any

import networkx as nx
from loguru import logger

from sigdispatch._types import Callback, OccurrenceLike
from sigdispatch.binding import Binding
from sigdispatch.config import DispatchConfig
from sigdispatch.exceptions import (
    EventKindError,
    MissingRequiredHandlerError,
    SignatureError,
    UnmatchedCallbackError,
)
from sigdispatch.kinds import EventKind
from sigdispatch.signature import callback_signature, describe, matches, tagged_kinds
from sigdispatch.utils import callable_name

log = logger.bind(source=__name__)


class CallbackDispatcher:
    """Bind callbacks to a closed set of event kinds by parameter shape.

    The kind set is fixed at construction.  ``bind()`` validates the
    supplied callbacks and returns an immutable :class:`Binding`;
    ``dispatch()`` invokes the bound handler for one occurrence.

    Example::

        on_quote = EventKind(name="on_quote", params=(Quote,))
        on_error = EventKind(name="on_error", params=(Exception,), default=raise_error)
        dispatcher = CallbackDispatcher([on_quote, on_error])

        def record(quote: Quote) -> None: ...

        binding = dispatcher.bind([record])
        dispatcher.dispatch(binding, on_quote.occur(Quote(symbol="ACME", price=1.0)))
    """

    def __init__(
        self,
        kinds: Iterable[EventKind],
        *,
        config: DispatchConfig | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            kinds: The recognized event kinds, in resolution order.
            config: Matching settings; defaults to ``DispatchConfig()``.

        Raises:
            EventKindError: If ``kinds`` is empty, repeats a name, or a
                default handler does not fit its own kind.
        """
        self._kinds = tuple(kinds)
        self._config = config or DispatchConfig()
        self._check_kinds()

    @property
    def kinds(self) -> tuple[EventKind, ...]:
        return self._kinds

    @property
    def config(self) -> DispatchConfig:
        return self._config

    def kind(self, name: str) -> EventKind:
        """Return the recognized kind called ``name``.

        Raises:
            EventKindError: If no recognized kind has that name.
        """
        for kind in self._kinds:
            if kind.name == name:
                return kind
        raise EventKindError(f"no event kind named '{name}'")

    def bind(self, callbacks: Iterable[Callback]) -> Binding:
        """Resolve the handler for every recognized event kind.

        Each kind is bound to the first supplied callback whose signature
        fits it, else to its default handler.  Callbacks are never
        retained beyond the returned binding.

        Args:
            callbacks: Ordered callbacks; earlier entries win ties.

        Returns:
            Immutable binding covering every recognized kind.

        Post:
            No state is kept on the dispatcher; binding the same sequence
            twice yields equal bindings.

        Raises:
            SignatureError: If a callback's signature cannot be discovered.
            UnmatchedCallbackError: If a callback fits no recognized kind.
            MissingRequiredHandlerError: If a required kind has no match.
        """
        supplied = list(callbacks)
        graph = self._match_graph(supplied)

        table: dict[EventKind, Callback] = {}
        defaulted: set[EventKind] = set()
        shadowed: dict[EventKind, tuple[Callback, ...]] = {}

        for kind in self._kinds:
            positions = sorted(graph.predecessors(kind))
            if positions:
                first, *rest = positions
                table[kind] = supplied[first]
                if rest:
                    shadowed[kind] = tuple(supplied[pos] for pos in rest)
                    self._log_shadowed(kind, supplied[first], shadowed[kind])
            elif kind.default is not None:
                table[kind] = kind.default
                defaulted.add(kind)
            else:
                raise MissingRequiredHandlerError(
                    f"required event kind {kind} has no matching callback"
                )

        log.debug(
            "Bound {} kind(s) from {} callback(s): {}",
            len(table),
            len(supplied),
            {kind.name: callable_name(cb) for kind, cb in table.items()},
        )
        if defaulted:
            log.debug("Defaulted kinds: {}", sorted(k.name for k in defaulted))
        return Binding(table, defaulted=frozenset(defaulted), shadowed=shadowed)

    def dispatch(self, binding: Binding, occurrence: OccurrenceLike) -> Any:
        """Invoke the handler bound to an occurrence's kind.

        Assumes ``binding`` came from :meth:`bind`; no signature checking
        is performed.  Exceptions raised by the handler propagate
        unmodified.

        Args:
            binding: Binding returned by :meth:`bind`.
            occurrence: An :class:`Occurrence` or ``(kind, args)`` pair.

        Returns:
            Whatever the handler returns.

        Raises:
            UnknownEventKindError: If the kind is not part of ``binding``.
        """
        return binding.dispatch(occurrence)

    # -- internals ------------------------------------------------------------

    def _match_graph(self, supplied: list[Callback]) -> nx.DiGraph:
        """Build the callback-position -> kind match graph.

        Raises:
            SignatureError: If a callback's signature cannot be discovered.
            UnmatchedCallbackError: If a callback position has no edge.
        """
        strict = self._config.strict_annotations
        graph = nx.DiGraph()
        graph.add_nodes_from(self._kinds)

        for position, callback in enumerate(supplied):
            signature = None
            if tagged_kinds(callback) is None:
                signature = callback_signature(callback)
            graph.add_node(position)
            graph.add_edges_from(
                (position, kind)
                for kind in self._kinds
                if matches(callback, kind, strict=strict, signature=signature)
            )
            if graph.out_degree(position) == 0:
                raise UnmatchedCallbackError(
                    f"callback #{position} {describe(callback)} matches none of "
                    f"the recognized event kinds: "
                    f"{', '.join(str(k) for k in self._kinds)}"
                )
        return graph

    def _check_kinds(self) -> None:
        if not self._kinds:
            raise EventKindError("a dispatcher needs at least one event kind")

        seen: set[str] = set()
        for kind in self._kinds:
            if not isinstance(kind, EventKind):
                raise EventKindError(f"{kind!r} is not an EventKind")
            if kind.name in seen:
                raise EventKindError(f"duplicate event kind name '{kind.name}'")
            seen.add(kind.name)

            if kind.default is None:
                continue
            try:
                fits = matches(kind.default, kind, strict=self._config.strict_annotations)
            except SignatureError as exc:
                raise EventKindError(
                    f"default handler of {kind.name} has no usable signature"
                ) from exc
            if not fits:
                raise EventKindError(
                    f"default handler {describe(kind.default)} does not fit "
                    f"event kind {kind}"
                )

    def _log_shadowed(
        self,
        kind: EventKind,
        winner: Callback,
        losers: tuple[Callback, ...],
    ) -> None:
        level = "WARNING" if self._config.warn_shadowed else "DEBUG"
        log.log(
            level,
            "{} bound to {}; shadowed: {}",
            kind.name,
            callable_name(winner),
            [callable_name(cb) for cb in losers],
        )

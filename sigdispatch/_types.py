"""Shared type definitions for sigdispatch.

All type aliases use PEP 695 ``type`` statement syntax.
"""

from collections.abc import Callable, Iterable
from typing import Any

from sigdispatch.kinds import EventKind, Occurrence

type Callback = Callable[..., Any]
"""A caller-supplied or default handler, opaque except for its signature."""

type OccurrenceLike = Occurrence | tuple[EventKind, Iterable[Any]]
"""Anything ``dispatch`` accepts: an ``Occurrence`` or a ``(kind, args)`` pair."""

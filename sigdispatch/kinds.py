"""Event kind and occurrence models.

An :class:`EventKind` names a category of occurrence and fixes the
parameter types its handler receives.  An :class:`Occurrence` is one
instance of a kind together with the arguments to pass along.
"""

from collections.abc import Callable
from typing import Any, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sigdispatch.exceptions import EventKindError
from sigdispatch.utils import callable_name, type_name


class EventKind(BaseModel):
    """A named category of occurrence with a fixed parameter signature.

    Kinds compare and hash by value, so two dispatchers built from equal
    kinds accept each other's occurrences.

    Example:
        >>> on_quote = EventKind(name="on_quote", params=(Quote,))
        >>> on_idle = EventKind(name="on_idle", default=ignore)

    Attributes:
        name: Unique name within a dispatcher.
        params: Ordered parameter types a handler receives.  ``None``
            stands for ``NoneType``.
        default: Fallback handler bound when no supplied callback
            matches.  Kinds without one are required.

    Raises:
        EventKindError: If fields fail pydantic validation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    params: tuple[Any, ...] = ()
    default: Callable[..., Any] | None = None

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into EventKindError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise EventKindError(str(exc)) from exc

    @field_validator("params", mode="after")
    @classmethod
    def _check_params(cls, params: tuple[Any, ...]) -> tuple[Any, ...]:
        normalized = []
        for param in params:
            if param is None:
                param = type(None)
            is_typing_form = param is Any or get_origin(param) is not None
            if not (isinstance(param, type) or is_typing_form):
                raise ValueError(f"parameter {param!r} is not a type")
            normalized.append(param)
        return tuple(normalized)

    @property
    def required(self) -> bool:
        """True when the kind has no default handler."""
        return self.default is None

    @property
    def arity(self) -> int:
        return len(self.params)

    def occur(self, *args: Any) -> "Occurrence":
        """Build an occurrence of this kind carrying ``args``."""
        return Occurrence(kind=self, args=args)

    def __str__(self) -> str:
        params = ", ".join(type_name(p) for p in self.params)
        text = f"{self.name}({params})"
        if self.default is not None:
            text += f" [default={callable_name(self.default)}]"
        return text


class Occurrence(BaseModel):
    """One occurrence of an event kind.

    Attributes:
        kind: The kind that occurred.
        args: Positional arguments for the bound handler.

    Raises:
        EventKindError: If fields fail pydantic validation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: EventKind
    args: tuple[Any, ...] = ()

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into EventKindError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise EventKindError(str(exc)) from exc

"""Payload models for sigdispatch.

Occurrence arguments are often small records (a message, an end-of-partition
marker).  ``Payload`` gives them pydantic validation and immutability, and
reports validation failures as :class:`PayloadValidationError`.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from sigdispatch.exceptions import PayloadValidationError


class Payload(BaseModel):
    """Base class for occurrence payloads.

    Users inherit from this class to define the argument types their event
    kinds declare.  Instances are immutable (frozen).

    Example:
        >>> class Quote(Payload):
        ...     symbol: str
        ...     price: float
        >>> quote = Quote(symbol="ACME", price=12.5)

    Raises:
        PayloadValidationError: If fields fail pydantic validation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into PayloadValidationError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise PayloadValidationError(str(exc)) from exc

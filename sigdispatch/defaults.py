"""Built-in default handlers.

Defaults are module-level functions so that they live for the whole
process and compare equal across bindings.
"""

from typing import Any, NoReturn


def ignore(*args: Any) -> None:
    """Accept any arguments and do nothing."""


def raise_error(error: BaseException) -> NoReturn:
    """Re-raise the error carried by the occurrence."""
    raise error

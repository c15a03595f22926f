import importlib
from typing import Any

from sigdispatch.exceptions import TargetImportError


def callable_name(cb: Any) -> str:
    """Return a human-readable name for a callable, safe for logging.

    Falls back through ``__qualname__``, ``__name__``, and ``repr()``
    so that ``functools.partial``, callable instances, and other exotic
    callables never raise ``AttributeError``.

    Args:
        cb: Any callable object.

    Returns:
        Display name string.
    """
    return (
        getattr(cb, "__qualname__", None) or getattr(cb, "__name__", None) or repr(cb)
    )


def type_name(tp: Any) -> str:
    """Return a short display name for a parameter type or annotation.

    Classes render as their ``__qualname__``; typing constructs such as
    ``int | None`` or ``list[str]`` fall back to ``repr()``.
    """
    if isinstance(tp, type) and not getattr(tp, "__args__", None):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


def import_object(target: str) -> Any:
    """Import an object from a ``module:attr`` reference.

    ``attr`` may be dotted to reach nested attributes
    (``pkg.mod:Class.attr``).

    Args:
        target: Reference string, e.g. ``"sigdispatch.consumer:CONSUMER_KINDS"``.

    Returns:
        The referenced object.

    Raises:
        TargetImportError: If the reference is malformed, the module
            fails to import, or the attribute does not exist.
    """
    module_path, sep, attr_path = target.partition(":")
    if not sep or not module_path or not attr_path:
        raise TargetImportError(f"Expected 'module:attr', got '{target}'")

    try:
        obj: Any = importlib.import_module(module_path)
    except Exception as exc:
        raise TargetImportError(f"Failed to import module '{module_path}'") from exc

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise TargetImportError(
                f"Module '{module_path}' has no attribute '{attr_path}'"
            ) from exc
    return obj

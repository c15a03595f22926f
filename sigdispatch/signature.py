"""Parameter-shape introspection and matching.

Matching answers one question: can ``callback`` be invoked positionally
with arguments of the types a kind declares?  Parameter annotations are
compared contravariantly, so a handler annotated with a base class
accepts occurrences carrying a subclass.
"""

import inspect
import types
from collections.abc import Callable
from typing import Annotated, Any, Union, get_args, get_origin

from sigdispatch.exceptions import SignatureError
from sigdispatch.kinds import EventKind
from sigdispatch.utils import callable_name

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)

# Attribute stamped by ``@handles`` with the names of the tagged kinds.
TAGGED_KINDS_ATTR = "_sig_kinds"


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType


def callback_signature(callback: Callable[..., Any]) -> inspect.Signature:
    """Discover a callback's signature with string annotations resolved.

    Args:
        callback: Any callable.

    Returns:
        The resolved signature.

    Raises:
        SignatureError: If the signature cannot be discovered or an
            annotation cannot be evaluated.
    """
    if not callable(callback):
        raise SignatureError(f"{callback!r} is not callable")
    try:
        return inspect.signature(callback, eval_str=True)
    except (TypeError, ValueError) as exc:
        raise SignatureError(
            f"cannot discover signature of {callable_name(callback)}"
        ) from exc
    except NameError as exc:
        raise SignatureError(
            f"cannot resolve annotations of {callable_name(callback)}: {exc}"
        ) from exc


def tagged_kinds(callback: Callable[..., Any]) -> frozenset[str] | None:
    """Return the kind names a callback was tagged with, or None."""
    return getattr(callback, TAGGED_KINDS_ATTR, None)


def annotation_accepts(annotation: Any, expected: Any, *, strict: bool = False) -> bool:
    """Check whether a parameter annotated ``annotation`` accepts ``expected``.

    Args:
        annotation: The callback's parameter annotation, possibly
            ``inspect.Parameter.empty``.
        expected: The parameter type declared by the kind.
        strict: When True, unannotated parameters accept nothing.

    Returns:
        True if an argument of type ``expected`` may be passed.
    """
    if annotation is inspect.Parameter.empty:
        return not strict
    if annotation is Any:
        return True
    if annotation is None:
        annotation = type(None)
    if expected is None:
        expected = type(None)

    origin = get_origin(annotation)
    if origin is Annotated:
        return annotation_accepts(get_args(annotation)[0], expected, strict=strict)
    if annotation == expected:
        return True
    if _is_union(expected):
        return all(
            annotation_accepts(annotation, member, strict=strict)
            for member in get_args(expected)
        )
    if _is_union(annotation):
        return any(
            annotation_accepts(member, expected, strict=strict)
            for member in get_args(annotation)
        )
    if origin is not None:
        # Parameterized generics only accept an identical declaration.
        return False

    expected_cls = get_origin(expected) or expected
    if isinstance(annotation, type) and isinstance(expected_cls, type):
        try:
            return issubclass(expected_cls, annotation)
        except TypeError:
            # Protocols without runtime class checks cannot be compared.
            return False
    return False


def signature_accepts(
    signature: inspect.Signature,
    params: tuple[Any, ...],
    *,
    strict: bool = False,
) -> bool:
    """Check whether a signature can be called positionally with ``params``.

    Args:
        signature: Resolved callback signature.
        params: Ordered parameter types of an event kind.
        strict: When True, unannotated parameters accept nothing.

    Returns:
        True if the shapes and annotations line up.
    """
    positional: list[inspect.Parameter] = []
    var_positional: inspect.Parameter | None = None
    for param in signature.parameters.values():
        if param.kind in _POSITIONAL:
            positional.append(param)
        elif param.kind is inspect.Parameter.VAR_POSITIONAL:
            var_positional = param
        elif (
            param.kind is inspect.Parameter.KEYWORD_ONLY
            and param.default is inspect.Parameter.empty
        ):
            return False

    required = sum(1 for p in positional if p.default is inspect.Parameter.empty)
    if len(params) < required:
        return False
    if len(params) > len(positional) and var_positional is None:
        return False

    for index, expected in enumerate(params):
        slot = positional[index] if index < len(positional) else var_positional
        if slot is None:
            return False
        if not annotation_accepts(slot.annotation, expected, strict=strict):
            return False
    return True


def matches(
    callback: Callable[..., Any],
    kind: EventKind,
    *,
    strict: bool = False,
    signature: inspect.Signature | None = None,
) -> bool:
    """Check whether ``callback`` can handle occurrences of ``kind``.

    Callbacks tagged with ``@handles`` match exactly their tagged kinds.
    All others are matched on parameter shape.

    Args:
        callback: Candidate handler.
        kind: Event kind to test against.
        strict: When True, unannotated parameters accept nothing.
        signature: Pre-computed signature of ``callback``, to avoid
            re-inspecting it once per kind.

    Raises:
        SignatureError: If the callback's signature cannot be discovered.
    """
    tags = tagged_kinds(callback)
    if tags is not None:
        return kind.name in tags
    if signature is None:
        signature = callback_signature(callback)
    return signature_accepts(signature, kind.params, strict=strict)


def describe(callback: Callable[..., Any]) -> str:
    """Render ``name(signature)`` for error messages, never raising."""
    try:
        sig = str(inspect.signature(callback))
    except (TypeError, ValueError):
        sig = "(?)"
    return f"{callable_name(callback)}{sig}"

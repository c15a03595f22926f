"""Tests for parameter-shape matching rules."""

import functools
import inspect
from typing import Annotated, Any, Optional, Protocol, runtime_checkable

import pytest
from conftest import KINDS, ON_ALARM, ON_IDLE, ON_NOTE, Alarm, LoudAlarm, Note

from sigdispatch import (
    CallbackDispatcher,
    EventKind,
    SignatureError,
    UnmatchedCallbackError,
    handles,
)
from sigdispatch.signature import (
    annotation_accepts,
    callback_signature,
    describe,
    matches,
    signature_accepts,
)

EMPTY = inspect.Parameter.empty


class HasText(Protocol):
    text: str


@runtime_checkable
class Leveled(Protocol):
    level: int


# =============================================================================
# Annotation rules
# =============================================================================


class TestAnnotationAccepts:
    def test_exact_and_contravariant(self):
        """Equal types and base classes accept; subclasses do not."""
        assert annotation_accepts(Alarm, Alarm)
        assert annotation_accepts(Alarm, LoudAlarm)
        assert annotation_accepts(object, Note)
        assert not annotation_accepts(LoudAlarm, Alarm)
        assert not annotation_accepts(str, Note)

    def test_unannotated_depends_on_strict(self):
        """Empty annotations accept anything unless strict."""
        assert annotation_accepts(EMPTY, Note)
        assert not annotation_accepts(EMPTY, Note, strict=True)

    def test_any_always_accepts(self):
        """Any accepts every type, strict or not."""
        assert annotation_accepts(Any, Note, strict=True)

    def test_unions(self):
        """A union annotation accepts when any member does."""
        assert annotation_accepts(Note | Alarm, LoudAlarm)
        assert annotation_accepts(Optional[Note], Note)
        assert not annotation_accepts(Note | str, Alarm)

    def test_union_kind_param_needs_every_member(self):
        """A union kind param is accepted only if all members are."""
        assert annotation_accepts(Note | Alarm, Alarm | Note)
        assert annotation_accepts(object, Note | None)
        assert not annotation_accepts(Note, Note | None)

    def test_none_means_nonetype(self):
        """None on either side is read as NoneType."""
        assert annotation_accepts(None, None)
        assert annotation_accepts(None, type(None))
        assert annotation_accepts(Note | None, None)
        assert not annotation_accepts(Note, None)

    def test_annotated_is_unwrapped(self):
        """Annotated[X, ...] behaves like X."""
        assert annotation_accepts(Annotated[Alarm, "meta"], LoudAlarm)

    def test_generics(self):
        """Bare origin accepts a parameterized kind; parameterized needs equality."""
        assert annotation_accepts(list, list[int])
        assert annotation_accepts(list[int], list[int])
        assert not annotation_accepts(list[int], list[str])
        assert not annotation_accepts(list[int], list)

    def test_protocols_without_class_checks_do_not_match(self):
        """Protocols that refuse issubclass() accept nothing instead of raising."""
        assert not annotation_accepts(HasText, Note)
        assert not annotation_accepts(Leveled, Alarm)

    def test_protocol_annotated_callback_is_unmatched(self):
        """bind() reports a Protocol-annotated callback as unmatched."""

        def handle(item: HasText) -> None: ...

        with pytest.raises(UnmatchedCallbackError):
            CallbackDispatcher(KINDS).bind([handle])


# =============================================================================
# Signature shape
# =============================================================================


def _sig(fn) -> inspect.Signature:
    return callback_signature(fn)


class TestSignatureShape:
    def test_exact_arity(self):
        """Positional count must line up with the kind's params."""

        def one(note: Note) -> None: ...

        assert signature_accepts(_sig(one), (Note,))
        assert not signature_accepts(_sig(one), ())
        assert not signature_accepts(_sig(one), (Note, Note))

    def test_void(self):
        """Zero-parameter callables fit zero-parameter kinds only."""

        def void() -> None: ...

        assert signature_accepts(_sig(void), ())
        assert not signature_accepts(_sig(void), (Note,))

    def test_optional_positional(self):
        """Parameters with defaults stretch the accepted arity."""

        def flexible(note: Note, extra: int = 0) -> None: ...

        assert signature_accepts(_sig(flexible), (Note,))
        assert signature_accepts(_sig(flexible), (Note, int))
        assert not signature_accepts(_sig(flexible), (Note, str))

    def test_var_positional(self):
        """*args absorbs extra params and its annotation is checked."""

        def spread(*notes: Note) -> None: ...

        assert signature_accepts(_sig(spread), ())
        assert signature_accepts(_sig(spread), (Note, Note))
        assert not signature_accepts(_sig(spread), (Alarm,))

    def test_required_keyword_only_never_matches(self):
        """A required keyword-only parameter cannot be filled positionally."""

        def kw(note: Note, *, flag: bool) -> None: ...
        def kw_default(note: Note, *, flag: bool = False) -> None: ...

        assert not signature_accepts(_sig(kw), (Note,))
        assert signature_accepts(_sig(kw_default), (Note,))

    def test_var_keyword_ignored(self):
        """**kwargs does not affect positional matching."""

        def loose(note: Note, **extra: Any) -> None: ...

        assert signature_accepts(_sig(loose), (Note,))


# =============================================================================
# Callable varieties
# =============================================================================


class TestMatches:
    def test_bound_method_skips_self(self):
        """self is not counted for bound methods."""

        class Holder:
            def on_note(self, note: Note) -> None: ...

        assert matches(Holder().on_note, ON_NOTE)

    def test_partial(self):
        """functools.partial exposes the remaining parameters."""

        def two(prefix: str, note: Note) -> None: ...

        assert matches(functools.partial(two, "x"), ON_NOTE)

    def test_callable_instance(self):
        """Objects with __call__ are matched on __call__."""

        class Handler:
            def __call__(self, alarm: Alarm) -> None: ...

        assert matches(Handler(), ON_ALARM)
        assert not matches(Handler(), ON_NOTE)

    def test_string_annotations_resolved(self):
        """String annotations are evaluated before comparison."""

        def deferred(note: "Note") -> None: ...

        assert matches(deferred, ON_NOTE)

    def test_unresolvable_annotation(self):
        """Annotations naming unknown types raise SignatureError."""

        def broken(note: "DoesNotExist") -> None: ...  # noqa: F821

        with pytest.raises(SignatureError):
            matches(broken, ON_NOTE)

    def test_unusable_signature_metadata(self):
        """Callables with unusable signature metadata raise SignatureError."""

        class Opaque:
            __signature__ = 42

            def __call__(self, *args: Any) -> None: ...

        with pytest.raises(SignatureError):
            callback_signature(Opaque())

    def test_non_callable(self):
        """Non-callables raise SignatureError."""
        with pytest.raises(SignatureError):
            callback_signature("not callable")  # type: ignore[arg-type]

    def test_handles_tag_overrides_annotations(self):
        """@handles binds by kind name only."""

        @handles(ON_IDLE, "on_alarm")
        def anything(*args: Any) -> None: ...

        assert matches(anything, ON_IDLE)
        assert matches(anything, ON_ALARM)
        assert not matches(anything, ON_NOTE)

    def test_handles_tag_matches_equal_name(self):
        """Tags compare by name, so a re-declared kind still matches."""

        @handles("on_note")
        def tagged(x: int) -> None: ...

        assert matches(tagged, EventKind(name="on_note", params=(Note,)))


class TestDescribe:
    def test_describe_renders_name_and_signature(self):
        """describe() shows qualname and parameters."""

        def on_note(note: Note) -> None: ...

        text = describe(on_note)
        assert text.endswith("on_note(note: conftest.Note) -> None")

    def test_describe_never_raises(self):
        """Undiscoverable signatures render as (?)."""
        assert describe(42).endswith("(?)")

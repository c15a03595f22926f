"""Exception hierarchy for sigdispatch.

All custom exceptions inherit from SigDispatchError base class.
"""


class SigDispatchError(Exception):
    """Base exception for all sigdispatch errors.

    Allows users to catch every framework-specific error with a single
    except clause.
    """


# -- Bind-time errors ---------------------------------------------------------


class UnmatchedCallbackError(SigDispatchError, TypeError):
    """A supplied callback matches none of the recognized event kinds.

    Raised by ``bind()`` before any occurrence is dispatched, so that a
    typo in a handler's parameter list is caught at setup time instead
    of being silently ignored.
    """


class MissingRequiredHandlerError(SigDispatchError, LookupError):
    """A required event kind has no matching callback.

    Required kinds are kinds declared without a default handler.
    """


class SignatureError(SigDispatchError, TypeError):
    """A callback's parameter signature cannot be discovered.

    Raised for builtins without signature metadata and for callables
    whose string annotations fail to resolve.
    """


class EventKindError(SigDispatchError, ValueError):
    """An event kind, or a set of event kinds, is invalid.

    Raised when:
    - ``EventKind`` fields fail pydantic validation
    - a dispatcher is built with no kinds or with duplicate names
    - a kind's default handler does not fit the kind's own signature
    """


class PayloadValidationError(SigDispatchError, ValueError):
    """Payload validation failed.

    This wraps pydantic.ValidationError to provide a framework-specific
    exception type.
    """


# -- Dispatch-time errors -----------------------------------------------------


class UnknownEventKindError(SigDispatchError, KeyError):
    """An occurrence names a kind that is absent from the binding."""


# -- Tooling errors -----------------------------------------------------------


class ConfigError(SigDispatchError, ValueError):
    """The ``[tool.sigdispatch]`` table holds invalid settings."""


class TargetImportError(SigDispatchError, ImportError):
    """A ``module:attr`` target failed to import.

    The original exception is chained via ``__cause__``.
    """

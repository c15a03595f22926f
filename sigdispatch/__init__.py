"""sigdispatch - signature-based callback dispatch for Python.

This package binds caller-supplied callbacks to a fixed set of event kinds
by parameter shape, once at setup time, and dispatches occurrences through
the resulting immutable table.
"""

__version__ = "0.1.0"

from loguru import logger

# Disable all sigdispatch logging by default.  Users opt in with:
#     from loguru import logger
#     logger.enable("sigdispatch")
logger.disable("sigdispatch")

from sigdispatch.binding import Binding
from sigdispatch.config import DispatchConfig, load_config
from sigdispatch.defaults import ignore, raise_error
from sigdispatch.dispatcher import CallbackDispatcher
from sigdispatch.exceptions import (
    ConfigError,
    EventKindError,
    MissingRequiredHandlerError,
    PayloadValidationError,
    SigDispatchError,
    SignatureError,
    TargetImportError,
    UnknownEventKindError,
    UnmatchedCallbackError,
)
from sigdispatch.groups import HandlerGroup, handler, handles
from sigdispatch.kinds import EventKind, Occurrence
from sigdispatch.payloads import Payload

__all__ = [
    # Version
    "__version__",
    # Models
    "EventKind",
    "Occurrence",
    "Payload",
    # Dispatch
    "CallbackDispatcher",
    "Binding",
    "HandlerGroup",
    "handler",
    "handles",
    # Default handlers
    "ignore",
    "raise_error",
    # Configuration
    "DispatchConfig",
    "load_config",
    # Exception classes
    "SigDispatchError",
    "UnmatchedCallbackError",
    "MissingRequiredHandlerError",
    "SignatureError",
    "EventKindError",
    "PayloadValidationError",
    "UnknownEventKindError",
    "ConfigError",
    "TargetImportError",
]

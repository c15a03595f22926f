"""CLI entry point for sigcheck.

Imports a set of callbacks and a set of event kinds, binds them, and
prints which handler serves each kind.  Exits non-zero when binding
fails, which makes it usable as a pre-deployment check.

Usage::

    sigcheck myapp.handlers:CALLBACKS
    sigcheck myapp.handlers:Printer --kinds myapp.kinds:KINDS --strict
"""

import argparse
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

from sigdispatch.binding import Binding
from sigdispatch.config import DispatchConfig, load_config
from sigdispatch.dispatcher import CallbackDispatcher
from sigdispatch.exceptions import SigDispatchError, TargetImportError
from sigdispatch.groups import HandlerGroup
from sigdispatch.kinds import EventKind
from sigdispatch.utils import callable_name, import_object

log = logger.bind(source=__name__)

DEFAULT_KINDS = "sigdispatch.consumer:CONSUMER_KINDS"


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="sigcheck",
        description="Bind callbacks to event kinds and print the result.",
    )
    parser.add_argument(
        "target",
        help="'module:attr' naming an iterable of callbacks, a single "
        "callback, or a HandlerGroup class or instance.",
    )
    parser.add_argument(
        "--kinds",
        default=DEFAULT_KINDS,
        help="'module:attr' naming an iterable of EventKinds or a "
        f"CallbackDispatcher (default: {DEFAULT_KINDS}).",
    )
    parser.add_argument(
        "--pyproject",
        type=Path,
        default=None,
        help="pyproject.toml to read [tool.sigdispatch] settings from.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Treat unannotated parameters as matching nothing.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log binding details.",
    )
    return parser


def _load_callbacks(target: str) -> list[Callable[..., Any]]:
    obj = import_object(target)
    if isinstance(obj, type) and issubclass(obj, HandlerGroup):
        obj = obj()
    if isinstance(obj, HandlerGroup):
        return obj.callbacks()
    if callable(obj):
        return [obj]
    try:
        return list(obj)
    except TypeError as exc:
        raise TargetImportError(
            f"'{target}' is neither callable nor an iterable of callbacks"
        ) from exc


def _load_dispatcher(target: str, config: DispatchConfig) -> CallbackDispatcher:
    obj = import_object(target)
    if isinstance(obj, CallbackDispatcher):
        return CallbackDispatcher(obj.kinds, config=config)
    if isinstance(obj, EventKind):
        obj = [obj]
    try:
        kinds = list(obj)
    except TypeError as exc:
        raise TargetImportError(
            f"'{target}' is neither a CallbackDispatcher nor an iterable of kinds"
        ) from exc
    return CallbackDispatcher(kinds, config=config)


def _render(binding: Binding) -> str:
    width = max(len(kind.name) for kind in binding)
    lines = []
    for kind, callback in binding.items():
        line = f"{kind.name:<{width}}  -> {callable_name(callback)}"
        if binding.is_default(kind):
            line += "  (default)"
        lines.append(line)
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: load config, kinds and callbacks, bind, print.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).
    """
    parser = _build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")
    logger.enable("sigdispatch")

    try:
        config = load_config(args.pyproject) if args.pyproject else DispatchConfig()
        if args.strict:
            config = config.model_copy(update={"strict_annotations": True})
        dispatcher = _load_dispatcher(args.kinds, config)
        callbacks = _load_callbacks(args.target)
        binding = dispatcher.bind(callbacks)
    except (SigDispatchError, OSError) as exc:
        log.error("{}: {}", type(exc).__name__, exc)
        sys.exit(1)

    print(_render(binding))

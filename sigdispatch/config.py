"""Configuration for sigdispatch.

Settings live in the ``[tool.sigdispatch]`` table of a project's
``pyproject.toml``::

    [tool.sigdispatch]
    strict_annotations = true
    warn_shadowed = true

Typical usage::

    from sigdispatch.config import load_config

    config = load_config(Path("pyproject.toml"))
    dispatcher = CallbackDispatcher(kinds, config=config)
"""

import tomllib
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from sigdispatch.exceptions import ConfigError

log = logger.bind(source=__name__)

CONFIG_TABLE = "sigdispatch"


class DispatchConfig(BaseModel):
    """Matching and diagnostics settings for a dispatcher.

    Attributes:
        strict_annotations: When True, unannotated callback parameters
            match no event kind.  When False they match any parameter type.
        warn_shadowed: Log callbacks that lose a kind to an earlier match
            at WARNING instead of DEBUG.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    strict_annotations: bool = False
    warn_shadowed: bool = False

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into ConfigError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def load_config(pyproject_path: Path) -> DispatchConfig:
    """Read ``[tool.sigdispatch]`` from a ``pyproject.toml`` file.

    A file without the table yields the default configuration.

    Args:
        pyproject_path: Path to the ``pyproject.toml`` file.

    Returns:
        Parsed configuration.

    Raises:
        ConfigError: If the file is not valid TOML or the table holds
            unknown keys or wrongly typed values.
    """
    try:
        with open(pyproject_path, "rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {exc}") from exc

    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        raise ConfigError(f"[tool] in {pyproject_path} must be a table")
    table = tool.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[tool.{CONFIG_TABLE}] must be a table")
    if not table:
        log.debug("No [tool.{}] table in {}", CONFIG_TABLE, pyproject_path)
        return DispatchConfig()

    config = DispatchConfig(**table)
    log.debug("Loaded {} from {}", config, pyproject_path)
    return config

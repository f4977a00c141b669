"""
Calculator configuration.

Settings come from three layers, later ones winning:

1. Defaults on :class:`CalcConfig`
2. The ``[calculator]`` table of a ``simplecalc.toml`` file
3. Environment variables

Environment variables:
    SIMPLECALC_ENGINE: ``reduce`` (default) or ``precedence``
    SIMPLECALC_LOG_LEVEL: ``DEBUG``, ``INFO``, ``WARNING`` (default) or ``ERROR``

Usage:
    from simplecalc.core.config import load_config

    config = load_config()
    config.engine  # EngineName.REDUCE
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from simplecalc.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "simplecalc.toml"

ENV_ENGINE = "SIMPLECALC_ENGINE"
ENV_LOG_LEVEL = "SIMPLECALC_LOG_LEVEL"


class EngineName(StrEnum):
    """Available evaluation engines."""

    REDUCE = "reduce"
    PRECEDENCE = "precedence"


class CalcConfig(BaseModel):
    """Calculator configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    engine: EngineName = EngineName.REDUCE
    exit_commands: list[str] = Field(default_factory=lambda: ["exit", "quit"])
    prompt: str = "> "
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("exit_commands")
    @classmethod
    def _lower_exit_commands(cls, value: list[str]) -> list[str]:
        return [v.strip().lower() for v in value if v.strip()]


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CalcConfig:
    """Build the configuration from an optional TOML file and the environment.

    Args:
        path: TOML file to read. When ``None``, ``simplecalc.toml`` in the
            current directory is used if it exists.
        environ: Environment mapping, ``os.environ`` by default.

    Raises:
        ConfigurationError: If the file or a value is invalid.
    """
    data: dict[str, Any] = {}

    if path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        path = candidate if candidate.exists() else None
    elif not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    if path is not None:
        data.update(_read_toml(path))

    data.update(_read_environment(os.environ if environ is None else environ))

    try:
        config = CalcConfig(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    logger.debug("Loaded configuration: %s", config.model_dump())
    return config


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

    section = raw.get("calculator", {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"[calculator] in {path} must be a table")
    return section


def _read_environment(environ: Mapping[str, str]) -> dict[str, Any]:
    data: dict[str, Any] = {}

    engine = environ.get(ENV_ENGINE, "").strip().lower()
    if engine:
        data["engine"] = engine

    log_level = environ.get(ENV_LOG_LEVEL, "").strip()
    if log_level:
        data["log_level"] = log_level

    return data

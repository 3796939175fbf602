# docindex/core/config.py
"""
Centralized configuration loading for docindex.

This module provides a SINGLE way to load YAML configuration files.
Schemas live with the components that own them; loading and error
reporting live here.

Usage:
    from docindex.core.config import load_yaml, load_config, ConfigError

    data = load_yaml("config.yaml")

    from docindex.indexing.config import IndexerSettings
    settings = load_config("config.yaml", IndexerSettings)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from docindex.logging.logger import get_logger
from docindex.logging.tags import CONFIG

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


# =============================================================================
# Errors
# =============================================================================


class ConfigError(Exception):
    """Base error for configuration issues."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when a config file doesn't exist."""

    pass


class ConfigParseError(ConfigError):
    """Raised when YAML parsing fails."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when config doesn't match schema."""

    pass


# =============================================================================
# Core Loading Functions
# =============================================================================


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML file and return it as a dictionary.

    Raises:
        ConfigNotFoundError: If file doesn't exist
        ConfigParseError: If YAML is invalid or the root is not a mapping
    """
    p = Path(path)

    if not p.exists():
        raise ConfigNotFoundError("Config file not found", path=p)

    if p.is_dir():
        raise ConfigError("Config path is a directory, not a file", path=p)

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}", path=p) from e
    except OSError as e:
        raise ConfigParseError(f"Failed to read config: {e}", path=p) from e

    if not isinstance(data, dict):
        raise ConfigParseError("Config root must be a mapping (dict)", path=p)

    logger.debug(f"{CONFIG} Loaded config from {p}")
    return data


def load_config(path: Union[str, Path], schema: Type[T]) -> T:
    """
    Load and validate a configuration file against a pydantic schema.

    Raises:
        ConfigNotFoundError: If file doesn't exist
        ConfigParseError: If YAML is invalid
        ConfigValidationError: If config doesn't match schema
    """
    p = Path(path)
    data = load_yaml(p)
    return validate_config(data, schema, path=p)


def validate_config(
    data: Dict[str, Any],
    schema: Type[T],
    path: Optional[Path] = None,
) -> T:
    """Validate raw config data, wrapping pydantic errors in ConfigValidationError."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigValidationError(
            f"Invalid {schema.__name__}: {problems}", path=path
        ) from e


__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "load_yaml",
    "load_config",
    "validate_config",
]

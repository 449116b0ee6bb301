"""Settings for treespec.

Settings are a frozen pydantic model. ``load_settings`` merges defaults, an
optional YAML file and ``TREESPEC_*`` environment variables, in that order of
increasing priority.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from treespec.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TREESPEC_"
_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class TreeSpecSettings(BaseModel):
    """Behavioural settings for flatten and logging.

    Attributes:
        dict_key_order: ``"insertion"`` keeps a dict's own key order,
            ``"sorted"`` sorts keys before flattening.
        detect_namedtuples: Classify unregistered tuple subclasses with a
            ``_fields`` attribute as named tuples.
        log_level: Level applied to the ``treespec`` logger by ``configure_logging``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dict_key_order: Literal["insertion", "sorted"] = "insertion"
    detect_namedtuples: bool = True
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LEVEL_NAMES:
            raise ValueError(f"log_level must be one of {', '.join(_LEVEL_NAMES)}")
        return level


def _read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Could not read settings file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")
    # Allow the settings to live under a top-level "treespec" section.
    section = data.get("treespec", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"'treespec' section in {path} must be a mapping")
    return dict(section)


def _read_environ(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name in TreeSpecSettings.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            values[name] = raw
    return values


def load_settings(
    path: Optional[Union[str, Path]] = None, environ: Optional[Mapping[str, str]] = None
) -> TreeSpecSettings:
    """Load settings from defaults, an optional YAML file and the environment.

    Args:
        path: YAML file with settings at top level or under ``treespec:``.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Validated settings.

    Raises:
        ConfigurationError: If the file cannot be read or validation fails.
    """
    merged: Dict[str, Any] = {}
    if path is not None:
        merged.update(_read_yaml(path))
        logger.debug("Loaded treespec settings from %s", path)
    merged.update(_read_environ(os.environ if environ is None else environ))
    try:
        return TreeSpecSettings(**merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Settings validation failed: {exc}") from exc


_settings: Optional[TreeSpecSettings] = None
_settings_lock = threading.RLock()


def get_settings() -> TreeSpecSettings:
    """Return the process default settings, loading them on first use."""
    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = load_settings()
        return _settings


def set_settings(settings: Optional[TreeSpecSettings]) -> None:
    """Replace the process default settings; ``None`` reloads on next access."""
    global _settings
    with _settings_lock:
        _settings = settings


def configure_logging(settings: Optional[TreeSpecSettings] = None) -> None:
    """Apply ``settings.log_level`` to the ``treespec`` package logger."""
    settings = settings or get_settings()
    logging.getLogger("treespec").setLevel(settings.log_level)


__all__ = [
    "TreeSpecSettings",
    "load_settings",
    "get_settings",
    "set_settings",
    "configure_logging",
    "ENV_PREFIX",
]

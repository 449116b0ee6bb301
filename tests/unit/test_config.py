"""Tests for settings loading and logging configuration."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from treespec.config import (
    TreeSpecSettings,
    configure_logging,
    get_settings,
    load_settings,
    set_settings,
)
from treespec.core.exceptions import ConfigurationError


def test_defaults() -> None:
    settings = load_settings(environ={})
    assert settings == TreeSpecSettings()
    assert settings.dict_key_order == "insertion"
    assert settings.detect_namedtuples is True
    assert settings.log_level == "WARNING"


def test_environment_overrides() -> None:
    settings = load_settings(
        environ={
            "TREESPEC_DICT_KEY_ORDER": "sorted",
            "TREESPEC_DETECT_NAMEDTUPLES": "false",
            "TREESPEC_LOG_LEVEL": "debug",
            "UNRELATED": "ignored",
        }
    )
    assert settings.dict_key_order == "sorted"
    assert settings.detect_namedtuples is False
    assert settings.log_level == "DEBUG"


def test_yaml_file_with_section(tmp_path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("treespec:\n  dict_key_order: sorted\n  log_level: info\n", encoding="utf-8")
    settings = load_settings(path, environ={})
    assert settings.dict_key_order == "sorted"
    assert settings.log_level == "INFO"


def test_environment_beats_yaml(tmp_path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("dict_key_order: sorted\n", encoding="utf-8")
    settings = load_settings(path, environ={"TREESPEC_DICT_KEY_ORDER": "insertion"})
    assert settings.dict_key_order == "insertion"


@pytest.mark.parametrize(
    "content",
    [
        "dict_key_order: random\n",
        "log_level: LOUD\n",
        "unknown_option: 1\n",
        "- just\n- a list\n",
        "treespec: 3\n",
    ],
)
def test_invalid_yaml_settings(tmp_path, content) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_settings(path, environ={})


def test_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(tmp_path / "absent.yaml", environ={})


def test_settings_are_frozen() -> None:
    settings = TreeSpecSettings()
    with pytest.raises(ValidationError):
        settings.dict_key_order = "sorted"


def test_process_settings_can_be_replaced() -> None:
    custom = TreeSpecSettings(dict_key_order="sorted")
    set_settings(custom)
    try:
        assert get_settings() is custom
    finally:
        set_settings(None)


def test_configure_logging_sets_package_level() -> None:
    package_logger = logging.getLogger("treespec")
    previous = package_logger.level
    try:
        configure_logging(TreeSpecSettings(log_level="DEBUG"))
        assert package_logger.level == logging.DEBUG
    finally:
        package_logger.setLevel(previous)

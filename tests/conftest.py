"""Configure pytest environment for all tests."""

import sys
from pathlib import Path

import pytest

# Get absolute paths
PROJECT_ROOT = Path(__file__).parent.parent.absolute()
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from treespec.config import TreeSpecSettings  # noqa: E402
from treespec.registry import TypeRegistry  # noqa: E402


@pytest.fixture()
def registry() -> TypeRegistry:
    """A fresh registry so custom registrations never leak between tests."""
    return TypeRegistry()


@pytest.fixture()
def settings() -> TreeSpecSettings:
    return TreeSpecSettings()


@pytest.fixture()
def sorted_settings() -> TreeSpecSettings:
    return TreeSpecSettings(dict_key_order="sorted")

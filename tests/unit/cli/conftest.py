"""Fixtures shared by CLI tests."""

from pathlib import Path

import pytest
from dustpan.core.paths import get_settings_path


@pytest.fixture
def settings_file() -> Path:
    """Settings that delete permanently and use small duplicate sizes."""
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("use_trash = false\nduplicate_min_size = 16\n")
    return path

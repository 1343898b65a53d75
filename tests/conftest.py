"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
import shutil
from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config and state directories into the test's tmp dir."""
    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(xdg / "state"))
    return xdg


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Create a file with given content, or a sparse file of a given size."""

    def _make(path: Path, content: bytes | None = None, size: int | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if content is not None:
            path.write_bytes(content)
        else:
            with open(path, "wb") as f:
                os.truncate(f.fileno(), size or 0)
        return path

    return _make


@pytest.fixture
def fake_trash() -> Callable[[str], None]:
    """Trash replacement that deletes files permanently."""

    def _trash(path: str) -> None:
        target = Path(path)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()

    return _trash

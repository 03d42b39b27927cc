"""Pytest configuration and fixtures for projcheck tests."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")

GITIGNORE_CONTENT = "node_modules/\n*.log\n.env\ndist/\nbuild/\n"


def write_file(path: Path, content: str = "", mode: int = 0o600) -> Path:
    """Write a file with explicit permissions so results do not depend on umask."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    path.chmod(mode)
    return path


@pytest.fixture
def write() -> Callable[..., Path]:
    """Expose write_file to tests."""
    return write_file


@pytest.fixture
def clean_project(tmp_path: Path) -> Path:
    """A project root that passes every structure check."""
    root = tmp_path / "clean-project"
    root.mkdir()
    write_file(root / "README.md", "# Clean Project\n")
    write_file(root / "LICENSE", "MIT License\n")
    write_file(root / ".gitignore", GITIGNORE_CONTENT)
    return root

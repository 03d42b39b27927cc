"""Utility functions for fixers."""

from __future__ import annotations

from pathlib import Path, PurePosixPath


def derive_project_name(project_root: Path) -> str:
    """Derive a human-readable project name from the root directory.

    Converts directory names like "audio-manager" to "Audio Manager".

    Args:
        project_root: Path to the project directory.

    Returns:
        Human-readable project name.
    """
    dir_name = project_root.resolve().name
    name = dir_name.replace("-", " ").replace("_", " ")
    return name.title()


def sibling_path(file: str, name: str) -> str:
    """Return a path next to `file` with the given name, in POSIX form.

    Args:
        file: Existing or missing file path (project-relative or absolute).
        name: New file name.

    Returns:
        The path of `name` in the directory of `file`.
    """
    parent = PurePosixPath(Path(file).as_posix()).parent
    return (parent / name).as_posix()

"""Path filtering and walking utilities for projcheck validators.

Walks a project tree in a deterministic order while pruning directories that
hold vendored or generated content (virtual environments, node_modules, VCS
metadata, build caches).
"""

from __future__ import annotations

import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

# Directories never descended into during a project walk
IGNORED_DIRS = frozenset(
    {
        ".venv",
        "venv",
        "node_modules",
        "__pycache__",
        ".git",
        ".hg",
        ".svn",
        ".tox",
        ".nox",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        ".idea",
        ".vscode",
        "site-packages",
    }
)


class StructureWalkError(OSError):
    """Raised when the project tree cannot be walked or an entry cannot be stat'ed."""

    def __init__(self, path: Path | str, cause: OSError) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to walk project tree at {path}: {cause}")


@dataclass(frozen=True)
class WalkEntry:
    """One entry visited by walk_project.

    Attributes:
        path: Absolute path of the entry.
        relative: Project-relative POSIX path.
        is_dir: Whether the entry is a directory.
        mode: st_mode of the entry (symlinks are followed).
    """

    path: Path
    relative: str
    is_dir: bool
    mode: int

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def permissions(self) -> int:
        return stat.S_IMODE(self.mode)


def should_skip_dir(name: str) -> bool:
    return name in IGNORED_DIRS


def walk_project(project_root: Path) -> Iterator[WalkEntry]:
    """Walk a project tree, yielding every entry below the root.

    Entries are yielded top-down with siblings in sorted order. Ignored
    directories are yielded themselves but not descended into.

    Args:
        project_root: Root directory to walk.

    Yields:
        WalkEntry for each file and directory below the root.

    Raises:
        StructureWalkError: If a directory cannot be listed or an entry cannot
            be stat'ed (permission denied, broken symlink, ...).
    """

    def _raise(error: OSError) -> None:
        raise StructureWalkError(error.filename or project_root, error) from error

    for dirpath, dirnames, filenames in os.walk(project_root, onerror=_raise):
        current = Path(dirpath)
        dirnames.sort()
        for name in sorted(filenames):
            yield _entry(project_root, current / name, is_dir=False)
        for name in dirnames:
            yield _entry(project_root, current / name, is_dir=True)
        dirnames[:] = [name for name in dirnames if not should_skip_dir(name)]


def _entry(project_root: Path, path: Path, *, is_dir: bool) -> WalkEntry:
    try:
        st = path.stat()
    except OSError as e:
        raise StructureWalkError(path, e) from e
    return WalkEntry(
        path=path,
        relative=path.relative_to(project_root).as_posix(),
        is_dir=is_dir,
        mode=st.st_mode,
    )


def iter_project_files(project_root: Path) -> Iterator[WalkEntry]:
    """Yield only the regular-file entries of walk_project."""
    for entry in walk_project(project_root):
        if not entry.is_dir:
            yield entry

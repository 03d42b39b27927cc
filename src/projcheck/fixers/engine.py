"""Fix application and preview.

Preview and apply share a single planning step (`_plan`), so a preview
reports exactly the change an apply performs, including out-of-range
no-ops and failures.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from projcheck.config import ProjcheckConfig
from projcheck.fixers.base import (
    FileChange,
    Fix,
    FixAction,
    FixApplicationError,
    FixFailure,
    FixPreview,
    FixResult,
)
from projcheck.fixers.registry import FixerRegistry, create_default_registry
from projcheck.validators.base import ValidationIssue

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"


@dataclass(frozen=True)
class _Plan:
    """Planned effect of a fix on disk.

    Attributes:
        change: The change as reported by a preview.
        path: Resolved target file.
        text: New file content for create/replace/insert/delete, or None
            when the fix is a no-op.
        target: Resolved destination for rename.
    """

    change: FileChange
    path: Path
    text: str | None = None
    target: Path | None = None


def _resolve(project_root: Path, file: str) -> Path:
    path = Path(file)
    return path if path.is_absolute() else project_root / path


def _read_text(path: Path) -> str:
    # newline="" keeps CRLF endings intact through split/join
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _write_text(path: Path, text: str, mode: str = "w") -> None:
    with open(path, mode, encoding="utf-8", newline="") as f:
        f.write(text)


def _read_lines(path: Path, fix: Fix) -> list[str]:
    if not path.is_file():
        raise FixApplicationError(f"file not found: {fix.file}")
    try:
        return _read_text(path).split("\n")
    except (OSError, UnicodeDecodeError) as e:
        raise FixApplicationError(f"cannot read {fix.file}: {e}") from e


def _plan(fix: Fix, project_root: Path) -> _Plan:
    """Work out what applying a fix would do, without touching the disk.

    Raises:
        UnsupportedFixActionError: If the action is not a known action.
        FixApplicationError: If the fix cannot be applied.
    """
    action = FixAction.parse(fix.action)
    path = _resolve(project_root, fix.file)

    if action is FixAction.CREATE:
        if path.exists():
            raise FixApplicationError(f"file already exists: {fix.file}")
        count = len(fix.content.split("\n"))
        change = FileChange(fix.file, action, 0, count, f"Create file with {count} lines")
        return _Plan(change, path, text=fix.content)

    if action is FixAction.RENAME:
        if not fix.content:
            raise FixApplicationError(f"rename target missing for {fix.file}")
        target = _resolve(project_root, fix.content)
        if not path.exists():
            raise FixApplicationError(f"file not found: {fix.file}")
        if target.exists():
            raise FixApplicationError(f"rename target already exists: {fix.content}")
        change = FileChange(fix.file, action, 0, 0, f"Rename to: {fix.content}")
        return _Plan(change, path, target=target)

    lines = _read_lines(path, fix)
    before = len(lines)
    index = fix.line - 1

    if action is FixAction.REPLACE:
        description = f"Replace line {fix.line}: {fix.content}"
        if 0 <= index < before:
            lines[index] = fix.content
        else:
            return _Plan(FileChange(fix.file, action, before, before, description), path)
    elif action is FixAction.INSERT:
        description = f"Insert at line {fix.line}: {fix.content}"
        if 0 <= index <= before:
            lines.insert(index, fix.content)
        else:
            return _Plan(FileChange(fix.file, action, before, before, description), path)
    else:
        description = f"Delete line {fix.line}"
        if 0 <= index < before:
            del lines[index]
        else:
            return _Plan(FileChange(fix.file, action, before, before, description), path)

    change = FileChange(fix.file, action, before, len(lines), description)
    return _Plan(change, path, text="\n".join(lines))


def preview_fix(fix: Fix, project_root: Path) -> FileChange:
    """Describe what applying a fix would do. Never modifies the filesystem.

    Raises:
        UnsupportedFixActionError: If the action is not a known action.
        FixApplicationError: If applying the fix would fail.
    """
    return _plan(fix, project_root).change


def apply_fix(fix: Fix, project_root: Path, backup: bool = False) -> FileChange:
    """Apply a single fix.

    Args:
        fix: The fix to apply.
        project_root: Directory relative fix paths are resolved against.
        backup: Copy the file to `<file>.backup` before editing it in place.

    Returns:
        The change that was performed.

    Raises:
        UnsupportedFixActionError: If the action is not a known action.
        FixApplicationError: If the fix cannot be applied.
    """
    plan = _plan(fix, project_root)
    action = plan.change.action

    try:
        if action is FixAction.CREATE:
            plan.path.parent.mkdir(parents=True, exist_ok=True)
            _write_text(plan.path, plan.text or "", mode="x")
        elif action is FixAction.RENAME:
            if plan.target is None:
                raise FixApplicationError(f"rename target missing for {fix.file}")
            plan.target.parent.mkdir(parents=True, exist_ok=True)
            plan.path.rename(plan.target)
        elif plan.text is not None:
            if backup:
                shutil.copy2(plan.path, plan.path.with_name(plan.path.name + BACKUP_SUFFIX))
            _write_text(plan.path, plan.text)
    except FileExistsError as e:
        raise FixApplicationError(f"file already exists: {fix.file}") from e
    except OSError as e:
        raise FixApplicationError(f"failed to {action.value} {fix.file}: {e}") from e

    return plan.change


def _apply_order(fix: Fix) -> tuple[int, int]:
    # Renames go last, deepest path first: children before their directory
    if fix.action == FixAction.RENAME:
        return 1, -len(PurePosixPath(fix.file).parts)
    return 0, 0


class FixEngine:
    """Derives, previews and applies fixes for validation issues.

    Example:
        >>> engine = FixEngine(project_root)
        >>> result = engine.fix_issues(validation.issues)
        >>> result.summary.applied_fixes
        3
    """

    def __init__(
        self,
        project_root: Path,
        registry: FixerRegistry | None = None,
        config: ProjcheckConfig | None = None,
        backup: bool = False,
    ) -> None:
        """Initialize the engine.

        Args:
            project_root: Root directory of the project being fixed.
            registry: Fixer registry. Defaults to the built-in fixers.
            config: Resolved configuration, passed on to fixers.
            backup: Back up files before in-place edits.
        """
        self.project_root = project_root
        self.registry = registry if registry is not None else create_default_registry()
        self.config = config if config is not None else ProjcheckConfig()
        self.backup = backup

    def derive_fix(self, issue: ValidationIssue) -> Fix | None:
        """Derive a fix for an issue, or None when no fixer handles it."""
        fixer = self.registry.get_fixer(issue.rule, self.project_root, self.config)
        if fixer is None:
            return None
        return fixer.derive(issue)

    def get_fixable_issues(self, issues: list[ValidationIssue]) -> list[ValidationIssue]:
        return [issue for issue in issues if issue.fixable]

    def _derive_all(self, issues: list[ValidationIssue]) -> tuple[list[Fix], list[ValidationIssue]]:
        fixes: list[Fix] = []
        skipped: list[ValidationIssue] = []
        for issue in self.get_fixable_issues(issues):
            fix = self.derive_fix(issue)
            if fix is None:
                logger.debug("No fix derived for %s (%s)", issue.file, issue.rule)
                skipped.append(issue)
            else:
                fixes.append(fix)
        fixes.sort(key=_apply_order)
        return fixes, skipped

    def fix_issues(self, issues: list[ValidationIssue]) -> FixResult:
        """Derive and apply fixes for all fixable issues.

        Each fix is applied independently: a failure is recorded and the
        remaining fixes still run.

        Raises:
            UnsupportedFixActionError: If a fixer derived a fix with an
                unknown action.
        """
        fixes, skipped = self._derive_all(issues)
        result = FixResult(skipped=skipped)

        for fix in fixes:
            try:
                apply_fix(fix, self.project_root, backup=self.backup)
            except FixApplicationError as e:
                logger.warning("Fix %s failed: %s", fix.id, e)
                result.failed.append(FixFailure(fix, str(e)))
            else:
                logger.info("Applied fix %s", fix.id)
                result.applied.append(fix)

        return result

    def preview_fixes(self, issues: list[ValidationIssue]) -> FixPreview:
        """Describe the fixes `fix_issues` would apply, without touching the disk."""
        fixes, skipped = self._derive_all(issues)
        preview = FixPreview(skipped=skipped)

        for fix in fixes:
            try:
                change = preview_fix(fix, self.project_root)
            except FixApplicationError as e:
                preview.failed.append(FixFailure(fix, str(e)))
            else:
                preview.fixes.append(fix)
                preview.changes.append(change)

        return preview

"""Base classes and models for projcheck fixers.

A fixer turns one ValidationIssue into a Fix: a concrete file edit with one
of five actions. Fixers only derive fixes; the engine applies or previews
them.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from projcheck.config import ProjcheckConfig
from projcheck.validators.base import ValidationIssue


class UnsupportedFixActionError(ValueError):
    """Raised when a fix carries an action outside the closed action set."""


class FixApplicationError(Exception):
    """Raised when a single fix cannot be applied (or previewed)."""


class FixAction(str, enum.Enum):
    """Closed set of fix actions. Values are the wire representation."""

    CREATE = "create"
    REPLACE = "replace"
    INSERT = "insert"
    DELETE = "delete"
    RENAME = "rename"

    @classmethod
    def parse(cls, value: str | FixAction) -> FixAction:
        """Convert a wire value into a FixAction.

        Raises:
            UnsupportedFixActionError: If the value is not a known action.
        """
        try:
            return cls(value)
        except ValueError as e:
            raise UnsupportedFixActionError(f"unsupported fix action: {value}") from e


@dataclass(frozen=True)
class Fix:
    """A proposed remediation.

    Which fields matter depends on the action:

    - create: file, content (new file content)
    - replace: file, line, content (replacement line)
    - insert: file, line, content (inserted line, placed before `line`)
    - delete: file, line
    - rename: file, content (new path)

    Attributes:
        id: Identifier derived from rule and location; re-deriving from the
            same issue yields the same id.
        action: Edit to perform.
        file: Target path, relative to the project root or absolute.
        line: 1-based line number for replace/insert/delete (0 otherwise).
        content: Action-dependent payload (see above).
        automatic: Whether the fix is safe to apply without confirmation.
        description: Human-readable description of the fix.
        rule: Rule id of the issue the fix was derived from.
    """

    id: str
    action: FixAction
    file: str
    line: int = 0
    content: str = ""
    automatic: bool = True
    description: str = ""
    rule: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "action": FixAction(self.action).value,
            "file": self.file,
            "line": self.line,
            "content": self.content,
            "automatic": self.automatic,
            "description": self.description,
            "rule": self.rule,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Fix:
        """Build a fix from its dictionary form.

        Raises:
            UnsupportedFixActionError: If the action is not a known action.
            KeyError: If a required key is missing.
        """
        return cls(
            id=data["id"],
            action=FixAction.parse(data["action"]),
            file=data["file"],
            line=int(data.get("line", 0)),
            content=data.get("content", ""),
            automatic=bool(data.get("automatic", True)),
            description=data.get("description", ""),
            rule=data.get("rule", ""),
        )


@dataclass(frozen=True)
class FixFailure:
    """A fix that could not be applied, with the reason."""

    fix: Fix
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"fix": self.fix.to_dict(), "error": self.error}


@dataclass
class FixSummary:
    """Counters for a batch of fixes.

    Attributes:
        total_fixes: Number of fixes attempted (applied + failed).
        applied_fixes: Number of fixes applied.
        failed_fixes: Number of fixes that failed.
        skipped_fixes: Number of fixable issues with no derivable fix.
        files_modified: Number of distinct files among applied fixes.
    """

    total_fixes: int = 0
    applied_fixes: int = 0
    failed_fixes: int = 0
    skipped_fixes: int = 0
    files_modified: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total_fixes": self.total_fixes,
            "applied_fixes": self.applied_fixes,
            "failed_fixes": self.failed_fixes,
            "skipped_fixes": self.skipped_fixes,
            "files_modified": self.files_modified,
        }


def _summarize(applied: list[Fix], failed: list[FixFailure], skipped: list[ValidationIssue]) -> FixSummary:
    return FixSummary(
        total_fixes=len(applied) + len(failed),
        applied_fixes=len(applied),
        failed_fixes=len(failed),
        skipped_fixes=len(skipped),
        files_modified=len({fix.file for fix in applied}),
    )


@dataclass
class FixResult:
    """Outcome of applying a batch of fixes."""

    applied: list[Fix] = field(default_factory=list)
    failed: list[FixFailure] = field(default_factory=list)
    skipped: list[ValidationIssue] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def summary(self) -> FixSummary:
        return _summarize(self.applied, self.failed, self.skipped)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "applied": [fix.to_dict() for fix in self.applied],
            "failed": [failure.to_dict() for failure in self.failed],
            "skipped": [issue.to_dict() for issue in self.skipped],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class FileChange:
    """Preview of one fix's effect on disk. Never persisted.

    Attributes:
        file: Target file of the fix.
        action: Action of the fix.
        lines_before: Line count before the fix (0 for create).
        lines_after: Line count after the fix (0 for rename).
        description: One-line description of the change.
    """

    file: str
    action: FixAction
    lines_before: int
    lines_after: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "action": FixAction(self.action).value,
            "lines_before": self.lines_before,
            "lines_after": self.lines_after,
            "description": self.description,
        }


@dataclass
class FixPreview:
    """Outcome of previewing a batch of fixes.

    `fixes` and `changes` are parallel lists for the fixes that would apply;
    `failed` holds fixes whose apply would fail.
    """

    fixes: list[Fix] = field(default_factory=list)
    changes: list[FileChange] = field(default_factory=list)
    failed: list[FixFailure] = field(default_factory=list)
    skipped: list[ValidationIssue] = field(default_factory=list)

    @property
    def summary(self) -> FixSummary:
        return _summarize(self.fixes, self.failed, self.skipped)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fixes": [fix.to_dict() for fix in self.fixes],
            "changes": [change.to_dict() for change in self.changes],
            "failed": [failure.to_dict() for failure in self.failed],
            "skipped": [issue.to_dict() for issue in self.skipped],
            "summary": self.summary.to_dict(),
        }


class BaseFixer(ABC):
    """Abstract base class for all fixers.

    Each fixer handles exactly one rule id and derives a Fix for issues
    carrying that rule.

    Attributes:
        project_root: Root directory of the project being fixed.
        config: Resolved configuration.
    """

    # The rule this fixer handles (must be set by subclasses)
    rule: str = ""

    def __init__(self, project_root: Path, config: ProjcheckConfig | None = None) -> None:
        """Initialize fixer.

        Args:
            project_root: Root directory of the project.
            config: Resolved configuration. Defaults are used when omitted.
        """
        self.project_root = project_root
        self.config = config if config is not None else ProjcheckConfig()

    @abstractmethod
    def derive(self, issue: ValidationIssue) -> Fix | None:
        """Derive a fix for the given issue.

        Derivation is deterministic and never touches the filesystem.

        Args:
            issue: The issue to resolve.

        Returns:
            A Fix, or None when this issue has no mechanical fix.
        """

    def _fix_id(self, issue: ValidationIssue) -> str:
        return f"{issue.rule}:{issue.file}:{issue.line or 0}"

"""Base validator classes and models for the projcheck validation framework.

Provides the common issue vocabulary every checker emits into, the result
container that aggregates issues, and the abstract validator interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

Severity = Literal["error", "warning", "info"]

SEVERITIES: tuple[Severity, ...] = ("error", "warning", "info")


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem detected by a checker.

    Issues are immutable once emitted. The rule identifier is the only key
    used to derive a fix for the issue.

    Attributes:
        severity: Severity level ("error", "warning", or "info").
        message: Human-readable description of the issue.
        file: Path of the file or directory the issue refers to.
        rule: Stable dotted rule identifier (e.g., "structure.readme.required").
        line: Optional 1-based line number within the file.
        fixable: Whether an automated fix may exist for this issue. This is
            a hint; not every fixable issue has a derivable fix.
        suggestion: Optional proposed value (e.g., the expected file name).
    """

    severity: Severity
    message: str
    file: str
    rule: str
    line: int | None = None
    fixable: bool = False
    suggestion: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize the issue to a JSON-compatible dictionary."""
        data: dict[str, Any] = {
            "severity": self.severity,
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "rule": self.rule,
            "fixable": self.fixable,
        }
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationIssue:
        """Build an issue from a dictionary produced by to_dict().

        Raises:
            ValueError: If the severity is unknown.
            KeyError: If a required key is missing.
        """
        severity = data["severity"]
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {severity}")
        return cls(
            severity=severity,
            message=data["message"],
            file=data["file"],
            rule=data["rule"],
            line=data.get("line"),
            fixable=bool(data.get("fixable", False)),
            suggestion=data.get("suggestion", ""),
        )


@dataclass
class ValidationSummary:
    """Counters describing a validation result.

    Attributes:
        total_files: Number of files checked.
        valid_files: Number of checked files without error-severity issues.
        error_count: Number of error-severity issues.
        warning_count: Number of warning-severity issues.
        info_count: Number of info-severity issues.
        fixable_count: Number of issues marked fixable.
    """

    total_files: int = 0
    valid_files: int = 0
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    fixable_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total_files": self.total_files,
            "valid_files": self.valid_files,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "fixable_count": self.fixable_count,
        }


@dataclass
class ValidationResult:
    """Result of a checker run, or an aggregate of several runs.

    Attributes:
        name: Name of the checker that produced the result (e.g., "structure").
        issues: Issues found, in emission order.
        total_files: Number of files checked.
        valid_files: Number of checked files without errors.
    """

    name: str = ""
    issues: list[ValidationIssue] = field(default_factory=list)
    total_files: int = 0
    valid_files: int = 0

    @property
    def valid(self) -> bool:
        """False iff at least one error-severity issue exists."""
        return not any(issue.severity == "error" for issue in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    @property
    def infos(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "info"]

    @property
    def fixable(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.fixable]

    def add(self, issue: ValidationIssue) -> None:
        """Append an issue to the result."""
        self.issues.append(issue)

    def extend(self, issues: Iterable[ValidationIssue]) -> None:
        """Append several issues to the result."""
        self.issues.extend(issues)

    def summary(self) -> ValidationSummary:
        """Compute the summary counters for this result."""
        return ValidationSummary(
            total_files=self.total_files,
            valid_files=self.valid_files,
            error_count=len(self.errors),
            warning_count=len(self.warnings),
            info_count=len(self.infos),
            fixable_count=len(self.fixable),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the result to a JSON-compatible dictionary."""
        return {
            "name": self.name,
            "valid": self.valid,
            "issues": [issue.to_dict() for issue in self.issues],
            "summary": self.summary().to_dict(),
        }

    @classmethod
    def merge(cls, results: Iterable[ValidationResult], name: str = "") -> ValidationResult:
        """Aggregate several results into a single result.

        Args:
            results: Results to combine, in order.
            name: Name of the aggregated result.

        Returns:
            A new ValidationResult holding every issue and file counter.
        """
        merged = cls(name=name)
        for result in results:
            merged.issues.extend(result.issues)
            merged.total_files += result.total_files
            merged.valid_files += result.valid_files
        return merged


def summarize(results: Iterable[ValidationResult]) -> ValidationSummary:
    """Sum the summaries of several validation results.

    Args:
        results: Results to summarize. An empty iterable gives an all-zero summary.

    Returns:
        ValidationSummary with every counter added up.
    """
    total = ValidationSummary()
    for result in results:
        summary = result.summary()
        total.total_files += summary.total_files
        total.valid_files += summary.valid_files
        total.error_count += summary.error_count
        total.warning_count += summary.warning_count
        total.info_count += summary.info_count
        total.fixable_count += summary.fixable_count
    return total


class BaseValidator(ABC):
    """Abstract base class for project-level validators.

    Attributes:
        project_root: Root directory of the project being validated.
    """

    # Name reported in ValidationResult.name (must be set by subclasses)
    name: str = ""

    def __init__(self, project_root: Path) -> None:
        """Initialize validator.

        Args:
            project_root: Root directory of the project.
        """
        self.project_root = project_root

    @abstractmethod
    def validate(self) -> ValidationResult:
        """Run validation checks.

        Returns:
            ValidationResult containing the issues found.
        """

    def _relative(self, path: Path) -> str:
        """Return a project-relative POSIX path for issue reporting."""
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError:
            return path.as_posix()

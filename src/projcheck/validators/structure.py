"""Project structure checker.

Walks a project tree once and applies four groups of rules:

- required files at the project root (README.md, LICENSE, .gitignore)
- naming conventions for files and directories
- file permission hygiene
- recommendations for the detected project type (Go, Node, Python, Docker)
"""

from __future__ import annotations

import enum
import logging
import stat
from pathlib import Path

from projcheck.validators.base import BaseValidator, ValidationIssue, ValidationResult
from projcheck.validators.naming import is_camel_case, to_kebab_case, to_snake_case
from projcheck.validators.path_filter import WalkEntry, walk_project

logger = logging.getLogger(__name__)

# (file name, rule) pairs for files every project root must contain
REQUIRED_FILES = (
    ("README.md", "structure.readme.required"),
    ("LICENSE", "structure.license.required"),
    (".gitignore", "structure.gitignore.required"),
)

# Conventional names exempt from naming rules
NAMING_ALLOWLIST = frozenset(
    {
        "README.md",
        "LICENSE",
        "CHANGELOG.md",
        "CONTRIBUTING.md",
        "Dockerfile",
        "Makefile",
    }
)

# JavaScript/TypeScript modules conventionally use camelCase file names
CAMEL_CASE_EXEMPT_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx"})

NON_EXECUTABLE_EXTENSIONS = frozenset(
    {".md", ".txt", ".json", ".yaml", ".yml", ".xml", ".html", ".css", ".js", ".ts"}
)

NAMING_RULE = "quality.naming.conventions"


class ProjectType(enum.Enum):
    """Project types recognized by marker files, in detection priority order."""

    GO = "go"
    NODE = "node"
    PYTHON = "python"
    DOCKER = "docker"


# Marker files per project type; the first type with any marker present wins.
PROJECT_TYPE_MARKERS: tuple[tuple[ProjectType, tuple[str, ...]], ...] = (
    (ProjectType.GO, ("go.mod",)),
    (ProjectType.NODE, ("package.json",)),
    (ProjectType.PYTHON, ("setup.py", "pyproject.toml", "requirements.txt")),
    (ProjectType.DOCKER, ("Dockerfile",)),
)


def detect_project_type(project_root: Path) -> ProjectType | None:
    """Detect the project type from marker files at the root.

    Args:
        project_root: Root directory of the project.

    Returns:
        The first matching ProjectType, or None if no marker is present.
    """
    for project_type, markers in PROJECT_TYPE_MARKERS:
        if any((project_root / marker).exists() for marker in markers):
            return project_type
    return None


def expected_name(name: str, is_dir: bool) -> str | None:
    """Return the conventional replacement for an entry name.

    Checks, in order: spaces, camelCase, uppercase letters (files only).

    Args:
        name: Entry name (not a path).
        is_dir: Whether the entry is a directory.

    Returns:
        The proposed name, or None if the name already follows conventions.
    """
    if " " in name:
        return name.replace(" ", "_")

    if is_dir:
        return to_kebab_case(name) if is_camel_case(name) else None

    path = Path(name)
    base, ext = path.stem, path.suffix
    if is_camel_case(base):
        if ext.lower() in CAMEL_CASE_EXEMPT_EXTENSIONS:
            return None
        return to_snake_case(base) + ext

    if name.lower() != name:
        return name.lower()
    return None


class StructureChecker(BaseValidator):
    """Checks project layout, naming and permissions in a single walk.

    Raises StructureWalkError from validate() if any part of the tree cannot
    be read; no partial result is returned in that case.
    """

    name = "structure"

    def validate(self) -> ValidationResult:
        """Run all structure checks.

        Returns:
            ValidationResult with required-file, naming, permission and
            project-type issues.

        Raises:
            StructureWalkError: If the walk fails.
        """
        result = ValidationResult(name=self.name)
        self._check_required_files(result)

        for entry in walk_project(self.project_root):
            if not entry.is_dir:
                result.total_files += 1
            entry_issues = [*self._check_naming(entry), *self._check_permissions(entry)]
            if not entry.is_dir and not any(i.severity == "error" for i in entry_issues):
                result.valid_files += 1
            result.extend(entry_issues)

        project_type = detect_project_type(self.project_root)
        if project_type is not None:
            logger.debug("Detected %s project at %s", project_type.value, self.project_root)
            result.extend(self._check_project_type(project_type))

        logger.debug(
            "Structure check of %s found %d issue(s) in %d file(s)",
            self.project_root,
            len(result.issues),
            result.total_files,
        )
        return result

    def _check_required_files(self, result: ValidationResult) -> None:
        for filename, rule in REQUIRED_FILES:
            if not (self.project_root / filename).exists():
                result.add(
                    ValidationIssue(
                        severity="error",
                        message=f"Required file {filename} is missing",
                        file=filename,
                        rule=rule,
                        fixable=True,
                    )
                )

    def _check_naming(self, entry: WalkEntry) -> list[ValidationIssue]:
        name = entry.name
        if name.startswith(".") or name in NAMING_ALLOWLIST:
            return []

        proposed = expected_name(name, entry.is_dir)
        if proposed is None:
            return []

        kind = "Directory" if entry.is_dir else "File"
        if " " in name:
            message = f"{kind} name '{name}' contains spaces"
        elif proposed != name.lower():
            message = f"{kind} name '{name}' uses camelCase, expected '{proposed}'"
        else:
            message = f"{kind} name '{name}' should be lowercase"

        return [
            ValidationIssue(
                severity="warning",
                message=message,
                file=entry.relative,
                rule=NAMING_RULE,
                fixable=True,
                suggestion=proposed,
            )
        ]

    def _check_permissions(self, entry: WalkEntry) -> list[ValidationIssue]:
        if entry.is_dir:
            return []

        issues: list[ValidationIssue] = []
        mode = entry.permissions
        if mode & 0o077:
            issues.append(
                ValidationIssue(
                    severity="warning",
                    message=(
                        f"File is accessible by group or others "
                        f"({stat.filemode(entry.mode)}), expected rw------- or stricter"
                    ),
                    file=entry.relative,
                    rule="security.file_permissions",
                    suggestion="rw-------",
                )
            )

        if mode & 0o111 and entry.path.suffix.lower() in NON_EXECUTABLE_EXTENSIONS:
            issues.append(
                ValidationIssue(
                    severity="info",
                    message=f"File has executable permission but {entry.path.suffix} files are not executable",
                    file=entry.relative,
                    rule="security.executable_permissions",
                )
            )
        return issues

    def _check_project_type(self, project_type: ProjectType) -> list[ValidationIssue]:
        root = self.project_root
        issues: list[ValidationIssue] = []

        if project_type is ProjectType.GO:
            if not (root / "main.go").exists() and not (root / "cmd").is_dir():
                issues.append(
                    ValidationIssue(
                        severity="warning",
                        message="Go project has no main.go or cmd/ directory",
                        file="main.go",
                        rule="go.entry_point",
                    )
                )
            for dirname in ("pkg", "internal"):
                if not (root / dirname).is_dir():
                    issues.append(
                        ValidationIssue(
                            severity="info",
                            message=f"Consider adding a {dirname}/ directory",
                            file=dirname,
                            rule="go.recommended_structure",
                            suggestion=f"{dirname}/",
                        )
                    )

        elif project_type is ProjectType.NODE:
            if not (root / "src").is_dir() and not (root / "index.js").exists():
                issues.append(
                    ValidationIssue(
                        severity="info",
                        message="Node project has no src/ directory or index.js entry point",
                        file="src",
                        rule="node.entry_point",
                        suggestion="src/",
                    )
                )

        elif project_type is ProjectType.PYTHON:
            if not (root / "src").is_dir():
                issues.append(
                    ValidationIssue(
                        severity="info",
                        message="Consider using a src/ layout for the Python package",
                        file="src",
                        rule="python.src_layout",
                        suggestion="src/",
                    )
                )

        elif project_type is ProjectType.DOCKER:
            if not (root / ".dockerignore").exists():
                issues.append(
                    ValidationIssue(
                        severity="warning",
                        message="Docker project has no .dockerignore file",
                        file=".dockerignore",
                        rule="docker.dockerignore",
                        fixable=True,
                    )
                )

        return issues

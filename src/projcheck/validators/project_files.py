"""Content checks for project files that are not schema driven.

Each check_* function reads one file and returns the problems it found as
plain messages. ProjectFileValidator runs them over the manifests present at
the project root and turns failures into issues.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from projcheck.validators.base import BaseValidator, ValidationIssue, ValidationResult


def check_go_mod(path: Path) -> list[str]:
    """Check a go.mod file for a module line and a usable go directive.

    Raises:
        OSError: If the file cannot be read.
    """
    content = path.read_text(encoding="utf-8")
    problems: list[str] = []

    lines = [line.strip() for line in content.split("\n")]
    if not any(line.startswith("module ") for line in lines):
        problems.append("missing module declaration")

    go_lines = [line for line in lines if line.startswith("go ") or line == "go"]
    if not go_lines:
        problems.append("missing go version directive")
    for line in go_lines:
        version = line[len("go") :].strip()
        if not version or version == "1":
            problems.append(f"invalid go version: '{version}'")

    return problems


def check_template(path: Path) -> list[str]:
    """Check that a template file contains template syntax ({{ and }})."""
    content = path.read_text(encoding="utf-8")
    if "{{" not in content or "}}" not in content:
        return ["template file must contain template syntax ({{ }})"]
    return []


class ProjectFileValidator(BaseValidator):
    """Validates manifest files found at the project root.

    Covers manifests that have no registered schema (go.mod). Missing
    manifests are not reported here; the structure checker handles layout,
    and package.json or Dockerfile go through the config file validator.
    """

    name = "project-files"

    def validate(self) -> ValidationResult:
        result = ValidationResult(name=self.name)

        checks: dict[str, tuple[Callable[[Path], list[str]], str]] = {
            "go.mod": (check_go_mod, "project.go_mod"),
        }
        for filename, (check, rule) in checks.items():
            path = self.project_root / filename
            if not path.is_file():
                continue
            result.total_files += 1
            try:
                problems = check(path)
            except (OSError, UnicodeDecodeError) as e:
                problems = [f"cannot read file: {e}"]
            for problem in problems:
                result.add(
                    ValidationIssue(
                        severity="error",
                        message=f"Validation failed for {filename}: {problem}",
                        file=filename,
                        rule=rule,
                    )
                )
            if not problems:
                result.valid_files += 1

        return result

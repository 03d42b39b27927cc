"""Format dispatcher and per-format file checkers.

Routes a file path to exactly one checker, chosen by lowercase extension
first and exact base name second. Paths that match neither resolve to the
unknown-type checker, so check_file() always returns a result.
"""

from __future__ import annotations

import enum
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path

import yaml

from projcheck.validators.base import ValidationIssue, ValidationResult
from projcheck.validators.naming import is_potential_secret, validate_env_key
from projcheck.validators.schema_registry import SchemaRegistry, create_default_registry

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

logger = logging.getLogger(__name__)


class FileKind(enum.Enum):
    """Closed set of file formats the dispatcher understands."""

    JSON = "json"
    YAML = "yaml"
    TOML = "toml"
    ENV = "env"
    DOCKERFILE = "dockerfile"
    MAKEFILE = "makefile"
    GITIGNORE = "gitignore"
    DOCKERIGNORE = "dockerignore"
    UNKNOWN = "unknown"


EXTENSION_KINDS: dict[str, FileKind] = {
    ".json": FileKind.JSON,
    ".yaml": FileKind.YAML,
    ".yml": FileKind.YAML,
    ".toml": FileKind.TOML,
    ".env": FileKind.ENV,
}

BASENAME_KINDS: dict[str, FileKind] = {
    "Dockerfile": FileKind.DOCKERFILE,
    "Makefile": FileKind.MAKEFILE,
    ".gitignore": FileKind.GITIGNORE,
    ".dockerignore": FileKind.DOCKERIGNORE,
}

GITIGNORE_COMMON_PATTERNS = ("node_modules/", "*.log", ".env", "dist/", "build/")

DOCKERIGNORE_COMMON_PATTERNS = ("node_modules", ".git", "*.md", "Dockerfile", ".dockerignore")

# Instructions a Dockerfile must contain, with the rule emitted when absent.
DOCKERFILE_REQUIRED_INSTRUCTIONS = (
    ("FROM", "docker.from_required"),
    ("WORKDIR", "docker.workdir_required"),
    ("COPY", "docker.copy_required"),
)

MAKEFILE_DIRECTIVES = (
    "include",
    "-include",
    "sinclude",
    "ifeq",
    "ifneq",
    "ifdef",
    "ifndef",
    "else",
    "endif",
    "define",
    "endef",
    "export",
    "unexport",
    "override",
    "vpath",
)

ENV_UNQUOTED_VALUE_MAX_LENGTH = 20


def detect_file_kind(path: Path | str) -> FileKind:
    """Classify a path by extension, then by exact base name.

    Args:
        path: File path to classify. The file does not need to exist.

    Returns:
        The detected FileKind; FileKind.UNKNOWN when nothing matches.
    """
    p = Path(path)
    name = p.name

    # ".env" and ".env.local" have no suffix in pathlib terms
    if name == ".env" or name.startswith(".env."):
        return FileKind.ENV

    kind = EXTENSION_KINDS.get(p.suffix.lower())
    if kind is not None:
        return kind

    return BASENAME_KINDS.get(name, FileKind.UNKNOWN)


def is_config_file(path: Path | str) -> bool:
    return detect_file_kind(path) is not FileKind.UNKNOWN


Checker = Callable[[str, str], list[ValidationIssue]]


class FormatDispatcher:
    """Dispatches files to format-specific checkers.

    Env-file checks consult the registry's rule catalog so that disabling
    "config.env.key_format" or "config.env.secrets" silences those checks.

    Attributes:
        registry: Schema registry used for rule toggles.
    """

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        """Initialize dispatcher.

        Args:
            registry: Registry holding rule toggles. A default registry is
                created when omitted.
        """
        self.registry = registry if registry is not None else create_default_registry()
        self._checkers: dict[FileKind, Checker] = {
            FileKind.JSON: self._check_json,
            FileKind.YAML: self._check_yaml,
            FileKind.TOML: self._check_toml,
            FileKind.ENV: self._check_env,
            FileKind.DOCKERFILE: self._check_dockerfile,
            FileKind.MAKEFILE: self._check_makefile,
            FileKind.GITIGNORE: self._check_gitignore,
            FileKind.DOCKERIGNORE: self._check_dockerignore,
        }

    def check_file(self, path: Path | str, display_path: str | None = None) -> ValidationResult:
        """Check one file with the checker selected for its format.

        Args:
            path: Path of the file on disk.
            display_path: Path to report in issues. Defaults to str(path).

        Returns:
            ValidationResult for the file. Unknown formats and unreadable
            files produce issues, never exceptions.
        """
        p = Path(path)
        shown = display_path if display_path is not None else str(path)
        kind = detect_file_kind(p)
        result = ValidationResult(name=f"format:{kind.value}", total_files=1)

        checker = self._checkers.get(kind)
        if checker is None:
            result.add(
                ValidationIssue(
                    severity="info",
                    message="Unknown configuration file type",
                    file=shown,
                    rule="config.unknown_type",
                )
            )
        else:
            try:
                content = p.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Cannot read %s: %s", p, e)
                result.add(
                    ValidationIssue(
                        severity="error",
                        message=f"Cannot read file: {e}",
                        file=shown,
                        rule="config.file_access",
                    )
                )
            else:
                logger.debug("Checking %s as %s", p, kind.value)
                result.extend(checker(shown, content))

        if result.valid:
            result.valid_files = 1
        return result

    # -- syntax checkers ------------------------------------------------------

    def _check_json(self, file: str, content: str) -> list[ValidationIssue]:
        try:
            json.loads(content)
        except json.JSONDecodeError as e:
            return [
                ValidationIssue(
                    severity="error",
                    message=f"Invalid JSON syntax: {e.msg}",
                    file=file,
                    line=e.lineno,
                    rule="config.json.syntax",
                )
            ]
        return []

    def _check_yaml(self, file: str, content: str) -> list[ValidationIssue]:
        try:
            # Multi-document streams (e.g. Kubernetes manifests) are valid YAML
            for _ in yaml.safe_load_all(content):
                pass
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            return [
                ValidationIssue(
                    severity="error",
                    message=f"Invalid YAML syntax: {e}",
                    file=file,
                    line=mark.line + 1 if mark is not None else None,
                    rule="config.yaml.syntax",
                )
            ]
        return []

    def _check_toml(self, file: str, content: str) -> list[ValidationIssue]:
        try:
            tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            return [
                ValidationIssue(
                    severity="error",
                    message=f"Invalid TOML syntax: {e}",
                    file=file,
                    rule="config.toml.syntax",
                )
            ]
        return []

    # -- line-oriented checkers -----------------------------------------------

    def _check_env(self, file: str, content: str) -> list[ValidationIssue]:
        """Check KEY=value lines.

        The quoting and secret checks are advisory heuristics that point at
        values worth a second look. They do not detect secrets reliably.
        """
        issues: list[ValidationIssue] = []
        check_keys = self.registry.is_rule_enabled("config.env.key_format")
        check_secrets = self.registry.is_rule_enabled("config.env.secrets")

        for line_num, raw_line in enumerate(content.split("\n"), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                issues.append(
                    ValidationIssue(
                        severity="error",
                        message="Invalid environment variable format (expected KEY=value)",
                        file=file,
                        line=line_num,
                        rule="config.env.format",
                    )
                )
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export ") :].strip()
            value = value.strip()
            quoted = '"' in line or "'" in line

            if not quoted and len(value) > ENV_UNQUOTED_VALUE_MAX_LENGTH:
                issues.append(
                    ValidationIssue(
                        severity="warning",
                        message="Potentially sensitive value should be quoted",
                        file=file,
                        line=line_num,
                        rule="config.env.unquoted_value",
                    )
                )

            if check_keys:
                try:
                    validate_env_key(key)
                except ValueError as e:
                    issues.append(
                        ValidationIssue(
                            severity="warning",
                            message=str(e),
                            file=file,
                            line=line_num,
                            rule="config.env.key_format",
                            suggestion=key.upper().replace("-", "_"),
                        )
                    )

            if check_secrets and is_potential_secret(key, value.strip("\"'")):
                issues.append(
                    ValidationIssue(
                        severity="warning",
                        message=(
                            f"'{key}' may hold a secret; make sure this file is "
                            "not committed"
                        ),
                        file=file,
                        line=line_num,
                        rule="config.env.secrets",
                    )
                )

        return issues

    def _check_dockerfile(self, file: str, content: str) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for instruction, rule in DOCKERFILE_REQUIRED_INSTRUCTIONS:
            if f"{instruction} " not in content:
                issues.append(
                    ValidationIssue(
                        severity="error",
                        message=f"Dockerfile missing {instruction} instruction",
                        file=file,
                        rule=rule,
                    )
                )
        return issues

    def _check_makefile(self, file: str, content: str) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        previous = ""
        for line_num, line in enumerate(content.split("\n"), start=1):
            continued = previous.rstrip().endswith("\\")
            previous = line
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or continued:
                continue
            if line.startswith("\t"):
                continue
            if ":" in stripped or "=" in stripped:
                continue
            if stripped.split()[0] in MAKEFILE_DIRECTIVES:
                continue
            issues.append(
                ValidationIssue(
                    severity="warning",
                    message="Potential Makefile syntax issue (recipes must be indented with a tab)",
                    file=file,
                    line=line_num,
                    rule="makefile.syntax",
                )
            )
        return issues

    # -- ignore-file heuristics -----------------------------------------------

    def _check_gitignore(self, file: str, content: str) -> list[ValidationIssue]:
        return _missing_patterns(
            file, content, GITIGNORE_COMMON_PATTERNS, "gitignore.common_patterns"
        )

    def _check_dockerignore(self, file: str, content: str) -> list[ValidationIssue]:
        return _missing_patterns(
            file, content, DOCKERIGNORE_COMMON_PATTERNS, "dockerignore.common_patterns"
        )


def _missing_patterns(
    file: str,
    content: str,
    patterns: tuple[str, ...],
    rule: str,
) -> list[ValidationIssue]:
    # "node_modules" satisfies "node_modules/" and the other way round
    present = {line.strip().rstrip("/") for line in content.split("\n")}
    return [
        ValidationIssue(
            severity="info",
            message=f"Consider adding common pattern: {pattern}",
            file=file,
            rule=rule,
            suggestion=pattern,
        )
        for pattern in patterns
        if pattern.rstrip("/") not in present
    ]

"""Schema-aware validation of configuration files.

Every configuration file in the project goes through the format dispatcher
for syntax checks. Files that map to a registered schema are then parsed and
validated against it, and the enabled catalog rules for their file type run
on the parsed data.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from projcheck.validators.base import BaseValidator, ValidationIssue, ValidationResult
from projcheck.validators.formats import FileKind, FormatDispatcher, detect_file_kind
from projcheck.validators.path_filter import iter_project_files
from projcheck.validators.schema_registry import (
    ConfigValidationResult,
    SchemaRegistry,
    SchemaValidationError,
    create_default_registry,
    validate_against_schema,
)

logger = logging.getLogger(__name__)

COMPOSE_FILE_NAMES = frozenset(
    {"docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml"}
)


def schema_key_for(path: str | Path) -> str | None:
    """Map a project-relative path to the schema key that describes it.

    Args:
        path: Project-relative path of the file.

    Returns:
        Schema key such as "package.json" or "workflow.yml", or None.
    """
    p = PurePosixPath(Path(path).as_posix())
    if p.name in COMPOSE_FILE_NAMES:
        return "docker-compose.yml"
    if p.parent.parts[-2:] == (".github", "workflows") and p.suffix in (".yml", ".yaml"):
        return "workflow.yml"
    return p.name


def _load(path: Path, kind: FileKind) -> Any:
    content = path.read_text(encoding="utf-8")
    if kind is FileKind.JSON:
        return json.loads(content)
    return yaml.safe_load(content)


def _normalize_workflow(data: Any) -> Any:
    # YAML 1.1 reads a bare `on:` key as boolean True
    if isinstance(data, dict) and True in data and "on" not in data:
        data = dict(data)
        data["on"] = data.pop(True)
    return data


def validate_config_file(
    path: Path,
    registry: SchemaRegistry,
    display_path: str | None = None,
    dispatcher: FormatDispatcher | None = None,
) -> ValidationResult:
    """Check one configuration file for syntax, schema and rule violations.

    Args:
        path: Path of the file on disk.
        registry: Registry providing schemas and rule toggles.
        display_path: Path to report in issues (and to derive the schema
            key from). Defaults to str(path).
        dispatcher: Dispatcher to reuse; one is created from the registry
            when omitted.

    Returns:
        ValidationResult for the file.
    """
    shown = display_path if display_path is not None else str(path)
    dispatcher = dispatcher if dispatcher is not None else FormatDispatcher(registry)
    result = dispatcher.check_file(path, display_path=shown)

    kind = detect_file_kind(path)
    key = schema_key_for(shown)
    schema = registry.get(key) if key is not None else None
    if schema is None or kind not in (FileKind.JSON, FileKind.YAML) or not result.valid:
        return result

    try:
        data = _load(path, kind)
    except (OSError, ValueError, yaml.YAMLError) as e:
        # Syntax already passed, so this is a race with a concurrent writer
        logger.debug("Cannot re-read %s: %s", path, e)
        return result
    if key == "workflow.yml":
        data = _normalize_workflow(data)

    schema_result = ConfigValidationResult()
    try:
        validate_against_schema(data, schema, schema_result)
    except SchemaValidationError as e:
        result.add(
            ValidationIssue(
                severity="error",
                message=f"{schema.title}: {e}",
                file=shown,
                rule="schema.root_type",
            )
        )
        result.valid_files = 0
        return result

    for error in [*schema_result.errors, *schema_result.warnings]:
        result.add(
            ValidationIssue(
                severity=error.severity,
                message=f"{error.field}: {error.message}",
                file=shown,
                rule=error.rule,
            )
        )

    for rule in registry.get_enabled_rules(key):
        if rule.check is None:
            continue
        for field_name, message in rule.check(data):
            result.add(
                ValidationIssue(
                    severity=rule.severity,
                    message=f"{field_name}: {message}",
                    file=shown,
                    rule=rule.id,
                )
            )

    if not result.valid:
        result.valid_files = 0
    return result


class ConfigFileValidator(BaseValidator):
    """Validates every configuration file found in the project tree."""

    name = "config"

    def __init__(self, project_root: Path, registry: SchemaRegistry | None = None) -> None:
        """Initialize validator.

        Args:
            project_root: Root directory of the project.
            registry: Registry with schemas and rules. A default registry is
                created when omitted.
        """
        super().__init__(project_root)
        self.registry = registry if registry is not None else create_default_registry()
        self.dispatcher = FormatDispatcher(self.registry)

    def validate(self) -> ValidationResult:
        """Check each configuration file in the project.

        Raises:
            StructureWalkError: If the project tree cannot be walked.
        """
        results: list[ValidationResult] = []
        for entry in iter_project_files(self.project_root):
            if detect_file_kind(entry.path) is FileKind.UNKNOWN:
                continue
            results.append(
                validate_config_file(
                    entry.path,
                    self.registry,
                    display_path=entry.relative,
                    dispatcher=self.dispatcher,
                )
            )
        logger.debug("Checked %d configuration file(s)", len(results))
        return ValidationResult.merge(results, name=self.name)

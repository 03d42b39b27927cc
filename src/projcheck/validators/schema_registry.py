"""Schema registry for configuration file validation.

A SchemaRegistry owns named ConfigSchema objects (keyed by file type, e.g.
"package.json") and a catalog of togglable ValidationSchemaRule entries per
file type. Registries are plain values: each caller builds its own through
create_default_registry(), so there is no shared module-level state.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from projcheck.validators.base import Severity

PropertyType = Literal["string", "number", "boolean", "array", "object"]

ConfigErrorType = Literal["missing_required", "type_error", "validation_error"]

# A rule check receives parsed file data and returns (field, message) pairs.
RuleCheck = Callable[[Mapping[str, Any]], list[tuple[str, str]]]


class SchemaValidationError(ValueError):
    """Raised when data or a schema cannot be evaluated at all."""


@dataclass(frozen=True)
class PropertySchema:
    """Constraints for one property.

    Constraints that do not belong to the declared type are ignored.

    Attributes:
        type: Declared type of the property.
        description: Human-readable description.
        min_length: Minimum string length (inclusive).
        max_length: Maximum string length (inclusive).
        pattern: Regular expression the whole string must match.
        enum: Allowed string values.
        minimum: Minimum number value (inclusive).
        maximum: Maximum number value (inclusive).
    """

    type: PropertyType
    description: str = ""
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    enum: tuple[str, ...] | None = None
    minimum: float | None = None
    maximum: float | None = None


@dataclass(frozen=True)
class ConfigSchema:
    """Shape of one configuration file type.

    The schema is a constraint set, not a closed set: keys that are not
    declared in properties are accepted without checks.
    """

    title: str
    description: str = ""
    required: frozenset[str] = frozenset()
    properties: Mapping[str, PropertySchema] = field(default_factory=dict)


@dataclass
class ValidationSchemaRule:
    """A named rule bound to one or more file types.

    Attributes:
        id: Stable dotted identifier; also the rule of emitted issues.
        name: Short display name.
        description: What the rule checks.
        category: Grouping used in rule catalogs (e.g., "naming", "security").
        severity: Severity of the issues the rule emits.
        enabled: Live toggle; disabled rules are skipped by checkers.
        file_types: File type keys the rule applies to.
        pattern: Optional regular expression the rule is built around.
        check: Optional callable returning (field, message) pairs for data.
    """

    id: str
    name: str
    description: str
    category: str
    severity: Severity
    enabled: bool = True
    file_types: tuple[str, ...] = ()
    pattern: str | None = None
    check: RuleCheck | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "severity": self.severity,
            "enabled": self.enabled,
            "file_types": list(self.file_types),
            "pattern": self.pattern,
        }


@dataclass(frozen=True)
class ConfigValidationError:
    """One schema violation.

    Attributes:
        field: Property name.
        value: Offending value ("" for missing properties).
        type: "missing_required", "type_error" or "validation_error".
        message: Human-readable description.
        rule: Dotted rule identifier (e.g., "schema.max_length").
        severity: Severity level.
    """

    field: str
    value: Any
    type: ConfigErrorType
    message: str
    rule: str
    severity: Severity = "error"


@dataclass
class ConfigValidationSummary:
    """Counters for a schema validation run."""

    total_properties: int = 0
    valid_properties: int = 0
    error_count: int = 0
    warning_count: int = 0
    missing_required: int = 0


@dataclass
class ConfigValidationResult:
    """Accumulated outcome of validating data against a schema."""

    valid: bool = True
    errors: list[ConfigValidationError] = field(default_factory=list)
    warnings: list[ConfigValidationError] = field(default_factory=list)
    summary: ConfigValidationSummary = field(default_factory=ConfigValidationSummary)

    def add_error(self, error: ConfigValidationError) -> None:
        self.errors.append(error)
        self.summary.error_count += 1
        self.valid = False


class SchemaRegistry:
    """Mutable in-memory registry of schemas and rules.

    Not designed for concurrent mutation; give each worker its own instance.

    Example:
        >>> registry = create_default_registry()
        >>> schema = registry.get("package.json")
        >>> result = ConfigValidationResult()
        >>> validate_against_schema({"name": "x"}, schema, result)
        >>> result.summary.missing_required
        1
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._schemas: dict[str, ConfigSchema] = {}
        self._rules: dict[str, list[ValidationSchemaRule]] = {}

    # -- schemas --------------------------------------------------------------

    def get(self, name: str) -> ConfigSchema | None:
        """Look up a schema by file type key.

        Returns:
            The schema, or None if no schema is registered under that name.
        """
        return self._schemas.get(name)

    def has(self, name: str) -> bool:
        return name in self._schemas

    def add(self, name: str, schema: ConfigSchema) -> None:
        """Register a schema, replacing any schema with the same name."""
        self._schemas[name] = schema

    def remove(self, name: str) -> None:
        """Remove a schema. Removing an unknown name is a no-op."""
        self._schemas.pop(name, None)

    def list(self) -> list[str]:
        """List registered schema names in sorted order."""
        return sorted(self._schemas)

    # -- rules ----------------------------------------------------------------

    def get_rules(self, file_type: str) -> list[ValidationSchemaRule]:
        """Return the rules registered for a file type (empty if none)."""
        return list(self._rules.get(file_type, []))

    def get_enabled_rules(self, file_type: str) -> list[ValidationSchemaRule]:
        return [rule for rule in self._rules.get(file_type, []) if rule.enabled]

    def add_rule(self, file_type: str, rule: ValidationSchemaRule) -> None:
        """Bind a rule to a file type.

        Raises:
            ValueError: If a rule with the same id is already bound to the file type.
        """
        rules = self._rules.setdefault(file_type, [])
        if any(existing.id == rule.id for existing in rules):
            raise ValueError(
                f"Rule '{rule.id}' already registered for file type '{file_type}'"
            )
        rules.append(rule)

    def remove_rule(self, file_type: str, rule_id: str) -> bool:
        """Unbind a rule from a file type.

        Returns:
            True if a rule was removed.
        """
        rules = self._rules.get(file_type, [])
        for index, rule in enumerate(rules):
            if rule.id == rule_id:
                del rules[index]
                return True
        return False

    def find_rule(self, rule_id: str) -> ValidationSchemaRule | None:
        for rules in self._rules.values():
            for rule in rules:
                if rule.id == rule_id:
                    return rule
        return None

    def set_rule_enabled(self, rule_id: str, enabled: bool) -> None:
        """Toggle a rule on or off everywhere it is bound.

        Raises:
            KeyError: If no rule with that id is registered.
        """
        found = False
        for rules in self._rules.values():
            for rule in rules:
                if rule.id == rule_id:
                    rule.enabled = enabled
                    found = True
        if not found:
            raise KeyError(f"Unknown rule: {rule_id}")

    def is_rule_enabled(self, rule_id: str) -> bool:
        """Check a rule's toggle. Rules outside the catalog count as enabled."""
        rule = self.find_rule(rule_id)
        return rule is None or rule.enabled

    def list_rules(self) -> list[ValidationSchemaRule]:
        """List every catalog rule once, sorted by id."""
        seen: dict[str, ValidationSchemaRule] = {}
        for rules in self._rules.values():
            for rule in rules:
                seen.setdefault(rule.id, rule)
        return [seen[rule_id] for rule_id in sorted(seen)]

    def file_types(self) -> list[str]:
        """List file types that have rules bound to them."""
        return sorted(file_type for file_type, rules in self._rules.items() if rules)


# -----------------------------------------------------------------------------
# Schema evaluation
# -----------------------------------------------------------------------------


def validate_against_schema(
    data: Any,
    schema: ConfigSchema,
    result: ConfigValidationResult,
) -> None:
    """Validate parsed data against a schema, accumulating into result.

    Args:
        data: Parsed configuration data. Must be a mapping.
        schema: Schema to check against.
        result: Result to accumulate errors and counters into.

    Raises:
        SchemaValidationError: If data is not a mapping or a schema pattern
            is not a valid regular expression.
    """
    if not isinstance(data, Mapping):
        raise SchemaValidationError("data must be an object")

    for name in sorted(schema.required):
        result.summary.total_properties += 1
        if name not in data:
            result.add_error(
                ConfigValidationError(
                    field=name,
                    value="",
                    type="missing_required",
                    message=f"Required property '{name}' is missing",
                    rule="schema.required_property",
                )
            )
            result.summary.missing_required += 1
        else:
            result.summary.valid_properties += 1

    for key, value in data.items():
        prop = schema.properties.get(key)
        if prop is not None:
            _validate_property(key, value, prop, result)


def _matches_type(value: Any, prop_type: str) -> bool:
    if prop_type == "string":
        return isinstance(value, str)
    if prop_type == "number":
        # bool is an int subclass but never a number here
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if prop_type == "boolean":
        return isinstance(value, bool)
    if prop_type == "array":
        return isinstance(value, list)
    if prop_type == "object":
        return isinstance(value, Mapping)
    # Unknown declared types carry no constraints
    return True


def _validate_property(
    key: str,
    value: Any,
    prop: PropertySchema,
    result: ConfigValidationResult,
) -> None:
    if not _matches_type(value, prop.type):
        result.add_error(
            ConfigValidationError(
                field=key,
                value=value,
                type="type_error",
                message=f"Expected {prop.type} type",
                rule="schema.type",
            )
        )
        return

    if prop.type == "string":
        _validate_string(key, value, prop, result)
    elif prop.type == "number":
        _validate_number(key, value, prop, result)


def _validate_string(
    key: str,
    value: str,
    prop: PropertySchema,
    result: ConfigValidationResult,
) -> None:
    if prop.min_length is not None and len(value) < prop.min_length:
        result.add_error(
            ConfigValidationError(
                field=key,
                value=value,
                type="validation_error",
                message=f"String too short, minimum length is {prop.min_length}",
                rule="schema.min_length",
            )
        )

    if prop.max_length is not None and len(value) > prop.max_length:
        result.add_error(
            ConfigValidationError(
                field=key,
                value=value,
                type="validation_error",
                message=f"String too long, maximum length is {prop.max_length}",
                rule="schema.max_length",
            )
        )

    if prop.pattern is not None:
        try:
            compiled = re.compile(prop.pattern)
        except re.error as e:
            raise SchemaValidationError(
                f"invalid pattern for property '{key}': {e}"
            ) from e
        if compiled.fullmatch(value) is None:
            result.add_error(
                ConfigValidationError(
                    field=key,
                    value=value,
                    type="validation_error",
                    message=f"String does not match pattern: {prop.pattern}",
                    rule="schema.pattern",
                )
            )

    if prop.enum is not None and value not in prop.enum:
        result.add_error(
            ConfigValidationError(
                field=key,
                value=value,
                type="validation_error",
                message=f"Value must be one of: {', '.join(prop.enum)}",
                rule="schema.enum",
            )
        )


def _validate_number(
    key: str,
    value: float,
    prop: PropertySchema,
    result: ConfigValidationResult,
) -> None:
    if prop.minimum is not None and value < prop.minimum:
        result.add_error(
            ConfigValidationError(
                field=key,
                value=value,
                type="validation_error",
                message=f"Value too small, minimum is {prop.minimum:g}",
                rule="schema.minimum",
            )
        )

    if prop.maximum is not None and value > prop.maximum:
        result.add_error(
            ConfigValidationError(
                field=key,
                value=value,
                type="validation_error",
                message=f"Value too large, maximum is {prop.maximum:g}",
                rule="schema.maximum",
            )
        )


# -----------------------------------------------------------------------------
# Default registry
# -----------------------------------------------------------------------------


def create_default_registry() -> SchemaRegistry:
    """Create a registry seeded with the built-in schemas and rule catalog.

    Each call returns a new, independent registry.

    Returns:
        A populated SchemaRegistry.
    """
    # Import here to avoid circular imports
    from projcheck.validators.builtin_schemas import BUILTIN_SCHEMAS, builtin_rules

    registry = SchemaRegistry()
    for name, schema in BUILTIN_SCHEMAS.items():
        registry.add(name, schema)
    for file_type, rule in builtin_rules():
        registry.add_rule(file_type, rule)
    return registry

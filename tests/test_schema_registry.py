"""Tests for the schema registry and schema evaluation."""

from __future__ import annotations

import pytest

from projcheck.validators.schema_registry import (
    ConfigSchema,
    ConfigValidationResult,
    PropertySchema,
    SchemaRegistry,
    SchemaValidationError,
    ValidationSchemaRule,
    create_default_registry,
    validate_against_schema,
)


def _validate(data: object, schema: ConfigSchema) -> ConfigValidationResult:
    result = ConfigValidationResult()
    validate_against_schema(data, schema, result)
    return result


def _rule(rule_id: str = "custom.rule") -> ValidationSchemaRule:
    return ValidationSchemaRule(
        id=rule_id,
        name="Custom",
        description="A custom rule",
        category="test",
        severity="warning",
    )


# -----------------------------------------------------------------------------
# Registry Tests
# -----------------------------------------------------------------------------


class TestSchemaRegistry:
    """Tests for schema and rule bookkeeping."""

    def test_default_registry_schemas(self) -> None:
        """Test the default registry carries the five built-in schemas."""
        registry = create_default_registry()
        assert registry.list() == [
            ".eslintrc.json",
            "docker-compose.yml",
            "package.json",
            "tsconfig.json",
            "workflow.yml",
        ]

    def test_get_unknown_schema(self) -> None:
        """Test looking up an unknown schema returns None."""
        assert create_default_registry().get("unknown.json") is None

    def test_add_and_remove_schema(self) -> None:
        """Test schemas can be added, replaced and removed."""
        registry = SchemaRegistry()
        registry.add("app.json", ConfigSchema(title="App"))
        registry.add("app.json", ConfigSchema(title="App v2"))
        assert registry.has("app.json")
        schema = registry.get("app.json")
        assert schema is not None and schema.title == "App v2"

        registry.remove("app.json")
        registry.remove("app.json")
        assert not registry.has("app.json")

    def test_default_registries_are_independent(self) -> None:
        """Test toggling a rule in one registry leaves another untouched."""
        first = create_default_registry()
        second = create_default_registry()
        first.set_rule_enabled("package_json.license", False)

        assert first.is_rule_enabled("package_json.license") is False
        assert second.is_rule_enabled("package_json.license") is True

    def test_add_rule_rejects_duplicates(self) -> None:
        """Test binding the same rule id twice to a file type fails."""
        registry = SchemaRegistry()
        registry.add_rule("app.json", _rule())
        with pytest.raises(ValueError, match="already registered"):
            registry.add_rule("app.json", _rule())

    def test_remove_rule(self) -> None:
        """Test rules can be unbound."""
        registry = SchemaRegistry()
        registry.add_rule("app.json", _rule())
        assert registry.remove_rule("app.json", "custom.rule") is True
        assert registry.remove_rule("app.json", "custom.rule") is False
        assert registry.get_rules("app.json") == []

    def test_enabled_rules_filter(self) -> None:
        """Test disabled rules are excluded from get_enabled_rules."""
        registry = create_default_registry()
        registry.set_rule_enabled("tsconfig.strict_mode", False)
        enabled = [rule.id for rule in registry.get_enabled_rules("tsconfig.json")]
        assert "tsconfig.strict_mode" not in enabled
        assert "tsconfig.compiler_options" in enabled

    def test_set_unknown_rule(self) -> None:
        """Test toggling an unknown rule raises KeyError."""
        with pytest.raises(KeyError):
            SchemaRegistry().set_rule_enabled("nope", False)

    def test_unknown_rule_counts_as_enabled(self) -> None:
        """Test rules outside the catalog are treated as enabled."""
        assert SchemaRegistry().is_rule_enabled("nope") is True

    def test_list_rules_sorted(self) -> None:
        """Test the rule catalog is listed once per id, sorted."""
        ids = [rule.id for rule in create_default_registry().list_rules()]
        assert ids == sorted(ids)
        assert len(ids) == len(set(ids))
        assert "config.env.secrets" in ids
        assert "github_workflow.triggers" in ids

    def test_file_types(self) -> None:
        """Test file types with rules are listed."""
        file_types = create_default_registry().file_types()
        assert "package.json" in file_types
        assert ".env" in file_types

    def test_secret_rule_is_advisory(self) -> None:
        """Test the secrets rule is a warning described as a heuristic."""
        rule = create_default_registry().find_rule("config.env.secrets")
        assert rule is not None
        assert rule.severity == "warning"
        assert "heuristic" in rule.description


# -----------------------------------------------------------------------------
# Schema Evaluation Tests
# -----------------------------------------------------------------------------


class TestValidateAgainstSchema:
    """Tests for validate_against_schema()."""

    @pytest.fixture
    def package_schema(self) -> ConfigSchema:
        schema = create_default_registry().get("package.json")
        assert schema is not None
        return schema

    def test_valid_package(self, package_schema: ConfigSchema) -> None:
        """Test a well-formed package.json passes."""
        result = _validate({"name": "my-app", "version": "1.0.0"}, package_schema)
        assert result.valid is True
        assert result.errors == []
        assert result.summary.total_properties == 2
        assert result.summary.valid_properties == 2

    def test_missing_required_property(self, package_schema: ConfigSchema) -> None:
        """Test each missing required property yields one error."""
        result = _validate({"name": "my-app"}, package_schema)
        assert result.valid is False
        assert result.summary.missing_required == 1
        [error] = result.errors
        assert error.field == "version"
        assert error.type == "missing_required"
        assert error.rule == "schema.required_property"

    def test_type_mismatch(self, package_schema: ConfigSchema) -> None:
        """Test a wrong type reports 'Expected <type> type'."""
        result = _validate({"name": "my-app", "version": 1}, package_schema)
        [error] = result.errors
        assert error.type == "type_error"
        assert error.message == "Expected string type"
        assert error.rule == "schema.type"

    def test_pattern_must_match_whole_string(self, package_schema: ConfigSchema) -> None:
        """Test patterns apply to the whole value."""
        result = _validate({"name": "My App", "version": "1.0.0"}, package_schema)
        assert [e.rule for e in result.errors] == ["schema.pattern"]

        schema = ConfigSchema(title="t", properties={"v": PropertySchema(type="string", pattern="[0-9]+")})
        assert _validate({"v": "123"}, schema).valid is True
        assert _validate({"v": "123abc"}, schema).valid is False

    def test_loose_version_pattern(self, package_schema: ConfigSchema) -> None:
        """Test pre-release versions pass the schema."""
        result = _validate({"name": "my-app", "version": "1.0.0-beta.1"}, package_schema)
        assert result.valid is True

    def test_max_length(self, package_schema: ConfigSchema) -> None:
        """Test strings longer than max_length are rejected."""
        result = _validate({"name": "a" * 215, "version": "1.0.0"}, package_schema)
        assert "schema.max_length" in [e.rule for e in result.errors]

    def test_min_length(self) -> None:
        """Test strings shorter than min_length are rejected."""
        schema = ConfigSchema(title="t", properties={"s": PropertySchema(type="string", min_length=3)})
        assert _validate({"s": "abc"}, schema).valid is True
        [error] = _validate({"s": "ab"}, schema).errors
        assert error.rule == "schema.min_length"

    @pytest.mark.parametrize(
        ("value", "rule"),
        [("abc", "schema.min_length"), ("this is too long", "schema.max_length")],
    )
    def test_length_bounds(self, value: str, rule: str) -> None:
        """Test a value outside [min_length, max_length] yields exactly one error."""
        schema = ConfigSchema(
            title="t",
            properties={"s": PropertySchema(type="string", min_length=5, max_length=10)},
        )
        assert _validate({"s": "valid"}, schema).valid is True
        [error] = _validate({"s": value}, schema).errors
        assert error.rule == rule
        assert error.field == "s"

    def test_pattern_mismatch_single_error(self) -> None:
        """Test a value failing only the pattern yields exactly one error."""
        schema = ConfigSchema(
            title="t",
            properties={"version": PropertySchema(type="string", pattern=r"^\d+\.\d+\.\d+$")},
        )
        assert _validate({"version": "1.2.3"}, schema).valid is True
        [error] = _validate({"version": "invalid-version"}, schema).errors
        assert error.rule == "schema.pattern"

    def test_length_and_pattern_reported_together(self) -> None:
        """Test a value breaking a length limit and the pattern reports both."""
        schema = ConfigSchema(
            title="t",
            properties={"s": PropertySchema(type="string", max_length=5, pattern="[a-z]+")},
        )
        result = _validate({"s": "TOO-LONG-VALUE"}, schema)
        assert [e.rule for e in result.errors] == ["schema.max_length", "schema.pattern"]
        assert result.summary.error_count == 2

    def test_enum(self) -> None:
        """Test values outside enum are rejected."""
        schema = create_default_registry().get("docker-compose.yml")
        assert schema is not None
        assert _validate({"version": "3.8", "services": {}}, schema).valid is True
        [error] = _validate({"version": "4.0", "services": {}}, schema).errors
        assert error.rule == "schema.enum"

    def test_number_bounds(self) -> None:
        """Test numbers are checked against minimum and maximum."""
        schema = ConfigSchema(
            title="t",
            properties={"port": PropertySchema(type="number", minimum=1, maximum=65535)},
        )
        assert _validate({"port": 8080}, schema).valid is True
        assert _validate({"port": 1.5}, schema).valid is True
        assert [e.rule for e in _validate({"port": 0}, schema).errors] == ["schema.minimum"]
        assert [e.rule for e in _validate({"port": 70000}, schema).errors] == ["schema.maximum"]

    def test_bool_is_not_a_number(self) -> None:
        """Test booleans do not satisfy the number type."""
        schema = ConfigSchema(title="t", properties={"n": PropertySchema(type="number")})
        [error] = _validate({"n": True}, schema).errors
        assert error.rule == "schema.type"

    def test_other_types(self) -> None:
        """Test boolean, array and object types."""
        schema = ConfigSchema(
            title="t",
            properties={
                "b": PropertySchema(type="boolean"),
                "a": PropertySchema(type="array"),
                "o": PropertySchema(type="object"),
            },
        )
        assert _validate({"b": False, "a": [], "o": {}}, schema).valid is True
        result = _validate({"b": "yes", "a": {}, "o": []}, schema)
        assert len(result.errors) == 3

    def test_undeclared_keys_accepted(self, package_schema: ConfigSchema) -> None:
        """Test keys without a property schema are not checked."""
        data = {"name": "my-app", "version": "1.0.0", "private": True, "engines": 5}
        assert _validate(data, package_schema).valid is True

    def test_non_mapping_data(self, package_schema: ConfigSchema) -> None:
        """Test non-object data cannot be evaluated."""
        with pytest.raises(SchemaValidationError):
            _validate(["name"], package_schema)

    def test_invalid_pattern(self) -> None:
        """Test a malformed pattern is reported as a schema error."""
        schema = ConfigSchema(title="t", properties={"s": PropertySchema(type="string", pattern="(")})
        with pytest.raises(SchemaValidationError, match="invalid pattern"):
            _validate({"s": "x"}, schema)

    def test_accumulates_into_existing_result(self, package_schema: ConfigSchema) -> None:
        """Test errors are appended to a result that already holds errors."""
        result = ConfigValidationResult()
        validate_against_schema({}, package_schema, result)
        validate_against_schema({}, package_schema, result)
        assert len(result.errors) == 4
        assert result.summary.error_count == 4
        assert result.summary.missing_required == 4

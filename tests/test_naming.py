"""Tests for naming conventions and name validators."""

from __future__ import annotations

import pytest

from projcheck.validators.naming import (
    is_camel_case,
    is_potential_secret,
    to_kebab_case,
    to_snake_case,
    validate_env_key,
    validate_package_name,
)


class TestCaseConversion:
    """Tests for camelCase detection and conversion."""

    @pytest.mark.parametrize(
        "name",
        ["myModule", "getValue", "getHTTPResponse", "thisIsALongVariableName"],
    )
    def test_camel_case_names(self, name: str) -> None:
        """Test names starting lowercase with capitalized words are camelCase."""
        assert is_camel_case(name)

    @pytest.mark.parametrize("name", ["module", "MyModule", "my_module", "my-module", "my2Module"])
    def test_not_camel_case(self, name: str) -> None:
        """Test other shapes are not camelCase."""
        assert not is_camel_case(name)

    def test_kebab_case_splits_every_capital(self) -> None:
        """Test every capital boundary becomes a hyphen."""
        assert to_kebab_case("myComponents") == "my-components"
        assert to_kebab_case("thisIsALongVariableName") == "this-is-a-long-variable-name"

    def test_acronym_runs_stay_together(self) -> None:
        """Test a run of capitals is kept as one word."""
        assert to_kebab_case("getHTTPResponse") == "get-http-response"
        assert to_snake_case("getHTTPResponse") == "get_http_response"

    def test_snake_case(self) -> None:
        """Test snake_case conversion of file stems."""
        assert to_snake_case("myModule") == "my_module"


class TestValidatePackageName:
    """Tests for validate_package_name()."""

    @pytest.mark.parametrize("name", ["my-app", "my.app", "my_app", "app~1", "a"])
    def test_valid_names(self, name: str) -> None:
        """Test lowercase names with allowed characters pass."""
        validate_package_name(name)

    def test_uppercase_rejected(self) -> None:
        """Test uppercase names are rejected."""
        with pytest.raises(ValueError, match="lowercase"):
            validate_package_name("MyApp")

    def test_invalid_characters_rejected(self) -> None:
        """Test characters outside [a-z0-9-._~] are rejected."""
        with pytest.raises(ValueError, match="invalid characters"):
            validate_package_name("my app")

    @pytest.mark.parametrize("name", ["_private", ".hidden"])
    def test_leading_character_rejected(self, name: str) -> None:
        """Test names cannot start with '.' or '_'."""
        with pytest.raises(ValueError, match="cannot start with"):
            validate_package_name(name)

    def test_length_limit(self) -> None:
        """Test names longer than 214 characters are rejected."""
        validate_package_name("a" * 214)
        with pytest.raises(ValueError, match="too long"):
            validate_package_name("a" * 215)


class TestValidateEnvKey:
    """Tests for validate_env_key()."""

    @pytest.mark.parametrize("key", ["PATH", "DATABASE_URL", "A1", "X"])
    def test_valid_keys(self, key: str) -> None:
        """Test UPPER_SNAKE_CASE keys pass."""
        validate_env_key(key)

    @pytest.mark.parametrize("key", ["database_url", "1KEY", "_KEY", "MY-KEY", ""])
    def test_invalid_keys(self, key: str) -> None:
        """Test other keys are rejected."""
        with pytest.raises(ValueError, match="uppercase"):
            validate_env_key(key)


class TestIsPotentialSecret:
    """Tests for the advisory secret heuristic."""

    def test_keyword_and_long_value(self) -> None:
        """Test a keyword in the key plus a long value flags the entry."""
        assert is_potential_secret("API_KEY", "abcdefghijk")
        assert is_potential_secret("db_password", "hunter2hunter2")

    def test_short_value_not_flagged(self) -> None:
        """Test values of 10 characters or fewer are not flagged."""
        assert not is_potential_secret("API_KEY", "abcdefghij")

    def test_key_without_keyword_not_flagged(self) -> None:
        """Test keys without secret keywords are not flagged."""
        assert not is_potential_secret("DATABASE_URL", "postgres://localhost:5432/app")

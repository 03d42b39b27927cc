"""Naming rules shared by the schema registry and the structure checker.

All patterns are compiled once at import time. They are part of the public
contract: the structure checker derives proposed names from them, and the fix
engine renames entries to those proposals.
"""

from __future__ import annotations

import re

# A base name made of a lowercase word followed by capitalized words
# ("myModule", "getHTTPResponse"). Does not match "Module" or "my_module".
CAMEL_CASE_PATTERN = re.compile(r"^[a-z]+([A-Z][a-z]*)+$")

# Word boundaries inside camelCase names: lower/digit followed by upper, and
# the last capital of an acronym run followed by a capitalized word.
CAMEL_BOUNDARY_PATTERN = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

ENV_KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*$")

PACKAGE_NAME_INVALID_CHARS = re.compile(r"[^a-z0-9\-._~]")

PACKAGE_NAME_MAX_LENGTH = 214

# Substrings of a lowercased env key that hint at a credential.
SECRET_KEYWORDS = ("password", "secret", "key", "token", "api", "auth")

SECRET_MIN_VALUE_LENGTH = 10


def to_kebab_case(name: str) -> str:
    """Convert a camelCase name to kebab-case.

    Every capital boundary is split, so "thisIsALongVariableName" becomes
    "this-is-a-long-variable-name".
    """
    return CAMEL_BOUNDARY_PATTERN.sub("-", name).lower()


def to_snake_case(name: str) -> str:
    """Convert a camelCase name to snake_case."""
    return CAMEL_BOUNDARY_PATTERN.sub("_", name).lower()


def is_camel_case(name: str) -> bool:
    return CAMEL_CASE_PATTERN.match(name) is not None


def validate_package_name(name: str) -> None:
    """Validate an npm-style package name.

    Args:
        name: Package name to check.

    Raises:
        ValueError: If the name is too long, not lowercase, contains
            characters outside [a-z0-9-._~] or starts with "." or "_".
    """
    if len(name) > PACKAGE_NAME_MAX_LENGTH:
        raise ValueError(f"name too long (max {PACKAGE_NAME_MAX_LENGTH} characters)")
    if name.lower() != name:
        raise ValueError("name must be lowercase")
    if PACKAGE_NAME_INVALID_CHARS.search(name):
        raise ValueError("name contains invalid characters")
    if name.startswith((".", "_")):
        raise ValueError(f"name cannot start with '{name[0]}'")


def validate_env_key(key: str) -> None:
    """Validate an environment variable name.

    Raises:
        ValueError: If the key is not UPPER_SNAKE_CASE starting with a letter.
    """
    if not ENV_KEY_PATTERN.match(key):
        raise ValueError(
            f"environment key '{key}' should be uppercase with underscores"
        )


def is_potential_secret(key: str, value: str) -> bool:
    """Report whether an env entry looks like it holds a credential.

    Advisory only: a keyword and length heuristic that flags likely secrets
    for review. It is not a security control and gives no detection guarantee.

    Args:
        key: Variable name.
        value: Variable value.

    Returns:
        True if the lowercased key contains a secret keyword and the value is
        longer than SECRET_MIN_VALUE_LENGTH characters.
    """
    lowered = key.lower()
    has_keyword = any(keyword in lowered for keyword in SECRET_KEYWORDS)
    return has_keyword and len(value) > SECRET_MIN_VALUE_LENGTH

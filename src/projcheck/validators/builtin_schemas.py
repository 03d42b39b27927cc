"""Built-in configuration schemas and rule catalog.

Seeds create_default_registry() with schemas for package.json, tsconfig.json,
.eslintrc.json, docker-compose.yml and CI workflow files, plus the rules bound
to each file type.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from projcheck.validators.naming import (
    ENV_KEY_PATTERN,
    PACKAGE_NAME_MAX_LENGTH,
    validate_package_name,
)
from projcheck.validators.schema_registry import (
    ConfigSchema,
    PropertySchema,
    ValidationSchemaRule,
)

PACKAGE_NAME_PATTERN = r"^[a-z0-9\-._~]+$"

# Loose form accepted by the schema: MAJOR.MINOR.PATCH followed by anything.
VERSION_PATTERN = r"\d+\.\d+\.\d+.*"

SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$"
)

COMPOSE_VERSIONS = tuple(f"3.{minor}" for minor in range(10))

BUILTIN_SCHEMAS: dict[str, ConfigSchema] = {
    "package.json": ConfigSchema(
        title="Package.json Schema",
        description="Schema for Node.js package.json files",
        required=frozenset({"name", "version"}),
        properties={
            "name": PropertySchema(
                type="string",
                description="Package name",
                pattern=PACKAGE_NAME_PATTERN,
                max_length=PACKAGE_NAME_MAX_LENGTH,
            ),
            "version": PropertySchema(
                type="string",
                description="Package version",
                pattern=VERSION_PATTERN,
            ),
            "description": PropertySchema(
                type="string",
                description="Package description",
                max_length=500,
            ),
            "main": PropertySchema(type="string", description="Main entry point"),
            "scripts": PropertySchema(type="object", description="npm scripts"),
            "dependencies": PropertySchema(type="object", description="Package dependencies"),
            "devDependencies": PropertySchema(
                type="object", description="Development dependencies"
            ),
            "keywords": PropertySchema(type="array", description="Package keywords"),
            "author": PropertySchema(type="string", description="Package author"),
            "license": PropertySchema(type="string", description="Package license"),
        },
    ),
    "tsconfig.json": ConfigSchema(
        title="TypeScript Configuration Schema",
        description="Schema for TypeScript tsconfig.json files",
        properties={
            "compilerOptions": PropertySchema(
                type="object", description="TypeScript compiler options"
            ),
            "include": PropertySchema(type="array", description="Files to include"),
            "exclude": PropertySchema(type="array", description="Files to exclude"),
            "extends": PropertySchema(type="string", description="Base configuration"),
        },
    ),
    ".eslintrc.json": ConfigSchema(
        title="ESLint Configuration Schema",
        description="Schema for ESLint configuration files",
        properties={
            "extends": PropertySchema(type="array", description="Shared configurations"),
            "rules": PropertySchema(type="object", description="ESLint rules"),
            "env": PropertySchema(type="object", description="Environment settings"),
            "parserOptions": PropertySchema(type="object", description="Parser options"),
            "plugins": PropertySchema(type="array", description="ESLint plugins"),
        },
    ),
    "docker-compose.yml": ConfigSchema(
        title="Docker Compose Schema",
        description="Schema for Docker Compose files",
        required=frozenset({"services"}),
        properties={
            "version": PropertySchema(
                type="string",
                description="Compose file format version",
                enum=COMPOSE_VERSIONS,
            ),
            "services": PropertySchema(type="object", description="Service definitions"),
            "networks": PropertySchema(type="object", description="Network definitions"),
            "volumes": PropertySchema(type="object", description="Volume definitions"),
        },
    ),
    "workflow.yml": ConfigSchema(
        title="CI Workflow Schema",
        description="Schema for GitHub Actions workflow files",
        required=frozenset({"on", "jobs"}),
        properties={
            "name": PropertySchema(type="string", description="Workflow name"),
            "jobs": PropertySchema(type="object", description="Workflow jobs"),
            "env": PropertySchema(type="object", description="Environment variables"),
        },
    ),
}


# -----------------------------------------------------------------------------
# Rule checks
# -----------------------------------------------------------------------------


def _check_package_name(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    name = data.get("name")
    if (
        not isinstance(name, str)
        or len(name) > PACKAGE_NAME_MAX_LENGTH
        or not re.fullmatch(PACKAGE_NAME_PATTERN, name)
    ):
        # Overlong or malformed names are reported by the schema itself
        return []
    try:
        validate_package_name(name)
    except ValueError as e:
        return [("name", f"Invalid package name: {e}")]
    return []


def _check_package_version(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    version = data.get("version")
    if not isinstance(version, str) or not re.fullmatch(VERSION_PATTERN, version):
        # Missing or malformed versions are reported by the schema itself
        return []
    if SEMVER_PATTERN.match(version) is None:
        return [("version", f"Version '{version}' is not a valid semantic version")]
    return []


def _check_package_license(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    if not data.get("license"):
        return [("license", "Package should declare a license")]
    return []


def _check_tsconfig_strict(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    options = data.get("compilerOptions")
    if isinstance(options, Mapping) and options.get("strict") is False:
        return [
            (
                "compilerOptions.strict",
                "Consider enabling strict mode for better type safety",
            )
        ]
    return []


def _check_tsconfig_compiler_options(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    if "compilerOptions" not in data:
        return [("compilerOptions", "compilerOptions section is missing")]
    return []


def _check_eslint_extends(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    if not data.get("extends"):
        return [("extends", "ESLint config does not extend a shared configuration")]
    return []


def _check_compose_version(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    version = data.get("version")
    if isinstance(version, str) and version.startswith("2"):
        return [
            (
                "version",
                f"Compose file format {version} is deprecated, use 3.x or omit it",
            )
        ]
    return []


def _check_compose_privileged(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    services = data.get("services")
    if not isinstance(services, Mapping):
        return []
    findings: list[tuple[str, str]] = []
    for service_name, service in services.items():
        if isinstance(service, Mapping) and service.get("privileged") is True:
            findings.append(
                (
                    f"services.{service_name}.privileged",
                    f"Service '{service_name}' runs in privileged mode",
                )
            )
    return findings


def _check_workflow_name(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    if not data.get("name"):
        return [("name", "Workflow should have a name")]
    return []


def _check_workflow_triggers(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    # A missing "on" key is reported by the schema as a required property
    if "on" in data and not data["on"]:
        return [("on", "Workflow triggers ('on') are required")]
    return []


def builtin_rules() -> list[tuple[str, ValidationSchemaRule]]:
    """Build a fresh copy of the built-in rule catalog.

    Returns:
        List of (file_type, rule) pairs. Rules are new objects on every call
        so toggling one registry never affects another.
    """
    return [
        (
            "package.json",
            ValidationSchemaRule(
                id="package_json.name_format",
                name="Package Name Format",
                description="Package name must follow npm naming conventions",
                category="format",
                severity="error",
                file_types=("package.json",),
                pattern=PACKAGE_NAME_PATTERN,
                check=_check_package_name,
            ),
        ),
        (
            "package.json",
            ValidationSchemaRule(
                id="package_json.version_format",
                name="Package Version Format",
                description="Package version should follow semantic versioning",
                category="format",
                severity="warning",
                file_types=("package.json",),
                pattern=SEMVER_PATTERN.pattern,
                check=_check_package_version,
            ),
        ),
        (
            "package.json",
            ValidationSchemaRule(
                id="package_json.license",
                name="Package License",
                description="Package should declare a license",
                category="best_practice",
                severity="warning",
                file_types=("package.json",),
                check=_check_package_license,
            ),
        ),
        (
            "tsconfig.json",
            ValidationSchemaRule(
                id="tsconfig.strict_mode",
                name="TypeScript Strict Mode",
                description="Recommend strict TypeScript mode",
                category="best_practice",
                severity="warning",
                file_types=("tsconfig.json",),
                check=_check_tsconfig_strict,
            ),
        ),
        (
            "tsconfig.json",
            ValidationSchemaRule(
                id="tsconfig.compiler_options",
                name="Compiler Options",
                description="tsconfig.json should define compilerOptions",
                category="structure",
                severity="warning",
                file_types=("tsconfig.json",),
                check=_check_tsconfig_compiler_options,
            ),
        ),
        (
            ".eslintrc.json",
            ValidationSchemaRule(
                id="eslint.extends",
                name="ESLint Shared Config",
                description="ESLint configuration should extend a shared configuration",
                category="best_practice",
                severity="info",
                file_types=(".eslintrc.json",),
                check=_check_eslint_extends,
            ),
        ),
        (
            "docker-compose.yml",
            ValidationSchemaRule(
                id="docker_compose.version",
                name="Compose Version",
                description="Compose file format 2.x is deprecated",
                category="deprecation",
                severity="warning",
                file_types=("docker-compose.yml",),
                check=_check_compose_version,
            ),
        ),
        (
            "docker-compose.yml",
            ValidationSchemaRule(
                id="docker_compose.privileged",
                name="Privileged Containers",
                description="Avoid running services in privileged mode",
                category="security",
                severity="warning",
                file_types=("docker-compose.yml",),
                check=_check_compose_privileged,
            ),
        ),
        (
            "workflow.yml",
            ValidationSchemaRule(
                id="github_workflow.name",
                name="Workflow Name",
                description="Workflows should have a descriptive name",
                category="best_practice",
                severity="info",
                file_types=("workflow.yml",),
                check=_check_workflow_name,
            ),
        ),
        (
            "workflow.yml",
            ValidationSchemaRule(
                id="github_workflow.triggers",
                name="Workflow Triggers",
                description="Workflows must declare triggers",
                category="structure",
                severity="error",
                file_types=("workflow.yml",),
                check=_check_workflow_triggers,
            ),
        ),
        (
            ".env",
            ValidationSchemaRule(
                id="config.env.key_format",
                name="Environment Key Format",
                description="Environment variable names should be UPPER_SNAKE_CASE",
                category="format",
                severity="warning",
                file_types=(".env",),
                pattern=ENV_KEY_PATTERN.pattern,
            ),
        ),
        (
            ".env",
            ValidationSchemaRule(
                id="config.env.secrets",
                name="Secrets Detection",
                description=(
                    "Advisory keyword/length heuristic for values that look like "
                    "credentials; not a security control"
                ),
                category="security",
                severity="warning",
                file_types=(".env",),
            ),
        ),
    ]

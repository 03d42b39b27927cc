"""Validation framework for scaffolded projects.

Provides the issue model, the schema registry, the format dispatcher and the
project-level validators (structure, config files, manifests, templates).
"""

from __future__ import annotations

from projcheck.validators.base import (
    BaseValidator,
    Severity,
    ValidationIssue,
    ValidationResult,
    ValidationSummary,
    summarize,
)
from projcheck.validators.config_files import ConfigFileValidator, validate_config_file
from projcheck.validators.formats import FileKind, FormatDispatcher, detect_file_kind
from projcheck.validators.naming import (
    is_potential_secret,
    validate_env_key,
    validate_package_name,
)
from projcheck.validators.path_filter import StructureWalkError
from projcheck.validators.project_files import ProjectFileValidator
from projcheck.validators.runner import ValidationRunner
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
from projcheck.validators.structure import ProjectType, StructureChecker, detect_project_type
from projcheck.validators.templates import TemplateValidator

__all__ = [
    # Base types
    "BaseValidator",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSummary",
    "summarize",
    # Schema registry
    "ConfigSchema",
    "ConfigValidationResult",
    "PropertySchema",
    "SchemaRegistry",
    "SchemaValidationError",
    "ValidationSchemaRule",
    "create_default_registry",
    "validate_against_schema",
    # Naming
    "is_potential_secret",
    "validate_env_key",
    "validate_package_name",
    # Formats
    "FileKind",
    "FormatDispatcher",
    "detect_file_kind",
    # Validators
    "ConfigFileValidator",
    "ProjectFileValidator",
    "ProjectType",
    "StructureChecker",
    "StructureWalkError",
    "TemplateValidator",
    "detect_project_type",
    "validate_config_file",
    # Runner
    "ValidationRunner",
]

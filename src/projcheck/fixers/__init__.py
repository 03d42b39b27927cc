"""Fixer framework for automatically resolving validation issues.

Provides fixers that derive fixes for fixable issues, and the engine that
previews and applies them.
"""

from __future__ import annotations

from projcheck.fixers.base import (
    BaseFixer,
    FileChange,
    Fix,
    FixAction,
    FixApplicationError,
    FixFailure,
    FixPreview,
    FixResult,
    FixSummary,
    UnsupportedFixActionError,
)
from projcheck.fixers.engine import FixEngine, apply_fix, preview_fix
from projcheck.fixers.naming_fixer import SpacesInNameFixer, TemplateExtensionFixer
from projcheck.fixers.registry import FixerRegistry, create_default_registry
from projcheck.fixers.scaffolding_fixer import (
    DockerignoreFixer,
    GitignoreFixer,
    LicenseFixer,
    ReadmeFixer,
)

__all__ = [
    # Base types
    "BaseFixer",
    "FileChange",
    "Fix",
    "FixAction",
    "FixApplicationError",
    "FixFailure",
    "FixPreview",
    "FixResult",
    "FixSummary",
    "UnsupportedFixActionError",
    # Engine
    "FixEngine",
    "apply_fix",
    "preview_fix",
    # Registry
    "FixerRegistry",
    "create_default_registry",
    # Fixers
    "DockerignoreFixer",
    "GitignoreFixer",
    "LicenseFixer",
    "ReadmeFixer",
    "SpacesInNameFixer",
    "TemplateExtensionFixer",
]

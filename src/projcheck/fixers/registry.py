"""Fixer registry for mapping rule ids to fixer classes.

The registry provides a central lookup mechanism for finding the fixer that
derives fixes for a given rule. Fixers register themselves by their rule.
"""

from __future__ import annotations

from pathlib import Path

from projcheck.config import ProjcheckConfig
from projcheck.fixers.base import BaseFixer


class FixerRegistry:
    """Registry that maps rule ids to fixer classes.

    Example:
        >>> registry = FixerRegistry()
        >>> registry.register(ReadmeFixer)
        >>> fixer = registry.get_fixer("structure.readme.required", project_root)
        >>> if fixer:
        ...     fix = fixer.derive(issue)
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._fixers: dict[str, type[BaseFixer]] = {}

    def register(self, fixer_class: type[BaseFixer]) -> None:
        """Register a fixer class by its rule.

        Args:
            fixer_class: A BaseFixer subclass to register.

        Raises:
            ValueError: If the fixer has no rule or if a fixer with the
                same rule is already registered.
        """
        rule = fixer_class.rule
        if not rule:
            raise ValueError(f"Fixer class {fixer_class.__name__} has no rule defined")
        if rule in self._fixers:
            raise ValueError(
                f"Fixer for rule '{rule}' already registered: "
                f"{self._fixers[rule].__name__}"
            )
        self._fixers[rule] = fixer_class

    def get_fixer(
        self,
        rule: str,
        project_root: Path,
        config: ProjcheckConfig | None = None,
    ) -> BaseFixer | None:
        """Get an instantiated fixer for the given rule.

        Returns:
            An instantiated fixer if one is registered for the rule, None otherwise.
        """
        fixer_class = self._fixers.get(rule)
        if fixer_class is None:
            return None
        return fixer_class(project_root, config)

    def has_fixer(self, rule: str) -> bool:
        return rule in self._fixers

    def list_rules(self) -> list[str]:
        """List all registered rules in sorted order."""
        return sorted(self._fixers.keys())


def create_default_registry() -> FixerRegistry:
    """Create a registry populated with the built-in fixers.

    Each call returns a new registry.
    """
    # Import here to avoid circular imports
    from projcheck.fixers.naming_fixer import SpacesInNameFixer, TemplateExtensionFixer
    from projcheck.fixers.scaffolding_fixer import (
        DockerignoreFixer,
        GitignoreFixer,
        LicenseFixer,
        ReadmeFixer,
    )

    registry = FixerRegistry()
    registry.register(ReadmeFixer)
    registry.register(LicenseFixer)
    registry.register(GitignoreFixer)
    registry.register(DockerignoreFixer)
    registry.register(SpacesInNameFixer)
    registry.register(TemplateExtensionFixer)
    return registry

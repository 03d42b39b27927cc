"""Validation runner for orchestrating all validators.

Provides a unified interface to run the project validators and aggregate
their results into a single ValidationResult.
"""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Callable
from pathlib import Path

from projcheck.config import ProjcheckConfig
from projcheck.validators.base import BaseValidator, ValidationResult, summarize
from projcheck.validators.config_files import ConfigFileValidator
from projcheck.validators.project_files import ProjectFileValidator
from projcheck.validators.schema_registry import SchemaRegistry, create_default_registry
from projcheck.validators.structure import StructureChecker
from projcheck.validators.templates import TemplateValidator

logger = logging.getLogger(__name__)


class ValidationRunner:
    """Orchestrates running validators over a project.

    Supports:
    - Running all validators
    - Running specific validators by name
    - Optional parallel execution (validators only read the shared registry)

    Filesystem walk failures (StructureWalkError) are not turned into
    issues; they propagate to the caller.
    """

    # Default validator order
    DEFAULT_VALIDATORS = ["structure", "config", "project-files", "templates"]

    def __init__(
        self,
        project_root: Path,
        config: ProjcheckConfig | None = None,
        registry: SchemaRegistry | None = None,
        parallel: bool = False,
    ) -> None:
        """Initialize validation runner.

        Args:
            project_root: Root directory of the project.
            config: Resolved configuration. Defaults are used when omitted.
            registry: Schema registry for config validation. A default
                registry is created when omitted.
            parallel: Whether to run validators in parallel.
        """
        self.project_root = project_root
        self.config = config if config is not None else ProjcheckConfig()
        self.registry = registry if registry is not None else create_default_registry()
        self.parallel = parallel
        self._factories: dict[str, Callable[[], BaseValidator]] = {
            "structure": lambda: StructureChecker(self.project_root),
            "config": lambda: ConfigFileValidator(self.project_root, self.registry),
            "project-files": lambda: ProjectFileValidator(self.project_root),
            "templates": lambda: TemplateValidator(
                self.project_root, self.config.templates_dir
            ),
        }

    @property
    def validator_names(self) -> list[str]:
        return list(self._factories)

    def run_all(self) -> ValidationResult:
        """Run all validators.

        Returns:
            Aggregated ValidationResult.
        """
        return self.run_validators(self.DEFAULT_VALIDATORS)

    def run_validators(self, validator_names: list[str]) -> ValidationResult:
        """Run specific validators by name.

        Args:
            validator_names: Names of the validators to run. Unknown names
                are ignored.

        Returns:
            Aggregated ValidationResult.
        """
        valid_names = [name for name in validator_names if name in self._factories]

        if self.parallel and len(valid_names) > 1:
            results = self._run_parallel(valid_names)
        else:
            results = [self._create_validator(name).validate() for name in valid_names]

        summary = summarize(results)
        logger.info(
            "Ran %d validator(s) on %s: %d file(s), %d error(s), %d warning(s)",
            len(results),
            self.project_root,
            summary.total_files,
            summary.error_count,
            summary.warning_count,
        )
        return ValidationResult.merge(results, name="project")

    def run_single(self, validator_name: str) -> ValidationResult | None:
        """Run a single validator by name.

        Returns:
            ValidationResult, or None if the validator is not known.
        """
        if validator_name not in self._factories:
            return None
        return self._create_validator(validator_name).validate()

    def _create_validator(self, name: str) -> BaseValidator:
        """Create a validator instance by name.

        Raises:
            KeyError: If validator name is not found.
        """
        return self._factories[name]()

    def _run_parallel(self, validator_names: list[str]) -> list[ValidationResult]:
        """Run validators in parallel, keeping the requested order."""
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(validator_names)) as executor:
            futures = [
                executor.submit(self._create_validator(name).validate)
                for name in validator_names
            ]
            # result() re-raises walk errors from worker threads
            return [future.result() for future in futures]

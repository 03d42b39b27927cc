"""Configuration management for the projcheck CLI tool.

Handles configuration loading from multiple sources with precedence:
CLI args > environment variables > .projcheckrc > pyproject.toml > defaults
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

logger = logging.getLogger(__name__)

REPORT_FORMATS = ("json", "html", "markdown", "md")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

RC_FILENAME = ".projcheckrc"


@dataclass
class ProjcheckConfig:
    """Configuration for the projcheck CLI tool.

    Attributes:
        report_format: Default report format (default: "markdown")
        project_name: Name used in generated README/LICENSE files
            (default: "", meaning the project directory name)
        templates_dir: Template directory checked for .tmpl files (default: "templates")
        log_level: Logging level for CLI output (default: "WARNING")
    """

    report_format: str = "markdown"
    project_name: str = ""
    templates_dir: str = "templates"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if not isinstance(self.report_format, str) or (
            self.report_format.lower() not in REPORT_FORMATS
        ):
            raise ValueError(
                f"report_format must be one of: {', '.join(REPORT_FORMATS)}"
            )

        if not isinstance(self.project_name, str):
            raise ValueError("project_name must be a string")

        if not self.templates_dir or not isinstance(self.templates_dir, str):
            raise ValueError("templates_dir must be a non-empty string")
        if Path(self.templates_dir).is_absolute():
            raise ValueError("templates_dir must be relative to the project root")

        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")


def _get_config_field_names() -> set[str]:
    return {f.name for f in fields(ProjcheckConfig)}


def find_config_file(filename: str = RC_FILENAME, start_dir: Path | None = None) -> Path | None:
    """Find a configuration file by traversing up the directory tree.

    Args:
        filename: Name of the config file to find.
        start_dir: Directory to start searching from. Defaults to current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        config_path = current / filename
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            return None
        current = parent


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents.

    Raises:
        OSError: If the file cannot be read.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _filter_fields(data: dict[str, Any]) -> dict[str, Any]:
    valid_fields = _get_config_field_names()
    return {k: v for k, v in data.items() if k in valid_fields}


def _load_from_rc(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from the nearest .projcheckrc file.

    Returns:
        Configuration values, or an empty dict if no usable file is found.
    """
    config_path = find_config_file(RC_FILENAME, start_dir)
    if config_path is None:
        return {}

    try:
        return _filter_fields(_load_toml_file(config_path))
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, e)
        return {}


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from the pyproject.toml [tool.projcheck] section."""
    config_path = find_config_file("pyproject.toml", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, e)
        return {}

    section = data.get("tool", {}).get("projcheck", {})
    if not isinstance(section, dict):
        return {}
    return _filter_fields(section)


def _load_from_env() -> dict[str, Any]:
    """Load configuration from PROJCHECK_* environment variables."""
    env_mapping = {
        "PROJCHECK_REPORT_FORMAT": "report_format",
        "PROJCHECK_PROJECT_NAME": "project_name",
        "PROJCHECK_TEMPLATES_DIR": "templates_dir",
        "PROJCHECK_LOG_LEVEL": "log_level",
    }

    result: dict[str, Any] = {}
    for env_var, config_key in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            result[config_key] = value
    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries; later ones take precedence."""
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is not None:
                result[key] = value
    return result


def load_config(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> ProjcheckConfig:
    """Load configuration with full precedence chain.

    Precedence (highest to lowest):
    1. CLI arguments (cli_overrides)
    2. Environment variables (PROJCHECK_*)
    3. .projcheckrc file
    4. pyproject.toml [tool.projcheck] section
    5. Default values

    Args:
        cli_overrides: Configuration overrides from CLI arguments.
        start_dir: Directory to start searching for config files.

    Returns:
        Fully resolved ProjcheckConfig instance.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    cli_config = _filter_fields(cli_overrides or {})

    merged = _merge_configs(
        _load_from_pyproject(start_dir),
        _load_from_rc(start_dir),
        _load_from_env(),
        cli_config,
    )
    return ProjcheckConfig(**merged)

"""CLI utility functions for projcheck.

Provides helper functions for:
- Config wiring: Extracting Typer CLI options and passing to load_config
- Path checks: Verifying user-supplied paths before running validators
- Error reporting: Consistent user-friendly error messages with exit codes
- Logging setup: Routing library log records through rich
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from projcheck.config import ProjcheckConfig, load_config

# Exit code conventions
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # User error (bad input, missing file, failed fixes)
EXIT_VALIDATION_FAILED = 2  # Validation found errors
EXIT_SYSTEM_ERROR = 2  # System error (permissions, I/O, etc.)


# -----------------------------------------------------------------------------
# Error Formatting Helpers
# -----------------------------------------------------------------------------


def error(msg: str, *, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print an error message and exit with the given exit code.

    Args:
        msg: The error message to display.
        exit_code: Exit code to use (default: EXIT_USER_ERROR=1).

    Raises:
        typer.Exit: Always raises to exit the program.
    """
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)
    raise typer.Exit(code=exit_code)


# -----------------------------------------------------------------------------
# Path Helpers
# -----------------------------------------------------------------------------


def ensure_path_exists(
    path: Path,
    path_type: str = "path",
    must_be_dir: bool = False,
    must_be_file: bool = False,
) -> Path:
    """Ensure a path exists and optionally check its type.

    Args:
        path: The path to check.
        path_type: Human-readable name for the path (for error messages).
        must_be_dir: If True, path must be a directory.
        must_be_file: If True, path must be a file.

    Returns:
        The verified path.

    Raises:
        typer.Exit: If the path doesn't exist or is the wrong type.
    """
    if not path.exists():
        error(f"{path_type} does not exist: {path}")

    if must_be_dir and not path.is_dir():
        error(f"{path_type} is not a directory: {path}")

    if must_be_file and not path.is_file():
        error(f"{path_type} is not a file: {path}")

    return path


# -----------------------------------------------------------------------------
# Config Wiring Helper
# -----------------------------------------------------------------------------


def wire_config(
    report_format: str | None = None,
    project_name: str | None = None,
    templates_dir: str | None = None,
    log_level: str | None = None,
    start_dir: Path | None = None,
) -> ProjcheckConfig:
    """Wire CLI options to load_config with appropriate overrides.

    Args:
        report_format: Override for the report format.
        project_name: Override for the project name used in generated files.
        templates_dir: Override for the template directory.
        log_level: Override for the logging level.
        start_dir: Directory to start searching for config files.

    Returns:
        Fully resolved ProjcheckConfig instance.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    cli_overrides: dict[str, Any] = {}

    if report_format is not None:
        cli_overrides["report_format"] = report_format
    if project_name is not None:
        cli_overrides["project_name"] = project_name
    if templates_dir is not None:
        cli_overrides["templates_dir"] = templates_dir
    if log_level is not None:
        cli_overrides["log_level"] = log_level

    try:
        return load_config(cli_overrides=cli_overrides, start_dir=start_dir)
    except ValueError as e:
        error(f"Invalid configuration: {e}", exit_code=EXIT_USER_ERROR)


def configure_logging(level: str, console: Console) -> None:
    """Send log records to the given (stderr) console via rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# -----------------------------------------------------------------------------
# Typer Option Factory Functions
# -----------------------------------------------------------------------------
# These factory functions create fresh Typer Option instances for each command.
# This is necessary because Typer consumes Option objects when decorating commands,
# so the same Option instance cannot be reused across multiple commands.


def project_name_option() -> Any:
    """Create a Typer Option for --project-name."""
    return typer.Option(
        None,
        "--project-name",
        help="Project name used in generated README/LICENSE files.",
        envvar="PROJCHECK_PROJECT_NAME",
    )


def templates_dir_option() -> Any:
    """Create a Typer Option for --templates-dir."""
    return typer.Option(
        None,
        "--templates-dir",
        help="Template directory checked for .tmpl files (default: templates).",
        envvar="PROJCHECK_TEMPLATES_DIR",
    )


def log_level_option() -> Any:
    """Create a Typer Option for --log-level."""
    return typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
        envvar="PROJCHECK_LOG_LEVEL",
    )


def json_option() -> Any:
    return typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    )

"""projcheck CLI Tool - Main entry point."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from projcheck import __version__
from projcheck.cli_utils import (
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    EXIT_VALIDATION_FAILED,
    configure_logging,
    ensure_path_exists,
    json_option,
    log_level_option,
    project_name_option,
    templates_dir_option,
    wire_config,
)
from projcheck.config import ProjcheckConfig
from projcheck.fixers import FixEngine, FixPreview, FixResult
from projcheck.reporting import (
    UnsupportedReportFormatError,
    parse_report_format,
    render_fix_result,
    render_report,
)
from projcheck.validators import (
    StructureWalkError,
    ValidationIssue,
    ValidationResult,
    ValidationRunner,
    create_default_registry,
    validate_config_file,
)

app = typer.Typer(
    name="projcheck",
    help="projcheck - Validate project structure and configuration files, and fix what can be fixed.",
    add_completion=False,
)

# Rich consoles for output
console = Console()
err_console = Console(stderr=True)

SEVERITY_COLORS = {
    "error": "red",
    "warning": "yellow",
    "info": "blue",
}


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def _output_success(message: str, quiet: bool = False) -> None:
    """Print a success message."""
    if not quiet:
        console.print(f"[green]Success:[/green] {message}")


def _output_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]Error:[/red] {message}")


def _output_info(message: str, quiet: bool = False) -> None:
    """Print an info message."""
    if not quiet:
        console.print(message)


def _exit_error(message: str, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print error and exit."""
    _output_error(message)
    raise typer.Exit(code=exit_code)


def _print_issue(issue: ValidationIssue, verbose: bool = False) -> None:
    color = SEVERITY_COLORS.get(issue.severity, "white")
    location = issue.file if not issue.line else f"{issue.file}:{issue.line}"
    console.print(
        f"  [{color}]{issue.severity}[/{color}] "
        f"[dim]{escape(location)}[/dim]: {escape(issue.message)}"
    )
    if verbose:
        console.print(f"    [dim]rule: {escape(issue.rule)}[/dim]")
        if issue.suggestion:
            console.print(f"    [green]Suggestion:[/green] {escape(issue.suggestion)}")


def _print_issues(result: ValidationResult, verbose: bool = False) -> None:
    """Print issues grouped by severity."""
    for heading, issues in (
        ("Errors", result.errors),
        ("Warnings", result.warnings),
        ("Info", result.infos),
    ):
        if not issues:
            continue
        console.print(f"\n[bold]{heading} ({len(issues)}):[/bold]")
        for issue in issues:
            _print_issue(issue, verbose)


def _setup(
    path: str | None,
    project_name: str | None = None,
    templates_dir: str | None = None,
    log_level: str | None = None,
    report_format: str | None = None,
) -> tuple[Path, ProjcheckConfig]:
    """Resolve the project root, load config and configure logging."""
    project_root = Path(path).resolve() if path else Path.cwd()
    ensure_path_exists(project_root, "Project directory", must_be_dir=True)
    config = wire_config(
        report_format=report_format,
        project_name=project_name,
        templates_dir=templates_dir,
        log_level=log_level,
        start_dir=project_root,
    )
    configure_logging(config.log_level, err_console)
    return project_root, config


def _run_validation(
    project_root: Path,
    config: ProjcheckConfig,
    only: list[str] | None = None,
) -> ValidationResult:
    runner = ValidationRunner(project_root, config)
    names = only or runner.DEFAULT_VALIDATORS

    unknown = [name for name in names if name not in runner.validator_names]
    if unknown:
        _exit_error(
            f"Unknown validator(s): {', '.join(unknown)}. "
            f"Must be one of: {', '.join(runner.validator_names)}"
        )

    try:
        return runner.run_validators(names)
    except StructureWalkError as e:
        _exit_error(str(e), exit_code=EXIT_SYSTEM_ERROR)


# -----------------------------------------------------------------------------
# Version and Main Callbacks
# -----------------------------------------------------------------------------


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"projcheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """projcheck - Validate project structure and configuration files, and fix what can be fixed."""
    pass


# -----------------------------------------------------------------------------
# Validate Command
# -----------------------------------------------------------------------------


@app.command()
def validate(
    path: str | None = typer.Argument(
        None,
        help="Project directory to validate. Defaults to current directory.",
    ),
    only: list[str] | None = typer.Option(
        None,
        "--only",
        help="Run only the named validator (structure, config, project-files, templates). Repeatable.",
    ),
    templates_dir: str | None = templates_dir_option(),
    log_level: str | None = log_level_option(),
    json_output: bool = json_option(),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output for CI.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show rule ids and suggestions.",
    ),
) -> None:
    """Validate project structure and configuration files.

    Runs the structure, config, project-files and templates validators
    and prints the issues found, grouped by severity.

    Exits with code 2 if validation fails (errors found).
    Warnings and info issues do not cause validation failure.
    """
    project_root, config = _setup(path, templates_dir=templates_dir, log_level=log_level)
    result = _run_validation(project_root, config, only)

    if json_output:
        console.print_json(json.dumps(result.to_dict()))
    else:
        summary = result.summary()
        if result.valid:
            _output_success("Validation passed", quiet)
        else:
            _output_error("Validation failed")

        if not quiet:
            _print_issues(result, verbose)
            console.print(
                f"\n{summary.total_files} file(s) checked: "
                f"{summary.error_count} error(s), {summary.warning_count} warning(s), "
                f"{summary.info_count} info, {summary.fixable_count} fixable"
            )
            if summary.fixable_count:
                _output_info(
                    "Run [bold]projcheck fix --dry-run[/bold] to preview available fixes"
                )

    if not result.valid:
        raise typer.Exit(code=EXIT_VALIDATION_FAILED)


# -----------------------------------------------------------------------------
# Check Command
# -----------------------------------------------------------------------------


@app.command()
def check(
    files: list[str] = typer.Argument(
        ...,
        help="Configuration files to check.",
    ),
    log_level: str | None = log_level_option(),
    json_output: bool = json_option(),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output for CI.",
    ),
) -> None:
    """Check individual configuration files.

    Each file is checked for syntax by format, then against its schema and
    rules when one is registered (package.json, tsconfig.json, ...).

    Exits with code 2 if any file has errors.
    """
    config = wire_config(log_level=log_level)
    configure_logging(config.log_level, err_console)

    registry = create_default_registry()
    results: list[ValidationResult] = []
    for file in files:
        file_path = ensure_path_exists(Path(file), "File", must_be_file=True)
        results.append(validate_config_file(file_path, registry, display_path=file))

    result = ValidationResult.merge(results, name="check")

    if json_output:
        console.print_json(json.dumps(result.to_dict()))
    else:
        if result.valid:
            _output_success(f"{len(files)} file(s) passed", quiet)
        else:
            _output_error(f"{len(result.errors)} error(s) found")
        if not quiet:
            _print_issues(result, verbose=True)

    if not result.valid:
        raise typer.Exit(code=EXIT_VALIDATION_FAILED)


# -----------------------------------------------------------------------------
# Fix Command
# -----------------------------------------------------------------------------


@app.command()
def fix(
    path: str | None = typer.Argument(
        None,
        help="Project directory to fix. Defaults to current directory.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be fixed (no changes).",
    ),
    backup: bool = typer.Option(
        False,
        "--backup",
        help="Keep a .backup copy of files edited in place.",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write a Markdown fix report to this file.",
    ),
    project_name: str | None = project_name_option(),
    templates_dir: str | None = templates_dir_option(),
    log_level: str | None = log_level_option(),
    json_output: bool = json_option(),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show detailed output.",
    ),
) -> None:
    """Apply automatic fixes for fixable issues.

    Validates the project, derives a fix for each fixable issue and applies
    it. With --dry-run, shows what each fix would change without touching
    the filesystem. With --output, a Markdown report of the applied, failed
    and skipped fixes is written to the given file.

    Exit codes:
      0 - All fixes applied (or nothing to fix)
      1 - One or more fixes failed
      2 - The fix report could not be written
    """
    if dry_run and output is not None:
        _exit_error("--output cannot be combined with --dry-run")

    project_root, config = _setup(
        path,
        project_name=project_name,
        templates_dir=templates_dir,
        log_level=log_level,
    )
    validation = _run_validation(project_root, config)
    engine = FixEngine(project_root, config=config, backup=backup)

    if dry_run:
        preview = engine.preview_fixes(validation.issues)
        if json_output:
            data: dict[str, Any] = {"mode": "dry_run", **preview.to_dict()}
            console.print_json(json.dumps(data))
        else:
            _fix_print_preview(preview, verbose=verbose)
        if preview.failed:
            raise typer.Exit(code=EXIT_USER_ERROR)
        return

    result = engine.fix_issues(validation.issues)
    if json_output:
        data = {"mode": "fix", **result.to_dict()}
        console.print_json(json.dumps(data))
    else:
        _fix_print_result(result, verbose=verbose)

    if output is not None:
        _write_fix_report(result, output, quiet=json_output)

    if not result.success:
        raise typer.Exit(code=EXIT_USER_ERROR)


def _write_fix_report(result: FixResult, output: str, *, quiet: bool) -> None:
    """Write the Markdown fix report, exiting on write failure."""
    output_path = Path(output)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(render_fix_result(result), encoding="utf-8")
    except OSError as e:
        _exit_error(f"Cannot write fix report to {output}: {e}", exit_code=EXIT_SYSTEM_ERROR)
    _output_success(f"Fix report written to {output}", quiet)


def _fix_print_preview(preview: FixPreview, *, verbose: bool) -> None:
    """Print dry-run fix results to console."""
    if not preview.fixes and not preview.failed:
        _output_success("Nothing to fix.")
        return

    console.print("\n[bold]Would apply the following fixes:[/bold]")
    for fix_item, change in zip(preview.fixes, preview.changes):
        console.print(f"  [cyan]WOULD FIX[/cyan] {escape(fix_item.description)}")
        console.print(
            f"    [dim]{escape(change.file)}: {escape(change.description)} "
            f"({change.lines_before} -> {change.lines_after} lines)[/dim]"
        )
        if verbose:
            console.print(f"    [dim]fix_id: {escape(fix_item.id)}[/dim]")

    for failure in preview.failed:
        console.print(f"  [red]WOULD FAIL[/red] {escape(failure.fix.description)}")
        console.print(f"    [dim]{escape(failure.error)}[/dim]")

    if preview.skipped:
        _output_info(f"\n{len(preview.skipped)} fixable issue(s) have no automatic fix")

    _output_info(f"\nRun [bold]projcheck fix[/bold] to apply {len(preview.fixes)} fix(es)")


def _fix_print_result(result: FixResult, *, verbose: bool) -> None:
    """Print fix results to console."""
    summary = result.summary
    if summary.total_fixes == 0:
        _output_success("Nothing to fix.")
        return

    console.print("\n[bold]Fix Results:[/bold]")
    for fix_item in result.applied:
        console.print(f"  [green]FIXED[/green] {escape(fix_item.description)}")
        if verbose:
            console.print(f"    [dim]Modified: {escape(fix_item.file)}[/dim]")

    for failure in result.failed:
        console.print(f"  [red]FAILED[/red] {escape(failure.fix.description)}")
        console.print(f"    [dim]{escape(failure.error)}[/dim]")

    if result.skipped:
        _output_info(f"\n{len(result.skipped)} fixable issue(s) have no automatic fix")

    console.print()
    if result.success:
        _output_success(
            f"Applied {summary.applied_fixes} fix(es), "
            f"{summary.files_modified} file(s) modified"
        )
    else:
        _output_error(
            f"Applied {summary.applied_fixes} fix(es), {summary.failed_fixes} failed, "
            f"{summary.files_modified} file(s) modified"
        )


# -----------------------------------------------------------------------------
# Report Command
# -----------------------------------------------------------------------------


@app.command()
def report(
    path: str | None = typer.Argument(
        None,
        help="Project directory to report on. Defaults to current directory.",
    ),
    report_format: str | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Report format: json, html or markdown (default: markdown).",
        envvar="PROJCHECK_REPORT_FORMAT",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to this file instead of stdout.",
    ),
    templates_dir: str | None = templates_dir_option(),
    log_level: str | None = log_level_option(),
) -> None:
    """Render a validation report.

    The report is written even when validation fails; the exit code is 0
    unless the report cannot be produced.
    """
    if report_format is not None:
        try:
            parse_report_format(report_format)
        except UnsupportedReportFormatError as e:
            _exit_error(str(e))

    project_root, config = _setup(
        path,
        templates_dir=templates_dir,
        log_level=log_level,
        report_format=report_format,
    )
    result = _run_validation(project_root, config)
    data = render_report(result, parse_report_format(config.report_format))

    if output is None:
        typer.echo(data.decode("utf-8"))
        return

    output_path = Path(output)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
    except OSError as e:
        _exit_error(f"Cannot write report to {output}: {e}", exit_code=EXIT_SYSTEM_ERROR)
    _output_success(f"Report written to {output}")


# -----------------------------------------------------------------------------
# Rules and Schemas Commands
# -----------------------------------------------------------------------------


@app.command()
def rules(
    file_type: str | None = typer.Option(
        None,
        "--file-type",
        "-t",
        help="Only list rules for this file type (e.g., package.json).",
    ),
    json_output: bool = json_option(),
) -> None:
    """List the validation rule catalog."""
    registry = create_default_registry()
    if file_type is not None:
        if file_type not in registry.file_types():
            _exit_error(
                f"Unknown file type: {file_type}. "
                f"Must be one of: {', '.join(registry.file_types())}"
            )
        catalog = registry.get_rules(file_type)
    else:
        catalog = registry.list_rules()

    if json_output:
        console.print_json(json.dumps({"rules": [rule.to_dict() for rule in catalog]}))
        return

    table = Table(title="Validation Rules")
    table.add_column("ID", style="cyan")
    table.add_column("Severity")
    table.add_column("Category", style="green")
    table.add_column("File Types")
    table.add_column("Description")

    for rule in catalog:
        color = SEVERITY_COLORS.get(rule.severity, "white")
        table.add_row(
            rule.id,
            f"[{color}]{rule.severity}[/{color}]",
            rule.category,
            ", ".join(rule.file_types),
            rule.description,
        )

    console.print(table)


@app.command()
def schemas(
    json_output: bool = json_option(),
) -> None:
    """List the registered configuration schemas."""
    registry = create_default_registry()
    entries = []
    for name in registry.list():
        schema = registry.get(name)
        if schema is None:
            continue
        entries.append(
            {
                "name": name,
                "title": schema.title,
                "required": sorted(schema.required),
                "properties": sorted(schema.properties),
            }
        )

    if json_output:
        console.print_json(json.dumps({"schemas": entries}))
        return

    table = Table(title="Configuration Schemas")
    table.add_column("File", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Required")

    for entry in entries:
        table.add_row(
            entry["name"],
            entry["title"],
            ", ".join(entry["required"]) or "-",
        )

    console.print(table)


if __name__ == "__main__":
    app()

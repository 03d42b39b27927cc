"""Report rendering for validation and fix results.

Rendering is pure: results go in, bytes (or text) come out. Writing the
report anywhere is the caller's job.
"""

from __future__ import annotations

import enum
import html
import json

from projcheck.fixers.base import FixResult
from projcheck.template_manager import render_template
from projcheck.validators.base import ValidationIssue, ValidationResult

REPORT_TITLE = "Validation Report"

# Section heading, severity, HTML class; in render order
SECTIONS = (
    ("Errors", "error"),
    ("Warnings", "warning"),
    ("Info", "info"),
)


class UnsupportedReportFormatError(ValueError):
    """Raised for a report format name that is not supported."""


class ReportFormat(str, enum.Enum):
    """Supported report formats."""

    JSON = "json"
    HTML = "html"
    MARKDOWN = "markdown"


_FORMAT_ALIASES = {
    "json": ReportFormat.JSON,
    "html": ReportFormat.HTML,
    "markdown": ReportFormat.MARKDOWN,
    "md": ReportFormat.MARKDOWN,
}


def parse_report_format(value: str) -> ReportFormat:
    """Parse a report format name (case-insensitive; "md" means markdown).

    Raises:
        UnsupportedReportFormatError: If the name is not a supported format.
    """
    fmt = _FORMAT_ALIASES.get(value.strip().lower())
    if fmt is None:
        raise UnsupportedReportFormatError(f"unsupported report format: {value}")
    return fmt


def render_report(result: ValidationResult, fmt: ReportFormat | str) -> bytes:
    """Render a validation result in the given format.

    Args:
        result: The result to render.
        fmt: A ReportFormat or a format name accepted by parse_report_format.

    Returns:
        UTF-8 encoded report.

    Raises:
        UnsupportedReportFormatError: If the format is not supported.
    """
    if not isinstance(fmt, ReportFormat):
        fmt = parse_report_format(fmt)

    if fmt is ReportFormat.JSON:
        text = json.dumps(result.to_dict(), indent=2)
    elif fmt is ReportFormat.HTML:
        text = _render_html(result)
    else:
        text = _render_markdown(result)
    return text.encode("utf-8")


def _issues_by_severity(result: ValidationResult, severity: str) -> list[ValidationIssue]:
    return [issue for issue in result.issues if issue.severity == severity]


# -----------------------------------------------------------------------------
# HTML
# -----------------------------------------------------------------------------


def _render_html_issue(issue: ValidationIssue, css_class: str) -> str:
    location = html.escape(issue.file)
    if issue.line:
        location += f":{issue.line}"

    rows = [
        f"<strong>{html.escape(issue.message)}</strong>",
        f"File: {location}",
        f"Rule: {html.escape(issue.rule)}",
    ]
    if issue.suggestion:
        rows.append(f"Suggestion: {html.escape(issue.suggestion)}")
    if issue.fixable:
        rows.append("<em>Fixable</em>")

    body = "<br>\n            ".join(rows)
    return f'        <div class="issue {css_class}">\n            {body}\n        </div>'


def _render_html(result: ValidationResult) -> str:
    summary = result.summary()
    sections: list[str] = []

    for heading, severity in SECTIONS:
        issues = _issues_by_severity(result, severity)
        if not issues:
            continue
        cards = "\n".join(_render_html_issue(issue, severity) for issue in issues)
        sections.append(
            f'    <div class="issues">\n        <h2>{heading}</h2>\n{cards}\n    </div>'
        )

    return render_template(
        "report",
        title=html.escape(REPORT_TITLE),
        status_class="valid" if result.valid else "invalid",
        status_text="VALID" if result.valid else "INVALID",
        total_files=str(summary.total_files),
        valid_files=str(summary.valid_files),
        error_count=str(summary.error_count),
        warning_count=str(summary.warning_count),
        info_count=str(summary.info_count),
        fixable_count=str(summary.fixable_count),
        sections="\n".join(sections),
    )


# -----------------------------------------------------------------------------
# Markdown
# -----------------------------------------------------------------------------


def _render_markdown_issue(issue: ValidationIssue) -> list[str]:
    lines = [f"- **{issue.message}**", f"  - File: `{issue.file}`"]
    if issue.line:
        lines.append(f"  - Line: {issue.line}")
    lines.append(f"  - Rule: {issue.rule}")
    if issue.suggestion:
        lines.append(f"  - Suggestion: {issue.suggestion}")
    if issue.fixable:
        lines.append("  - ✅ Fixable")
    return lines


def _render_markdown(result: ValidationResult) -> str:
    summary = result.summary()
    lines = [f"# {REPORT_TITLE}", ""]

    if result.valid:
        lines.append("✅ **Status: VALID**")
    else:
        lines.append("❌ **Status: INVALID**")
    lines.append("")

    lines.extend(
        [
            "## Summary",
            "",
            f"- Total Files: {summary.total_files}",
            f"- Valid Files: {summary.valid_files}",
            f"- Errors: {summary.error_count}",
            f"- Warnings: {summary.warning_count}",
            f"- Info: {summary.info_count}",
            f"- Fixable Issues: {summary.fixable_count}",
            "",
        ]
    )

    for heading, severity in SECTIONS:
        issues = _issues_by_severity(result, severity)
        if not issues:
            continue
        lines.extend([f"## {heading}", ""])
        for issue in issues:
            lines.extend(_render_markdown_issue(issue))
        lines.append("")

    return "\n".join(lines)


def render_fix_result(result: FixResult) -> str:
    """Render a Markdown summary of a fix run."""
    summary = result.summary
    lines = [
        "# Fix Report",
        "",
        "## Summary",
        "",
        f"- Total Fixes: {summary.total_fixes}",
        f"- Applied: {summary.applied_fixes}",
        f"- Failed: {summary.failed_fixes}",
        f"- Skipped: {summary.skipped_fixes}",
        f"- Files Modified: {summary.files_modified}",
        "",
    ]

    if result.applied:
        lines.extend(["## Applied", ""])
        lines.extend(f"- `{fix.file}`: {fix.description or fix.action.value}" for fix in result.applied)
        lines.append("")

    if result.failed:
        lines.extend(["## Failed", ""])
        lines.extend(f"- `{failure.fix.file}`: {failure.error}" for failure in result.failed)
        lines.append("")

    if result.skipped:
        lines.extend(["## Skipped", ""])
        lines.extend(f"- `{issue.file}`: {issue.message} ({issue.rule})" for issue in result.skipped)
        lines.append("")

    return "\n".join(lines)

"""Template management for generated project files and reports."""

from __future__ import annotations

import importlib.resources
from string import Template

# Template name -> filename in the templates package directory
TEMPLATE_FILES = {
    "readme": "readme.template.md",
    "license": "license.template.txt",
    "gitignore": "gitignore.template",
    "dockerignore": "dockerignore.template",
    "report": "report.template.html",
}

TEMPLATE_NAMES = list(TEMPLATE_FILES)


def _get_template_path(name: str) -> str:
    """Get the filename for a template by name.

    Raises:
        ValueError: If template name is invalid
    """
    if name not in TEMPLATE_FILES:
        raise ValueError(f"Unknown template: {name}")
    return TEMPLATE_FILES[name]


def get_template(name: str) -> str:
    """Load a template file from package resources.

    Args:
        name: Template name (e.g., 'readme', 'report')

    Returns:
        The template content as a string

    Raises:
        ValueError: If template name is invalid
        FileNotFoundError: If template file cannot be loaded
    """
    template_file = _get_template_path(name)

    try:
        templates = importlib.resources.files("projcheck").joinpath("templates")
        return templates.joinpath(template_file).read_text(encoding="utf-8")
    except (FileNotFoundError, AttributeError, TypeError) as e:
        raise FileNotFoundError(f"Cannot load template '{name}': {e}") from e


def list_templates() -> list[str]:
    """List all available templates."""
    return TEMPLATE_NAMES.copy()


def render_template(name: str, **variables: str) -> str:
    """Render a template with $var substitution.

    Unknown placeholders are left in place.

    Args:
        name: Template name (e.g., 'readme', 'license')
        **variables: Variables to substitute in the template

    Returns:
        The rendered template

    Raises:
        ValueError: If template name is invalid
        FileNotFoundError: If template file cannot be loaded
    """
    return Template(get_template(name)).safe_substitute(variables)

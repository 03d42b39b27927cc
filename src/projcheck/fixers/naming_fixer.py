"""Fixers that rename files to follow conventions."""

from __future__ import annotations

from pathlib import PurePosixPath

from projcheck.fixers.base import BaseFixer, Fix, FixAction
from projcheck.fixers.utils import sibling_path
from projcheck.validators.base import ValidationIssue


class SpacesInNameFixer(BaseFixer):
    """Renames entries whose names contain spaces, replacing each with "_".

    Only naming issues about spaces are handled; other naming issues (case,
    camelCase) need a human decision and derive no fix.
    """

    rule = "quality.naming.conventions"

    def derive(self, issue: ValidationIssue) -> Fix | None:
        if "space" not in issue.message.lower():
            return None

        name = PurePosixPath(issue.file).name
        new_name = name.replace(" ", "_")
        if new_name == name:
            return None

        return Fix(
            id=self._fix_id(issue),
            action=FixAction.RENAME,
            file=issue.file,
            content=sibling_path(issue.file, new_name),
            automatic=True,
            description=f"Rename '{name}' to '{new_name}'",
            rule=issue.rule,
        )


class TemplateExtensionFixer(BaseFixer):
    """Appends the .tmpl extension to template files missing it."""

    rule = "template.file.extension"

    def derive(self, issue: ValidationIssue) -> Fix | None:
        return Fix(
            id=self._fix_id(issue),
            action=FixAction.RENAME,
            file=issue.file,
            content=issue.file + ".tmpl",
            automatic=True,
            description=f"Rename to {PurePosixPath(issue.file).name}.tmpl",
            rule=issue.rule,
        )

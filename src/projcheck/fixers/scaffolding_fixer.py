"""Fixers for missing scaffolding files.

Each fixer derives a create fix whose content is rendered from a packaged
template: README.md, LICENSE, .gitignore and .dockerignore.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from projcheck.config import ProjcheckConfig
from projcheck.fixers.base import BaseFixer, Fix, FixAction
from projcheck.fixers.utils import derive_project_name, sibling_path
from projcheck.template_manager import render_template
from projcheck.validators.base import ValidationIssue


class MissingFileFixer(BaseFixer):
    """Base for fixers that create a missing file from a template.

    Subclasses set `rule`, `filename` and `template`.
    """

    filename: str = ""
    template: str = ""

    def __init__(self, project_root: Path, config: ProjcheckConfig | None = None) -> None:
        super().__init__(project_root, config)
        self.project_name = self.config.project_name or derive_project_name(project_root)
        self.year = str(datetime.now(timezone.utc).year)

    def render(self) -> str:
        """Render the file content for this fixer's template."""
        return render_template(self.template, project_name=self.project_name, year=self.year)

    def derive(self, issue: ValidationIssue) -> Fix | None:
        return Fix(
            id=self._fix_id(issue),
            action=FixAction.CREATE,
            file=sibling_path(issue.file, self.filename),
            content=self.render(),
            automatic=True,
            description=f"Create {self.filename}",
            rule=issue.rule,
        )


class ReadmeFixer(MissingFileFixer):
    """Creates a README.md skeleton with the standard sections."""

    rule = "structure.readme.required"
    filename = "README.md"
    template = "readme"


class LicenseFixer(MissingFileFixer):
    """Creates an MIT LICENSE file.

    Not automatic: choosing a license is the project owner's call.
    """

    rule = "structure.license.required"
    filename = "LICENSE"
    template = "license"

    def derive(self, issue: ValidationIssue) -> Fix | None:
        fix = super().derive(issue)
        if fix is None:
            return None
        return Fix(
            id=fix.id,
            action=fix.action,
            file=fix.file,
            content=fix.content,
            automatic=False,
            description="Create LICENSE (MIT)",
            rule=fix.rule,
        )


class GitignoreFixer(MissingFileFixer):
    """Creates a .gitignore covering common dependency, build and editor files."""

    rule = "structure.gitignore.required"
    filename = ".gitignore"
    template = "gitignore"


class DockerignoreFixer(MissingFileFixer):
    """Creates a .dockerignore for Docker projects."""

    rule = "docker.dockerignore"
    filename = ".dockerignore"
    template = "dockerignore"

"""Template directory validator.

Files under the project's template directory are rendered by the scaffolding
pipeline and must carry the .tmpl extension; .tmpl files must contain
template syntax.
"""

from __future__ import annotations

from pathlib import Path

from projcheck.validators.base import BaseValidator, ValidationIssue, ValidationResult
from projcheck.validators.path_filter import iter_project_files
from projcheck.validators.project_files import check_template

TEMPLATE_EXTENSION = ".tmpl"


class TemplateValidator(BaseValidator):
    """Checks extensions and syntax of files in the template directory."""

    name = "templates"

    def __init__(self, project_root: Path, templates_dir: str = "templates") -> None:
        """Initialize validator.

        Args:
            project_root: Root directory of the project.
            templates_dir: Template directory, relative to the project root.
        """
        super().__init__(project_root)
        self.templates_dir = templates_dir

    def validate(self) -> ValidationResult:
        result = ValidationResult(name=self.name)
        template_root = self.project_root / self.templates_dir
        if not template_root.is_dir():
            return result

        for entry in iter_project_files(template_root):
            result.total_files += 1
            relative = self._relative(entry.path)

            if not entry.name.endswith(TEMPLATE_EXTENSION):
                result.add(
                    ValidationIssue(
                        severity="warning",
                        message="Template file should have .tmpl extension",
                        file=relative,
                        rule="template.file.extension",
                        fixable=True,
                        suggestion=entry.name + TEMPLATE_EXTENSION,
                    )
                )
                result.valid_files += 1
                continue

            try:
                problems = check_template(entry.path)
            except (OSError, UnicodeDecodeError) as e:
                problems = [f"cannot read template: {e}"]
            for problem in problems:
                result.add(
                    ValidationIssue(
                        severity="warning",
                        message=problem,
                        file=relative,
                        rule="template.syntax",
                    )
                )
            result.valid_files += 1

        return result

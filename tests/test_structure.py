"""Tests for the structure checker and project walking."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from projcheck.validators.base import ValidationResult
from projcheck.validators.path_filter import StructureWalkError, walk_project
from projcheck.validators.structure import (
    ProjectType,
    StructureChecker,
    detect_project_type,
    expected_name,
)


def _by_rule(result: ValidationResult, rule: str) -> list:
    return [issue for issue in result.issues if issue.rule == rule]


# -----------------------------------------------------------------------------
# Walk Tests
# -----------------------------------------------------------------------------


class TestWalkProject:
    """Tests for walk_project()."""

    def test_sorted_and_pruned(self, tmp_path: Path) -> None:
        """Test entries come out sorted and ignored dirs are not descended into."""
        (tmp_path / "b.txt").write_text("")
        (tmp_path / "a.txt").write_text("")
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "main.py").write_text("")
        (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
        (tmp_path / "node_modules" / "pkg" / "index.js").write_text("")

        relatives = [entry.relative for entry in walk_project(tmp_path)]
        assert relatives.index("a.txt") < relatives.index("b.txt")
        assert "src/main.py" in relatives
        assert "node_modules" in relatives
        assert not any(r.startswith("node_modules/") for r in relatives)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_unreadable_directory_raises(self, tmp_path: Path) -> None:
        """Test a directory that cannot be listed aborts the walk."""
        if hasattr(os, "geteuid") and os.geteuid() == 0:
            pytest.skip("root can read any directory")
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "file.txt").write_text("")
        locked.chmod(0o000)
        try:
            with pytest.raises(StructureWalkError):
                list(walk_project(tmp_path))
        finally:
            locked.chmod(0o755)

    def test_broken_symlink_raises(self, tmp_path: Path) -> None:
        """Test an entry that cannot be stat'ed aborts the walk."""
        try:
            (tmp_path / "dangling").symlink_to(tmp_path / "does-not-exist")
        except OSError:
            pytest.skip("symlinks not supported")
        with pytest.raises(StructureWalkError):
            list(walk_project(tmp_path))


# -----------------------------------------------------------------------------
# Naming Tests
# -----------------------------------------------------------------------------


class TestExpectedName:
    """Tests for expected_name()."""

    @pytest.mark.parametrize(
        ("name", "is_dir", "expected"),
        [
            ("my file.txt", False, "my_file.txt"),
            ("my dir", True, "my_dir"),
            ("myModule.py", False, "my_module.py"),
            ("getHTTPResponse.go", False, "get_http_response.go"),
            ("myComponent.tsx", False, None),
            ("userService.js", False, None),
            ("Notes.txt", False, "notes.txt"),
            ("myComponents", True, "my-components"),
            ("Docs", True, None),
            ("main.py", False, None),
        ],
    )
    def test_expected_name(self, name: str, is_dir: bool, expected: str | None) -> None:
        """Test spaces, camelCase and uppercase rules in order."""
        assert expected_name(name, is_dir) == expected


# -----------------------------------------------------------------------------
# StructureChecker Tests
# -----------------------------------------------------------------------------


class TestStructureChecker:
    """Tests for StructureChecker.validate()."""

    def test_clean_project(self, clean_project: Path) -> None:
        """Test a project with the required files has no issues."""
        result = StructureChecker(clean_project).validate()
        assert result.issues == []
        assert result.valid is True
        assert result.total_files == 3
        assert result.valid_files == 3

    def test_repeated_runs_are_identical(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test validating an unchanged tree twice gives the same result."""
        write(clean_project / "docs" / "User Guide.md", "# Guide\n")
        write(clean_project / "myModule.py")
        write(clean_project / "go.mod", "module example.com/app\n\ngo 1.22\n")

        checker = StructureChecker(clean_project)
        first = checker.validate()
        second = StructureChecker(clean_project).validate()
        third = checker.validate()
        assert first.issues
        assert first == second == third

    def test_required_files_missing(self, tmp_path: Path) -> None:
        """Test each missing required file is a fixable error."""
        result = StructureChecker(tmp_path).validate()
        rules = [issue.rule for issue in result.errors]
        assert rules == [
            "structure.readme.required",
            "structure.license.required",
            "structure.gitignore.required",
        ]
        assert all(issue.fixable for issue in result.errors)
        assert [issue.file for issue in result.errors] == ["README.md", "LICENSE", ".gitignore"]

    def test_spaces_in_name(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test names with spaces get one fixable warning."""
        write(clean_project / "docs" / "User Guide.md", "# Guide\n")
        result = StructureChecker(clean_project).validate()
        [issue] = _by_rule(result, "quality.naming.conventions")
        assert issue.file == "docs/User Guide.md"
        assert "contains spaces" in issue.message
        assert issue.fixable is True
        assert issue.suggestion == "User_Guide.md"

    def test_one_naming_issue_per_entry(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test an entry breaking several naming rules yields one issue."""
        write(clean_project / "My Module.py")
        result = StructureChecker(clean_project).validate()
        assert len(_by_rule(result, "quality.naming.conventions")) == 1

    def test_camel_case_file(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test camelCase file names get a snake_case suggestion."""
        write(clean_project / "myModule.py")
        [issue] = _by_rule(StructureChecker(clean_project).validate(), "quality.naming.conventions")
        assert issue.suggestion == "my_module.py"
        assert "camelCase" in issue.message

    def test_camel_case_js_exempt(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test camelCase JavaScript/TypeScript modules are accepted."""
        write(clean_project / "src" / "userService.ts")
        result = StructureChecker(clean_project).validate()
        assert _by_rule(result, "quality.naming.conventions") == []

    def test_allowlisted_and_dotfiles(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test conventional names and dotfiles are exempt from naming rules."""
        write(clean_project / "CHANGELOG.md")
        write(clean_project / "Makefile", "all:\n\techo\n")
        write(clean_project / ".Env.Local")
        result = StructureChecker(clean_project).validate()
        assert _by_rule(result, "quality.naming.conventions") == []

    def test_uppercase_file(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test uppercase file names should be lowercase."""
        write(clean_project / "Notes.txt")
        [issue] = _by_rule(StructureChecker(clean_project).validate(), "quality.naming.conventions")
        assert issue.message == "File name 'Notes.txt' should be lowercase"
        assert issue.suggestion == "notes.txt"

    def test_camel_case_directory(self, clean_project: Path) -> None:
        """Test camelCase directories get a kebab-case suggestion."""
        (clean_project / "userProfiles").mkdir()
        [issue] = _by_rule(StructureChecker(clean_project).validate(), "quality.naming.conventions")
        assert issue.file == "userProfiles"
        assert issue.suggestion == "user-profiles"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_world_writable_file(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test group/other permissions produce a warning."""
        write(clean_project / "settings.conf", "", mode=0o666)
        [issue] = _by_rule(StructureChecker(clean_project).validate(), "security.file_permissions")
        assert issue.severity == "warning"
        assert issue.file == "settings.conf"
        assert issue.fixable is False
        assert issue.suggestion == "rw-------"
        assert "expected rw------- or stricter" in issue.message

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_group_readable_file(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test group/other read access is flagged; owner-only access is not."""
        write(clean_project / "shared.conf", "", mode=0o644)
        write(clean_project / "private.conf", "", mode=0o600)
        issues = _by_rule(StructureChecker(clean_project).validate(), "security.file_permissions")
        assert [issue.file for issue in issues] == ["shared.conf"]
        assert "-rw-r--r--" in issues[0].message

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_executable_markdown(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test executable bits on non-executable types produce an info issue."""
        write(clean_project / "notes.md", "", mode=0o744)
        [issue] = _by_rule(StructureChecker(clean_project).validate(), "security.executable_permissions")
        assert issue.severity == "info"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_executable_script_ok(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test executable scripts are fine."""
        write(clean_project / "run.sh", "#!/bin/sh\n", mode=0o744)
        result = StructureChecker(clean_project).validate()
        assert _by_rule(result, "security.executable_permissions") == []

    def test_ignored_directories_not_checked(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test vendored directories are not walked."""
        write(clean_project / "node_modules" / "someLib" / "Bad Name.js")
        result = StructureChecker(clean_project).validate()
        assert _by_rule(result, "quality.naming.conventions") == []


# -----------------------------------------------------------------------------
# Project Type Tests
# -----------------------------------------------------------------------------


class TestProjectType:
    """Tests for project type detection and recommendations."""

    def test_detection_priority(self, tmp_path: Path) -> None:
        """Test Go wins over Node, Node over Python, Python over Docker."""
        assert detect_project_type(tmp_path) is None
        (tmp_path / "Dockerfile").write_text("")
        assert detect_project_type(tmp_path) is ProjectType.DOCKER
        (tmp_path / "requirements.txt").write_text("")
        assert detect_project_type(tmp_path) is ProjectType.PYTHON
        (tmp_path / "package.json").write_text("{}")
        assert detect_project_type(tmp_path) is ProjectType.NODE
        (tmp_path / "go.mod").write_text("")
        assert detect_project_type(tmp_path) is ProjectType.GO

    def test_go_recommendations(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test Go projects without entry point or layout get recommendations."""
        write(clean_project / "go.mod", "module example.com/app\n\ngo 1.22\n")
        result = StructureChecker(clean_project).validate()
        assert len(_by_rule(result, "go.entry_point")) == 1
        assert [i.file for i in _by_rule(result, "go.recommended_structure")] == ["pkg", "internal"]

    def test_go_with_cmd_dir(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test a cmd/ directory satisfies the Go entry point check."""
        write(clean_project / "go.mod", "module example.com/app\n\ngo 1.22\n")
        write(clean_project / "cmd" / "app" / "main.go", "package main\n")
        assert _by_rule(StructureChecker(clean_project).validate(), "go.entry_point") == []

    def test_node_entry_point(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test Node projects need src/ or index.js."""
        write(clean_project / "package.json", '{"name": "app", "version": "1.0.0"}')
        assert len(_by_rule(StructureChecker(clean_project).validate(), "node.entry_point")) == 1
        write(clean_project / "index.js", "")
        assert _by_rule(StructureChecker(clean_project).validate(), "node.entry_point") == []

    def test_python_src_layout(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test Python projects are nudged towards a src/ layout."""
        write(clean_project / "pyproject.toml", "[project]\nname = 'app'\n")
        [issue] = _by_rule(StructureChecker(clean_project).validate(), "python.src_layout")
        assert issue.severity == "info"

    def test_docker_dockerignore(self, clean_project: Path, write: Callable[..., Path]) -> None:
        """Test Docker projects without .dockerignore get a fixable warning."""
        write(clean_project / "Dockerfile", "FROM alpine\nWORKDIR /app\nCOPY . .\n")
        [issue] = _by_rule(StructureChecker(clean_project).validate(), "docker.dockerignore")
        assert issue.fixable is True
        assert issue.file == ".dockerignore"

"""Tests for constbox.cli.commands.verify_cmd."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from constbox.cli.main import app
from constbox.kernel.parsing import parser_registry

PRIVACY_LINE = "non exported reference A::Widget found in b/use.rb on line 5"
DEPENDENCY_LINE = "non imported reference A::Widget found in b/use.rb on line 5"


@pytest.fixture
def runner():
    """Fixture providing a Typer CLI test runner."""
    return CliRunner()


def _verify(runner: CliRunner, root: Path, *args: str):
    return runner.invoke(app, ["verify", "--root", str(root), *args])


class TestVerify:
    """The verify command."""

    def test_reports_privacy_and_dependency(self, runner, widget_repo: Path) -> None:
        result = _verify(runner, widget_repo)
        assert result.exit_code == 1
        lines = result.output.splitlines()
        assert DEPENDENCY_LINE in lines
        assert PRIVACY_LINE in lines
        assert lines.index(DEPENDENCY_LINE) < lines.index(PRIVACY_LINE)

    def test_declared_allow_lists_exit_zero(self, runner, widget_repo: Path) -> None:
        (widget_repo / "a/box.yml").write_text("exports:\n- A::Widget\n", encoding="utf-8")
        (widget_repo / "b/box.yml").write_text("imports:\n- A::Widget\n", encoding="utf-8")
        result = _verify(runner, widget_repo)
        assert result.exit_code == 0
        assert "non exported" not in result.output
        assert "non imported" not in result.output

    def test_missing_export_only(self, runner, widget_repo: Path) -> None:
        (widget_repo / "b/box.yml").write_text("imports:\n- A::Widget\n", encoding="utf-8")
        result = _verify(runner, widget_repo)
        assert result.exit_code == 1
        assert PRIVACY_LINE in result.output
        assert DEPENDENCY_LINE not in result.output

    def test_unresolved_references_never_violate(self, runner, write_repo) -> None:
        root = write_repo({
            "a/box.yml": "",
            "a/widget.rb": "module A\nend\n",
            "b/box.yml": "",
            "b/use.rb": "module B\n  Undefined::Thing.new\nend\n",
        })
        result = _verify(runner, root, "--show-unresolved")
        assert result.exit_code == 0
        assert "unresolved reference Undefined::Thing found in b/use.rb on line 2" in result.output
        assert "non exported" not in result.output

    def test_quiet_suppresses_summary(self, runner, widget_repo: Path) -> None:
        result = runner.invoke(app, ["-q", "verify", "--root", str(widget_repo)])
        assert result.exit_code == 1
        assert "violation(s)" not in result.output
        assert PRIVACY_LINE in result.output

    def test_ignore_glob_skips_references(self, runner, widget_repo: Path) -> None:
        result = _verify(runner, widget_repo, "--ignore", "b/*")
        assert result.exit_code == 0

    def test_reopening_across_packages_is_reported_not_failed(self, runner, write_repo) -> None:
        root = write_repo({
            "a/box.yml": "",
            "a/shared.rb": "module Shared\nend\n",
            "b/box.yml": "",
            "b/shared.rb": "module Shared\nend\n",
        })
        result = _verify(runner, root)
        assert result.exit_code == 0
        assert (
            "definition conflict Shared defined in a (a/shared.rb:1) and b (b/shared.rb:1)"
            in result.output
        )

    def test_invalid_box_is_an_error(self, runner, widget_repo: Path) -> None:
        (widget_repo / "a/box.yml").write_text("exports: A::Widget\n", encoding="utf-8")
        result = _verify(runner, widget_repo)
        assert result.exit_code == 1
        assert "invalid box a/box.yml" in result.output

    def test_syntax_failure_is_listed(self, runner, widget_repo: Path) -> None:
        (widget_repo / "a/broken.rb").write_text("class Broken\n", encoding="utf-8")
        result = _verify(runner, widget_repo)
        assert result.exit_code == 1
        assert "skipped a/broken.rb: syntax error" in result.output

    def test_missing_root_is_fatal(self, runner, tmp_path: Path) -> None:
        result = _verify(runner, tmp_path / "missing")
        assert result.exit_code == 2
        assert "error:" in result.output

    def test_json_format(self, runner, widget_repo: Path) -> None:
        result = runner.invoke(
            app, ["-q", "verify", "--root", str(widget_repo), "--format", "json"]
        )
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert [v["kind"] for v in data["violations"]] == ["dependency", "privacy"]
        assert data["violations"][0]["line"] == 5
        assert data["summary"]["violations"] == 2
        assert data["summary"]["privacy"] == 1
        assert data["summary"]["dependency"] == 1

    def test_unknown_format(self, runner, widget_repo: Path) -> None:
        result = _verify(runner, widget_repo, "--format", "xml")
        assert result.exit_code == 2

    def test_missing_grammar_is_fatal(
        self, runner, widget_repo: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _unavailable(name: str) -> object:
            raise LookupError(f"language {name} not installed")

        monkeypatch.setattr(parser_registry, "get_language", _unavailable)
        monkeypatch.setattr(parser_registry, "_registry", None)
        result = _verify(runner, widget_repo)
        assert result.exit_code == 2
        assert "No parser available for ruby" in result.output
        assert "skipped" not in result.output


class TestVersion:
    """Global flags."""

    def test_version(self, runner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "constbox" in result.output

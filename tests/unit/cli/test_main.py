"""Tests for the tabrelay entry point."""

from __future__ import annotations

from typer.testing import CliRunner

from tabrelay.cli.main import app

runner = CliRunner()


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.startswith("tabrelay ")


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("tabrelay ")


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("save", "save-all", "categories", "init"):
        assert name in result.output

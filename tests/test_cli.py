"""Tests for the command line interface."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from reposentry import __version__
from reposentry.cli.main import cli
from reposentry.core.backend import GenerationBackend


def missing_runner(cmd, **kwargs):
    raise FileNotFoundError(cmd[0])


def offline_backend(settings=None):
    return GenerationBackend(settings, runner=missing_runner, sleep=lambda _: None)


@pytest.fixture
def runner() -> CliRunner:
    """Return a click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def no_backend():
    """Run every command without a generation backend or git."""
    with (
        patch("reposentry.cli.commands.analyze.GenerationBackend", side_effect=offline_backend),
        patch("reposentry.scanners.git.git_command", return_value=""),
    ):
        yield


class TestAnalyzeCLI:
    """Tests for the analyze command."""

    def test_full_analysis(self, runner: CliRunner, temp_project: Path) -> None:
        """Test a full run without a backend."""
        result = runner.invoke(cli, ["analyze", "--path", str(temp_project)])

        assert result.exit_code == 0, result.output
        assert "Overall Grade" in result.output
        assert "Warning:" in result.output

        output_dir = temp_project / ".reposentry"
        assert (output_dir / "HEALTH_REPORT.md").exists()
        assert (output_dir / "diagrams" / "architecture.mmd").exists()
        assert (output_dir / "team" / "CODEOWNERS.suggested").exists()
        assert "[Generation unavailable" in (output_dir / "README.md").read_text()

        analysis = json.loads((output_dir / "analysis.json").read_text())
        assert analysis["project"] == "demo"
        assert len(analysis["categories"]) == 7

    def test_rerun_needs_force(self, runner: CliRunner, temp_project: Path) -> None:
        """Test that a second run refuses a non-empty output directory."""
        runner.invoke(cli, ["analyze", "-p", str(temp_project), "--health"])

        result = runner.invoke(cli, ["analyze", "-p", str(temp_project), "--health"])

        assert result.exit_code == 1
        assert "--force" in result.output

    def test_selected_engines_only(self, runner: CliRunner, temp_project: Path, tmp_path: Path) -> None:
        """Test that engine flags limit the run."""
        out = tmp_path / "docs-only"

        result = runner.invoke(cli, ["analyze", "-p", str(temp_project), "-o", str(out), "--docs"])

        assert result.exit_code == 0, result.output
        assert (out / "README.md").exists()
        assert not (out / "HEALTH_REPORT.md").exists()
        assert not (out / "security").exists()

    def test_json_format(self, runner: CliRunner, temp_project: Path) -> None:
        """Test the JSON bundle export."""
        result = runner.invoke(cli, ["analyze", "-p", str(temp_project), "-f", "json", "--team"])

        assert result.exit_code == 0, result.output
        bundle = json.loads((temp_project / ".reposentry" / "bundle.json").read_text())
        assert any(f["path"] == "team/CODEOWNERS.suggested" for f in bundle["files"])

    def test_invalid_format(self, runner: CliRunner, temp_project: Path) -> None:
        """Test that click rejects unknown formats."""
        result = runner.invoke(cli, ["analyze", "-p", str(temp_project), "-f", "pdf"])
        assert result.exit_code != 0


class TestHistoryCLI:
    """Tests for the compare and badge commands."""

    def test_compare_after_two_runs(self, runner: CliRunner, temp_project: Path) -> None:
        """Test comparing two forced runs of an unchanged project."""
        for _ in range(2):
            result = runner.invoke(cli, ["analyze", "-p", str(temp_project), "--force"])
            assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["compare", "-p", str(temp_project)])

        assert result.exit_code == 0, result.output
        assert "Security" in result.output
        assert "stable" in result.output

    def test_compare_without_history(self, runner: CliRunner, temp_project: Path) -> None:
        """Test that one run is not enough to compare."""
        runner.invoke(cli, ["analyze", "-p", str(temp_project), "--health"])

        result = runner.invoke(cli, ["compare", "-p", str(temp_project)])

        assert result.exit_code == 1
        assert "two analysis runs" in result.output

    def test_badge(self, runner: CliRunner, temp_project: Path) -> None:
        """Test printing the badge for the latest run."""
        runner.invoke(cli, ["analyze", "-p", str(temp_project), "--health"])

        result = runner.invoke(cli, ["badge", "-p", str(temp_project)])

        assert result.exit_code == 0, result.output
        assert "[![RepoSentry Score:" in result.output

    def test_badge_without_analysis(self, runner: CliRunner, temp_project: Path) -> None:
        """Test the error when no analysis exists."""
        result = runner.invoke(cli, ["badge", "-p", str(temp_project)])
        assert result.exit_code == 1


class TestMainCLI:
    """Tests for the command group."""

    def test_version(self, runner: CliRunner) -> None:
        """Test --version."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_models_without_backend(self, runner: CliRunner) -> None:
        """Test the models command when no backend is installed."""
        with patch("reposentry.core.backend.GenerationBackend", side_effect=offline_backend):
            result = runner.invoke(cli, ["models"])

        assert result.exit_code == 0
        assert "No Copilot CLI detected" in result.output

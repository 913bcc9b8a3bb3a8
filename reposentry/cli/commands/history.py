"""CLI commands that read a previous run's output: compare and badge."""

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from reposentry.health.history import HISTORY_FILE, HistoryLedger
from reposentry.health.report import badge_markdown, format_run_date
from reposentry.utils.config import ProjectConfig

console = Console()


def _output_dir(path: str, output: str | None) -> Path:
    project_path = Path(path).resolve()
    output_dir = Path(output or ProjectConfig.load(project_path).output)
    return output_dir if output_dir.is_absolute() else project_path / output_dir


@click.command()
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=".",
    help="Path to the project (default: current directory)",
)
@click.option("--output", "-o", type=click.Path(), help="Output directory of previous runs")
@click.option("--run", "run_number", type=int, help="Run number to compare against the latest (default: previous run)")
def compare(path: str, output: str | None, run_number: int | None) -> None:
    """Compare an earlier run's scores with the latest run.

    \b
    Examples:
        reposentry compare            # Previous run vs latest
        reposentry compare --run 1    # First recorded run vs latest
    """
    ledger = HistoryLedger(_output_dir(path, output) / HISTORY_FILE)

    try:
        comparison = ledger.compare(run_number)
    except ValueError as e:
        console.print(f"[yellow]{e}[/]")
        sys.exit(1)

    table = Table(
        title=(
            f"Run comparison: {format_run_date(comparison.older.analyzed_at)} → "
            f"{format_run_date(comparison.newer.analyzed_at)}"
        ),
        show_header=True,
    )
    table.add_column("Category", style="cyan")
    table.add_column("Before", justify="right")
    table.add_column("After", justify="right")
    table.add_column("Change", justify="right")

    for delta in comparison.categories:
        table.add_row(
            delta.name,
            str(delta.before.score) if delta.before else "-",
            str(delta.after.score) if delta.after else "-",
            _format_delta(delta.delta),
        )
    table.add_row(
        "[bold]Overall[/]",
        f"{comparison.older.overall_score} ({comparison.older.overall_grade})",
        f"{comparison.newer.overall_score} ({comparison.newer.overall_grade})",
        _format_delta(comparison.overall_delta),
    )

    console.print(table)
    console.print(f"\n{comparison.trend_emoji} Trend: [bold]{comparison.trend}[/]")


def _format_delta(delta: int) -> str:
    if delta > 0:
        return f"[green]+{delta}[/]"
    if delta < 0:
        return f"[red]{delta}[/]"
    return "[dim]0[/]"


@click.command()
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=".",
    help="Path to the project (default: current directory)",
)
@click.option("--output", "-o", type=click.Path(), help="Output directory of the analysis")
def badge(path: str, output: str | None) -> None:
    """Print the README badge for the latest analysis."""
    analysis_path = _output_dir(path, output) / "analysis.json"

    try:
        data = json.loads(analysis_path.read_text(encoding="utf-8"))
        grade = str(data["overallGrade"])
        score = int(data["overallScore"])
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        console.print(f"[red]Error:[/] Could not read {analysis_path}: {e}")
        console.print("Run [cyan]reposentry analyze[/] first.")
        sys.exit(1)

    console.print("Add this to your README:\n")
    click.echo(badge_markdown(grade, score))

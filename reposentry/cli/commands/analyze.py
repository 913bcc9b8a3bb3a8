"""CLI command for running a repository analysis."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from reposentry.core.backend import GenerationBackend
from reposentry.engines import BaseEngine
from reposentry.health.models import CategoryResult
from reposentry.orchestrator import AnalysisOptions, AnalysisRun, Orchestrator
from reposentry.output.store import ArtifactStoreError, OutputFormat
from reposentry.utils.config import ProjectConfig
from reposentry.utils.logging_config import configure_logging

console = Console()

CATEGORY_EMOJIS = {
    "Documentation": "📝",
    "Architecture": "🏗️",
    "Security": "🔒",
    "CI/CD": "🔄",
    "Testing": "🧪",
    "Performance": "⚡",
    "Collaboration": "🤝",
}

# CLI flag parameter name -> engine key
ENGINE_FLAGS = {
    "docs": "docs",
    "architecture": "architecture",
    "security": "security",
    "ci": "ci",
    "api_tests": "api-tests",
    "performance": "performance",
    "team": "team",
    "health": "health",
}


@click.command()
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=".",
    help="Path to the project (default: current directory)",
)
@click.option("--output", "-o", type=click.Path(), help="Output directory (default: .reposentry)")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    help="Output format (default: markdown)",
)
@click.option("--ignore", multiple=True, help="Extra file or directory pattern to skip (repeatable)")
@click.option("--force", is_flag=True, help="Overwrite a non-empty output directory (keeps history.json)")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.option("--model", help="Backend model to use for generation")
@click.option("--docs", is_flag=True, help="Run the documentation engine")
@click.option("--architecture", is_flag=True, help="Run the architecture engine")
@click.option("--security", is_flag=True, help="Run the security engine")
@click.option("--ci", is_flag=True, help="Run the CI/CD engine")
@click.option("--api-tests", "api_tests", is_flag=True, help="Run the API testing engine")
@click.option("--performance", is_flag=True, help="Run the performance engine")
@click.option("--team", is_flag=True, help="Run the collaboration engine")
@click.option("--health", is_flag=True, help="Run the health report")
def analyze(
    path: str,
    output: str | None,
    output_format: str | None,
    ignore: tuple[str, ...],
    force: bool,
    verbose: bool,
    model: str | None,
    **engine_flags: bool,
) -> None:
    """Analyze a repository and generate a scored health report.

    Without engine flags every engine runs. With flags, only the selected
    engines run; the health report runs last when it is selected.

    \b
    Examples:
        reposentry analyze                         # Full analysis
        reposentry analyze --security --health     # Security plus overall grade
        reposentry analyze -f html --force         # Re-run with an HTML export
    """
    configure_logging(verbose)
    project_path = Path(path).resolve()
    config = ProjectConfig.load(project_path)

    try:
        fmt = OutputFormat(output_format or config.format)
    except ValueError:
        console.print(f"[red]Error:[/] Unsupported output format: {config.format}")
        sys.exit(1)

    output_dir = Path(output or config.output)
    if not output_dir.is_absolute():
        output_dir = project_path / output_dir

    backend = GenerationBackend(config.backend_settings(project_path))
    if model:
        backend.set_model(model)

    if backend.is_available:
        console.print(f"[dim]Generation backend: {backend.backend_name} ({backend.model})[/]")
    else:
        console.print(
            "[yellow]Warning:[/] No Copilot CLI detected. Install via: npm i -g @github/copilot\n"
            "[yellow]Continuing:[/] generated artifacts will contain placeholder text."
        )

    options = AnalysisOptions(
        root_dir=project_path,
        output_dir=output_dir,
        output_format=fmt,
        ignore=[*config.ignore, *ignore],
        force=force,
        selected={key for flag, key in ENGINE_FLAGS.items() if engine_flags.get(flag)},
        weights=config.weights or None,
    )

    try:
        with console.status("[bold blue]Scanning repository...") as status:

            def announce(engine: BaseEngine) -> None:
                status.update(f"[bold blue]Running {engine.label}...")

            orchestrator = Orchestrator(options, backend, on_engine_start=announce)
            run = orchestrator.run()
    except ArtifactStoreError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    _display_summary(run, output_dir)


def _display_summary(run: AnalysisRun, output_dir: Path) -> None:
    """Display the analysis summary in the terminal.

    Args:
        run: Completed analysis run
        output_dir: Where the artifacts were written
    """
    table = Table(title="Analysis Summary", show_header=True)
    table.add_column("Category", style="cyan")
    table.add_column("Grade", justify="center")
    table.add_column("Score", justify="right")
    table.add_column("Details")

    for category in run.categories:
        table.add_row(
            f"{CATEGORY_EMOJIS.get(category.name, '📊')} {category.name}",
            _styled_grade(category),
            f"{category.score}/100",
            category.details,
        )

    if run.categories:
        console.print(table)

    footer = f"[dim]Output: {output_dir} ({run.file_count} files generated)[/]"
    if run.overall is None:
        console.print(footer)
        return

    console.print(
        Panel(
            f"{run.overall.grade.emoji} Overall Grade: {_styled_grade(run.overall)} "
            f"({run.overall.score}/100)\n\n{footer}",
            title="[bold]Analysis Complete[/]",
            subtitle=run.context.project_name,
        )
    )


def _styled_grade(result: CategoryResult) -> str:
    return f"[bold {result.grade.color}]{result.grade.value}[/]"

"""Main CLI entry point for RepoSentry."""

import click
from rich.console import Console
from rich.table import Table

from reposentry import __version__
from reposentry.cli.commands import analyze, badge, compare

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="reposentry")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """RepoSentry - scored health reports and generated docs for any repository.

    \b
    Examples:
        reposentry analyze
        reposentry compare
        reposentry badge
    """
    # Ensure context object exists
    ctx.ensure_object(dict)


# Register commands
cli.add_command(analyze)
cli.add_command(compare)
cli.add_command(badge)


@cli.command()
def models() -> None:
    """List the models offered by the generation backend."""
    from reposentry.core.backend import GenerationBackend

    backend = GenerationBackend()
    if not backend.is_available:
        console.print("[yellow]No Copilot CLI detected.[/] Install via: npm i -g @github/copilot")
        return

    available = backend.available_models()
    if not available:
        console.print(f"[yellow]{backend.backend_name} did not report any models.[/]")
        return

    table = Table(title=f"Models ({backend.backend_name})")
    table.add_column("Model", style="cyan")
    table.add_column("Default", justify="center")
    for name in available:
        table.add_row(name, "✓" if name == backend.model else "")

    console.print(table)


if __name__ == "__main__":
    cli()

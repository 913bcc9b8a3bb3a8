"""CLI commands for RepoSentry."""

from reposentry.cli.commands.analyze import analyze
from reposentry.cli.commands.history import badge, compare

__all__ = ["analyze", "badge", "compare"]

"""Command line interface for RepoSentry."""

"""Nox configuration for linting and testing."""

import nox

nox.options.sessions = ["lint", "test"]


@nox.session
def lint(session: nox.Session) -> None:
    """Run linting and auto-fix issues (ruff, black, mypy)."""
    session.install("-e", ".[dev]")
    session.run("ruff", "check", "--fix", "reposentry", "tests")
    session.run("black", "reposentry", "tests")
    session.run("mypy", "reposentry", "--ignore-missing-imports")


@nox.session
def test(session: nox.Session) -> None:
    """Run the test suite."""
    session.install("-e", ".[dev]")
    session.run("pytest")


@nox.session
def test_cov(session: nox.Session) -> None:
    """Run tests with coverage."""
    session.install("-e", ".[dev]")
    session.run("pytest", "--cov=reposentry", "--cov-report=term-missing")

"""Pytest configuration and shared fixtures."""

from collections.abc import Generator, Sequence
from pathlib import Path

import pytest

from reposentry.health.models import AnalysisContext


class FakeGenerator:
    """Generator double that records prompts and returns canned text."""

    def __init__(self, response: str = "Generated content") -> None:
        self.response = response
        self.prompts: list[str] = []
        self.batches: list[list[str]] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.response

    def batch_generate(
        self,
        requests: Sequence[tuple[str, str]],
        delay: float | None = None,
    ) -> dict[str, str]:
        self.batches.append([key for key, _ in requests])
        return {key: self.generate(prompt) for key, prompt in requests}


@pytest.fixture
def generator() -> FakeGenerator:
    """Return a fake generation backend."""
    return FakeGenerator()


@pytest.fixture
def context() -> AnalysisContext:
    """Return a minimal analysis context."""
    return AnalysisContext(project_name="demo", languages=("Python",))


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a small Python web project."""
    project_dir = tmp_path / "demo"
    project_dir.mkdir()

    (project_dir / "README.md").write_text("# Demo\n")
    (project_dir / ".gitignore").write_text("__pycache__/\n")
    (project_dir / "requirements.txt").write_text("fastapi==0.110.0\nsqlalchemy\npytest\n")

    app_dir = project_dir / "app"
    app_dir.mkdir()
    (app_dir / "main.py").write_text(
        """
from fastapi import FastAPI
from app import models

app = FastAPI()


@app.get("/users")
def list_users():
    return []


@app.post("/users")
def create_user():
    return {}
"""
    )
    (app_dir / "models.py").write_text(
        """
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    email = Column(String)
"""
    )

    tests_dir = project_dir / "tests"
    tests_dir.mkdir()
    (tests_dir / "test_users.py").write_text("def test_users():\n    assert True\n")

    yield project_dir

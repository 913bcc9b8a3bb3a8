"""Base class and shared input for analysis engines."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from reposentry.core.backend import TextGenerator
from reposentry.health.models import AnalysisContext, CategoryResult
from reposentry.output.store import ArtifactStore
from reposentry.prompts import OutputKind, build_prompt
from reposentry.scanners import ProjectFindings

logger = logging.getLogger(__name__)


@dataclass
class EngineInput:
    """Everything an engine needs for one run.

    ``categories`` holds the results of the engines that already ran and is
    only consumed by the health engine.
    """

    context: AnalysisContext
    root_dir: Path
    findings: ProjectFindings = field(default_factory=ProjectFindings)
    categories: list[CategoryResult] = field(default_factory=list)


class BaseEngine(ABC):
    """Abstract base class for analysis engines.

    An engine gathers its findings, asks the generator for artifacts, writes
    them through the store and returns a score computed from repository
    facts only.
    """

    def __init__(self, generator: TextGenerator) -> None:
        self.generator = generator

    @property
    @abstractmethod
    def key(self) -> str:
        """Return the selection key (e.g. ``"docs"``)."""
        ...

    @property
    @abstractmethod
    def category(self) -> str:
        """Return the category name this engine scores."""
        ...

    @property
    def label(self) -> str:
        """Return a human-readable name for progress output."""
        return f"{self.category} Engine"

    @abstractmethod
    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        """Run the engine.

        Args:
            engine_input: Shared context and detector findings
            store: Artifact store for this run

        Returns:
            CategoryResult for this engine's category
        """
        ...

    def _result(self, score: float, details: str) -> CategoryResult:
        """Helper to create a clamped, graded CategoryResult."""
        return CategoryResult.create(self.category, score, details)

    def _generate(
        self,
        store: ArtifactStore,
        path: str,
        task: str,
        context: AnalysisContext,
        fmt: OutputKind = "markdown",
    ) -> str:
        """Generate one artifact and write it to ``path``.

        Returns:
            The generated text as returned by the backend
        """
        logger.debug(f"{self.label}: generating {path}")
        content = self.generator.generate(build_prompt(task, context, fmt))
        store.write(path, content)
        return content

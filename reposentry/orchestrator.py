"""Run selection and sequencing of analysis engines."""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from reposentry.core.backend import TextGenerator
from reposentry.engines import BaseEngine, EngineInput
from reposentry.engines.api_tests import APITestEngine
from reposentry.engines.architecture import ArchitectureEngine
from reposentry.engines.ci import CIEngine
from reposentry.engines.docs import DocsEngine
from reposentry.engines.health import OVERALL, HealthEngine
from reposentry.engines.performance import PerformanceEngine
from reposentry.engines.security import SecurityEngine
from reposentry.engines.team import TeamEngine
from reposentry.health.models import AnalysisContext, CategoryResult
from reposentry.health.scoring import overall_score
from reposentry.output.store import ArtifactStore, OutputFormat
from reposentry.scanners import ProjectFindings, build_directory_tree, repo_name, scan_project

logger = logging.getLogger(__name__)

HEALTH_KEY = "health"

# Fixed execution order; health always runs last
ENGINE_KEYS = ("docs", "architecture", "security", "ci", "api-tests", "performance", "team", HEALTH_KEY)


@dataclass
class AnalysisOptions:
    """Pass-through configuration for one run."""

    root_dir: Path
    output_dir: Path
    output_format: OutputFormat = OutputFormat.MARKDOWN
    ignore: list[str] = field(default_factory=list)
    force: bool = False
    selected: set[str] = field(default_factory=set)
    weights: dict[str, float] | None = None


@dataclass
class EngineSpec:
    """An engine together with the rule deciding whether it runs."""

    key: str
    engine: BaseEngine
    predicate: Callable[[AnalysisOptions], bool]


@dataclass
class AnalysisRun:
    """Outcome of one run."""

    categories: list[CategoryResult]
    overall: CategoryResult | None
    store: ArtifactStore
    findings: ProjectFindings
    context: AnalysisContext

    @property
    def file_count(self) -> int:
        return self.store.file_count


def default_engines(generator: TextGenerator, weights: Mapping[str, float] | None = None) -> list[BaseEngine]:
    """Build every engine, in execution order, sharing one generator."""
    return [
        DocsEngine(generator),
        ArchitectureEngine(generator),
        SecurityEngine(generator),
        CIEngine(generator),
        APITestEngine(generator),
        PerformanceEngine(generator),
        TeamEngine(generator),
        HealthEngine(generator, weights=weights),
    ]


def _is_selected(key: str) -> Callable[[AnalysisOptions], bool]:
    return lambda options: not options.selected or key in options.selected


class Orchestrator:
    """Runs the selected engines against one project.

    If no engine is selected every engine runs. The health engine consumes
    the results of the others, so it always runs last.
    """

    def __init__(
        self,
        options: AnalysisOptions,
        generator: TextGenerator,
        engines: Iterable[BaseEngine] | None = None,
        scanner: Callable[[Path, list[str]], ProjectFindings] = scan_project,
        on_engine_start: Callable[[BaseEngine], None] | None = None,
    ) -> None:
        self.options = options
        self.generator = generator
        self.scanner = scanner
        self.on_engine_start = on_engine_start

        built = list(engines) if engines is not None else default_engines(generator, options.weights)
        self.specs = [EngineSpec(key=e.key, engine=e, predicate=_is_selected(e.key)) for e in built]

        known = {spec.key for spec in self.specs}
        unknown = sorted(set(options.selected) - known)
        if unknown:
            raise ValueError(f"Unknown engine(s): {', '.join(unknown)}. Choose from: {', '.join(sorted(known))}")

    def should_run_all(self) -> bool:
        return not self.options.selected

    def planned_engines(self) -> list[BaseEngine]:
        """Engines that will run, in execution order (health last)."""
        chosen = [spec for spec in self.specs if spec.predicate(self.options)]
        chosen.sort(key=lambda spec: spec.key == HEALTH_KEY)
        return [spec.engine for spec in chosen]

    def run(self) -> AnalysisRun:
        """Scan the project, run the selected engines and export the results.

        Returns:
            AnalysisRun with every category result and the overall result
            (None when the health engine did not run)

        Raises:
            ArtifactStoreError: If the output directory cannot be prepared;
                raised before any engine runs
        """
        root = self.options.root_dir.resolve()

        findings = self.scanner(root, self._scan_ignores(root))
        context = self.build_context(root, findings)

        store = ArtifactStore(self.options.output_dir, self.options.output_format, self.options.force)
        store.initialize()

        categories: list[CategoryResult] = []
        overall: CategoryResult | None = None

        for engine in self.planned_engines():
            if self.on_engine_start is not None:
                self.on_engine_start(engine)

            engine_input = EngineInput(
                context=context,
                root_dir=root,
                findings=findings,
                categories=list(categories),
            )
            result = self._run_engine(engine, engine_input, store)

            if engine.key == HEALTH_KEY:
                overall = result
            else:
                categories.append(result)

        store.finalize()
        logger.debug(f"Run complete: {store.file_count} files written to {store.base_dir}")
        return AnalysisRun(
            categories=categories,
            overall=overall,
            store=store,
            findings=findings,
            context=context,
        )

    def build_context(self, root: Path, findings: ProjectFindings) -> AnalysisContext:
        """Assemble the shared per-run context from detector findings."""
        return AnalysisContext(
            project_name=repo_name(root),
            languages=tuple(findings.languages.languages),
            frameworks=tuple(findings.languages.frameworks),
            package_manager=findings.languages.package_manager,
            file_tree=build_directory_tree(findings.scan.files, 3),
        )

    def _scan_ignores(self, root: Path) -> list[str]:
        ignore = list(self.options.ignore)
        # Never analyze our own output when it lives inside the project
        output = self.options.output_dir.resolve()
        if output.is_relative_to(root) and output != root:
            ignore.append(output.relative_to(root).as_posix())
        return ignore

    def _run_engine(self, engine: BaseEngine, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        try:
            return engine.run(engine_input, store)
        except Exception as e:
            logger.error(f"{engine.label} failed: {e}")
            if engine.key == HEALTH_KEY:
                score = overall_score(engine_input.categories, self.options.weights)
                return CategoryResult.create(OVERALL, score, f"Error: {str(e)[:100]}")
            # Add a neutral result on failure
            return CategoryResult.create(engine.category, 50, f"Error: {str(e)[:100]}")

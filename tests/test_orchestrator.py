"""Tests for engine selection, sequencing and failure handling."""

from pathlib import Path
from unittest.mock import patch

import pytest

from reposentry.engines import BaseEngine, EngineInput
from reposentry.engines.health import HealthEngine
from reposentry.health.history import HistoryLedger
from reposentry.health.models import CategoryResult, Grade
from reposentry.orchestrator import ENGINE_KEYS, AnalysisOptions, Orchestrator, default_engines
from reposentry.output.store import ArtifactStore, OutputDirectoryNotEmptyError, OutputFormat
from reposentry.scanners import ProjectFindings, scan_project


class StubEngine(BaseEngine):
    """Engine with a fixed score that records what it saw."""

    def __init__(self, generator, key: str, category: str, score: int = 100, fail: bool = False) -> None:
        super().__init__(generator)
        self._key = key
        self._category = category
        self.score = score
        self.fail = fail
        self.seen: list[EngineInput] = []

    @property
    def key(self) -> str:
        return self._key

    @property
    def category(self) -> str:
        return self._category

    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        self.seen.append(engine_input)
        if self.fail:
            raise RuntimeError("engine exploded")
        store.write(f"{self._key}.md", f"# {self._category}")
        return self._result(self.score, "stub")


def empty_scanner(root: Path, ignore: list[str]) -> ProjectFindings:
    return ProjectFindings()


@pytest.fixture
def options(tmp_path: Path) -> AnalysisOptions:
    """Return options for an empty project."""
    project = tmp_path / "project"
    project.mkdir()
    return AnalysisOptions(root_dir=project, output_dir=project / ".reposentry")


# ==============================================================================
# Selection Tests
# ==============================================================================


class TestSelection:
    """Tests for engine selection."""

    def test_default_engines_cover_every_key(self, generator) -> None:
        """Test that the default engine set matches the known keys."""
        assert tuple(e.key for e in default_engines(generator)) == ENGINE_KEYS

    def test_no_selection_runs_all(self, options, generator) -> None:
        """Test that an empty selection runs every engine."""
        orchestrator = Orchestrator(options, generator)
        assert orchestrator.should_run_all()
        assert [e.key for e in orchestrator.planned_engines()] == list(ENGINE_KEYS)

    def test_selection_keeps_health_last(self, options, generator) -> None:
        """Test that only selected engines run and health is last."""
        options.selected = {"health", "security", "docs"}
        orchestrator = Orchestrator(options, generator)
        assert [e.key for e in orchestrator.planned_engines()] == ["docs", "security", "health"]

    def test_unknown_engine_rejected(self, options, generator) -> None:
        """Test that an unknown key is an error."""
        options.selected = {"docs", "lint"}
        with pytest.raises(ValueError, match="lint"):
            Orchestrator(options, generator)


# ==============================================================================
# Run Tests
# ==============================================================================


class TestRun:
    """Tests for Orchestrator.run."""

    def test_end_to_end_with_stub_engines(self, options, generator) -> None:
        """Test that 100 and 0 average to 50/F and history is written."""
        first = StubEngine(generator, "docs", "Documentation", 100)
        second = StubEngine(generator, "architecture", "Architecture", 0)
        engines = [HealthEngine(generator), first, second]

        run = Orchestrator(options, generator, engines=engines, scanner=empty_scanner).run()

        assert [c.score for c in run.categories] == [100, 0]
        assert run.overall is not None
        assert run.overall.score == 50
        assert run.overall.grade == Grade.F
        assert second.seen[0].categories == run.categories[:1]
        assert run.file_count == 2 + 4
        assert len(HistoryLedger(options.output_dir / "history.json").load()) == 1

    def test_engine_failure_is_neutral(self, options, generator) -> None:
        """Test that a failing engine yields a neutral 50 and the run continues."""
        broken = StubEngine(generator, "security", "Security", fail=True)
        healthy = StubEngine(generator, "ci", "CI/CD", 80)

        run = Orchestrator(options, generator, engines=[broken, healthy], scanner=empty_scanner).run()

        assert run.categories[0].score == 50
        assert run.categories[0].details == "Error: engine exploded"
        assert run.categories[1].score == 80
        assert run.overall is None

    def test_health_failure_still_scores(self, options, generator) -> None:
        """Test that a failing health engine still reports the weighted score."""
        docs = StubEngine(generator, "docs", "Documentation", 70)
        broken_health = StubEngine(generator, "health", "Overall", fail=True)

        run = Orchestrator(options, generator, engines=[docs, broken_health], scanner=empty_scanner).run()

        assert run.overall is not None
        assert run.overall.score == 70
        assert run.overall.details.startswith("Error:")

    def test_output_directory_error_before_engines(self, options, generator) -> None:
        """Test that a non-empty output directory stops the run before any engine."""
        options.output_dir.mkdir()
        (options.output_dir / "README.md").write_text("old")
        engine = StubEngine(generator, "docs", "Documentation")

        with pytest.raises(OutputDirectoryNotEmptyError):
            Orchestrator(options, generator, engines=[engine], scanner=empty_scanner).run()

        assert engine.seen == []

    def test_force_keeps_history(self, options, generator) -> None:
        """Test that consecutive forced runs accumulate history."""
        options.force = True
        for _ in range(3):
            engines = [StubEngine(generator, "docs", "Documentation", 90), HealthEngine(generator)]
            Orchestrator(options, generator, engines=engines, scanner=empty_scanner).run()

        assert len(HistoryLedger(options.output_dir / "history.json").load()) == 3

    def test_output_inside_project_is_not_scanned(self, options, generator) -> None:
        """Test that the output directory is excluded from the scan."""
        seen: list[list[str]] = []

        def scanner(root: Path, ignore: list[str]) -> ProjectFindings:
            seen.append(ignore)
            return ProjectFindings()

        options.ignore = ["dist"]
        Orchestrator(options, generator, engines=[], scanner=scanner).run()

        assert seen == [["dist", ".reposentry"]]

    def test_nested_output_keeps_parent_scanned(self, options, generator) -> None:
        """Test that a nested output directory excludes only itself from the scan."""
        root = options.root_dir
        (root / "src").mkdir()
        (root / "src" / "app.py").write_text("print(1)")
        options.output_dir = root / "src" / "reports"
        scanned: list[ProjectFindings] = []

        def scanner(path: Path, ignore: list[str]) -> ProjectFindings:
            assert ignore == ["src/reports"]
            findings = scan_project(path, ignore)
            scanned.append(findings)
            return findings

        with patch("reposentry.scanners.git.git_command", return_value=""):
            Orchestrator(options, generator, engines=[], scanner=scanner).run()

        assert "src/app.py" in scanned[0].scan.files
        assert not any(f.startswith("src/reports/") for f in scanned[0].scan.files)

    def test_json_format_bundle(self, options, generator) -> None:
        """Test that the export step runs after the engines."""
        options.output_format = OutputFormat.JSON
        engine = StubEngine(generator, "docs", "Documentation")

        run = Orchestrator(options, generator, engines=[engine], scanner=empty_scanner).run()

        assert (options.output_dir / "bundle.json").exists()
        assert run.file_count == 1

    def test_progress_callback(self, options, generator) -> None:
        """Test that the callback sees every engine in order."""
        started: list[str] = []
        engines = [StubEngine(generator, "team", "Collaboration"), StubEngine(generator, "ci", "CI/CD")]

        Orchestrator(
            options,
            generator,
            engines=engines,
            scanner=empty_scanner,
            on_engine_start=lambda engine: started.append(engine.key),
        ).run()

        assert started == ["team", "ci"]

    def test_context_from_findings(self, options, generator) -> None:
        """Test that the shared context names the project."""
        engine = StubEngine(generator, "docs", "Documentation")

        with patch("reposentry.scanners.git.git_command", return_value=""):
            run = Orchestrator(options, generator, engines=[engine], scanner=empty_scanner).run()

        assert run.context.project_name == "project"
        assert engine.seen[0].context == run.context

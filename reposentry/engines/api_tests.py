"""API testing engine: test plans, collections and coverage notes."""

from reposentry import prompts
from reposentry.engines import BaseEngine, EngineInput
from reposentry.health.models import CategoryResult
from reposentry.health.scoring import clamp_score
from reposentry.output.store import ArtifactStore
from reposentry.prompts import OutputKind

ARTIFACTS: list[tuple[str, str, OutputKind]] = [
    ("testing/API_TESTS.md", prompts.API_TESTS, "markdown"),
    ("testing/api-collection.json", prompts.API_COLLECTION, "json"),
    ("testing/api-tests.sh", prompts.SHELL_TESTS, "markdown"),
    ("testing/TEST_COVERAGE_REPORT.md", prompts.TEST_COVERAGE, "markdown"),
    ("testing/MISSING_TESTS.md", prompts.MISSING_TESTS, "markdown"),
]


def testing_score(test_count: int, route_count: int) -> int:
    """Score test coverage from test-file and route counts.

    Base 10, +20 any tests, +10 each past 5, 10 and 20 tests, plus
    route coverage ratio x 30 (ratio capped at 1.0) when routes exist,
    -10 when that ratio is below 0.3 and -5 when there are no tests.
    """
    score = 10.0
    if test_count > 0:
        score += 20
    if test_count > 5:
        score += 10
    if test_count > 10:
        score += 10
    if test_count > 20:
        score += 10
    if route_count > 0:
        ratio = min(1.0, test_count / route_count)
        score += ratio * 30
        if ratio < 0.3:
            score -= 10
    if test_count == 0:
        score -= 5
    return clamp_score(score)


class APITestEngine(BaseEngine):
    """Generates API test material and scores existing tests."""

    @property
    def key(self) -> str:
        return "api-tests"

    @property
    def category(self) -> str:
        return "Testing"

    @property
    def label(self) -> str:
        return "API Testing Engine"

    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        findings = engine_input.findings
        routes = findings.routes
        test_files = findings.test_files

        ctx = engine_input.context
        if routes:
            ctx = ctx.with_context(
                "Detected API routes:\n" + "\n".join(f"{r.method} {r.path} ({r.file})" for r in routes)
            )
        ctx = ctx.with_context(f"Existing test files ({len(test_files)}): {', '.join(test_files[:20])}")

        for path, task, fmt in ARTIFACTS:
            self._generate(store, path, task, ctx, fmt)

        return self._result(
            testing_score(len(test_files), len(routes)),
            f"{len(routes)} routes detected, {len(test_files)} existing test files",
        )

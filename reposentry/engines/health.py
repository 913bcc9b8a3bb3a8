"""Health engine: overall grade, history ledger and summary reports."""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone

from reposentry import prompts
from reposentry.core.backend import TextGenerator
from reposentry.engines import BaseEngine, EngineInput
from reposentry.health.history import HISTORY_FILE, HistoryLedger
from reposentry.health.models import CategoryResult, RunHistoryEntry
from reposentry.health.report import (
    generate_analysis_json,
    generate_badge,
    generate_health_report,
    generate_methodology,
)
from reposentry.health.scoring import overall_score
from reposentry.output.store import ArtifactStore

logger = logging.getLogger(__name__)

OVERALL = "Overall"


class HealthEngine(BaseEngine):
    """Combines the other engines' results into the overall health report.

    Runs last. Appends exactly one entry to the history ledger per run, so
    the ledger write happens before any report is written.
    """

    def __init__(
        self,
        generator: TextGenerator,
        ledger: HistoryLedger | None = None,
        weights: Mapping[str, float] | None = None,
    ) -> None:
        super().__init__(generator)
        self.ledger = ledger
        self.weights = weights

    @property
    def key(self) -> str:
        return "health"

    @property
    def category(self) -> str:
        return OVERALL

    @property
    def label(self) -> str:
        return "Health Report"

    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        categories = list(engine_input.categories)
        findings = engine_input.findings
        context = engine_input.context

        score = overall_score(categories, self.weights)
        overall = self._result(score, f"Weighted average of {len(categories)} categories")

        ctx = context.with_context(
            f"Analysis Results:\nOverall Score: {overall.score}/100 ({overall.grade.value})\n"
            + "\n".join(f"{c.name}: {c.score}/100 ({c.grade.value}): {c.details}" for c in categories)
        )
        summary = self.generator.generate(prompts.build_prompt(prompts.HEALTH_SUMMARY, ctx))

        analyzed_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
        ledger = self.ledger if self.ledger is not None else HistoryLedger(store.base_dir / HISTORY_FILE)
        history = ledger.append(
            RunHistoryEntry(
                analyzed_at=analyzed_at,
                overall_score=overall.score,
                overall_grade=overall.grade.value,
                categories=tuple(categories),
            )
        )
        logger.debug(f"Recorded run #{len(history)} in {ledger.path}")

        store.write(
            "HEALTH_REPORT.md",
            generate_health_report(
                project_name=context.project_name,
                overall=overall,
                categories=categories,
                history=history,
                analyzed_at=analyzed_at,
                files_scanned=len(findings.scan.files),
                languages=context.languages,
                summary=summary,
            ),
        )
        store.write(
            "analysis.json",
            generate_analysis_json(
                project_name=context.project_name,
                analyzed_at=analyzed_at,
                overall=overall,
                categories=categories,
                languages=context.languages,
                frameworks=context.frameworks,
                files_scanned=len(findings.scan.files),
                total_files=findings.scan.total_files,
                history_entries=len(history),
            ),
        )
        store.write("SCORING_METHODOLOGY.md", generate_methodology(self.weights))
        store.write("badge.md", generate_badge(overall.grade.value, overall.score))

        return overall

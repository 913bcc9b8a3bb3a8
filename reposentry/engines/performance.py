"""Performance engine: anti-pattern scan and audit."""

import logging
import re
from pathlib import Path

from reposentry import prompts
from reposentry.engines import BaseEngine, EngineInput
from reposentry.health.models import CategoryResult
from reposentry.output.store import ArtifactStore
from reposentry.scanners.files import read_text

logger = logging.getLogger(__name__)

MAX_SCANNED_FILES = 80
CODE_SUFFIXES = (".ts", ".js", ".py", ".go")

CLEAN_SCORE = 95
BASE_SCORE = 70
PENALTY_PER_FINDING = 5
SCORE_FLOOR = 20

PERFORMANCE_PATTERNS: list[tuple[str, re.Pattern[str], str]] = [
    ("Sync file I/O", re.compile(r"readFileSync|writeFileSync"), "Blocks the event loop"),
    ("SELECT * query", re.compile(r"SELECT\s+\*", re.I), "Fetches unnecessary data"),
    ("Await inside loop", re.compile(r"for\s*\([^)]*\)\s*\{[^}]*await\s"), "Sequential async operations"),
    ("console.log in hot path", re.compile(r"console\.log"), "I/O overhead in production"),
    ("Blocking sleep", re.compile(r"\btime\.sleep\s*\("), "Blocks the worker thread"),
    ("Unbounded .all() query", re.compile(r"\.objects\.all\(\)|\.query\.all\(\)"), "Unbounded query results"),
]


def scan_performance_patterns(root: Path, files: list[str]) -> list[str]:
    """Find performance anti-patterns in up to MAX_SCANNED_FILES code files."""
    findings: list[str] = []
    code_files = [f for f in files if f.endswith(CODE_SUFFIXES)][:MAX_SCANNED_FILES]

    for file in code_files:
        content = read_text(root, file)
        if content is None:
            continue
        for name, pattern, impact in PERFORMANCE_PATTERNS:
            occurrences = len(pattern.findall(content))
            if occurrences:
                findings.append(f"{name} in {file} ({occurrences} occurrence(s)): {impact}")

    return findings


def performance_score(finding_count: int) -> int:
    """95 when clean, otherwise 70 minus 5 per finding with a floor of 20."""
    if finding_count == 0:
        return CLEAN_SCORE
    return max(SCORE_FLOOR, BASE_SCORE - PENALTY_PER_FINDING * finding_count)


class PerformanceEngine(BaseEngine):
    """Scans for performance anti-patterns and generates an audit."""

    @property
    def key(self) -> str:
        return "performance"

    @property
    def category(self) -> str:
        return "Performance"

    def run(self, engine_input: EngineInput, store: ArtifactStore) -> CategoryResult:
        findings = scan_performance_patterns(engine_input.root_dir, engine_input.findings.scan.files)
        logger.debug(f"Performance scan: {len(findings)} findings")

        ctx = engine_input.context
        if findings:
            ctx = ctx.with_context("Performance scan findings:\n" + "\n".join(findings))

        self._generate(store, "performance/PERFORMANCE_AUDIT.md", prompts.PERFORMANCE_AUDIT, ctx)
        self._generate(store, "performance/performance-score.json", prompts.PERFORMANCE_SCORE, ctx, "json")

        return self._result(
            performance_score(len(findings)),
            f"{len(findings)} performance anti-patterns detected",
        )

"""Report generation for health results (markdown report, JSON summary, badge)."""

import json
from collections.abc import Mapping, Sequence
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any

from reposentry.health.models import CategoryResult, Grade, RunHistoryEntry
from reposentry.health.scoring import DEFAULT_WEIGHTS, category_weight

HISTORY_ROWS = 10

# Column order of the history table
HISTORY_CATEGORIES = [
    "Documentation",
    "Architecture",
    "Security",
    "CI/CD",
    "Testing",
    "Performance",
    "Collaboration",
]

WEIGHT_REASONS = {
    "Security": "Vulnerabilities directly impact production safety",
    "Testing": "Test coverage is critical for reliability",
    "CI/CD": "Automation reduces human error",
    "Performance": "Anti-patterns affect user experience",
    "Documentation": "Standard weight",
    "Architecture": "Standard weight",
    "Collaboration": "Important but less urgent than code quality",
}

CATEGORY_RULES = {
    "Documentation": [
        "Base: 20 points",
        "Has existing README: +25",
        "Has API routes: +10",
        "Active development (>3 recent commits): +10",
        "Has version tags: +15",
        "No README: -10",
        "No commits: -5",
    ],
    "Architecture": [
        "Base: 30 points",
        "Has module imports (structured codebase): +15",
        "Has data models: +15",
        "Has API routes: +15",
        "3+ top-level directories (separation of concerns): +10",
        "5+ top-level directories: +5",
        "No imports and no routes (monolithic): -10",
    ],
    "Security": [
        "Starts at 100 (clean baseline)",
        "Per High-severity finding (hardcoded secrets, SQL injection, etc.): -20",
        "Per Medium-severity finding (eval, CORS wildcard, MD5): -10",
        "Per Low-severity finding (debug logging, etc.): -3",
        "No .gitignore: -15",
        ".env file committed: -10",
    ],
    "CI/CD": [
        "Base: 15 points",
        "Has CI/CD pipeline config: +35",
        "Has Dockerfile: +20",
        "Has .env.example: +15",
        "Has docker-compose: +15",
    ],
    "Testing": [
        "Base: 10 points",
        "Has any test files: +20",
        "Has >5 test files: +10",
        "Has >10 test files: +10",
        "Has >20 test files: +10",
        "Route coverage ratio x 30, capped at 1.0 (if routes exist)",
        "Very low test-to-route ratio (<30%): -10",
        "Zero test files: -5",
    ],
    "Performance": [
        "95 points if no anti-patterns are found",
        "Otherwise 70 points, -5 per anti-pattern, never below 20",
        "Scans for: sync I/O, SELECT *, unbounded queries, awaits in loops, hot-path logging",
    ],
    "Collaboration": [
        "Base: 15 points",
        "Has PR template: +25",
        "Has issue templates: +20",
        "Has CODEOWNERS: +20",
        "Multi-contributor (>1): +10",
        "Active team (>3 contributors): +10",
    ],
}


def format_run_date(analyzed_at: str) -> str:
    """Format a ledger timestamp for display, e.g. ``Oct 18, 2026``.

    Both ISO 8601 and RFC 1123 timestamps are understood; anything else is
    shown as stored.
    """
    try:
        # fromisoformat only accepts a trailing "Z" from Python 3.11
        stamp = analyzed_at[:-1] + "+00:00" if analyzed_at.endswith("Z") else analyzed_at
        moment = datetime.fromisoformat(stamp)
    except ValueError:
        try:
            moment = parsedate_to_datetime(analyzed_at)
        except (TypeError, ValueError):
            return analyzed_at
    return f"{moment.strftime('%b')} {moment.day}, {moment.year}"


def build_history_section(history: Sequence[RunHistoryEntry]) -> str:
    """Render the score history table and trend line.

    Args:
        history: Ledger contents, newest entry last

    Returns:
        Markdown section, or an empty string when there is only one run
    """
    if len(history) <= 1:
        return ""

    lines = [
        "",
        "---",
        "",
        "## Score History",
        "",
        "| # | Date | Overall | Grade | " + " | ".join(HISTORY_CATEGORIES) + " |",
        "|---|------|---------|-------|" + "|".join("-" * (len(c) + 2) for c in HISTORY_CATEGORIES) + "|",
    ]

    recent = list(reversed(history[-HISTORY_ROWS:]))
    for idx, entry in enumerate(recent, start=1):
        scores = []
        for name in HISTORY_CATEGORIES:
            result = entry.category(name)
            scores.append(str(result.score) if result else "-")
        lines.append(
            f"| {idx} | {format_run_date(entry.analyzed_at)} | **{entry.overall_score}** "
            f"| {entry.overall_grade} | {' | '.join(scores)} |"
        )

    diff = history[-1].overall_score - history[-2].overall_score
    arrow = "📈" if diff > 0 else ("📉" if diff < 0 else "➡️")
    sign = "+" if diff > 0 else ""
    lines.extend(["", f"**Trend:** {arrow} {sign}{diff} points since last analysis", ""])
    return "\n".join(lines)


def generate_health_report(
    project_name: str,
    overall: CategoryResult,
    categories: Sequence[CategoryResult],
    history: Sequence[RunHistoryEntry],
    analyzed_at: str,
    files_scanned: int,
    languages: Sequence[str],
    summary: str,
) -> str:
    """Generate HEALTH_REPORT.md.

    Args:
        project_name: Name of the analyzed project
        overall: Overall result (score and grade)
        categories: Per-category results of this run
        history: Ledger contents including this run
        analyzed_at: Timestamp of this run
        files_scanned: Number of text files scanned
        languages: Detected languages
        summary: Backend-generated summary appended after the tables

    Returns:
        Markdown string
    """
    rows = "\n".join(
        f"| {c.name} | {c.grade.value} | {c.score} | {c.details} |" for c in categories
    )
    header = f"""# RepoSentry Health Report: {project_name}

**Overall Grade: {overall.grade.value}** ({overall.score}/100)

**Analyzed:** {analyzed_at}
**Files Scanned:** {files_scanned} | **Languages:** {', '.join(languages) or 'unknown'}

| Category | Grade | Score | Details |
|----------|-------|-------|---------|
{rows}

> 📊 See [SCORING_METHODOLOGY.md](./SCORING_METHODOLOGY.md) for how these scores are calculated.
{build_history_section(history)}
---

"""
    return header + summary


def generate_methodology(weights: Mapping[str, float] | None = None) -> str:
    """Generate SCORING_METHODOLOGY.md for the weight table in effect."""
    table = dict(DEFAULT_WEIGHTS)
    if weights:
        table.update(weights)

    lines = [
        "# Scoring Methodology",
        "",
        "> **Transparency note:** RepoSentry scores are based on what your project *already has*, "
        "not on what RepoSentry generates. Generated files do not inflate your score.",
        "",
        "---",
        "",
        "## Grade Scale",
        "",
        "| Grade | Score Range |",
        "|-------|-------------|",
    ]

    upper = 100
    for grade in Grade:
        lower = _grade_floor(grade)
        lines.append(f"| {grade.value} | {lower} - {upper} |")
        upper = lower - 1

    lines.extend(
        [
            "",
            "---",
            "",
            "## Overall Score = Weighted Average",
            "",
            "| Category | Weight | Reason |",
            "|----------|--------|--------|",
        ]
    )
    for name, weight in sorted(table.items(), key=lambda item: -item[1]):
        lines.append(f"| {name} | {weight:.1f}x | {WEIGHT_REASONS.get(name, 'Custom weight')} |")

    lines.extend(
        [
            "",
            "**Formula:** `Overall = sum(category_score * weight) / sum(weight)`, rounded half up.",
            "",
            "---",
            "",
            "## Per-Category Scoring",
        ]
    )
    for name, rules in CATEGORY_RULES.items():
        lines.extend(["", f"### {name} (weight: {category_weight(name, table):.1f}x)"])
        lines.extend(f"- {rule}" for rule in rules)

    lines.extend(
        [
            "",
            "---",
            "",
            "*Scoring is deterministic: analyzing an unchanged codebase twice yields the same score.*",
            "",
        ]
    )
    return "\n".join(lines)


def _grade_floor(grade: Grade) -> int:
    floor = 0
    for score in range(100, -1, -1):
        if Grade.from_score(score) is grade:
            floor = score
    return floor


def generate_analysis_json(
    project_name: str,
    analyzed_at: str,
    overall: CategoryResult,
    categories: Sequence[CategoryResult],
    languages: Sequence[str],
    frameworks: Sequence[str],
    files_scanned: int,
    total_files: int,
    history_entries: int,
) -> str:
    """Generate analysis.json, the machine-readable summary of one run."""
    data: dict[str, Any] = {
        "project": project_name,
        "analyzedAt": analyzed_at,
        "overallScore": overall.score,
        "overallGrade": overall.grade.value,
        "languages": list(languages),
        "frameworks": list(frameworks),
        "filesScanned": files_scanned,
        "totalFiles": total_files,
        "categories": [c.to_dict() for c in categories],
        "historyEntries": history_entries,
    }
    return json.dumps(data, indent=2)


def badge_color(score: int) -> str:
    """Get the shields.io color for an overall score."""
    if score >= 80:
        return "brightgreen"
    if score >= 60:
        return "yellow"
    return "red"


def badge_url(grade: str, score: int) -> str:
    """Build the shields.io badge URL for a grade and score."""
    return f"https://img.shields.io/badge/RepoSentry-{grade}%20({score}%25)-{badge_color(score)}"


def badge_markdown(grade: str, score: int) -> str:
    """Markdown image link for the badge."""
    return f"[![RepoSentry Score: {grade}]({badge_url(grade, score)})](./HEALTH_REPORT.md)"


def generate_badge(grade: str, score: int) -> str:
    """Generate badge.md."""
    link = badge_markdown(grade, score)
    return f"# RepoSentry Badge\n\n{link}\n\nAdd this to your README:\n```markdown\n{link}\n```\n"

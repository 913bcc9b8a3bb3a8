"""Data models for category scoring, run history and the shared analysis context."""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class Grade(Enum):
    """Letter grade for a category or overall score."""

    A_PLUS = "A+"  # 97-100
    A = "A"  # 93-96
    A_MINUS = "A-"  # 90-92
    B_PLUS = "B+"  # 87-89
    B = "B"  # 83-86
    B_MINUS = "B-"  # 80-82
    C_PLUS = "C+"  # 77-79
    C = "C"  # 73-76
    C_MINUS = "C-"  # 70-72
    D_PLUS = "D+"  # 67-69
    D = "D"  # 63-66
    D_MINUS = "D-"  # 60-62
    F = "F"  # Below 60

    @classmethod
    def from_score(cls, score: float) -> "Grade":
        """Convert a numeric score to a letter grade.

        Args:
            score: Numeric score from 0-100

        Returns:
            Corresponding letter grade
        """
        for threshold, grade in _GRADE_BANDS:
            if score >= threshold:
                return grade
        return cls.F

    @property
    def rank(self) -> int:
        """Position in the qualitative ordering (F is 0, A+ is highest)."""
        members = list(Grade)
        return len(members) - 1 - members.index(self)

    @property
    def color(self) -> str:
        """Get the display color for this grade."""
        letter = self.value[0]
        colors = {
            "A": "green",
            "B": "cyan",
            "C": "yellow",
            "D": "orange1",
            "F": "red",
        }
        return colors.get(letter, "white")

    @property
    def emoji(self) -> str:
        """Get the emoji for this grade."""
        letter = self.value[0]
        emojis = {
            "A": "🟢",
            "B": "🔵",
            "C": "🟡",
            "D": "🟠",
            "F": "🔴",
        }
        return emojis.get(letter, "⚪")


_GRADE_BANDS: list[tuple[int, Grade]] = [
    (97, Grade.A_PLUS),
    (93, Grade.A),
    (90, Grade.A_MINUS),
    (87, Grade.B_PLUS),
    (83, Grade.B),
    (80, Grade.B_MINUS),
    (77, Grade.C_PLUS),
    (73, Grade.C),
    (70, Grade.C_MINUS),
    (67, Grade.D_PLUS),
    (63, Grade.D),
    (60, Grade.D_MINUS),
]


@dataclass(frozen=True)
class CategoryResult:
    """Score contributed by a single engine."""

    name: str
    score: int  # 0-100
    grade: Grade
    details: str = ""

    @classmethod
    def create(cls, name: str, score: float, details: str = "") -> "CategoryResult":
        """Build a result from a raw score, clamping it and deriving the grade."""
        clamped = max(0, min(100, math.floor(score + 0.5)))
        return cls(name=name, score=clamped, grade=Grade.from_score(clamped), details=details)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "score": self.score,
            "grade": self.grade.value,
            "details": self.details,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CategoryResult":
        """Rebuild a result from its dictionary form."""
        score = int(data["score"])
        grade_value = data.get("grade")
        try:
            grade = Grade(grade_value) if grade_value else Grade.from_score(score)
        except ValueError:
            grade = Grade.from_score(score)
        return cls(
            name=str(data["name"]),
            score=score,
            grade=grade,
            details=str(data.get("details", "")),
        )


@dataclass(frozen=True)
class RunHistoryEntry:
    """Summary of one completed analysis run, as stored in the ledger."""

    analyzed_at: str
    overall_score: int
    overall_grade: str
    categories: tuple[CategoryResult, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ledger's JSON shape."""
        return {
            "analyzedAt": self.analyzed_at,
            "overallScore": self.overall_score,
            "overallGrade": self.overall_grade,
            "categories": [c.to_dict() for c in self.categories],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunHistoryEntry":
        """Rebuild an entry from the ledger's JSON shape."""
        return cls(
            analyzed_at=str(data["analyzedAt"]),
            overall_score=int(data["overallScore"]),
            overall_grade=str(data["overallGrade"]),
            categories=tuple(CategoryResult.from_dict(c) for c in data.get("categories", [])),
        )

    def category(self, name: str) -> CategoryResult | None:
        """Look up a category by name."""
        for result in self.categories:
            if result.name == name:
                return result
        return None


@dataclass(frozen=True)
class AnalysisContext:
    """Per-run project description shared by every engine.

    The context is immutable: engines derive enriched copies with
    ``with_context`` instead of editing the orchestrator's instance.
    """

    project_name: str
    languages: tuple[str, ...] = ()
    frameworks: tuple[str, ...] = ()
    package_manager: str = ""
    file_tree: str = ""
    code_context: str = ""
    additional_context: str = ""

    def with_context(self, text: str) -> "AnalysisContext":
        """Return a copy with ``text`` appended to the additional context."""
        if not text:
            return self
        return replace(self, additional_context=f"{self.additional_context}\n{text}")

    def with_code(self, code: str) -> "AnalysisContext":
        """Return a copy carrying ``code`` as the relevant code excerpt."""
        return replace(self, code_context=code)


@dataclass(frozen=True)
class CategoryDelta:
    """Before/after scores for one category across two runs."""

    name: str
    before: CategoryResult | None
    after: CategoryResult | None

    @property
    def delta(self) -> int:
        before = self.before.score if self.before else 0
        after = self.after.score if self.after else 0
        return after - before


@dataclass(frozen=True)
class HistoryComparison:
    """Comparison between an earlier run and a later one."""

    older: RunHistoryEntry
    newer: RunHistoryEntry
    categories: list[CategoryDelta] = field(default_factory=list)

    @property
    def overall_delta(self) -> int:
        return self.newer.overall_score - self.older.overall_score

    @property
    def trend(self) -> str:
        """Get the trend direction."""
        if self.overall_delta > 0:
            return "improving"
        elif self.overall_delta < 0:
            return "declining"
        return "stable"

    @property
    def trend_emoji(self) -> str:
        """Get the trend emoji."""
        emojis = {
            "improving": "📈",
            "declining": "📉",
            "stable": "➡️",
        }
        return emojis[self.trend]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "older": self.older.to_dict(),
            "newer": self.newer.to_dict(),
            "overall_delta": self.overall_delta,
            "trend": self.trend,
            "categories": [
                {
                    "name": c.name,
                    "before": c.before.score if c.before else None,
                    "after": c.after.score if c.after else None,
                    "delta": c.delta,
                }
                for c in self.categories
            ],
        }

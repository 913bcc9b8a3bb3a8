"""Category scoring, run history and health reports.

Example:
    >>> from reposentry.health import CategoryResult, overall_score
    >>> overall_score([CategoryResult.create("Security", 90), CategoryResult.create("Testing", 70)])
    81
"""

from reposentry.health.history import HISTORY_FILE, HistoryLedger, compare_entries
from reposentry.health.models import (
    AnalysisContext,
    CategoryDelta,
    CategoryResult,
    Grade,
    HistoryComparison,
    RunHistoryEntry,
)
from reposentry.health.scoring import (
    DEFAULT_WEIGHTS,
    category_weight,
    clamp_score,
    letter_grade,
    overall_score,
)

__all__ = [
    # Models
    "AnalysisContext",
    "CategoryDelta",
    "CategoryResult",
    "Grade",
    "HistoryComparison",
    "RunHistoryEntry",
    # Scoring
    "DEFAULT_WEIGHTS",
    "category_weight",
    "clamp_score",
    "letter_grade",
    "overall_score",
    # History
    "HISTORY_FILE",
    "HistoryLedger",
    "compare_entries",
]

"""Tests for grades, category results and weighted scoring."""

import pytest

from reposentry.health.models import CategoryResult, Grade
from reposentry.health.scoring import (
    DEFAULT_WEIGHT,
    DEFAULT_WEIGHTS,
    category_weight,
    clamp_score,
    letter_grade,
    overall_score,
    round_half_up,
)

# ==============================================================================
# Model Tests
# ==============================================================================


class TestGrade:
    """Tests for the Grade enum."""

    @pytest.mark.parametrize(
        "score,expected_grade",
        [
            (100, Grade.A_PLUS),
            (97, Grade.A_PLUS),
            (96, Grade.A),
            (93, Grade.A),
            (92, Grade.A_MINUS),
            (90, Grade.A_MINUS),
            (89, Grade.B_PLUS),
            (83, Grade.B),
            (80, Grade.B_MINUS),
            (77, Grade.C_PLUS),
            (73, Grade.C),
            (70, Grade.C_MINUS),
            (67, Grade.D_PLUS),
            (63, Grade.D),
            (60, Grade.D_MINUS),
            (59, Grade.F),
            (0, Grade.F),
        ],
    )
    def test_from_score(self, score: int, expected_grade: Grade) -> None:
        """Test grade assignment from score."""
        assert Grade.from_score(score) == expected_grade
        assert letter_grade(score) == expected_grade

    def test_grades_are_monotonic(self) -> None:
        """A higher score never yields a lower grade."""
        ranks = [Grade.from_score(score).rank for score in range(101)]
        assert ranks == sorted(ranks)

    def test_rank_order(self) -> None:
        """Test that F ranks lowest and A+ highest."""
        assert Grade.F.rank == 0
        assert Grade.A_PLUS.rank == len(Grade) - 1
        assert Grade.B_PLUS.rank > Grade.B.rank

    def test_grade_colors_and_emojis(self) -> None:
        """Test that all grades have colors and emojis."""
        for grade in Grade:
            assert isinstance(grade.color, str)
            assert grade.emoji


class TestCategoryResult:
    """Tests for CategoryResult."""

    def test_create_clamps_and_grades(self) -> None:
        """Test that create clamps out-of-range scores."""
        assert CategoryResult.create("Security", 140).score == 100
        assert CategoryResult.create("Security", -25).score == 0
        assert CategoryResult.create("Security", -25).grade == Grade.F

    def test_create_rounds_half_up(self) -> None:
        """Test that fractional scores round half up."""
        assert CategoryResult.create("Testing", 72.5).score == 73
        assert CategoryResult.create("Testing", 72.4).score == 72

    def test_dict_round_trip(self) -> None:
        """Test conversion to and from a dictionary."""
        result = CategoryResult.create("CI/CD", 85, "Missing: Dockerfile")
        data = result.to_dict()

        assert data == {"name": "CI/CD", "score": 85, "grade": "B", "details": "Missing: Dockerfile"}
        assert CategoryResult.from_dict(data) == result

    def test_from_dict_with_unknown_grade(self) -> None:
        """Test that an unknown stored grade is recomputed from the score."""
        result = CategoryResult.from_dict({"name": "Docs", "score": 91, "grade": "Z"})
        assert result.grade == Grade.A_MINUS


# ==============================================================================
# Scoring Tests
# ==============================================================================


class TestRounding:
    """Tests for rounding and clamping helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (72.49, 72), (-0.4, 0)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        """Test that halves always round up."""
        assert round_half_up(value) == expected

    def test_clamp_score(self) -> None:
        """Test clamping to 0-100."""
        assert clamp_score(101.2) == 100
        assert clamp_score(-3) == 0
        assert clamp_score(55.5) == 56


class TestOverallScore:
    """Tests for the weighted overall score."""

    def test_no_categories(self) -> None:
        """Test that no categories yields zero."""
        assert overall_score([]) == 0

    def test_equal_weights(self) -> None:
        """Test a plain average when every category weighs the same."""
        categories = [
            CategoryResult.create("Documentation", 80),
            CategoryResult.create("Architecture", 90),
            CategoryResult.create("Custom", 70),
        ]
        assert overall_score(categories) == 80

    def test_custom_weights(self) -> None:
        """Test that heavier categories dominate the average."""
        categories = [
            CategoryResult.create("Security", 90),
            CategoryResult.create("Documentation", 40),
        ]
        weights = {"Security": 2.0, "Documentation": 1.0}
        # (180 + 40) / 3 = 73.33
        assert overall_score(categories, weights) == 73

    def test_default_weights(self) -> None:
        """Test the built-in weight table."""
        categories = [
            CategoryResult.create("Security", 90),
            CategoryResult.create("Testing", 70),
        ]
        # (90 * 2.0 + 70 * 1.5) / 3.5 = 81.43
        assert overall_score(categories) == 81

    def test_zero_weights(self) -> None:
        """Test that an all-zero weight table yields zero."""
        categories = [CategoryResult.create("Security", 90)]
        assert overall_score(categories, {"Security": 0.0}) == 0

    def test_partial_override_keeps_defaults(self) -> None:
        """Test that overriding one category leaves the others at their defaults."""
        categories = [
            CategoryResult.create("Security", 100),
            CategoryResult.create("Testing", 0),
            CategoryResult.create("Collaboration", 0),
        ]
        # 300 / (3.0 + 1.5 + 0.8) = 56.6
        assert overall_score(categories, {"Security": 3.0}) == 57

    def test_unknown_category_weight(self) -> None:
        """Test the fallback weight for unlisted categories."""
        assert category_weight("Unlisted") == DEFAULT_WEIGHT
        assert category_weight("Security") == DEFAULT_WEIGHTS["Security"]
        assert category_weight("Security", {"Testing": 3.0}) == DEFAULT_WEIGHTS["Security"]
        assert category_weight("Unlisted", {"Testing": 3.0}) == DEFAULT_WEIGHT

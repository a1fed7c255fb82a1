"""
Tests for attempt statistics and the improvement trend.
"""

from verb_trainer.ledger.statistics import (
    AttemptStatistics,
    CategoryBreakdown,
    compute_statistics,
    compute_trend,
)


class TestComputeStatistics:
    """Tests for compute_statistics()."""

    def test_statistics_when_empty_then_all_zero(self):
        assert compute_statistics([]) == AttemptStatistics()

    def test_statistics_when_two_attempts_then_totals_and_extremes(self, attempt_factory):
        # Arrange
        attempts = [attempt_factory(1, score=1), attempt_factory(2, score=2)]

        # Act
        stats = compute_statistics(attempts)

        # Assert
        assert stats.total_tests == 2
        assert stats.total_questions == 4
        assert stats.total_correct == 3
        assert stats.average_score == 1.5
        assert stats.average_percentage == 75.0
        assert (stats.best_score, stats.worst_score) == (2, 1)
        assert (stats.best_percentage, stats.worst_percentage) == (100.0, 50.0)
        assert stats.total_duration == 120
        assert stats.average_duration == 60

    def test_statistics_when_answers_then_breakdowns(self, attempt_factory):
        stats = compute_statistics([attempt_factory(1, score=1), attempt_factory(2, score=2)])

        assert stats.by_tense["präsens"] == CategoryBreakdown(2, 2, 100.0)
        assert stats.by_tense["präteritum"] == CategoryBreakdown(2, 1, 50.0)
        assert stats.by_person["ich"] == CategoryBreakdown(4, 3, 75.0)
        assert stats.by_verb_type["strong"].percentage == 75.0
        assert list(stats.by_difficulty) == [2]

    def test_statistics_when_vocabulary_mixed_in_then_excluded_from_breakdowns(self, attempt_factory):
        attempts = [
            attempt_factory(1, score=2),
            attempt_factory(2, score=0, total=4, test_type="vocabulary"),
        ]

        stats = compute_statistics(attempts)

        assert stats.total_tests == 2
        assert stats.total_questions == 6
        assert stats.by_person["ich"].total_questions == 2

    def test_statistics_when_zero_or_missing_duration_then_ignored(self, attempt_factory):
        attempts = [
            attempt_factory(1, duration_seconds=60),
            attempt_factory(2, duration_seconds=61),
            attempt_factory(3, duration_seconds=0),
            attempt_factory(4, duration_seconds=None),
        ]

        stats = compute_statistics(attempts)

        assert stats.total_duration == 121
        assert stats.average_duration == 61

    def test_statistics_when_thirds_then_rounded_to_two_places(self, attempt_factory):
        attempts = [attempt_factory(1, score=1, total=3), attempt_factory(2, score=0, total=3)]

        stats = compute_statistics(attempts)

        assert stats.average_percentage == 16.67
        assert stats.average_score == 0.5


class TestComputeTrend:
    """Tests for compute_trend()."""

    def test_trend_when_single_attempt_then_recent_only(self, attempt_factory):
        trend = compute_trend([attempt_factory(1, score=1)])

        assert trend.improving is False
        assert trend.recent_average == 50.0
        assert trend.older_average == 0.0

    def test_trend_when_empty_then_zeros(self):
        trend = compute_trend([])

        assert (trend.recent_average, trend.change_percentage) == (0.0, 0.0)

    def test_trend_when_scores_rise_then_improving(self, attempt_factory):
        # Newest first, as returned by the ledger
        attempts = [
            attempt_factory(4, score=2),
            attempt_factory(3, score=2),
            attempt_factory(2, score=1),
            attempt_factory(1, score=1),
        ]

        trend = compute_trend(attempts)

        assert trend.improving is True
        assert trend.older_average == 50.0
        assert trend.recent_average == 100.0
        assert trend.change_percentage == 100.0

    def test_trend_when_odd_count_then_recent_half_larger(self, attempt_factory):
        attempts = [attempt_factory(1, score=2), attempt_factory(2, score=1), attempt_factory(3, score=0)]

        trend = compute_trend(attempts)

        assert trend.older_average == 100.0
        assert trend.recent_average == 25.0
        assert trend.improving is False
        assert trend.change_percentage == -75.0

    def test_trend_when_older_zero_then_change_zero(self, attempt_factory):
        trend = compute_trend([attempt_factory(1, score=0), attempt_factory(2, score=2)])

        assert trend.improving is True
        assert trend.change_percentage == 0.0

"""
Unit Tests for Attempt Models

Tests for Attempt, AnswerDetail and percentage rounding.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from verb_trainer.core.models.attempts import (
    AnswerDetail,
    Attempt,
    VocabAnswerDetail,
    compute_percentage,
    round_half_up,
)

STARTED = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _detail(correct: bool) -> AnswerDetail:
    return AnswerDetail(
        verb="gehen",
        tense="präsens",
        person="ich",
        verb_type="strong",
        difficulty_level=2,
        correct_answer="gehe",
        user_answer="gehe" if correct else "geh",
        is_correct=correct,
    )


def _attempt(**overrides) -> Attempt:
    fields = dict(
        id="a1",
        idempotency_key="k1",
        test_type="conjugation",
        started_at=STARTED,
        completed_at=STARTED + timedelta(seconds=90),
        score=1,
        total_questions=2,
        percentage=50.0,
        config={"tenses": ["präsens"], "verbTypes": ["strong"], "persons": ["ich"], "questionCount": 2},
        answers=(_detail(True), _detail(False)),
        duration_seconds=90,
    )
    fields.update(overrides)
    return Attempt(**fields)


class TestComputePercentage:
    """Tests for percentage rounding."""

    @pytest.mark.parametrize(
        "score,total,expected",
        [(7, 10, 70.0), (2, 3, 66.67), (1, 3, 33.33), (1, 8, 12.5), (0, 0, 0.0), (5, 5, 100.0)],
    )
    def test_compute_percentage_when_values_then_two_decimals(self, score, total, expected):
        assert compute_percentage(score, total) == expected

    def test_round_half_up_when_half_then_rounds_away_from_zero(self):
        assert round_half_up(2.675) == 2.68
        assert round_half_up(0.125) == 0.13


class TestAttempt:
    """Tests for Attempt dataclass."""

    def test_init_when_valid_then_fields_normalised(self):
        attempt = _attempt()

        assert attempt.percentage == 50.0
        assert attempt.synced is False
        assert attempt.synced_at is None

    def test_init_when_score_exceeds_total_then_raises(self):
        with pytest.raises(ValueError, match="score"):
            _attempt(score=3, percentage=150.0)

    def test_init_when_id_equals_key_then_raises(self):
        with pytest.raises(ValueError, match="idempotency_key"):
            _attempt(idempotency_key="a1")

    def test_init_when_percentage_inconsistent_then_raises(self):
        with pytest.raises(ValueError, match="percentage"):
            _attempt(percentage=75.0)

    def test_init_when_unrounded_percentage_then_rounded(self):
        attempt = _attempt(
            score=2, total_questions=3, percentage=66.66666666,
            answers=(_detail(True), _detail(True), _detail(False)),
        )

        assert attempt.percentage == 66.67

    def test_init_when_answers_count_mismatch_then_raises(self):
        with pytest.raises(ValueError, match="answers"):
            _attempt(answers=(_detail(True),))

    def test_init_when_naive_datetime_then_utc_attached(self):
        attempt = _attempt(started_at=datetime(2024, 3, 1, 12, 0, 0))

        assert attempt.started_at.tzinfo is not None
        assert attempt.started_at == STARTED

    def test_setattr_when_frozen_then_raises(self):
        attempt = _attempt()

        with pytest.raises(FrozenInstanceError):
            attempt.score = 2

    def test_mark_synced_when_called_then_new_instance(self):
        # Arrange
        attempt = _attempt()
        at = STARTED + timedelta(hours=1)

        # Act
        synced = attempt.mark_synced(at)

        # Assert
        assert synced.synced is True
        assert synced.synced_at == at
        assert attempt.synced is False
        assert synced.id == attempt.id

    def test_with_sync_state_when_other_field_then_raises(self):
        with pytest.raises(ValueError, match="sync-state"):
            _attempt().with_sync_state(score=2)

    def test_to_dict_when_deserialized_then_equal(self):
        attempt = _attempt().mark_synced(STARTED + timedelta(minutes=5))

        assert Attempt.from_dict(attempt.to_dict()) == attempt

    def test_to_dict_uses_wire_names(self):
        d = _attempt().to_dict()

        assert d["client_generated_id"] == "k1"
        assert d["test_date"] == STARTED.isoformat()
        assert d["answers"][0]["correctAnswer"] == "gehe"
        assert d["answers"][0]["isCorrect"] is True

    def test_from_dict_when_vocabulary_then_vocab_details(self):
        record = _attempt(
            test_type="vocabulary",
            answers=(
                VocabAnswerDetail("gehen", "to go", "go", True),
                VocabAnswerDetail("machen", "to do", "", False),
            ),
        ).to_dict()

        attempt = Attempt.from_dict(record)

        assert all(isinstance(a, VocabAnswerDetail) for a in attempt.answers)
        assert attempt.answers[0].infinitive == "gehen"

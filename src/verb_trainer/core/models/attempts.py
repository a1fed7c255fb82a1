"""
Module: attempts

Purpose:
    Provides the Attempt dataclass - the durable record of one completed
    quiz - together with its per-question detail rows and the sync
    result/statistics value types.

Key Functions:
    - compute_percentage(score, total): 100*score/total, half-up to 2 dp
    - Attempt.mark_synced(at): New instance with sync state set
    - Attempt.to_dict() / Attempt.from_dict(): Local record format

Key Classes:
    - AnswerDetail: One answered conjugation question
    - VocabAnswerDetail: One answered vocabulary question
    - Attempt: Completed quiz with score, config snapshot and sync state
    - SyncResult: Outcome of an upload
    - SyncStats: Synced/unsynced counts plus last sync time

Dependencies:
    - dataclasses (std)
    - decimal (std)
    - .timestamps

Used By:
    - scoring.engine.ScoringEngine
    - ledger.ledger.AttemptLedger
    - sync.reconciler.SyncReconciler

Invariants:
    - 0 <= score <= total_questions
    - percentage == compute_percentage(score, total_questions)
    - idempotency_key != id
    - Only synced/synced_at change after creation
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .timestamps import ensure_utc, parse_iso, to_iso

TEST_TYPE_CONJUGATION = "conjugation"
TEST_TYPE_VOCABULARY = "vocabulary"
TEST_TYPES = (TEST_TYPE_CONJUGATION, TEST_TYPE_VOCABULARY)

SYNC_FIELDS = frozenset({"synced", "synced_at"})


def round_half_up(value, places: int = 2) -> float:
    """Round like a human would (2.675 -> 2.68), not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_percentage(score: int, total: int) -> float:
    """
    Percentage of correct answers rounded half-up to two decimals.

    Example:
        >>> compute_percentage(7, 10)
        70.0
        >>> compute_percentage(2, 3)
        66.67
    """
    if total <= 0:
        return 0.0
    raw = Decimal(score) * Decimal(100) / Decimal(total)
    return float(raw.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class AnswerDetail:
    """One scored conjugation question."""

    verb: str
    tense: str
    person: str
    verb_type: str
    difficulty_level: int
    correct_answer: str
    user_answer: str
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            "verb": self.verb,
            "tense": self.tense,
            "person": self.person,
            "correctAnswer": self.correct_answer,
            "userAnswer": self.user_answer,
            "isCorrect": self.is_correct,
            "verb_type": self.verb_type,
            "difficulty_level": self.difficulty_level,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> AnswerDetail:
        return cls(
            verb=data["verb"],
            tense=data["tense"],
            person=data["person"],
            verb_type=data.get("verb_type", ""),
            difficulty_level=int(data.get("difficulty_level", 0)),
            correct_answer=data["correctAnswer"],
            user_answer=data.get("userAnswer", ""),
            is_correct=bool(data.get("isCorrect", False)),
        )


@dataclass(frozen=True)
class VocabAnswerDetail:
    """One scored vocabulary question."""

    infinitive: str
    correct_answer: str
    user_answer: str
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            "infinitive": self.infinitive,
            "correctAnswer": self.correct_answer,
            "userAnswer": self.user_answer,
            "isCorrect": self.is_correct,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> VocabAnswerDetail:
        return cls(
            infinitive=data["infinitive"],
            correct_answer=data["correctAnswer"],
            user_answer=data.get("userAnswer", ""),
            is_correct=bool(data.get("isCorrect", False)),
        )


AnyAnswer = Union[AnswerDetail, VocabAnswerDetail]


@dataclass(frozen=True)
class Attempt:
    """
    Record of one completed quiz (immutable apart from sync state).

    Attributes:
        id: Locally generated identifier (primary key in the ledger)
        idempotency_key: Client-generated key, distinct from id, used as the
            remote upsert key ("client_generated_id" on the wire)
        test_type: "conjugation" or "vocabulary"
        started_at: When the quiz started (aware UTC)
        completed_at: When the quiz was scored (aware UTC)
        score: Number of correct answers
        total_questions: Number of questions asked
        percentage: 100*score/total, two decimals
        config: Snapshot of the configuration used
        answers: Ordered per-question detail rows
        duration_seconds: Whole seconds between start and scoring, if known
        user_id: Optional owner (None = anonymous)
        synced: True once a remote upload was confirmed
        synced_at: When the confirmed upload happened

    Example:
        >>> attempt.percentage
        70.0
        >>> attempt.mark_synced(now).synced
        True
    """

    id: str
    idempotency_key: str
    test_type: str
    started_at: datetime
    completed_at: datetime
    score: int
    total_questions: int
    percentage: float
    config: Dict[str, Any] = field(default_factory=dict)
    answers: Tuple[AnyAnswer, ...] = ()
    duration_seconds: Optional[int] = None
    user_id: Optional[str] = None
    synced: bool = False
    synced_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate attempt on construction."""
        if not self.id or not self.idempotency_key:
            raise ValueError("id and idempotency_key are required")
        if self.id == self.idempotency_key:
            raise ValueError("idempotency_key must differ from id")
        if self.test_type not in TEST_TYPES:
            raise ValueError(f"test_type must be one of {TEST_TYPES}: {self.test_type!r}")
        if self.total_questions < 0:
            raise ValueError(f"total_questions must be non-negative: {self.total_questions}")
        if not (0 <= self.score <= self.total_questions):
            raise ValueError(
                f"score must be 0-{self.total_questions}: {self.score}"
            )
        expected = compute_percentage(self.score, self.total_questions)
        if abs(float(self.percentage) - expected) > 0.01:
            raise ValueError(
                f"percentage {self.percentage} does not match "
                f"{self.score}/{self.total_questions} ({expected})"
            )
        object.__setattr__(self, "percentage", expected)
        if self.answers and len(self.answers) != self.total_questions:
            raise ValueError(
                f"answers has {len(self.answers)} rows for "
                f"{self.total_questions} questions"
            )
        if self.duration_seconds is not None and self.duration_seconds < 0:
            raise ValueError(f"duration_seconds must be non-negative: {self.duration_seconds}")
        object.__setattr__(self, "started_at", ensure_utc(self.started_at))
        object.__setattr__(self, "completed_at", ensure_utc(self.completed_at))
        if self.synced_at is not None:
            object.__setattr__(self, "synced_at", ensure_utc(self.synced_at))
        object.__setattr__(self, "answers", tuple(self.answers))

    # ─────────────────────────────────────────────────────────────────────────
    # Sync State
    # ─────────────────────────────────────────────────────────────────────────

    def mark_synced(self, at: datetime) -> Attempt:
        """Return a copy with synced=True and synced_at=at."""
        return replace(self, synced=True, synced_at=at)

    def with_sync_state(self, **changes: Any) -> Attempt:
        """
        Return a copy with sync-state fields changed.

        Raises:
            ValueError: If any field other than synced/synced_at is given
        """
        illegal = set(changes) - SYNC_FIELDS
        if illegal:
            raise ValueError(f"Only sync-state fields may change: {sorted(illegal)}")
        if "synced_at" in changes and changes["synced_at"] is not None:
            changes["synced_at"] = parse_iso(changes["synced_at"])
        return replace(self, **changes)

    @property
    def is_conjugation(self) -> bool:
        return self.test_type == TEST_TYPE_CONJUGATION

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to the local ledger record format.

        Field names follow the remote table so that records can be moved
        between the two stores with minimal mapping.
        """
        return {
            "id": self.id,
            "client_generated_id": self.idempotency_key,
            "user_id": self.user_id,
            "test_type": self.test_type,
            "test_date": to_iso(self.started_at),
            "completed_at": to_iso(self.completed_at),
            "score": self.score,
            "total_questions": self.total_questions,
            "percentage": self.percentage,
            "test_configuration": dict(self.config),
            "answers": [a.to_dict() for a in self.answers],
            "duration_seconds": self.duration_seconds,
            "synced": self.synced,
            "synced_at": to_iso(self.synced_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> Attempt:
        """
        Deserialize from the local ledger record format.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a field is malformed
        """
        test_type = data.get("test_type", TEST_TYPE_CONJUGATION)
        detail_cls = AnswerDetail if test_type == TEST_TYPE_CONJUGATION else VocabAnswerDetail
        started_at = parse_iso(data["test_date"])
        completed_at = parse_iso(data.get("completed_at")) or started_at
        duration = data.get("duration_seconds")
        return cls(
            id=str(data["id"]),
            idempotency_key=str(data["client_generated_id"]),
            test_type=test_type,
            started_at=started_at,
            completed_at=completed_at,
            score=int(data["score"]),
            total_questions=int(data["total_questions"]),
            percentage=float(data["percentage"]),
            config=dict(data.get("test_configuration") or {}),
            answers=tuple(detail_cls.from_dict(a) for a in data.get("answers") or ()),
            duration_seconds=int(duration) if duration is not None else None,
            user_id=data.get("user_id"),
            synced=bool(data.get("synced", False)),
            synced_at=parse_iso(data.get("synced_at")),
        )

    def __repr__(self) -> str:
        return (
            f"Attempt({self.id!r}, {self.test_type}, "
            f"{self.score}/{self.total_questions}, synced={self.synced})"
        )


@dataclass(frozen=True)
class SyncResult:
    """Outcome of SyncReconciler.upload()."""

    success: bool
    message: str
    synced_count: int = 0
    failed_count: int = 0
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class SyncStats:
    """Ledger sync partition plus the persisted last sync time."""

    total: int
    synced: int
    unsynced: int
    last_sync_time: Optional[datetime] = None

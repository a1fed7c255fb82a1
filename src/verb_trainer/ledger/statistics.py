"""
Module: ledger.statistics

Purpose:
    Aggregate statistics over a set of attempts: totals, averages,
    best/worst, per-dimension breakdowns and an improvement trend.

Key Functions:
    - compute_statistics(attempts): Build AttemptStatistics

Key Classes:
    - CategoryBreakdown: questions / correct / percentage for one key
    - Trend: older-half vs recent-half comparison
    - AttemptStatistics: The full aggregate

Rules:
    - Top-level totals include every attempt
    - Breakdowns by tense/person/verb type/difficulty use conjugation
      attempts only (vocabulary answers lack these dimensions)
    - Durations of zero/unknown are ignored for duration averages
    - Trend splits attempts sorted oldest-first at floor(n/2)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List, Sequence

from verb_trainer.core.models.attempts import AnswerDetail, Attempt, compute_percentage, round_half_up


@dataclass(frozen=True)
class CategoryBreakdown:
    total_questions: int
    correct_answers: int
    percentage: float


@dataclass(frozen=True)
class Trend:
    improving: bool = False
    recent_average: float = 0.0
    older_average: float = 0.0
    change_percentage: float = 0.0


@dataclass(frozen=True)
class AttemptStatistics:
    """Aggregate over a set of attempts (all zeros for an empty set)."""

    total_tests: int = 0
    total_questions: int = 0
    total_correct: int = 0
    average_score: float = 0.0
    average_percentage: float = 0.0
    best_score: int = 0
    worst_score: int = 0
    best_percentage: float = 0.0
    worst_percentage: float = 0.0
    total_duration: int = 0
    average_duration: int = 0
    by_tense: Dict[str, CategoryBreakdown] = field(default_factory=dict)
    by_verb_type: Dict[str, CategoryBreakdown] = field(default_factory=dict)
    by_person: Dict[str, CategoryBreakdown] = field(default_factory=dict)
    by_difficulty: Dict[int, CategoryBreakdown] = field(default_factory=dict)
    trend: Trend = field(default_factory=Trend)


def _breakdown(
    attempts: Sequence[Attempt],
    key: Callable[[AnswerDetail], Hashable],
) -> Dict:
    counts: Dict[Hashable, List[int]] = {}
    for attempt in attempts:
        if not attempt.is_conjugation:
            continue
        for answer in attempt.answers:
            if not isinstance(answer, AnswerDetail):
                continue
            value = key(answer)
            if value in (None, ""):
                continue
            tally = counts.setdefault(value, [0, 0])
            tally[0] += 1
            if answer.is_correct:
                tally[1] += 1
    return {
        value: CategoryBreakdown(
            total_questions=total,
            correct_answers=correct,
            percentage=compute_percentage(correct, total),
        )
        for value, (total, correct) in counts.items()
    }


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_trend(attempts: Sequence[Attempt]) -> Trend:
    """
    Compare the mean percentage of the newer half against the older half.

    With fewer than two attempts there is nothing to compare: the single
    attempt's percentage (if any) is reported as the recent average.
    """
    if len(attempts) < 2:
        recent = attempts[0].percentage if attempts else 0.0
        return Trend(improving=False, recent_average=recent)

    ordered = sorted(attempts, key=lambda a: a.started_at)
    split = len(ordered) // 2
    older = _mean([a.percentage for a in ordered[:split]])
    recent = _mean([a.percentage for a in ordered[split:]])
    change = (recent - older) / older * 100 if older > 0 else 0.0

    return Trend(
        improving=recent > older,
        recent_average=round_half_up(recent),
        older_average=round_half_up(older),
        change_percentage=round_half_up(change),
    )


def compute_statistics(attempts: Sequence[Attempt]) -> AttemptStatistics:
    """
    Aggregate attempts into an AttemptStatistics.

    Example:
        >>> stats = compute_statistics(ledger.all())
        >>> stats.by_tense["präsens"].percentage
        75.0
    """
    if not attempts:
        return AttemptStatistics()

    count = len(attempts)
    scores = [a.score for a in attempts]
    percentages = [a.percentage for a in attempts]
    durations = [a.duration_seconds for a in attempts if a.duration_seconds]
    total_duration = sum(durations)

    return AttemptStatistics(
        total_tests=count,
        total_questions=sum(a.total_questions for a in attempts),
        total_correct=sum(scores),
        average_score=round_half_up(sum(scores) / count),
        average_percentage=round_half_up(_mean(percentages)),
        best_score=max(scores),
        worst_score=min(scores),
        best_percentage=round_half_up(max(percentages)),
        worst_percentage=round_half_up(min(percentages)),
        total_duration=total_duration,
        average_duration=math.floor(_mean(durations) + 0.5) if durations else 0,
        by_tense=_breakdown(attempts, lambda a: a.tense),
        by_verb_type=_breakdown(attempts, lambda a: a.verb_type),
        by_person=_breakdown(attempts, lambda a: a.person),
        by_difficulty=_breakdown(attempts, lambda a: a.difficulty_level or None),
        trend=compute_trend(attempts),
    )

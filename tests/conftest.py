import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src to sys.path so we can import verb_trainer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from verb_trainer.catalog.catalog import VerbCatalog  # noqa: E402
from verb_trainer.core.models.attempts import (  # noqa: E402
    AnswerDetail,
    Attempt,
    VocabAnswerDetail,
    compute_percentage,
)
from verb_trainer.core.models.verbs import Verb, VerbType  # noqa: E402


FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_verb_record(infinitive="gehen", **overrides) -> dict:
    """Raw catalog record with sensible defaults."""
    record = {
        "infinitive": infinitive,
        "english_translation": "to go",
        "verb_type": "strong",
        "stem": "geh",
        "difficulty_level": 2,
        "conjugations": {
            "präsens": {"ich": "gehe", "du": "gehst", "er": "geht"},
            "präteritum": {"ich": "ging", "du": "gingst", "er": "ging"},
        },
    }
    record.update(overrides)
    return record


# Common test fixtures
@pytest.fixture
def verb_record():
    """Factory for raw catalog records: verb_record("sehen", stem="seh")."""
    return make_verb_record


@pytest.fixture
def gehen() -> Verb:
    return Verb.from_dict(make_verb_record())


@pytest.fixture
def machen() -> Verb:
    return Verb(
        infinitive="machen",
        english_translation="to do, to make",
        verb_type=VerbType.WEAK,
        stem="mach",
        difficulty_level=1,
        conjugations={
            "präsens": {"ich": "mache", "du": "machst", "er": "macht"},
            "präteritum": {"ich": "machte", "du": "machtest", "er": "machte"},
        },
    )


@pytest.fixture
def koennen() -> Verb:
    """Modal verb with only a präsens table."""
    return Verb(
        infinitive="können",
        english_translation="to be able to",
        verb_type=VerbType.MODAL,
        stem="könn",
        difficulty_level=3,
        conjugations={"präsens": {"ich": "kann", "du": "kannst", "er": "kann"}},
    )


@pytest.fixture
def catalog(gehen, machen, koennen) -> VerbCatalog:
    """Ready catalog with three verbs and a seeded random source."""
    cat = VerbCatalog(rng=random.Random(1234))
    cat.load([gehen, machen, koennen])
    return cat


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    """Deterministic clock that advances one second per call."""
    ticks = {"n": 0}

    def _now() -> datetime:
        ticks["n"] += 1
        return FIXED_NOW + timedelta(seconds=ticks["n"])

    return _now


def make_attempt(
    n: int = 1,
    *,
    score: int = 1,
    total: int = 2,
    test_type: str = "conjugation",
    started_at: datetime = None,
    synced: bool = False,
    **overrides,
) -> Attempt:
    """Attempt number n; the first `score` answer rows are correct."""
    started = started_at or FIXED_NOW + timedelta(minutes=n)
    if test_type == "conjugation":
        answers = tuple(
            AnswerDetail(
                verb="gehen",
                tense="präsens" if i % 2 == 0 else "präteritum",
                person="ich",
                verb_type="strong",
                difficulty_level=2,
                correct_answer="gehe",
                user_answer="gehe" if i < score else "geh",
                is_correct=i < score,
            )
            for i in range(total)
        )
        config = {"tenses": ["präsens", "präteritum"], "verbTypes": ["strong"],
                  "persons": ["ich"], "questionCount": total, "difficultyLevels": [2]}
    else:
        answers = tuple(
            VocabAnswerDetail("gehen", "to go", "go" if i < score else "", i < score)
            for i in range(total)
        )
        config = {"verbCount": total, "difficultyLevels": [2], "includeAllTypes": True}

    fields = dict(
        id=f"attempt-{n}",
        idempotency_key=f"key-{n}",
        test_type=test_type,
        started_at=started,
        completed_at=started + timedelta(seconds=60),
        score=score,
        total_questions=total,
        percentage=compute_percentage(score, total),
        config=config,
        answers=answers,
        duration_seconds=60,
        synced=synced,
        synced_at=started + timedelta(hours=1) if synced else None,
    )
    fields.update(overrides)
    return Attempt(**fields)


@pytest.fixture
def attempt_factory():
    """Factory for attempts: attempt_factory(3, score=2, total=4)."""
    return make_attempt

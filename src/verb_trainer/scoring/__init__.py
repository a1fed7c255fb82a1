"""
Scoring Package

Answer normalisation, validation and quiz scoring.
"""

from .normalize import normalize, strip_leading_to
from .engine import ScoringEngine, FEEDBACK_CORRECT, FEEDBACK_CLOSE, FEEDBACK_WRONG
from .vocab import VocabularyScoringEngine

__all__ = [
    "normalize",
    "strip_leading_to",
    "ScoringEngine",
    "VocabularyScoringEngine",
    "FEEDBACK_CORRECT",
    "FEEDBACK_CLOSE",
    "FEEDBACK_WRONG",
]

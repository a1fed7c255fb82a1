"""
Generation Package

Combinatorial question generation and configuration validation.
"""

from .generator import (
    QuestionGenerator,
    ConfigValidation,
    QuizStatistics,
    Tally,
    question_statistics,
)
from .prompts import build_prompt, build_vocab_prompt, tense_label, person_label, difficulty_label

__all__ = [
    "QuestionGenerator",
    "ConfigValidation",
    "QuizStatistics",
    "Tally",
    "question_statistics",
    "build_prompt",
    "build_vocab_prompt",
    "tense_label",
    "person_label",
    "difficulty_label",
]

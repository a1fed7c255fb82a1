"""Answer normalisation shared by both scoring modes."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[.,!?;:]")
_LEADING_TO = re.compile(r"^to\s+")


def normalize(text: str) -> str:
    """
    Canonical comparison form of an answer.

    Lowercases, drops the punctuation characters ``.,!?;:`` anywhere in
    the string, collapses whitespace runs to one space and trims.
    Idempotent: normalize(normalize(x)) == normalize(x).

    Example:
        >>> normalize("  Ich   GEHE! ")
        'ich gehe'
    """
    if not text:
        return ""
    lowered = _PUNCTUATION.sub("", text.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def strip_leading_to(text: str) -> str:
    """Remove an English infinitive marker ("to go" -> "go")."""
    return _LEADING_TO.sub("", text)

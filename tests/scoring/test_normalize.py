"""Tests for answer normalisation."""

import pytest

from verb_trainer.scoring.normalize import normalize, strip_leading_to


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  Ich   GEHE! ", "ich gehe"),
        ("ging.", "ging"),
        ("a , b", "a b"),
        ("\tgehst\n", "gehst"),
        ("", ""),
        (None, ""),
        ("Äpfel?", "äpfel"),
    ],
)
def test_normalize_when_raw_then_canonical(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.parametrize("raw", ["  Ich   GEHE! ", "a , b", "x ; y : z", "!!!"])
def test_normalize_when_applied_twice_then_unchanged(raw):
    once = normalize(raw)

    assert normalize(once) == once


def test_strip_leading_to_when_marker_then_removed():
    assert strip_leading_to("to go") == "go"
    assert strip_leading_to("tomato") == "tomato"

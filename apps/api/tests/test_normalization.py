"""Tests for intake normalization helpers."""

import pytest

from flock.utils.normalization import normalize_email, normalize_name, normalize_phone, normalize_text


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("06 12 34 56 78", "+33612345678"),
        ("06-12-34-56-78", "+33612345678"),
        ("(01) 23.45.67.89", "+33123456789"),
        ("+225 07 07 07 07 07", "+2250707070707"),
        ("0012345", "0012345"),
        ("   ", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_normalize_name():
    assert normalize_name("  jean   DUPONT ") == "Jean Dupont"
    assert normalize_name("marie-claire") == "Marie-claire"
    assert normalize_name("   ") is None


def test_normalize_email_and_text():
    assert normalize_email("  Marie@Example.ORG ") == "marie@example.org"
    assert normalize_email("") is None
    assert normalize_text("  hello ") == "hello"
    assert normalize_text("   ") is None
    assert normalize_text(None) is None

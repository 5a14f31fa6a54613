"""Data normalization utilities for visitor intake."""

import re
from typing import Optional


_PHONE_SEPARATORS = re.compile(r"[\s\-\(\)\.]")
_FRENCH_LOCAL = re.compile(r"^0[1-9]\d{8}$")


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a phone number for storage.

    Strips spaces, dashes, dots and parentheses. French local numbers
    (0X XX XX XX XX) are rewritten to +33 international form; other numbers
    are kept as typed (Ivorian +225 and generic local numbers included).

    Returns:
        Cleaned phone or None if empty
    """
    if not phone:
        return None
    cleaned = _PHONE_SEPARATORS.sub("", phone.strip())
    if not cleaned:
        return None
    if _FRENCH_LOCAL.match(cleaned):
        return f"+33{cleaned[1:]}"
    return cleaned


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Lowercase and trim an email address."""
    if not email:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def normalize_name(name: Optional[str]) -> Optional[str]:
    """
    Normalize a person name.

    Collapses whitespace and capitalizes each word ("jean  DUPONT" -> "Jean Dupont").
    """
    if not name:
        return None
    words = name.split()
    if not words:
        return None
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Trim free text; empty strings become None."""
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None

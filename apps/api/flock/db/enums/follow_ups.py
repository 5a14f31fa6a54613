"""Follow-up interaction enums."""

from enum import Enum


class InteractionType(str, Enum):
    """How the mentor reached the visitor."""

    VISIT = "visit"
    CALL = "call"
    MEETING = "meeting"
    OTHER = "other"


class FollowUpOutcome(str, Enum):
    """Result of an interaction."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    NO_CONTACT = "no_contact"  # Attempted but could not reach the visitor


class StatsPeriod(str, Enum):
    """Look-back windows for follow-up and dashboard statistics."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @property
    def days(self) -> int:
        return {"week": 7, "month": 30, "quarter": 90, "year": 365}[self.value]

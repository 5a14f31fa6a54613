"""Person-related enums."""

from enum import Enum


class PersonStatus(str, Enum):
    """
    Visitor lifecycle status.

        to_visit → in_follow_up → integrated / to_redirect / long_absent

    Every status can be set explicitly from any other. The only automatic
    transition is to_visit → in_follow_up when a follow-up is recorded.
    """

    TO_VISIT = "to_visit"
    IN_FOLLOW_UP = "in_follow_up"
    INTEGRATED = "integrated"
    TO_REDIRECT = "to_redirect"
    LONG_ABSENT = "long_absent"

    @classmethod
    def caseload(cls) -> list[str]:
        """Statuses that count against a mentor's capacity."""
        return [cls.TO_VISIT.value, cls.IN_FOLLOW_UP.value]

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS: dict[PersonStatus, str] = {
    PersonStatus.TO_VISIT: "to visit",
    PersonStatus.IN_FOLLOW_UP: "in follow-up",
    PersonStatus.INTEGRATED: "integrated",
    PersonStatus.TO_REDIRECT: "to be redirected",
    PersonStatus.LONG_ABSENT: "absent for a long time",
}


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"


class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"

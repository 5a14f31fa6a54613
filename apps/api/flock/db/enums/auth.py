"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    User roles.

    - CAN_COMMITTEE: Welcome committee (registers new visitors)
    - MENTOR: Follows up with assigned visitors
    - PASTOR: Oversight of all visitors and mentors
    - ADMIN: System settings and user management
    """

    CAN_COMMITTEE = "can_committee"
    MENTOR = "mentor"
    PASTOR = "pastor"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_

    @classmethod
    def follow_up_roles(cls) -> list[str]:
        """Roles allowed to record an interaction with a visitor."""
        return [cls.MENTOR.value, cls.PASTOR.value, cls.ADMIN.value]

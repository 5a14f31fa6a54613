"""Notification-related enums."""

from enum import Enum


class NotificationType(str, Enum):
    """Types of in-app notifications."""

    NEW_ASSIGNMENT = "new_assignment"  # Visitor assigned to mentor
    FOLLOW_UP_REMINDER = "follow_up_reminder"  # New visitor still without follow-up
    OVERDUE_VISIT = "overdue_visit"  # No recent interaction
    STATUS_CHANGE = "status_change"

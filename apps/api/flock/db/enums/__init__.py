"""Enum definitions for application constants."""

from flock.db.enums.auth import Role
from flock.db.enums.defaults import (
    DEFAULT_JOB_STATUS,
    DEFAULT_PERSON_STATUS,
)
from flock.db.enums.follow_ups import FollowUpOutcome, InteractionType, StatsPeriod
from flock.db.enums.jobs import JobStatus, JobType
from flock.db.enums.notifications import NotificationType
from flock.db.enums.persons import STATUS_LABELS, Gender, MaritalStatus, PersonStatus
from flock.db.enums.settings import SETTING_DEFAULTS, SETTING_DESCRIPTIONS, SettingKey

__all__ = [
    "DEFAULT_JOB_STATUS",
    "DEFAULT_PERSON_STATUS",
    "FollowUpOutcome",
    "Gender",
    "InteractionType",
    "JobStatus",
    "JobType",
    "MaritalStatus",
    "NotificationType",
    "PersonStatus",
    "Role",
    "SETTING_DEFAULTS",
    "SETTING_DESCRIPTIONS",
    "STATUS_LABELS",
    "SettingKey",
    "StatsPeriod",
]

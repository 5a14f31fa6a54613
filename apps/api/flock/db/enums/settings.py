"""System setting keys and their defaults."""

from enum import Enum


class SettingKey(str, Enum):
    """Runtime-mutable business settings stored in system_settings."""

    MAX_PERSONS_PER_MENTOR = "max_persons_per_mentor"
    REMINDER_DAYS_NEW = "reminder_days_new"
    REMINDER_DAYS_FOLLOW_UP = "reminder_days_follow_up"
    AUTO_ASSIGNMENT_ENABLED = "auto_assignment_enabled"


SETTING_DEFAULTS: dict[SettingKey, str] = {
    SettingKey.MAX_PERSONS_PER_MENTOR: "10",
    SettingKey.REMINDER_DAYS_NEW: "3",
    SettingKey.REMINDER_DAYS_FOLLOW_UP: "7",
    SettingKey.AUTO_ASSIGNMENT_ENABLED: "true",
}

SETTING_DESCRIPTIONS: dict[SettingKey, str] = {
    SettingKey.MAX_PERSONS_PER_MENTOR: "Maximum active visitors per mentor",
    SettingKey.REMINDER_DAYS_NEW: "Days before reminding about a new visitor without follow-up",
    SettingKey.REMINDER_DAYS_FOLLOW_UP: "Days without interaction before a visit is overdue",
    SettingKey.AUTO_ASSIGNMENT_ENABLED: "Assign a mentor automatically at intake",
}

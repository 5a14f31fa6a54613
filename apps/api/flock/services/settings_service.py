"""System settings service - typed access to runtime-mutable business settings."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from flock.core.exceptions import ValidationError
from flock.db.enums import SETTING_DEFAULTS, SETTING_DESCRIPTIONS, SettingKey
from flock.db.models import SystemSetting

logger = logging.getLogger(__name__)

_INT_SETTINGS = {
    SettingKey.MAX_PERSONS_PER_MENTOR,
    SettingKey.REMINDER_DAYS_NEW,
    SettingKey.REMINDER_DAYS_FOLLOW_UP,
}
_BOOL_SETTINGS = {SettingKey.AUTO_ASSIGNMENT_ENABLED}
_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _coerce_key(key: SettingKey | str) -> SettingKey:
    try:
        return SettingKey(key)
    except ValueError:
        raise ValidationError(f"Unknown setting '{key}'")


def get_setting(db: Session, key: SettingKey | str) -> str:
    """Return the raw setting value, or its default when no row exists."""
    setting_key = _coerce_key(key)
    value = db.execute(
        select(SystemSetting.value).where(SystemSetting.key == setting_key.value)
    ).scalar_one_or_none()
    if value is None:
        return SETTING_DEFAULTS[setting_key]
    return value


def get_int_setting(db: Session, key: SettingKey | str) -> int:
    """
    Read an integer setting.

    Unparseable or non-positive stored values fall back to the default.
    """
    setting_key = _coerce_key(key)
    raw = get_setting(db, setting_key)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = 0
    if value <= 0:
        logger.warning("Invalid value %r for setting %s; using default", raw, setting_key.value)
        return int(SETTING_DEFAULTS[setting_key])
    return value


def get_bool_setting(db: Session, key: SettingKey | str) -> bool:
    setting_key = _coerce_key(key)
    raw = get_setting(db, setting_key).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logger.warning("Invalid value %r for setting %s; using default", raw, setting_key.value)
    return SETTING_DEFAULTS[setting_key] in _TRUE_VALUES


def list_settings(db: Session) -> list[dict]:
    """All known settings with their effective values."""
    rows = {row.key: row for row in db.execute(select(SystemSetting)).scalars().all()}
    result = []
    for key in SettingKey:
        row = rows.get(key.value)
        result.append(
            {
                "key": key.value,
                "value": row.value if row else SETTING_DEFAULTS[key],
                "description": (row.description if row and row.description else SETTING_DESCRIPTIONS[key]),
                "is_default": row is None,
            }
        )
    return result


def _validate_value(key: SettingKey, value: str) -> str:
    cleaned = str(value).strip()
    if key in _INT_SETTINGS:
        try:
            parsed = int(cleaned)
        except ValueError:
            raise ValidationError(f"Setting '{key.value}' must be an integer")
        if parsed <= 0:
            raise ValidationError(f"Setting '{key.value}' must be positive")
        return str(parsed)
    if key in _BOOL_SETTINGS:
        lowered = cleaned.lower()
        if lowered not in _TRUE_VALUES | _FALSE_VALUES:
            raise ValidationError(f"Setting '{key.value}' must be true or false")
        return "true" if lowered in _TRUE_VALUES else "false"
    return cleaned


def update_setting(db: Session, key: SettingKey | str, value: str) -> SystemSetting:
    """Create or update a setting row."""
    setting_key = _coerce_key(key)
    cleaned = _validate_value(setting_key, value)

    setting = db.get(SystemSetting, setting_key.value)
    if not setting:
        setting = SystemSetting(
            key=setting_key.value,
            description=SETTING_DESCRIPTIONS[setting_key],
            value=cleaned,
        )
        db.add(setting)
    else:
        setting.value = cleaned

    db.commit()
    db.refresh(setting)
    logger.info("Setting %s updated", setting_key.value)
    return setting


def seed_default_settings(db: Session) -> int:
    """Insert missing settings with their defaults. Returns rows created."""
    existing = set(db.execute(select(SystemSetting.key)).scalars().all())
    created = 0
    for key in SettingKey:
        if key.value in existing:
            continue
        db.add(
            SystemSetting(
                key=key.value,
                value=SETTING_DEFAULTS[key],
                description=SETTING_DESCRIPTIONS[key],
            )
        )
        created += 1
    db.commit()
    return created

"""Settings router - business settings stored in system_settings."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from flock.core.deps import get_db
from flock.schemas.settings import SettingRead, SettingUpdate
from flock.services import settings_service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=list[SettingRead])
def list_settings(db: Session = Depends(get_db)):
    return [SettingRead(**s) for s in settings_service.list_settings(db)]


@router.put("/{key}", response_model=SettingRead)
def update_setting(key: str, data: SettingUpdate, db: Session = Depends(get_db)):
    """Update a setting. Unknown keys and invalid values are rejected with 422."""
    setting = settings_service.update_setting(db, key, data.value)
    return SettingRead(key=setting.key, value=setting.value, description=setting.description)

"""SQLAlchemy ORM models."""

from flock.db.models.follow_ups import FollowUp
from flock.db.models.jobs import Job
from flock.db.models.notifications import Notification
from flock.db.models.persons import Person
from flock.db.models.settings import SystemSetting
from flock.db.models.users import User

__all__ = [
    "FollowUp",
    "Job",
    "Notification",
    "Person",
    "SystemSetting",
    "User",
]

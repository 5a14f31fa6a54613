"""Centralized defaults for enums."""

from flock.db.enums.jobs import JobStatus
from flock.db.enums.persons import PersonStatus


DEFAULT_PERSON_STATUS: PersonStatus = PersonStatus.TO_VISIT
DEFAULT_JOB_STATUS: JobStatus = JobStatus.PENDING

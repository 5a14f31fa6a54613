from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest

from flock.core.config import settings
from flock.db.enums import JobStatus, JobType, NotificationType
from flock.db.models import Job, Notification


def test_job_registry_resolves_known_handlers():
    from flock.jobs.registry import resolve_job_handler

    assert callable(resolve_job_handler(JobType.NOTIFICATION.value))
    assert callable(resolve_job_handler(JobType.REMINDER_PASS.value))


def test_job_registry_rejects_unknown_type():
    from flock.jobs.registry import resolve_job_handler

    with pytest.raises(ValueError):
        resolve_job_handler("does_not_exist")


@pytest.mark.asyncio
async def test_process_notification_delivers_event(db, make_mentor, make_person):
    from flock.jobs.handlers import notifications

    mentor = make_mentor()
    person = make_person(mentor=mentor, first_name="Esi", last_name="Owusu")
    job = SimpleNamespace(
        id=uuid4(),
        payload={
            "user_id": str(mentor.id),
            "person_id": str(person.id),
            "type": NotificationType.STATUS_CHANGE.value,
            "context": {"status": "to_redirect"},
            "dedupe_key": None,
        },
    )

    await notifications.process_notification(db, job)

    notification = db.query(Notification).one()
    assert notification.message == "Esi Owusu is now to be redirected"


@pytest.mark.asyncio
async def test_process_notification_drops_invalid_payload(db, caplog):
    from flock.jobs.handlers import notifications

    job = SimpleNamespace(id=uuid4(), payload={"user_id": "not-a-uuid", "type": "nope"})

    await notifications.process_notification(db, job)

    assert db.query(Notification).count() == 0
    assert "Invalid notification payload" in caplog.text


@pytest.mark.asyncio
async def test_queued_notification_is_delivered_by_worker(db, make_mentor, make_person, monkeypatch):
    from flock import worker
    from flock.services import assignment_service

    monkeypatch.setattr(settings, "NOTIFICATION_DISPATCH", "queue")
    mentor = make_mentor()
    person = make_person()

    assignment_service.assign_mentor(db, person.id, mentor.id)
    assert db.query(Notification).count() == 0

    monkeypatch.setattr(worker, "schedule_reminder_pass", lambda _db, now=None: None)
    processed = await worker.run_once(db)

    assert processed == 1
    assert db.query(Notification).filter(Notification.type == "new_assignment").count() == 1
    assert {j.status for j in db.query(Job).all()} == {JobStatus.COMPLETED.value}


def test_reminder_pass_scheduled_once_per_interval(db, now, monkeypatch):
    from flock import worker

    monkeypatch.setattr(settings, "REMINDER_INTERVAL_HOURS", 6)

    assert worker.schedule_reminder_pass(db, now=now) is not None
    assert worker.schedule_reminder_pass(db, now=now + timedelta(minutes=30)) is None
    assert worker.schedule_reminder_pass(db, now=now + timedelta(hours=6)) is not None
    assert db.query(Job).filter(Job.job_type == JobType.REMINDER_PASS.value).count() == 2


@pytest.mark.asyncio
async def test_failed_job_is_retried_then_failed(db, monkeypatch, now):
    from flock import worker
    from flock.jobs import registry
    from flock.services import job_service

    async def boom(_db, _job):
        raise RuntimeError("boom")

    monkeypatch.setitem(registry.JOB_HANDLERS, JobType.REMINDER_PASS.value, boom)
    job = job_service.schedule_job(db, JobType.REMINDER_PASS, payload={}, run_at=now)
    monkeypatch.setattr(worker, "schedule_reminder_pass", lambda _db, now=None: None)

    for _ in range(3):
        await worker.run_once(db, now=now + timedelta(minutes=1))

    db.refresh(job)
    assert job.attempts == 3
    assert job.status == JobStatus.FAILED.value
    assert job.last_error == "boom"

"""Tests for the administration CLI."""

from datetime import timedelta

import pytest
from click.testing import CliRunner

from flock import cli as cli_module
from flock.core.clock import utcnow
from flock.db.enums import Role
from flock.db.models import Notification, SystemSetting, User


@pytest.fixture
def runner(db, monkeypatch) -> CliRunner:
    monkeypatch.setattr(cli_module, "SessionLocal", lambda: db)
    # The shared test session is closed by the db fixture, not by the commands.
    monkeypatch.setattr(db, "close", lambda: None)
    return CliRunner()


def test_seed_settings(runner, db):
    result = runner.invoke(cli_module.cli, ["seed-settings"])

    assert result.exit_code == 0
    assert "Seeded 4 setting(s)" in result.output
    assert db.query(SystemSetting).count() == 4


def test_create_mentor(runner, db):
    args = [
        "create-mentor",
        "--email", "Marie@Example.org",
        "--first-name", "marie",
        "--last-name", "kouassi",
    ]

    result = runner.invoke(cli_module.cli, args)

    assert result.exit_code == 0
    assert "Created mentor: Marie Kouassi" in result.output
    mentor = db.query(User).one()
    assert mentor.email == "marie@example.org"
    assert mentor.role == Role.MENTOR.value

    duplicate = runner.invoke(cli_module.cli, args)
    assert duplicate.exit_code == 1
    assert "already exists" in duplicate.output


def test_run_reminders(runner, db, make_mentor, make_person):
    mentor = make_mentor()
    make_person(mentor=mentor, created_at=utcnow() - timedelta(days=5))

    result = runner.invoke(cli_module.cli, ["run-reminders"])

    assert result.exit_code == 0
    assert "New visitor reminders: 1" in result.output
    assert db.query(Notification).count() == 1


def test_list_overdue(runner, make_mentor, make_person):
    mentor = make_mentor()
    person = make_person(mentor=mentor, created_at=utcnow() - timedelta(days=10))

    result = runner.invoke(cli_module.cli, ["list-overdue", "--threshold-days", "7"])

    assert result.exit_code == 0
    assert str(person.id) in result.output
    assert "1 overdue visitor(s)" in result.output


def test_list_overdue_when_nobody_is_late(runner):
    result = runner.invoke(cli_module.cli, ["list-overdue"])

    assert result.exit_code == 0
    assert "No visitor overdue (threshold: 7 days)" in result.output


def test_deactivate_user(runner, db, make_mentor):
    mentor = make_mentor(first_name="Marie", last_name="Kouassi")

    result = runner.invoke(cli_module.cli, ["deactivate-user", "--email", mentor.email.upper()])

    assert result.exit_code == 0
    assert "Deactivated: Marie Kouassi" in result.output
    db.refresh(mentor)
    assert mentor.is_active is False

    unknown = runner.invoke(cli_module.cli, ["deactivate-user", "--email", "nobody@example.org"])
    assert unknown.exit_code == 1
    assert "No user with email" in unknown.output

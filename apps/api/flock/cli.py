"""CLI tools for Flock administration."""

import click

from flock.core.config import settings
from flock.core.exceptions import FlockError
from flock.core.structured_logging import configure_logging
from flock.db.enums import SettingKey
from flock.db.session import SessionLocal
from flock.services import follow_up_scanner, mentor_service, reminder_service, settings_service


@click.group()
def cli():
    """Flock CLI tools."""
    configure_logging(settings.LOG_LEVEL)


@cli.command()
def seed_settings():
    """
    Insert missing system settings with their default values.

    Example:
        python -m flock.cli seed-settings
    """
    db = SessionLocal()
    try:
        created = settings_service.seed_default_settings(db)
        click.echo(f"✓ Seeded {created} setting(s)")
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="Mentor email address")
@click.option("--first-name", required=True, help="First name")
@click.option("--last-name", required=True, help="Last name")
@click.option("--phone", default=None, help="Optional phone number")
@click.option("--church-section", default=None, help="Optional church section")
def create_mentor(email: str, first_name: str, last_name: str, phone: str | None, church_section: str | None):
    """
    Create an active mentor account.

    Example:
        python -m flock.cli create-mentor --email "marie@example.org" --first-name Marie --last-name Kouassi
    """
    db = SessionLocal()
    try:
        mentor = mentor_service.create_mentor(
            db,
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            church_section=church_section,
        )
        click.echo(f"✓ Created mentor: {mentor.full_name}")
        click.echo(f"  ID: {mentor.id}")
    except FlockError as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="Email of the user to deactivate")
def deactivate_user(email: str):
    """
    Deactivate a user. A deactivated mentor gets no new visitors.

    Example:
        python -m flock.cli deactivate-user --email "marie@example.org"
    """
    db = SessionLocal()
    try:
        user = mentor_service.get_user_by_email(db, email)
        if not user:
            click.echo(f"❌ No user with email {email}")
            raise SystemExit(1)
        mentor_service.deactivate_user(db, user.id)
        click.echo(f"✓ Deactivated: {user.full_name}")
    finally:
        db.close()


@cli.command()
def run_reminders():
    """
    Run the follow-up reminder pass once.

    Example:
        python -m flock.cli run-reminders
    """
    db = SessionLocal()
    try:
        result = reminder_service.run_reminder_pass(db)
        click.echo(f"✓ New visitor reminders: {result['new_reminders']}")
        click.echo(f"✓ Overdue reminders: {result['overdue_reminders']}")
        click.echo(f"  Already sent today: {result['skipped_duplicates']}")
    finally:
        db.close()


@cli.command()
@click.option(
    "--threshold-days",
    type=click.IntRange(min=1),
    default=None,
    help="Days without interaction (default: reminder_days_follow_up setting)",
)
def list_overdue(threshold_days: int | None):
    """
    List visitors without a recent interaction.

    Example:
        python -m flock.cli list-overdue --threshold-days 14
    """
    db = SessionLocal()
    try:
        if threshold_days is None:
            threshold_days = settings_service.get_int_setting(db, SettingKey.REMINDER_DAYS_FOLLOW_UP)
        entries = follow_up_scanner.find_overdue(db, threshold_days)
        if not entries:
            click.echo(f"✓ No visitor overdue (threshold: {threshold_days} days)")
            return
        for entry in entries:
            last = entry.last_interaction_date.date().isoformat() if entry.last_interaction_date else "never"
            click.echo(
                f"{entry.person.id}  {entry.days_since_contact:>4}d  "
                f"last={last}  mentor={entry.mentor.id}"
            )
        click.echo(f"{len(entries)} overdue visitor(s)")
    finally:
        db.close()


if __name__ == "__main__":
    cli()

"""Baseline schema: users, persons, follow-ups, notifications, settings, jobs.

Revision ID: 0001_flock_baseline
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_flock_baseline"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("church_section", sa.String(100), nullable=True),
        sa.Column("role", sa.String(30), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_users_role_active", "users", ["role", "is_active"])

    op.create_table(
        "persons",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("gender", sa.String(1), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("commune", sa.String(100), nullable=True),
        sa.Column("quartier", sa.String(100), nullable=True),
        sa.Column("profession", sa.String(100), nullable=True),
        sa.Column("marital_status", sa.String(20), nullable=True),
        sa.Column("how_heard_about_church", sa.Text(), nullable=True),
        sa.Column("prayer_requests", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="to_visit"),
        sa.Column("assigned_mentor_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("first_visit_date", sa.Date(), nullable=False),
        sa.Column("created_by_user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_persons_mentor_status", "persons", ["assigned_mentor_id", "status"])
    op.create_index("idx_persons_status_created", "persons", ["status", "created_at"])
    op.create_index("idx_persons_first_visit", "persons", ["first_visit_date"])

    op.create_table(
        "follow_ups",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("person_id", sa.Uuid(), sa.ForeignKey("persons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("mentor_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("interaction_type", sa.String(20), nullable=False),
        sa.Column("interaction_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("outcome", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("next_action_needed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("next_action_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_action_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_follow_ups_person_date", "follow_ups", ["person_id", "interaction_date"])
    op.create_index("idx_follow_ups_mentor_date", "follow_ups", ["mentor_id", "interaction_date"])
    op.create_index(
        "idx_follow_ups_next_action",
        "follow_ups",
        ["mentor_id", "next_action_needed", "next_action_date"],
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("person_id", sa.Uuid(), sa.ForeignKey("persons.id", ondelete="CASCADE"), nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("action_url", sa.String(255), nullable=True),
        sa.Column("dedupe_key", sa.String(255), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_notif_user_unread", "notifications", ["user_id", "is_read", "created_at"])
    op.create_index("uq_notif_dedupe", "notifications", ["dedupe_key"], unique=True)

    op.create_table(
        "system_settings",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "jobs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("job_type", sa.String(50), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("run_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("max_attempts", sa.Integer(), nullable=False, server_default=sa.text("3")),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("idempotency_key", sa.String(255), nullable=True),
    )
    op.create_index("idx_jobs_pending", "jobs", ["status", "run_at"])
    op.create_index("uq_job_idempotency", "jobs", ["idempotency_key"], unique=True)


def downgrade() -> None:
    op.drop_index("uq_job_idempotency", table_name="jobs")
    op.drop_index("idx_jobs_pending", table_name="jobs")
    op.drop_table("jobs")
    op.drop_table("system_settings")
    op.drop_index("uq_notif_dedupe", table_name="notifications")
    op.drop_index("idx_notif_user_unread", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("idx_follow_ups_next_action", table_name="follow_ups")
    op.drop_index("idx_follow_ups_mentor_date", table_name="follow_ups")
    op.drop_index("idx_follow_ups_person_date", table_name="follow_ups")
    op.drop_table("follow_ups")
    op.drop_index("idx_persons_first_visit", table_name="persons")
    op.drop_index("idx_persons_status_created", table_name="persons")
    op.drop_index("idx_persons_mentor_status", table_name="persons")
    op.drop_table("persons")
    op.drop_index("idx_users_role_active", table_name="users")
    op.drop_table("users")

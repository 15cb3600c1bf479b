"""create tracking tables

Revision ID: 0001
Revises: None
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("project_name", sa.String(length=200), nullable=False),
        sa.Column("client_name", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_projects_id"), "projects", ["id"], unique=False)

    op.create_table(
        "office_hours",
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("is_working_day", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("has_lunch_break", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("lunch_start_time", sa.Time(), nullable=True),
        sa.Column("lunch_end_time", sa.Time(), nullable=True),
        sa.Column("lunch_duration_minutes", sa.Integer(), nullable=True),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_office_hours_day_of_week"),
        sa.PrimaryKeyConstraint("day_of_week"),
    )

    op.create_table(
        "overtime_tracking_sessions",
        sa.Column("employee_id", sa.String(length=50), nullable=False),
        sa.Column("overtime_type", sa.String(length=20), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("project_name", sa.String(length=200), nullable=True),
        sa.Column("memo", sa.Text(), nullable=True),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("is_paused", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_pause_time", sa.DateTime(), nullable=True),
        sa.Column("total_break_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "overtime_type IN ('pending_tasks', 'new_tasks', 'tracking')",
            name="ck_tracking_sessions_overtime_type",
        ),
        sa.CheckConstraint(
            "(is_paused AND last_pause_time IS NOT NULL) OR (NOT is_paused AND last_pause_time IS NULL)",
            name="ck_tracking_sessions_pause_time",
        ),
        sa.CheckConstraint("total_break_seconds >= 0", name="ck_tracking_sessions_break_seconds"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("employee_id"),
    )

    op.create_table(
        "overtime_breaks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.String(length=50), nullable=False),
        sa.Column("break_start_time", sa.DateTime(), nullable=False),
        sa.Column("break_end_time", sa.DateTime(), nullable=True),
        sa.Column("break_duration_seconds", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ["employee_id"], ["overtime_tracking_sessions.employee_id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_overtime_breaks_id"), "overtime_breaks", ["id"], unique=False)
    op.create_index(
        op.f("ix_overtime_breaks_employee_id"), "overtime_breaks", ["employee_id"], unique=False
    )

    op.create_table(
        "overtime",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.String(length=50), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("overtime_type", sa.String(length=20), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=False),
        sa.Column("total_hours", sa.Float(), nullable=False),
        sa.Column("actual_working_hours", sa.Float(), nullable=False),
        sa.Column("total_break_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("actual_working_hours >= 0", name="ck_overtime_actual_working_hours"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_overtime_id"), "overtime", ["id"], unique=False)
    op.create_index(op.f("ix_overtime_employee_id"), "overtime", ["employee_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_overtime_employee_id"), table_name="overtime")
    op.drop_index(op.f("ix_overtime_id"), table_name="overtime")
    op.drop_table("overtime")
    op.drop_index(op.f("ix_overtime_breaks_employee_id"), table_name="overtime_breaks")
    op.drop_index(op.f("ix_overtime_breaks_id"), table_name="overtime_breaks")
    op.drop_table("overtime_breaks")
    op.drop_table("overtime_tracking_sessions")
    op.drop_table("office_hours")
    op.drop_index(op.f("ix_projects_id"), table_name="projects")
    op.drop_table("projects")

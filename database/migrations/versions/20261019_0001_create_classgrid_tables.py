"""create timetable, roster and attendance session tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("branch", sa.String(length=50), nullable=False),
        sa.Column("section", sa.String(length=20), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("class_id", sa.String(length=80), nullable=False),
        sa.Column("valid_from", sa.Date(), nullable=False),
        sa.Column("valid_until", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("week_schedule", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_timetables_scope", "timetables", ["class_id", "section", "semester", "valid_from"])
    op.create_index("ix_timetables_class_active", "timetables", ["class_id", "is_active"])
    op.create_index("ix_timetables_window", "timetables", ["valid_from", "valid_until"])

    op.create_table(
        "faculty",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("faculty_code", sa.String(length=50), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_faculty_faculty_code", "faculty", ["faculty_code"], unique=True)

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_subjects_code", "subjects", ["code"], unique=True)

    op.create_table(
        "students",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("enrollment_no", sa.Integer(), nullable=True),
        sa.Column("class_id", sa.String(length=80), nullable=False),
        sa.Column("section", sa.String(length=20), nullable=False),
        sa.Column("group_number", sa.Integer(), nullable=True),
        sa.Column("group_assignment", sa.String(length=30), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_students_class_id", "students", ["class_id"])

    op.create_table(
        "attendance_sessions",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("session_id", sa.String(length=120), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("day_of_week", sa.String(length=10), nullable=False),
        sa.Column("period", sa.Integer(), nullable=False),
        sa.Column("time", sa.String(length=20), nullable=True),
        sa.Column("branch", sa.String(length=50), nullable=False),
        sa.Column("section", sa.String(length=20), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("class_id", sa.String(length=80), nullable=False),
        sa.Column("subject_code", sa.String(length=50), nullable=True),
        sa.Column("subject_name", sa.String(length=200), nullable=True),
        sa.Column("teacher_id", sa.String(length=120), nullable=False),
        sa.Column("room", sa.String(length=100), nullable=True),
        sa.Column("session_type", sa.String(length=20), nullable=False),
        sa.Column("is_group_split", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("group_number", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="scheduled"),
        sa.Column("is_substitution", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("original_teacher_id", sa.String(length=120), nullable=True),
        sa.Column("attendance_records", sa.JSON(), nullable=False),
        sa.Column("total_students", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_attendance_sessions_session_id", "attendance_sessions", ["session_id"], unique=True)
    op.create_index(
        "ix_attendance_sessions_class_date", "attendance_sessions", ["class_id", "section", "date", "period"]
    )
    op.create_index("ix_attendance_sessions_teacher_date", "attendance_sessions", ["teacher_id", "date"])


def downgrade() -> None:
    op.drop_table("attendance_sessions")
    op.drop_table("students")
    op.drop_table("subjects")
    op.drop_table("faculty")
    op.drop_table("timetables")

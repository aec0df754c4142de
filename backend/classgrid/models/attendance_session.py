import datetime as dt
import uuid
from enum import Enum

from sqlalchemy import JSON, Boolean, Date, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from classgrid.db.base import Base


class SessionStatus(str, Enum):
    scheduled = "scheduled"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"


class AttendanceSession(Base):
    __tablename__ = "attendance_sessions"
    __table_args__ = (
        Index("ix_attendance_sessions_class_date", "class_id", "section", "date", "period"),
        Index("ix_attendance_sessions_teacher_date", "teacher_id", "date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id: Mapped[str] = mapped_column(String(120), unique=True, index=True, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    day_of_week: Mapped[str] = mapped_column(String(10), nullable=False)
    period: Mapped[int] = mapped_column(Integer, nullable=False)
    time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    branch: Mapped[str] = mapped_column(String(50), nullable=False)
    section: Mapped[str] = mapped_column(String(20), nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    class_id: Mapped[str] = mapped_column(String(80), nullable=False)
    subject_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subject_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    teacher_id: Mapped[str] = mapped_column(String(120), nullable=False)
    room: Mapped[str | None] = mapped_column(String(100), nullable=True)
    session_type: Mapped[str] = mapped_column(String(20), nullable=False)
    is_group_split: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    group_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=SessionStatus.scheduled.value)
    is_substitution: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    original_teacher_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    attendance_records: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    total_students: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    started_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

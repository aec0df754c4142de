import datetime as dt
from enum import Enum
from typing import Literal

from pydantic import Field

from classgrid.schemas.timetable import CamelModel, PeriodKind


class GroupAssignmentPolicy(str, Enum):
    manual = "manual"
    auto_even_odd = "auto-even-odd"
    auto_alphabetical = "auto-alphabetical"


AttendanceStatus = Literal["Present", "Absent", "Leave", "Unmarked"]


class SessionAssignment(CamelModel):
    """Who teaches what, where, for one concrete period (and group) of a timetable."""

    period: int
    time: str | None = None
    kind: PeriodKind
    subject_code: str | None = None
    subject_name: str | None = None
    teacher_id: str | None = None
    teacher_name: str | None = None
    room: str | None = None
    is_group_split: bool = False
    group_number: int | None = None


class SessionStartRequest(CamelModel):
    teacher_id: str = Field(min_length=1)
    class_id: str = Field(min_length=1)
    section: str = Field(min_length=1)
    semester: int = Field(ge=1, le=20)
    period: int = Field(ge=1)
    date: dt.date | None = None
    group_number: Literal[1, 2] | None = None
    is_substitution: bool = False
    original_teacher_id: str | None = None


class AttendanceRecord(CamelModel):
    uid: str
    student_name: str | None = None
    enrollment_no: int | None = None
    status: AttendanceStatus = "Unmarked"
    marked_at: dt.datetime | None = None
    marked_by: str | None = None


class AttendanceSessionOut(CamelModel):
    session_id: str
    date: dt.date
    day_of_week: str
    period: int
    time: str | None = None
    branch: str
    section: str
    semester: int
    class_id: str
    subject_code: str | None = None
    subject_name: str | None = None
    teacher_id: str
    room: str | None = None
    session_type: PeriodKind
    is_group_split: bool = False
    group_number: int | None = None
    status: str
    is_substitution: bool = False
    original_teacher_id: str | None = None
    total_students: int = 0
    attendance_records: list[AttendanceRecord] = Field(default_factory=list)


class SessionMark(CamelModel):
    """A single student's mark in one completed session, as consumed by attendance summaries."""

    subject_code: str | None = None
    subject_name: str | None = None
    status: AttendanceStatus


class SubjectAttendance(CamelModel):
    subject_code: str | None = None
    subject_name: str | None = None
    present: int = 0
    absent: int = 0
    leave: int = 0
    total: int = 0
    percentage: float = 0
    shortage: bool = False


class AttendanceSummary(CamelModel):
    total_classes: int
    present: int
    absent: int
    leave: int
    percentage: float
    has_shortage: bool
    subjects: list[SubjectAttendance] = Field(default_factory=list)

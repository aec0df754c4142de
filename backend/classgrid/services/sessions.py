from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime, timezone

from classgrid.core.exceptions import InvalidRequestError, ResourceNotFoundError, SessionAuthorizationError
from classgrid.schemas.session import (
    AttendanceSummary,
    GroupAssignmentPolicy,
    SessionAssignment,
    SessionMark,
    SubjectAttendance,
)
from classgrid.schemas.timetable import SingleGroupPeriod, SplitPeriod, TimetableRecord
from classgrid.services.schedule_query import day_name


def session_date(value: date | datetime) -> date:
    """Calendar date used in session identity; aware datetimes are taken in UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def generate_session_id(class_id: str, on: date | datetime, period: int, group_number: int | None = None) -> str:
    suffix = f"-G{group_number}" if group_number else ""
    return f"{class_id}-{session_date(on).isoformat()}-P{period}{suffix}"


def resolve_group_assignment(
    policy: str | GroupAssignmentPolicy | None,
    *,
    student_id: str | None = None,
    enrollment_no: int | None = None,
    manual_group: int | None = None,
) -> int:
    """Pick lab group 1 or 2 for a student.

    Unknown policies and missing inputs fall back to group 1 without raising.
    """
    try:
        policy = GroupAssignmentPolicy(policy)
    except ValueError:
        return 1

    if policy is GroupAssignmentPolicy.manual and manual_group:
        return manual_group
    if policy is GroupAssignmentPolicy.auto_even_odd and enrollment_no:
        return 2 if enrollment_no % 2 == 0 else 1
    if policy is GroupAssignmentPolicy.auto_alphabetical and student_id:
        last_char = student_id[-1].lower()
        return 2 if ord(last_char) % 2 == 0 else 1
    return 1


def calculate_attendance_percentage(present: int, total: int) -> float:
    if total == 0:
        return 0
    # Halves round up.
    return math.floor(present / total * 10000 + 0.5) / 100


def resolve_session_assignment(
    record: TimetableRecord,
    on: date | datetime,
    period_number: int,
    group_number: int | None = None,
) -> SessionAssignment:
    """Find who is scheduled for one period (and group) of a timetable on a date."""
    weekday = day_name(session_date(on))
    periods = record.week_schedule.get(weekday)
    if not periods:
        raise ResourceNotFoundError("Schedule", weekday)

    period = next((item for item in periods if item.period == period_number), None)
    if period is None:
        raise ResourceNotFoundError("Period", str(period_number))

    if isinstance(period, SplitPeriod):
        if group_number is None:
            raise InvalidRequestError(
                "Group number is required for a split lab period",
                details={"period": period_number},
            )
        assignment = period.group(group_number)
        if assignment is None:
            raise ResourceNotFoundError("Group", str(group_number))
        return SessionAssignment(
            period=period.period,
            time=period.time,
            kind=period.kind,
            is_group_split=True,
            group_number=group_number,
            **assignment.model_dump(),
        )

    return SessionAssignment(
        period=period.period,
        time=period.time,
        kind=period.kind,
        subject_code=period.subject_code,
        subject_name=period.subject_name,
        teacher_id=period.teacher_id,
        teacher_name=period.teacher_name,
        room=period.room,
        group_number=period.group_number if isinstance(period, SingleGroupPeriod) else group_number,
    )


def authorize_session_teacher(assignment: SessionAssignment, teacher_id: str, *, is_substitution: bool = False) -> None:
    if is_substitution:
        return
    if assignment.teacher_id != teacher_id:
        raise SessionAuthorizationError(assignment.teacher_id)


def summarize_attendance(marks: Iterable[SessionMark], shortage_threshold: float = 75.0) -> AttendanceSummary:
    """Aggregate a student's marks overall and per subject.

    Unmarked entries do not count towards the total.
    """
    subjects: dict[str, SubjectAttendance] = {}
    present = absent = leave = 0
    for mark in marks:
        if mark.status == "Unmarked":
            continue
        key = mark.subject_code or "Other"
        stats = subjects.get(key)
        if stats is None:
            stats = SubjectAttendance(subject_code=mark.subject_code, subject_name=mark.subject_name)
            subjects[key] = stats
        stats.total += 1
        if mark.status == "Present":
            present += 1
            stats.present += 1
        elif mark.status == "Absent":
            absent += 1
            stats.absent += 1
        else:
            leave += 1
            stats.leave += 1

    for stats in subjects.values():
        stats.percentage = calculate_attendance_percentage(stats.present, stats.total)
        stats.shortage = stats.total > 0 and stats.percentage < shortage_threshold

    total = present + absent + leave
    percentage = calculate_attendance_percentage(present, total)
    return AttendanceSummary(
        total_classes=total,
        present=present,
        absent=absent,
        leave=leave,
        percentage=percentage,
        has_shortage=percentage < shortage_threshold,
        subjects=list(subjects.values()),
    )

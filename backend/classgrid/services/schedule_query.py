"""Per-actor schedule derivation over already-loaded timetable records.

Dates are treated as already normalized by the caller; a datetime argument is
reduced to its calendar date before the weekday is derived.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from classgrid.schemas.schedule import ScheduledPeriod, TimetableContext
from classgrid.schemas.timetable import (
    WEEKDAYS,
    GroupAssignment,
    SplitPeriod,
    TimetableRecord,
    WeeklyScheduleGrid,
    parse_time_range,
    parse_time_to_minutes,
    period_assignments,
)


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def day_name(value: date | datetime) -> str:
    return WEEKDAYS[_as_date(value).weekday()]


def is_date_in_validity_period(value: date | datetime, valid_from: date, valid_until: date) -> bool:
    target = _as_date(value)
    return valid_from <= target <= valid_until


def _context(record: TimetableRecord) -> TimetableContext:
    return TimetableContext(
        timetable_id=record.id,
        branch=record.branch,
        section=record.section,
        semester=record.semester,
        class_id=record.class_id,
    )


def _flatten(period, assignment: GroupAssignment, group: int | None, context: TimetableContext | None) -> ScheduledPeriod:
    return ScheduledPeriod(
        period=period.period,
        time=period.time,
        kind=period.kind,
        subject_code=assignment.subject_code,
        subject_name=assignment.subject_name,
        teacher_id=assignment.teacher_id,
        teacher_name=assignment.teacher_name,
        room=assignment.room,
        is_group_split=isinstance(period, SplitPeriod),
        group_number=group,
        timetable=context,
    )


def _valid_records(records: Iterable[TimetableRecord], target: date) -> list[TimetableRecord]:
    return [
        record
        for record in records
        if record.is_active and is_date_in_validity_period(target, record.valid_from, record.valid_until)
    ]


def get_teacher_schedule(teacher_id: str, on: date | datetime, records: Iterable[TimetableRecord]) -> list[ScheduledPeriod]:
    """Every period (or split-lab group) the teacher takes on the given date, across all classes."""
    target = _as_date(on)
    weekday = day_name(target)
    schedule: list[ScheduledPeriod] = []
    for record in _valid_records(records, target):
        context = _context(record)
        for period in record.day(weekday):
            for group, assignment in period_assignments(period):
                if assignment.teacher_id == teacher_id:
                    schedule.append(_flatten(period, assignment, group, context))
    return sorted(schedule, key=lambda item: item.period)


def get_student_schedule(
    class_id: str,
    section: str,
    on: date | datetime,
    records: Iterable[TimetableRecord],
    student_group: int | None = None,
) -> list[ScheduledPeriod]:
    """The student's day for their class and section.

    Split labs are only visible when the student's group is known; single-group
    labs are listed as-is.
    """
    target = _as_date(on)
    weekday = day_name(target)
    schedule: list[ScheduledPeriod] = []
    for record in _valid_records(records, target):
        if record.class_id != class_id or record.section != section:
            continue
        context = _context(record)
        for period in record.day(weekday):
            if isinstance(period, SplitPeriod):
                if student_group is None:
                    continue
                assignment = period.group(student_group)
                if assignment is not None:
                    schedule.append(_flatten(period, assignment, student_group, context))
                continue
            ((group, assignment),) = period_assignments(period)
            schedule.append(_flatten(period, assignment, group, context))
    return sorted(schedule, key=lambda item: item.period)


def get_current_period(grid: WeeklyScheduleGrid, weekday: str, current_time: str):
    """Return the first period on ``weekday`` whose [start, end) range contains ``current_time``."""
    minutes = parse_time_to_minutes(current_time)
    for period in grid.day(weekday):
        bounds = parse_time_range(period.time)
        if bounds is None:
            continue
        start, end = bounds
        if start <= minutes < end:
            return period
    return None


def get_upcoming_periods(
    teacher_id: str,
    on: date | datetime,
    current_time: str,
    records: Iterable[TimetableRecord],
) -> list[ScheduledPeriod]:
    minutes = parse_time_to_minutes(current_time)
    upcoming = []
    for item in get_teacher_schedule(teacher_id, on, records):
        bounds = parse_time_range(item.time)
        if bounds is not None and bounds[0] > minutes:
            upcoming.append(item)
    return upcoming

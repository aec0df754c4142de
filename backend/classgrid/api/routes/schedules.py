from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from classgrid.api.deps import get_db
from classgrid.core.exceptions import ResourceNotFoundError
from classgrid.models.student import Student
from classgrid.schemas.schedule import DaySchedule, ScheduledPeriod
from classgrid.schemas.timetable import TIME_PATTERN
from classgrid.services.schedule_query import (
    day_name,
    get_student_schedule,
    get_teacher_schedule,
    get_upcoming_periods,
)
from classgrid.services.timetable_store import load_active_records

router = APIRouter()


def _day_schedule(on: date, periods: list[ScheduledPeriod]) -> DaySchedule:
    return DaySchedule(date=on.isoformat(), day=day_name(on), count=len(periods), periods=periods)


@router.get("/teacher", response_model=DaySchedule)
def teacher_schedule(
    teacher_id: str = Query(alias="teacherId", min_length=1),
    on: date | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
) -> DaySchedule:
    on = on or date.today()
    periods = get_teacher_schedule(teacher_id, on, load_active_records(db, on=on))
    return _day_schedule(on, periods)


@router.get("/teacher/upcoming", response_model=DaySchedule)
def teacher_upcoming(
    teacher_id: str = Query(alias="teacherId", min_length=1),
    time: str = Query(pattern=TIME_PATTERN.pattern),
    on: date | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
) -> DaySchedule:
    on = on or date.today()
    periods = get_upcoming_periods(teacher_id, on, time, load_active_records(db, on=on))
    return _day_schedule(on, periods)


@router.get("/student/{student_id}", response_model=DaySchedule)
def student_schedule(
    student_id: str,
    on: date | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
) -> DaySchedule:
    student = db.get(Student, student_id)
    if student is None:
        raise ResourceNotFoundError("Student", student_id)
    on = on or date.today()
    periods = get_student_schedule(
        student.class_id,
        student.section,
        on,
        load_active_records(db, on=on),
        student_group=student.group_number,
    )
    return _day_schedule(on, periods)

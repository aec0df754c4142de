from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.core.exceptions import ResourceNotFoundError
from classgrid.models.faculty import Faculty
from classgrid.models.subject import Subject
from classgrid.models.timetable import Timetable
from classgrid.schemas.roster import SubjectRosterEntry, TeacherRosterEntry
from classgrid.schemas.timetable import TimetableRecord, WeeklyScheduleGrid


def to_record(row: Timetable) -> TimetableRecord:
    return TimetableRecord.model_validate(
        {
            "id": row.id,
            "branch": row.branch,
            "section": row.section,
            "semester": row.semester,
            "class_id": row.class_id,
            "valid_from": row.valid_from,
            "valid_until": row.valid_until,
            "is_active": row.is_active,
            "week_schedule": row.week_schedule or {},
        }
    )


def dump_week_schedule(grid: WeeklyScheduleGrid) -> dict:
    return grid.model_dump(mode="json", by_alias=True)["weekSchedule"]


def get_timetable_row(db: Session, timetable_id: str) -> Timetable:
    row = db.get(Timetable, timetable_id)
    if row is None:
        raise ResourceNotFoundError("Timetable", timetable_id)
    return row


def list_timetable_rows(
    db: Session,
    *,
    branch: str | None = None,
    section: str | None = None,
    semester: int | None = None,
    class_id: str | None = None,
    is_active: bool | None = None,
) -> list[Timetable]:
    query = select(Timetable)
    if branch:
        query = query.where(Timetable.branch == branch)
    if section:
        query = query.where(Timetable.section == section)
    if semester is not None:
        query = query.where(Timetable.semester == semester)
    if class_id:
        query = query.where(Timetable.class_id == class_id)
    if is_active is not None:
        query = query.where(Timetable.is_active == is_active)
    return list(db.execute(query.order_by(Timetable.created_at.desc())).scalars())


def load_active_records(db: Session, *, on: date | None = None) -> list[TimetableRecord]:
    """Snapshot of active timetables, optionally narrowed to those valid on a date."""
    query = select(Timetable).where(Timetable.is_active.is_(True))
    if on is not None:
        query = query.where(Timetable.valid_from <= on, Timetable.valid_until >= on)
    return [to_record(row) for row in db.execute(query).scalars()]


def find_active_record(db: Session, *, class_id: str, section: str, semester: int, on: date) -> TimetableRecord | None:
    row = db.execute(
        select(Timetable)
        .where(
            Timetable.class_id == class_id,
            Timetable.section == section,
            Timetable.semester == semester,
            Timetable.is_active.is_(True),
            Timetable.valid_from <= on,
            Timetable.valid_until >= on,
        )
        .order_by(Timetable.valid_from.desc())
    ).scalars().first()
    return to_record(row) if row is not None else None


def save_record(db: Session, record: TimetableRecord) -> Timetable:
    row = Timetable(
        branch=record.branch,
        section=record.section,
        semester=record.semester,
        class_id=record.class_id,
        valid_from=record.valid_from,
        valid_until=record.valid_until,
        is_active=record.is_active,
        week_schedule=dump_week_schedule(record),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def load_roster(db: Session) -> tuple[list[TeacherRosterEntry], list[SubjectRosterEntry]]:
    teachers = [
        TeacherRosterEntry(canonical_id=faculty.id, display_name=faculty.name, code=faculty.faculty_code)
        for faculty in db.execute(select(Faculty)).scalars()
    ]
    subjects = [
        SubjectRosterEntry(code=subject.code, name=subject.name)
        for subject in db.execute(select(Subject)).scalars()
    ]
    return teachers, subjects

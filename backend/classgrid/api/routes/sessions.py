import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.api.deps import get_db
from classgrid.core.config import get_settings
from classgrid.core.exceptions import AppError, ResourceNotFoundError, SessionConflictError
from classgrid.models.attendance_session import AttendanceSession, SessionStatus
from classgrid.models.student import Student
from classgrid.schemas.session import (
    AttendanceRecord,
    AttendanceSessionOut,
    AttendanceSummary,
    SessionMark,
    SessionStartRequest,
)
from classgrid.services.schedule_query import day_name
from classgrid.services.sessions import (
    authorize_session_teacher,
    generate_session_id,
    resolve_group_assignment,
    resolve_session_assignment,
    summarize_attendance,
)
from classgrid.services.timetable_store import find_active_record

router = APIRouter()
logger = logging.getLogger(__name__)


def _students_for_session(db: Session, class_id: str, section: str, group_number: int | None) -> list[Student]:
    students = list(
        db.execute(
            select(Student)
            .where(Student.class_id == class_id, Student.section == section, Student.is_active.is_(True))
            .order_by(Student.enrollment_no)
        ).scalars()
    )
    if group_number is None:
        return students

    if not any(student.group_number for student in students):
        policy = get_settings().default_group_assignment
        for student in students:
            student.group_number = resolve_group_assignment(
                policy,
                student_id=student.id,
                enrollment_no=student.enrollment_no,
            )
            student.group_assignment = policy
        logger.info("Auto-assigned lab groups for %d student(s) in %s using %s", len(students), class_id, policy)
    return [student for student in students if student.group_number == group_number]


@router.post("/start", response_model=AttendanceSessionOut, status_code=status.HTTP_201_CREATED)
def start_session(payload: SessionStartRequest, db: Session = Depends(get_db)) -> AttendanceSessionOut:
    on = payload.date or date.today()
    record = find_active_record(
        db,
        class_id=payload.class_id,
        section=payload.section,
        semester=payload.semester,
        on=on,
    )
    if record is None:
        raise AppError("No active timetable found for this class and date", status_code=404)

    assignment = resolve_session_assignment(record, on, payload.period, payload.group_number)
    authorize_session_teacher(assignment, payload.teacher_id, is_substitution=payload.is_substitution)

    session_id = generate_session_id(record.class_id, on, payload.period, payload.group_number)
    existing = db.execute(
        select(AttendanceSession).where(AttendanceSession.session_id == session_id)
    ).scalar_one_or_none()
    if existing is not None:
        raise SessionConflictError(session_id)

    split_group = assignment.group_number if assignment.is_group_split else None
    students = _students_for_session(db, record.class_id, record.section, split_group)
    records = [
        AttendanceRecord(uid=student.id, student_name=student.name, enrollment_no=student.enrollment_no)
        for student in students
    ]

    session = AttendanceSession(
        session_id=session_id,
        date=on,
        day_of_week=day_name(on),
        period=assignment.period,
        time=assignment.time,
        branch=record.branch,
        section=record.section,
        semester=record.semester,
        class_id=record.class_id,
        subject_code=assignment.subject_code,
        subject_name=assignment.subject_name,
        teacher_id=payload.teacher_id,
        room=assignment.room,
        session_type=assignment.kind.value,
        is_group_split=assignment.is_group_split,
        group_number=assignment.group_number,
        status=SessionStatus.ongoing.value,
        is_substitution=payload.is_substitution,
        original_teacher_id=payload.original_teacher_id if payload.is_substitution else None,
        attendance_records=[item.model_dump(mode="json", by_alias=True) for item in records],
        total_students=len(records),
        started_at=datetime.now(timezone.utc),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("Started attendance session %s for teacher %s", session_id, payload.teacher_id)
    return AttendanceSessionOut.model_validate(session)


@router.get("/student/{student_id}/summary", response_model=AttendanceSummary)
def student_attendance_summary(student_id: str, db: Session = Depends(get_db)) -> AttendanceSummary:
    student = db.get(Student, student_id)
    if student is None:
        raise ResourceNotFoundError("Student", student_id)

    sessions = db.execute(
        select(AttendanceSession).where(
            AttendanceSession.class_id == student.class_id,
            AttendanceSession.section == student.section,
            AttendanceSession.status == SessionStatus.completed.value,
        )
    ).scalars()
    marks = []
    for session in sessions:
        entry = next((item for item in session.attendance_records if item.get("uid") == student.id), None)
        if entry is not None:
            marks.append(
                SessionMark(
                    subject_code=session.subject_code,
                    subject_name=session.subject_name,
                    status=entry.get("status", "Unmarked"),
                )
            )
    return summarize_attendance(marks, get_settings().attendance_shortage_threshold)

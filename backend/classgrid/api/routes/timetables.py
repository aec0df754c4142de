import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from classgrid.api.deps import get_db
from classgrid.core.config import get_settings
from classgrid.core.exceptions import InvalidRequestError, TimetableConflictError
from classgrid.models.timetable import Timetable
from classgrid.schemas.timetable import TIME_PATTERN, TimetableOut, TimetableUpdate, TimetableUploadRequest
from classgrid.services.conflict_service import validate_timetable_conflicts
from classgrid.services.ingestion import ingest_timetable
from classgrid.services.schedule_query import day_name, get_current_period
from classgrid.services.timetable_store import (
    get_timetable_row,
    list_timetable_rows,
    load_active_records,
    load_roster,
    save_record,
    to_record,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _out(row: Timetable) -> TimetableOut:
    return TimetableOut.model_validate(to_record(row).model_dump())


def _conflict_payload(validation) -> list[dict]:
    return [conflict.model_dump(mode="json", by_alias=True) for conflict in validation.conflicts]


@router.post("/upload", status_code=status.HTTP_201_CREATED)
def upload_timetable(payload: TimetableUploadRequest, db: Session = Depends(get_db)) -> dict:
    settings = get_settings()
    teachers, subjects = load_roster(db)
    # Snapshot taken right before the write decision; validate-then-write is not atomic.
    active = load_active_records(db)

    result = ingest_timetable(payload.content, payload.valid_from, payload.valid_until, teachers, subjects, active)
    forced = False
    if not result.is_valid:
        if not (payload.force_upload and settings.allow_force_upload):
            logger.info(
                "Rejected timetable upload for %s: %d conflict(s)",
                result.record.class_id,
                len(result.validation.conflicts),
            )
            raise TimetableConflictError(_conflict_payload(result.validation), allow_force=settings.allow_force_upload)
        forced = True
        logger.warning(
            "Force-uploading timetable for %s despite %d conflict(s)",
            result.record.class_id,
            len(result.validation.conflicts),
        )

    row = save_record(db, result.record)
    response: dict = {
        "success": True,
        "message": "Timetable uploaded successfully",
        "timetableId": row.id,
        "data": {
            "classId": row.class_id,
            "branch": row.branch,
            "section": row.section,
            "semester": row.semester,
            "validFrom": row.valid_from.isoformat(),
            "validUntil": row.valid_until.isoformat(),
        },
        "mappingStats": result.mapping_stats(),
    }
    warnings = result.warnings()
    if warnings:
        response["warnings"] = warnings
    if forced:
        response["forced"] = True
        response["conflicts"] = _conflict_payload(result.validation)
    return response


@router.get("/", response_model=list[TimetableOut])
def list_timetables(
    branch: str | None = None,
    section: str | None = None,
    semester: int | None = None,
    class_id: str | None = Query(default=None, alias="classId"),
    is_active: bool | None = Query(default=None, alias="isActive"),
    db: Session = Depends(get_db),
) -> list[TimetableOut]:
    rows = list_timetable_rows(
        db,
        branch=branch,
        section=section,
        semester=semester,
        class_id=class_id,
        is_active=is_active,
    )
    return [_out(row) for row in rows]


@router.get("/{timetable_id}", response_model=TimetableOut)
def get_timetable(timetable_id: str, db: Session = Depends(get_db)) -> TimetableOut:
    return _out(get_timetable_row(db, timetable_id))


@router.patch("/{timetable_id}", response_model=TimetableOut)
def update_timetable(timetable_id: str, payload: TimetableUpdate, db: Session = Depends(get_db)) -> TimetableOut:
    row = get_timetable_row(db, timetable_id)
    data = payload.model_dump(exclude_unset=True)

    valid_from = data.get("valid_from") or row.valid_from
    valid_until = data.get("valid_until") or row.valid_until
    if valid_from >= valid_until:
        raise InvalidRequestError("validFrom must be before validUntil")

    candidate = to_record(row).model_copy(
        update={
            "valid_from": valid_from,
            "valid_until": valid_until,
            "is_active": data.get("is_active", row.is_active),
        }
    )
    if candidate.is_active:
        validation = validate_timetable_conflicts(candidate, load_active_records(db))
        if not validation.is_valid:
            raise TimetableConflictError(_conflict_payload(validation))

    row.valid_from = valid_from
    row.valid_until = valid_until
    row.is_active = candidate.is_active
    db.commit()
    db.refresh(row)
    return _out(row)


@router.delete("/{timetable_id}")
def delete_timetable(timetable_id: str, permanent: bool = False, db: Session = Depends(get_db)) -> dict:
    row = get_timetable_row(db, timetable_id)
    if permanent:
        db.delete(row)
        db.commit()
        logger.info("Permanently deleted timetable %s", timetable_id)
        return {"success": True, "message": "Timetable permanently deleted"}

    row.is_active = False
    db.commit()
    db.refresh(row)
    return {"success": True, "message": "Timetable deactivated", "data": _out(row).model_dump(mode="json", by_alias=True)}


@router.get("/{timetable_id}/current-period")
def current_period(
    timetable_id: str,
    time: str = Query(pattern=TIME_PATTERN.pattern),
    day: str | None = None,
    on: date | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
) -> dict:
    record = to_record(get_timetable_row(db, timetable_id))
    weekday = (day or day_name(on or date.today())).strip().lower()
    period = get_current_period(record, weekday, time)
    return {
        "day": weekday,
        "time": time,
        "period": period.model_dump(mode="json", by_alias=True) if period is not None else None,
    }

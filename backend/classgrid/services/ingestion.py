from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from classgrid.schemas.conflict import ValidationResult
from classgrid.schemas.roster import SubjectRosterEntry, TeacherRosterEntry, UnresolvedReferenceWarning
from classgrid.schemas.timetable import TimetableRecord
from classgrid.services.conflict_service import validate_timetable_conflicts
from classgrid.services.grid_parser import ParseWarning, parse_schedule_grid
from classgrid.services.identifier_resolver import resolve_identifiers

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    record: TimetableRecord
    validation: ValidationResult
    parse_warnings: list[ParseWarning] = field(default_factory=list)
    unresolved_teachers: list[str] = field(default_factory=list)
    unresolved_subjects: list[str] = field(default_factory=list)
    reference_warnings: list[UnresolvedReferenceWarning] = field(default_factory=list)
    roster_teachers: int = 0
    roster_subjects: int = 0

    @property
    def is_valid(self) -> bool:
        return self.validation.is_valid

    def mapping_stats(self) -> dict:
        return {
            "totalFaculties": self.roster_teachers,
            "totalSubjects": self.roster_subjects,
            "unmappedFacultiesCount": len(self.unresolved_teachers),
            "unmappedSubjectsCount": len(self.unresolved_subjects),
        }

    def warnings(self) -> dict:
        warnings: dict = {}
        if self.parse_warnings:
            warnings["parse"] = [item.as_dict() for item in self.parse_warnings]
        if self.unresolved_teachers:
            warnings["unmappedFaculties"] = {
                "message": "Some faculty identifiers could not be mapped to roster records",
                "facultyIds": self.unresolved_teachers,
            }
        if self.unresolved_subjects:
            warnings["unmappedSubjects"] = {
                "message": "Some subject codes could not be mapped to roster records",
                "subjectCodes": self.unresolved_subjects,
            }
        return warnings


def ingest_timetable(
    text: str,
    valid_from: date,
    valid_until: date,
    teachers: Iterable[TeacherRosterEntry],
    subjects: Iterable[SubjectRosterEntry],
    active_records: Iterable[TimetableRecord],
) -> IngestionResult:
    """Parse, resolve and validate one uploaded schedule.

    FormatError from the parser propagates and aborts the whole attempt. The
    caller decides whether to persist; this function performs no I/O.
    """
    teachers = list(teachers)
    subjects = list(subjects)

    parsed = parse_schedule_grid(text)
    resolved = resolve_identifiers(parsed.grid, teachers, subjects)
    record = TimetableRecord(
        **resolved.grid.model_dump(),
        valid_from=valid_from,
        valid_until=valid_until,
        is_active=True,
    )
    validation = validate_timetable_conflicts(record, active_records)

    logger.info(
        "Ingested timetable %s semester %d: %d day(s), %d conflict(s), %d unmapped teacher(s), %d unmapped subject(s)",
        record.class_id,
        record.semester,
        len(record.week_schedule),
        len(validation.conflicts),
        len(resolved.unresolved_teachers),
        len(resolved.unresolved_subjects),
    )
    return IngestionResult(
        record=record,
        validation=validation,
        parse_warnings=parsed.warnings,
        unresolved_teachers=resolved.unresolved_teachers,
        unresolved_subjects=resolved.unresolved_subjects,
        reference_warnings=resolved.warnings,
        roster_teachers=len(teachers),
        roster_subjects=len(subjects),
    )

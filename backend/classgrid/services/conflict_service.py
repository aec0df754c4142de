from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from classgrid.schemas.conflict import (
    ConflictOccurrence,
    InternalTeacherConflict,
    ValidationResult,
    ValidityOverlapConflict,
)
from classgrid.schemas.timetable import TimetableRecord, period_assignments


def windows_overlap(candidate: TimetableRecord, existing: TimetableRecord) -> bool:
    # Closed intervals: touching boundaries count as an overlap.
    return candidate.valid_from <= existing.valid_until and candidate.valid_until >= existing.valid_from


def same_scope(candidate: TimetableRecord, existing: TimetableRecord) -> bool:
    return (
        existing.class_id == candidate.class_id
        and existing.section == candidate.section
        and existing.semester == candidate.semester
    )


class ConflictService:
    """Checks a candidate timetable before it is persisted.

    Pure: no I/O and no side effects. Domain conflicts are returned in the
    ValidationResult, never raised.
    """

    def __init__(self, candidate: TimetableRecord, existing: Iterable[TimetableRecord]):
        self.candidate = candidate
        self.existing: List[TimetableRecord] = list(existing)

    def detect_validity_overlaps(self) -> List[ValidityOverlapConflict]:
        conflicts: List[ValidityOverlapConflict] = []
        for existing in self.existing:
            if not existing.is_active or not same_scope(self.candidate, existing):
                continue
            if self.candidate.id is not None and existing.id == self.candidate.id:
                continue
            if windows_overlap(self.candidate, existing):
                conflicts.append(
                    ValidityOverlapConflict(
                        message=(
                            f"Timetable overlaps with existing timetable for {existing.branch} "
                            f"{existing.section} - Semester {existing.semester}"
                        ),
                        existing_id=existing.id,
                        existing_class_id=existing.class_id,
                        existing_valid_from=existing.valid_from.isoformat(),
                        existing_valid_until=existing.valid_until.isoformat(),
                    )
                )
        return conflicts

    def detect_internal_teacher_conflicts(self) -> List[InternalTeacherConflict]:
        # Keyed on the literal time string: "09:00-09:50" and "09:00-10:40" never collide.
        bookings: Dict[Tuple[str, str, str], List[ConflictOccurrence]] = defaultdict(list)
        for day, periods in self.candidate.week_schedule.items():
            for period in periods:
                if not period.time:
                    continue
                for group, assignment in period_assignments(period):
                    if not assignment.teacher_id:
                        continue
                    bookings[(assignment.teacher_id, day, period.time)].append(
                        ConflictOccurrence(day=day, period=period.period, time=period.time, group=group)
                    )

        conflicts: List[InternalTeacherConflict] = []
        for (teacher_id, day, time), occurrences in bookings.items():
            if len(occurrences) > 1:
                conflicts.append(
                    InternalTeacherConflict(
                        message=f"Teacher {teacher_id} is scheduled at multiple places on {day} at {time}",
                        teacher_id=teacher_id,
                        day=day,
                        time=time,
                        occurrences=occurrences,
                    )
                )
        return conflicts

    def validate(self) -> ValidationResult:
        conflicts = [*self.detect_validity_overlaps(), *self.detect_internal_teacher_conflicts()]
        return ValidationResult(is_valid=not conflicts, conflicts=conflicts)


def validate_timetable_conflicts(candidate: TimetableRecord, existing: Iterable[TimetableRecord]) -> ValidationResult:
    return ConflictService(candidate, existing).validate()

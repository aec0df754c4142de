from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from classgrid.schemas.roster import SubjectRosterEntry, TeacherRosterEntry, UnresolvedReferenceWarning
from classgrid.schemas.timetable import GroupAssignment, SplitPeriod, WeeklyScheduleGrid

logger = logging.getLogger(__name__)


@dataclass
class ResolutionResult:
    grid: WeeklyScheduleGrid
    unresolved_teachers: list[str] = field(default_factory=list)
    unresolved_subjects: list[str] = field(default_factory=list)

    @property
    def warnings(self) -> list[UnresolvedReferenceWarning]:
        items = [
            UnresolvedReferenceWarning(kind="teacher", value=value, message=f"No roster match for teacher '{value}'")
            for value in self.unresolved_teachers
        ]
        items.extend(
            UnresolvedReferenceWarning(kind="subject", value=value, message=f"No roster match for subject '{value}'")
            for value in self.unresolved_subjects
        )
        return items


def _key(value: str) -> str:
    return value.strip().casefold()


def build_teacher_lookup(teachers: Iterable[TeacherRosterEntry]) -> dict[str, TeacherRosterEntry]:
    """Index teachers by display name, short code and canonical id.

    Indexing the canonical id makes resolution idempotent.
    """
    lookup: dict[str, TeacherRosterEntry] = {}
    for teacher in teachers:
        for candidate in (teacher.display_name, teacher.code, teacher.canonical_id):
            if candidate and candidate.strip():
                lookup.setdefault(_key(candidate), teacher)
    return lookup


def build_subject_lookup(subjects: Iterable[SubjectRosterEntry]) -> dict[str, SubjectRosterEntry]:
    subjects = list(subjects)
    lookup: dict[str, SubjectRosterEntry] = {}
    for subject in subjects:
        lookup.setdefault(_key(subject.code), subject)
    for subject in subjects:
        lookup.setdefault(_key(subject.name), subject)
    return lookup


class _Resolver:
    def __init__(self, teachers: dict[str, TeacherRosterEntry], subjects: dict[str, SubjectRosterEntry]) -> None:
        self.teachers = teachers
        self.subjects = subjects
        self.unresolved_teachers: dict[str, str] = {}
        self.unresolved_subjects: dict[str, str] = {}

    def resolve(self, assignment: GroupAssignment) -> GroupAssignment:
        updates: dict = {}
        if assignment.teacher_id and assignment.teacher_id.strip():
            teacher = self.teachers.get(_key(assignment.teacher_id))
            if teacher is None:
                self.unresolved_teachers.setdefault(_key(assignment.teacher_id), assignment.teacher_id)
            else:
                updates["teacher_id"] = teacher.canonical_id
                updates["teacher_name"] = teacher.display_name
        if assignment.subject_code and assignment.subject_code.strip():
            subject = self.subjects.get(_key(assignment.subject_code))
            if subject is None:
                self.unresolved_subjects.setdefault(_key(assignment.subject_code), assignment.subject_code)
            else:
                updates["subject_code"] = subject.code
                updates["subject_name"] = subject.name
        return assignment.model_copy(update=updates) if updates else assignment


def resolve_identifiers(
    grid: WeeklyScheduleGrid,
    teachers: Iterable[TeacherRosterEntry],
    subjects: Iterable[SubjectRosterEntry],
) -> ResolutionResult:
    """Replace raw teacher and subject text with canonical roster identifiers.

    Matching is case-insensitive on trimmed text. Values without a match are
    kept as written and collected (deduplicated case-insensitively, keeping
    the first-seen spelling) so the timetable stays usable but flagged for
    review. The input grid is not modified.
    """
    resolver = _Resolver(build_teacher_lookup(teachers), build_subject_lookup(subjects))

    week_schedule: dict[str, list] = {}
    for day, periods in grid.week_schedule.items():
        resolved = []
        for period in periods:
            if isinstance(period, SplitPeriod):
                resolved.append(
                    period.model_copy(
                        update={
                            "group1": resolver.resolve(period.group1),
                            "group2": resolver.resolve(period.group2),
                        }
                    )
                )
            else:
                resolved.append(resolver.resolve(period))
        week_schedule[day] = resolved

    result = ResolutionResult(
        grid=grid.model_copy(update={"week_schedule": week_schedule}),
        unresolved_teachers=list(resolver.unresolved_teachers.values()),
        unresolved_subjects=list(resolver.unresolved_subjects.values()),
    )
    for value in result.unresolved_teachers:
        logger.warning("Unmapped teacher in %s timetable: %s", grid.class_id, value)
    for value in result.unresolved_subjects:
        logger.warning("Unmapped subject in %s timetable: %s", grid.class_id, value)
    return result

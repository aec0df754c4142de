from typing import Annotated, Literal, Union

from pydantic import Field

from classgrid.schemas.timetable import CamelModel


class ConflictOccurrence(CamelModel):
    day: str
    period: int
    time: str
    group: int | None = None


class ValidityOverlapConflict(CamelModel):
    type: Literal["validity_overlap"] = "validity_overlap"
    message: str
    existing_id: str | None = None
    existing_class_id: str
    existing_valid_from: str
    existing_valid_until: str


class InternalTeacherConflict(CamelModel):
    type: Literal["internal_teacher_conflict"] = "internal_teacher_conflict"
    message: str
    teacher_id: str
    day: str
    time: str
    occurrences: list[ConflictOccurrence]


Conflict = Annotated[Union[ValidityOverlapConflict, InternalTeacherConflict], Field(discriminator="type")]


class ValidationResult(CamelModel):
    is_valid: bool
    conflicts: list[Conflict] = Field(default_factory=list)

from pydantic import Field

from classgrid.schemas.timetable import CamelModel, PeriodKind


class TimetableContext(CamelModel):
    timetable_id: str | None = None
    branch: str
    section: str
    semester: int
    class_id: str


class ScheduledPeriod(CamelModel):
    """One period of a derived per-actor day schedule, with split labs flattened."""

    period: int
    time: str | None = None
    kind: PeriodKind
    subject_code: str | None = None
    subject_name: str | None = None
    teacher_id: str | None = None
    teacher_name: str | None = None
    room: str | None = None
    is_group_split: bool = False
    group_number: int | None = None
    timetable: TimetableContext | None = None


class DaySchedule(CamelModel):
    date: str
    day: str
    count: int
    periods: list[ScheduledPeriod] = Field(default_factory=list)

from __future__ import annotations

import re
from datetime import date
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
TIME_RANGE_PATTERN = re.compile(r"(\d{1,2}):(\d{2})-(\d{1,2}):(\d{2})")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def parse_time_range(value: str | None) -> tuple[int, int] | None:
    """Return (start, end) minutes for a ``HH:MM-HH:MM`` string, or None when unparseable."""
    if not value:
        return None
    match = TIME_RANGE_PATTERN.search(value)
    if match is None:
        return None
    start_hour, start_minute, end_hour, end_minute = (int(part) for part in match.groups())
    return start_hour * 60 + start_minute, end_hour * 60 + end_minute


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PeriodKind(str, Enum):
    class_ = "class"
    lab = "lab"
    lunch = "lunch"
    library = "library"
    mentorship = "mentorship"
    seminar = "seminar"
    other = "other"


class GroupAssignment(CamelModel):
    subject_code: str | None = None
    subject_name: str | None = None
    teacher_id: str | None = None
    teacher_name: str | None = None
    room: str | None = None


class PlainPeriod(GroupAssignment):
    layout: Literal["plain"] = "plain"
    period: int = Field(ge=1)
    time: str | None = None
    kind: PeriodKind = PeriodKind.class_

    @computed_field
    @property
    def is_group_split(self) -> bool:
        return False


class SingleGroupPeriod(GroupAssignment):
    """A lab slot that only one of the two groups attends."""

    layout: Literal["single_group"] = "single_group"
    period: int = Field(ge=1)
    time: str | None = None
    kind: PeriodKind = PeriodKind.lab
    group_number: Literal[1, 2]

    @computed_field
    @property
    def is_group_split(self) -> bool:
        return False


class SplitPeriod(CamelModel):
    """Both groups meet at the same time with independent subject, teacher and room."""

    layout: Literal["split"] = "split"
    period: int = Field(ge=1)
    time: str | None = None
    kind: PeriodKind = PeriodKind.lab
    group1: GroupAssignment
    group2: GroupAssignment

    @computed_field
    @property
    def is_group_split(self) -> bool:
        return True

    def group(self, number: int) -> GroupAssignment | None:
        if number == 1:
            return self.group1
        if number == 2:
            return self.group2
        return None


Period = Annotated[Union[PlainPeriod, SingleGroupPeriod, SplitPeriod], Field(discriminator="layout")]


def period_assignments(period: PlainPeriod | SingleGroupPeriod | SplitPeriod) -> list[tuple[int | None, GroupAssignment]]:
    """Flatten a period into (group tag, assignment) pairs.

    Plain periods yield a single untagged entry, single-group labs a single
    entry tagged with their group, split labs one entry per group.
    """
    if isinstance(period, SplitPeriod):
        return [(1, period.group1), (2, period.group2)]
    if isinstance(period, SingleGroupPeriod):
        return [(period.group_number, period)]
    return [(None, period)]


class WeeklyScheduleGrid(CamelModel):
    branch: str = Field(min_length=1, max_length=50)
    section: str = Field(min_length=1, max_length=20)
    semester: int = Field(ge=1, le=20)
    class_id: str = Field(min_length=1, max_length=80)
    week_schedule: dict[str, list[Period]] = Field(default_factory=dict)

    @field_validator("week_schedule")
    @classmethod
    def validate_week_schedule(cls, value: dict[str, list]) -> dict[str, list]:
        invalid = [day for day in value if day not in WEEKDAYS]
        if invalid:
            raise ValueError(f"Invalid weekday key(s): {', '.join(invalid)}")
        for day, periods in value.items():
            seen: set[int] = set()
            for period in periods:
                if period.period in seen:
                    raise ValueError(f"Duplicate period number {period.period} on {day}")
                seen.add(period.period)
        return value

    def day(self, weekday: str) -> list:
        return self.week_schedule.get(weekday.strip().lower(), [])


class TimetableRecord(WeeklyScheduleGrid):
    id: str | None = None
    valid_from: date
    valid_until: date
    is_active: bool = True

    @model_validator(mode="after")
    def validate_window(self) -> "TimetableRecord":
        if self.valid_from > self.valid_until:
            raise ValueError("validFrom must not be after validUntil")
        return self

    def is_valid_on(self, target: date) -> bool:
        return self.is_active and self.valid_from <= target <= self.valid_until


class TimetableUploadRequest(CamelModel):
    content: str = Field(min_length=1)
    valid_from: date
    valid_until: date
    force_upload: bool = False

    @model_validator(mode="after")
    def validate_window(self) -> "TimetableUploadRequest":
        if self.valid_from >= self.valid_until:
            raise ValueError("validFrom must be before validUntil")
        return self


class TimetableUpdate(CamelModel):
    valid_from: date | None = None
    valid_until: date | None = None
    is_active: bool | None = None


class TimetableOut(TimetableRecord):
    id: str

"""Parse the tabular weekly-schedule text format into a WeeklyScheduleGrid.

Layout of the source text (comma separated, one row per line)::

    AIML-A 5th Semester, 09:00-09:50, 09:50-10:40, ...
    Monday,    AIML351, AIML353 (G1) / AIML351 (G2), LUNCH, ...
    Teacher,   VIPSF105, Alice/Bob, , ...
    Room,      301, Lab1/Lab2, , ...
    Tuesday,   ...

The header names the class and the time range of every period column. Each
weekday is a block of exactly three rows: subjects, teachers, rooms. Cells are
column-aligned with the header so column ``i`` is period number ``i``.
"""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field

from pydantic import ValidationError

from classgrid.core.exceptions import FormatError
from classgrid.schemas.timetable import (
    WEEKDAYS,
    GroupAssignment,
    PeriodKind,
    PlainPeriod,
    SingleGroupPeriod,
    SplitPeriod,
    WeeklyScheduleGrid,
)

logger = logging.getLogger(__name__)

MIN_LINES = 4
BLOCK_SIZE = 3

HEADER_PATTERN = re.compile(
    r"^\s*(?P<branch>[A-Za-z0-9]+)\s*-\s*(?P<section>[A-Za-z0-9]+)\s+(?P<semester>\d+)\s*(?:st|nd|rd|th)\s+semester\s*$",
    re.IGNORECASE,
)
SPLIT_PATTERN = re.compile(
    r"^\s*(?P<code_a>[^\s()/]+)\s*\(\s*G(?P<group_a>[12])\s*\)\s*/\s*(?P<code_b>[^\s()/]+)\s*\(\s*G(?P<group_b>[12])\s*\)\s*$",
    re.IGNORECASE,
)
SINGLE_GROUP_PATTERN = re.compile(r"^\s*(?P<code>[^\s()/]+)\s*\(\s*G(?P<group>[12])\s*\)\s*$", re.IGNORECASE)
GROUP_TAG_PATTERN = re.compile(r"\(\s*G[12]|G[12]\s*\)", re.IGNORECASE)

SPECIAL_KINDS: dict[str, PeriodKind] = {
    "LUNCH": PeriodKind.lunch,
    "BREAK": PeriodKind.lunch,
    "LIB": PeriodKind.library,
    "LIBRARY": PeriodKind.library,
    "MENTORSHIP": PeriodKind.mentorship,
    "SEMINAR": PeriodKind.seminar,
}


@dataclass
class ParseWarning:
    line: int
    message: str

    def as_dict(self) -> dict:
        return {"line": self.line, "message": self.message}


@dataclass
class ParseResult:
    grid: WeeklyScheduleGrid
    warnings: list[ParseWarning] = field(default_factory=list)


def _cell(row: list[str], index: int) -> str:
    if index < len(row):
        return row[index].strip()
    return ""


def _optional(value: str) -> str | None:
    return value or None


def _split_parts(value: str) -> tuple[str | None, str | None]:
    """Split a ``left/right`` teacher or room cell; a single part is reused for both groups."""
    parts = [part.strip() for part in value.split("/")]
    if len(parts) < 2:
        single = _optional(parts[0]) if parts else None
        return single, single
    return _optional(parts[0]), _optional(parts[1]) or _optional(parts[0])


def parse_header(row: list[str]) -> tuple[str, str, int, list[str]]:
    descriptor = _cell(row, 0)
    match = HEADER_PATTERN.match(descriptor)
    if match is None:
        raise FormatError(
            "Invalid header: expected '<BRANCH>-<SECTION> <N>th Semester' in the first column",
            details={"header": descriptor},
        )
    times = [cell.strip() for cell in row[1:]]
    return match["branch"].upper(), match["section"].upper(), int(match["semester"]), times


def classify_cell(period: int, time: str, subject: str, teacher: str, room: str) -> PlainPeriod | SingleGroupPeriod | SplitPeriod:
    """Build the period for one non-empty subject cell."""
    special = SPECIAL_KINDS.get(subject.upper())
    if special is not None:
        return PlainPeriod(period=period, time=time, kind=special, teacher_id=_optional(teacher), room=_optional(room))

    split = SPLIT_PATTERN.match(subject)
    if split is not None and split["group_a"] != split["group_b"]:
        teacher_a, teacher_b = _split_parts(teacher)
        room_a, room_b = _split_parts(room)
        left = GroupAssignment(subject_code=split["code_a"], teacher_id=teacher_a, room=room_a)
        right = GroupAssignment(subject_code=split["code_b"], teacher_id=teacher_b, room=room_b)
        # The (G1)/(G2) tag decides the group, not the position in the cell.
        if split["group_a"] == "1":
            group1, group2 = left, right
        else:
            group1, group2 = right, left
        return SplitPeriod(period=period, time=time, kind=PeriodKind.lab, group1=group1, group2=group2)

    single = SINGLE_GROUP_PATTERN.match(subject)
    if single is not None:
        return SingleGroupPeriod(
            period=period,
            time=time,
            kind=PeriodKind.lab,
            group_number=int(single["group"]),
            subject_code=single["code"],
            teacher_id=_optional(teacher),
            room=_optional(room),
        )

    return PlainPeriod(
        period=period,
        time=time,
        kind=PeriodKind.class_,
        subject_code=subject,
        teacher_id=_optional(teacher),
        room=_optional(room),
    )


def parse_schedule_grid(text: str) -> ParseResult:
    """Parse schedule text into a grid.

    Raises FormatError when the document has fewer than four lines or the
    header descriptor is malformed or out of range. Unknown weekdays,
    incomplete trailing blocks and malformed group tags are reported as
    warnings.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < MIN_LINES:
        raise FormatError(
            f"Schedule must contain a header and at least one day block ({MIN_LINES} lines), got {len(lines)}",
            details={"lineCount": len(lines)},
        )

    rows = list(csv.reader(lines, skipinitialspace=True))
    branch, section, semester, times = parse_header(rows[0])
    warnings: list[ParseWarning] = []
    week_schedule: dict[str, list] = {}

    for start in range(1, len(rows), BLOCK_SIZE):
        line_number = start + 1
        block = rows[start : start + BLOCK_SIZE]
        if len(block) < BLOCK_SIZE:
            warnings.append(ParseWarning(line_number, f"Incomplete day block of {len(block)} line(s) skipped"))
            continue

        subject_row, teacher_row, room_row = block
        day = _cell(subject_row, 0).lower()
        if day not in WEEKDAYS:
            warnings.append(ParseWarning(line_number, f"Unrecognized weekday '{_cell(subject_row, 0)}' skipped"))
            continue
        if day in week_schedule:
            warnings.append(ParseWarning(line_number, f"Duplicate block for {day} skipped"))
            continue

        periods = []
        for column, time in enumerate(times, start=1):
            subject = _cell(subject_row, column)
            if not subject or not time:
                continue
            period = classify_cell(column, time, subject, _cell(teacher_row, column), _cell(room_row, column))
            if isinstance(period, PlainPeriod) and period.kind == PeriodKind.class_ and GROUP_TAG_PATTERN.search(subject):
                warnings.append(
                    ParseWarning(line_number, f"Malformed group tag in '{subject}' on {day}, treated as a plain class")
                )
            periods.append(period)
        week_schedule[day] = periods

    for warning in warnings:
        logger.warning("Schedule parse warning at line %d: %s", warning.line, warning.message)

    try:
        grid = WeeklyScheduleGrid(
            branch=branch,
            section=section,
            semester=semester,
            class_id=f"{branch}-{section}",
            week_schedule=week_schedule,
        )
    except ValidationError as exc:
        raise FormatError(
            "Schedule header is out of range",
            details={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
        ) from exc
    return ParseResult(grid=grid, warnings=warnings)

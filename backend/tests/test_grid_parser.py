import pytest

from classgrid.core.exceptions import FormatError
from classgrid.schemas.timetable import PeriodKind, PlainPeriod, SingleGroupPeriod, SplitPeriod
from classgrid.services.grid_parser import parse_schedule_grid


def _periods_by_number(grid, day):
    return {period.period: period for period in grid.week_schedule[day]}


def test_parses_header_into_class_identity(schedule_text):
    grid = parse_schedule_grid(schedule_text).grid

    assert grid.branch == "AIML"
    assert grid.section == "A"
    assert grid.semester == 5
    assert grid.class_id == "AIML-A"
    assert list(grid.week_schedule) == ["monday", "tuesday"]


def test_emits_one_period_per_non_empty_subject_cell(schedule_text):
    grid = parse_schedule_grid(schedule_text).grid

    assert [period.period for period in grid.week_schedule["monday"]] == [1, 2, 3, 4]
    assert [period.period for period in grid.week_schedule["tuesday"]] == [1, 2, 3, 4, 5]
    assert grid.week_schedule["monday"][0].time == "09:00-09:50"


def test_plain_class_keeps_raw_cells(schedule_text):
    period = _periods_by_number(parse_schedule_grid(schedule_text).grid, "monday")[1]

    assert isinstance(period, PlainPeriod)
    assert period.kind == PeriodKind.class_
    assert period.subject_code == "AIML351"
    assert period.teacher_id == "VIPSF105"
    assert period.room == "301"
    assert period.is_group_split is False


def test_special_periods_are_classified(schedule_text):
    grid = parse_schedule_grid(schedule_text).grid
    monday = _periods_by_number(grid, "monday")
    tuesday = _periods_by_number(grid, "tuesday")

    assert monday[3].kind == PeriodKind.lunch
    assert monday[3].subject_code is None
    assert tuesday[2].kind == PeriodKind.library
    assert tuesday[3].kind == PeriodKind.mentorship
    assert tuesday[3].teacher_id == "VIPSF105"
    assert tuesday[5].kind == PeriodKind.seminar
    assert tuesday[5].room == "Hall"


def test_split_lab_groups_follow_the_tag_not_the_position(schedule_text):
    grid = parse_schedule_grid(schedule_text).grid
    forward = _periods_by_number(grid, "monday")[2]
    reversed_ = _periods_by_number(grid, "tuesday")[4]

    assert isinstance(forward, SplitPeriod)
    assert isinstance(reversed_, SplitPeriod)
    assert forward.group1.subject_code == "AIML353"
    assert forward.group1.teacher_id == "Alice"
    assert forward.group1.room == "Lab1"
    assert forward.group2.subject_code == "AIML351"
    assert forward.group2.teacher_id == "Bob"
    assert forward.group2.room == "Lab2"
    assert reversed_.group1 == forward.group1
    assert reversed_.group2 == forward.group2
    assert forward.is_group_split is True


def test_single_group_lab(schedule_text):
    period = _periods_by_number(parse_schedule_grid(schedule_text).grid, "tuesday")[1]

    assert isinstance(period, SingleGroupPeriod)
    assert period.kind == PeriodKind.lab
    assert period.group_number == 2
    assert period.subject_code == "AIML305"
    assert period.teacher_id == "Carol"


def test_single_teacher_and_room_are_reused_for_both_groups():
    text = "\n".join(
        [
            "CSE-B 3rd Semester,09:00-09:50",
            "Wednesday,CS301 (G2)/CS302(G1)",
            "Teacher,Dana",
            "Room,Lab9",
        ]
    )
    period = parse_schedule_grid(text).grid.week_schedule["wednesday"][0]

    assert isinstance(period, SplitPeriod)
    assert period.group1.subject_code == "CS302"
    assert period.group2.subject_code == "CS301"
    assert period.group1.teacher_id == period.group2.teacher_id == "Dana"
    assert period.group1.room == period.group2.room == "Lab9"


def test_malformed_group_tag_degrades_to_plain_class():
    text = "\n".join(
        [
            "CSE-B 3rd Semester,09:00-09:50",
            "Friday,CS301 (G1 / CS302 (G2)",
            "Teacher,Dana/Eve",
            "Room,Lab9",
        ]
    )
    result = parse_schedule_grid(text)
    period = result.grid.week_schedule["friday"][0]

    assert isinstance(period, PlainPeriod)
    assert period.kind == PeriodKind.class_
    assert period.subject_code == "CS301 (G1 / CS302 (G2)"
    assert period.teacher_id == "Dana/Eve"
    assert any("Malformed group tag" in warning.message for warning in result.warnings)


def test_header_and_weekday_are_case_insensitive():
    text = "\n".join(
        [
            "aiml-b 2nd SEMESTER,09:00-09:50,09:50-10:40",
            "MONDAY,AIML201,",
            "Teacher,Frank,",
            "Room,201,",
        ]
    )
    grid = parse_schedule_grid(text).grid

    assert grid.class_id == "AIML-B"
    assert grid.semester == 2
    assert [period.period for period in grid.week_schedule["monday"]] == [1]


def test_unknown_weekday_is_skipped_with_warning():
    text = "\n".join(
        [
            "CSE-B 3rd Semester,09:00-09:50",
            "Funday,CS301",
            "Teacher,Dana",
            "Room,Lab9",
            "Thursday,CS302",
            "Teacher,Eve",
            "Room,101",
        ]
    )
    result = parse_schedule_grid(text)

    assert list(result.grid.week_schedule) == ["thursday"]
    assert len(result.warnings) == 1
    assert "Funday" in result.warnings[0].message


def test_slot_without_time_is_skipped():
    text = "\n".join(
        [
            "CSE-B 3rd Semester,09:00-09:50,,10:40-11:30",
            "Monday,CS301,CS302,CS303",
            "Teacher,Dana,Eve,Dana",
            "Room,101,102,103",
        ]
    )
    periods = parse_schedule_grid(text).grid.week_schedule["monday"]

    assert [period.period for period in periods] == [1, 3]


def test_too_few_lines_is_a_format_error():
    with pytest.raises(FormatError) as exc_info:
        parse_schedule_grid("AIML-A 5th Semester,09:00-09:50\nMonday,AIML351\nTeacher,X\n")
    assert exc_info.value.status_code == 400


def test_malformed_header_is_a_format_error(schedule_text):
    broken = schedule_text.replace("AIML-A 5th Semester", "AIML A Fifth Semester")
    with pytest.raises(FormatError):
        parse_schedule_grid(broken)


@pytest.mark.parametrize(
    "header",
    [
        "AIML-A 0th Semester",
        "AIML-A 21st Semester",
        "AIML-ABCDEFGHIJKLMNOPQRSTUVWXYZ 5th Semester",
    ],
)
def test_header_outside_schema_bounds_is_a_format_error(header):
    text = "\n".join([f"{header},09:00-09:50", "Monday,X1", "Teacher,T", "Room,1"])

    with pytest.raises(FormatError) as exc_info:
        parse_schedule_grid(text)
    assert exc_info.value.status_code == 400
    assert exc_info.value.details["errors"]

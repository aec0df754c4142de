import pytest

from classgrid.schemas.roster import SubjectRosterEntry, TeacherRosterEntry
from classgrid.services.grid_parser import parse_schedule_grid
from classgrid.services.identifier_resolver import resolve_identifiers


@pytest.fixture
def teachers():
    return [
        TeacherRosterEntry(canonical_id="f-vips105", display_name="Vikram Singh", code="VIPSF105"),
        TeacherRosterEntry(canonical_id="f-alice", display_name="Alice", code="VIPSF201"),
        TeacherRosterEntry(canonical_id="f-bob", display_name="Bob", code="VIPSF202"),
    ]


@pytest.fixture
def subjects():
    return [
        SubjectRosterEntry(code="AIML351", name="Machine Learning"),
        SubjectRosterEntry(code="AIML353", name="Deep Learning"),
    ]


def test_resolves_codes_and_names_to_canonical_ids(schedule_text, teachers, subjects):
    grid = parse_schedule_grid(schedule_text).grid
    result = resolve_identifiers(grid, teachers, subjects)

    monday = {period.period: period for period in result.grid.week_schedule["monday"]}
    assert monday[1].teacher_id == "f-vips105"
    assert monday[1].teacher_name == "Vikram Singh"
    assert monday[1].subject_code == "AIML351"
    assert monday[1].subject_name == "Machine Learning"

    split = monday[2]
    assert split.group1.teacher_id == "f-alice"
    assert split.group1.subject_name == "Deep Learning"
    assert split.group2.teacher_id == "f-bob"
    assert split.group2.subject_name == "Machine Learning"


def test_unmatched_values_are_kept_and_reported_once(schedule_text, teachers, subjects):
    grid = parse_schedule_grid(schedule_text).grid
    result = resolve_identifiers(grid, teachers, subjects)

    monday = {period.period: period for period in result.grid.week_schedule["monday"]}
    assert monday[4].teacher_id == "Carol"
    assert monday[4].teacher_name is None
    assert monday[4].subject_code == "AIML305"
    assert result.unresolved_teachers == ["Carol"]
    assert result.unresolved_subjects == ["AIML305"]
    assert [(warning.kind, warning.value) for warning in result.warnings] == [
        ("teacher", "Carol"),
        ("subject", "AIML305"),
    ]


def test_matching_ignores_case_and_surrounding_whitespace(teachers, subjects):
    text = "\n".join(
        [
            "AIML-A 5th Semester,09:00-09:50,09:50-10:40",
            "Monday,  deep learning ,aiml351",
            "Teacher, vipsf201 ,  vikram singh",
            "Room,301,302",
        ]
    )
    grid = parse_schedule_grid(text).grid
    result = resolve_identifiers(grid, teachers, subjects)
    first, second = result.grid.week_schedule["monday"]

    assert (first.subject_code, first.teacher_id) == ("AIML353", "f-alice")
    assert (second.subject_code, second.teacher_id) == ("AIML351", "f-vips105")
    assert result.unresolved_teachers == []
    assert result.unresolved_subjects == []


def test_resolution_is_idempotent(schedule_text, teachers, subjects):
    grid = parse_schedule_grid(schedule_text).grid
    once = resolve_identifiers(grid, teachers, subjects)
    twice = resolve_identifiers(once.grid, teachers, subjects)

    assert twice.grid == once.grid
    assert twice.unresolved_teachers == ["Carol"]


def test_input_grid_is_not_modified(schedule_text, teachers, subjects):
    grid = parse_schedule_grid(schedule_text).grid
    before = grid.model_dump()

    resolve_identifiers(grid, teachers, subjects)

    assert grid.model_dump() == before


def test_special_periods_resolve_teachers(schedule_text, teachers, subjects):
    grid = parse_schedule_grid(schedule_text).grid
    result = resolve_identifiers(grid, teachers, subjects)

    mentorship = {period.period: period for period in result.grid.week_schedule["tuesday"]}[3]
    assert mentorship.teacher_id == "f-vips105"


def test_unmatched_values_differing_only_in_case_are_reported_once(teachers, subjects):
    text = "\n".join(
        [
            "AIML-A 5th Semester,09:00-09:50,09:50-10:40",
            "Monday,aiml305,AIML305",
            "Teacher,Carol,carol",
            "Room,301,302",
        ]
    )
    result = resolve_identifiers(parse_schedule_grid(text).grid, teachers, subjects)

    assert result.unresolved_teachers == ["Carol"]
    assert result.unresolved_subjects == ["aiml305"]
    assert [period.teacher_id for period in result.grid.week_schedule["monday"]] == ["Carol", "carol"]

import pytest

from classgrid.models.student import Student


@pytest.fixture
def uploaded(client, roster, schedule_text):
    response = client.post(
        "/api/timetables/upload",
        json={"content": schedule_text, "validFrom": "2026-07-01", "validUntil": "2026-12-31"},
    )
    assert response.status_code == 201
    return response.json()


def test_teacher_day_schedule(client, uploaded):
    response = client.get("/api/schedules/teacher", params={"teacherId": "f-alice", "date": "2026-10-19"})

    assert response.status_code == 200
    body = response.json()
    assert body["day"] == "monday"
    assert body["count"] == 1
    period = body["periods"][0]
    assert period["subjectName"] == "Deep Learning"
    assert period["groupNumber"] == 1
    assert period["timetable"]["timetableId"] == uploaded["timetableId"]


def test_teacher_schedule_outside_validity_is_empty(client, uploaded):
    body = client.get("/api/schedules/teacher", params={"teacherId": "f-alice", "date": "2027-01-04"}).json()
    assert body["count"] == 0
    assert body["periods"] == []


def test_teacher_upcoming_periods(client, uploaded):
    body = client.get(
        "/api/schedules/teacher/upcoming",
        params={"teacherId": "f-alice", "time": "10:00", "date": "2026-10-20"},
    ).json()

    assert [period["period"] for period in body["periods"]] == [4]


def test_student_schedule_uses_stored_group(client, db_session, uploaded):
    db_session.add_all(
        [
            Student(id="s-grouped", name="Priya", enrollment_no=1002, class_id="AIML-A", section="A", group_number=2),
            Student(id="s-ungrouped", name="Rahul", enrollment_no=1003, class_id="AIML-A", section="A"),
        ]
    )
    db_session.commit()

    grouped = client.get("/api/schedules/student/s-grouped", params={"date": "2026-10-19"}).json()
    assert [period["period"] for period in grouped["periods"]] == [1, 2, 3, 4]
    assert grouped["periods"][1]["teacherId"] == "f-bob"

    ungrouped = client.get("/api/schedules/student/s-ungrouped", params={"date": "2026-10-19"}).json()
    assert [period["period"] for period in ungrouped["periods"]] == [1, 3, 4]


def test_unknown_student_is_not_found(client):
    response = client.get("/api/schedules/student/nobody")
    assert response.status_code == 404

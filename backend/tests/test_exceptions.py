from classgrid.core.exceptions import (
    AppError,
    FormatError,
    ResourceNotFoundError,
    SessionAuthorizationError,
    TimetableConflictError,
)


def test_format_error_structure():
    err = FormatError(message="Invalid format", details={"line": 1})
    assert err.status_code == 400
    assert err.message == "Invalid format"
    assert err.details == {"line": 1}
    assert isinstance(err, AppError)


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}


def test_not_found_message_names_the_resource():
    err = ResourceNotFoundError("Timetable", "t-1")
    assert err.status_code == 404
    assert err.message == "Timetable with id t-1 not found"


def test_authorization_error_reports_assigned_teacher():
    err = SessionAuthorizationError("f-alice")
    assert err.status_code == 403
    assert err.details == {"assignedTeacher": "f-alice"}


def test_conflict_error_mentions_force_upload_only_when_allowed():
    assert "warning" not in TimetableConflictError([]).details
    forced = TimetableConflictError([{"type": "validity_overlap"}], allow_force=True)
    assert forced.status_code == 409
    assert "forceUpload" in forced.details["warning"]


def test_app_error_is_rendered_as_json(client):
    response = client.get("/api/timetables/missing-id")
    assert response.status_code == 404
    assert response.json() == {"message": "Timetable with id missing-id not found", "details": {}}

from classgrid.models.attendance_session import AttendanceSession, SessionStatus  # noqa: F401
from classgrid.models.faculty import Faculty  # noqa: F401
from classgrid.models.student import Student  # noqa: F401
from classgrid.models.subject import Subject  # noqa: F401
from classgrid.models.timetable import Timetable  # noqa: F401

class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class FormatError(AppError):
    """Raised when an uploaded schedule text is structurally unusable.

    Only whole-document problems raise this; per-cell anomalies degrade
    gracefully and are reported as warnings instead.
    """
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class InvalidRequestError(AppError):
    """Raised when a request is well-formed but cannot be served as asked."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class SessionAuthorizationError(AppError):
    """Raised when a teacher tries to run a session assigned to someone else."""
    def __init__(self, assigned_teacher_id: str | None):
        super().__init__(
            "You are not authorized to conduct this session",
            status_code=403,
            details={"assignedTeacher": assigned_teacher_id},
        )

class SessionConflictError(AppError):
    """Raised when an attendance session with the same identity already exists."""
    def __init__(self, session_id: str):
        super().__init__("Session already exists", status_code=409, details={"sessionId": session_id})

class TimetableConflictError(AppError):
    """Raised by handlers that refuse to persist a timetable with conflicts."""
    def __init__(self, conflicts: list[dict], allow_force: bool = False):
        details: dict = {"conflicts": conflicts}
        if allow_force:
            details["warning"] = "You can force upload by setting forceUpload=true"
        super().__init__("Timetable has conflicts", status_code=409, details=details)

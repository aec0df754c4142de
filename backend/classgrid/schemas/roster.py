from typing import Literal

from pydantic import Field

from classgrid.schemas.timetable import CamelModel


class TeacherRosterEntry(CamelModel):
    canonical_id: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    code: str | None = None


class SubjectRosterEntry(CamelModel):
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)


class UnresolvedReferenceWarning(CamelModel):
    """A teacher or subject value that matched nothing in the roster. Accumulated, never raised."""

    kind: Literal["teacher", "subject"]
    value: str
    message: str

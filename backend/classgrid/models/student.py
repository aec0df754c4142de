import uuid

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from classgrid.db.base import Base


class Student(Base):
    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    enrollment_no: Mapped[int | None] = mapped_column(Integer, nullable=True)
    class_id: Mapped[str] = mapped_column(String(80), index=True, nullable=False)
    section: Mapped[str] = mapped_column(String(20), nullable=False)
    group_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    group_assignment: Mapped[str | None] = mapped_column(String(30), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

"""SQLAlchemy models for the local course store."""

from __future__ import annotations

import uuid
from datetime import date, datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from typing import Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Course(Base):
    """Course model - the slot list's owner and its version counter."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    badge: Mapped[str | None] = mapped_column(String(50), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    slots: Mapped[list[ClassSlot]] = relationship(
        "ClassSlot",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="ClassSlot.position",
    )
    enrollments: Mapped[list[Enrollment]] = relationship(
        "Enrollment", back_populates="course", cascade="all, delete-orphan"
    )

    def __init__(
        self,
        title: str,
        id: str | None = None,
        badge: str | None = None,
        start_date: date | None = None,
        version: int = 1,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.title = title
        self.badge = badge
        self.start_date = start_date
        self.version = version

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, title={self.title!r}, version={self.version!r})>"


class ClassSlot(Base):
    """Class slot model - one weekly session of a course.

    ``id`` is assigned once and survives reorders; ``position`` is the
    slot's 0-based index in the course.
    """

    __tablename__ = "class_slots"
    __table_args__ = (
        UniqueConstraint("course_id", "position", name="uq_class_slots_position"),
        UniqueConstraint("course_id", "day_label", "time_label", name="uq_class_slots_day_time"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    course_id: Mapped[str] = mapped_column(String(36), ForeignKey("courses.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    day_label: Mapped[str] = mapped_column(String(20), nullable=False)
    time_label: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    join_link: Mapped[str | None] = mapped_column(String(500), nullable=True)

    course: Mapped[Course] = relationship("Course", back_populates="slots")

    def __init__(
        self,
        course_id: str,
        position: int,
        day_label: str,
        time_label: str,
        id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        join_link: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.course_id = course_id
        self.position = position
        self.day_label = day_label
        self.time_label = time_label
        self.start_date = start_date
        self.end_date = end_date
        self.join_link = join_link

    def __repr__(self) -> str:
        return (
            f"<ClassSlot(id={self.id!r}, position={self.position!r}, "
            f"day={self.day_label!r}, time={self.time_label!r})>"
        )


class Enrollment(Base):
    """Enrollment model - a student's place in a course.

    ``class_assignment`` is the 1-based display number of the slot.
    """

    __tablename__ = "enrollments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    course_id: Mapped[str] = mapped_column(String(36), ForeignKey("courses.id"), nullable=False)
    student_name: Mapped[str] = mapped_column(String(255), nullable=False)
    class_assignment: Mapped[int | None] = mapped_column(Integer, nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    course: Mapped[Course] = relationship("Course", back_populates="enrollments")

    def __init__(
        self,
        course_id: str,
        student_name: str,
        id: str | None = None,
        class_assignment: int | None = None,
        enabled: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.course_id = course_id
        self.student_name = student_name
        self.class_assignment = class_assignment
        self.enabled = enabled

    def __repr__(self) -> str:
        return (
            f"<Enrollment(id={self.id!r}, course_id={self.course_id!r}, "
            f"class_assignment={self.class_assignment!r})>"
        )

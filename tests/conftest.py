"""Shared pytest fixtures and configuration."""

from collections.abc import Sequence

import pytest

from classslots.schedule import CourseRecord, EnrollmentRecord, ScheduleOptions, Slot
from classslots.state_store import CourseNotFoundError, StaleVersionError


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


class FakeRepository:
    """In-memory course repository that records every write."""

    def __init__(self, options: ScheduleOptions | None = None) -> None:
        self.courses: dict[str, CourseRecord] = {}
        self.options = options or ScheduleOptions()
        self.writes: list[tuple[str, list[Slot]]] = []
        self.fail_reads: Exception | None = None
        self.fail_writes: Exception | None = None
        self.closed = False

    def add(
        self,
        course_id: str,
        slots: Sequence[tuple[str, str]] = (),
        assignments: Sequence[int | None] = (),
        badge: str | None = None,
        start_date=None,
    ) -> CourseRecord:
        """Store a course with (day_label, time_label) slots and enrolled display numbers."""
        record = CourseRecord(
            course_id=course_id,
            document_id=f"doc-{course_id}",
            slots=[Slot(day_label=day, time_label=time) for day, time in slots],
            enrollments=[
                EnrollmentRecord(student_id=f"s{i}", class_assignment=number)
                for i, number in enumerate(assignments)
            ],
            version="1",
            badge=badge,
            start_date=start_date,
        )
        self.courses[course_id] = record
        return record

    def load_course(self, course_id: str) -> CourseRecord:
        if self.fail_reads is not None:
            raise self.fail_reads
        if course_id not in self.courses:
            raise CourseNotFoundError(f"Course with id '{course_id}' not found")
        stored = self.courses[course_id]
        return CourseRecord(
            course_id=stored.course_id,
            document_id=stored.document_id,
            slots=list(stored.slots),
            enrollments=list(stored.enrollments),
            version=stored.version,
            badge=stored.badge,
            start_date=stored.start_date,
        )

    def load_schedule_options(self) -> ScheduleOptions:
        return self.options

    def replace_slots(self, course: CourseRecord, slots: Sequence[Slot]) -> None:
        if self.fail_writes is not None:
            raise self.fail_writes
        stored = self.courses[course.course_id]
        if stored.version != course.version:
            raise StaleVersionError(f"Course '{course.course_id}' changed")
        stored.slots = list(slots)
        stored.version = str(int(stored.version or "0") + 1)
        self.writes.append((course.course_id, list(slots)))

    def close(self) -> None:
        self.closed = True


# Shared fixtures


@pytest.fixture
def repository() -> FakeRepository:
    """Empty in-memory course repository."""
    return FakeRepository()

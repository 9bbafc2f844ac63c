"""State Store - local SQLite storage for courses, slots and enrollments."""

from classslots.state_store.exceptions import (
    CourseNotFoundError,
    EnrollmentNotFoundError,
    StaleVersionError,
    StateStoreError,
)
from classslots.state_store.models import ClassSlot, Course, Enrollment
from classslots.state_store.store import StateStore

__all__ = [
    "ClassSlot",
    "Course",
    "CourseNotFoundError",
    "Enrollment",
    "EnrollmentNotFoundError",
    "StaleVersionError",
    "StateStore",
    "StateStoreError",
]

"""Slots - slot storage, per-course locking and the mutation service."""

from classslots.slots.exceptions import (
    ConflictError,
    CourseNotFoundError,
    PersistenceError,
    SlotServiceError,
    UpstreamError,
    UpstreamTimeoutError,
)
from classslots.slots.locks import CourseLocks
from classslots.slots.models import CourseAvailability, SlotView
from classslots.slots.service import SlotMutationService
from classslots.slots.store import CourseRepository, SlotStore, count_enrollments

__all__ = [
    "ConflictError",
    "CourseAvailability",
    "CourseLocks",
    "CourseNotFoundError",
    "CourseRepository",
    "PersistenceError",
    "SlotMutationService",
    "SlotServiceError",
    "SlotStore",
    "SlotView",
    "UpstreamError",
    "UpstreamTimeoutError",
    "count_enrollments",
]

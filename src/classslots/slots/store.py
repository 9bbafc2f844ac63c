"""SlotStore - slot list and enrollment counts of a course."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from classslots.schedule.models import CourseRecord, ScheduleOptions, Slot

logger = logging.getLogger(__name__)


class CourseRepository(Protocol):
    """Interface of the store that owns course records."""

    def load_course(self, course_id: str) -> CourseRecord:
        """Read a course with its slots and enabled enrollments."""
        ...

    def load_schedule_options(self) -> ScheduleOptions:
        """Read the offerable weekdays and times."""
        ...

    def replace_slots(self, course: CourseRecord, slots: Sequence[Slot]) -> None:
        """Replace the whole slot list of a course read earlier."""
        ...


def count_enrollments(course: CourseRecord) -> dict[int, int]:
    """Tally enabled enrollments per display number.

    Missing or out-of-range assignments are skipped.
    """
    counts: dict[int, int] = {}
    slot_count = len(course.slots)
    skipped = 0
    for enrollment in course.enrollments:
        if not enrollment.enabled:
            continue
        number = enrollment.class_assignment
        if number is None or not 1 <= number <= slot_count:
            skipped += 1
            continue
        counts[number] = counts.get(number, 0) + 1
    if skipped:
        logger.debug(
            "Course %s: %d enrollments without a valid class assignment",
            course.course_id,
            skipped,
        )
    return counts


class SlotStore:
    """Reads and replaces a course's ordered slot list.

    Holds no state between calls; every method reads the repository afresh.
    Repository errors propagate unchanged.
    """

    def __init__(self, repository: CourseRepository) -> None:
        self.repository = repository

    def snapshot(self, course_id: str) -> CourseRecord:
        """Read the course once; slots and counts derive from the same read."""
        return self.repository.load_course(course_id)

    def list_slots(self, course_id: str) -> list[Slot]:
        """Current slots in stored order. Position is the slot's index."""
        return list(self.snapshot(course_id).slots)

    def count_enrollments_per_slot(self, course_id: str) -> dict[int, int]:
        """Enabled enrollments per display number."""
        return count_enrollments(self.snapshot(course_id))

    def schedule_options(self) -> ScheduleOptions:
        return self.repository.load_schedule_options()

    def persist(self, course: CourseRecord, new_slots: Sequence[Slot]) -> None:
        """Replace the slot list as a whole.

        ``course`` must be the record the new list was derived from; its
        version token lets the repository refuse a concurrent overwrite.
        """
        self.repository.replace_slots(course, list(new_slots))

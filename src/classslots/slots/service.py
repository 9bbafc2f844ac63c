"""SlotMutationService - list, add, reorder and delete class slots."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING

from classslots import content_store, state_store
from classslots.capacity import (
    active_slot_index,
    aggregate_course_fullness,
    available_seats,
    choose_badge,
    project,
)
from classslots.config import Settings
from classslots.schedule.exceptions import (
    CourseFullError,
    MissingFieldError,
    SlotFullError,
    SlotNotFoundError,
    UnknownWeekdayError,
)
from classslots.schedule.models import Slot, strip_time_prefix, with_time_prefix
from classslots.schedule.validator import (
    affected_indices,
    check_index_in_range,
    check_known_time,
    check_known_weekday,
    check_no_duplicate,
    check_no_enrolled_students_affected,
    check_no_overlap,
    check_valid_permutation,
)
from classslots.slots.exceptions import (
    ConflictError,
    CourseNotFoundError,
    PersistenceError,
    UpstreamError,
    UpstreamTimeoutError,
)
from classslots.slots.locks import CourseLocks
from classslots.slots.models import CourseAvailability, SlotView
from classslots.slots.store import count_enrollments

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from classslots.schedule.models import CourseRecord, ScheduleOptions
    from classslots.slots.store import SlotStore

logger = logging.getLogger(__name__)


class SlotMutationService:
    """Request/response operations on a course's class slots.

    Every mutation runs under the course's lock: read, validate, then write
    the whole list. A failed check never reaches the store. This is the only
    place where store errors become service errors.
    """

    def __init__(
        self,
        store: SlotStore,
        settings: Settings | None = None,
        locks: CourseLocks | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: SlotStore over the course repository.
            settings: Capacity, duration and timeout settings.
            locks: Lock registry; share one per process.
            today: Clock for badge computation (defaults to the region's date).
        """
        self.store = store
        self.settings = settings or Settings()
        self.locks = locks or CourseLocks()
        self._today = today or self._region_today

    def _region_today(self) -> date:
        region = timezone(timedelta(hours=self.settings.utc_offset_hours))
        return datetime.now(region).date()

    @contextmanager
    def _upstream(self, course_id: str, writing: bool = False) -> Iterator[None]:
        """Translate repository errors into service errors."""
        try:
            yield
        except (content_store.CourseNotFoundError, state_store.CourseNotFoundError) as e:
            raise CourseNotFoundError(f"Course '{course_id}' not found") from e
        except (content_store.StaleCourseError, state_store.StaleVersionError) as e:
            logger.warning("Concurrent change on course %s: %s", course_id, e)
            raise ConflictError(
                f"Course '{course_id}' was changed by someone else, reload and try again"
            ) from e
        except content_store.ContentStoreTimeoutError as e:
            logger.error("Timeout on course %s (write=%s): %s", course_id, writing, e)
            message = f"Content store timed out for course '{course_id}'"
            if writing:
                message += "; reload before retrying, the change may have been saved"
            raise UpstreamTimeoutError(message) from e
        except (content_store.ContentStoreError, state_store.StateStoreError) as e:
            logger.error("Store failure on course %s (write=%s): %s", course_id, writing, e)
            if writing:
                raise PersistenceError(f"Could not save classes of course '{course_id}'") from e
            raise UpstreamError(f"Could not read course '{course_id}'") from e

    def _read(self, course_id: str) -> CourseRecord:
        with self._upstream(course_id):
            return self.store.snapshot(course_id)

    def _persist(self, course: CourseRecord, new_slots: Sequence[Slot]) -> None:
        with self._upstream(course.course_id, writing=True):
            self.store.persist(course, new_slots)

    def _project(self, course: CourseRecord) -> list[SlotView]:
        counts = count_enrollments(course)
        return [
            SlotView.build(
                index,
                slot,
                project(
                    counts.get(index + 1, 0),
                    self.settings.max_capacity,
                    self.settings.nearly_full_ratio,
                ),
                self.settings.session_minutes,
            )
            for index, slot in enumerate(course.slots)
        ]

    # --- Reads ---

    def list_slots(self, course_id: str) -> list[SlotView]:
        """Slots of a course with their capacity state. Never mutates."""
        return self._project(self._read(course_id))

    def schedule_options(self) -> ScheduleOptions:
        """Weekdays and times that can be offered."""
        with self._upstream("*"):
            return self.store.schedule_options()

    def availability(self, course_id: str) -> CourseAvailability:
        """Course-level fullness, active slot and badge."""
        course = self._read(course_id)
        views = self._project(course)
        states = [view.capacity for view in views]
        is_full = aggregate_course_fullness(states)
        active = active_slot_index(states)
        seats = available_seats(states)
        return CourseAvailability(
            course_id=course.course_id,
            is_full=is_full,
            active_display_number=active + 1 if active is not None else None,
            available_seats=seats,
            badge=choose_badge(
                is_full,
                course.badge,
                course.start_date,
                self._today(),
                seats,
                self.settings.few_seats_threshold,
            ),
            slots=views,
        )

    def admit(self, course_id: str, display_number: int | None = None) -> SlotView:
        """Slot a new student may be assigned to.

        Args:
            course_id: The course.
            display_number: Requested slot; None picks the active slot.

        Raises:
            SlotNotFoundError: If the requested slot does not exist.
            SlotFullError: If the requested slot is full.
            CourseFullError: If no slot is requested and none has seats.
        """
        views = self.list_slots(course_id)
        if display_number is None:
            active = active_slot_index([view.capacity for view in views])
            if active is None:
                raise CourseFullError(f"Course '{course_id}' has no class with free seats")
            return views[active]

        if not 1 <= display_number <= len(views):
            raise SlotNotFoundError(
                f"Class {display_number} does not exist (course has {len(views)})"
            )
        view = views[display_number - 1]
        if view.is_full:
            raise SlotFullError(
                f"Class {display_number} is full ({view.current_enrollment}/{view.max_capacity})"
            )
        return view

    # --- Mutations ---

    def add_slot(self, course_id: str, day_of_week: str, start_time: str) -> list[SlotView]:
        """Append a slot at the end of the course's list.

        Args:
            course_id: The course.
            day_of_week: UI key ("monday") or stored label.
            start_time: "HH:MM" with or without regional prefix.

        Returns:
            The course's slots after the change.

        Raises:
            MissingFieldError, UnknownWeekdayError, UnknownTimeSlotError,
            DuplicateSlotError, OverlappingSlotError: Input rejected.
        """
        if not day_of_week or not start_time:
            raise MissingFieldError("Day of week and start time are required")
        weekday = check_known_weekday(day_of_week)
        time = strip_time_prefix(start_time)

        with self.locks.hold(course_id, self.settings.lock_timeout):
            course = self._read(course_id)
            options = self.schedule_options()

            offered = {day.casefold() for day in options.weekdays}
            if offered and weekday.label.casefold() not in offered:
                raise UnknownWeekdayError(f"{weekday.label} is not offered")
            check_known_time(time, options.times)

            candidate = Slot(
                day_label=weekday.label,
                time_label=with_time_prefix(time, options.time_prefix),
            )
            check_no_duplicate(course.slots, candidate)
            check_no_overlap(course.slots, candidate, self.settings.session_minutes)

            self._persist(course, [*course.slots, candidate])

        logger.info(
            "Added class %d (%s %s) to course %s",
            len(course.slots) + 1,
            weekday.label,
            time,
            course_id,
        )
        return self.list_slots(course_id)

    def reorder_slots(self, course_id: str, new_order: Sequence[int] | None) -> list[SlotView]:
        """Rearrange slots; ``new_order[i]`` is the old index placed at position i.

        Raises:
            MissingFieldError: If new_order is missing.
            InvalidPermutationError: If new_order is not a permutation.
            SlotHasStudentsError: If a slot that would move has students.
        """
        if new_order is None:
            raise MissingFieldError("New order is required")
        new_order = list(new_order)
        with self.locks.hold(course_id, self.settings.lock_timeout):
            course = self._read(course_id)
            check_valid_permutation(new_order, len(course.slots))
            moved = affected_indices(new_order)
            check_no_enrolled_students_affected(course.slots, count_enrollments(course), moved)

            if not moved:
                logger.debug("Reorder of course %s keeps every class in place", course_id)
                return self._project(course)

            self._persist(course, [course.slots[old] for old in new_order])

        logger.info("Reordered classes of course %s: %s", course_id, new_order)
        return self.list_slots(course_id)

    def delete_slot(self, course_id: str, index: int | None) -> list[SlotView]:
        """Remove the slot at ``index``; later slots shift down by one.

        Raises:
            MissingFieldError: If index is missing or negative.
            SlotNotFoundError: If index is past the end of the list.
            SlotHasStudentsError: If the slot has students.
        """
        if index is None or index < 0:
            raise MissingFieldError("Class index is required")

        with self.locks.hold(course_id, self.settings.lock_timeout):
            course = self._read(course_id)
            check_index_in_range(index, len(course.slots))
            check_no_enrolled_students_affected(course.slots, count_enrollments(course), [index])

            self._persist(course, course.slots[:index] + course.slots[index + 1 :])

        logger.info("Removed class %d from course %s", index + 1, course_id)
        return self.list_slots(course_id)

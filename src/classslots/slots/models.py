"""Data models returned by the slot service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date  # noqa: TC003 - used at runtime in dataclasses
from typing import TYPE_CHECKING

from classslots.capacity.models import Availability, BadgeDecision, CapacityState
from classslots.schedule.exceptions import InvalidTimeFormatError
from classslots.schedule.timemath import end_time

if TYPE_CHECKING:
    from classslots.schedule.models import Slot


@dataclass
class SlotView:
    """One slot as exposed to admin and enrollment callers.

    Attributes:
        index: 0-based position in the course.
        display_number: index + 1; the value stored as a student's class assignment.
        weekday: UI key ("monday"), empty if the stored day is not recognized.
        weekday_label: Day as stored ("Segunda-Feira").
        start_time: "HH:MM" without regional prefix.
        end_time: Session end, None if the start time is unreadable.
        capacity: Seat state derived for this request.
    """

    index: int
    display_number: int
    weekday: str
    weekday_label: str
    start_time: str
    end_time: str | None
    start_date: date | None
    end_date: date | None
    join_link: str | None
    slot_id: str | None
    capacity: CapacityState

    @property
    def current_enrollment(self) -> int:
        return self.capacity.current_enrollment

    @property
    def max_capacity(self) -> int:
        return self.capacity.max_capacity

    @property
    def is_full(self) -> bool:
        return self.capacity.is_full

    @property
    def available_seats(self) -> int:
        return self.capacity.available_seats

    @property
    def availability(self) -> Availability:
        return self.capacity.availability

    @classmethod
    def build(
        cls, index: int, slot: Slot, capacity: CapacityState, session_minutes: int
    ) -> SlotView:
        try:
            finish = end_time(slot.start_time, session_minutes) if slot.start_time else None
        except InvalidTimeFormatError:
            finish = None
        weekday = slot.weekday
        return cls(
            index=index,
            display_number=index + 1,
            weekday=weekday.value if weekday else "",
            weekday_label=slot.day_label or "",
            start_time=slot.start_time,
            end_time=finish,
            start_date=slot.start_date,
            end_date=slot.end_date,
            join_link=slot.join_link,
            slot_id=slot.slot_id,
            capacity=capacity,
        )


@dataclass
class CourseAvailability:
    """Course-level availability for enrollment-facing callers.

    ``active_display_number`` is the slot new students go to: the first
    slot that is not full. None when the course is full or has no slots.
    """

    course_id: str
    is_full: bool
    active_display_number: int | None
    available_seats: int
    badge: BadgeDecision | None = None
    slots: list[SlotView] = field(default_factory=list)

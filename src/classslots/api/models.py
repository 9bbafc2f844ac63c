"""Pydantic models for REST API."""

from datetime import date
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from classslots.capacity.models import BadgeDecision
from classslots.schedule.models import ScheduleOptions
from classslots.slots.models import CourseAvailability, SlotView

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper.

    ``code`` is the machine-readable error kind, set only when ``error`` is.
    """

    data: T | None = None
    error: str | None = None
    code: str | None = None


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts both forms on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request models


class SlotCreate(CamelModel):
    """Request model for adding a slot."""

    day_of_week: str | None = Field(default=None, max_length=32)
    start_time: str | None = Field(default=None, max_length=16)


class SlotReorder(CamelModel):
    """Request model for reordering slots. ``new_order[i]`` is the old index now at i."""

    new_order: list[Any] | None = None


class AdmissionRequest(CamelModel):
    """Request model for an admission check. Omit display_number to get the active slot."""

    display_number: int | None = None


# Response models


class SlotResponse(CamelModel):
    """Response model for a slot with its capacity."""

    index: int
    display_number: int
    day_of_week: str
    weekday_label: str
    start_time: str
    end_time: str | None
    start_date: date | None
    end_date: date | None
    join_link: str | None
    slot_id: str | None
    current_enrollment: int
    max_capacity: int
    available_seats: int
    is_full: bool
    availability: str


def slot_to_response(view: SlotView) -> SlotResponse:
    """Convert a SlotView to SlotResponse."""
    return SlotResponse(
        index=view.index,
        display_number=view.display_number,
        day_of_week=view.weekday,
        weekday_label=view.weekday_label,
        start_time=view.start_time,
        end_time=view.end_time,
        start_date=view.start_date,
        end_date=view.end_date,
        join_link=view.join_link,
        slot_id=view.slot_id,
        current_enrollment=view.current_enrollment,
        max_capacity=view.max_capacity,
        available_seats=view.available_seats,
        is_full=view.is_full,
        availability=view.availability.value,
    )


class BadgeResponse(CamelModel):
    """Response model for a course badge."""

    kind: str
    days: int | None = None
    seats: int | None = None


def badge_to_response(decision: BadgeDecision | None) -> BadgeResponse | None:
    if decision is None:
        return None
    return BadgeResponse(kind=decision.badge.value, days=decision.days, seats=decision.seats)


class AvailabilityResponse(CamelModel):
    """Response model for course availability."""

    course_id: str
    is_full: bool
    active_display_number: int | None
    available_seats: int
    badge: BadgeResponse | None
    slots: list[SlotResponse]


def availability_to_response(availability: CourseAvailability) -> AvailabilityResponse:
    """Convert a CourseAvailability to AvailabilityResponse."""
    return AvailabilityResponse(
        course_id=availability.course_id,
        is_full=availability.is_full,
        active_display_number=availability.active_display_number,
        available_seats=availability.available_seats,
        badge=badge_to_response(availability.badge),
        slots=[slot_to_response(view) for view in availability.slots],
    )


class ScheduleOptionsResponse(CamelModel):
    """Response model for offerable weekdays and times."""

    weekdays: list[str]
    times: list[str]
    time_prefix: str
    fallback: bool


def options_to_response(options: ScheduleOptions) -> ScheduleOptionsResponse:
    return ScheduleOptionsResponse(
        weekdays=list(options.weekdays),
        times=list(options.times),
        time_prefix=options.time_prefix,
        fallback=options.fallback,
    )

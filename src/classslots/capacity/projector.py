"""CapacityProjector - seat state, course fullness and badge choice.

Pure functions: no storage access, no clock reads (callers pass ``today``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from classslots.capacity.models import (
    CONFIGURED_BADGES,
    Availability,
    Badge,
    BadgeDecision,
    CapacityState,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

DEFAULT_MAX_CAPACITY = 15
DEFAULT_NEARLY_FULL_RATIO = 0.8
DEFAULT_FEW_SEATS_THRESHOLD = 7


def project(
    enrollment_count: int,
    max_capacity: int = DEFAULT_MAX_CAPACITY,
    nearly_full_ratio: float = DEFAULT_NEARLY_FULL_RATIO,
) -> CapacityState:
    """Derive the capacity state of one slot.

    Args:
        enrollment_count: Enabled students assigned to the slot.
        max_capacity: Seats per slot.
        nearly_full_ratio: Occupancy at which a slot counts as nearly full.

    Returns:
        CapacityState with is_full = enrollment_count >= max_capacity.
    """
    if max_capacity < 1:
        raise ValueError("max_capacity must be >= 1")
    count = max(0, enrollment_count)
    is_full = count >= max_capacity
    if is_full:
        availability = Availability.FULL
    elif count / max_capacity >= nearly_full_ratio:
        availability = Availability.NEARLY_FULL
    else:
        availability = Availability.OPEN
    return CapacityState(
        current_enrollment=count,
        max_capacity=max_capacity,
        is_full=is_full,
        availability=availability,
    )


def aggregate_course_fullness(states: Sequence[CapacityState]) -> bool:
    """True iff the course has slots and every one of them is full."""
    return bool(states) and all(state.is_full for state in states)


def active_slot_index(states: Sequence[CapacityState]) -> int | None:
    """Index of the slot currently open for new students.

    Slots fill in list order: the active slot is the first one that is not
    full, provided every slot before it is full. Returns None when all are full.
    """
    for index, state in enumerate(states):
        if not state.is_full:
            return index
    return None


def available_seats(states: Sequence[CapacityState]) -> int:
    return sum(state.available_seats for state in states)


def days_until(start_date: date | None, today: date) -> int | None:
    if start_date is None:
        return None
    return (start_date - today).days


def choose_badge(
    course_full: bool,
    configured: str | None,
    start_date: date | None,
    today: date,
    seats_left: int,
    few_seats_threshold: int = DEFAULT_FEW_SEATS_THRESHOLD,
) -> BadgeDecision | None:
    """Pick at most one badge for a course card.

    Precedence: fully booked, then the configured promotional badge
    (reported as a seat count once few seats are left), then days remaining
    until the start date when that number is positive.

    Args:
        course_full: Whether every slot of the course is full.
        configured: Badge configured on the course ("poucas_vagas", "nenhum", ...).
        start_date: Campaign start date.
        today: Current date in the platform's region.
        seats_left: Free seats across all slots.
        few_seats_threshold: At or below this many seats the count is shown.

    Returns:
        The chosen badge, or None.
    """
    if course_full:
        return BadgeDecision(Badge.FULLY_BOOKED)

    kind = CONFIGURED_BADGES.get((configured or "").strip().lower())
    if kind is None:
        return None

    days = days_until(start_date, today)
    if kind is Badge.DAYS_REMAINING and (days is None or days <= 0):
        return None

    if seats_left <= 0:
        return None
    if seats_left <= few_seats_threshold:
        return BadgeDecision(Badge.SEATS_REMAINING, seats=seats_left)

    if kind is Badge.DAYS_REMAINING:
        return BadgeDecision(Badge.DAYS_REMAINING, days=days)
    return BadgeDecision(kind)

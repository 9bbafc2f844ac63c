"""Data models for the capacity projector."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Availability(StrEnum):
    """Seat availability of a slot."""

    OPEN = "open"
    NEARLY_FULL = "nearly_full"
    FULL = "full"


class Badge(StrEnum):
    """Badge shown on a course card."""

    FULLY_BOOKED = "fully_booked"
    FEW_DAYS = "few_days"
    FEW_SPOTS = "few_spots"
    SEATS_REMAINING = "seats_remaining"
    DAYS_REMAINING = "days_remaining"


# Badge values as configured on course records
CONFIGURED_BADGES = {
    "dias_faltantes": Badge.DAYS_REMAINING,
    "poucos_dias": Badge.FEW_DAYS,
    "poucas_vagas": Badge.FEW_SPOTS,
    "days_remaining": Badge.DAYS_REMAINING,
    "few_days": Badge.FEW_DAYS,
    "few_spots": Badge.FEW_SPOTS,
}


@dataclass(frozen=True)
class CapacityState:
    """Derived seat state of one slot. Computed per request, never stored.

    Attributes:
        current_enrollment: Enabled students assigned to the slot.
        max_capacity: Seats per slot.
        is_full: current_enrollment >= max_capacity.
        availability: open / nearly_full / full.
    """

    current_enrollment: int
    max_capacity: int
    is_full: bool
    availability: Availability

    @property
    def available_seats(self) -> int:
        return max(0, self.max_capacity - self.current_enrollment)

    @property
    def occupancy(self) -> float:
        return self.current_enrollment / self.max_capacity


@dataclass(frozen=True)
class BadgeDecision:
    """The single badge chosen for a course, with its figure when it has one."""

    badge: Badge
    days: int | None = None
    seats: int | None = None

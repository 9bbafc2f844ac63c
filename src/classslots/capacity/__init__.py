"""Capacity - per-slot seat state and course availability."""

from classslots.capacity.models import Availability, Badge, BadgeDecision, CapacityState
from classslots.capacity.projector import (
    active_slot_index,
    aggregate_course_fullness,
    available_seats,
    choose_badge,
    days_until,
    project,
)

__all__ = [
    "Availability",
    "Badge",
    "BadgeDecision",
    "CapacityState",
    "active_slot_index",
    "aggregate_course_fullness",
    "available_seats",
    "choose_badge",
    "days_until",
    "project",
]

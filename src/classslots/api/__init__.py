"""REST API for classslots."""

from classslots.api.app import create_app
from classslots.api.models import (
    APIResponse,
    AvailabilityResponse,
    ScheduleOptionsResponse,
    SlotCreate,
    SlotReorder,
    SlotResponse,
)

__all__ = [
    "APIResponse",
    "AvailabilityResponse",
    "ScheduleOptionsResponse",
    "SlotCreate",
    "SlotReorder",
    "SlotResponse",
    "create_app",
]

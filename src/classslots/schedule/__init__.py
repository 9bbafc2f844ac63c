"""Schedule - slot model, time math and mutation invariants."""

from classslots.schedule.exceptions import (
    CourseFullError,
    DuplicateSlotError,
    InvalidPermutationError,
    InvalidTimeFormatError,
    MissingFieldError,
    OverlappingSlotError,
    ScheduleError,
    SlotFullError,
    SlotGuardError,
    SlotHasStudentsError,
    SlotNotFoundError,
    SlotValidationError,
    UnknownTimeSlotError,
    UnknownWeekdayError,
)
from classslots.schedule.models import (
    DEFAULT_TIME_PREFIX,
    DEFAULT_TIMES,
    CourseRecord,
    EnrollmentRecord,
    ScheduleOptions,
    Slot,
    Weekday,
    strip_time_prefix,
    with_time_prefix,
)
from classslots.schedule.timemath import SESSION_MINUTES, end_time, overlaps, to_minutes

__all__ = [
    "DEFAULT_TIMES",
    "DEFAULT_TIME_PREFIX",
    "SESSION_MINUTES",
    "CourseFullError",
    "CourseRecord",
    "DuplicateSlotError",
    "EnrollmentRecord",
    "InvalidPermutationError",
    "InvalidTimeFormatError",
    "MissingFieldError",
    "OverlappingSlotError",
    "ScheduleError",
    "ScheduleOptions",
    "Slot",
    "SlotFullError",
    "SlotGuardError",
    "SlotHasStudentsError",
    "SlotNotFoundError",
    "SlotValidationError",
    "UnknownTimeSlotError",
    "UnknownWeekdayError",
    "Weekday",
    "end_time",
    "overlaps",
    "strip_time_prefix",
    "to_minutes",
    "with_time_prefix",
]

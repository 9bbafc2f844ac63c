"""Exceptions raised while validating slot mutations."""


class ScheduleError(Exception):
    """Base exception for schedule errors."""

    code = "schedule_error"


class SlotValidationError(ScheduleError):
    """Input rejected; the caller can correct it and try again."""

    code = "validation_error"


class MissingFieldError(SlotValidationError):
    """A required field was not supplied."""

    code = "missing_field"


class InvalidTimeFormatError(SlotValidationError):
    """Time label does not match HH:MM."""

    code = "invalid_time_format"


class UnknownTimeSlotError(SlotValidationError):
    """Start time is not one of the offerable times."""

    code = "unknown_time"


class UnknownWeekdayError(SlotValidationError):
    """Day of week is not one of the offerable weekdays."""

    code = "unknown_weekday"


class DuplicateSlotError(SlotValidationError):
    """A slot with the same weekday and start time already exists."""

    code = "duplicate_slot"


class OverlappingSlotError(SlotValidationError):
    """The new session overlaps a session on the same weekday."""

    code = "overlapping_slot"


class InvalidPermutationError(SlotValidationError):
    """Reorder request is not a permutation of the current indices."""

    code = "invalid_permutation"


class SlotGuardError(ScheduleError):
    """Change blocked by enrolled students or by capacity."""

    code = "guard_error"


class SlotHasStudentsError(SlotGuardError):
    """Slot with enrolled students cannot be removed or moved."""

    code = "slot_has_students"

    def __init__(self, message: str, display_numbers: list[int] | None = None) -> None:
        super().__init__(message)
        self.display_numbers = display_numbers or []


class SlotFullError(SlotGuardError):
    """Slot has reached its capacity."""

    code = "slot_full"


class CourseFullError(SlotGuardError):
    """Every slot of the course is full."""

    code = "course_full"


class SlotNotFoundError(ScheduleError):
    """Slot index or display number does not exist in the course."""

    code = "slot_not_found"

"""Exceptions raised by the slot service for storage-side failures.

Validation and guard errors come from classslots.schedule.exceptions and
pass through the service unchanged.
"""


class SlotServiceError(Exception):
    """Base exception for slot service errors."""

    code = "service_error"


class CourseNotFoundError(SlotServiceError):
    """Course does not exist in the backing store."""

    code = "course_not_found"


class UpstreamError(SlotServiceError):
    """Backing store failed or answered with an error. Retry the whole operation."""

    code = "upstream_error"


class UpstreamTimeoutError(UpstreamError):
    """Backing store did not answer in time. The write may or may not have happened."""

    code = "upstream_timeout"


class PersistenceError(UpstreamError):
    """Writing the new slot list failed; nothing is assumed committed."""

    code = "persistence_error"


class ConflictError(SlotServiceError):
    """Course was changed concurrently, or its lock could not be acquired."""

    code = "conflict"

"""Custom exceptions for State Store."""


class StateStoreError(Exception):
    """Base exception for State Store errors."""


class CourseNotFoundError(StateStoreError):
    """Course with given ID does not exist."""


class EnrollmentNotFoundError(StateStoreError):
    """Enrollment with given ID does not exist."""


class StaleVersionError(StateStoreError):
    """Course was modified after the caller read it."""

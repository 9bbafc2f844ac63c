"""Custom exceptions for the content store client."""


class ContentStoreError(Exception):
    """Base exception for content store errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CourseNotFoundError(ContentStoreError):
    """Course with given ID does not exist in the content store."""


class ContentStoreTimeoutError(ContentStoreError):
    """Content store did not answer within the configured timeout."""


class StaleCourseError(ContentStoreError):
    """Course changed in the content store after it was read."""

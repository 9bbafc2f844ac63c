"""Content Store - HTTP client for course records in the remote CMS."""

from classslots.content_store.client import (
    MANAGED_FIELDS,
    ContentStoreClient,
    clean_payload,
    slot_from_item,
    slot_to_item,
)
from classslots.content_store.exceptions import (
    ContentStoreError,
    ContentStoreTimeoutError,
    CourseNotFoundError,
    StaleCourseError,
)

__all__ = [
    "MANAGED_FIELDS",
    "ContentStoreClient",
    "ContentStoreError",
    "ContentStoreTimeoutError",
    "CourseNotFoundError",
    "StaleCourseError",
    "clean_payload",
    "slot_from_item",
    "slot_to_item",
]

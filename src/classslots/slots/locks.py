"""Per-course mutual exclusion for slot mutations."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from classslots.slots.exceptions import ConflictError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class CourseLocks:
    """One lock per course id; different courses never block each other."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, course_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(course_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[course_id] = lock
            return lock

    @contextmanager
    def hold(self, course_id: str, timeout: float) -> Iterator[None]:
        """Hold the course's lock for the duration of the block.

        Raises:
            ConflictError: If the lock is not acquired within ``timeout`` seconds.
        """
        lock = self._lock_for(course_id)
        if not lock.acquire(timeout=timeout):
            logger.warning("Course %s busy for %.1fs, giving up", course_id, timeout)
            raise ConflictError(
                f"Another change to course '{course_id}' is in progress, try again"
            )
        try:
            yield
        finally:
            lock.release()

    def is_locked(self, course_id: str) -> bool:
        with self._guard:
            lock = self._locks.get(course_id)
        return lock is not None and lock.locked()

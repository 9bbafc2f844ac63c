"""StateStore - local SQLite course repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from classslots.schedule.models import (
    DEFAULT_TIME_PREFIX,
    DEFAULT_TIMES,
    CourseRecord,
    EnrollmentRecord,
    ScheduleOptions,
    Slot,
)
from classslots.state_store.database import Database
from classslots.state_store.exceptions import (
    CourseNotFoundError,
    EnrollmentNotFoundError,
    StaleVersionError,
    StateStoreError,
)
from classslots.state_store.models import ClassSlot, Course, Enrollment

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

logger = logging.getLogger(__name__)


class StateStore:
    """Course repository backed by SQLite.

    Provides the same read/replace interface as the content store client,
    plus course and enrollment management for local deployments.
    """

    def __init__(
        self,
        db_path: str = "classslots.db",
        times: Sequence[str] | None = None,
        time_prefix: str = DEFAULT_TIME_PREFIX,
    ) -> None:
        """Initialize State Store with SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
            times: Offerable start times ("HH:MM")
            time_prefix: Regional prefix on stored time labels
        """
        self._db = Database(db_path)
        self._db.create_tables()
        self._times = list(times) if times else list(DEFAULT_TIMES)
        self._time_prefix = time_prefix

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    # --- Course Operations ---

    def create_course(
        self,
        title: str,
        course_id: str | None = None,
        badge: str | None = None,
        start_date: date | None = None,
    ) -> Course:
        """Create a new course with an empty schedule.

        Args:
            title: Course title
            course_id: Explicit ID (generated when omitted)
            badge: Configured promotional badge
            start_date: Campaign start date

        Returns:
            Created Course object
        """
        session = self._db.get_session()
        try:
            course = Course(title=title, id=course_id, badge=badge, start_date=start_date)
            session.add(course)
            session.commit()
            session.refresh(course)
            return course
        except IntegrityError as e:
            session.rollback()
            raise StateStoreError(f"Could not create course '{title}': {e.orig}") from e
        finally:
            session.close()

    def get_course(self, course_id: str) -> Course:
        """Get course by ID.

        Raises:
            CourseNotFoundError: If course doesn't exist
        """
        session = self._db.get_session()
        try:
            course = session.get(Course, course_id)
            if course is None:
                raise CourseNotFoundError(f"Course with id '{course_id}' not found")
            return course
        finally:
            session.close()

    def list_courses(self) -> list[Course]:
        """List all courses, ordered by title."""
        session = self._db.get_session()
        try:
            result = session.execute(select(Course).order_by(Course.title))
            return list(result.scalars().all())
        finally:
            session.close()

    # --- Repository interface ---

    def load_course(self, course_id: str) -> CourseRecord:
        """Read a course's slots and enabled enrollments.

        Raises:
            CourseNotFoundError: If course doesn't exist
        """
        session = self._db.get_session()
        try:
            course = session.get(Course, course_id)
            if course is None:
                raise CourseNotFoundError(f"Course with id '{course_id}' not found")

            slots = session.execute(
                select(ClassSlot)
                .where(ClassSlot.course_id == course_id)
                .order_by(ClassSlot.position)
            ).scalars()
            enrollments = session.execute(
                select(Enrollment).where(
                    Enrollment.course_id == course_id,
                    Enrollment.enabled.is_(True),
                )
            ).scalars()

            return CourseRecord(
                course_id=course.id,
                document_id=course.id,
                slots=[
                    Slot(
                        day_label=row.day_label,
                        time_label=row.time_label,
                        start_date=row.start_date,
                        end_date=row.end_date,
                        join_link=row.join_link,
                        slot_id=row.id,
                    )
                    for row in slots
                ],
                enrollments=[
                    EnrollmentRecord(
                        student_id=row.id,
                        class_assignment=row.class_assignment,
                        enabled=row.enabled,
                    )
                    for row in enrollments
                ],
                version=str(course.version),
                badge=course.badge,
                start_date=course.start_date,
            )
        finally:
            session.close()

    def load_schedule_options(self) -> ScheduleOptions:
        """Offerable times configured for this store."""
        return ScheduleOptions(times=list(self._times), time_prefix=self._time_prefix)

    def replace_slots(self, course: CourseRecord, slots: Sequence[Slot]) -> None:
        """Replace a course's schedule if it is still at ``course.version``.

        Slot ids are kept; slots without one get a new id.

        Raises:
            CourseNotFoundError: If course doesn't exist
            StaleVersionError: If the course changed since it was read
            StateStoreError: If the new schedule violates a constraint
        """
        session = self._db.get_session()
        try:
            expected = int(course.version) if course.version is not None else None
            stmt = update(Course).where(Course.id == course.course_id)
            if expected is not None:
                stmt = stmt.where(Course.version == expected)
            result = session.execute(stmt.values(version=Course.version + 1))

            if result.rowcount == 0:
                session.rollback()
                if session.get(Course, course.course_id) is None:
                    raise CourseNotFoundError(f"Course with id '{course.course_id}' not found")
                raise StaleVersionError(
                    f"Course '{course.course_id}' changed since version {course.version}"
                )

            session.execute(delete(ClassSlot).where(ClassSlot.course_id == course.course_id))
            session.flush()
            for position, slot in enumerate(slots):
                session.add(
                    ClassSlot(
                        id=slot.slot_id,
                        course_id=course.course_id,
                        position=position,
                        day_label=slot.day_label or "",
                        time_label=slot.time_label or "",
                        start_date=slot.start_date,
                        end_date=slot.end_date,
                        join_link=slot.join_link,
                    )
                )
            session.commit()
            logger.debug("Course %s now has %d slots", course.course_id, len(slots))
        except IntegrityError as e:
            session.rollback()
            raise StateStoreError(f"Schedule rejected by database: {e.orig}") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise StateStoreError(f"Database error while saving schedule: {e}") from e
        finally:
            session.close()

    # --- Enrollment Operations ---

    def add_enrollment(
        self,
        course_id: str,
        student_name: str,
        class_assignment: int | None = None,
        enabled: bool = True,
    ) -> Enrollment:
        """Record a student's enrollment in a course.

        Args:
            course_id: The course's unique ID
            student_name: Student display name
            class_assignment: 1-based display number of the slot
            enabled: Whether the enrollment is active

        Raises:
            CourseNotFoundError: If course doesn't exist
        """
        session = self._db.get_session()
        try:
            course = session.get(Course, course_id)
            if course is None:
                raise CourseNotFoundError(f"Course with id '{course_id}' not found")
            # Any enrollment change invalidates earlier reads of the course
            course.version += 1
            enrollment = Enrollment(
                course_id=course_id,
                student_name=student_name,
                class_assignment=class_assignment,
                enabled=enabled,
            )
            session.add(enrollment)
            session.commit()
            session.refresh(enrollment)
            return enrollment
        finally:
            session.close()

    def set_enrollment_enabled(self, enrollment_id: str, enabled: bool) -> Enrollment:
        """Enable or disable an enrollment.

        Raises:
            EnrollmentNotFoundError: If enrollment doesn't exist
        """
        session = self._db.get_session()
        try:
            enrollment = session.get(Enrollment, enrollment_id)
            if enrollment is None:
                raise EnrollmentNotFoundError(f"Enrollment with id '{enrollment_id}' not found")
            enrollment.enabled = enabled
            enrollment.course.version += 1
            session.commit()
            session.refresh(enrollment)
            return enrollment
        finally:
            session.close()

    def list_enrollments(self, course_id: str, enabled_only: bool = False) -> list[Enrollment]:
        """List a course's enrollments, oldest first."""
        session = self._db.get_session()
        try:
            stmt = select(Enrollment).where(Enrollment.course_id == course_id)
            if enabled_only:
                stmt = stmt.where(Enrollment.enabled.is_(True))
            stmt = stmt.order_by(Enrollment.created_at)
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()

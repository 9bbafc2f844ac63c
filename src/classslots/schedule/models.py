"""Data models for course schedules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date  # noqa: TC003 - used at runtime in dataclasses
from enum import StrEnum
from typing import Any

DEFAULT_TIME_PREFIX = "BRT"
DEFAULT_TIMES = ["14:00", "15:00", "16:00", "17:00", "18:00", "19:00", "20:00"]


class Weekday(StrEnum):
    """Offerable weekdays. Values are the UI-facing keys."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"

    @property
    def label(self) -> str:
        """Day name as stored in course records."""
        return _STORE_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> Weekday:
        """Accept either the UI key ("monday") or the stored label.

        Raises:
            ValueError: If the value is neither.
        """
        key = value.strip()
        try:
            return cls(key.lower())
        except ValueError:
            pass
        for day, label in _STORE_LABELS.items():
            if label.casefold() == key.casefold():
                return day
        raise ValueError(f"Unknown weekday: {value!r}")


_STORE_LABELS = {
    Weekday.MONDAY: "Segunda-Feira",
    Weekday.TUESDAY: "Terça-Feira",
    Weekday.WEDNESDAY: "Quarta-Feira",
    Weekday.THURSDAY: "Quinta-Feira",
    Weekday.FRIDAY: "Sexta-Feira",
}

DEFAULT_WEEKDAY_LABELS = [day.label for day in Weekday]


def strip_time_prefix(label: str | None) -> str:
    """Remove a leading regional prefix: "BRT 14:00" -> "14:00"."""
    if not label:
        return ""
    parts = label.strip().split(maxsplit=1)
    if len(parts) == 2 and parts[0].isalpha():
        return parts[1].strip()
    return label.strip()


def with_time_prefix(time: str, prefix: str = DEFAULT_TIME_PREFIX) -> str:
    """Add the regional prefix used by stored records: "14:00" -> "BRT 14:00"."""
    time = strip_time_prefix(time)
    if not prefix:
        return time
    return f"{prefix} {time}"


@dataclass
class Slot:
    """One weekly class slot as stored in a course record.

    ``day_label`` and ``time_label`` hold the stored forms
    ("Segunda-Feira", "BRT 14:00"). Position in the course's list is the
    slot's index; it is not stored on the slot.
    """

    day_label: str | None = None
    time_label: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    join_link: str | None = None
    slot_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def weekday(self) -> Weekday | None:
        if not self.day_label:
            return None
        try:
            return Weekday.parse(self.day_label)
        except ValueError:
            return None

    @property
    def start_time(self) -> str:
        return strip_time_prefix(self.time_label)

    def same_time_as(self, other: Slot) -> bool:
        """True when both slots share weekday and start time."""
        return (
            self.weekday is not None
            and self.weekday == other.weekday
            and self.start_time == other.start_time
        )


@dataclass
class EnrollmentRecord:
    """Active-enrollment record of a student in a course."""

    student_id: str
    class_assignment: int | None = None
    enabled: bool = True


@dataclass
class CourseRecord:
    """A course as read from a repository.

    ``version`` is an opaque token the repository uses to detect concurrent
    writes; it is handed back unchanged on persist.
    """

    course_id: str
    document_id: str
    slots: list[Slot] = field(default_factory=list)
    enrollments: list[EnrollmentRecord] = field(default_factory=list)
    version: str | None = None
    badge: str | None = None
    start_date: date | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class ScheduleOptions:
    """Weekday and time choices offered when adding a slot."""

    weekdays: list[str] = field(default_factory=lambda: list(DEFAULT_WEEKDAY_LABELS))
    times: list[str] = field(default_factory=lambda: list(DEFAULT_TIMES))
    time_prefix: str = DEFAULT_TIME_PREFIX
    fallback: bool = False

    @property
    def prefixed_times(self) -> list[str]:
        return [with_time_prefix(t, self.time_prefix) for t in self.times]

    @classmethod
    def defaults(
        cls, times: list[str] | None = None, time_prefix: str = DEFAULT_TIME_PREFIX
    ) -> ScheduleOptions:
        """Options used when the option source is unavailable."""
        return cls(
            times=list(times) if times else list(DEFAULT_TIMES),
            time_prefix=time_prefix,
            fallback=True,
        )

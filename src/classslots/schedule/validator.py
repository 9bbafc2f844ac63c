"""SlotValidator - invariant checks run before any slot mutation.

Every check either returns None or raises. Nothing here reads or writes
storage; callers pass in the current state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from classslots.schedule.exceptions import (
    DuplicateSlotError,
    InvalidPermutationError,
    InvalidTimeFormatError,
    OverlappingSlotError,
    SlotHasStudentsError,
    SlotNotFoundError,
    UnknownTimeSlotError,
    UnknownWeekdayError,
)
from classslots.schedule.models import Weekday, strip_time_prefix
from classslots.schedule.timemath import SESSION_MINUTES, to_minutes

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from classslots.schedule.models import Slot

logger = logging.getLogger(__name__)


def check_known_weekday(value: str) -> Weekday:
    """Resolve a weekday given as UI key or stored label.

    Raises:
        UnknownWeekdayError: If the value is not an offerable weekday.
    """
    try:
        return Weekday.parse(value)
    except ValueError as e:
        raise UnknownWeekdayError(f"Unknown day of week '{value}'") from e


def check_known_time(candidate_time: str, valid_times: Iterable[str]) -> None:
    """Raise UnknownTimeSlotError unless the time is offerable."""
    allowed = {strip_time_prefix(t) for t in valid_times}
    if strip_time_prefix(candidate_time) not in allowed:
        raise UnknownTimeSlotError(
            f"Invalid start time '{candidate_time}'. Use one of: {', '.join(sorted(allowed))}"
        )


def check_no_duplicate(existing: Sequence[Slot], candidate: Slot) -> None:
    """Raise DuplicateSlotError if a slot with the same day and time exists."""
    for index, slot in enumerate(existing):
        if slot.same_time_as(candidate):
            raise DuplicateSlotError(
                f"Class {index + 1} already runs on {candidate.day_label} "
                f"at {candidate.start_time}"
            )


def check_no_overlap(
    existing: Sequence[Slot],
    candidate: Slot,
    duration_minutes: int = SESSION_MINUTES,
) -> None:
    """Raise OverlappingSlotError if the candidate overlaps a same-day session.

    Existing slots without a parseable start time are not compared.

    Raises:
        InvalidTimeFormatError: If the candidate's own time cannot be parsed.
        OverlappingSlotError: If the candidate clashes with an existing slot.
    """
    start = to_minutes(candidate.start_time)
    for index, slot in enumerate(existing):
        if slot.weekday is None or slot.weekday != candidate.weekday:
            continue
        if not slot.start_time:
            continue
        try:
            other = to_minutes(slot.start_time)
        except InvalidTimeFormatError:
            logger.warning(
                "Skipping overlap check against class %d with unreadable time %r",
                index + 1,
                slot.time_label,
            )
            continue
        if start < other + duration_minutes and other < start + duration_minutes:
            raise OverlappingSlotError(
                f"{candidate.start_time} overlaps class {index + 1} "
                f"({slot.day_label} {slot.start_time}); "
                f"sessions last {duration_minutes} minutes"
            )


def affected_indices(new_order: Sequence[int]) -> list[int]:
    """Source indices whose position changes under ``new_order``."""
    return [old for position, old in enumerate(new_order) if old != position]


def check_no_enrolled_students_affected(
    slots: Sequence[Slot],
    enrollment_counts: Mapping[int, int],
    affected: Iterable[int],
) -> None:
    """Raise SlotHasStudentsError if any affected slot has students.

    ``affected`` holds 0-based indices; counts are keyed by display number.
    """
    blocked = sorted(
        {
            index + 1
            for index in affected
            if 0 <= index < len(slots) and enrollment_counts.get(index + 1, 0) > 0
        }
    )
    if blocked:
        numbers = ", ".join(str(n) for n in blocked)
        raise SlotHasStudentsError(
            f"Classes with enrolled students cannot be moved or removed (class {numbers})",
            display_numbers=blocked,
        )


def check_valid_permutation(new_order: Sequence[object], slot_count: int) -> None:
    """Raise InvalidPermutationError unless new_order permutes range(slot_count)."""
    if len(new_order) != slot_count:
        raise InvalidPermutationError(
            f"New order has {len(new_order)} entries, course has {slot_count} classes"
        )
    if any(isinstance(i, bool) or not isinstance(i, int) for i in new_order):
        raise InvalidPermutationError("New order must contain only integer indices")
    if sorted(new_order) != list(range(slot_count)):  # type: ignore[type-var]
        raise InvalidPermutationError(
            f"New order must contain each index from 0 to {slot_count - 1} exactly once"
        )


def check_index_in_range(index: int, slot_count: int) -> None:
    """Raise SlotNotFoundError for an index outside the slot list."""
    if not 0 <= index < slot_count:
        raise SlotNotFoundError(f"Class index {index} does not exist (course has {slot_count})")

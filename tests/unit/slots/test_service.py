"""Unit tests for SlotMutationService."""

from datetime import date

import pytest

from classslots.capacity import Availability, Badge, BadgeDecision
from classslots.config import Settings
from classslots.content_store import ContentStoreError, ContentStoreTimeoutError, StaleCourseError
from classslots.schedule import (
    CourseFullError,
    DuplicateSlotError,
    InvalidPermutationError,
    InvalidTimeFormatError,
    MissingFieldError,
    OverlappingSlotError,
    ScheduleOptions,
    SlotFullError,
    SlotHasStudentsError,
    SlotNotFoundError,
    UnknownTimeSlotError,
    UnknownWeekdayError,
)
from classslots.slots import (
    ConflictError,
    CourseNotFoundError,
    PersistenceError,
    SlotMutationService,
    SlotStore,
    UpstreamError,
    UpstreamTimeoutError,
)
from classslots.state_store import StateStoreError

MONDAY_14 = ("Segunda-Feira", "BRT 14:00")
WEDNESDAY_16 = ("Quarta-Feira", "BRT 16:00")
FRIDAY_18 = ("Sexta-Feira", "BRT 18:00")


@pytest.fixture
def service(repository) -> SlotMutationService:
    """Service over the in-memory repository with a fixed date."""
    return SlotMutationService(
        SlotStore(repository), settings=Settings(), today=lambda: date(2025, 3, 10)
    )


@pytest.mark.unit
class TestListSlots:
    """Tests for list_slots."""

    def test_empty_course(self, service: SlotMutationService, repository) -> None:
        repository.add("py")

        assert service.list_slots("py") == []

    def test_views_carry_position_and_capacity(
        self, service: SlotMutationService, repository
    ) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16], assignments=[2] * 12 + [1])

        first, second = service.list_slots("py")

        assert (first.index, first.display_number) == (0, 1)
        assert (second.index, second.display_number) == (1, 2)
        assert first.weekday == "monday"
        assert first.weekday_label == "Segunda-Feira"
        assert first.start_time == "14:00"
        assert first.end_time == "14:50"
        assert first.current_enrollment == 1
        assert second.current_enrollment == 12
        assert second.availability is Availability.NEARLY_FULL

    def test_reads_are_idempotent(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16], assignments=[1, 2])

        assert service.list_slots("py") == service.list_slots("py")
        assert repository.writes == []

    def test_missing_course(self, service: SlotMutationService) -> None:
        with pytest.raises(CourseNotFoundError):
            service.list_slots("missing")


@pytest.mark.unit
class TestAddSlot:
    """Tests for add_slot."""

    def test_add_to_empty_course(self, service: SlotMutationService, repository) -> None:
        repository.add("py")

        views = service.add_slot("py", "monday", "14:00")

        assert len(views) == 1
        assert views[0].index == 0
        assert views[0].display_number == 1
        assert views[0].current_enrollment == 0
        assert views[0].is_full is False
        assert views[0].max_capacity == 15
        assert repository.courses["py"].slots[0].time_label == "BRT 14:00"
        assert repository.courses["py"].slots[0].day_label == "Segunda-Feira"

    def test_appends_at_end(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16])

        views = service.add_slot("py", "Sexta-Feira", "BRT 18:00")

        assert [v.weekday for v in views] == ["monday", "wednesday", "friday"]

    @pytest.mark.parametrize(("day", "time"), [("", "14:00"), ("monday", ""), (None, None)])
    def test_missing_fields(
        self, service: SlotMutationService, repository, day: str, time: str
    ) -> None:
        repository.add("py")

        with pytest.raises(MissingFieldError):
            service.add_slot("py", day, time)

    def test_unknown_weekday(self, service: SlotMutationService, repository) -> None:
        repository.add("py")

        with pytest.raises(UnknownWeekdayError):
            service.add_slot("py", "saturday", "14:00")

    def test_weekday_not_offered(self, service: SlotMutationService, repository) -> None:
        repository.add("py")
        repository.options = ScheduleOptions(weekdays=["Segunda-Feira"])

        with pytest.raises(UnknownWeekdayError):
            service.add_slot("py", "tuesday", "14:00")

    def test_unknown_time(self, service: SlotMutationService, repository) -> None:
        repository.add("py")

        with pytest.raises(UnknownTimeSlotError):
            service.add_slot("py", "monday", "13:00")

        assert repository.writes == []

    def test_duplicate(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14])

        with pytest.raises(DuplicateSlotError):
            service.add_slot("py", "monday", "14:00")

        assert len(repository.courses["py"].slots) == 1
        assert repository.writes == []

    def test_overlap(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14])
        repository.options = ScheduleOptions(times=["14:00", "14:30", "15:00"])

        with pytest.raises(OverlappingSlotError):
            service.add_slot("py", "monday", "14:30")

        assert repository.writes == []

    def test_offered_time_that_is_not_hh_mm_is_rejected(
        self, service: SlotMutationService, repository
    ) -> None:
        repository.add("py", [MONDAY_14])
        repository.options = ScheduleOptions(times=["14:00", "14h30"])

        with pytest.raises(InvalidTimeFormatError) as exc_info:
            service.add_slot("py", "monday", "14h30")

        assert exc_info.value.code == "invalid_time_format"
        assert len(repository.courses["py"].slots) == 1
        assert repository.writes == []

    def test_adjacent_hour_allowed(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14])

        views = service.add_slot("py", "monday", "15:00")

        assert len(views) == 2

    def test_write_failure(self, service: SlotMutationService, repository) -> None:
        repository.add("py")
        repository.fail_writes = StateStoreError("disk I/O error")

        with pytest.raises(PersistenceError) as exc_info:
            service.add_slot("py", "monday", "14:00")

        assert isinstance(exc_info.value.__cause__, StateStoreError)
        assert repository.courses["py"].slots == []


@pytest.mark.unit
class TestReorderSlots:
    """Tests for reorder_slots."""

    def test_reorder(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16, FRIDAY_18])

        views = service.reorder_slots("py", [2, 0, 1])

        assert [(v.display_number, v.weekday) for v in views] == [
            (1, "friday"),
            (2, "monday"),
            (3, "wednesday"),
        ]

    def test_identity_order_does_not_write(
        self, service: SlotMutationService, repository
    ) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16], assignments=[1, 2])

        views = service.reorder_slots("py", [0, 1])

        assert len(views) == 2
        assert repository.writes == []

    @pytest.mark.parametrize("new_order", [[0, 1], [0, 0, 1], [0, 1, 5], ["a", 0, 1]])
    def test_invalid_permutation(
        self, service: SlotMutationService, repository, new_order: list
    ) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16, FRIDAY_18])

        with pytest.raises(InvalidPermutationError):
            service.reorder_slots("py", new_order)

    def test_missing_order(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14])

        with pytest.raises(MissingFieldError):
            service.reorder_slots("py", None)

    def test_moving_enrolled_slot_blocked(
        self, service: SlotMutationService, repository
    ) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16, FRIDAY_18], assignments=[1])

        with pytest.raises(SlotHasStudentsError) as exc_info:
            service.reorder_slots("py", [1, 0, 2])

        assert exc_info.value.display_numbers == [1]
        assert repository.writes == []

    def test_enrolled_slot_that_stays_put_allows_reorder(
        self, service: SlotMutationService, repository
    ) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16, FRIDAY_18], assignments=[1, 1])

        views = service.reorder_slots("py", [0, 2, 1])

        assert [v.weekday for v in views] == ["monday", "friday", "wednesday"]
        assert views[0].current_enrollment == 2


@pytest.mark.unit
class TestDeleteSlot:
    """Tests for delete_slot."""

    def test_delete_shifts_later_slots(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16, FRIDAY_18])

        views = service.delete_slot("py", 0)

        assert [(v.index, v.display_number, v.weekday) for v in views] == [
            (0, 1, "wednesday"),
            (1, 2, "friday"),
        ]

    def test_delete_with_students_blocked(
        self, service: SlotMutationService, repository
    ) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16, FRIDAY_18], assignments=[2])

        with pytest.raises(SlotHasStudentsError):
            service.delete_slot("py", 1)

        assert len(repository.courses["py"].slots) == 3

    def test_delete_out_of_range(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14])

        with pytest.raises(SlotNotFoundError):
            service.delete_slot("py", 1)

    @pytest.mark.parametrize("index", [None, -1])
    def test_delete_missing_index(
        self, service: SlotMutationService, repository, index: int | None
    ) -> None:
        repository.add("py", [MONDAY_14])

        with pytest.raises(MissingFieldError):
            service.delete_slot("py", index)


@pytest.mark.unit
class TestErrorTranslation:
    """Tests for repository error translation."""

    def test_read_failure_is_upstream_error(
        self, service: SlotMutationService, repository
    ) -> None:
        repository.fail_reads = ContentStoreError("bad gateway", status_code=502)

        with pytest.raises(UpstreamError) as exc_info:
            service.list_slots("py")

        assert not isinstance(exc_info.value, PersistenceError)

    def test_timeout(self, service: SlotMutationService, repository) -> None:
        repository.add("py")
        repository.fail_writes = ContentStoreTimeoutError("slow")

        with pytest.raises(UpstreamTimeoutError):
            service.add_slot("py", "monday", "14:00")

    def test_stale_write_is_conflict(self, service: SlotMutationService, repository) -> None:
        repository.add("py")
        repository.fail_writes = StaleCourseError("changed", status_code=409)

        with pytest.raises(ConflictError):
            service.add_slot("py", "monday", "14:00")

    def test_concurrent_change_is_conflict(
        self, service: SlotMutationService, repository
    ) -> None:
        repository.add("py", [MONDAY_14])
        original_load = repository.load_course

        def load_then_bump(course_id: str):
            record = original_load(course_id)
            repository.courses[course_id].version = "99"
            return record

        repository.load_course = load_then_bump

        with pytest.raises(ConflictError):
            service.delete_slot("py", 0)

        assert len(repository.courses["py"].slots) == 1


@pytest.mark.unit
class TestAvailability:
    """Tests for availability and admission."""

    def test_open_course(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16], assignments=[1] * 15 + [2] * 3)

        result = service.availability("py")

        assert result.is_full is False
        assert result.active_display_number == 2
        assert result.available_seats == 12
        assert result.badge is None

    def test_full_course(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14], assignments=[1] * 15, badge="poucas_vagas")

        result = service.availability("py")

        assert result.is_full is True
        assert result.active_display_number is None
        assert result.badge == BadgeDecision(Badge.FULLY_BOOKED)

    def test_days_remaining_badge_uses_clock(
        self, service: SlotMutationService, repository
    ) -> None:
        repository.add(
            "py", [MONDAY_14], badge="dias_faltantes", start_date=date(2025, 3, 17)
        )

        assert service.availability("py").badge == BadgeDecision(Badge.DAYS_REMAINING, days=7)

    def test_empty_course_is_not_full(self, service: SlotMutationService, repository) -> None:
        repository.add("py")

        result = service.availability("py")

        assert result.is_full is False
        assert result.active_display_number is None

    def test_admit_picks_active_slot(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16], assignments=[1] * 15)

        assert service.admit("py").display_number == 2

    def test_admit_full_course(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14], assignments=[1] * 15)

        with pytest.raises(CourseFullError):
            service.admit("py")

    def test_admit_requested_full_slot(self, service: SlotMutationService, repository) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16], assignments=[1] * 15)

        with pytest.raises(SlotFullError):
            service.admit("py", 1)
        assert service.admit("py", 2).display_number == 2

    @pytest.mark.parametrize("number", [0, 3])
    def test_admit_unknown_slot(
        self, service: SlotMutationService, repository, number: int
    ) -> None:
        repository.add("py", [MONDAY_14, WEDNESDAY_16])

        with pytest.raises(SlotNotFoundError):
            service.admit("py", number)

    def test_custom_capacity(self, repository) -> None:
        repository.add("py", [MONDAY_14], assignments=[1] * 5)
        service = SlotMutationService(SlotStore(repository), settings=Settings(max_capacity=5))

        assert service.list_slots("py")[0].is_full is True

    def test_schedule_options(self, service: SlotMutationService, repository) -> None:
        repository.options = ScheduleOptions(times=["09:00"])

        assert service.schedule_options().times == ["09:00"]

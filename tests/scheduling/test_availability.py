import pytest
from datetime import date, time, timedelta

from schedulehub.services.scheduling.types import (
    AvailabilityRecord,
    AvailabilityType,
    AvailabilityPriority,
)
from schedulehub.services.scheduling.availability import (
    times_overlap,
    coverage_percentage,
    record_applies_on,
    is_vetoed,
    evaluate_availability,
)

from conftest import get_test_monday


def recurring(day_of_week: int, start: time, end: time, **kwargs) -> AvailabilityRecord:
    return AvailabilityRecord(
        employee_id=1,
        availability_type=AvailabilityType.RECURRING,
        day_of_week=day_of_week,
        start_time=start,
        end_time=end,
        **kwargs,
    )


def unavailable_on(day: date, start: time, end: time) -> AvailabilityRecord:
    return AvailabilityRecord(
        employee_id=1,
        availability_type=AvailabilityType.UNAVAILABLE,
        specific_date=day,
        start_time=start,
        end_time=end,
        priority=AvailabilityPriority.UNAVAILABLE,
    )


class TestTimesOverlap:
    def test_no_overlap(self):
        assert times_overlap(time(8, 0), time(10, 0), time(12, 0), time(14, 0)) is False

    def test_adjacent_no_overlap(self):
        assert times_overlap(time(8, 0), time(12, 0), time(12, 0), time(16, 0)) is False

    def test_overlap(self):
        assert times_overlap(time(8, 0), time(14, 0), time(12, 0), time(18, 0)) is True


class TestCoveragePercentage:
    def test_half_covered(self):
        assert coverage_percentage(time(6, 0), time(13, 0), time(9, 0), time(17, 0)) == pytest.approx(50.0)

    def test_full_containment(self):
        assert coverage_percentage(time(6, 0), time(20, 0), time(9, 0), time(17, 0)) == 100.0

    def test_disjoint(self):
        assert coverage_percentage(time(18, 0), time(20, 0), time(9, 0), time(17, 0)) == 0.0


class TestRecordAppliesOn:
    def test_recurring_matches_weekday(self):
        monday = get_test_monday()
        assert record_applies_on(recurring(1, time(9, 0), time(17, 0)), monday) is True
        assert record_applies_on(recurring(2, time(9, 0), time(17, 0)), monday) is False

    def test_effective_window(self):
        monday = get_test_monday()
        record = recurring(1, time(9, 0), time(17, 0), effective_from=monday + timedelta(days=1))
        assert record_applies_on(record, monday) is False
        assert record_applies_on(record, monday + timedelta(days=7)) is True

        record = recurring(1, time(9, 0), time(17, 0), effective_to=monday - timedelta(days=1))
        assert record_applies_on(record, monday) is False

    def test_dated_record_matches_exact_date(self):
        monday = get_test_monday()
        record = unavailable_on(monday, time(9, 0), time(17, 0))
        assert record_applies_on(record, monday) is True
        assert record_applies_on(record, monday + timedelta(days=7)) is False


class TestEvaluateAvailability:
    def test_full_mode_requires_containment(self):
        monday = get_test_monday()
        records = [recurring(1, time(10, 0), time(18, 0))]
        assert evaluate_availability(records, monday, time(9, 0), time(17, 0)) is None

    def test_full_mode_containment_gives_slot_window(self):
        monday = get_test_monday()
        records = [recurring(1, time(8, 0), time(18, 0))]
        match = evaluate_availability(records, monday, time(9, 0), time(17, 0))
        assert match.start_time == time(9, 0)
        assert match.end_time == time(17, 0)
        assert match.coverage_percentage == 100.0

    def test_partial_mode_clips_to_intersection(self):
        monday = get_test_monday()
        records = [recurring(1, time(6, 0), time(13, 0))]
        match = evaluate_availability(records, monday, time(9, 0), time(17, 0), allow_partial=True)
        assert match.start_time == time(9, 0)
        assert match.end_time == time(13, 0)
        assert match.coverage_percentage == pytest.approx(50.0)

    def test_partial_mode_best_record_wins(self):
        monday = get_test_monday()
        records = [
            recurring(1, time(15, 0), time(20, 0)),
            recurring(1, time(7, 0), time(13, 0)),
        ]
        match = evaluate_availability(records, monday, time(9, 0), time(17, 0), allow_partial=True)
        assert match.start_time == time(9, 0)
        assert match.end_time == time(13, 0)

    def test_wrong_weekday_ignored(self):
        monday = get_test_monday()
        records = [recurring(2, time(0, 0), time(23, 59))]
        assert evaluate_availability(records, monday, time(9, 0), time(17, 0), allow_partial=True) is None

    def test_unavailable_vetoes_in_both_modes(self):
        monday = get_test_monday()
        records = [
            recurring(1, time(6, 0), time(22, 0)),
            unavailable_on(monday, time(12, 0), time(13, 0)),
        ]
        assert is_vetoed(records, monday, time(9, 0), time(17, 0)) is True
        assert evaluate_availability(records, monday, time(9, 0), time(17, 0)) is None
        assert evaluate_availability(records, monday, time(9, 0), time(17, 0), allow_partial=True) is None

    def test_unavailable_outside_slot_does_not_veto(self):
        monday = get_test_monday()
        records = [
            recurring(1, time(6, 0), time(22, 0)),
            unavailable_on(monday, time(18, 0), time(20, 0)),
        ]
        assert evaluate_availability(records, monday, time(9, 0), time(17, 0)) is not None

    def test_unavailable_priority_on_recurring_record_vetoes(self):
        monday = get_test_monday()
        records = [
            recurring(1, time(6, 0), time(22, 0)),
            recurring(1, time(9, 0), time(10, 0), priority=AvailabilityPriority.UNAVAILABLE),
        ]
        assert evaluate_availability(records, monday, time(9, 0), time(17, 0)) is None

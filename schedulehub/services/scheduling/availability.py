"""
Availability checking utilities.
Determines if, and for which window, a worker can cover a time slot.
"""

from datetime import date, time
from typing import Optional

from .dates import availability_day_of_week
from .types import AvailabilityMatch, AvailabilityRecord, AvailabilityType


def times_overlap(
    start1: time, end1: time,
    start2: time, end2: time
) -> bool:
    """Check if two time ranges overlap (same day). Touching ranges do not."""
    return start1 < end2 and start2 < end1


def window_contains(outer_start: time, outer_end: time, inner_start: time, inner_end: time) -> bool:
    return outer_start <= inner_start and outer_end >= inner_end


def minutes_of_day(value: time) -> float:
    return value.hour * 60 + value.minute + value.second / 60


def coverage_percentage(
    avail_start: time, avail_end: time,
    slot_start: time, slot_end: time
) -> float:
    """Share of the slot (0-100) that the availability window covers."""
    slot_minutes = minutes_of_day(slot_end) - minutes_of_day(slot_start)
    if slot_minutes <= 0:
        return 0.0
    overlap = (
        minutes_of_day(min(avail_end, slot_end))
        - minutes_of_day(max(avail_start, slot_start))
    )
    if overlap <= 0:
        return 0.0
    return min(100.0, overlap / slot_minutes * 100.0)


def record_applies_on(record: AvailabilityRecord, slot_date: date) -> bool:
    """Check date applicability: effective bounds, then weekday or exact date."""
    if record.effective_from is not None and record.effective_from > slot_date:
        return False
    if record.effective_to is not None and record.effective_to < slot_date:
        return False

    if record.availability_type == AvailabilityType.RECURRING:
        return record.day_of_week == availability_day_of_week(slot_date)
    return record.specific_date == slot_date


def is_vetoed(
    records: list[AvailabilityRecord],
    slot_date: date,
    slot_start: time,
    slot_end: time
) -> bool:
    """An unavailable record overlapping the slot rules the worker out entirely."""
    return any(
        record.is_veto
        and record_applies_on(record, slot_date)
        and times_overlap(record.start_time, record.end_time, slot_start, slot_end)
        for record in records
    )


def evaluate_availability(
    records: list[AvailabilityRecord],
    slot_date: date,
    slot_start: time,
    slot_end: time,
    allow_partial: bool = False,
) -> Optional[AvailabilityMatch]:
    """
    Work out what a worker can cover of one slot.

    Full containment by any record wins in either mode. In partial mode the
    best overlapping record is used (highest coverage, then earliest start)
    and the match window is the intersection with the slot.

    Returns:
        AvailabilityMatch, or None if the worker cannot take the slot
    """
    if is_vetoed(records, slot_date, slot_start, slot_end):
        return None

    best: Optional[AvailabilityMatch] = None
    for record in records:
        if record.is_veto or not record_applies_on(record, slot_date):
            continue

        if window_contains(record.start_time, record.end_time, slot_start, slot_end):
            return AvailabilityMatch(slot_start, slot_end, 100.0)

        if not allow_partial:
            continue
        if not times_overlap(record.start_time, record.end_time, slot_start, slot_end):
            continue

        match = AvailabilityMatch(
            start_time=max(record.start_time, slot_start),
            end_time=min(record.end_time, slot_end),
            coverage_percentage=coverage_percentage(record.start_time, record.end_time, slot_start, slot_end),
        )
        if best is None or (
            match.coverage_percentage > best.coverage_percentage
            or (match.coverage_percentage == best.coverage_percentage and match.start_time < best.start_time)
        ):
            best = match

    return best

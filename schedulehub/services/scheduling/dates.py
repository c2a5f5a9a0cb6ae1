"""
Calendar helpers.

Every date in the engine is a plain calendar date: no timezone, no time part.
Two day-numbering systems are in play and never mixed:
    - availability records use 0=Sunday .. 6=Saturday
    - template day mappings use ISO 1=Monday .. 7=Sunday
"""

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Iterator, Optional, Union

from schedulehub.core.errors import ValidationError

ALL_MAPPING_DAYS = (1, 2, 3, 4, 5, 6, 7)


def to_calendar_date(value: Union[date, datetime, str]) -> date:
    """Normalize a date, datetime (read as UTC) or YYYY-MM-DD string to a calendar date."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            if len(value) != 10:
                raise ValueError(value)
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid date: {value!r}") from exc
    raise ValidationError(f"Invalid date: {value!r}")


def validate_date_range(start: Union[date, datetime, str], end: Union[date, datetime, str]) -> tuple[date, date]:
    start_date = to_calendar_date(start)
    end_date = to_calendar_date(end)
    if end_date < start_date:
        raise ValidationError(
            f"End date {end_date.isoformat()} must be on or after start date {start_date.isoformat()}"
        )
    return start_date, end_date


def availability_day_of_week(value: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return value.isoweekday() % 7


def iso_day_of_week(value: date) -> int:
    """1=Monday .. 7=Sunday."""
    return value.isoweekday()


def iter_dates(start: date, end: date, mapping_days: Optional[Iterable[int]] = None) -> Iterator[date]:
    """Yield every date in [start, end], optionally only those whose mapping day is listed."""
    wanted = set(mapping_days) if mapping_days is not None else None
    current = start
    while current <= end:
        if wanted is None or iso_day_of_week(current) in wanted:
            yield current
        current += timedelta(days=1)


def normalize_day_mapping(mapping: Optional[dict]) -> Optional[dict[int, list[int]]]:
    """
    Coerce a {day: [template_id, ...]} mapping to int keys 1..7 and int ids.
    An empty or missing mapping means "every template on every day" (returns None).
    """
    if not mapping:
        return None

    normalized: dict[int, list[int]] = {}
    for raw_day, template_ids in mapping.items():
        try:
            day = int(raw_day)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid day number in template day mapping: {raw_day!r}") from exc
        if day not in ALL_MAPPING_DAYS:
            raise ValidationError(f"Day numbers in template day mapping must be 1-7, got {day}")
        try:
            normalized[day] = [int(t) for t in (template_ids or [])]
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid template id for day {day}") from exc

    return dict(sorted(normalized.items()))

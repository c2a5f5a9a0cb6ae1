"""
In-memory record of assignments made during one generation run.

Shifts created earlier in the run are skipped by the persisted-shift check
(it ignores the schedule being generated), so this is what stops one worker
being double-booked across templates in the same run.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, time

from .availability import times_overlap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionInterval:
    shift_date: date
    start_time: time
    end_time: time


class GenerationSession:
    """Created per generation call and discarded with it."""

    def __init__(self):
        self._intervals: dict[int, list[SessionInterval]] = defaultdict(list)

    def add(self, employee_id: int, shift_date: date, start_time: time, end_time: time) -> None:
        self._intervals[employee_id].append(SessionInterval(shift_date, start_time, end_time))

    def has_conflict(self, employee_id: int, shift_date: date, start_time: time, end_time: time) -> bool:
        for interval in self._intervals.get(employee_id, []):
            if interval.shift_date != shift_date:
                continue
            if times_overlap(interval.start_time, interval.end_time, start_time, end_time):
                logger.debug(
                    "Session conflict: employee %s on %s, %s-%s overlaps %s-%s",
                    employee_id, shift_date, start_time, end_time,
                    interval.start_time, interval.end_time,
                )
                return True
        return False

    def intervals_for(self, employee_id: int) -> list[SessionInterval]:
        return list(self._intervals.get(employee_id, []))

    def clear(self) -> None:
        self._intervals.clear()

    def __len__(self) -> int:
        return sum(len(v) for v in self._intervals.values())

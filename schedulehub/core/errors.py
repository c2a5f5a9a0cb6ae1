"""
Domain errors raised by the scheduling services.
Routes translate these into HTTP responses; anything else propagates unchanged.
"""

from datetime import date, time
from typing import Any, Optional


class SchedulingError(Exception):
    pass


class ValidationError(SchedulingError):
    """Malformed input (date order, missing ids). Raised before any mutation."""


class NotFoundError(SchedulingError):
    pass


class ConflictError(SchedulingError):
    """State or overlap conflict. `details` carries the structured report, if any."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class OverlappingShiftError(ConflictError):
    """The shifts table overlap guard rejected an insert or an assignment."""

    def __init__(self, employee_id: int, shift_date: date, start_time: time, end_time: time):
        self.employee_id = employee_id
        self.shift_date = shift_date
        self.start_time = start_time
        self.end_time = end_time
        message = (
            f"Cannot create overlapping shift: Employee {employee_id} already has a shift "
            f"overlapping {start_time:%H:%M}-{end_time:%H:%M} on {shift_date.isoformat()}"
        )
        super().__init__(
            message,
            {
                "employee_id": employee_id,
                "shift_date": shift_date.isoformat(),
                "start_time": start_time.strftime("%H:%M"),
                "end_time": end_time.strftime("%H:%M"),
            },
        )

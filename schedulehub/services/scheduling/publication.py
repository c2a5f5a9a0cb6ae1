"""
Publication validator.

A draft may only be published when none of its assigned, non-cancelled shifts
collide with a shift of another published schedule (same employee, same date,
overlapping window).
"""

import logging
from datetime import time
from typing import Any, Optional

from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from schedulehub.core.errors import ConflictError
from schedulehub.db.models.employees import Employees
from schedulehub.db.models.schedules import Schedules, ScheduleStatus
from schedulehub.db.models.shifts import Shifts, ShiftStatus

from .store import get_schedule, find_overlapping_shifts, set_status
from .types import ConflictingShift, OverlapType, PublicationValidation, ShiftConflict

logger = logging.getLogger(__name__)


def get_overlap_type(start1: time, end1: time, start2: time, end2: time) -> OverlapType:
    """Classify how window 1 (the draft shift) relates to window 2 (the published shift)."""
    if start1 <= start2 and end1 >= end2:
        return OverlapType.COMPLETE_OVERLAP
    if start2 <= start1 and end2 >= end1:
        return OverlapType.CONTAINED_BY
    if start1 < end2 and end1 > start2:
        return OverlapType.PARTIAL_END if start1 < start2 else OverlapType.PARTIAL_START
    return OverlapType.ADJACENT


def validate_schedule_for_publication(
    db: Session,
    schedule_id: int,
    organization_id: int,
) -> PublicationValidation:
    """Report every shift of the schedule that collides with a published shift elsewhere."""
    get_schedule(db, schedule_id, organization_id)

    stmt = (
        select(Shifts, Employees)
        .join(Employees, Employees.id == Shifts.employee_id)
        .where(
            and_(
                Shifts.schedule_id == schedule_id,
                Shifts.employee_id.is_not(None),
                Shifts.status != ShiftStatus.CANCELLED,
            )
        )
        .order_by(Shifts.shift_date, Shifts.start_time, Shifts.id)
    )
    rows = db.execute(stmt).all()

    conflicts: list[ShiftConflict] = []
    for shift, employee in rows:
        overlapping = find_overlapping_shifts(
            db,
            shift.employee_id,
            shift.shift_date,
            shift.start_time,
            shift.end_time,
            exclude_schedule_id=schedule_id,
            published_only=True,
        )
        if not overlapping:
            continue

        conflicts.append(ShiftConflict(
            shift_id=shift.id,
            employee_id=employee.id,
            employee_name=employee.full_name,
            employee_number=employee.employee_number,
            shift_date=shift.shift_date,
            start_time=shift.start_time,
            end_time=shift.end_time,
            role_id=shift.role_id,
            conflicting_shifts=[
                ConflictingShift(
                    shift_id=other.id,
                    schedule_id=other_schedule.id,
                    schedule_name=other_schedule.schedule_name,
                    shift_date=other.shift_date,
                    start_time=other.start_time,
                    end_time=other.end_time,
                    role_id=other.role_id,
                    overlap_type=get_overlap_type(shift.start_time, shift.end_time, other.start_time, other.end_time),
                )
                for other, other_schedule in overlapping
            ],
        ))

    if conflicts:
        message = (
            f"Found {len(conflicts)} shift conflicts with published schedules "
            f"that must be resolved before publication."
        )
    else:
        message = "No conflicts detected. Schedule can be published safely."

    return PublicationValidation(
        schedule_id=schedule_id,
        is_valid=not conflicts,
        total_shifts=len(rows),
        conflicting_shifts=len(conflicts),
        message=message,
        conflicts=conflicts,
    )


def build_conflict_report(validation: PublicationValidation) -> dict[str, Any]:
    """Structured details attached to the ConflictError raised by publish_schedule."""
    return {
        "schedule_id": validation.schedule_id,
        "conflict_count": validation.conflicting_shifts,
        "total_shifts": validation.total_shifts,
        "conflicts": [
            {
                "employee": {
                    "id": c.employee_id,
                    "name": c.employee_name,
                    "number": c.employee_number,
                },
                "shift": {
                    "id": c.shift_id,
                    "date": c.shift_date.isoformat(),
                    "start_time": c.start_time.strftime("%H:%M"),
                    "end_time": c.end_time.strftime("%H:%M"),
                    "role_id": c.role_id,
                },
                "conflicts": [
                    {
                        "shift_id": o.shift_id,
                        "schedule_id": o.schedule_id,
                        "schedule_name": o.schedule_name,
                        "overlap_type": o.overlap_type.value,
                        "conflicting_time": f"{o.start_time:%H:%M}-{o.end_time:%H:%M}",
                    }
                    for o in c.conflicting_shifts
                ],
            }
            for c in validation.conflicts
        ],
        "resolution_options": [
            {
                "action": "modify_shifts",
                "description": "Adjust the times of the conflicting shifts in this schedule",
            },
            {
                "action": "reassign_workers",
                "description": "Assign different workers to the conflicting shifts",
            },
            {
                "action": "unpublish_conflicts",
                "description": "Unpublish the conflicting schedules first",
                "warning": "Workers may already rely on the published schedules",
            },
        ],
    }


def publish_schedule(
    db: Session,
    schedule_id: int,
    organization_id: int,
    actor_id: Optional[int] = None,
) -> Schedules:
    """
    Publish a draft schedule.

    Locks the schedule row, re-validates, and either moves it to published
    or raises ConflictError with the conflict report (status unchanged).
    Publishing an already-published schedule is a no-op.
    """
    try:
        schedule = get_schedule(db, schedule_id, organization_id, for_update=True)
        if schedule.status == ScheduleStatus.PUBLISHED:
            logger.info("Schedule %s is already published", schedule_id)
            db.commit()
            return schedule

        validation = validate_schedule_for_publication(db, schedule_id, organization_id)
        if not validation.is_valid:
            logger.info(
                "Publication of schedule %s blocked: %d conflicting shifts",
                schedule_id, validation.conflicting_shifts,
            )
            raise ConflictError(
                f"Cannot publish schedule: {validation.message}",
                build_conflict_report(validation),
            )

        set_status(db, schedule, ScheduleStatus.PUBLISHED, actor_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Schedule %s published by %s", schedule_id, actor_id)
    return schedule

"""
Schedule store.
Persistence for schedules and shifts. Nothing here commits; callers own the transaction.
"""

import logging
import sqlite3
from datetime import date, datetime, time, timezone
from typing import Optional

from sqlalchemy import select, and_, delete
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from schedulehub.core.errors import NotFoundError, ConflictError, OverlappingShiftError
from schedulehub.db.models.schedules import Schedules, ScheduleStatus
from schedulehub.db.models.shifts import Shifts, ShiftStatus, ShiftType

from .types import NewShift, ScheduleMetaUpdate

logger = logging.getLogger(__name__)

# SQLSTATE raised by the PostgreSQL overlap trigger (exclusion_violation)
PG_OVERLAP_SQLSTATE = "23P01"
# extended result code for RAISE() inside a SQLite trigger
SQLITE_CONSTRAINT_TRIGGER = getattr(sqlite3, "SQLITE_CONSTRAINT_TRIGGER", 1811)


def create_schedule(
    db: Session,
    organization_id: int,
    schedule_name: str,
    start_date: date,
    end_date: date,
    description: Optional[str] = None,
    created_by: Optional[int] = None,
) -> Schedules:
    schedule = Schedules(
        organization_id=organization_id,
        schedule_name=schedule_name,
        description=description,
        start_date=start_date,
        end_date=end_date,
        status=ScheduleStatus.DRAFT,
        version=1,
        created_by=created_by,
        updated_by=created_by,
    )
    db.add(schedule)
    db.flush()
    return schedule


def get_schedule(
    db: Session,
    schedule_id: int,
    organization_id: int,
    for_update: bool = False,
) -> Schedules:
    """Load a schedule within a tenant, optionally locking the row. Raises NotFoundError."""
    stmt = select(Schedules).where(
        and_(
            Schedules.id == schedule_id,
            Schedules.organization_id == organization_id,
        )
    )
    if for_update:
        stmt = stmt.with_for_update()

    schedule = db.execute(stmt).scalar_one_or_none()
    if schedule is None:
        raise NotFoundError(f"Schedule {schedule_id} not found")
    return schedule


def update_schedule_meta(schedule: Schedules, update: ScheduleMetaUpdate, actor_id: Optional[int]) -> Schedules:
    if update.schedule_name is not None:
        schedule.schedule_name = update.schedule_name
    if update.update_description:
        schedule.description = update.description
    if update.start_date is not None:
        schedule.start_date = update.start_date
    if update.end_date is not None:
        schedule.end_date = update.end_date
    schedule.updated_by = actor_id
    return schedule


def bump_version(schedule: Schedules) -> int:
    schedule.version = (schedule.version or 0) + 1
    return schedule.version


def set_status(db: Session, schedule: Schedules, status: ScheduleStatus, actor_id: Optional[int]) -> Schedules:
    schedule.status = status
    schedule.updated_by = actor_id
    if status == ScheduleStatus.PUBLISHED:
        schedule.published_at = datetime.now(timezone.utc)
        schedule.published_by = actor_id
    db.flush()
    return schedule


def is_overlap_violation(exc: DBAPIError) -> bool:
    """Recognise the shifts overlap guard by error code, per backend."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == PG_OVERLAP_SQLSTATE:
        return True
    return getattr(orig, "sqlite_errorcode", None) == SQLITE_CONSTRAINT_TRIGGER


def _flush_guarded(
    db: Session,
    employee_id: Optional[int],
    shift_date: date,
    start_time: time,
    end_time: time,
) -> None:
    """Flush pending shift writes, turning an overlap-trigger violation into OverlappingShiftError."""
    try:
        db.flush()
    except DBAPIError as exc:
        # both backends surface the guard as IntegrityError (23P01 is an integrity class SQLSTATE)
        if not is_overlap_violation(exc):
            raise
        logger.warning(
            "Overlap guard rejected shift for employee %s on %s %s-%s",
            employee_id, shift_date, start_time, end_time,
        )
        raise OverlappingShiftError(employee_id, shift_date, start_time, end_time) from exc


def insert_shift(db: Session, new_shift: NewShift) -> Shifts:
    """Add a shift and flush so the overlap trigger fires inside the running transaction."""
    shift = Shifts(
        organization_id=new_shift.organization_id,
        schedule_id=new_shift.schedule_id,
        shift_date=new_shift.shift_date,
        start_time=new_shift.start_time,
        end_time=new_shift.end_time,
        employee_id=new_shift.employee_id,
        role_id=new_shift.role_id,
        station_id=new_shift.station_id,
        template_id=new_shift.template_id,
        status=ShiftStatus.SCHEDULED,
        shift_type=ShiftType.PARTIAL if new_shift.is_partial else ShiftType.REGULAR,
        break_duration_minutes=new_shift.break_duration_minutes,
        break_paid=new_shift.break_paid,
        notes=new_shift.notes,
        created_by=new_shift.created_by,
    )
    db.add(shift)
    _flush_guarded(db, new_shift.employee_id, new_shift.shift_date, new_shift.start_time, new_shift.end_time)
    return shift


def delete_shifts_for_schedule(db: Session, schedule_id: int) -> int:
    """Delete every shift of a schedule regardless of status. Returns the row count."""
    db.flush()
    result = db.execute(
        delete(Shifts).where(Shifts.schedule_id == schedule_id).execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def find_shifts_on_date(
    db: Session,
    employee_ids: list[int],
    shift_date: date,
    exclude_schedule_id: Optional[int] = None,
) -> list[Shifts]:
    """Non-cancelled shifts of the given employees on one date, for batch overlap checks."""
    if not employee_ids:
        return []

    conditions = [
        Shifts.employee_id.in_(employee_ids),
        Shifts.shift_date == shift_date,
        Shifts.status != ShiftStatus.CANCELLED,
    ]
    if exclude_schedule_id is not None:
        conditions.append(Shifts.schedule_id != exclude_schedule_id)

    stmt = select(Shifts).where(and_(*conditions)).order_by(Shifts.employee_id, Shifts.start_time)
    return list(db.execute(stmt).scalars().all())


def find_overlapping_shifts(
    db: Session,
    employee_id: int,
    shift_date: date,
    start_time: time,
    end_time: time,
    exclude_schedule_id: Optional[int] = None,
    published_only: bool = False,
) -> list[tuple[Shifts, Schedules]]:
    """Non-cancelled shifts of one employee that intersect [start_time, end_time) on a date."""
    conditions = [
        Shifts.employee_id == employee_id,
        Shifts.shift_date == shift_date,
        Shifts.status != ShiftStatus.CANCELLED,
        Shifts.start_time < end_time,
        Shifts.end_time > start_time,
    ]
    if exclude_schedule_id is not None:
        conditions.append(Shifts.schedule_id != exclude_schedule_id)
    if published_only:
        conditions.append(Schedules.status == ScheduleStatus.PUBLISHED)

    stmt = (
        select(Shifts, Schedules)
        .join(Schedules, Schedules.id == Shifts.schedule_id)
        .where(and_(*conditions))
        .order_by(Shifts.start_time, Shifts.id)
    )
    return [(row[0], row[1]) for row in db.execute(stmt).all()]


def list_schedule_shifts(db: Session, schedule_id: int, include_cancelled: bool = True) -> list[Shifts]:
    stmt = select(Shifts).where(Shifts.schedule_id == schedule_id)
    if not include_cancelled:
        stmt = stmt.where(Shifts.status != ShiftStatus.CANCELLED)
    stmt = stmt.order_by(Shifts.shift_date, Shifts.start_time, Shifts.id)
    return list(db.execute(stmt).scalars().all())


def list_schedules(
    db: Session,
    organization_id: int,
    status: Optional[ScheduleStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
) -> list[Schedules]:
    """Schedules of a tenant, optionally filtered by status and by overlap with a date window."""
    conditions = [Schedules.organization_id == organization_id]
    if status is not None:
        conditions.append(Schedules.status == status)
    if start_date is not None:
        conditions.append(Schedules.end_date >= start_date)
    if end_date is not None:
        conditions.append(Schedules.start_date <= end_date)

    stmt = (
        select(Schedules)
        .where(and_(*conditions))
        .order_by(Schedules.start_date.desc(), Schedules.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def get_shift(db: Session, shift_id: int, organization_id: int) -> Shifts:
    """Load a shift within a tenant. Raises NotFoundError."""
    stmt = select(Shifts).where(
        and_(
            Shifts.id == shift_id,
            Shifts.organization_id == organization_id,
        )
    )
    shift = db.execute(stmt).scalar_one_or_none()
    if shift is None:
        raise NotFoundError(f"Shift {shift_id} not found")
    return shift


def assign_employee(db: Session, shift: Shifts, employee_id: int) -> Shifts:
    """Put a worker on a shift and confirm it. The update trigger guards overlaps."""
    shift.employee_id = employee_id
    shift.status = ShiftStatus.CONFIRMED
    _flush_guarded(db, employee_id, shift.shift_date, shift.start_time, shift.end_time)
    return shift


def unassign_employee(db: Session, shift: Shifts) -> Shifts:
    shift.employee_id = None
    shift.status = ShiftStatus.SCHEDULED
    db.flush()
    return shift


def list_employee_shifts(
    db: Session,
    employee_id: int,
    organization_id: int,
    start_date: date,
    end_date: date,
) -> list[Shifts]:
    """Every shift of one worker between two dates inclusive, across schedules."""
    stmt = (
        select(Shifts)
        .where(
            and_(
                Shifts.employee_id == employee_id,
                Shifts.organization_id == organization_id,
                Shifts.shift_date >= start_date,
                Shifts.shift_date <= end_date,
            )
        )
        .order_by(Shifts.shift_date, Shifts.start_time, Shifts.id)
    )
    return list(db.execute(stmt).scalars().all())


def cancel_shift(
    db: Session,
    shift_id: int,
    organization_id: int,
    reason: Optional[str] = None,
) -> Shifts:
    shift = get_shift(db, shift_id, organization_id)
    if shift.status in (ShiftStatus.COMPLETED, ShiftStatus.CANCELLED):
        raise ConflictError(f"Shift {shift_id} is already {shift.status.value} and cannot be cancelled")

    shift.status = ShiftStatus.CANCELLED
    shift.cancellation_reason = reason
    db.flush()
    return shift

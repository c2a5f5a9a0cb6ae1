from sqlalchemy import Integer, Boolean, Date, DateTime, Time, Text, ForeignKey, DDL, Enum as SQLEnum, Index, event, func
from datetime import date, datetime, time
from sqlalchemy.orm import Mapped, mapped_column
from enum import Enum
from typing import Optional
from schedulehub.db.database import Base


class ShiftStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class ShiftType(str, Enum):
    REGULAR = "regular"
    PARTIAL = "partial"


class Shifts(Base):
    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    organization_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    schedule_id: Mapped[int] = mapped_column(Integer, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False)
    shift_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    employee_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id"), nullable=False)
    station_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("stations.id"), nullable=True)
    template_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("shift_templates.id", ondelete="SET NULL"), nullable=True)
    status: Mapped[ShiftStatus] = mapped_column(
        SQLEnum(ShiftStatus, name="shift_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ShiftStatus.SCHEDULED,
    )
    shift_type: Mapped[ShiftType] = mapped_column(
        SQLEnum(ShiftType, name="shift_type_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ShiftType.REGULAR,
    )
    break_duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    break_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_shifts_schedule", "schedule_id"),
        Index("ix_shifts_employee_date", "employee_id", "shift_date"),
        {"sqlite_autoincrement": True},
    )


# Overlap guard: no two non-cancelled shifts of one employee on the same date
# may intersect. PostgreSQL raises SQLSTATE 23P01, SQLite a trigger constraint.

_OVERLAP_CONDITION = """
    s.employee_id = NEW.employee_id
    AND s.shift_date = NEW.shift_date
    AND s.status != 'cancelled'
    AND s.start_time < NEW.end_time
    AND NEW.start_time < s.end_time
"""

SQLITE_OVERLAP_INSERT_TRIGGER = DDL(f"""
CREATE TRIGGER trg_shifts_prevent_overlap_insert
BEFORE INSERT ON shifts
FOR EACH ROW
WHEN NEW.employee_id IS NOT NULL AND NEW.status != 'cancelled'
BEGIN
    SELECT RAISE(ABORT, 'employee already has an overlapping shift')
    WHERE EXISTS (SELECT 1 FROM shifts s WHERE {_OVERLAP_CONDITION});
END
""")

SQLITE_OVERLAP_UPDATE_TRIGGER = DDL(f"""
CREATE TRIGGER trg_shifts_prevent_overlap_update
BEFORE UPDATE OF employee_id, shift_date, start_time, end_time, status ON shifts
FOR EACH ROW
WHEN NEW.employee_id IS NOT NULL AND NEW.status != 'cancelled'
BEGIN
    SELECT RAISE(ABORT, 'employee already has an overlapping shift')
    WHERE EXISTS (SELECT 1 FROM shifts s WHERE s.id != NEW.id AND {_OVERLAP_CONDITION});
END
""")

POSTGRES_OVERLAP_FUNCTION = DDL(f"""
CREATE OR REPLACE FUNCTION prevent_shift_overlap() RETURNS trigger AS $$
BEGIN
    IF NEW.employee_id IS NOT NULL AND NEW.status <> 'cancelled' AND EXISTS (
        SELECT 1 FROM shifts s WHERE s.id IS DISTINCT FROM NEW.id AND {_OVERLAP_CONDITION}
    ) THEN
        RAISE EXCEPTION 'Employee %% already has an overlapping shift on %%', NEW.employee_id, NEW.shift_date
            USING ERRCODE = '23P01';
    END IF;
    RETURN NEW;
END;
$$ LANGUAGE plpgsql
""")

POSTGRES_OVERLAP_TRIGGER = DDL("""
CREATE TRIGGER trg_shifts_prevent_overlap
BEFORE INSERT OR UPDATE ON shifts
FOR EACH ROW EXECUTE FUNCTION prevent_shift_overlap()
""")

event.listen(Shifts.__table__, "after_create", SQLITE_OVERLAP_INSERT_TRIGGER.execute_if(dialect="sqlite"))
event.listen(Shifts.__table__, "after_create", SQLITE_OVERLAP_UPDATE_TRIGGER.execute_if(dialect="sqlite"))
event.listen(Shifts.__table__, "after_create", POSTGRES_OVERLAP_FUNCTION.execute_if(dialect="postgresql"))
event.listen(Shifts.__table__, "after_create", POSTGRES_OVERLAP_TRIGGER.execute_if(dialect="postgresql"))

from typing import Optional
from enum import Enum
from datetime import date, datetime, time
from sqlalchemy import CheckConstraint, Date, DateTime, Enum as SQLEnum, ForeignKey, Integer, Text, Time, func
from sqlalchemy.orm import Mapped, mapped_column

from schedulehub.db.database import Base


class AvailabilityType(str, Enum):
    RECURRING = "recurring"
    ONE_TIME = "one_time"
    UNAVAILABLE = "unavailable"


class AvailabilityPriority(str, Enum):
    REQUIRED = "required"
    PREFERRED = "preferred"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class WorkerAvailability(Base):
    __tablename__ = "worker_availability"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    organization_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    availability_type: Mapped[AvailabilityType] = mapped_column(
        SQLEnum(AvailabilityType, name="availability_type_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    day_of_week: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # 0-6, 0 = Sunday
    specific_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    effective_from: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    effective_to: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    priority: Mapped[AvailabilityPriority] = mapped_column(
        SQLEnum(AvailabilityPriority, name="availability_priority_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=AvailabilityPriority.PREFERRED,
    )
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("day_of_week IS NULL OR (day_of_week BETWEEN 0 AND 6)", name="ck_worker_availability_day"),
        CheckConstraint(
            "(availability_type = 'recurring' AND day_of_week IS NOT NULL AND specific_date IS NULL) OR "
            "(availability_type IN ('one_time', 'unavailable') AND specific_date IS NOT NULL AND day_of_week IS NULL)",
            name="ck_worker_availability_kind",
        ),
    )

from sqlalchemy import Integer, Boolean, DateTime, ForeignKey, Text, func, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from enum import Enum
from typing import Optional
from schedulehub.db.database import Base


class SchedulingStatus(str, Enum):
    ACTIVE = "active"
    TEMPORARY_UNAVAILABLE = "temporary_unavailable"
    RESTRICTED = "restricted"


class WorkerSchedulingConfig(Base):
    """Scheduling flags for an employee. No row means schedulable."""
    __tablename__ = "worker_scheduling_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    organization_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False)
    is_schedulable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    scheduling_status: Mapped[SchedulingStatus] = mapped_column(
        SQLEnum(SchedulingStatus, name="scheduling_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SchedulingStatus.ACTIVE,
    )
    scheduling_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

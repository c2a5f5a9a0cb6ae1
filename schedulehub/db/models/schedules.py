from sqlalchemy import Integer, String, Text, Date, DateTime, CheckConstraint, Enum as SQLEnum, Index, func
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime
from enum import Enum
from typing import Optional
from schedulehub.db.database import Base


class ScheduleStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Schedules(Base):
    __tablename__ = "schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    organization_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    schedule_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[ScheduleStatus] = mapped_column(
        SQLEnum(ScheduleStatus, name="schedule_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ScheduleStatus.DRAFT,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    published_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_schedules_date_order"),
        Index("ix_schedules_org_dates", "organization_id", "start_date", "end_date"),
    )

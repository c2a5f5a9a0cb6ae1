from pydantic import BaseModel, Field
from datetime import date, datetime, time
from typing import Optional
from schedulehub.db.models.shifts import ShiftStatus, ShiftType
from schedulehub.schemas.schedules import ScheduleResponse


class ShiftBase(BaseModel):
    schedule_id: int
    shift_date: date
    start_time: time
    end_time: time
    employee_id: Optional[int]
    role_id: int
    station_id: Optional[int]
    template_id: Optional[int]


class ShiftCreate(BaseModel):
    schedule_id: int
    shift_date: date
    start_time: time
    end_time: time
    role_id: int
    employee_id: Optional[int] = None
    station_id: Optional[int] = None
    break_duration_minutes: int = Field(default=0, ge=0)
    break_paid: bool = True
    notes: Optional[str] = None
    actor_id: Optional[int] = None


class ShiftAssign(BaseModel):
    employee_id: int


class ShiftCancel(BaseModel):
    reason: Optional[str] = None


class ShiftResponse(ShiftBase):
    id: int
    organization_id: int
    status: ShiftStatus
    shift_type: ShiftType
    break_duration_minutes: int
    break_paid: bool
    notes: Optional[str]
    cancellation_reason: Optional[str]
    created_by: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ScheduleWithShiftsResponse(BaseModel):
    schedule: ScheduleResponse
    shifts: list[ShiftResponse]

from pydantic import BaseModel, Field
from datetime import date, datetime, time
from typing import Optional
from schedulehub.db.models.schedules import ScheduleStatus


class ScheduleBase(BaseModel):
    schedule_name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    start_date: date
    end_date: date


class ScheduleCreate(ScheduleBase):
    actor_id: Optional[int] = None


class ScheduleAutoGenerate(ScheduleBase):
    template_ids: list[int] = Field(min_length=1)
    # {1..7 (Monday=1): [template_id, ...]}; omitted = every template on every day
    template_day_mapping: Optional[dict[int, list[int]]] = None
    allow_partial_time: bool = False
    actor_id: Optional[int] = None


class ScheduleGenerationUpdate(BaseModel):
    schedule_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    template_ids: list[int] = Field(min_length=1)
    template_day_mapping: Optional[dict[int, list[int]]] = None
    allow_partial_time: bool = False
    actor_id: Optional[int] = None


class PublishRequest(BaseModel):
    actor_id: Optional[int] = None


class ScheduleResponse(ScheduleBase):
    id: int
    organization_id: int
    status: ScheduleStatus
    version: int
    published_at: Optional[datetime]
    published_by: Optional[int]
    created_by: Optional[int]
    updated_by: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProcessedTemplateResponse(BaseModel):
    id: int
    name: Optional[str]
    status: str

    class Config:
        from_attributes = True


class TemplateProcessingResponse(BaseModel):
    total_requested: int
    valid_templates: int
    missing_templates: int
    processed_templates: list[ProcessedTemplateResponse]

    class Config:
        from_attributes = True


class GenerationSummaryResponse(BaseModel):
    total_shifts_requested: int
    shifts_generated: int
    partial_coverage: int
    no_coverage: int
    warnings: list[str]
    template_processing: TemplateProcessingResponse

    class Config:
        from_attributes = True


class GenerationResponse(BaseModel):
    schedule: ScheduleResponse
    generation_summary: GenerationSummaryResponse

    class Config:
        from_attributes = True


class ConflictingShiftResponse(BaseModel):
    shift_id: int
    schedule_id: int
    schedule_name: str
    shift_date: date
    start_time: time
    end_time: time
    role_id: int
    overlap_type: str

    class Config:
        from_attributes = True


class ShiftConflictResponse(BaseModel):
    shift_id: int
    employee_id: int
    employee_name: str
    employee_number: Optional[str]
    shift_date: date
    start_time: time
    end_time: time
    role_id: int
    conflicting_shifts: list[ConflictingShiftResponse]

    class Config:
        from_attributes = True


class PublicationValidationResponse(BaseModel):
    schedule_id: int
    is_valid: bool
    total_shifts: int
    conflicting_shifts: int
    message: str
    conflicts: list[ShiftConflictResponse]

    class Config:
        from_attributes = True

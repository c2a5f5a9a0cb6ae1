"""
Schedule service - orchestration layer.

Each public operation here is one transaction: it commits on success and
rolls back everything (schedule row, metadata, version, shifts) on any error.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from schedulehub.core.errors import ConflictError, NotFoundError, ValidationError
from schedulehub.db.models.employees import EmploymentStatus
from schedulehub.db.models.schedules import Schedules, ScheduleStatus
from schedulehub.db.models.shifts import Shifts, ShiftStatus
from schedulehub.schemas.schedules import ScheduleAutoGenerate, ScheduleGenerationUpdate, ScheduleCreate
from schedulehub.schemas.shifts import ShiftCreate

from . import store
from .data_loader import load_templates, get_employee, get_role
from .dates import normalize_day_mapping, validate_date_range, to_calendar_date
from .diagnostics import template_processing_warnings
from .generator import ShiftGenerator
from .session import GenerationSession
from .types import (
    GenerationSummary,
    NewShift,
    ProcessedTemplate,
    ScheduleMetaUpdate,
    ShiftTemplate,
    TemplateProcessing,
    TemplateStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    schedule: Schedules
    generation_summary: GenerationSummary


def resolve_templates(
    db: Session,
    template_ids: list[int],
    organization_id: int,
) -> tuple[list[ShiftTemplate], TemplateProcessing]:
    """
    Resolve requested templates, soft-skipping unknown or inactive ones.
    Raises NotFoundError when none of them resolve.
    """
    templates, missing = load_templates(db, template_ids, organization_id)
    if not templates:
        raise NotFoundError(
            f"No valid templates found. Missing or inactive templates: {', '.join(str(t) for t in missing)}"
        )

    found_by_id = {t.id: t for t in templates}
    processed = []
    for template_id in dict.fromkeys(template_ids):
        template = found_by_id.get(template_id)
        processed.append(ProcessedTemplate(
            id=template_id,
            name=template.name if template else None,
            status=TemplateStatus.FOUND if template else TemplateStatus.MISSING,
        ))

    processing = TemplateProcessing(
        total_requested=len(processed),
        valid_templates=len(templates),
        missing_templates=len(missing),
        processed_templates=processed,
    )
    return templates, processing


def _run_generation(
    db: Session,
    schedule: Schedules,
    templates: list[ShiftTemplate],
    processing: TemplateProcessing,
    day_mapping: Optional[dict[int, list[int]]],
    allow_partial_time: bool,
    user_id: Optional[int],
) -> GenerationSummary:
    summary = GenerationSummary(template_processing=processing)
    summary.warnings.extend(template_processing_warnings(processing))

    generator = ShiftGenerator(
        db,
        schedule,
        templates,
        session=GenerationSession(),
        allow_partial_time=allow_partial_time,
        actor_id=user_id,
    )
    return generator.generate(schedule.start_date, schedule.end_date, day_mapping, summary=summary)


def auto_generate_schedule(
    db: Session,
    payload: ScheduleAutoGenerate,
    organization_id: int,
    user_id: Optional[int] = None,
) -> GenerationResult:
    """Create a draft schedule and fill it from templates."""
    start_date, end_date = validate_date_range(payload.start_date, payload.end_date)
    day_mapping = normalize_day_mapping(payload.template_day_mapping)

    try:
        templates, processing = resolve_templates(db, payload.template_ids, organization_id)

        schedule = store.create_schedule(
            db,
            organization_id=organization_id,
            schedule_name=payload.schedule_name,
            start_date=start_date,
            end_date=end_date,
            description=payload.description,
            created_by=user_id,
        )
        summary = _run_generation(
            db, schedule, templates, processing, day_mapping, payload.allow_partial_time, user_id,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Schedule generation failed for organization {organization_id}: {e}")
        raise

    return GenerationResult(schedule=schedule, generation_summary=summary)


def update_schedule_generation(
    db: Session,
    schedule_id: int,
    payload: ScheduleGenerationUpdate,
    organization_id: int,
    user_id: Optional[int] = None,
) -> GenerationResult:
    """
    Regenerate a draft schedule from scratch.

    Metadata is updated, the version incremented, every existing shift deleted
    and generation rerun, all in one transaction. Published schedules are
    rejected: they must be superseded by a new schedule.
    """
    day_mapping = normalize_day_mapping(payload.template_day_mapping)

    try:
        schedule = store.get_schedule(db, schedule_id, organization_id, for_update=True)
        if schedule.status == ScheduleStatus.PUBLISHED:
            raise ConflictError("Cannot regenerate a published schedule. Create a new version instead.")

        start_date, end_date = validate_date_range(
            payload.start_date if payload.start_date is not None else schedule.start_date,
            payload.end_date if payload.end_date is not None else schedule.end_date,
        )
        templates, processing = resolve_templates(db, payload.template_ids, organization_id)

        store.update_schedule_meta(
            schedule,
            ScheduleMetaUpdate(
                schedule_name=payload.schedule_name,
                description=payload.description,
                update_description="description" in payload.model_fields_set,
                start_date=start_date,
                end_date=end_date,
            ),
            user_id,
        )
        version = store.bump_version(schedule)
        deleted = store.delete_shifts_for_schedule(db, schedule.id)
        logger.info(f"Regenerating schedule {schedule.id} as version {version}, deleted {deleted} shifts")

        summary = _run_generation(
            db, schedule, templates, processing, day_mapping, payload.allow_partial_time, user_id,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Schedule regeneration failed for schedule {schedule_id}: {e}")
        raise

    return GenerationResult(schedule=schedule, generation_summary=summary)


def create_schedule(
    db: Session,
    payload: ScheduleCreate,
    organization_id: int,
    user_id: Optional[int] = None,
) -> Schedules:
    """Create an empty draft schedule."""
    start_date, end_date = validate_date_range(payload.start_date, payload.end_date)
    try:
        schedule = store.create_schedule(
            db,
            organization_id=organization_id,
            schedule_name=payload.schedule_name,
            start_date=start_date,
            end_date=end_date,
            description=payload.description,
            created_by=user_id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    return schedule


def get_schedule_with_shifts(
    db: Session,
    schedule_id: int,
    organization_id: int,
    include_cancelled: bool = True,
) -> tuple[Schedules, list[Shifts]]:
    schedule = store.get_schedule(db, schedule_id, organization_id)
    return schedule, store.list_schedule_shifts(db, schedule.id, include_cancelled=include_cancelled)


def list_schedules(
    db: Session,
    organization_id: int,
    status: Optional[ScheduleStatus] = None,
    start_date=None,
    end_date=None,
    skip: int = 0,
    limit: int = 100,
) -> list[Schedules]:
    return store.list_schedules(
        db,
        organization_id,
        status=status,
        start_date=to_calendar_date(start_date) if start_date is not None else None,
        end_date=to_calendar_date(end_date) if end_date is not None else None,
        skip=skip,
        limit=limit,
    )


def cancel_shift(
    db: Session,
    shift_id: int,
    organization_id: int,
    reason: Optional[str] = None,
) -> Shifts:
    try:
        shift = store.cancel_shift(db, shift_id, organization_id, reason)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return shift


def _require_active_employee(db: Session, employee_id: int, organization_id: int) -> None:
    employee = get_employee(db, employee_id, organization_id)
    if employee is None:
        raise NotFoundError(f"Worker {employee_id} not found")
    if employee.employment_status != EmploymentStatus.ACTIVE:
        raise ValidationError(f"Worker {employee_id} is not active")


def create_shift(
    db: Session,
    payload: ShiftCreate,
    organization_id: int,
    user_id: Optional[int] = None,
) -> Shifts:
    """Add one shift by hand to a schedule, optionally already assigned."""
    if payload.end_time <= payload.start_time:
        raise ValidationError("Shift end_time must be after start_time")

    try:
        store.get_schedule(db, payload.schedule_id, organization_id)
        if payload.employee_id is not None:
            _require_active_employee(db, payload.employee_id, organization_id)
        if get_role(db, payload.role_id, organization_id) is None:
            raise NotFoundError(f"Role {payload.role_id} not found")

        shift = store.insert_shift(db, NewShift(
            organization_id=organization_id,
            schedule_id=payload.schedule_id,
            shift_date=to_calendar_date(payload.shift_date),
            start_time=payload.start_time,
            end_time=payload.end_time,
            role_id=payload.role_id,
            employee_id=payload.employee_id,
            station_id=payload.station_id,
            break_duration_minutes=payload.break_duration_minutes,
            break_paid=payload.break_paid,
            notes=payload.notes,
            created_by=user_id,
        ))
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Shift creation failed for schedule {payload.schedule_id}: {e}")
        raise

    logger.info(f"Shift {shift.id} created in schedule {payload.schedule_id}")
    return shift


def assign_worker_to_shift(
    db: Session,
    shift_id: int,
    employee_id: int,
    organization_id: int,
) -> Shifts:
    """Put an active worker on a shift; an overlapping shift elsewhere raises OverlappingShiftError."""
    try:
        shift = store.get_shift(db, shift_id, organization_id)
        if shift.status == ShiftStatus.CANCELLED:
            raise ConflictError(f"Shift {shift_id} is cancelled and cannot be assigned")
        _require_active_employee(db, employee_id, organization_id)

        store.assign_employee(db, shift, employee_id)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Assigning worker {employee_id} to shift {shift_id} failed: {e}")
        raise

    logger.info(f"Worker {employee_id} assigned to shift {shift_id}")
    return shift


def unassign_worker_from_shift(db: Session, shift_id: int, organization_id: int) -> Shifts:
    try:
        shift = store.get_shift(db, shift_id, organization_id)
        store.unassign_employee(db, shift)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return shift


def list_worker_shifts(
    db: Session,
    employee_id: int,
    start_date,
    end_date,
    organization_id: int,
) -> list[Shifts]:
    start_date, end_date = validate_date_range(start_date, end_date)
    return store.list_employee_shifts(db, employee_id, organization_id, start_date, end_date)

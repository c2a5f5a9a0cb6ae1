from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from schedulehub.api.deps import get_db, get_organization_id, to_http_exception
from schedulehub.core.errors import SchedulingError
from schedulehub.db.models.schedules import ScheduleStatus
from schedulehub.schemas.schedules import (
    ScheduleCreate,
    ScheduleAutoGenerate,
    ScheduleGenerationUpdate,
    PublishRequest,
    ScheduleResponse,
    GenerationResponse,
    GenerationSummaryResponse,
    PublicationValidationResponse,
)
from schedulehub.schemas.shifts import ShiftResponse, ScheduleWithShiftsResponse
from schedulehub.services.scheduling import schedule_service
from schedulehub.services.scheduling.publication import publish_schedule, validate_schedule_for_publication

router = APIRouter(prefix="/schedules", tags=["schedules"])


def _generation_response(result: schedule_service.GenerationResult) -> GenerationResponse:
    return GenerationResponse(
        schedule=ScheduleResponse.model_validate(result.schedule),
        generation_summary=GenerationSummaryResponse.model_validate(result.generation_summary),
    )


@router.post("/auto-generate", response_model=GenerationResponse, status_code=status.HTTP_201_CREATED)
def auto_generate(
    payload: ScheduleAutoGenerate,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    try:
        result = schedule_service.auto_generate_schedule(db, payload, organization_id, payload.actor_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return _generation_response(result)


@router.put("/{schedule_id}/generation", response_model=GenerationResponse)
def regenerate(
    schedule_id: int,
    payload: ScheduleGenerationUpdate,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    try:
        result = schedule_service.update_schedule_generation(
            db, schedule_id, payload, organization_id, payload.actor_id,
        )
    except SchedulingError as e:
        raise to_http_exception(e)
    return _generation_response(result)


@router.get("/{schedule_id}/publication-check", response_model=PublicationValidationResponse)
def publication_check(
    schedule_id: int,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    try:
        validation = validate_schedule_for_publication(db, schedule_id, organization_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return PublicationValidationResponse.model_validate(validation)


@router.post("/{schedule_id}/publish", response_model=ScheduleResponse)
def publish(
    schedule_id: int,
    payload: Optional[PublishRequest] = None,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    actor_id = payload.actor_id if payload else None
    try:
        schedule = publish_schedule(db, schedule_id, organization_id, actor_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return schedule


@router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
def create_schedule(
    payload: ScheduleCreate,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    try:
        schedule = schedule_service.create_schedule(db, payload, organization_id, payload.actor_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return schedule


@router.get("", response_model=List[ScheduleResponse])
def list_schedules(
    status_filter: Optional[ScheduleStatus] = Query(None, alias="status"),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    return schedule_service.list_schedules(
        db,
        organization_id,
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit,
    )


@router.get("/{schedule_id}", response_model=ScheduleWithShiftsResponse)
def get_schedule(
    schedule_id: int,
    include_cancelled: bool = True,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    try:
        schedule, shifts = schedule_service.get_schedule_with_shifts(
            db, schedule_id, organization_id, include_cancelled=include_cancelled,
        )
    except SchedulingError as e:
        raise to_http_exception(e)
    return ScheduleWithShiftsResponse(
        schedule=ScheduleResponse.model_validate(schedule),
        shifts=[ShiftResponse.model_validate(s) for s in shifts],
    )

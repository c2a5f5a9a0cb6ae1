from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from schedulehub.api.deps import get_db, get_organization_id, to_http_exception
from schedulehub.core.errors import SchedulingError
from schedulehub.schemas.shifts import ShiftCreate, ShiftAssign, ShiftCancel, ShiftResponse
from schedulehub.services.scheduling import schedule_service

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.post("", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
def create_shift(
    payload: ShiftCreate,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    try:
        shift = schedule_service.create_shift(db, payload, organization_id, payload.actor_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return shift


@router.get("/workers/{employee_id}", response_model=List[ShiftResponse])
def list_worker_shifts(
    employee_id: int,
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    try:
        return schedule_service.list_worker_shifts(db, employee_id, start_date, end_date, organization_id)
    except SchedulingError as e:
        raise to_http_exception(e)


@router.post("/{shift_id}/assign", response_model=ShiftResponse)
def assign_worker(
    shift_id: int,
    payload: ShiftAssign,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    try:
        shift = schedule_service.assign_worker_to_shift(db, shift_id, payload.employee_id, organization_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return shift


@router.post("/{shift_id}/unassign", response_model=ShiftResponse)
def unassign_worker(
    shift_id: int,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    try:
        shift = schedule_service.unassign_worker_from_shift(db, shift_id, organization_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return shift


@router.post("/{shift_id}/cancel", response_model=ShiftResponse)
def cancel_shift(
    shift_id: int,
    payload: Optional[ShiftCancel] = None,
    db: Session = Depends(get_db),
    organization_id: int = Depends(get_organization_id),
):
    reason = payload.reason if payload else None
    try:
        shift = schedule_service.cancel_shift(db, shift_id, organization_id, reason)
    except SchedulingError as e:
        raise to_http_exception(e)
    return shift

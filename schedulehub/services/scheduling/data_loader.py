"""
Data loader for scheduling service.
Fetches workers, availability and templates from the database and converts to internal types.
"""

from datetime import date
from typing import Optional
from sqlalchemy import select, and_, or_
from sqlalchemy.orm import Session

from schedulehub.db.models.employees import Employees, EmploymentStatus
from schedulehub.db.models.roles import Roles
from schedulehub.db.models.worker_roles import WorkerRoles
from schedulehub.db.models.worker_scheduling_config import WorkerSchedulingConfig, SchedulingStatus
from schedulehub.db.models.worker_availability import (
    WorkerAvailability,
    AvailabilityType as DBAvailabilityType,
)
from schedulehub.db.models.shift_templates import ShiftTemplates
from schedulehub.db.models.shift_template_roles import ShiftTemplateRoles
from schedulehub.db.models.shift_template_stations import ShiftTemplateStations

from .dates import availability_day_of_week
from .types import (
    WorkerRef,
    AvailabilityRecord,
    AvailabilityType,
    AvailabilityPriority,
    RoleRequirement,
    ShiftTemplate,
)


def find_qualified_active_workers(db: Session, role_id: int, organization_id: int) -> list[WorkerRef]:
    """
    Load workers who can be scheduled for a role.

    Qualified: an active (not removed) role membership.
    Active: employment_status active.
    Schedulable: no scheduling config row, or is_schedulable with status active.
    """
    stmt = (
        select(Employees)
        .join(WorkerRoles, WorkerRoles.employee_id == Employees.id)
        .outerjoin(WorkerSchedulingConfig, WorkerSchedulingConfig.employee_id == Employees.id)
        .where(
            and_(
                Employees.organization_id == organization_id,
                Employees.employment_status == EmploymentStatus.ACTIVE,
                WorkerRoles.role_id == role_id,
                WorkerRoles.removed_date.is_(None),
                or_(
                    WorkerSchedulingConfig.id.is_(None),
                    and_(
                        WorkerSchedulingConfig.is_schedulable == True,
                        WorkerSchedulingConfig.scheduling_status == SchedulingStatus.ACTIVE,
                    ),
                ),
            )
        )
        .order_by(Employees.last_name, Employees.first_name, Employees.id)
    )
    rows = db.execute(stmt).scalars().unique().all()

    return [
        WorkerRef(
            id=emp.id,
            first_name=emp.first_name,
            last_name=emp.last_name,
            employee_number=emp.employee_number,
        )
        for emp in rows
    ]


def find_availability(
    db: Session,
    employee_ids: list[int],
    slot_date: date,
) -> dict[int, list[AvailabilityRecord]]:
    """
    Load availability records relevant to one date, grouped by employee.
    Recurring records match the weekday (0=Sunday), dated records the exact date.
    """
    if not employee_ids:
        return {}

    stmt = select(WorkerAvailability).where(
        and_(
            WorkerAvailability.employee_id.in_(employee_ids),
            or_(
                and_(
                    WorkerAvailability.availability_type == DBAvailabilityType.RECURRING,
                    WorkerAvailability.day_of_week == availability_day_of_week(slot_date),
                ),
                and_(
                    WorkerAvailability.availability_type != DBAvailabilityType.RECURRING,
                    WorkerAvailability.specific_date == slot_date,
                ),
            ),
            or_(WorkerAvailability.effective_from.is_(None), WorkerAvailability.effective_from <= slot_date),
            or_(WorkerAvailability.effective_to.is_(None), WorkerAvailability.effective_to >= slot_date),
        )
    ).order_by(WorkerAvailability.employee_id, WorkerAvailability.start_time, WorkerAvailability.id)
    rows = db.execute(stmt).scalars().all()

    records: dict[int, list[AvailabilityRecord]] = {}
    for row in rows:
        records.setdefault(row.employee_id, []).append(AvailabilityRecord(
            employee_id=row.employee_id,
            availability_type=AvailabilityType(row.availability_type.value),
            start_time=row.start_time,
            end_time=row.end_time,
            day_of_week=row.day_of_week,
            specific_date=row.specific_date,
            effective_from=row.effective_from,
            effective_to=row.effective_to,
            priority=AvailabilityPriority(row.priority.value),
        ))

    return records


def get_template(db: Session, template_id: int, organization_id: int) -> Optional[ShiftTemplate]:
    """Load an active template with its role requirements and stations. None if missing or inactive."""
    stmt = select(ShiftTemplates).where(
        and_(
            ShiftTemplates.id == template_id,
            ShiftTemplates.organization_id == organization_id,
            ShiftTemplates.is_active == True,
        )
    )
    template = db.execute(stmt).scalar_one_or_none()
    if template is None:
        return None

    role_stmt = select(ShiftTemplateRoles).where(
        ShiftTemplateRoles.template_id == template.id
    ).order_by(ShiftTemplateRoles.sort_order, ShiftTemplateRoles.id)
    role_rows = db.execute(role_stmt).scalars().all()

    station_stmt = select(ShiftTemplateStations.station_id).where(
        ShiftTemplateStations.template_id == template.id
    ).order_by(ShiftTemplateStations.station_id)
    station_ids = db.execute(station_stmt).scalars().all()

    return ShiftTemplate(
        id=template.id,
        name=template.template_name,
        start_time=template.start_time,
        end_time=template.end_time,
        role_requirements=tuple(
            RoleRequirement(
                role_id=r.role_id,
                quantity=r.quantity,
                min_proficiency=r.min_proficiency,
                preferred_proficiency=r.preferred_proficiency,
                priority=r.priority,
                is_flexible=r.is_flexible,
            )
            for r in role_rows
        ),
        station_ids=tuple(station_ids),
        break_duration_minutes=template.break_duration_minutes,
        break_paid=template.break_paid,
    )


def load_templates(
    db: Session,
    template_ids: list[int],
    organization_id: int,
) -> tuple[list[ShiftTemplate], list[int]]:
    """
    Resolve requested template ids in request order (duplicates dropped).

    Returns:
        (found templates, ids that are unknown or inactive)
    """
    found: list[ShiftTemplate] = []
    missing: list[int] = []
    seen: set[int] = set()

    for template_id in template_ids:
        if template_id in seen:
            continue
        seen.add(template_id)

        template = get_template(db, template_id, organization_id)
        if template is None:
            missing.append(template_id)
        else:
            found.append(template)

    return found, missing


def get_employee(db: Session, employee_id: int, organization_id: int) -> Optional[Employees]:
    stmt = select(Employees).where(
        and_(
            Employees.id == employee_id,
            Employees.organization_id == organization_id,
        )
    )
    return db.execute(stmt).scalar_one_or_none()


def get_role(db: Session, role_id: int, organization_id: int) -> Optional[Roles]:
    stmt = select(Roles).where(
        and_(
            Roles.id == role_id,
            Roles.organization_id == organization_id,
        )
    )
    return db.execute(stmt).scalar_one_or_none()

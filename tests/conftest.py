import pytest
from datetime import date, time
from typing import Optional

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from schedulehub.db.database import create_db_engine, init_database
from schedulehub.db.models import (
    Employees,
    EmploymentStatus,
    WorkerSchedulingConfig,
    SchedulingStatus,
    Roles,
    WorkerRoles,
    Stations,
    ShiftTemplates,
    ShiftTemplateRoles,
    ShiftTemplateStations,
    WorkerAvailability,
    AvailabilityType,
    AvailabilityPriority,
    Schedules,
    ScheduleStatus,
    Shifts,
    ShiftStatus,
)

ORG_ID = 1
OTHER_ORG_ID = 2


def get_test_monday() -> date:
    # returns a fixed Monday for deterministic tests
    return date(2025, 1, 20)


# availability day numbers (0=Sunday)
SUNDAY, MONDAY, TUESDAY, WEDNESDAY = 0, 1, 2, 3


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def unguarded_db(engine, db):
    # drops the overlap triggers so conflicting legacy rows can be seeded
    with engine.begin() as conn:
        conn.execute(text("DROP TRIGGER trg_shifts_prevent_overlap_insert"))
        conn.execute(text("DROP TRIGGER trg_shifts_prevent_overlap_update"))
    return db


# ---- builders ----

def make_role(db, code: str = "CASHIER", organization_id: int = ORG_ID) -> Roles:
    role = Roles(organization_id=organization_id, role_code=code, role_name=code.title())
    db.add(role)
    db.flush()
    return role


def make_station(db, code: str = "REG1", organization_id: int = ORG_ID) -> Stations:
    station = Stations(organization_id=organization_id, station_code=code, station_name=code)
    db.add(station)
    db.flush()
    return station


def make_worker(
    db,
    first_name: str,
    last_name: str,
    roles: list[Roles] = (),
    organization_id: int = ORG_ID,
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE,
    is_schedulable: Optional[bool] = None,
    scheduling_status: SchedulingStatus = SchedulingStatus.ACTIVE,
) -> Employees:
    employee = Employees(
        organization_id=organization_id,
        first_name=first_name,
        last_name=last_name,
        employee_number=f"E-{first_name[:1]}{last_name}",
        employment_status=employment_status,
    )
    db.add(employee)
    db.flush()

    for role in roles:
        db.add(WorkerRoles(organization_id=organization_id, employee_id=employee.id, role_id=role.id))

    # no config row at all unless asked for
    if is_schedulable is not None:
        db.add(WorkerSchedulingConfig(
            organization_id=organization_id,
            employee_id=employee.id,
            is_schedulable=is_schedulable,
            scheduling_status=scheduling_status,
        ))
    db.flush()
    return employee


def add_recurring(db, employee: Employees, day_of_week: int, start: time, end: time, **kwargs) -> WorkerAvailability:
    record = WorkerAvailability(
        organization_id=employee.organization_id,
        employee_id=employee.id,
        availability_type=AvailabilityType.RECURRING,
        day_of_week=day_of_week,
        start_time=start,
        end_time=end,
        **kwargs,
    )
    db.add(record)
    db.flush()
    return record


def add_dated(
    db,
    employee: Employees,
    specific_date: date,
    start: time,
    end: time,
    availability_type: AvailabilityType = AvailabilityType.ONE_TIME,
    priority: AvailabilityPriority = AvailabilityPriority.AVAILABLE,
) -> WorkerAvailability:
    record = WorkerAvailability(
        organization_id=employee.organization_id,
        employee_id=employee.id,
        availability_type=availability_type,
        specific_date=specific_date,
        start_time=start,
        end_time=end,
        priority=priority,
    )
    db.add(record)
    db.flush()
    return record


def make_template(
    db,
    name: str,
    start: time,
    end: time,
    roles: list[tuple[Roles, int]] = (),
    stations: list[Stations] = (),
    organization_id: int = ORG_ID,
    is_active: bool = True,
    break_duration_minutes: int = 0,
) -> ShiftTemplates:
    template = ShiftTemplates(
        organization_id=organization_id,
        template_name=name,
        start_time=start,
        end_time=end,
        is_active=is_active,
        break_duration_minutes=break_duration_minutes,
    )
    db.add(template)
    db.flush()

    for order, (role, quantity) in enumerate(roles):
        db.add(ShiftTemplateRoles(
            organization_id=organization_id,
            template_id=template.id,
            role_id=role.id,
            quantity=quantity,
            sort_order=order,
        ))
    for station in stations:
        db.add(ShiftTemplateStations(template_id=template.id, station_id=station.id))
    db.flush()
    return template


def make_schedule(
    db,
    name: str = "Week",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: ScheduleStatus = ScheduleStatus.DRAFT,
    organization_id: int = ORG_ID,
) -> Schedules:
    start_date = start_date or get_test_monday()
    schedule = Schedules(
        organization_id=organization_id,
        schedule_name=name,
        start_date=start_date,
        end_date=end_date or start_date,
        status=status,
    )
    db.add(schedule)
    db.flush()
    return schedule


def add_shift(
    db,
    schedule: Schedules,
    employee: Optional[Employees],
    role: Roles,
    shift_date: date,
    start: time,
    end: time,
    status: ShiftStatus = ShiftStatus.SCHEDULED,
) -> Shifts:
    shift = Shifts(
        organization_id=schedule.organization_id,
        schedule_id=schedule.id,
        shift_date=shift_date,
        start_time=start,
        end_time=end,
        employee_id=employee.id if employee is not None else None,
        role_id=role.id,
        status=status,
    )
    db.add(shift)
    db.flush()
    return shift


@pytest.fixture
def cashier(db) -> Roles:
    return make_role(db, "CASHIER")


@pytest.fixture
def stocker(db) -> Roles:
    return make_role(db, "STOCKER")

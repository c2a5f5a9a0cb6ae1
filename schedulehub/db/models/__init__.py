from schedulehub.db.database import Base

# Import models
from schedulehub.db.models.employees import Employees, EmploymentStatus
from schedulehub.db.models.worker_scheduling_config import WorkerSchedulingConfig, SchedulingStatus
from schedulehub.db.models.roles import Roles
from schedulehub.db.models.worker_roles import WorkerRoles
from schedulehub.db.models.stations import Stations
from schedulehub.db.models.shift_templates import ShiftTemplates
from schedulehub.db.models.shift_template_roles import ShiftTemplateRoles
from schedulehub.db.models.shift_template_stations import ShiftTemplateStations
from schedulehub.db.models.worker_availability import WorkerAvailability, AvailabilityType, AvailabilityPriority
from schedulehub.db.models.schedules import Schedules, ScheduleStatus
from schedulehub.db.models.shifts import Shifts, ShiftStatus, ShiftType

__all__ = [
    "Base",
    # Models
    "Employees",
    "WorkerSchedulingConfig",
    "Roles",
    "WorkerRoles",
    "Stations",
    "ShiftTemplates",
    "ShiftTemplateRoles",
    "ShiftTemplateStations",
    "WorkerAvailability",
    "Schedules",
    "Shifts",
    # Enums
    "EmploymentStatus",
    "SchedulingStatus",
    "AvailabilityType",
    "AvailabilityPriority",
    "ScheduleStatus",
    "ShiftStatus",
    "ShiftType",
]

"""
Internal data types for scheduling logic.
decoupled from SQLAlchemy models for cleaner logic.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Optional


class AvailabilityType(str, Enum):
    RECURRING = "recurring"
    ONE_TIME = "one_time"
    UNAVAILABLE = "unavailable"


class AvailabilityPriority(str, Enum):
    REQUIRED = "required"
    PREFERRED = "preferred"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class OverlapType(str, Enum):
    COMPLETE_OVERLAP = "complete_overlap"
    CONTAINED_BY = "contained_by"
    PARTIAL_START = "partial_start"
    PARTIAL_END = "partial_end"
    ADJACENT = "adjacent"


class TemplateStatus(str, Enum):
    FOUND = "found"
    MISSING = "missing"


@dataclass(frozen=True)
class WorkerRef:
    """A qualified, active, schedulable worker."""
    id: int
    first_name: str
    last_name: str
    employee_number: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def sort_key(self) -> tuple[str, str, int]:
        return (self.last_name, self.first_name, self.id)


@dataclass
class AvailabilityRecord:
    employee_id: int
    availability_type: AvailabilityType
    start_time: time
    end_time: time
    day_of_week: Optional[int] = None  # 0=Sunday .. 6=Saturday, recurring only
    specific_date: Optional[date] = None
    effective_from: Optional[date] = None
    effective_to: Optional[date] = None
    priority: AvailabilityPriority = AvailabilityPriority.PREFERRED

    @property
    def is_veto(self) -> bool:
        return (
            self.availability_type == AvailabilityType.UNAVAILABLE
            or self.priority == AvailabilityPriority.UNAVAILABLE
        )


@dataclass(frozen=True)
class AvailabilityMatch:
    """Window a worker can actually cover inside a slot."""
    start_time: time
    end_time: time
    coverage_percentage: float


@dataclass(frozen=True)
class Candidate:
    worker: WorkerRef
    start_time: time
    end_time: time
    coverage_percentage: float = 100.0

    @property
    def is_partial(self) -> bool:
        return self.coverage_percentage < 100.0


@dataclass(frozen=True)
class RoleRequirement:
    role_id: int
    quantity: int = 1
    min_proficiency: Optional[str] = None
    preferred_proficiency: Optional[str] = None
    priority: int = 50
    is_flexible: bool = False


@dataclass(frozen=True)
class ShiftTemplate:
    id: int
    name: str
    start_time: time
    end_time: time
    role_requirements: tuple[RoleRequirement, ...] = ()
    station_ids: tuple[int, ...] = ()
    break_duration_minutes: int = 0
    break_paid: bool = True


@dataclass
class WorkerScreening:
    """
    Where every qualified worker for one (role, date, window) slot ended up.
    Each worker lands in exactly one bucket; `available` is what assignment may use.
    """
    role_id: int
    shift_date: date
    start_time: time
    end_time: time
    qualified: list[WorkerRef] = field(default_factory=list)
    unavailable: list[WorkerRef] = field(default_factory=list)
    no_availability: list[WorkerRef] = field(default_factory=list)
    existing_shift_conflicts: list[WorkerRef] = field(default_factory=list)
    session_conflicts: list[WorkerRef] = field(default_factory=list)
    available: list[Candidate] = field(default_factory=list)


@dataclass
class NewShift:
    """Everything the store needs to persist one assignment."""
    organization_id: int
    schedule_id: int
    shift_date: date
    start_time: time
    end_time: time
    role_id: int
    employee_id: Optional[int] = None
    station_id: Optional[int] = None
    template_id: Optional[int] = None
    is_partial: bool = False
    break_duration_minutes: int = 0
    break_paid: bool = True
    notes: Optional[str] = None
    created_by: Optional[int] = None


@dataclass
class ScheduleMetaUpdate:
    """
    Explicit metadata patch. None means "leave unchanged", except description,
    which is only touched when `update_description` is set (so it can be cleared).
    """
    schedule_name: Optional[str] = None
    description: Optional[str] = None
    update_description: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass
class ProcessedTemplate:
    id: int
    name: Optional[str]
    status: TemplateStatus


@dataclass
class TemplateProcessing:
    total_requested: int = 0
    valid_templates: int = 0
    missing_templates: int = 0
    processed_templates: list[ProcessedTemplate] = field(default_factory=list)


@dataclass
class GenerationSummary:
    """Counters and diagnostics for one generation run."""
    total_shifts_requested: int = 0
    shifts_generated: int = 0
    partial_coverage: int = 0
    no_coverage: int = 0
    warnings: list[str] = field(default_factory=list)
    template_processing: TemplateProcessing = field(default_factory=TemplateProcessing)


@dataclass
class ConflictingShift:
    shift_id: int
    schedule_id: int
    schedule_name: str
    shift_date: date
    start_time: time
    end_time: time
    role_id: int
    overlap_type: OverlapType


@dataclass
class ShiftConflict:
    """A shift of the schedule being published, with the published shifts it collides with."""
    shift_id: int
    employee_id: int
    employee_name: str
    employee_number: Optional[str]
    shift_date: date
    start_time: time
    end_time: time
    role_id: int
    conflicting_shifts: list[ConflictingShift] = field(default_factory=list)


@dataclass
class PublicationValidation:
    schedule_id: int
    is_valid: bool
    total_shifts: int
    conflicting_shifts: int
    message: str
    conflicts: list[ShiftConflict] = field(default_factory=list)

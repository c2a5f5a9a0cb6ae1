"""
Scheduling service package.

Usage:
    from schedulehub.services.scheduling import auto_generate_schedule, publish_schedule

    # Create a draft and fill it from templates
    result = auto_generate_schedule(db, payload, organization_id=1, user_id=7)
    print(result.generation_summary.warnings)

    # Check, then publish
    report = validate_schedule_for_publication(db, result.schedule.id, organization_id=1)
    if report.is_valid:
        publish_schedule(db, result.schedule.id, organization_id=1, actor_id=7)

    # Or drive the generator directly for inspection/testing
    from schedulehub.services.scheduling import ShiftGenerator, GenerationSession

    generator = ShiftGenerator(db, schedule, templates, session=GenerationSession())
    summary = generator.generate(schedule.start_date, schedule.end_date)
"""

from .types import (
    AvailabilityType,
    AvailabilityPriority,
    AvailabilityRecord,
    AvailabilityMatch,
    WorkerRef,
    Candidate,
    RoleRequirement,
    ShiftTemplate,
    WorkerScreening,
    NewShift,
    ScheduleMetaUpdate,
    GenerationSummary,
    TemplateProcessing,
    ProcessedTemplate,
    OverlapType,
    ShiftConflict,
    ConflictingShift,
    PublicationValidation,
)
from .session import GenerationSession, SessionInterval
from .generator import ShiftGenerator
from .diagnostics import analyze_exclusions, ExclusionAnalysis
from .publication import get_overlap_type, validate_schedule_for_publication, publish_schedule
from .schedule_service import (
    GenerationResult,
    auto_generate_schedule,
    update_schedule_generation,
    create_schedule,
    get_schedule_with_shifts,
    list_schedules,
    cancel_shift,
    create_shift,
    assign_worker_to_shift,
    unassign_worker_from_shift,
    list_worker_shifts,
)

__all__ = [
    # Types
    "AvailabilityType",
    "AvailabilityPriority",
    "AvailabilityRecord",
    "AvailabilityMatch",
    "WorkerRef",
    "Candidate",
    "RoleRequirement",
    "ShiftTemplate",
    "WorkerScreening",
    "NewShift",
    "ScheduleMetaUpdate",
    "GenerationSummary",
    "TemplateProcessing",
    "ProcessedTemplate",
    "OverlapType",
    "ShiftConflict",
    "ConflictingShift",
    "PublicationValidation",
    "GenerationResult",
    # Main entry points
    "auto_generate_schedule",
    "update_schedule_generation",
    "validate_schedule_for_publication",
    "publish_schedule",
    # Lower-level pieces
    "GenerationSession",
    "SessionInterval",
    "ShiftGenerator",
    "analyze_exclusions",
    "ExclusionAnalysis",
    "get_overlap_type",
    "create_schedule",
    "get_schedule_with_shifts",
    "list_schedules",
    "cancel_shift",
    "create_shift",
    "assign_worker_to_shift",
    "unassign_worker_from_shift",
    "list_worker_shifts",
]

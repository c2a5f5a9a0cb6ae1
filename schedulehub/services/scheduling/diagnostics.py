"""
Diagnostics for slots the generator could not fill.

Turns a WorkerScreening into per-reason findings and renders the warning
lines that end up in GenerationSummary.warnings.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from .types import (
    ShiftTemplate,
    RoleRequirement,
    WorkerRef,
    WorkerScreening,
    TemplateProcessing,
    TemplateStatus,
)

MAX_NAMES_LISTED = 5


class ExclusionReason(str, Enum):
    NO_QUALIFIED_WORKERS = "no_qualified_workers"
    AVAILABILITY_GAP = "availability_gap"
    UNAVAILABLE = "unavailable"
    EXISTING_SHIFT = "existing_shift"
    SESSION_CONFLICT = "session_conflict"


@dataclass
class ExclusionFinding:
    reason: ExclusionReason
    message: str
    action: str
    workers: list[WorkerRef] = field(default_factory=list)


@dataclass
class ExclusionAnalysis:
    qualified_count: int
    findings: list[ExclusionFinding] = field(default_factory=list)


def _names(workers: list[WorkerRef]) -> str:
    names = [w.full_name for w in workers[:MAX_NAMES_LISTED]]
    if len(workers) > MAX_NAMES_LISTED:
        names.append(f"and {len(workers) - MAX_NAMES_LISTED} more")
    return ", ".join(names)


def analyze_exclusions(screening: WorkerScreening) -> ExclusionAnalysis:
    """Explain why the qualified pool for one slot produced no usable candidate."""
    analysis = ExclusionAnalysis(qualified_count=len(screening.qualified))
    window = f"{screening.start_time:%H:%M}-{screening.end_time:%H:%M}"

    if not screening.qualified:
        analysis.findings.append(ExclusionFinding(
            reason=ExclusionReason.NO_QUALIFIED_WORKERS,
            message=f"No active, schedulable workers hold role {screening.role_id}",
            action="Assign the role to more workers or review scheduling status",
        ))
        return analysis

    if screening.no_availability:
        analysis.findings.append(ExclusionFinding(
            reason=ExclusionReason.AVAILABILITY_GAP,
            message=(
                f"{len(screening.no_availability)} workers have no availability covering {window} "
                f"({_names(screening.no_availability)})"
            ),
            action="Ask workers to update availability or enable partial-time assignment",
            workers=list(screening.no_availability),
        ))

    if screening.unavailable:
        analysis.findings.append(ExclusionFinding(
            reason=ExclusionReason.UNAVAILABLE,
            message=(
                f"{len(screening.unavailable)} workers are marked unavailable "
                f"({_names(screening.unavailable)})"
            ),
            action="Check time-off and unavailability records for this date",
            workers=list(screening.unavailable),
        ))

    if screening.existing_shift_conflicts:
        analysis.findings.append(ExclusionFinding(
            reason=ExclusionReason.EXISTING_SHIFT,
            message=(
                f"{len(screening.existing_shift_conflicts)} workers already have overlapping shifts "
                f"in other schedules ({_names(screening.existing_shift_conflicts)})"
            ),
            action="Review overlapping schedules or adjust the template time window",
            workers=list(screening.existing_shift_conflicts),
        ))

    if screening.session_conflicts:
        analysis.findings.append(ExclusionFinding(
            reason=ExclusionReason.SESSION_CONFLICT,
            message=(
                f"{len(screening.session_conflicts)} workers found but have conflicting shifts "
                f"from other templates in this generation session ({_names(screening.session_conflicts)})"
            ),
            action="Stagger template times or assign more workers to this role",
            workers=list(screening.session_conflicts),
        ))

    return analysis


def station_label(station_id: Optional[int]) -> str:
    return f" (Station: {station_id})" if station_id is not None else ""


def format_uncovered_warning(
    template: ShiftTemplate,
    station_id: Optional[int],
    requirement: RoleRequirement,
    analysis: ExclusionAnalysis,
    screening: WorkerScreening,
) -> str:
    """One line per uncovered slot: what was needed, why nobody fits, what to do."""
    header = (
        f"No workers available for role {requirement.role_id} on {screening.shift_date.isoformat()} "
        f"for {template.name}{station_label(station_id)} "
        f"({screening.start_time:%H:%M}-{screening.end_time:%H:%M}, 0/{requirement.quantity} assigned)"
    )
    details = [f"{f.message}. ACTION: {f.action}" for f in analysis.findings]
    if not details:
        return header
    return f"{header} - " + "; ".join(details)


def format_partial_warning(
    template: ShiftTemplate,
    station_id: Optional[int],
    requirement: RoleRequirement,
    shift_date: date,
    assigned: int,
) -> str:
    return (
        f"Partial coverage on {shift_date.isoformat()} for {template.name}{station_label(station_id)}: "
        f"{assigned}/{requirement.quantity} workers assigned for role {requirement.role_id}"
    )


def format_no_stations_warning(template: ShiftTemplate) -> str:
    return (
        f"Template {template.name} has no stations assigned. "
        f"Shifts will be created without station assignment."
    )


def template_processing_warnings(processing: TemplateProcessing) -> list[str]:
    """Warnings for requested templates that were unknown or inactive."""
    missing_ids = [t.id for t in processing.processed_templates if t.status == TemplateStatus.MISSING]
    if not missing_ids:
        return []

    warnings = [f"Template {template_id} not found or inactive" for template_id in missing_ids]
    warnings.append(
        f"Warning: {len(missing_ids)} template(s) could not be found or are inactive: "
        f"{', '.join(str(t) for t in missing_ids)}. "
        f"Schedule generated using {processing.valid_templates} valid template(s)."
    )
    return warnings

"""
Shift generator - the assignment algorithm.

For each template (or each day of a template day mapping), station, role
requirement and date, the generator screens the qualified pool, takes the
first `quantity` candidates in deterministic order and persists one shift
per assignment. Shortfalls are counted and explained, never raised.

Candidate order:
    - full mode: last name, first name, employee id
    - partial mode: coverage percentage (desc), then as above
"""

import logging
from datetime import date, time
from typing import Optional

from sqlalchemy.orm import Session

from schedulehub.core.config import settings
from schedulehub.db.models.schedules import Schedules

from .availability import evaluate_availability, is_vetoed, times_overlap
from .data_loader import find_qualified_active_workers, find_availability
from .dates import ALL_MAPPING_DAYS, iter_dates, validate_date_range
from .diagnostics import (
    analyze_exclusions,
    format_uncovered_warning,
    format_partial_warning,
    format_no_stations_warning,
)
from .session import GenerationSession
from .store import insert_shift, find_shifts_on_date
from .types import (
    Candidate,
    GenerationSummary,
    NewShift,
    RoleRequirement,
    ShiftTemplate,
    WorkerScreening,
)

logger = logging.getLogger(__name__)


def build_shift_notes(template: ShiftTemplate, station_id: Optional[int], candidate: Candidate) -> str:
    notes = f"Auto-generated from template: {template.name}"
    if station_id is not None:
        notes += f" (Station: {station_id})"
    if candidate.is_partial:
        notes += (
            f" (Partial coverage: {round(candidate.coverage_percentage)}% - "
            f"{candidate.start_time:%H:%M}-{candidate.end_time:%H:%M})"
        )
    return notes


class ShiftGenerator:
    """
    Generates shifts for one schedule from a set of resolved templates.

    The session is shared across every template of a run so that a worker
    assigned by one template is not double-booked by another.
    """

    def __init__(
        self,
        db: Session,
        schedule: Schedules,
        templates: list[ShiftTemplate],
        session: Optional[GenerationSession] = None,
        allow_partial_time: bool = False,
        actor_id: Optional[int] = None,
        candidate_limit: Optional[int] = None,
    ):
        self.db = db
        self.schedule = schedule
        self.templates = list(templates)
        self.session = session if session is not None else GenerationSession()
        self.allow_partial_time = allow_partial_time
        self.actor_id = actor_id
        self.candidate_limit = candidate_limit or settings.GENERATION_CANDIDATE_LIMIT

    def generate(
        self,
        start_date: date,
        end_date: date,
        day_mapping: Optional[dict[int, list[int]]] = None,
        summary: Optional[GenerationSummary] = None,
    ) -> GenerationSummary:
        """
        Run generation over the inclusive date range.

        Args:
            start_date, end_date: generation range (end >= start)
            day_mapping: {1..7 (Monday=1): [template_id, ...]}; None means
                every template on every day
            summary: existing summary to append to (template processing info)

        Returns:
            GenerationSummary with counters and warnings
        """
        start_date, end_date = validate_date_range(start_date, end_date)
        summary = summary if summary is not None else GenerationSummary()
        templates_by_id = {t.id: t for t in self.templates}

        logger.info(
            "Generating shifts for schedule %s (%s to %s), %d templates, partial=%s",
            self.schedule.id, start_date, end_date, len(self.templates), self.allow_partial_time,
        )

        if day_mapping:
            unresolved = sorted({
                template_id
                for template_ids in day_mapping.values()
                for template_id in template_ids
                if template_id not in templates_by_id
            })
            if unresolved:
                summary.warnings.append(
                    f"Template day mapping references templates that were not found or are inactive: "
                    f"{', '.join(str(t) for t in unresolved)}"
                )

            for day in sorted(day_mapping):
                for template_id in day_mapping[day]:
                    template = templates_by_id.get(template_id)
                    if template is None:
                        summary.warnings.append(f"Day {day}: Template {template_id} was skipped (not found or inactive)")
                        continue
                    self._generate_for_template(template, start_date, end_date, [day], summary)
        else:
            for template in self.templates:
                self._generate_for_template(template, start_date, end_date, ALL_MAPPING_DAYS, summary)

        logger.info(
            "Schedule %s: %d/%d shifts generated, %d partial, %d uncovered",
            self.schedule.id, summary.shifts_generated, summary.total_shifts_requested,
            summary.partial_coverage, summary.no_coverage,
        )
        return summary

    def _generate_for_template(
        self,
        template: ShiftTemplate,
        start_date: date,
        end_date: date,
        days: list[int] | tuple[int, ...],
        summary: GenerationSummary,
    ) -> None:
        dates = list(iter_dates(start_date, end_date, days))
        if not dates:
            return

        station_ids: list[Optional[int]] = list(template.station_ids)
        if not station_ids:
            summary.warnings.append(format_no_stations_warning(template))
            station_ids = [None]

        for station_id in station_ids:
            for requirement in template.role_requirements:
                for shift_date in dates:
                    self._fill_slot(template, station_id, requirement, shift_date, summary)

    def _fill_slot(
        self,
        template: ShiftTemplate,
        station_id: Optional[int],
        requirement: RoleRequirement,
        shift_date: date,
        summary: GenerationSummary,
    ) -> None:
        summary.total_shifts_requested += requirement.quantity

        screening = self.screen_workers(requirement.role_id, shift_date, template.start_time, template.end_time)
        assigned = screening.available[:requirement.quantity]

        for candidate in assigned:
            self._assign(template, station_id, requirement, shift_date, candidate)
            summary.shifts_generated += 1

        if not assigned:
            summary.no_coverage += 1
            analysis = analyze_exclusions(screening)
            summary.warnings.append(format_uncovered_warning(template, station_id, requirement, analysis, screening))
        elif len(assigned) < requirement.quantity:
            summary.partial_coverage += 1
            summary.warnings.append(format_partial_warning(template, station_id, requirement, shift_date, len(assigned)))

    def _assign(
        self,
        template: ShiftTemplate,
        station_id: Optional[int],
        requirement: RoleRequirement,
        shift_date: date,
        candidate: Candidate,
    ) -> None:
        insert_shift(self.db, NewShift(
            organization_id=self.schedule.organization_id,
            schedule_id=self.schedule.id,
            shift_date=shift_date,
            start_time=candidate.start_time,
            end_time=candidate.end_time,
            role_id=requirement.role_id,
            employee_id=candidate.worker.id,
            station_id=station_id,
            template_id=template.id,
            is_partial=candidate.is_partial,
            break_duration_minutes=template.break_duration_minutes,
            break_paid=template.break_paid,
            notes=build_shift_notes(template, station_id, candidate),
            created_by=self.actor_id,
        ))
        self.session.add(candidate.worker.id, shift_date, candidate.start_time, candidate.end_time)

    def screen_workers(
        self,
        role_id: int,
        shift_date: date,
        start_time: time,
        end_time: time,
    ) -> WorkerScreening:
        """Sort every qualified worker for one slot into exactly one bucket."""
        screening = WorkerScreening(role_id=role_id, shift_date=shift_date, start_time=start_time, end_time=end_time)
        screening.qualified = find_qualified_active_workers(self.db, role_id, self.schedule.organization_id)
        if not screening.qualified:
            return screening

        employee_ids = [w.id for w in screening.qualified]
        availability = find_availability(self.db, employee_ids, shift_date)

        # shifts of this schedule are covered by the session instead
        existing = find_shifts_on_date(self.db, employee_ids, shift_date, exclude_schedule_id=self.schedule.id)
        existing_by_employee: dict[int, list] = {}
        for shift in existing:
            existing_by_employee.setdefault(shift.employee_id, []).append(shift)

        candidates: list[Candidate] = []
        for worker in screening.qualified:
            records = availability.get(worker.id, [])
            if is_vetoed(records, shift_date, start_time, end_time):
                screening.unavailable.append(worker)
                continue

            match = evaluate_availability(records, shift_date, start_time, end_time, self.allow_partial_time)
            if match is None:
                screening.no_availability.append(worker)
                continue

            if any(
                times_overlap(s.start_time, s.end_time, start_time, end_time)
                for s in existing_by_employee.get(worker.id, [])
            ):
                screening.existing_shift_conflicts.append(worker)
                continue

            candidates.append(Candidate(
                worker=worker,
                start_time=match.start_time,
                end_time=match.end_time,
                coverage_percentage=match.coverage_percentage,
            ))

        if self.allow_partial_time:
            candidates.sort(key=lambda c: (-c.coverage_percentage, *c.worker.sort_key))
        else:
            candidates.sort(key=lambda c: c.worker.sort_key)
        candidates = candidates[:self.candidate_limit]

        for candidate in candidates:
            if self.session.has_conflict(candidate.worker.id, shift_date, start_time, end_time):
                screening.session_conflicts.append(candidate.worker)
            else:
                screening.available.append(candidate)

        logger.debug(
            "Role %s on %s %s-%s: %d qualified, %d available, %d session conflicts",
            role_id, shift_date, start_time, end_time,
            len(screening.qualified), len(screening.available), len(screening.session_conflicts),
        )
        return screening

    def find_available_workers(
        self,
        role_id: int,
        shift_date: date,
        start_time: time,
        end_time: time,
    ) -> list[Candidate]:
        """Ordered candidates that may take the slot right now."""
        return self.screen_workers(role_id, shift_date, start_time, end_time).available

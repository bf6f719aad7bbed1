"""
DayPlanResolver - Merges a template with per-player overrides.

Responsible for:
- Producing the effective plan (focus, note, ordered assignments) for one
  (enrollment, week, day)
- Producing a whole week as either a legacy free-text plan or a day-level plan
- Issuing stable assignment keys for template and override assignments

Precedence for a day: a DayOverride, when present, owns focus and note even
when they are null. Its assignment list replaces the template day's list only
when non-empty. Without an override the TemplateDay is used as-is.

The resolver does not clamp. Coordinates outside the template raise
OutOfRangeError; clamping belongs to the cycle position resolver.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Mapping, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import OutOfRangeError, ValidationError
from app.core.logging import get_logger
from app.models.enrollment import DayOverride, ProgramEnrollment, WeekOverride
from app.models.enums import AssignmentSource
from app.models.library import Drill, Focus
from app.models.program import (
    ProgramTemplate,
    TemplateDay,
    TemplateDayAssignment,
    TemplateWeek,
)
from app.repositories.enrollment_repository import EnrollmentRepository
from app.repositories.library_repository import DrillRepository, FocusRepository
from app.repositories.template_repository import TemplateRepository
from app.schemas.enrollment import AssignmentSpec
from app.schemas.plan import (
    DayLevelWeekPlan,
    DayPlan,
    DrillSummary,
    FocusSummary,
    LegacyWeekPlan,
    ResolvedAssignment,
)
from app.services.base import BaseService

logger = get_logger(__name__)

TEMPLATE_KEY_PREFIX = "tpl"
OVERRIDE_KEY_PREFIX = "ovr"


def template_assignment_key(assignment_id: int) -> str:
    return f"{TEMPLATE_KEY_PREFIX}-{assignment_id}"


def override_assignment_key(override_id: int, position: int) -> str:
    """Key for an inline override assignment; scoped to the override and its list position."""
    return f"{OVERRIDE_KEY_PREFIX}-{override_id}-{position}"


def parse_assignment_key(key: str) -> tuple[AssignmentSource, tuple[int, ...]]:
    """
    Split an assignment key into its source and numeric parts.

    Raises:
        ValidationError: If the key is not a template or override key
    """
    parts = key.split("-")
    try:
        numbers = tuple(int(p) for p in parts[1:])
    except ValueError:
        numbers = ()
    if parts[0] == TEMPLATE_KEY_PREFIX and len(numbers) == 1:
        return AssignmentSource.TEMPLATE, numbers
    if parts[0] == OVERRIDE_KEY_PREFIX and len(numbers) == 2:
        return AssignmentSource.OVERRIDE, numbers
    raise ValidationError("assignment_id", f"unrecognised assignment key {key!r}")


def check_in_range(template: ProgramTemplate, week_index: int, day_index: int | None = None) -> None:
    if not template.contains(week_index, day_index):
        raise OutOfRangeError(
            f"({week_index}, {day_index}) is outside template {template.id}",
            details={
                "template_id": template.id,
                "week_index": week_index,
                "day_index": day_index,
                "weeks_count": template.weeks_count,
                "cycle_days": template.cycle_days,
            },
        )


def _drill_summary(drills: Mapping[int, Drill], drill_id: int) -> DrillSummary | None:
    drill = drills.get(drill_id)
    return DrillSummary.model_validate(drill) if drill is not None else None


def _from_template(
    assignments: Sequence[TemplateDayAssignment],
    drills: Mapping[int, Drill],
) -> list[ResolvedAssignment]:
    ordered = sorted(assignments, key=lambda a: (a.sort_order, a.id))
    return [
        ResolvedAssignment(
            assignment_id=template_assignment_key(a.id),
            source=AssignmentSource.TEMPLATE,
            position=position,
            drill_id=a.drill_id,
            drill=_drill_summary(drills, a.drill_id),
            sets=a.sets,
            reps=a.reps,
            duration_minutes=a.duration_minutes,
            requires_upload=bool(a.requires_upload),
            upload_prompt=a.upload_prompt,
            notes_to_player=a.notes_to_player,
        )
        for position, a in enumerate(ordered)
    ]


def _from_override(override: DayOverride, drills: Mapping[int, Drill]) -> list[ResolvedAssignment]:
    resolved = []
    for position, raw in enumerate(override.assignments or []):
        spec = AssignmentSpec.model_validate(raw)
        resolved.append(
            ResolvedAssignment(
                assignment_id=override_assignment_key(override.id, position),
                source=AssignmentSource.OVERRIDE,
                position=position,
                drill_id=spec.drill_id,
                drill=_drill_summary(drills, spec.drill_id),
                sets=spec.sets,
                reps=spec.reps,
                duration_minutes=spec.minutes,
                requires_upload=spec.requires_upload,
                upload_prompt=spec.upload_prompt,
                notes_to_player=spec.notes,
            )
        )
    return resolved


def merge_day_plan(
    week_index: int,
    day_index: int,
    template_day: TemplateDay | None,
    template_assignments: Sequence[TemplateDayAssignment],
    day_override: DayOverride | None,
    focuses: Mapping[int, Focus] | None = None,
    drills: Mapping[int, Drill] | None = None,
) -> DayPlan:
    """
    Merge already-loaded template and override rows into one DayPlan.

    Args:
        week_index: Week coordinate (already validated)
        day_index: Day coordinate (already validated)
        template_day: TemplateDay row, if the template has one for the day
        template_assignments: The template day's assignments
        day_override: The enrollment's DayOverride for the day, if any
        focuses: Focus rows by id, for expanding focus references
        drills: Drill rows by id, for expanding drill references

    Returns:
        DayPlan with tracking fields left at their defaults
    """
    focuses = focuses or {}
    drills = drills or {}

    if day_override is not None:
        focus_id = day_override.focus_id
        note = day_override.day_note
    elif template_day is not None:
        focus_id = template_day.focus_id
        note = template_day.note
    else:
        focus_id = None
        note = None

    assignments_overridden = day_override is not None and bool(day_override.assignments)
    if assignments_overridden:
        assignments = _from_override(day_override, drills)
    else:
        assignments = _from_template(template_assignments, drills)

    focus = focuses.get(focus_id) if focus_id is not None else None

    return DayPlan(
        week_index=week_index,
        day_index=day_index,
        focus=FocusSummary.model_validate(focus) if focus is not None else None,
        note=note,
        assignments=assignments,
        has_day_override=day_override is not None,
        assignments_overridden=assignments_overridden,
    )


def merge_legacy_week(
    week_index: int,
    template_week: TemplateWeek | None,
    week_override: WeekOverride | None,
) -> LegacyWeekPlan:
    """A week override, when present, replaces the template week wholesale."""
    source = week_override if week_override is not None else template_week
    if source is None:
        return LegacyWeekPlan(week_index=week_index)
    return LegacyWeekPlan(
        week_index=week_index,
        goals=list(source.goals or []),
        assignments=list(source.assignments or []),
        overridden=week_override is not None,
    )


class DayPlanResolver(BaseService):
    """Loads template and override rows and resolves effective plans."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._templates = TemplateRepository(session)
        self._enrollments = EnrollmentRepository(session)
        self._focuses = FocusRepository(session)
        self._drills = DrillRepository(session)

    async def _template_for(self, enrollment: ProgramEnrollment) -> ProgramTemplate:
        template = enrollment.template
        if template is None:
            template = await self._get_or_404(ProgramTemplate, enrollment.template_id)
        return template

    async def resolve_day_plan(
        self,
        enrollment: ProgramEnrollment,
        week_index: int,
        day_index: int,
    ) -> DayPlan:
        """
        Resolve the effective plan for one day of an enrollment.

        Raises:
            OutOfRangeError: If (week_index, day_index) is outside the template
        """
        template = await self._template_for(enrollment)
        check_in_range(template, week_index, day_index)

        template_day = await self._templates.get_day(template.id, week_index, day_index)
        template_assignments = await self._templates.list_assignments(
            template.id, week_index, day_index
        )
        day_override = await self._enrollments.get_day_override(
            enrollment.id, week_index, day_index
        )

        focuses, drills = await self._load_references(
            [template_day] if template_day else [],
            template_assignments,
            [day_override] if day_override else [],
        )

        plan = merge_day_plan(
            week_index,
            day_index,
            template_day,
            template_assignments,
            day_override,
            focuses,
            drills,
        )
        logger.debug(
            "day_plan_resolved",
            enrollment_id=enrollment.id,
            week_index=week_index,
            day_index=day_index,
            has_day_override=plan.has_day_override,
            assignment_count=len(plan.assignments),
        )
        return plan

    async def resolve_week_plan(
        self,
        enrollment: ProgramEnrollment,
        week_index: int,
    ) -> LegacyWeekPlan | DayLevelWeekPlan:
        """
        Resolve a whole week.

        A week with any TemplateDay rows is day-level; otherwise it is rendered
        from the legacy TemplateWeek / WeekOverride content. The two are never
        mixed.
        """
        template = await self._template_for(enrollment)
        check_in_range(template, week_index)

        template_days = await self._templates.list_days(template.id, week_index)
        if not template_days:
            template_week = await self._templates.get_week(template.id, week_index)
            week_override = await self._enrollments.get_week_override(enrollment.id, week_index)
            return merge_legacy_week(week_index, template_week, week_override)

        assignments = await self._templates.list_assignments(template.id, week_index)
        overrides = await self._enrollments.list_day_overrides(enrollment.id, week_index)
        focuses, drills = await self._load_references(template_days, assignments, overrides)

        days_by_index = {d.day_index: d for d in template_days}
        overrides_by_index = {o.day_index: o for o in overrides}
        assignments_by_day: dict[int, list[TemplateDayAssignment]] = defaultdict(list)
        for assignment in assignments:
            assignments_by_day[assignment.day_index].append(assignment)

        days = {
            day_index: merge_day_plan(
                week_index,
                day_index,
                days_by_index.get(day_index),
                assignments_by_day.get(day_index, []),
                overrides_by_index.get(day_index),
                focuses,
                drills,
            )
            for day_index in range(1, template.cycle_days + 1)
        }
        return DayLevelWeekPlan(week_index=week_index, days=days)

    async def _load_references(
        self,
        template_days: Sequence[TemplateDay],
        template_assignments: Sequence[TemplateDayAssignment],
        overrides: Sequence[DayOverride],
    ) -> tuple[dict[int, Focus], dict[int, Drill]]:
        focus_ids = {d.focus_id for d in template_days if d.focus_id is not None}
        focus_ids |= {o.focus_id for o in overrides if o.focus_id is not None}

        drill_ids = {a.drill_id for a in template_assignments}
        for override in overrides:
            for raw in override.assignments or []:
                drill_id = raw.get("drill_id") if isinstance(raw, dict) else None
                if drill_id is not None:
                    drill_ids.add(drill_id)

        focuses = await self._focuses.get_many(focus_ids)
        drills = await self._drills.get_many(drill_ids)
        return focuses, drills

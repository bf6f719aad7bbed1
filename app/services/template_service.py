"""
TemplateService - Coach-side authoring of program templates.

Responsible for:
- Creating, updating, duplicating and deleting templates
- Writing legacy week content and day-level focus/note
- Upserting and deleting per-day drill assignments

Template lengths are validated here, at write time, so the cycle position
resolver can assume positive ``weeks_count`` and ``cycle_days``.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import get_settings
from app.core.exceptions import ConfigurationError, ConflictError, NotFoundError
from app.core.logging import get_logger
from app.models.library import Drill, Focus
from app.models.program import (
    ProgramTemplate,
    TemplateDay,
    TemplateDayAssignment,
    TemplateWeek,
)
from app.repositories.template_repository import TemplateRepository
from app.schemas.program import (
    DayAssignmentUpsert,
    TemplateCreate,
    TemplateDayUpdate,
    TemplateUpdate,
    TemplateWeekUpdate,
)
from app.services.base import BaseService

logger = get_logger(__name__)

_ASSIGNMENT_FIELDS = (
    "drill_id",
    "sets",
    "reps",
    "duration_minutes",
    "requires_upload",
    "upload_prompt",
    "notes_to_player",
    "sort_order",
)


def validate_template_shape(weeks_count: int, cycle_days: int) -> None:
    """
    Check template lengths against the configured limits.

    Raises:
        ConfigurationError: If either length is non-positive or above its maximum
    """
    settings = get_settings()
    if weeks_count is None or weeks_count <= 0:
        raise ConfigurationError("weeks_count", "must be a positive integer")
    if weeks_count > settings.max_weeks_count:
        raise ConfigurationError(
            "weeks_count",
            f"must be at most {settings.max_weeks_count}",
            {"weeks_count": weeks_count, "max": settings.max_weeks_count},
        )
    if cycle_days is None or cycle_days <= 0:
        raise ConfigurationError("cycle_days", "must be a positive integer")
    if cycle_days > settings.max_cycle_days:
        raise ConfigurationError(
            "cycle_days",
            f"must be at most {settings.max_cycle_days}",
            {"cycle_days": cycle_days, "max": settings.max_cycle_days},
        )


class TemplateService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._templates = TemplateRepository(session)

    async def get_template(self, template_id: int) -> ProgramTemplate:
        return await self._get_or_404(ProgramTemplate, template_id)

    async def list_templates(self, coach_user_id: str) -> list[ProgramTemplate]:
        return await self._templates.list_for_coach(coach_user_id)

    async def create_template(
        self,
        coach_user_id: str,
        team_id: str,
        request: TemplateCreate,
    ) -> ProgramTemplate:
        settings = get_settings()
        cycle_days = request.cycle_days if request.cycle_days is not None else settings.default_cycle_days
        validate_template_shape(request.weeks_count, cycle_days)

        template = ProgramTemplate(
            coach_user_id=coach_user_id,
            team_id=team_id,
            title=request.title or settings.default_template_title,
            weeks_count=request.weeks_count,
            cycle_days=cycle_days,
        )
        await self._templates.create(template)
        logger.info(
            "template_created",
            template_id=template.id,
            coach_user_id=coach_user_id,
            weeks_count=template.weeks_count,
            cycle_days=template.cycle_days,
        )
        return template

    async def update_template(self, template_id: int, request: TemplateUpdate) -> ProgramTemplate:
        """
        Update title and/or lengths.

        Shrinking a template leaves rows beyond the new bounds in place; they
        are simply never resolved.
        """
        template = await self.get_template(template_id)
        weeks_count = request.weeks_count if request.weeks_count is not None else template.weeks_count
        cycle_days = request.cycle_days if request.cycle_days is not None else template.cycle_days
        validate_template_shape(weeks_count, cycle_days)

        if request.title is not None:
            template.title = request.title.strip()
        template.weeks_count = weeks_count
        template.cycle_days = cycle_days
        await self._session.flush()
        logger.info("template_updated", template_id=template.id)
        return template

    async def delete_template(self, template_id: int) -> None:
        template = await self.get_template(template_id)
        enrolled = await self._templates.count_enrollments(template_id)
        if enrolled:
            raise ConflictError(
                f"Template {template_id} has {enrolled} enrollment(s)",
                details={"template_id": template_id, "enrollments": enrolled},
            )
        await self._session.delete(template)
        await self._session.flush()
        logger.info("template_deleted", template_id=template_id)

    async def duplicate_template(self, template_id: int, coach_user_id: str) -> ProgramTemplate:
        """Copy a template with its weeks, days and day assignments under a new title."""
        source = await self.get_template(template_id)
        copy = ProgramTemplate(
            coach_user_id=coach_user_id,
            team_id=source.team_id,
            title=f"{source.title} (Copy)"[:120],
            weeks_count=source.weeks_count,
            cycle_days=source.cycle_days,
        )
        await self._templates.create(copy)

        for week in await self._templates.list_weeks(source.id):
            self._session.add(
                TemplateWeek(
                    template_id=copy.id,
                    week_index=week.week_index,
                    goals=list(week.goals or []),
                    assignments=list(week.assignments or []),
                )
            )
        for day in await self._templates.list_days(source.id):
            self._session.add(
                TemplateDay(
                    template_id=copy.id,
                    week_index=day.week_index,
                    day_index=day.day_index,
                    focus_id=day.focus_id,
                    note=day.note,
                )
            )
        for assignment in await self._templates.list_assignments(source.id):
            values = {name: getattr(assignment, name) for name in _ASSIGNMENT_FIELDS}
            self._session.add(
                TemplateDayAssignment(
                    template_id=copy.id,
                    week_index=assignment.week_index,
                    day_index=assignment.day_index,
                    **values,
                )
            )
        await self._session.flush()
        logger.info("template_duplicated", source_id=source.id, template_id=copy.id)
        return copy

    async def set_template_week(
        self,
        template_id: int,
        week_index: int,
        request: TemplateWeekUpdate,
    ) -> TemplateWeek:
        template = await self.get_template(template_id)
        self._check_coordinates(template, week_index)

        week = await self._templates.get_week(template_id, week_index)
        if week is None:
            week = TemplateWeek(template_id=template_id, week_index=week_index)
            self._session.add(week)
        week.goals = request.goals
        week.assignments = request.assignments
        await self._session.flush()
        return week

    async def set_template_day(
        self,
        template_id: int,
        week_index: int,
        day_index: int,
        request: TemplateDayUpdate,
    ) -> TemplateDay:
        template = await self.get_template(template_id)
        self._check_coordinates(template, week_index, day_index)
        if request.focus_id is not None:
            await self._get_or_404(Focus, request.focus_id)

        day = await self._ensure_day(template_id, week_index, day_index)
        day.focus_id = request.focus_id
        day.note = (request.note or "").strip() or None
        await self._session.flush()
        logger.info(
            "template_day_set",
            template_id=template_id,
            week_index=week_index,
            day_index=day_index,
            focus_id=day.focus_id,
        )
        return day

    async def upsert_day_assignment(
        self,
        template_id: int,
        request: DayAssignmentUpsert,
    ) -> TemplateDayAssignment:
        """
        Create a day assignment, or update the one named by ``request.assignment_id``.

        Writing an assignment also creates the TemplateDay row for its day if
        missing, which switches that week to day-level resolution.
        """
        template = await self.get_template(template_id)
        self._check_coordinates(template, request.week_index, request.day_index)
        await self._get_or_404(Drill, request.drill_id)

        if request.assignment_id is not None:
            assignment = await self._get_assignment(template_id, request.assignment_id)
        else:
            assignment = TemplateDayAssignment(template_id=template_id)
            self._session.add(assignment)

        assignment.week_index = request.week_index
        assignment.day_index = request.day_index
        for name in _ASSIGNMENT_FIELDS:
            setattr(assignment, name, getattr(request, name))

        await self._ensure_day(template_id, request.week_index, request.day_index)
        await self._session.flush()
        logger.info(
            "day_assignment_saved",
            template_id=template_id,
            assignment_id=assignment.id,
            week_index=assignment.week_index,
            day_index=assignment.day_index,
        )
        return assignment

    async def delete_day_assignment(self, template_id: int, assignment_id: int) -> None:
        assignment = await self._get_assignment(template_id, assignment_id)
        await self._session.delete(assignment)
        await self._session.flush()
        logger.info("day_assignment_deleted", template_id=template_id, assignment_id=assignment_id)

    async def _get_assignment(self, template_id: int, assignment_id: int) -> TemplateDayAssignment:
        assignment = await self._templates.get_assignment(assignment_id)
        if assignment is None or assignment.template_id != template_id:
            raise NotFoundError(
                "TemplateDayAssignment",
                f"Assignment {assignment_id} not found on template {template_id}",
                {"template_id": template_id, "assignment_id": assignment_id},
            )
        return assignment

    async def _ensure_day(self, template_id: int, week_index: int, day_index: int) -> TemplateDay:
        day = await self._templates.get_day(template_id, week_index, day_index)
        if day is None:
            day = TemplateDay(template_id=template_id, week_index=week_index, day_index=day_index)
            self._session.add(day)
            await self._session.flush()
        return day

from __future__ import annotations
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func

from app.models.program import (
    ProgramTemplate,
    TemplateDay,
    TemplateDayAssignment,
    TemplateWeek,
)
from app.models.enrollment import ProgramEnrollment
from app.repositories.base import Repository


class TemplateRepository(Repository[ProgramTemplate, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> ProgramTemplate | None:
        return await self._session.get(ProgramTemplate, id)

    async def list_for_coach(self, coach_user_id: str) -> list[ProgramTemplate]:
        result = await self._session.execute(
            select(ProgramTemplate)
            .where(ProgramTemplate.coach_user_id == coach_user_id)
            .order_by(ProgramTemplate.created_at.desc(), ProgramTemplate.id.desc())
        )
        return list(result.scalars().all())

    async def count_enrollments(self, template_id: int) -> int:
        result = await self._session.execute(
            select(func.count(ProgramEnrollment.id)).where(
                ProgramEnrollment.template_id == template_id
            )
        )
        return result.scalar_one()

    # Legacy weeks

    async def get_week(self, template_id: int, week_index: int) -> TemplateWeek | None:
        result = await self._session.execute(
            select(TemplateWeek).where(
                and_(
                    TemplateWeek.template_id == template_id,
                    TemplateWeek.week_index == week_index,
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_weeks(self, template_id: int) -> list[TemplateWeek]:
        result = await self._session.execute(
            select(TemplateWeek)
            .where(TemplateWeek.template_id == template_id)
            .order_by(TemplateWeek.week_index)
        )
        return list(result.scalars().all())

    # Days

    async def get_day(self, template_id: int, week_index: int, day_index: int) -> TemplateDay | None:
        result = await self._session.execute(
            select(TemplateDay).where(
                and_(
                    TemplateDay.template_id == template_id,
                    TemplateDay.week_index == week_index,
                    TemplateDay.day_index == day_index,
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_days(self, template_id: int, week_index: int | None = None) -> list[TemplateDay]:
        query = select(TemplateDay).where(TemplateDay.template_id == template_id)
        if week_index is not None:
            query = query.where(TemplateDay.week_index == week_index)
        query = query.order_by(TemplateDay.week_index, TemplateDay.day_index)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def week_has_days(self, template_id: int, week_index: int) -> bool:
        result = await self._session.execute(
            select(func.count(TemplateDay.id)).where(
                and_(
                    TemplateDay.template_id == template_id,
                    TemplateDay.week_index == week_index,
                )
            )
        )
        return result.scalar_one() > 0

    # Day assignments

    async def get_assignment(self, assignment_id: int) -> TemplateDayAssignment | None:
        return await self._session.get(TemplateDayAssignment, assignment_id)

    async def list_assignments(
        self,
        template_id: int,
        week_index: int | None = None,
        day_index: int | None = None,
    ) -> list[TemplateDayAssignment]:
        query = select(TemplateDayAssignment).where(
            TemplateDayAssignment.template_id == template_id
        )
        if week_index is not None:
            query = query.where(TemplateDayAssignment.week_index == week_index)
        if day_index is not None:
            query = query.where(TemplateDayAssignment.day_index == day_index)
        query = query.order_by(
            TemplateDayAssignment.week_index,
            TemplateDayAssignment.day_index,
            TemplateDayAssignment.sort_order,
            TemplateDayAssignment.id,
        )
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def count_drill_references(self, drill_id: int) -> int:
        result = await self._session.execute(
            select(func.count(TemplateDayAssignment.id)).where(
                TemplateDayAssignment.drill_id == drill_id
            )
        )
        return result.scalar_one()

    async def clear_focus(self, focus_id: int) -> int:
        """Null out ``focus_id`` on every template day pointing at the focus."""
        days = await self._session.execute(
            select(TemplateDay).where(TemplateDay.focus_id == focus_id)
        )
        cleared = 0
        for day in days.scalars().all():
            day.focus_id = None
            cleared += 1
        await self._session.flush()
        return cleared

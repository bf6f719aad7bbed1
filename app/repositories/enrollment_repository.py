from __future__ import annotations
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_

from app.models.enrollment import DayOverride, ProgramEnrollment, WeekOverride
from app.models.enums import EnrollmentStatus
from app.repositories.base import Repository


class EnrollmentRepository(Repository[ProgramEnrollment, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> ProgramEnrollment | None:
        return await self._session.get(ProgramEnrollment, id)

    async def list_for_coach(
        self,
        coach_user_id: str,
        status: EnrollmentStatus | None = None,
    ) -> list[ProgramEnrollment]:
        query = select(ProgramEnrollment).where(ProgramEnrollment.coach_user_id == coach_user_id)
        if status is not None:
            query = query.where(ProgramEnrollment.status == status)
        query = query.order_by(ProgramEnrollment.start_at.desc(), ProgramEnrollment.id.desc())
        result = await self._session.execute(query)
        return list(result.scalars().unique().all())

    async def list_for_player(self, player_user_id: str) -> list[ProgramEnrollment]:
        result = await self._session.execute(
            select(ProgramEnrollment)
            .where(ProgramEnrollment.player_user_id == player_user_id)
            .order_by(ProgramEnrollment.start_at.desc(), ProgramEnrollment.id.desc())
        )
        return list(result.scalars().unique().all())

    async def get_active_for_player(self, player_user_id: str) -> ProgramEnrollment | None:
        """Most recently started active enrollment for the player."""
        result = await self._session.execute(
            select(ProgramEnrollment)
            .where(
                and_(
                    ProgramEnrollment.player_user_id == player_user_id,
                    ProgramEnrollment.status == EnrollmentStatus.ACTIVE,
                )
            )
            .order_by(ProgramEnrollment.start_at.desc(), ProgramEnrollment.id.desc())
            .limit(1)
        )
        return result.scalars().first()

    # Legacy week overrides

    async def get_week_override(self, enrollment_id: int, week_index: int) -> WeekOverride | None:
        result = await self._session.execute(
            select(WeekOverride).where(
                and_(
                    WeekOverride.enrollment_id == enrollment_id,
                    WeekOverride.week_index == week_index,
                )
            )
        )
        return result.scalar_one_or_none()

    # Day overrides

    async def get_day_override(
        self, enrollment_id: int, week_index: int, day_index: int
    ) -> DayOverride | None:
        result = await self._session.execute(
            select(DayOverride).where(
                and_(
                    DayOverride.enrollment_id == enrollment_id,
                    DayOverride.week_index == week_index,
                    DayOverride.day_index == day_index,
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_day_overrides(
        self, enrollment_id: int, week_index: int | None = None
    ) -> list[DayOverride]:
        query = select(DayOverride).where(DayOverride.enrollment_id == enrollment_id)
        if week_index is not None:
            query = query.where(DayOverride.week_index == week_index)
        query = query.order_by(DayOverride.week_index, DayOverride.day_index)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def list_overrides_with_assignments(self) -> list[DayOverride]:
        """Every day override carrying inline assignments (for drill reference checks)."""
        result = await self._session.execute(select(DayOverride))
        return [o for o in result.scalars().all() if o.assignments]

    async def clear_focus(self, focus_id: int) -> int:
        """Null out ``focus_id`` on every day override pointing at the focus."""
        overrides = await self._session.execute(
            select(DayOverride).where(DayOverride.focus_id == focus_id)
        )
        cleared = 0
        for override in overrides.scalars().all():
            override.focus_id = None
            cleared += 1
        await self._session.flush()
        return cleared

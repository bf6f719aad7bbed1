"""
TodayService - Orchestrates the player's "what do I do today" view.

Enrollment -> cycle position at ``now`` -> resolved day plan -> tracking
annotation. Nothing is cached; each call recomputes from stored rows.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.enrollment import ProgramEnrollment
from app.schemas.plan import DayLevelWeekPlan, DayPlan, LegacyWeekPlan, TodayPlan
from app.services.base import BaseService
from app.services.cycle import is_program_finished, resolve_cycle_position, to_naive_utc
from app.services.day_plan import DayPlanResolver
from app.services.enrollment_service import EnrollmentService
from app.services.tracker import CompletionTracker

logger = get_logger(__name__)


class TodayService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._enrollments = EnrollmentService(session)
        self._resolver = DayPlanResolver(session)
        self._tracker = CompletionTracker(session)

    async def get_today_plan(self, enrollment_id: int, now: datetime) -> TodayPlan:
        enrollment = await self._enrollments.get_enrollment(enrollment_id)
        return await self._today_for(enrollment, now)

    async def get_today_plan_for_player(self, player_user_id: str, now: datetime) -> TodayPlan:
        """Today's plan from the player's most recently started active enrollment."""
        enrollment = await self._enrollments.get_active_enrollment(player_user_id)
        return await self._today_for(enrollment, now)

    async def get_day_plan(self, enrollment_id: int, week_index: int, day_index: int) -> DayPlan:
        """Plan for caller-chosen coordinates; bad coordinates are a ValidationError here."""
        enrollment = await self._enrollments.get_enrollment(enrollment_id)
        self._check_coordinates(enrollment.template, week_index, day_index)
        plan = await self._resolver.resolve_day_plan(enrollment, week_index, day_index)
        return await self._tracker.annotate(enrollment.id, plan)

    async def get_week_plan(
        self, enrollment_id: int, week_index: int
    ) -> LegacyWeekPlan | DayLevelWeekPlan:
        enrollment = await self._enrollments.get_enrollment(enrollment_id)
        self._check_coordinates(enrollment.template, week_index)
        week = await self._resolver.resolve_week_plan(enrollment, week_index)
        if isinstance(week, DayLevelWeekPlan):
            days = {
                day_index: await self._tracker.annotate(enrollment.id, plan)
                for day_index, plan in week.days.items()
            }
            week = week.model_copy(update={"days": days})
        return week

    async def _today_for(self, enrollment: ProgramEnrollment, now: datetime) -> TodayPlan:
        template = enrollment.template
        now = to_naive_utc(now)
        position = resolve_cycle_position(
            enrollment.start_at, template.cycle_days, template.weeks_count, now
        )
        plan = await self._resolver.resolve_day_plan(
            enrollment, position.week_index, position.day_index
        )
        plan = await self._tracker.annotate(enrollment.id, plan)

        logger.info(
            "today_plan_resolved",
            enrollment_id=enrollment.id,
            week_index=position.week_index,
            day_index=position.day_index,
        )
        return TodayPlan(
            enrollment_id=enrollment.id,
            template_id=template.id,
            template_title=template.title,
            weeks_count=template.weeks_count,
            cycle_days=template.cycle_days,
            week_index=position.week_index,
            day_index=position.day_index,
            program_finished=is_program_finished(
                enrollment.start_at, template.cycle_days, template.weeks_count, now
            ),
            resolved_at=now,
            day=plan,
        )

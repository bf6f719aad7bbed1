"""
EnrollmentService - Binds players to templates and stores per-player overrides.

Overrides never touch the shared template. A day override is keyed by
(enrollment, week, day) and re-setting it replaces the stored row in place.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.models.enrollment import DayOverride, ProgramEnrollment, WeekOverride
from app.models.enums import EnrollmentStatus
from app.models.library import Drill, Focus
from app.models.program import ProgramTemplate
from app.repositories.enrollment_repository import EnrollmentRepository
from app.repositories.library_repository import DrillRepository
from app.schemas.enrollment import DayOverrideUpdate, WeekOverrideUpdate
from app.services.base import BaseService
from app.services.cycle import to_naive_utc

logger = get_logger(__name__)


class EnrollmentService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._enrollments = EnrollmentRepository(session)
        self._drills = DrillRepository(session)

    async def get_enrollment(self, enrollment_id: int) -> ProgramEnrollment:
        return await self._get_or_404(ProgramEnrollment, enrollment_id)

    async def list_enrollments(
        self,
        coach_user_id: str,
        status: EnrollmentStatus | None = None,
    ) -> list[ProgramEnrollment]:
        return await self._enrollments.list_for_coach(coach_user_id, status)

    async def list_player_enrollments(self, player_user_id: str) -> list[ProgramEnrollment]:
        return await self._enrollments.list_for_player(player_user_id)

    async def get_active_enrollment(self, player_user_id: str) -> ProgramEnrollment:
        """
        The player's active enrollment with the latest ``start_at``.

        Raises:
            NotFoundError: If the player has no active enrollment
        """
        enrollment = await self._enrollments.get_active_for_player(player_user_id)
        if enrollment is None:
            raise NotFoundError(
                "ProgramEnrollment",
                f"No active enrollment for player {player_user_id}",
                {"player_user_id": player_user_id},
            )
        return enrollment

    async def enroll_player(
        self,
        template_id: int,
        player_user_id: str,
        coach_user_id: str,
        start_at: datetime | None = None,
    ) -> ProgramEnrollment:
        template = await self._get_or_404(ProgramTemplate, template_id)
        enrollment = ProgramEnrollment(
            template=template,
            team_id=template.team_id,
            player_user_id=player_user_id,
            coach_user_id=coach_user_id,
            start_at=to_naive_utc(start_at) if start_at is not None else datetime.utcnow(),
            status=EnrollmentStatus.ACTIVE,
        )
        await self._enrollments.create(enrollment)
        logger.info(
            "player_enrolled",
            enrollment_id=enrollment.id,
            template_id=template.id,
            player_user_id=player_user_id,
            start_at=enrollment.start_at.isoformat(),
        )
        return enrollment

    async def set_enrollment_status(
        self, enrollment_id: int, status: EnrollmentStatus
    ) -> ProgramEnrollment:
        enrollment = await self.get_enrollment(enrollment_id)
        previous = enrollment.status
        enrollment.status = status
        await self._session.flush()
        logger.info(
            "enrollment_status_changed",
            enrollment_id=enrollment_id,
            previous=getattr(previous, "value", previous),
            status=status.value,
        )
        return enrollment

    async def set_week_override(
        self,
        enrollment_id: int,
        week_index: int,
        request: WeekOverrideUpdate,
    ) -> WeekOverride:
        enrollment = await self.get_enrollment(enrollment_id)
        self._check_coordinates(enrollment.template, week_index)

        override = await self._enrollments.get_week_override(enrollment_id, week_index)
        if override is None:
            override = WeekOverride(enrollment_id=enrollment_id, week_index=week_index)
            self._session.add(override)
        override.goals = request.goals
        override.assignments = request.assignments
        await self._session.flush()
        logger.info("week_override_set", enrollment_id=enrollment_id, week_index=week_index)
        return override

    async def set_day_override(
        self,
        enrollment_id: int,
        week_index: int,
        day_index: int,
        request: DayOverrideUpdate,
    ) -> DayOverride:
        """
        Create or replace the override for one day of one enrollment.

        The stored focus and note replace the template's even when null. An
        empty assignment list keeps the template day's assignments.

        Raises:
            ValidationError: If the coordinates are outside the template
            NotFoundError: If the focus or any assigned drill does not exist
        """
        enrollment = await self.get_enrollment(enrollment_id)
        self._check_coordinates(enrollment.template, week_index, day_index)

        if request.focus_id is not None:
            await self._get_or_404(Focus, request.focus_id)
        drill_ids = {spec.drill_id for spec in request.assignments}
        found = await self._drills.get_many(drill_ids)
        missing = sorted(drill_ids - set(found))
        if missing:
            raise NotFoundError(
                Drill.__name__,
                f"Drill {missing[0]} not found",
                {"drill_ids": missing},
            )

        override = await self._enrollments.get_day_override(enrollment_id, week_index, day_index)
        if override is None:
            override = DayOverride(
                enrollment_id=enrollment_id,
                week_index=week_index,
                day_index=day_index,
            )
            self._session.add(override)
        override.focus_id = request.focus_id
        override.day_note = (request.day_note or "").strip() or None
        override.assignments = [spec.model_dump() for spec in request.assignments]
        await self._session.flush()
        logger.info(
            "day_override_set",
            enrollment_id=enrollment_id,
            week_index=week_index,
            day_index=day_index,
            assignment_count=len(override.assignments),
        )
        return override

    async def clear_day_override(self, enrollment_id: int, week_index: int, day_index: int) -> bool:
        """Remove the override so the template day shows through again; False if none existed."""
        await self.get_enrollment(enrollment_id)
        override = await self._enrollments.get_day_override(enrollment_id, week_index, day_index)
        if override is None:
            return False
        await self._session.delete(override)
        await self._session.flush()
        logger.info(
            "day_override_cleared",
            enrollment_id=enrollment_id,
            week_index=week_index,
            day_index=day_index,
        )
        return True

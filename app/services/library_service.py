"""
LibraryService - The coach's focus and drill library.

Focus deletion nulls every day and override pointing at the focus. Drill
deletion is refused while any template assignment or day override
assignment still prescribes the drill.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.core.logging import get_logger
from app.models.library import Drill, DrillMedia, Focus
from app.repositories.enrollment_repository import EnrollmentRepository
from app.repositories.library_repository import DrillRepository, FocusRepository
from app.repositories.template_repository import TemplateRepository
from app.schemas.library import (
    DrillCreate,
    DrillMediaCreate,
    DrillUpdate,
    FocusCreate,
    FocusUpdate,
)
from app.schemas.program import _clean_lines
from app.services.base import BaseService

logger = get_logger(__name__)

_LIST_FIELDS = {"cues", "equipment", "common_mistakes"}


def _apply_updates(entity, updates: dict) -> None:
    for key, value in updates.items():
        if key in _LIST_FIELDS and value is not None:
            value = _clean_lines(value)
        setattr(entity, key, value)


class LibraryService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._focuses = FocusRepository(session)
        self._drills = DrillRepository(session)
        self._templates = TemplateRepository(session)
        self._enrollments = EnrollmentRepository(session)

    # Focuses

    async def get_focus(self, focus_id: int) -> Focus:
        return await self._get_or_404(Focus, focus_id)

    async def list_focuses(self, coach_user_id: str) -> list[Focus]:
        return await self._focuses.list_for_coach(coach_user_id)

    async def create_focus(self, coach_user_id: str, team_id: str, request: FocusCreate) -> Focus:
        focus = Focus(
            coach_user_id=coach_user_id,
            team_id=team_id,
            name=request.name.strip(),
            description=request.description,
            cues=request.cues,
        )
        await self._focuses.create(focus)
        logger.info("focus_created", focus_id=focus.id, coach_user_id=coach_user_id)
        return focus

    async def update_focus(self, focus_id: int, request: FocusUpdate) -> Focus:
        focus = await self.get_focus(focus_id)
        _apply_updates(focus, request.model_dump(exclude_unset=True))
        await self._session.flush()
        return focus

    async def delete_focus(self, focus_id: int) -> None:
        focus = await self.get_focus(focus_id)
        days_cleared = await self._templates.clear_focus(focus_id)
        overrides_cleared = await self._enrollments.clear_focus(focus_id)
        await self._session.delete(focus)
        await self._session.flush()
        logger.info(
            "focus_deleted",
            focus_id=focus_id,
            days_cleared=days_cleared,
            overrides_cleared=overrides_cleared,
        )

    # Drills

    async def get_drill(self, drill_id: int) -> Drill:
        return await self._get_or_404(Drill, drill_id)

    async def list_drills(self, coach_user_id: str) -> list[Drill]:
        return await self._drills.list_for_coach(coach_user_id)

    async def create_drill(self, coach_user_id: str, team_id: str, request: DrillCreate) -> Drill:
        drill = Drill(
            coach_user_id=coach_user_id,
            team_id=team_id,
            title=request.title.strip(),
            category=request.category,
            goal=request.goal,
            equipment=request.equipment,
            cues=request.cues,
            common_mistakes=request.common_mistakes,
            media=[],
        )
        await self._drills.create(drill)
        logger.info("drill_created", drill_id=drill.id, coach_user_id=coach_user_id)
        return drill

    async def update_drill(self, drill_id: int, request: DrillUpdate) -> Drill:
        drill = await self.get_drill(drill_id)
        _apply_updates(drill, request.model_dump(exclude_unset=True))
        await self._session.flush()
        return drill

    async def count_drill_references(self, drill_id: int) -> int:
        """Template assignments plus day override assignments prescribing the drill."""
        count = await self._templates.count_drill_references(drill_id)
        for override in await self._enrollments.list_overrides_with_assignments():
            count += sum(
                1
                for spec in override.assignments
                if isinstance(spec, dict) and spec.get("drill_id") == drill_id
            )
        return count

    async def delete_drill(self, drill_id: int) -> None:
        drill = await self.get_drill(drill_id)
        references = await self.count_drill_references(drill_id)
        if references:
            logger.warning("drill_delete_blocked", drill_id=drill_id, references=references)
            raise ConflictError(
                f"Drill {drill_id} is still assigned {references} time(s)",
                details={"drill_id": drill_id, "references": references},
            )
        await self._session.delete(drill)
        await self._session.flush()
        logger.info("drill_deleted", drill_id=drill_id)

    # Media

    async def add_drill_media(self, drill_id: int, request: DrillMediaCreate) -> DrillMedia:
        drill = await self.get_drill(drill_id)
        media = DrillMedia(
            drill_id=drill.id,
            kind=request.kind,
            title=request.title,
            video_id=request.video_id,
            external_url=(request.external_url or "").strip() or None,
            sort_order=request.sort_order,
        )
        await self._drills.add_media(media)
        await self._session.refresh(drill, attribute_names=["media"])
        return media

    async def delete_drill_media(self, drill_id: int, media_id: int) -> None:
        media = await self._drills.get_media(media_id)
        if media is None or media.drill_id != drill_id:
            raise NotFoundError(
                "DrillMedia",
                f"Media {media_id} not found on drill {drill_id}",
                {"drill_id": drill_id, "media_id": media_id},
            )
        await self._drills.delete_media(media)
        drill = await self._drills.get(drill_id)
        if drill is not None:
            await self._session.refresh(drill, attribute_names=["media"])

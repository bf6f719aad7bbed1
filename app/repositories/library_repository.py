from __future__ import annotations
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.library import Drill, DrillMedia, Focus
from app.repositories.base import Repository


class FocusRepository(Repository[Focus, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> Focus | None:
        return await self._session.get(Focus, id)

    async def get_many(self, ids: Iterable[int]) -> dict[int, Focus]:
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return {}
        result = await self._session.execute(select(Focus).where(Focus.id.in_(wanted)))
        return {focus.id: focus for focus in result.scalars().all()}

    async def list_for_coach(self, coach_user_id: str) -> list[Focus]:
        result = await self._session.execute(
            select(Focus)
            .where(Focus.coach_user_id == coach_user_id)
            .order_by(Focus.name, Focus.id)
        )
        return list(result.scalars().all())


class DrillRepository(Repository[Drill, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> Drill | None:
        return await self._session.get(Drill, id)

    async def get_many(self, ids: Iterable[int]) -> dict[int, Drill]:
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return {}
        result = await self._session.execute(select(Drill).where(Drill.id.in_(wanted)))
        return {drill.id: drill for drill in result.scalars().all()}

    async def list_for_coach(self, coach_user_id: str) -> list[Drill]:
        result = await self._session.execute(
            select(Drill)
            .where(Drill.coach_user_id == coach_user_id)
            .order_by(Drill.title, Drill.id)
        )
        return list(result.scalars().all())

    async def get_media(self, media_id: int) -> DrillMedia | None:
        return await self._session.get(DrillMedia, media_id)

    async def add_media(self, media: DrillMedia) -> DrillMedia:
        self._session.add(media)
        await self._session.flush()
        return media

    async def delete_media(self, media: DrillMedia) -> None:
        await self._session.delete(media)
        await self._session.flush()

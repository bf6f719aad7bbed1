from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")
ID = TypeVar("ID")


class Repository(ABC, Generic[T, ID]):
    """Async repository over one aggregate root.

    ``create``/``update``/``delete`` only flush; the request-scoped session
    owns the commit.
    """

    _session: AsyncSession

    @abstractmethod
    async def get(self, id: ID) -> T | None:
        ...

    async def create(self, entity: T) -> T:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, id: ID, updates: dict) -> T | None:
        entity = await self.get(id)
        if entity:
            for key, value in updates.items():
                setattr(entity, key, value)
            await self._session.flush()
        return entity

    async def delete(self, id: ID) -> bool:
        entity = await self.get(id)
        if entity:
            await self._session.delete(entity)
            await self._session.flush()
            return True
        return False

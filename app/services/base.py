from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.program import ProgramTemplate

T = TypeVar("T")


class BaseService:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_or_404(self, model: type[T], id: int, error_msg: str | None = None) -> T:
        result = await self._session.get(model, id)
        if not result:
            entity_name = model.__name__
            raise NotFoundError(
                entity_name,
                error_msg or f"{entity_name} {id} not found",
                {"id": id},
            )
        return result

    @staticmethod
    def _check_coordinates(
        template: ProgramTemplate,
        week_index: int,
        day_index: int | None = None,
    ) -> None:
        """Reject writes addressing a week/day the template does not have."""
        if not 1 <= week_index <= template.weeks_count:
            raise ValidationError(
                "week_index",
                f"must be between 1 and {template.weeks_count}",
                {"week_index": week_index, "weeks_count": template.weeks_count},
            )
        if day_index is not None and not 1 <= day_index <= template.cycle_days:
            raise ValidationError(
                "day_index",
                f"must be between 1 and {template.cycle_days}",
                {"day_index": day_index, "cycle_days": template.cycle_days},
            )

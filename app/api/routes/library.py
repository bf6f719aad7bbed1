"""API routes for the coach's focus and drill library."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routes.dependencies import get_current_user_id, get_team_id
from app.core.exceptions import AuthorizationError
from app.db.database import get_db
from app.models.library import Drill, Focus
from app.schemas.library import (
    DrillCreate,
    DrillMediaCreate,
    DrillMediaResponse,
    DrillResponse,
    DrillUpdate,
    FocusCreate,
    FocusResponse,
    FocusUpdate,
)
from app.services.library_service import LibraryService

router = APIRouter()


def _ensure_owner(entity: Focus | Drill, user_id: str) -> None:
    if entity.coach_user_id != user_id:
        raise AuthorizationError(
            f"{type(entity).__name__} belongs to another coach",
            details={"id": entity.id},
        )


async def get_owned_focus(
    focus_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> Focus:
    focus = await LibraryService(db).get_focus(focus_id)
    _ensure_owner(focus, user_id)
    return focus


async def get_owned_drill(
    drill_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> Drill:
    drill = await LibraryService(db).get_drill(drill_id)
    _ensure_owner(drill, user_id)
    return drill


# Focuses

@router.post("/focuses", response_model=FocusResponse, status_code=status.HTTP_201_CREATED)
async def create_focus(
    request: FocusCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    team_id: str = Depends(get_team_id),
):
    return await LibraryService(db).create_focus(user_id, team_id, request)


@router.get("/focuses", response_model=list[FocusResponse])
async def list_focuses(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await LibraryService(db).list_focuses(user_id)


@router.patch("/focuses/{focus_id}", response_model=FocusResponse)
async def update_focus(
    request: FocusUpdate,
    focus: Focus = Depends(get_owned_focus),
    db: AsyncSession = Depends(get_db),
):
    return await LibraryService(db).update_focus(focus.id, request)


@router.delete("/focuses/{focus_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_focus(
    focus: Focus = Depends(get_owned_focus),
    db: AsyncSession = Depends(get_db),
):
    """Delete a focus; days and overrides pointing at it lose their focus."""
    await LibraryService(db).delete_focus(focus.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Drills

@router.post("/drills", response_model=DrillResponse, status_code=status.HTTP_201_CREATED)
async def create_drill(
    request: DrillCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    team_id: str = Depends(get_team_id),
):
    return await LibraryService(db).create_drill(user_id, team_id, request)


@router.get("/drills", response_model=list[DrillResponse])
async def list_drills(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await LibraryService(db).list_drills(user_id)


@router.get("/drills/{drill_id}", response_model=DrillResponse)
async def get_drill(drill: Drill = Depends(get_owned_drill)):
    return drill


@router.patch("/drills/{drill_id}", response_model=DrillResponse)
async def update_drill(
    request: DrillUpdate,
    drill: Drill = Depends(get_owned_drill),
    db: AsyncSession = Depends(get_db),
):
    return await LibraryService(db).update_drill(drill.id, request)


@router.delete("/drills/{drill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_drill(
    drill: Drill = Depends(get_owned_drill),
    db: AsyncSession = Depends(get_db),
):
    """Delete a drill. Refused with 409 while any assignment still prescribes it."""
    await LibraryService(db).delete_drill(drill.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/drills/{drill_id}/media",
    response_model=DrillMediaResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_drill_media(
    request: DrillMediaCreate,
    drill: Drill = Depends(get_owned_drill),
    db: AsyncSession = Depends(get_db),
):
    return await LibraryService(db).add_drill_media(drill.id, request)


@router.delete("/drills/{drill_id}/media/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_drill_media(
    media_id: int,
    drill: Drill = Depends(get_owned_drill),
    db: AsyncSession = Depends(get_db),
):
    await LibraryService(db).delete_drill_media(drill.id, media_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

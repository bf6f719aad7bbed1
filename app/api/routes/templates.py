"""API routes for coach-authored program templates."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routes.dependencies import get_current_user_id, get_owned_template, get_team_id
from app.db.database import get_db
from app.models.program import ProgramTemplate
from app.schemas.program import (
    DayAssignmentResponse,
    DayAssignmentUpsert,
    TemplateCreate,
    TemplateDayResponse,
    TemplateDayUpdate,
    TemplateResponse,
    TemplateUpdate,
    TemplateWeekResponse,
    TemplateWeekUpdate,
)
from app.services.template_service import TemplateService

router = APIRouter()


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    request: TemplateCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    team_id: str = Depends(get_team_id),
):
    return await TemplateService(db).create_template(user_id, team_id, request)


@router.get("", response_model=list[TemplateResponse])
async def list_templates(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await TemplateService(db).list_templates(user_id)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(template: ProgramTemplate = Depends(get_owned_template)):
    return template


@router.patch("/{template_id}", response_model=TemplateResponse)
async def update_template(
    request: TemplateUpdate,
    template: ProgramTemplate = Depends(get_owned_template),
    db: AsyncSession = Depends(get_db),
):
    return await TemplateService(db).update_template(template.id, request)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template: ProgramTemplate = Depends(get_owned_template),
    db: AsyncSession = Depends(get_db),
):
    await TemplateService(db).delete_template(template.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{template_id}/duplicate",
    response_model=TemplateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_template(
    template: ProgramTemplate = Depends(get_owned_template),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await TemplateService(db).duplicate_template(template.id, user_id)


@router.put("/{template_id}/weeks/{week_index}", response_model=TemplateWeekResponse)
async def set_template_week(
    week_index: int,
    request: TemplateWeekUpdate,
    template: ProgramTemplate = Depends(get_owned_template),
    db: AsyncSession = Depends(get_db),
):
    """Write legacy free-text goals and assignments for a week."""
    return await TemplateService(db).set_template_week(template.id, week_index, request)


@router.put("/{template_id}/weeks/{week_index}/days/{day_index}", response_model=TemplateDayResponse)
async def set_template_day(
    week_index: int,
    day_index: int,
    request: TemplateDayUpdate,
    template: ProgramTemplate = Depends(get_owned_template),
    db: AsyncSession = Depends(get_db),
):
    return await TemplateService(db).set_template_day(template.id, week_index, day_index, request)


@router.put("/{template_id}/assignments", response_model=DayAssignmentResponse)
async def upsert_day_assignment(
    request: DayAssignmentUpsert,
    template: ProgramTemplate = Depends(get_owned_template),
    db: AsyncSession = Depends(get_db),
):
    """Create a day assignment, or update it when ``assignment_id`` is given."""
    return await TemplateService(db).upsert_day_assignment(template.id, request)


@router.delete(
    "/{template_id}/assignments/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_day_assignment(
    assignment_id: int,
    template: ProgramTemplate = Depends(get_owned_template),
    db: AsyncSession = Depends(get_db),
):
    await TemplateService(db).delete_day_assignment(template.id, assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

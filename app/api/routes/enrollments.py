"""API routes for enrollments, per-player overrides and resolved plans."""
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routes.dependencies import (
    ensure_coach_owns_template,
    get_current_user_id,
    get_owned_enrollment,
    get_visible_enrollment,
)
from app.db.database import get_db
from app.models.enrollment import ProgramEnrollment
from app.models.enums import EnrollmentStatus
from app.schemas.enrollment import (
    DayOverrideResponse,
    DayOverrideUpdate,
    EnrollmentCreate,
    EnrollmentResponse,
    EnrollmentStatusUpdate,
    WeekOverrideResponse,
    WeekOverrideUpdate,
)
from app.schemas.plan import DayPlan, TodayPlan, WeekPlan
from app.services.enrollment_service import EnrollmentService
from app.services.template_service import TemplateService
from app.services.today import TodayService

router = APIRouter()


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll_player(
    request: EnrollmentCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    template = await TemplateService(db).get_template(request.template_id)
    ensure_coach_owns_template(template, user_id)
    return await EnrollmentService(db).enroll_player(
        template.id, request.player_user_id, user_id, request.start_at
    )


@router.get("", response_model=list[EnrollmentResponse])
async def list_enrollments(
    status_filter: EnrollmentStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Enrollments the calling coach manages."""
    return await EnrollmentService(db).list_enrollments(user_id, status_filter)


@router.get("/mine", response_model=list[EnrollmentResponse])
async def list_my_enrollments(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Enrollments of the calling player."""
    return await EnrollmentService(db).list_player_enrollments(user_id)


@router.get("/today", response_model=TodayPlan)
async def get_my_today_plan(
    at: datetime | None = Query(None, description="Resolve for this moment instead of now"),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Today's plan from the calling player's active enrollment."""
    return await TodayService(db).get_today_plan_for_player(user_id, at or datetime.utcnow())


@router.get("/{enrollment_id}", response_model=EnrollmentResponse)
async def get_enrollment(enrollment: ProgramEnrollment = Depends(get_visible_enrollment)):
    return enrollment


@router.patch("/{enrollment_id}/status", response_model=EnrollmentResponse)
async def set_enrollment_status(
    request: EnrollmentStatusUpdate,
    enrollment: ProgramEnrollment = Depends(get_owned_enrollment),
    db: AsyncSession = Depends(get_db),
):
    return await EnrollmentService(db).set_enrollment_status(enrollment.id, request.status)


@router.put("/{enrollment_id}/weeks/{week_index}/override", response_model=WeekOverrideResponse)
async def set_week_override(
    week_index: int,
    request: WeekOverrideUpdate,
    enrollment: ProgramEnrollment = Depends(get_owned_enrollment),
    db: AsyncSession = Depends(get_db),
):
    return await EnrollmentService(db).set_week_override(enrollment.id, week_index, request)


@router.put(
    "/{enrollment_id}/weeks/{week_index}/days/{day_index}/override",
    response_model=DayOverrideResponse,
)
async def set_day_override(
    week_index: int,
    day_index: int,
    request: DayOverrideUpdate,
    enrollment: ProgramEnrollment = Depends(get_owned_enrollment),
    db: AsyncSession = Depends(get_db),
):
    return await EnrollmentService(db).set_day_override(
        enrollment.id, week_index, day_index, request
    )


@router.delete(
    "/{enrollment_id}/weeks/{week_index}/days/{day_index}/override",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def clear_day_override(
    week_index: int,
    day_index: int,
    enrollment: ProgramEnrollment = Depends(get_owned_enrollment),
    db: AsyncSession = Depends(get_db),
):
    await EnrollmentService(db).clear_day_override(enrollment.id, week_index, day_index)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{enrollment_id}/today", response_model=TodayPlan)
async def get_today_plan(
    at: datetime | None = Query(None, description="Resolve for this moment instead of now"),
    enrollment: ProgramEnrollment = Depends(get_visible_enrollment),
    db: AsyncSession = Depends(get_db),
):
    return await TodayService(db).get_today_plan(enrollment.id, at or datetime.utcnow())


@router.get("/{enrollment_id}/weeks/{week_index}", response_model=WeekPlan)
async def get_week_plan(
    week_index: int,
    enrollment: ProgramEnrollment = Depends(get_visible_enrollment),
    db: AsyncSession = Depends(get_db),
):
    return await TodayService(db).get_week_plan(enrollment.id, week_index)


@router.get("/{enrollment_id}/weeks/{week_index}/days/{day_index}", response_model=DayPlan)
async def get_day_plan(
    week_index: int,
    day_index: int,
    enrollment: ProgramEnrollment = Depends(get_visible_enrollment),
    db: AsyncSession = Depends(get_db),
):
    return await TodayService(db).get_day_plan(enrollment.id, week_index, day_index)

"""Shared dependencies for API routes."""
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.db.database import get_db
from app.models.enrollment import ProgramEnrollment
from app.models.program import ProgramTemplate
from app.services.enrollment_service import EnrollmentService
from app.services.template_service import TemplateService

DEFAULT_TEAM_ID = "default"


async def get_current_user_id(
    user_id: str | None = Header(None, alias="X-User-Id"),
) -> str:
    """Get the caller's id from the ``X-User-Id`` header set by the upstream gateway.

    Raises:
        AuthenticationError: If the header is missing or blank
    """
    if not user_id or not user_id.strip():
        raise AuthenticationError("No X-User-Id header provided")
    return user_id.strip()


async def get_team_id(
    team_id: str | None = Header(None, alias="X-Team-Id"),
) -> str:
    return (team_id or "").strip() or DEFAULT_TEAM_ID


def ensure_coach_owns_template(template: ProgramTemplate, user_id: str) -> None:
    if template.coach_user_id != user_id:
        raise AuthorizationError(
            "Template belongs to another coach",
            details={"template_id": template.id},
        )


def ensure_coach_owns_enrollment(enrollment: ProgramEnrollment, user_id: str) -> None:
    if enrollment.coach_user_id != user_id:
        raise AuthorizationError(
            "Enrollment belongs to another coach",
            details={"enrollment_id": enrollment.id},
        )


def ensure_can_view_enrollment(enrollment: ProgramEnrollment, user_id: str) -> None:
    """The enrolled player and the owning coach may both read an enrollment."""
    if user_id not in (enrollment.player_user_id, enrollment.coach_user_id):
        raise AuthorizationError(
            "Enrollment is not visible to this user",
            details={"enrollment_id": enrollment.id},
        )


async def get_owned_template(
    template_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> ProgramTemplate:
    template = await TemplateService(db).get_template(template_id)
    ensure_coach_owns_template(template, user_id)
    return template


async def get_owned_enrollment(
    enrollment_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> ProgramEnrollment:
    enrollment = await EnrollmentService(db).get_enrollment(enrollment_id)
    ensure_coach_owns_enrollment(enrollment, user_id)
    return enrollment


async def get_visible_enrollment(
    enrollment_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> ProgramEnrollment:
    enrollment = await EnrollmentService(db).get_enrollment(enrollment_id)
    ensure_can_view_enrollment(enrollment, user_id)
    return enrollment

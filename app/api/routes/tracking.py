"""API routes for completions, video submissions and coach reviews."""
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routes.dependencies import (
    ensure_can_view_enrollment,
    ensure_coach_owns_enrollment,
    get_current_user_id,
    get_visible_enrollment,
)
from app.core.exceptions import AuthorizationError
from app.db.database import get_db
from app.models.enrollment import ProgramEnrollment
from app.schemas.tracking import (
    CompletionRequest,
    CompletionResponse,
    ReviewCreate,
    ReviewResponse,
    SubmissionCreate,
    SubmissionResponse,
)
from app.services.enrollment_service import EnrollmentService
from app.services.tracker import CompletionTracker

router = APIRouter()


async def _player_enrollment(db: AsyncSession, enrollment_id: int, user_id: str) -> ProgramEnrollment:
    enrollment = await EnrollmentService(db).get_enrollment(enrollment_id)
    if enrollment.player_user_id != user_id:
        raise AuthorizationError(
            "Only the enrolled player can record progress",
            details={"enrollment_id": enrollment_id},
        )
    return enrollment


@router.post("/completions", response_model=CompletionResponse)
async def mark_complete(
    request: CompletionRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    await _player_enrollment(db, request.enrollment_id, user_id)
    return await CompletionTracker(db).mark_complete(request.enrollment_id, request.assignment_id)


@router.delete("/completions", status_code=status.HTTP_204_NO_CONTENT)
async def unmark_complete(
    request: CompletionRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    await _player_enrollment(db, request.enrollment_id, user_id)
    await CompletionTracker(db).unmark_complete(request.enrollment_id, request.assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/submissions", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit(
    request: SubmissionCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    await _player_enrollment(db, request.enrollment_id, user_id)
    return await CompletionTracker(db).submit(request)


@router.get("/enrollments/{enrollment_id}/submissions", response_model=list[SubmissionResponse])
async def list_enrollment_submissions(
    week_index: int | None = Query(None, ge=1),
    enrollment: ProgramEnrollment = Depends(get_visible_enrollment),
    db: AsyncSession = Depends(get_db),
):
    """Submission feed for one enrollment, newest first, each with its review."""
    return await CompletionTracker(db).list_enrollment_submissions(enrollment.id, week_index)


@router.get("/needs-review", response_model=list[SubmissionResponse])
async def list_submissions_needing_review(
    limit: int | None = Query(None, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Unreviewed submissions across the calling coach's enrollments."""
    return await CompletionTracker(db).list_submissions_needing_review(user_id, limit)


@router.get("/submissions/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    submission = await CompletionTracker(db).get_submission(submission_id)
    enrollment = await EnrollmentService(db).get_enrollment(submission.enrollment_id)
    ensure_can_view_enrollment(enrollment, user_id)
    return submission


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def review_submission(
    request: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Review a submission. A submission takes one review; a second returns 409."""
    tracker = CompletionTracker(db)
    submission = await tracker.get_submission(request.submission_id)
    enrollment = await EnrollmentService(db).get_enrollment(submission.enrollment_id)
    ensure_coach_owns_enrollment(enrollment, user_id)
    return await tracker.review(request.submission_id, request.note, reviewer_user_id=user_id)

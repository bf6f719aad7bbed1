"""
CompletionTracker - Completions, video submissions and coach reviews.

Status of a resolved assignment for an enrollment:

- not_started: no completion and no submission
- done: a completion and no submission
- submitted_unreviewed: the most recent submission has no review
- submitted_reviewed: the most recent submission has a review

Submissions outrank completions. The two are recorded independently and
neither operation touches the other.
"""

from collections import defaultdict
from datetime import datetime
from typing import NoReturn

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import get_settings
from app.core.exceptions import ConflictError
from app.core.logging import get_logger
from app.models.enrollment import ProgramEnrollment
from app.models.enums import AssignmentStatus
from app.models.tracking import AssignmentCompletion, Review, Submission
from app.repositories.tracking_repository import TrackingRepository
from app.schemas.plan import DayPlan, ResolvedAssignment
from app.schemas.tracking import SubmissionCreate
from app.services.base import BaseService
from app.services.cycle import to_naive_utc
from app.services.day_plan import parse_assignment_key

logger = get_logger(__name__)


def derive_status(
    completion: AssignmentCompletion | None,
    submissions: list[Submission],
) -> AssignmentStatus:
    """Status from a completion and the assignment's submissions (newest first)."""
    if submissions:
        if submissions[0].review is not None:
            return AssignmentStatus.SUBMITTED_REVIEWED
        return AssignmentStatus.SUBMITTED_UNREVIEWED
    if completion is not None:
        return AssignmentStatus.DONE
    return AssignmentStatus.NOT_STARTED


def apply_tracking(
    assignment: ResolvedAssignment,
    completion: AssignmentCompletion | None,
    submissions: list[Submission],
) -> ResolvedAssignment:
    latest = submissions[0] if submissions else None
    return assignment.model_copy(
        update={
            "status": derive_status(completion, submissions),
            "completed_at": completion.completed_at if completion else None,
            "submission_count": len(submissions),
            "latest_submission_id": latest.id if latest else None,
            "latest_review_note": latest.review.review_note if latest and latest.review else None,
        }
    )


class CompletionTracker(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._tracking = TrackingRepository(session)

    async def _get_enrollment(self, enrollment_id: int) -> ProgramEnrollment:
        return await self._get_or_404(ProgramEnrollment, enrollment_id)

    async def get_submission(self, submission_id: int) -> Submission:
        return await self._get_or_404(Submission, submission_id)

    async def mark_complete(
        self,
        enrollment_id: int,
        assignment_id: str,
        now: datetime | None = None,
    ) -> AssignmentCompletion:
        """Record a completion; marking again only moves ``completed_at``."""
        await self._get_enrollment(enrollment_id)
        parse_assignment_key(assignment_id)
        completed_at = to_naive_utc(now) if now is not None else datetime.utcnow()

        completion = await self._tracking.get_completion(enrollment_id, assignment_id)
        if completion is None:
            completion = AssignmentCompletion(
                enrollment_id=enrollment_id,
                assignment_id=assignment_id,
                completed_at=completed_at,
            )
            await self._tracking.add_completion(completion)
        else:
            completion.completed_at = completed_at
            await self._session.flush()

        logger.info(
            "assignment_completed",
            enrollment_id=enrollment_id,
            assignment_id=assignment_id,
        )
        return completion

    async def unmark_complete(self, enrollment_id: int, assignment_id: str) -> bool:
        await self._get_enrollment(enrollment_id)
        removed = await self._tracking.delete_completion(enrollment_id, assignment_id)
        if removed:
            logger.info(
                "assignment_uncompleted",
                enrollment_id=enrollment_id,
                assignment_id=assignment_id,
            )
        return removed

    async def submit(self, request: SubmissionCreate, now: datetime | None = None) -> Submission:
        """
        Store a new video submission. Every call creates a row.

        Raises:
            NotFoundError: If the enrollment does not exist
            ValidationError: If week/day fall outside the template or the
                assignment key is malformed
        """
        enrollment = await self._get_enrollment(request.enrollment_id)
        self._check_coordinates(enrollment.template, request.week_index, request.day_index)
        if request.assignment_id is not None:
            parse_assignment_key(request.assignment_id)

        submission = Submission(
            enrollment_id=enrollment.id,
            week_index=request.week_index,
            day_index=request.day_index,
            assignment_id=request.assignment_id,
            video_id=request.video_id,
            note=(request.note or "").strip() or None,
            created_at=to_naive_utc(now) if now is not None else datetime.utcnow(),
            review=None,
        )
        self._session.add(submission)
        await self._session.flush()
        logger.info(
            "submission_created",
            submission_id=submission.id,
            enrollment_id=enrollment.id,
            week_index=submission.week_index,
            assignment_id=submission.assignment_id,
        )
        return submission

    async def review(
        self,
        submission_id: int,
        review_note: str | None = None,
        reviewer_user_id: str | None = None,
        now: datetime | None = None,
    ) -> Review:
        """
        Attach the one review a submission may have.

        Raises:
            NotFoundError: If the submission does not exist
            ConflictError: If the submission is already reviewed
        """
        submission = await self.get_submission(submission_id)
        existing = await self._tracking.get_review_for_submission(submission_id)
        if existing is not None:
            self._raise_already_reviewed(submission_id)

        review = Review(
            submission_id=submission.id,
            reviewer_user_id=reviewer_user_id,
            review_note=(review_note or "").strip() or None,
            reviewed_at=to_naive_utc(now) if now is not None else datetime.utcnow(),
        )
        # Concurrent reviewers can both pass the pre-check; the unique constraint decides
        try:
            await self._tracking.add_review(review)
        except IntegrityError:
            self._raise_already_reviewed(submission_id)

        submission.review = review
        logger.info(
            "submission_reviewed",
            submission_id=submission_id,
            review_id=review.id,
            reviewer_user_id=reviewer_user_id,
        )
        return review

    @staticmethod
    def _raise_already_reviewed(submission_id: int) -> NoReturn:
        logger.warning("review_conflict", submission_id=submission_id)
        raise ConflictError(
            f"Submission {submission_id} has already been reviewed",
            code="CF_REVIEW_001",
            details={"submission_id": submission_id},
        )

    async def list_submissions_needing_review(
        self,
        coach_user_id: str,
        limit: int | None = None,
    ) -> list[Submission]:
        limit = limit or get_settings().needs_review_feed_limit
        return await self._tracking.list_unreviewed_for_coach(coach_user_id, limit)

    async def list_enrollment_submissions(
        self,
        enrollment_id: int,
        week_index: int | None = None,
        limit: int | None = None,
    ) -> list[Submission]:
        await self._get_enrollment(enrollment_id)
        limit = limit or get_settings().submission_feed_limit
        return await self._tracking.list_submissions(enrollment_id, week_index=week_index, limit=limit)

    async def annotate(self, enrollment_id: int, plan: DayPlan) -> DayPlan:
        """Return a copy of ``plan`` with tracking state filled in per assignment."""
        keys = [a.assignment_id for a in plan.assignments]
        if not keys:
            return plan

        completions = await self._tracking.list_completions(enrollment_id, keys)
        submissions_by_key: dict[str, list[Submission]] = defaultdict(list)
        for submission in await self._tracking.list_submissions(enrollment_id, assignment_ids=keys):
            submissions_by_key[submission.assignment_id].append(submission)

        assignments = [
            apply_tracking(a, completions.get(a.assignment_id), submissions_by_key.get(a.assignment_id, []))
            for a in plan.assignments
        ]
        return plan.model_copy(update={"assignments": assignments})

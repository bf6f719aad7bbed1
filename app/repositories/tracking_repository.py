from __future__ import annotations
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, delete

from app.models.enrollment import ProgramEnrollment
from app.models.tracking import AssignmentCompletion, Review, Submission
from app.repositories.base import Repository


class TrackingRepository(Repository[Submission, int]):
    """Completions, submissions and reviews for enrollments."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> Submission | None:
        return await self._session.get(Submission, id)

    # Completions

    async def get_completion(
        self, enrollment_id: int, assignment_id: str
    ) -> AssignmentCompletion | None:
        result = await self._session.execute(
            select(AssignmentCompletion).where(
                and_(
                    AssignmentCompletion.enrollment_id == enrollment_id,
                    AssignmentCompletion.assignment_id == assignment_id,
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_completions(
        self, enrollment_id: int, assignment_ids: Iterable[str]
    ) -> dict[str, AssignmentCompletion]:
        wanted = list(assignment_ids)
        if not wanted:
            return {}
        result = await self._session.execute(
            select(AssignmentCompletion).where(
                and_(
                    AssignmentCompletion.enrollment_id == enrollment_id,
                    AssignmentCompletion.assignment_id.in_(wanted),
                )
            )
        )
        return {c.assignment_id: c for c in result.scalars().all()}

    async def add_completion(self, completion: AssignmentCompletion) -> AssignmentCompletion:
        self._session.add(completion)
        await self._session.flush()
        return completion

    async def delete_completion(self, enrollment_id: int, assignment_id: str) -> bool:
        result = await self._session.execute(
            delete(AssignmentCompletion).where(
                and_(
                    AssignmentCompletion.enrollment_id == enrollment_id,
                    AssignmentCompletion.assignment_id == assignment_id,
                )
            )
        )
        await self._session.flush()
        return result.rowcount > 0

    # Submissions

    async def list_submissions(
        self,
        enrollment_id: int,
        week_index: int | None = None,
        assignment_ids: Iterable[str] | None = None,
        limit: int | None = None,
    ) -> list[Submission]:
        query = select(Submission).where(Submission.enrollment_id == enrollment_id)
        if week_index is not None:
            query = query.where(Submission.week_index == week_index)
        if assignment_ids is not None:
            query = query.where(Submission.assignment_id.in_(list(assignment_ids)))
        query = query.order_by(Submission.created_at.desc(), Submission.id.desc())
        if limit is not None:
            query = query.limit(limit)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def list_unreviewed_for_coach(self, coach_user_id: str, limit: int) -> list[Submission]:
        """Submissions on the coach's enrollments with no review row, newest first."""
        reviewed = select(Review.submission_id)
        result = await self._session.execute(
            select(Submission)
            .join(ProgramEnrollment, ProgramEnrollment.id == Submission.enrollment_id)
            .where(
                and_(
                    ProgramEnrollment.coach_user_id == coach_user_id,
                    Submission.id.not_in(reviewed),
                )
            )
            .order_by(Submission.created_at.desc(), Submission.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    # Reviews

    async def get_review_for_submission(self, submission_id: int) -> Review | None:
        result = await self._session.execute(
            select(Review).where(Review.submission_id == submission_id)
        )
        return result.scalar_one_or_none()

    async def add_review(self, review: Review) -> Review:
        self._session.add(review)
        await self._session.flush()
        return review

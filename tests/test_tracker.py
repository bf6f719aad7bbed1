"""Tests for completions, submissions, reviews and derived assignment status."""
from datetime import timedelta

import pytest

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.enums import AssignmentSource, AssignmentStatus
from app.repositories.tracking_repository import TrackingRepository
from app.schemas.plan import DayPlan, ResolvedAssignment
from app.schemas.tracking import SubmissionCreate
from app.services.enrollment_service import EnrollmentService
from app.services.tracker import CompletionTracker, derive_status

from tests.conftest import COACH, START

KEY = "tpl-1"


def _plan(*keys):
    return DayPlan(
        week_index=1,
        day_index=1,
        assignments=[
            ResolvedAssignment(
                assignment_id=key,
                source=AssignmentSource.TEMPLATE,
                position=position,
                drill_id=1,
            )
            for position, key in enumerate(keys)
        ],
    )


def _submission(enrollment_id, assignment_id=KEY, week_index=1, day_index=1, video_id="vid-1"):
    return SubmissionCreate(
        enrollment_id=enrollment_id,
        week_index=week_index,
        day_index=day_index,
        assignment_id=assignment_id,
        video_id=video_id,
    )


class TestMarkComplete:
    @pytest.mark.asyncio
    async def test_idempotent(self, session, enrollment):
        tracker = CompletionTracker(session)
        first = await tracker.mark_complete(enrollment.id, KEY, now=START)
        second = await tracker.mark_complete(enrollment.id, KEY, now=START + timedelta(hours=2))

        completions = await TrackingRepository(session).list_completions(enrollment.id, [KEY])
        assert len(completions) == 1
        assert second.id == first.id
        assert completions[KEY].completed_at == START + timedelta(hours=2)

    @pytest.mark.asyncio
    async def test_unknown_enrollment(self, session):
        with pytest.raises(NotFoundError):
            await CompletionTracker(session).mark_complete(404, KEY)

    @pytest.mark.asyncio
    async def test_malformed_key(self, session, enrollment):
        with pytest.raises(ValidationError):
            await CompletionTracker(session).mark_complete(enrollment.id, "drill-1")

    @pytest.mark.asyncio
    async def test_unmark(self, session, enrollment):
        tracker = CompletionTracker(session)
        await tracker.mark_complete(enrollment.id, KEY)

        assert await tracker.unmark_complete(enrollment.id, KEY) is True
        assert await tracker.unmark_complete(enrollment.id, KEY) is False


class TestSubmit:
    @pytest.mark.asyncio
    async def test_every_call_creates_a_row(self, session, enrollment):
        tracker = CompletionTracker(session)
        first = await tracker.submit(_submission(enrollment.id))
        second = await tracker.submit(_submission(enrollment.id, video_id="vid-2"))

        assert first.id != second.id
        assert len(await tracker.list_enrollment_submissions(enrollment.id)) == 2

    @pytest.mark.asyncio
    async def test_does_not_touch_completions(self, session, enrollment):
        await CompletionTracker(session).submit(_submission(enrollment.id))

        assert await TrackingRepository(session).get_completion(enrollment.id, KEY) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("week_index,day_index", [(0, 1), (5, None), (1, 8)])
    async def test_rejects_out_of_bounds(self, session, enrollment, week_index, day_index):
        with pytest.raises(ValidationError):
            await CompletionTracker(session).submit(
                _submission(enrollment.id, week_index=week_index, day_index=day_index)
            )

    @pytest.mark.asyncio
    async def test_week_level_submission(self, session, enrollment):
        submission = await CompletionTracker(session).submit(
            _submission(enrollment.id, assignment_id=None, day_index=None, week_index=4)
        )

        assert submission.day_index is None
        assert submission.assignment_id is None

    @pytest.mark.asyncio
    async def test_feed_filters_by_week(self, session, enrollment):
        tracker = CompletionTracker(session)
        await tracker.submit(_submission(enrollment.id, week_index=1), now=START)
        week_two = await tracker.submit(_submission(enrollment.id, week_index=2), now=START + timedelta(days=8))

        feed = await tracker.list_enrollment_submissions(enrollment.id, week_index=2)

        assert [s.id for s in feed] == [week_two.id]


class TestReview:
    @pytest.mark.asyncio
    async def test_review_once(self, session, enrollment):
        tracker = CompletionTracker(session)
        submission = await tracker.submit(_submission(enrollment.id))

        review = await tracker.review(submission.id, "  Nice hands  ", reviewer_user_id=COACH)

        assert review.review_note == "Nice hands"
        assert review.reviewer_user_id == COACH
        assert submission.review is review

    @pytest.mark.asyncio
    async def test_second_review_conflicts_and_keeps_original(self, session, enrollment):
        tracker = CompletionTracker(session)
        submission = await tracker.submit(_submission(enrollment.id))
        original = await tracker.review(submission.id, "First")

        with pytest.raises(ConflictError) as exc_info:
            await tracker.review(submission.id, "Second")

        assert exc_info.value.code == "CF_REVIEW_001"
        stored = await TrackingRepository(session).get_review_for_submission(submission.id)
        assert stored.id == original.id
        assert stored.review_note == "First"

    @pytest.mark.asyncio
    async def test_unknown_submission(self, session):
        with pytest.raises(NotFoundError):
            await CompletionTracker(session).review(999, "x")


class TestNeedsReview:
    @pytest.mark.asyncio
    async def test_only_unreviewed_for_coach_newest_first(self, session, template, enrollment):
        tracker = CompletionTracker(session)
        other = await EnrollmentService(session).enroll_player(template.id, "player-9", "coach-2", START)

        older = await tracker.submit(_submission(enrollment.id), now=START)
        newer = await tracker.submit(_submission(enrollment.id), now=START + timedelta(days=1))
        reviewed = await tracker.submit(_submission(enrollment.id), now=START + timedelta(days=2))
        await tracker.submit(_submission(other.id), now=START)
        await tracker.review(reviewed.id, "done")

        feed = await tracker.list_submissions_needing_review(COACH)

        assert [s.id for s in feed] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_limit(self, session, enrollment):
        tracker = CompletionTracker(session)
        for day in range(3):
            await tracker.submit(_submission(enrollment.id), now=START + timedelta(days=day))

        assert len(await tracker.list_submissions_needing_review(COACH, limit=2)) == 2


class TestDeriveStatus:
    def test_nothing_recorded(self):
        assert derive_status(None, []) == AssignmentStatus.NOT_STARTED

    @pytest.mark.asyncio
    async def test_status_walk(self, session, enrollment):
        tracker = CompletionTracker(session)

        plan = await tracker.annotate(enrollment.id, _plan(KEY))
        assert plan.assignments[0].status == AssignmentStatus.NOT_STARTED

        completion = await tracker.mark_complete(enrollment.id, KEY, now=START)
        plan = await tracker.annotate(enrollment.id, _plan(KEY))
        assert plan.assignments[0].status == AssignmentStatus.DONE
        assert plan.assignments[0].completed_at == completion.completed_at

        first = await tracker.submit(_submission(enrollment.id), now=START + timedelta(hours=1))
        plan = await tracker.annotate(enrollment.id, _plan(KEY))
        assert plan.assignments[0].status == AssignmentStatus.SUBMITTED_UNREVIEWED
        assert plan.assignments[0].latest_submission_id == first.id

        await tracker.review(first.id, "Good")
        plan = await tracker.annotate(enrollment.id, _plan(KEY))
        assert plan.assignments[0].status == AssignmentStatus.SUBMITTED_REVIEWED
        assert plan.assignments[0].latest_review_note == "Good"

        second = await tracker.submit(_submission(enrollment.id), now=START + timedelta(hours=2))
        plan = await tracker.annotate(enrollment.id, _plan(KEY))
        annotated = plan.assignments[0]
        assert annotated.status == AssignmentStatus.SUBMITTED_UNREVIEWED
        assert annotated.submission_count == 2
        assert annotated.latest_submission_id == second.id
        assert annotated.latest_review_note is None

    @pytest.mark.asyncio
    async def test_submission_without_completion(self, session, enrollment):
        tracker = CompletionTracker(session)
        await tracker.submit(_submission(enrollment.id))

        plan = await tracker.annotate(enrollment.id, _plan(KEY, "tpl-2"))

        assert plan.assignments[0].status == AssignmentStatus.SUBMITTED_UNREVIEWED
        assert plan.assignments[1].status == AssignmentStatus.NOT_STARTED

    @pytest.mark.asyncio
    async def test_completions_are_per_enrollment(self, session, template, enrollment):
        tracker = CompletionTracker(session)
        other = await EnrollmentService(session).enroll_player(template.id, "player-2", COACH, START)
        await tracker.mark_complete(other.id, KEY)

        plan = await tracker.annotate(enrollment.id, _plan(KEY))

        assert plan.assignments[0].status == AssignmentStatus.NOT_STARTED

    @pytest.mark.asyncio
    async def test_annotate_does_not_mutate_input(self, session, enrollment):
        tracker = CompletionTracker(session)
        await tracker.mark_complete(enrollment.id, KEY)
        original = _plan(KEY)

        await tracker.annotate(enrollment.id, original)

        assert original.assignments[0].status == AssignmentStatus.NOT_STARTED

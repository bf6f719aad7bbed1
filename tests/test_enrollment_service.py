"""Tests for enrollments and per-player overrides."""
from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models.enums import EnrollmentStatus
from app.schemas.enrollment import AssignmentSpec, DayOverrideUpdate, WeekOverrideUpdate
from app.services.enrollment_service import EnrollmentService

from tests.conftest import COACH, PLAYER, START, TEAM


class TestEnrollPlayer:
    @pytest.mark.asyncio
    async def test_enroll(self, session, template, enrollment):
        assert enrollment.template_id == template.id
        assert enrollment.team_id == TEAM
        assert enrollment.player_user_id == PLAYER
        assert enrollment.coach_user_id == COACH
        assert enrollment.start_at == START
        assert enrollment.status == EnrollmentStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_start_defaults_to_now(self, session, template):
        before = datetime.utcnow()
        enrollment = await EnrollmentService(session).enroll_player(template.id, "player-2", COACH)

        assert before <= enrollment.start_at <= datetime.utcnow()

    @pytest.mark.asyncio
    async def test_aware_start_is_stored_as_utc(self, session, template):
        start = datetime(2026, 3, 2, 9, 0, tzinfo=timezone(timedelta(hours=2)))
        enrollment = await EnrollmentService(session).enroll_player(template.id, "player-2", COACH, start)

        assert enrollment.start_at == datetime(2026, 3, 2, 7, 0)

    @pytest.mark.asyncio
    async def test_unknown_template(self, session):
        with pytest.raises(NotFoundError):
            await EnrollmentService(session).enroll_player(999, PLAYER, COACH)


class TestActiveEnrollment:
    @pytest.mark.asyncio
    async def test_most_recent_active_wins(self, session, template, enrollment):
        service = EnrollmentService(session)
        later = await service.enroll_player(template.id, PLAYER, COACH, START + timedelta(days=14))
        latest_paused = await service.enroll_player(template.id, PLAYER, COACH, START + timedelta(days=30))
        await service.set_enrollment_status(latest_paused.id, EnrollmentStatus.PAUSED)

        active = await service.get_active_enrollment(PLAYER)

        assert active.id == later.id

    @pytest.mark.asyncio
    async def test_none_active(self, session, enrollment):
        service = EnrollmentService(session)
        await service.set_enrollment_status(enrollment.id, EnrollmentStatus.COMPLETED)

        with pytest.raises(NotFoundError):
            await service.get_active_enrollment(PLAYER)

    @pytest.mark.asyncio
    async def test_list_by_status(self, session, template, enrollment):
        service = EnrollmentService(session)
        paused = await service.enroll_player(template.id, "player-2", COACH, START)
        await service.set_enrollment_status(paused.id, EnrollmentStatus.PAUSED)

        assert len(await service.list_enrollments(COACH)) == 2
        assert [e.id for e in await service.list_enrollments(COACH, EnrollmentStatus.PAUSED)] == [paused.id]
        assert [e.id for e in await service.list_player_enrollments(PLAYER)] == [enrollment.id]


class TestDayOverrides:
    @pytest.mark.asyncio
    async def test_set_and_replace(self, session, enrollment, drill, focus):
        service = EnrollmentService(session)
        first = await service.set_day_override(
            enrollment.id,
            2,
            3,
            DayOverrideUpdate(
                focus_id=focus.id,
                day_note=" Extra reps ",
                assignments=[AssignmentSpec(drill_id=drill.id, reps=25)],
            ),
        )

        assert first.day_note == "Extra reps"
        assert first.assignments[0]["drill_id"] == drill.id
        assert first.assignments[0]["reps"] == 25

        second = await service.set_day_override(enrollment.id, 2, 3, DayOverrideUpdate())

        assert second.id == first.id
        assert second.focus_id is None
        assert second.day_note is None
        assert second.assignments == []

    @pytest.mark.asyncio
    async def test_out_of_bounds(self, session, enrollment):
        with pytest.raises(ValidationError):
            await EnrollmentService(session).set_day_override(enrollment.id, 5, 1, DayOverrideUpdate())

    @pytest.mark.asyncio
    async def test_unknown_drill(self, session, enrollment, drill):
        with pytest.raises(NotFoundError) as exc_info:
            await EnrollmentService(session).set_day_override(
                enrollment.id,
                1,
                1,
                DayOverrideUpdate(assignments=[AssignmentSpec(drill_id=drill.id), AssignmentSpec(drill_id=777)]),
            )

        assert exc_info.value.details == {"drill_ids": [777]}

    @pytest.mark.asyncio
    async def test_unknown_focus(self, session, enrollment):
        with pytest.raises(NotFoundError):
            await EnrollmentService(session).set_day_override(
                enrollment.id, 1, 1, DayOverrideUpdate(focus_id=555)
            )

    @pytest.mark.asyncio
    async def test_clear(self, session, enrollment):
        service = EnrollmentService(session)
        await service.set_day_override(enrollment.id, 1, 1, DayOverrideUpdate(day_note="x"))

        assert await service.clear_day_override(enrollment.id, 1, 1) is True
        assert await service.clear_day_override(enrollment.id, 1, 1) is False


class TestWeekOverrides:
    @pytest.mark.asyncio
    async def test_set_and_replace(self, session, enrollment):
        service = EnrollmentService(session)
        first = await service.set_week_override(
            enrollment.id, 1, WeekOverrideUpdate(goals=["Rest"], assignments=["Walk"])
        )
        second = await service.set_week_override(enrollment.id, 1, WeekOverrideUpdate(goals=["Lift"]))

        assert second.id == first.id
        assert second.goals == ["Lift"]
        assert second.assignments == []

    @pytest.mark.asyncio
    async def test_out_of_bounds(self, session, enrollment):
        with pytest.raises(ValidationError):
            await EnrollmentService(session).set_week_override(enrollment.id, 0, WeekOverrideUpdate())

"""HTTP tests for the program routes, run in-process against a SQLite database."""
import pytest

from tests.conftest import COACH, PLAYER

START = "2026-03-02T08:30:00"
TEN_DAYS_IN = "2026-03-12T08:30:00"


async def _seed(client, coach_headers):
    """Template with content on (2, 4) and one enrolled player."""
    template = (
        await client.post(
            "/templates",
            json={"title": "Spring hitting", "weeks_count": 4, "cycle_days": 7},
            headers=coach_headers,
        )
    ).json()
    drill = (
        await client.post(
            "/library/drills",
            json={"title": "Tee work", "category": "hitting", "cues": ["Hands inside"]},
            headers=coach_headers,
        )
    ).json()
    focus = (
        await client.post("/library/focuses", json={"name": "Stay closed"}, headers=coach_headers)
    ).json()
    await client.put(
        f"/templates/{template['id']}/weeks/2/days/4",
        json={"focus_id": focus["id"], "note": "Front toss day"},
        headers=coach_headers,
    )
    assignment = (
        await client.put(
            f"/templates/{template['id']}/assignments",
            json={"week_index": 2, "day_index": 4, "drill_id": drill["id"], "requires_upload": True},
            headers=coach_headers,
        )
    ).json()
    enrollment = (
        await client.post(
            "/enrollments",
            json={"template_id": template["id"], "player_user_id": PLAYER, "start_at": START},
            headers=coach_headers,
        )
    ).json()
    return template, drill, focus, assignment, enrollment


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers


class TestIdentity:
    @pytest.mark.asyncio
    async def test_missing_user_header(self, client):
        response = await client.get("/templates")

        assert response.status_code == 401
        body = response.json()
        assert body["data"] is None
        assert body["errors"][0]["code"] == "AUTH_001"

    @pytest.mark.asyncio
    async def test_other_coach_cannot_touch_template(self, client, coach_headers):
        template, *_ = await _seed(client, coach_headers)

        response = await client.patch(
            f"/templates/{template['id']}",
            json={"title": "Mine now"},
            headers={"X-User-Id": "coach-2"},
        )

        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "AUTH_006"

    @pytest.mark.asyncio
    async def test_stranger_cannot_read_plan(self, client, coach_headers):
        *_, enrollment = await _seed(client, coach_headers)

        response = await client.get(
            f"/enrollments/{enrollment['id']}/today", headers={"X-User-Id": "player-2"}
        )

        assert response.status_code == 403


class TestTemplates:
    @pytest.mark.asyncio
    async def test_create_defaults(self, client, coach_headers):
        response = await client.post("/templates", json={"weeks_count": 3}, headers=coach_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Untitled program"
        assert body["cycle_days"] == 7
        assert body["coach_user_id"] == COACH

    @pytest.mark.asyncio
    async def test_invalid_shape(self, client, coach_headers):
        response = await client.post(
            "/templates", json={"weeks_count": 0, "cycle_days": 7}, headers=coach_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "CFG_WEEKS_COUNT_001"

    @pytest.mark.asyncio
    async def test_malformed_body_uses_error_envelope(self, client, coach_headers):
        response = await client.post("/templates", json={"title": "No length"}, headers=coach_headers)

        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["code"] == "VAL_REQUEST_001"
        assert ["body", "weeks_count"] in [problem["loc"] for problem in error["details"]["errors"]]

    @pytest.mark.asyncio
    async def test_delete_with_enrollment_conflicts(self, client, coach_headers):
        template, *_ = await _seed(client, coach_headers)

        response = await client.delete(f"/templates/{template['id']}", headers=coach_headers)

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_duplicate(self, client, coach_headers):
        template, *_ = await _seed(client, coach_headers)

        response = await client.post(f"/templates/{template['id']}/duplicate", headers=coach_headers)

        assert response.status_code == 201
        assert response.json()["title"] == "Spring hitting (Copy)"

    @pytest.mark.asyncio
    async def test_drill_delete_blocked_while_assigned(self, client, coach_headers):
        _, drill, *_ = await _seed(client, coach_headers)

        response = await client.delete(f"/library/drills/{drill['id']}", headers=coach_headers)

        assert response.status_code == 409


class TestPlans:
    @pytest.mark.asyncio
    async def test_player_today(self, client, coach_headers, player_headers):
        _, drill, _, assignment, enrollment = await _seed(client, coach_headers)

        response = await client.get(f"/enrollments/today?at={TEN_DAYS_IN}", headers=player_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["enrollment_id"] == enrollment["id"]
        assert (body["week_index"], body["day_index"]) == (2, 4)
        assert body["day"]["focus"]["name"] == "Stay closed"
        assert body["day"]["assignments"][0]["assignment_id"] == f"tpl-{assignment['id']}"
        assert body["day"]["assignments"][0]["drill"]["title"] == "Tee work"
        assert body["day"]["assignments"][0]["status"] == "not_started"

    @pytest.mark.asyncio
    async def test_day_override_then_clear(self, client, coach_headers, player_headers):
        _, drill, _, _, enrollment = await _seed(client, coach_headers)
        override_url = f"/enrollments/{enrollment['id']}/weeks/2/days/4/override"

        response = await client.put(
            override_url,
            json={"day_note": "Rest the arm", "assignments": [{"drill_id": drill["id"], "minutes": 10}]},
            headers=coach_headers,
        )
        assert response.status_code == 200

        plan = (await client.get(f"/enrollments/{enrollment['id']}/weeks/2/days/4", headers=player_headers)).json()
        assert plan["note"] == "Rest the arm"
        assert plan["focus"] is None
        assert plan["assignments"][0]["source"] == "override"
        assert plan["assignments"][0]["duration_minutes"] == 10

        response = await client.delete(override_url, headers=coach_headers)
        assert response.status_code == 204

        plan = (await client.get(f"/enrollments/{enrollment['id']}/weeks/2/days/4", headers=player_headers)).json()
        assert plan["note"] == "Front toss day"

    @pytest.mark.asyncio
    async def test_week_plan_variants(self, client, coach_headers, player_headers):
        template, _, _, _, enrollment = await _seed(client, coach_headers)
        await client.put(
            f"/templates/{template['id']}/weeks/1",
            json={"goals": ["Contact"], "assignments": []},
            headers=coach_headers,
        )

        legacy = (await client.get(f"/enrollments/{enrollment['id']}/weeks/1", headers=player_headers)).json()
        day_level = (await client.get(f"/enrollments/{enrollment['id']}/weeks/2", headers=player_headers)).json()

        assert legacy["kind"] == "legacy"
        assert legacy["goals"] == ["Contact"]
        assert day_level["kind"] == "day_level"
        assert day_level["days"]["4"]["note"] == "Front toss day"

    @pytest.mark.asyncio
    async def test_out_of_range_day_is_bad_request(self, client, coach_headers, player_headers):
        *_, enrollment = await _seed(client, coach_headers)

        response = await client.get(f"/enrollments/{enrollment['id']}/weeks/1/days/8", headers=player_headers)

        assert response.status_code == 400


class TestTracking:
    @pytest.mark.asyncio
    async def test_complete_submit_review_flow(self, client, coach_headers, player_headers):
        _, _, _, assignment, enrollment = await _seed(client, coach_headers)
        key = f"tpl-{assignment['id']}"
        today_url = f"/enrollments/{enrollment['id']}/today?at={TEN_DAYS_IN}"

        response = await client.post(
            "/tracking/completions",
            json={"enrollment_id": enrollment["id"], "assignment_id": key},
            headers=player_headers,
        )
        assert response.status_code == 200
        status = (await client.get(today_url, headers=player_headers)).json()["day"]["assignments"][0]["status"]
        assert status == "done"

        response = await client.post(
            "/tracking/submissions",
            json={
                "enrollment_id": enrollment["id"],
                "week_index": 2,
                "day_index": 4,
                "assignment_id": key,
                "video_id": "vid-1",
            },
            headers=player_headers,
        )
        assert response.status_code == 201
        submission = response.json()
        assert submission["review"] is None

        feed = (await client.get("/tracking/needs-review", headers=coach_headers)).json()
        assert [s["id"] for s in feed] == [submission["id"]]

        response = await client.post(
            "/tracking/reviews",
            json={"submission_id": submission["id"], "note": "Nice and short"},
            headers=coach_headers,
        )
        assert response.status_code == 201
        assert response.json()["reviewer_user_id"] == COACH

        again = await client.post(
            "/tracking/reviews",
            json={"submission_id": submission["id"], "note": "Changed my mind"},
            headers=coach_headers,
        )
        assert again.status_code == 409

        assignment_state = (await client.get(today_url, headers=player_headers)).json()["day"]["assignments"][0]
        assert assignment_state["status"] == "submitted_reviewed"
        assert assignment_state["latest_review_note"] == "Nice and short"
        assert (await client.get("/tracking/needs-review", headers=coach_headers)).json() == []

        history = (
            await client.get(f"/tracking/enrollments/{enrollment['id']}/submissions", headers=player_headers)
        ).json()
        assert history[0]["review"]["review_note"] == "Nice and short"

    @pytest.mark.asyncio
    async def test_only_player_records_progress(self, client, coach_headers):
        _, _, _, assignment, enrollment = await _seed(client, coach_headers)

        response = await client.post(
            "/tracking/completions",
            json={"enrollment_id": enrollment["id"], "assignment_id": f"tpl-{assignment['id']}"},
            headers=coach_headers,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_player_cannot_review(self, client, coach_headers, player_headers):
        *_, enrollment = await _seed(client, coach_headers)
        submission = (
            await client.post(
                "/tracking/submissions",
                json={"enrollment_id": enrollment["id"], "week_index": 1, "video_id": "vid-1"},
                headers=player_headers,
            )
        ).json()

        response = await client.post(
            "/tracking/reviews", json={"submission_id": submission["id"]}, headers=player_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_uncomplete(self, client, coach_headers, player_headers):
        _, _, _, assignment, enrollment = await _seed(client, coach_headers)
        payload = {"enrollment_id": enrollment["id"], "assignment_id": f"tpl-{assignment['id']}"}
        await client.post("/tracking/completions", json=payload, headers=player_headers)

        response = await client.request("DELETE", "/tracking/completions", json=payload, headers=player_headers)

        assert response.status_code == 204

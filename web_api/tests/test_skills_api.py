"""Tests for skills API routes."""

import pytest


class TestListSkills:
    @pytest.mark.asyncio
    async def test_lists_summaries(self, client):
        response = await client.get("/api/skills")

        assert response.status_code == 200
        skills = response.json()["skills"]
        assert [s["id"] for s in skills] == ["inbox-zero", "focus-sprints", "gma"]
        assert skills[0] == {
            "id": "inbox-zero",
            "title": "Inbox Zero in Minutes",
            "brief": "Triage and clear your inbox fast.",
            "duration": 12,
            "level": "beginner",
            "tags": ["productivity", "email"],
        }

    @pytest.mark.asyncio
    async def test_search(self, client):
        response = await client.get("/api/skills", params={"search": "FOCUS"})

        assert [s["id"] for s in response.json()["skills"]] == ["focus-sprints"]

    @pytest.mark.asyncio
    async def test_level_and_tag(self, client):
        by_level = await client.get("/api/skills", params={"level": "intermediate"})
        by_tag = await client.get("/api/skills", params={"tag": "Email"})

        assert [s["id"] for s in by_level.json()["skills"]] == ["gma"]
        assert [s["id"] for s in by_tag.json()["skills"]] == ["inbox-zero"]

    @pytest.mark.asyncio
    async def test_unknown_level_rejected(self, client):
        response = await client.get("/api/skills", params={"level": "expert"})

        assert response.status_code == 422


class TestSkillDetail:
    @pytest.mark.asyncio
    async def test_detail_includes_lessons(self, client):
        response = await client.get("/api/skills/focus-sprints")

        assert response.status_code == 200
        data = response.json()
        assert data["description"].startswith("Sprint, rest, repeat")
        assert [lesson["title"] for lesson in data["lessons"]] == [
            "Sprint Setup",
            "Breaks That Restore",
            "Avoiding Context Switches",
        ]

    @pytest.mark.asyncio
    async def test_unknown_skill(self, client):
        response = await client.get("/api/skills/nope")

        assert response.status_code == 404
        assert response.json()["detail"] == "Skill not found"


class TestEnrollment:
    @pytest.mark.asyncio
    async def test_enroll(self, client, services):
        response = await client.post("/api/skills/gma/enroll", headers={"X-User-Id": "u1"})

        assert response.status_code == 200
        assert response.json() == {
            "ok": True,
            "enrolled": True,
            "userId": "u1",
            "skillId": "gma",
        }
        assert services.enrollments.is_enrolled("u1", "gma")

    @pytest.mark.asyncio
    async def test_enroll_anonymous(self, client):
        response = await client.post("/api/skills/gma/enroll")

        assert response.json()["userId"] == "anon"

    @pytest.mark.asyncio
    async def test_enroll_unknown_skill(self, client, services):
        response = await client.post("/api/skills/nope/enroll", headers={"X-User-Id": "u1"})

        assert response.status_code == 404
        assert services.enrollments.skills_for("u1") == []


class TestSkillProgress:
    @pytest.mark.asyncio
    async def test_empty(self, client):
        response = await client.get("/api/skills/gma/progress", headers={"X-User-Id": "u1"})

        assert response.status_code == 200
        data = response.json()
        assert data["skillId"] == "gma"
        assert data["enrolled"] is False
        assert data["items"] == []
        assert data["updatedAt"] is None
        assert data["stats"] == {
            "watched": 0,
            "completed": 0,
            "overall": 0,
            "totalLessons": 3,
            "points": 0,
        }

    @pytest.mark.asyncio
    async def test_record_lesson_progress(self, client):
        headers = {"X-User-Id": "u1"}
        await client.post("/api/skills/gma/enroll", headers=headers)

        response = await client.post(
            "/api/skills/gma/progress",
            json={"lessonId": "gma-1", "watched": True, "completed": True, "score": 80},
            headers=headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["enrolled"] is True
        assert data["items"][0]["lessonId"] == "gma-1"
        assert data["items"][0]["score"] == 80
        assert data["stats"]["completed"] == 1
        assert data["stats"]["overall"] == 33
        assert data["stats"]["points"] == 10
        assert data["updatedAt"] is not None

    @pytest.mark.asyncio
    async def test_skill_progress_is_separate_from_feed_progress(self, client):
        headers = {"X-User-Id": "u1"}
        await client.post(
            "/api/skills/inbox-zero/progress",
            json={"lessonId": "inbox-zero", "completed": True},
            headers=headers,
        )

        feed = await client.get("/api/progress", headers=headers)
        other_skill = await client.get("/api/skills/gma/progress", headers=headers)

        assert feed.json()["items"] == []
        assert other_skill.json()["items"] == []

    @pytest.mark.asyncio
    async def test_lessons_outside_the_skill_do_not_count(self, client):
        response = await client.post(
            "/api/skills/gma/progress",
            json={"lessonId": "elsewhere", "completed": True},
            headers={"X-User-Id": "u1"},
        )

        assert response.json()["stats"]["completed"] == 0

    @pytest.mark.asyncio
    async def test_missing_lesson_id_rejected(self, client):
        response = await client.post("/api/skills/gma/progress", json={"completed": True})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_skill(self, client):
        response = await client.post(
            "/api/skills/nope/progress", json={"lessonId": "x", "completed": True}
        )

        assert response.status_code == 404

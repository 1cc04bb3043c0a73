import pytest
from sqlmodel import select

import tastebuddy.crud.achievement as achievement_crud
from tastebuddy.core.exceptions import CustomHTTPException
from tastebuddy.crud.achievement import (
    award_achievement,
    get_or_create_achievement,
    list_user_achievements
)
from tastebuddy.models.achievement import Achievement, UserAchievement
from tastebuddy.schemas.achievement import AchievementDescriptor
from tastebuddy.schemas.enums import AchievementType
from tastebuddy.utils.achievement_catalog import ACHIEVEMENT_CATALOG, SPECIAL_ACHIEVEMENT
import tastebuddy.utils.achievement_evaluator as evaluator
from tastebuddy.utils.achievement_evaluator import evaluate_all_achievements
from tastebuddy.utils.dates import utcnow


def descriptor(name: str = "Pie Champion", **kwargs) -> AchievementDescriptor:
    return AchievementDescriptor(type=kwargs.pop("type", AchievementType.SPECIAL), name=name, **kwargs)


async def _award_rows(db_session, user_id: str):
    result = await db_session.execute(
        select(UserAchievement).where(UserAchievement.user_id == user_id)
    )
    return result.scalars().all()


class TestAwardAchievement:

    async def test_first_award_creates_achievement_and_row(self, db_session, alice):
        result = await award_achievement(db_session, alice.id, descriptor(icon="🥧", color="#123456"))

        assert result.already_held is False
        assert result.achievement.name == "Pie Champion"
        assert result.achievement.icon == "🥧"
        assert result.user_achievement.user_id == alice.id
        assert len(await _award_rows(db_session, alice.id)) == 1

    async def test_award_is_idempotent(self, db_session, alice):
        first = await award_achievement(db_session, alice.id, descriptor())
        first_earned_at = first.earned_at
        first_id = first.user_achievement.id

        second = await award_achievement(db_session, alice.id, descriptor())

        assert second.already_held is True
        assert second.user_achievement.id == first_id
        assert second.earned_at == first_earned_at
        assert len(await _award_rows(db_session, alice.id)) == 1

    async def test_existing_definition_is_reused(self, db_session, alice, bob):
        await award_achievement(db_session, alice.id, descriptor())
        await award_achievement(db_session, bob.id, descriptor(description="different text"))

        result = await db_session.execute(select(Achievement).where(Achievement.name == "Pie Champion"))
        achievements = result.scalars().all()
        assert len(achievements) == 1
        assert achievements[0].description == ""

    async def test_same_name_different_type_are_distinct(self, db_session, alice):
        await award_achievement(db_session, alice.id, descriptor(type=AchievementType.SPECIAL))
        result = await award_achievement(db_session, alice.id, descriptor(type=AchievementType.RECIPE_COUNT))

        assert result.already_held is False
        assert len(await _award_rows(db_session, alice.id)) == 2

    async def test_different_achievements_are_independent(self, db_session, alice):
        first = await award_achievement(db_session, alice.id, descriptor("Pie Champion"))
        second = await award_achievement(db_session, alice.id, descriptor("Soup Sage"))

        assert first.already_held is False
        assert second.already_held is False

        held = await list_user_achievements(db_session, alice.id)
        assert {ua.achievement.name for ua in held} == {"Pie Champion", "Soup Sage"}

    async def test_removing_one_award_keeps_the_other(self, db_session, alice):
        pie = await award_achievement(db_session, alice.id, descriptor("Pie Champion"))
        await award_achievement(db_session, alice.id, descriptor("Soup Sage"))

        await db_session.delete(pie.user_achievement)
        await db_session.commit()

        held = await list_user_achievements(db_session, alice.id)
        assert [ua.achievement.name for ua in held] == ["Soup Sage"]

        again = await award_achievement(db_session, alice.id, descriptor("Pie Champion"))
        assert again.already_held is False

    async def test_earned_at_is_naive_utc(self, db_session, alice):
        before = utcnow()
        result = await award_achievement(db_session, alice.id, descriptor())

        assert result.earned_at.tzinfo is None
        assert before <= result.earned_at <= utcnow()

    async def test_unknown_user_is_404(self, db_session):
        with pytest.raises(CustomHTTPException) as exc_info:
            await award_achievement(db_session, "no-such-user", descriptor())

        assert exc_info.value.status_code == 404

        result = await db_session.execute(select(Achievement))
        assert result.scalars().all() == []

    async def test_concurrent_award_reports_already_held(self, db_session, alice, monkeypatch):
        alice_id = alice.id
        first = await award_achievement(db_session, alice_id, descriptor())
        first_id = first.user_achievement.id
        first_earned_at = first.earned_at

        # Simulate a second request that checked before the first one inserted
        original = achievement_crud.get_user_achievement
        calls = []

        async def stale_check(db, user_id, achievement_id):
            calls.append(achievement_id)
            if len(calls) == 1:
                return None
            return await original(db, user_id, achievement_id)

        monkeypatch.setattr(achievement_crud, "get_user_achievement", stale_check)

        second = await award_achievement(db_session, alice_id, descriptor())

        assert len(calls) == 2
        assert second.already_held is True
        assert second.user_achievement.id == first_id
        assert second.earned_at == first_earned_at
        assert second.achievement.name == "Pie Champion"
        assert len(await _award_rows(db_session, alice_id)) == 1
        # the losing insert only rolls back its own savepoint
        assert alice.name == "Alice"


class TestEvaluation:

    @pytest.fixture
    async def catalog(self, db_session):
        for item in ACHIEVEMENT_CATALOG:
            await get_or_create_achievement(db_session, item)

    async def test_no_progress_awards_nothing(self, db_session, alice, catalog):
        outcome = await evaluate_all_achievements(db_session, alice.id)

        assert outcome.new_achievements == []
        assert outcome.evaluated == len(ACHIEVEMENT_CATALOG)
        assert outcome.already_earned == 0

    async def test_first_recipe_awarded_once(self, client, alice, auth_headers, catalog):
        headers = auth_headers(alice)
        response = await client.post(
            "/api/recipes",
            json={"title": "Toast", "instructions": "Toast the bread", "ingredients": ["bread"]},
            headers=headers
        )
        assert response.status_code == 201

        response = await client.get(f"/api/users/{alice.id}/achievements")
        names = [item["achievement"]["name"] for item in response.json()["data"]]
        assert names == ["First Recipe"]

        # explicit evaluation finds nothing new
        response = await client.post(f"/api/users/{alice.id}/achievements", headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert body["data"]["new_achievements"] == []
        assert body["data"]["already_earned"] == 1
        assert body["message"] == "No new achievements earned at this time."

    async def test_bff_on_mutual_follow(self, client, alice, bob, auth_headers, catalog):
        await client.post("/api/users/follow", json={"user_id": bob.id, "action": "follow"}, headers=auth_headers(alice))
        await client.post("/api/users/follow", json={"user_id": alice.id, "action": "follow"}, headers=auth_headers(bob))

        response = await client.get(f"/api/users/{bob.id}/achievements")
        assert [item["achievement"]["name"] for item in response.json()["data"]] == ["BFF"]

        # alice gets hers on explicit evaluation
        response = await client.post(f"/api/users/{alice.id}/achievements", headers=auth_headers(alice))
        new = response.json()["data"]["new_achievements"]
        assert [item["achievement"]["name"] for item in new] == ["BFF"]
        assert response.json()["message"] == "Congratulations! You earned 1 new achievement!"

    async def test_failing_hook_does_not_fail_the_request(self, client, alice, auth_headers, catalog, monkeypatch):
        def broken(type_, name):
            raise RuntimeError("criteria table missing")

        monkeypatch.setattr(evaluator, "criterion_for", broken)

        response = await client.post(
            "/api/recipes",
            json={"title": "Toast", "instructions": "Toast the bread"},
            headers=auth_headers(alice)
        )

        assert response.status_code == 201
        assert response.json()["data"]["title"] == "Toast"

        response = await client.get(f"/api/users/{alice.id}/achievements")
        assert response.json()["data"] == []

    async def test_manual_special_is_never_auto_awarded(self, db_session, alice, catalog):
        await get_or_create_achievement(db_session, SPECIAL_ACHIEVEMENT)

        outcome = await evaluate_all_achievements(db_session, alice.id)

        assert outcome.new_achievements == []


class TestAchievementEndpoints:

    async def test_catalog_lists_active_achievements(self, client, db_session):
        await get_or_create_achievement(db_session, descriptor("Visible"))
        await get_or_create_achievement(db_session, descriptor("Retired", is_active=False))

        response = await client.get("/api/achievements")

        assert response.status_code == 200
        assert [item["name"] for item in response.json()["data"]] == ["Visible"]

    async def test_user_achievements_newest_first(self, client, db_session, alice):
        await award_achievement(db_session, alice.id, descriptor("Older"))
        await award_achievement(db_session, alice.id, descriptor("Newer"))

        response = await client.get(f"/api/users/{alice.id}/achievements")

        data = response.json()["data"]
        assert [item["achievement"]["name"] for item in data] == ["Newer", "Older"]
        assert all(item["user_id"] == alice.id for item in data)

    async def test_cannot_evaluate_someone_else(self, client, alice, bob, auth_headers):
        response = await client.post(f"/api/users/{bob.id}/achievements", headers=auth_headers(alice))

        assert response.status_code == 403
        assert response.json()["success"] is False

    async def test_evaluate_requires_auth(self, client, alice):
        response = await client.post(f"/api/users/{alice.id}/achievements")

        assert response.status_code == 401

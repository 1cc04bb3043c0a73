import pytest
from sqlalchemy.exc import SQLAlchemyError

import tastebuddy.api.recipes as recipes_api
import tastebuddy.crud.recipe as recipe_crud
from tastebuddy.core.config import settings
from tastebuddy.models.recipe import Rating


RECIPE = {
    "title": "Tomato Soup",
    "description": "Warm and simple",
    "ingredients": ["tomatoes", " onion ", ""],
    "instructions": "Simmer everything, then blend.",
    "cooking_time": 30,
    "servings": 4,
    "difficulty": "easy",
    "cuisine": "Italian",
}


@pytest.fixture
def create_recipe(client, auth_headers):
    async def _create_recipe(user, **overrides):
        response = await client.post("/api/recipes", json={**RECIPE, **overrides}, headers=auth_headers(user))
        assert response.status_code == 201
        return response.json()["data"]

    return _create_recipe


class TestRecipeCrud:

    async def test_create_and_fetch(self, client, alice, create_recipe):
        recipe = await create_recipe(alice)

        assert recipe["author_id"] == alice.id
        assert recipe["ingredients"] == ["tomatoes", "onion"]

        response = await client.get(f"/api/recipes/{recipe['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Tomato Soup"

    async def test_missing_title_is_400(self, client, alice, auth_headers):
        response = await client.post(
            "/api/recipes",
            json={"instructions": "Nothing to see"},
            headers=auth_headers(alice)
        )

        assert response.status_code == 400

    async def test_unknown_recipe_is_404(self, client):
        response = await client.get("/api/recipes/missing")

        assert response.status_code == 404
        assert response.json()["error_code"] == "RECIPE_NOT_FOUND"

    async def test_search_and_pagination(self, client, alice, bob, create_recipe):
        await create_recipe(alice, title="Tomato Soup")
        await create_recipe(alice, title="Pancakes", cuisine="American", description=None)
        await create_recipe(bob, title="Tomato Salad", cuisine="Greek")

        response = await client.get("/api/recipes", params={"q": "tomato"})
        data = response.json()["data"]
        assert data["total"] == 2
        assert {r["title"] for r in data["recipes"]} == {"Tomato Soup", "Tomato Salad"}

        response = await client.get("/api/recipes", params={"author_id": alice.id, "limit": 1})
        data = response.json()["data"]
        assert data["total"] == 2
        assert len(data["recipes"]) == 1
        assert data["limit"] == 1

    async def test_only_author_can_edit(self, client, alice, bob, auth_headers, create_recipe):
        recipe = await create_recipe(alice)

        response = await client.put(
            f"/api/recipes/{recipe['id']}",
            json={"title": "Stolen Soup"},
            headers=auth_headers(bob)
        )
        assert response.status_code == 403

        response = await client.put(
            f"/api/recipes/{recipe['id']}",
            json={"title": "Roasted Tomato Soup"},
            headers=auth_headers(alice)
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Roasted Tomato Soup"
        assert data["cuisine"] == "Italian"

    async def test_delete_removes_dependents(self, client, alice, bob, auth_headers, create_recipe):
        recipe = await create_recipe(alice)
        bob_headers = auth_headers(bob)
        await client.post(f"/api/recipes/{recipe['id']}/favorite", headers=bob_headers)
        await client.post(f"/api/recipes/{recipe['id']}/rating", json={"rating": 5}, headers=bob_headers)
        await client.post("/api/comments", json={"recipe_id": recipe["id"], "content": "Yum"}, headers=bob_headers)

        response = await client.delete(f"/api/recipes/{recipe['id']}", headers=bob_headers)
        assert response.status_code == 403

        response = await client.delete(f"/api/recipes/{recipe['id']}", headers=auth_headers(alice))
        assert response.status_code == 200

        assert (await client.get(f"/api/recipes/{recipe['id']}")).status_code == 404
        comments = await client.get("/api/comments", params={"recipe_id": recipe["id"]})
        assert comments.json()["data"] == []
        favorites = await client.get("/api/recipes/favorites", headers=bob_headers)
        assert favorites.json()["data"] == []


class TestRatingsAndFavorites:

    async def test_rating_upsert_and_summary(self, client, alice, bob, make_user, auth_headers, create_recipe):
        recipe = await create_recipe(alice)
        carol = await make_user(name="Carol")

        await client.post(f"/api/recipes/{recipe['id']}/rating", json={"rating": 2}, headers=auth_headers(bob))
        response = await client.post(f"/api/recipes/{recipe['id']}/rating", json={"rating": 4}, headers=auth_headers(bob))
        assert response.status_code == 200
        assert response.json()["data"] == {"average": 4.0, "count": 1, "user_rating": 4}

        await client.post(f"/api/recipes/{recipe['id']}/rating", json={"rating": 5}, headers=auth_headers(carol))

        response = await client.get(f"/api/recipes/{recipe['id']}/rating")
        assert response.json()["data"] == {"average": 4.5, "count": 2, "user_rating": None}

    async def test_concurrent_first_rating_updates_existing(
        self, client, alice, bob, session_factory, auth_headers, create_recipe, monkeypatch
    ):
        recipe = await create_recipe(alice)
        bob_id = bob.id

        # another request stores Bob's first rating after this one looked
        async with session_factory() as other:
            other.add(Rating(user_id=bob_id, recipe_id=recipe["id"], rating=2))
            await other.commit()

        original = recipe_crud.get_user_rating
        calls = []

        async def stale_lookup(db, user_id, recipe_id):
            calls.append(recipe_id)
            if len(calls) == 1:
                return None
            return await original(db, user_id, recipe_id)

        monkeypatch.setattr(recipe_crud, "get_user_rating", stale_lookup)

        response = await client.post(f"/api/recipes/{recipe['id']}/rating", json={"rating": 5}, headers=auth_headers(bob))

        assert response.status_code == 200
        assert response.json()["data"] == {"average": 5.0, "count": 1, "user_rating": 5}
        assert len(calls) == 2

    async def test_rating_out_of_range(self, client, alice, auth_headers, create_recipe):
        recipe = await create_recipe(alice)

        response = await client.post(f"/api/recipes/{recipe['id']}/rating", json={"rating": 6}, headers=auth_headers(alice))

        assert response.status_code == 400

    async def test_favorite_toggle(self, client, alice, bob, auth_headers, create_recipe):
        recipe = await create_recipe(alice)
        headers = auth_headers(bob)

        response = await client.post(f"/api/recipes/{recipe['id']}/favorite", headers=headers)
        assert response.json()["message"] == "Recipe added to favorites"

        response = await client.post(f"/api/recipes/{recipe['id']}/favorite", headers=headers)
        assert response.json()["message"] == "Recipe is already a favorite"

        response = await client.get("/api/recipes/favorites", headers=headers)
        assert [r["id"] for r in response.json()["data"]] == [recipe["id"]]

        response = await client.delete(f"/api/recipes/{recipe['id']}/favorite", headers=headers)
        assert response.json()["message"] == "Recipe removed from favorites"

        response = await client.get("/api/recipes/favorites", headers=headers)
        assert response.json()["data"] == []


class TestRecipeStats:

    async def test_stats(self, client, alice, bob, make_user, auth_headers, create_recipe):
        carol = await make_user(name="Carol")
        soup = await create_recipe(alice, title="Soup")
        stew = await create_recipe(alice, title="Stew", cuisine="Irish")
        pie = await create_recipe(bob, title="Pie", cuisine=None)

        for user, value in ((alice, 5), (bob, 5), (carol, 4)):
            await client.post(f"/api/recipes/{pie['id']}/rating", json={"rating": value}, headers=auth_headers(user))
        for user, value in ((bob, 3), (carol, 3)):
            await client.post(f"/api/recipes/{stew['id']}/rating", json={"rating": value}, headers=auth_headers(user))
        for user in (bob, carol):
            await client.post(f"/api/recipes/{soup['id']}/favorite", headers=auth_headers(user))

        response = await client.get("/api/recipes/stats")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["most_popular"][0]["id"] == soup["id"]
        assert data["most_popular"][0]["favorites_count"] == 2
        assert [r["id"] for r in data["newest"]] == [pie["id"], stew["id"], soup["id"]]
        # only recipes with at least three ratings qualify
        assert [r["id"] for r in data["highest_rated"]] == [pie["id"]]
        assert data["highest_rated"][0]["avg_rating"] == 4.67
        assert {c["cuisine"]: c["count"] for c in data["trending_cuisines"]} == {"Italian": 1, "Irish": 1}
        assert data["platform_stats"] == {
            "total_recipes": 3,
            "total_meals": 0,
            "total_users": 3,
            "total_favorites": 2,
            "total_ratings": 5,
        }


class TestErrorEnvelope:

    @pytest.fixture
    def broken_store(self, monkeypatch):
        async def fail(*args, **kwargs):
            raise SQLAlchemyError("database is gone")

        monkeypatch.setattr(recipes_api, "list_recipes", fail)

    async def test_debug_detail_outside_production(self, client, broken_store):
        response = await client.get("/api/recipes")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Failed to fetch recipes",
            "error_code": "INTERNAL_ERROR",
            "debug": "database is gone",
        }

    async def test_no_debug_detail_in_production(self, client, broken_store, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")

        response = await client.get("/api/recipes")

        assert response.status_code == 500
        assert "debug" not in response.json()
        assert response.json()["error"] == "Failed to fetch recipes"

import pytest

from tastebuddy.crud.achievement import get_or_create_achievement
from tastebuddy.utils.achievement_catalog import ACHIEVEMENT_CATALOG


def image(n: int, **extra) -> dict:
    return {"url": f"https://img.example.com/{n}.jpg", **extra}


@pytest.fixture
def create_meal(client, auth_headers):
    async def _create_meal(user, name="Sunday Roast", **extra):
        response = await client.post("/api/meals", json={"name": name, **extra}, headers=auth_headers(user))
        assert response.status_code == 201
        return response.json()["data"]

    return _create_meal


@pytest.fixture
async def catalog(db_session):
    for item in ACHIEVEMENT_CATALOG:
        await get_or_create_achievement(db_session, item)


async def mutual_follow(client, auth_headers, first, second):
    await client.post("/api/users/follow", json={"user_id": second.id, "action": "follow"}, headers=auth_headers(first))
    await client.post("/api/users/follow", json={"user_id": first.id, "action": "follow"}, headers=auth_headers(second))


class TestCreateMeal:

    async def test_first_image_becomes_primary(self, alice, create_meal):
        meal = await create_meal(alice, name="  Picnic  ", images=[image(1), image(2)])

        assert meal["name"] == "Picnic"
        assert meal["author"]["name"] == "Alice"
        assert [(i["display_order"], i["is_primary"]) for i in meal["images"]] == [(0, True), (1, False)]

    async def test_marked_primary_is_kept(self, alice, create_meal):
        meal = await create_meal(alice, images=[image(1), image(2, is_primary=True)])

        assert [i["is_primary"] for i in meal["images"]] == [False, True]

    async def test_two_primary_images_rejected(self, client, alice, auth_headers):
        response = await client.post(
            "/api/meals",
            json={"name": "Brunch", "images": [image(1, is_primary=True), image(2, is_primary=True)]},
            headers=auth_headers(alice)
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_too_many_images_rejected(self, client, alice, auth_headers):
        response = await client.post(
            "/api/meals",
            json={"name": "Feast", "images": [image(n) for n in range(6)]},
            headers=auth_headers(alice)
        )

        assert response.status_code == 400

    async def test_blank_name_rejected(self, client, alice, auth_headers):
        response = await client.post("/api/meals", json={"name": "   "}, headers=auth_headers(alice))

        assert response.status_code == 400

    async def test_requires_auth(self, client):
        response = await client.post("/api/meals", json={"name": "Lunch"})

        assert response.status_code == 401


class TestMealVisibility:

    async def test_private_meal_only_visible_to_author(self, client, alice, bob, auth_headers, create_meal):
        meal = await create_meal(alice, name="Secret Snack", is_public=False)

        response = await client.get(f"/api/meals/{meal['id']}", headers=auth_headers(bob))
        assert response.status_code == 404
        assert response.json()["error_code"] == "MEAL_NOT_FOUND"

        response = await client.get(f"/api/meals/{meal['id']}")
        assert response.status_code == 404

        response = await client.get(f"/api/meals/{meal['id']}", headers=auth_headers(alice))
        assert response.status_code == 200

    async def test_own_list_includes_private(self, client, alice, bob, auth_headers, create_meal):
        await create_meal(alice, name="Open Toast")
        await create_meal(alice, name="Hidden Toast", is_public=False)
        await create_meal(bob, name="Bob's Toast")

        response = await client.get("/api/meals", headers=auth_headers(alice))
        data = response.json()["data"]
        assert {m["name"] for m in data["meals"]} == {"Open Toast", "Hidden Toast"}
        assert data["pagination"]["total"] == 2

        response = await client.get("/api/meals/public")
        assert {m["name"] for m in response.json()["data"]["meals"]} == {"Open Toast", "Bob's Toast"}

        response = await client.get(f"/api/users/{alice.id}/meals")
        assert [m["name"] for m in response.json()["data"]["meals"]] == ["Open Toast"]

    async def test_search_and_pagination(self, client, alice, auth_headers, create_meal):
        await create_meal(alice, name="Curry Night", date="2025-01-01T19:00:00")
        await create_meal(alice, name="Taco Tuesday", description="with green curry salsa", date="2025-01-02T19:00:00")
        await create_meal(alice, name="Pizza", date="2025-01-03T19:00:00")

        response = await client.get("/api/meals", params={"search": "curry"}, headers=auth_headers(alice))
        assert [m["name"] for m in response.json()["data"]["meals"]] == ["Taco Tuesday", "Curry Night"]

        response = await client.get("/api/meals", params={"page": 2, "limit": 2}, headers=auth_headers(alice))
        data = response.json()["data"]
        assert [m["name"] for m in data["meals"]] == ["Curry Night"]
        assert data["pagination"] == {
            "page": 2,
            "limit": 2,
            "total": 3,
            "total_pages": 2,
            "has_next_page": False,
            "has_prev_page": True,
        }

    async def test_tastebuddies_only_feed(self, client, alice, bob, make_user, auth_headers, create_meal):
        carol = await make_user(name="Carol")
        await mutual_follow(client, auth_headers, alice, bob)
        # one-way follow does not count
        await client.post("/api/users/follow", json={"user_id": carol.id, "action": "follow"}, headers=auth_headers(alice))

        await create_meal(bob, name="Bob's Stew")
        await create_meal(carol, name="Carol's Cake")

        response = await client.get("/api/meals/public", params={"tastebuddies_only": True}, headers=auth_headers(alice))
        assert [m["name"] for m in response.json()["data"]["meals"]] == ["Bob's Stew"]

        response = await client.get("/api/meals/public", params={"tastebuddies_only": True})
        assert response.json()["data"]["meals"] == []

    async def test_recent_meals_are_public(self, client, alice, create_meal):
        await create_meal(alice, name="Private Pie", is_public=False)
        for n in range(3):
            await create_meal(alice, name=f"Meal {n}")

        response = await client.get("/api/meals/recent", params={"limit": 2})

        assert response.status_code == 200
        assert len(response.json()["data"]) == 2
        assert all(m["is_public"] for m in response.json()["data"])


class TestManageMeal:

    async def test_only_author_edits_or_deletes(self, client, alice, bob, auth_headers, create_meal):
        meal = await create_meal(alice)

        response = await client.put(f"/api/meals/{meal['id']}", json={"name": "Mine now"}, headers=auth_headers(bob))
        assert response.status_code == 403

        response = await client.delete(f"/api/meals/{meal['id']}", headers=auth_headers(bob))
        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_AUTHORIZED"

    async def test_update_replaces_images(self, client, alice, auth_headers, create_meal):
        meal = await create_meal(alice, images=[image(1), image(2)])

        response = await client.put(
            f"/api/meals/{meal['id']}",
            json={"description": "Better with gravy", "images": [image(3)]},
            headers=auth_headers(alice)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Sunday Roast"
        assert data["description"] == "Better with gravy"
        assert [i["url"] for i in data["images"]] == ["https://img.example.com/3.jpg"]
        assert data["images"][0]["is_primary"] is True

    async def test_delete(self, client, alice, auth_headers, create_meal):
        meal = await create_meal(alice, images=[image(1)])

        response = await client.delete(f"/api/meals/{meal['id']}", headers=auth_headers(alice))
        assert response.status_code == 200

        response = await client.get(f"/api/meals/{meal['id']}", headers=auth_headers(alice))
        assert response.status_code == 404


class TestMealAchievements:

    async def test_first_meal_and_first_shot(self, client, alice, create_meal, catalog):
        await create_meal(alice, images=[image(1)])

        response = await client.get(f"/api/users/{alice.id}/achievements")
        names = {item["achievement"]["name"] for item in response.json()["data"]}
        assert names == {"First Meal", "First Shot"}

    async def test_recipe_photo_counts_towards_photos(self, client, alice, auth_headers, catalog):
        response = await client.post(
            "/api/recipes",
            json={"title": "Photo Pie", "instructions": "Bake", "image": "https://img.example.com/pie.jpg"},
            headers=auth_headers(alice)
        )
        assert response.status_code == 201

        response = await client.get(f"/api/users/{alice.id}/achievements")
        names = {item["achievement"]["name"] for item in response.json()["data"]}
        assert names == {"First Recipe", "First Shot"}

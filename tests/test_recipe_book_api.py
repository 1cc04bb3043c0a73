import pytest


@pytest.fixture
def post_recipe(client, auth_headers):
    async def _post_recipe(user, title="Miso Soup"):
        response = await client.post(
            "/api/recipes",
            json={"title": title, "instructions": "Whisk the miso in"},
            headers=auth_headers(user)
        )
        return response.json()["data"]["id"]

    return _post_recipe


@pytest.fixture
def make_category(client, auth_headers):
    async def _make_category(user, name="Weeknight", **extra):
        response = await client.post(
            "/api/recipe-book/categories",
            json={"name": name, **extra},
            headers=auth_headers(user)
        )
        assert response.status_code == 201
        return response.json()["data"]

    return _make_category


async def save(client, headers, recipe_id, category_ids=(), notes=None):
    return await client.post(
        "/api/recipe-book",
        json={"recipe_id": recipe_id, "category_ids": list(category_ids), "notes": notes},
        headers=headers
    )


class TestCategories:

    async def test_create_and_list(self, client, alice, auth_headers, make_category):
        await make_category(alice, "Weeknight", color="#FF8800")
        await make_category(alice, "Baking")

        response = await client.get("/api/recipe-book/categories", headers=auth_headers(alice))

        data = response.json()["data"]
        assert [c["name"] for c in data] == ["Baking", "Weeknight"]
        assert data[1]["color"] == "#FF8800"
        assert all(c["recipe_count"] == 0 for c in data)

    async def test_duplicate_name_rejected(self, client, alice, bob, auth_headers, make_category):
        await make_category(alice, "Desserts")

        response = await client.post(
            "/api/recipe-book/categories", json={"name": "desserts"}, headers=auth_headers(alice)
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "CATEGORY_NAME_TAKEN"

        # names are per user
        await make_category(bob, "Desserts")

    async def test_bad_color_rejected(self, client, alice, auth_headers):
        response = await client.post(
            "/api/recipe-book/categories", json={"name": "Odd", "color": "orange"}, headers=auth_headers(alice)
        )

        assert response.status_code == 400

    async def test_rename(self, client, alice, auth_headers, make_category):
        category = await make_category(alice, "Sides")

        response = await client.put(
            f"/api/recipe-book/categories/{category['id']}",
            json={"name": "Side Dishes"},
            headers=auth_headers(alice)
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Side Dishes"

    async def test_other_users_category_is_404(self, client, alice, bob, auth_headers, make_category):
        category = await make_category(alice)

        response = await client.get(f"/api/recipe-book/categories/{category['id']}", headers=auth_headers(bob))

        assert response.status_code == 404
        assert response.json()["error_code"] == "CATEGORY_NOT_FOUND"

    async def test_delete_only_when_empty(self, client, alice, auth_headers, make_category, post_recipe):
        category = await make_category(alice)
        recipe_id = await post_recipe(alice)
        await save(client, auth_headers(alice), recipe_id, [category["id"]])

        url = f"/api/recipe-book/categories/{category['id']}"
        response = await client.delete(url, headers=auth_headers(alice))
        assert response.status_code == 400
        assert response.json()["error_code"] == "CATEGORY_NOT_EMPTY"

        await client.delete(f"/api/recipe-book/recipes/{recipe_id}", headers=auth_headers(alice))
        response = await client.delete(url, headers=auth_headers(alice))
        assert response.status_code == 200


class TestSavingRecipes:

    async def test_save_uncategorized(self, client, alice, bob, auth_headers, post_recipe):
        recipe_id = await post_recipe(bob)

        response = await save(client, auth_headers(alice), recipe_id, notes="Try with tofu")
        assert response.status_code == 201
        assert response.json()["message"] == "Recipe added to recipe book successfully"

        response = await client.get(f"/api/recipe-book/recipes/{recipe_id}", headers=auth_headers(alice))
        assert response.json()["data"] == {"in_book": True, "categories": [], "notes": "Try with tofu"}

        response = await save(client, auth_headers(alice), recipe_id)
        assert response.status_code == 400
        assert response.json()["error_code"] == "ALREADY_IN_RECIPE_BOOK"

    async def test_save_into_categories(self, client, alice, auth_headers, make_category, post_recipe):
        quick = await make_category(alice, "Quick")
        soups = await make_category(alice, "Soups")
        recipe_id = await post_recipe(alice)

        response = await save(client, auth_headers(alice), recipe_id, [quick["id"], soups["id"]])
        assert response.status_code == 201

        response = await client.get(f"/api/recipe-book/recipes/{recipe_id}", headers=auth_headers(alice))
        assert [c["name"] for c in response.json()["data"]["categories"]] == ["Quick", "Soups"]

        response = await client.get("/api/recipe-book/stats", headers=auth_headers(alice))
        assert response.json()["data"] == {"total_unique_recipes": 1, "total_entries": 2}

        response = await client.get(
            "/api/recipe-book", params={"category_id": soups["id"]}, headers=auth_headers(alice)
        )
        data = response.json()["data"]
        assert [e["recipe"]["id"] for e in data["entries"]] == [recipe_id]
        assert data["entries"][0]["category"]["name"] == "Soups"
        assert data["pagination"]["total"] == 1

    async def test_unknown_recipe_or_category(self, client, alice, bob, auth_headers, make_category, post_recipe):
        response = await save(client, auth_headers(alice), "missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "RECIPE_NOT_FOUND"

        bobs = await make_category(bob, "Bob's")
        recipe_id = await post_recipe(alice)
        response = await save(client, auth_headers(alice), recipe_id, [bobs["id"]])
        assert response.status_code == 404
        assert response.json()["error_code"] == "CATEGORY_NOT_FOUND"

    async def test_replace_categories(self, client, alice, auth_headers, make_category, post_recipe):
        quick = await make_category(alice, "Quick")
        soups = await make_category(alice, "Soups")
        recipe_id = await post_recipe(alice)
        await save(client, auth_headers(alice), recipe_id, [quick["id"], soups["id"]])

        response = await client.put(
            f"/api/recipe-book/recipes/{recipe_id}",
            json={"category_ids": [soups["id"]], "notes": "Only a soup"},
            headers=auth_headers(alice)
        )
        assert response.status_code == 200

        response = await client.get(f"/api/recipe-book/recipes/{recipe_id}", headers=auth_headers(alice))
        data = response.json()["data"]
        assert [c["name"] for c in data["categories"]] == ["Soups"]
        assert data["notes"] == "Only a soup"

    async def test_remove(self, client, alice, auth_headers, post_recipe):
        recipe_id = await post_recipe(alice)
        await save(client, auth_headers(alice), recipe_id)

        response = await client.delete(f"/api/recipe-book/recipes/{recipe_id}", headers=auth_headers(alice))
        assert response.status_code == 200

        response = await client.delete(f"/api/recipe-book/recipes/{recipe_id}", headers=auth_headers(alice))
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_IN_RECIPE_BOOK"

    async def test_deleting_recipe_clears_entries(self, client, alice, bob, auth_headers, post_recipe):
        recipe_id = await post_recipe(bob)
        await save(client, auth_headers(alice), recipe_id)

        response = await client.delete(f"/api/recipes/{recipe_id}", headers=auth_headers(bob))
        assert response.status_code == 200

        response = await client.get("/api/recipe-book/stats", headers=auth_headers(alice))
        assert response.json()["data"]["total_entries"] == 0

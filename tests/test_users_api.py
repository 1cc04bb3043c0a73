
class TestAuth:

    async def test_register_and_login(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"name": "  Dana  ", "email": "Dana@Example.com", "password": "secret123"}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["name"] == "Dana"
        assert body["data"]["email"] == "dana@example.com"
        assert body["data"]["email_visibility"] == "HIDDEN"

        response = await client.post(
            "/api/auth/login",
            data={"username": "dana@example.com", "password": "secret123"}
        )
        assert response.status_code == 200
        token = response.json()["access_token"]

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "dana@example.com"

    async def test_duplicate_email_is_rejected(self, client, alice):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Other", "email": "alice@example.com", "password": "secret123"}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "EMAIL_ALREADY_REGISTERED"

    async def test_short_password_is_validation_error(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Eve", "email": "eve@example.com", "password": "123"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "VALIDATION_ERROR"

    async def test_wrong_password(self, client, alice):
        response = await client.post(
            "/api/auth/login",
            data={"username": "alice@example.com", "password": "not-it"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_CREDENTIALS"

    async def test_inactive_user_cannot_log_in(self, client, make_user):
        await make_user(email="gone@example.com", is_active=False)

        response = await client.post(
            "/api/auth/login",
            data={"username": "gone@example.com", "password": "secret123"}
        )

        assert response.status_code == 403

    async def test_invalid_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_token_for_deleted_user(self, client, db_session, make_user, auth_headers):
        ghost = await make_user(name="Ghost")
        headers = auth_headers(ghost)
        await db_session.delete(ghost)
        await db_session.commit()

        response = await client.get("/api/auth/me", headers=headers)

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED_ERROR"

    async def test_deleted_user_token_on_optional_auth_route(self, client, db_session, alice, make_user, auth_headers):
        ghost = await make_user(name="Ghost")
        headers = auth_headers(ghost)
        await db_session.delete(ghost)
        await db_session.commit()

        response = await client.get(f"/api/users/{alice.id}", headers=headers)

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED_ERROR"

    async def test_inactive_user_token_on_optional_auth_route(self, client, alice, make_user, auth_headers):
        sleeper = await make_user(name="Sleeper", is_active=False)

        response = await client.get(f"/api/users/{alice.id}", headers=auth_headers(sleeper))

        assert response.status_code == 403


class TestProfileUpdate:

    async def test_owner_updates_profile(self, client, alice, auth_headers):
        response = await client.put(
            f"/api/users/{alice.id}",
            json={"bio": "Bakes on Sundays", "website_url": "https://alice.example.com"},
            headers=auth_headers(alice)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["bio"] == "Bakes on Sundays"
        assert data["website_url"] == "https://alice.example.com"
        assert data["instagram_url"] is None

    async def test_cannot_update_someone_else(self, client, alice, bob, auth_headers):
        response = await client.put(
            f"/api/users/{bob.id}",
            json={"bio": "hacked"},
            headers=auth_headers(alice)
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_AUTHORIZED"

    async def test_invalid_url_is_400(self, client, alice, auth_headers):
        response = await client.put(
            f"/api/users/{alice.id}",
            json={"instagram_url": "instagram.com/alice"},
            headers=auth_headers(alice)
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_update_requires_auth(self, client, alice):
        response = await client.put(f"/api/users/{alice.id}", json={"bio": "anon"})

        assert response.status_code == 401


class TestHealth:

    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_api_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["success"] is True

    async def test_unknown_route_uses_error_envelope(self, client):
        response = await client.get("/api/nowhere")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found"}


class TestTastebuddies:

    async def test_only_mutual_follows(self, client, alice, bob, make_user, auth_headers):
        carol = await make_user(name="Carol")
        dave = await make_user(name="Dave")
        for first, second in ((alice, bob), (alice, carol)):
            await client.post("/api/users/follow", json={"user_id": second.id, "action": "follow"}, headers=auth_headers(first))
            await client.post("/api/users/follow", json={"user_id": first.id, "action": "follow"}, headers=auth_headers(second))
        await client.post("/api/users/follow", json={"user_id": dave.id, "action": "follow"}, headers=auth_headers(alice))

        response = await client.get("/api/users/tastebuddies", headers=auth_headers(alice))

        assert response.status_code == 200
        data = response.json()["data"]
        assert [u["name"] for u in data] == ["Bob", "Carol"]
        # privacy still applies to the listed profiles
        assert all(u["email"] is None for u in data)

    async def test_requires_auth(self, client):
        response = await client.get("/api/users/tastebuddies")

        assert response.status_code == 401


class TestUserRecipes:

    async def test_recipes_with_stats(self, client, alice, bob, auth_headers):
        headers = auth_headers(alice)
        first = (await client.post("/api/recipes", json={"title": "Old Bread", "instructions": "Knead"}, headers=headers)).json()["data"]
        second = (await client.post("/api/recipes", json={"title": "New Bread", "instructions": "Knead"}, headers=headers)).json()["data"]

        await client.post(f"/api/recipes/{first['id']}/rating", json={"rating": 4}, headers=auth_headers(bob))
        await client.post(f"/api/recipes/{first['id']}/favorite", headers=auth_headers(bob))
        await client.post("/api/comments", json={"recipe_id": first["id"], "content": "Crusty"}, headers=auth_headers(bob))

        response = await client.get(f"/api/users/{alice.id}/recipes", headers=auth_headers(bob))

        assert response.status_code == 200
        data = response.json()["data"]
        assert [r["id"] for r in data] == [second["id"], first["id"]]
        assert data[1]["favorites_count"] == 1
        assert data[1]["ratings_count"] == 1
        assert data[1]["comments_count"] == 1
        assert data[1]["avg_rating"] == 4.0
        assert data[0]["avg_rating"] is None

    async def test_unknown_user(self, client, alice, auth_headers):
        response = await client.get("/api/users/missing/recipes", headers=auth_headers(alice))

        assert response.status_code == 404

    async def test_requires_auth(self, client, alice):
        response = await client.get(f"/api/users/{alice.id}/recipes")

        assert response.status_code == 401

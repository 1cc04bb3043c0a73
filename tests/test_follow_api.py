from tastebuddy.schemas.enums import EmailVisibility


async def follow(client, headers, user_id, action="follow"):
    return await client.post("/api/users/follow", json={"user_id": user_id, "action": action}, headers=headers)


class TestFollowActions:

    async def test_follow_and_unfollow(self, client, alice, bob, auth_headers):
        headers = auth_headers(alice)

        response = await follow(client, headers, bob.id)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Successfully followed user"}

        response = await follow(client, headers, bob.id)
        assert response.json()["message"] == "Already following this user"

        response = await follow(client, headers, bob.id, "unfollow")
        assert response.json()["message"] == "Successfully unfollowed user"

        response = await follow(client, headers, bob.id, "unfollow")
        assert response.json()["message"] == "No existing follow relationship"

    async def test_cannot_follow_self(self, client, alice, auth_headers):
        response = await follow(client, auth_headers(alice), alice.id)

        assert response.status_code == 400
        assert response.json()["error_code"] == "CANNOT_FOLLOW_SELF"

    async def test_follow_unknown_user(self, client, alice, auth_headers):
        response = await follow(client, auth_headers(alice), "nobody")

        assert response.status_code == 404

    async def test_invalid_action(self, client, alice, bob, auth_headers):
        response = await follow(client, auth_headers(alice), bob.id, "poke")

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_follow_requires_auth(self, client, bob):
        response = await client.post("/api/users/follow", json={"user_id": bob.id, "action": "follow"})

        assert response.status_code == 401


class TestFollowLists:

    async def test_followers_apply_privacy(self, client, make_user, alice, auth_headers):
        public = await make_user(name="Pub", email="pub@example.com", email_visibility=EmailVisibility.PUBLIC)
        hidden = await make_user(name="Hid", email="hid@example.com")

        await follow(client, auth_headers(public), alice.id)
        await follow(client, auth_headers(hidden), alice.id)

        response = await client.get(f"/api/users/{alice.id}/followers", headers=auth_headers(alice))

        assert response.status_code == 200
        followers = {item["name"]: item for item in response.json()["data"]}
        assert set(followers) == {"Pub", "Hid"}
        assert followers["Pub"]["email"] == "pub@example.com"
        assert followers["Hid"]["email"] is None
        assert followers["Pub"]["followed_at"] is not None

    async def test_following_list(self, client, alice, bob, auth_headers):
        await follow(client, auth_headers(alice), bob.id)

        response = await client.get(f"/api/users/{alice.id}/following", headers=auth_headers(bob))

        data = response.json()["data"]
        assert [item["id"] for item in data] == [bob.id]
        # bob looking at himself in alice's list sees his own email
        assert data[0]["email"] == "bob@example.com"

    async def test_follow_status(self, client, alice, bob, auth_headers):
        await follow(client, auth_headers(alice), bob.id)

        response = await client.get(f"/api/users/{bob.id}/follow-status", headers=auth_headers(alice))
        assert response.json()["data"] == {
            "following_count": 0,
            "followers_count": 1,
            "is_following": True,
            "can_follow": True,
        }

        response = await client.get(f"/api/users/{bob.id}/follow-status", headers=auth_headers(bob))
        data = response.json()["data"]
        assert data["is_following"] is False
        assert data["can_follow"] is False

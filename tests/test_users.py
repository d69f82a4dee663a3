async def test_list_users_returns_approved_only(client, create_user):
    await create_user("approuve")
    await create_user("attente", is_approved=False)

    response = await client.get("/api/users")

    assert response.status_code == 200
    usernames = [user["username"] for user in response.json()]
    assert usernames == ["approuve"]


async def test_list_pending_users_requires_admin(client, create_user, admin, login_as):
    member = await create_user("membre")
    await create_user("attente", is_approved=False)

    assert (await client.get("/api/users", params={"approved": "false"})).status_code == 403

    member_client = await login_as(member)
    assert (await member_client.get("/api/users", params={"approved": "false"})).status_code == 403

    admin_client = await login_as(admin)
    response = await admin_client.get("/api/users", params={"approved": "false"})
    assert response.status_code == 200
    assert [user["username"] for user in response.json()] == ["attente"]


async def test_get_user_hides_pending_profiles(client, create_user):
    approved = await create_user("visible")
    pending = await create_user("cache", is_approved=False)

    assert (await client.get(f"/api/users/{approved.id}")).status_code == 200
    assert (await client.get(f"/api/users/{pending.id}")).status_code == 404
    assert (await client.get("/api/users/9999")).status_code == 404


async def test_update_own_profile(create_user, login_as):
    user = await create_user("jean")
    client = await login_as(user)

    response = await client.put(
        f"/api/users/{user.id}",
        json={"bio": "Peintre muraliste", "discipline": "arts visuels", "socialMedia": {"facebook": "fb.com/jean"}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["bio"] == "Peintre muraliste"
    assert body["discipline"] == "arts visuels"
    assert body["socialMedia"]["facebook"] == "fb.com/jean"


async def test_non_admin_cannot_self_promote(create_user, login_as):
    user = await create_user("jean")
    client = await login_as(user)

    response = await client.put(f"/api/users/{user.id}", json={"isAdmin": True, "bio": "ok"})

    assert response.status_code == 200
    assert response.json()["isAdmin"] is False
    assert response.json()["bio"] == "ok"


async def test_update_other_profile_forbidden(create_user, login_as):
    user = await create_user("jean")
    other = await create_user("paul")
    client = await login_as(user)

    response = await client.put(f"/api/users/{other.id}", json={"bio": "pirate"})
    assert response.status_code == 403


async def test_admin_updates_any_profile(create_user, admin, login_as):
    pending = await create_user("attente", is_approved=False)
    client = await login_as(admin)

    response = await client.put(f"/api/users/{pending.id}", json={"isApproved": True, "location": "Laval"})

    assert response.status_code == 200
    assert response.json()["isApproved"] is True
    assert response.json()["location"] == "Laval"


async def test_update_email_must_stay_unique(create_user, login_as):
    user = await create_user("jean")
    await create_user("paul")
    client = await login_as(user)

    response = await client.put(f"/api/users/{user.id}", json={"email": "paul@example.com"})
    assert response.status_code == 400


async def test_update_requires_session(client, create_user):
    user = await create_user("jean")
    response = await client.put(f"/api/users/{user.id}", json={"bio": "x"})
    assert response.status_code == 401

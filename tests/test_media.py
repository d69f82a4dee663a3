MEDIA = {"title": "Démo 2024", "mediaType": "video", "url": "https://youtu.be/demo", "description": "Extrait"}


async def test_owner_adds_and_lists_media(client, create_user, login_as):
    user = await create_user("jean")
    owner = await login_as(user)

    response = await owner.post(f"/api/users/{user.id}/media", json=MEDIA)
    assert response.status_code == 201
    created = response.json()
    assert created["userId"] == user.id
    assert created["mediaType"] == "video"

    listing = await client.get(f"/api/users/{user.id}/media")
    assert listing.status_code == 200
    assert [media["id"] for media in listing.json()] == [created["id"]]


async def test_invalid_media_type_rejected(create_user, login_as):
    user = await create_user("jean")
    owner = await login_as(user)

    response = await owner.post(f"/api/users/{user.id}/media", json=dict(MEDIA, mediaType="pdf"))
    assert response.status_code == 400


async def test_other_user_cannot_add_media(create_user, login_as):
    user = await create_user("jean")
    other = await login_as(await create_user("paul"))

    response = await other.post(f"/api/users/{user.id}/media", json=MEDIA)
    assert response.status_code == 403


async def test_admin_manages_media_of_any_user(create_user, admin, login_as):
    user = await create_user("jean")
    admin_client = await login_as(admin)

    created = (await admin_client.post(f"/api/users/{user.id}/media", json=MEDIA)).json()
    response = await admin_client.delete(f"/api/users/{user.id}/media/{created['id']}")
    assert response.status_code == 204

    listing = await admin_client.get(f"/api/users/{user.id}/media")
    assert listing.json() == []


async def test_delete_media_of_another_user_path_is_404(create_user, login_as):
    jean = await create_user("jean")
    paul = await create_user("paul")
    jean_client = await login_as(jean)
    paul_client = await login_as(paul)

    created = (await jean_client.post(f"/api/users/{jean.id}/media", json=MEDIA)).json()

    # Le média n'appartient pas à paul: introuvable sous son profil
    response = await paul_client.delete(f"/api/users/{paul.id}/media/{created['id']}")
    assert response.status_code == 404


async def test_media_of_unknown_user(client):
    assert (await client.get("/api/users/4242/media")).status_code == 404

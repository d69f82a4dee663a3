AD = {"title": "Chaise", "description": "A donner", "category": "equipment"}


async def test_create_get_and_forbid_other_users(create_user, login_as, client):
    owner = await login_as(await create_user("artiste_a"))
    other = await login_as(await create_user("artiste_b"))

    response = await owner.post("/api/troc", json=AD)
    assert response.status_code == 201
    created = response.json()
    assert isinstance(created["id"], int)
    assert created["createdAt"]

    fetched = (await client.get(f"/api/troc/{created['id']}")).json()
    assert {key: fetched[key] for key in AD} == AD

    assert (await other.put(f"/api/troc/{created['id']}", json={"title": "Table"})).status_code == 403
    assert (await other.delete(f"/api/troc/{created['id']}")).status_code == 403

    # Rien n'a changé
    fetched = (await client.get(f"/api/troc/{created['id']}")).json()
    assert fetched["title"] == "Chaise"


async def test_listing_returns_ads_unchanged(create_user, login_as, client):
    owner = await login_as(await create_user("jean"))
    await owner.post("/api/troc", json=AD)
    await owner.post("/api/troc", json={"title": "Studio", "description": "Partage", "category": "collaboration"})

    ads = (await client.get("/api/troc")).json()
    assert {(ad["title"], ad["description"], ad["category"]) for ad in ads} == {
        ("Chaise", "A donner", "equipment"),
        ("Studio", "Partage", "collaboration"),
    }

    equipment = (await client.get("/api/troc", params={"category": "equipment"})).json()
    assert [ad["title"] for ad in equipment] == ["Chaise"]


async def test_unapproved_user_cannot_create_ad(create_user, login_as, admin):
    pending = await create_user("attente")
    client = await login_as(pending)

    # Le compte est repassé en attente après la connexion
    admin_client = await login_as(admin)
    await admin_client.put(f"/api/users/{pending.id}", json={"isApproved": False})

    response = await client.post("/api/troc", json=AD)
    assert response.status_code == 403
    assert response.json()["detail"] == "Only approved artists can create ads"


async def test_create_requires_session(client):
    assert (await client.post("/api/troc", json=AD)).status_code == 401


async def test_missing_fields_and_unknown_category(create_user, login_as):
    client = await login_as(await create_user("jean"))

    assert (await client.post("/api/troc", json={"title": "Chaise"})).status_code == 400
    assert (await client.post("/api/troc", json=dict(AD, category="autre"))).status_code == 400
    assert (await client.post("/api/troc", json=dict(AD, title="   "))).status_code == 400


async def test_image_url_round_trips_as_comma_joined_string(create_user, login_as, client):
    owner = await login_as(await create_user("jean"))

    response = await owner.post("/api/troc", json=dict(AD, imageUrl="https://cdn/a.jpg,https://cdn/b.jpg"))
    created = response.json()
    assert created["imageUrl"] == "https://cdn/a.jpg,https://cdn/b.jpg"
    assert created["imageUrls"] == ["https://cdn/a.jpg", "https://cdn/b.jpg"]

    fetched = (await client.get(f"/api/troc/{created['id']}")).json()
    assert fetched["imageUrl"] == "https://cdn/a.jpg,https://cdn/b.jpg"


async def test_ad_without_images(create_user, login_as):
    owner = await login_as(await create_user("jean"))

    created = (await owner.post("/api/troc", json=AD)).json()
    assert created["imageUrl"] is None
    assert created["imageUrls"] == []


async def test_update_replaces_appends_and_removes_images(create_user, login_as):
    owner = await login_as(await create_user("jean"))
    ad_id = (await owner.post("/api/troc", json=dict(AD, imageUrls=["https://cdn/a.jpg"]))).json()["id"]

    response = await owner.put(f"/api/troc/{ad_id}", json={"appendImageUrls": ["https://cdn/b.jpg", "https://cdn/a.jpg"]})
    assert response.json()["imageUrls"] == ["https://cdn/a.jpg", "https://cdn/b.jpg"]

    response = await owner.put(f"/api/troc/{ad_id}", json={"removeImageUrls": ["https://cdn/a.jpg"]})
    assert response.json()["imageUrls"] == ["https://cdn/b.jpg"]

    response = await owner.put(f"/api/troc/{ad_id}", json={"imageUrl": "https://cdn/c.jpg", "title": "Fauteuil"})
    body = response.json()
    assert body["imageUrls"] == ["https://cdn/c.jpg"]
    assert body["title"] == "Fauteuil"
    assert body["description"] == "A donner"


async def test_image_urls_with_commas_rejected(create_user, login_as):
    owner = await login_as(await create_user("jean"))

    response = await owner.post("/api/troc", json=dict(AD, imageUrls=["https://cdn/a,b.jpg"]))
    assert response.status_code == 400


async def test_admin_assigns_ad_to_approved_artist(create_user, admin, login_as):
    jean = await create_user("jean")
    pending = await create_user("attente", is_approved=False)
    admin_client = await login_as(admin)

    response = await admin_client.post("/api/troc", json=dict(AD, assignedUserId=jean.id))
    assert response.status_code == 201
    assert response.json()["userId"] == jean.id

    response = await admin_client.post("/api/troc", json=dict(AD, assignedUserId=pending.id))
    assert response.status_code == 400


async def test_non_admin_cannot_assign_ad(create_user, login_as):
    jean = await create_user("jean")
    client = await login_as(await create_user("paul"))

    response = await client.post("/api/troc", json=dict(AD, assignedUserId=jean.id))
    assert response.status_code == 403


async def test_admin_updates_and_deletes_any_ad(create_user, admin, login_as):
    owner = await login_as(await create_user("jean"))
    ad_id = (await owner.post("/api/troc", json=AD)).json()["id"]
    admin_client = await login_as(admin)

    response = await admin_client.put(f"/api/troc/{ad_id}", json={"category": "service"})
    assert response.status_code == 200
    assert response.json()["category"] == "service"

    assert (await admin_client.delete(f"/api/troc/{ad_id}")).status_code == 204
    assert (await admin_client.get(f"/api/troc/{ad_id}")).status_code == 404


async def test_delete_missing_ad_is_404(create_user, login_as):
    client = await login_as(await create_user("jean"))
    response = await client.delete("/api/troc/12345")

    assert response.status_code == 404
    assert response.json()["detail"] == "Ad not found"


async def test_filter_by_owner(create_user, login_as, client):
    jean = await create_user("jean")
    jean_client = await login_as(jean)
    paul_client = await login_as(await create_user("paul"))

    await jean_client.post("/api/troc", json=AD)
    await paul_client.post("/api/troc", json=dict(AD, title="Lampe"))

    ads = (await client.get("/api/troc", params={"userId": jean.id})).json()
    assert [ad["title"] for ad in ads] == ["Chaise"]


async def test_admin_reassigns_existing_ad(create_user, admin, login_as, client):
    jean = await create_user("jean")
    paul = await create_user("paul")
    pending = await create_user("attente", is_approved=False)
    ad_id = (await (await login_as(jean)).post("/api/troc", json=AD)).json()["id"]
    admin_client = await login_as(admin)

    response = await admin_client.put(f"/api/troc/{ad_id}", json={"assignedUserId": pending.id, "title": "Table"})
    assert response.status_code == 400
    fetched = (await client.get(f"/api/troc/{ad_id}")).json()
    assert fetched["userId"] == jean.id
    assert fetched["title"] == "Chaise"

    response = await admin_client.put(f"/api/troc/{ad_id}", json={"assignedUserId": paul.id})
    assert response.status_code == 200
    assert response.json()["userId"] == paul.id
    assert (await client.get(f"/api/troc/{ad_id}")).json()["userId"] == paul.id


async def test_owner_cannot_reassign_ad(create_user, login_as, client):
    jean = await create_user("jean")
    paul = await create_user("paul")
    jean_client = await login_as(jean)
    ad_id = (await jean_client.post("/api/troc", json=AD)).json()["id"]

    response = await jean_client.put(f"/api/troc/{ad_id}", json={"assignedUserId": paul.id})
    assert response.status_code == 403
    assert (await client.get(f"/api/troc/{ad_id}")).json()["userId"] == jean.id

    # Réattribuer à soi-même ne change rien
    response = await jean_client.put(f"/api/troc/{ad_id}", json={"assignedUserId": jean.id})
    assert response.status_code == 200


async def test_owner_deletes_own_ad(create_user, login_as, client):
    owner = await login_as(await create_user("jean"))
    ad_id = (await owner.post("/api/troc", json=AD)).json()["id"]

    assert (await owner.delete(f"/api/troc/{ad_id}")).status_code == 204
    assert (await client.get(f"/api/troc/{ad_id}")).status_code == 404
    assert (await client.get("/api/troc")).json() == []


async def test_update_rejects_blank_title(create_user, login_as, client):
    owner = await login_as(await create_user("jean"))
    ad_id = (await owner.post("/api/troc", json=AD)).json()["id"]

    assert (await owner.put(f"/api/troc/{ad_id}", json={"title": "   "})).status_code == 400
    assert (await owner.put(f"/api/troc/{ad_id}", json={"description": "\n"})).status_code == 400
    assert (await client.get(f"/api/troc/{ad_id}")).json()["title"] == "Chaise"


async def test_image_urls_with_surrounding_whitespace_rejected(create_user, login_as):
    owner = await login_as(await create_user("jean"))

    response = await owner.post("/api/troc", json=dict(AD, imageUrls=["https://cdn/a.jpg "]))
    assert response.status_code == 400

    response = await owner.post("/api/troc", json=dict(AD, imageUrls=["https://cdn/a.jpg", ""]))
    assert response.status_code == 400

    response = await owner.post("/api/troc", json=dict(AD, imageUrls=["https://cdn/a.jpg", "https://cdn/b.jpg"]))
    assert response.json()["imageUrl"] == "https://cdn/a.jpg,https://cdn/b.jpg"

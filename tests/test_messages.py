async def test_send_and_read_conversation(create_user, login_as):
    alice = await create_user("alice")
    bob = await create_user("bob")
    alice_client = await login_as(alice)
    bob_client = await login_as(bob)

    first = await alice_client.post("/api/messages", json={"receiverId": bob.id, "content": "Bonjour Bob"})
    assert first.status_code == 201
    assert first.json()["senderId"] == alice.id
    assert first.json()["isRead"] is False

    await bob_client.post("/api/messages", json={"receiverId": alice.id, "content": "Salut Alice"})
    await alice_client.post("/api/messages", json={"receiverId": bob.id, "content": "On collabore?"})

    conversation = (await alice_client.get(f"/api/messages/conversation/{alice.id}/{bob.id}")).json()
    assert [message["content"] for message in conversation] == ["Bonjour Bob", "Salut Alice", "On collabore?"]

    # Même conversation vue par bob, dans l'autre sens
    same = (await bob_client.get(f"/api/messages/{alice.id}")).json()
    assert [message["id"] for message in same] == [message["id"] for message in conversation]


async def test_conversation_is_private(create_user, login_as):
    alice = await create_user("alice")
    bob = await create_user("bob")
    eve_client = await login_as(await create_user("eve"))

    response = await eve_client.get(f"/api/messages/conversation/{alice.id}/{bob.id}")
    assert response.status_code == 403


async def test_unread_count_and_mark_as_read(create_user, login_as):
    alice = await create_user("alice")
    bob = await create_user("bob")
    alice_client = await login_as(alice)
    bob_client = await login_as(bob)

    message_id = (await alice_client.post("/api/messages", json={"receiverId": bob.id, "content": "Allo"})).json()["id"]
    await alice_client.post("/api/messages", json={"receiverId": bob.id, "content": "Encore"})

    assert (await bob_client.get("/api/messages/unread-count")).json() == {"count": 2}
    assert (await alice_client.get("/api/messages/unread-count")).json() == {"count": 0}

    # Seul le destinataire peut marquer comme lu
    assert (await alice_client.patch(f"/api/messages/{message_id}/read")).status_code == 403

    response = await bob_client.patch(f"/api/messages/{message_id}/read")
    assert response.status_code == 200
    assert response.json()["isRead"] is True
    assert (await bob_client.get("/api/messages/unread-count")).json() == {"count": 1}

    assert (await bob_client.patch("/api/messages/999/read")).status_code == 404


async def test_list_messages_sent_and_received(create_user, login_as):
    alice = await create_user("alice")
    bob = await create_user("bob")
    carol = await create_user("carol")
    alice_client = await login_as(alice)
    carol_client = await login_as(carol)

    await alice_client.post("/api/messages", json={"receiverId": bob.id, "content": "1"})
    await carol_client.post("/api/messages", json={"receiverId": alice.id, "content": "2"})
    await carol_client.post("/api/messages", json={"receiverId": bob.id, "content": "3"})

    messages = (await alice_client.get("/api/messages")).json()
    assert sorted(message["content"] for message in messages) == ["1", "2"]


async def test_recipient_must_exist_and_be_approved(create_user, login_as):
    pending = await create_user("attente", is_approved=False)
    client = await login_as(await create_user("alice"))

    response = await client.post("/api/messages", json={"receiverId": pending.id, "content": "Allo"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Recipient not found"

    response = await client.post("/api/messages", json={"receiverId": 9999, "content": "Allo"})
    assert response.status_code == 404


async def test_empty_message_rejected(create_user, login_as):
    bob = await create_user("bob")
    client = await login_as(await create_user("alice"))

    response = await client.post("/api/messages", json={"receiverId": bob.id, "content": "   "})
    assert response.status_code == 400


async def test_messages_require_session(client):
    assert (await client.get("/api/messages")).status_code == 401
    assert (await client.get("/api/messages/unread-count")).status_code == 401

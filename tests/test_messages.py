# tests/test_messages.py

"""
Tests for buyer/seller conversations.
"""

from fastapi.testclient import TestClient


def seed_listing(fake_db, seller_id="seller-1"):
    fake_db.seed("properties", {
        "id": "p1", "title": "Flat", "property_type": "residential",
        "address": "1 Main St", "city": "Lagos", "price": 1,
        "seller_id": seller_id, "listing_status": "approved", "status": "available",
    })


def test_buyer_starts_conversation(client: TestClient, fake_db, login, buyer_user):
    seed_listing(fake_db)
    login(buyer_user)

    response = client.post("/messages/conversations", json={"property_id": "p1", "content": "Is it available?"})
    assert response.status_code == 201

    body = response.json()
    assert body["conversation"]["buyer_id"] == buyer_user.id
    assert body["conversation"]["seller_id"] == "seller-1"
    assert body["messages"][0]["content"] == "Is it available?"
    assert fake_db.rows("conversations")[0]["last_message_at"] is not None


def test_second_contact_reuses_thread(client: TestClient, fake_db, login, buyer_user):
    seed_listing(fake_db)
    login(buyer_user)

    client.post("/messages/conversations", json={"property_id": "p1", "content": "Hello"})
    client.post("/messages/conversations", json={"property_id": "p1", "content": "Hello again"})

    assert len(fake_db.rows("conversations")) == 1
    assert len(fake_db.rows("messages")) == 2


def test_seller_cannot_message_own_listing(client: TestClient, fake_db, login, seller_user):
    seed_listing(fake_db, seller_id=seller_user.id)
    login(seller_user)

    response = client.post("/messages/conversations", json={"property_id": "p1", "content": "hi"})
    assert response.status_code == 400


def test_blank_message_is_rejected(client: TestClient, fake_db, login, buyer_user):
    seed_listing(fake_db)
    login(buyer_user)

    response = client.post("/messages/conversations", json={"property_id": "p1", "content": "   "})
    assert response.status_code == 422


def test_contact_about_missing_listing(client: TestClient, fake_db, login, buyer_user):
    login(buyer_user)
    response = client.post("/messages/conversations", json={"property_id": "nope", "content": "hi"})
    assert response.status_code == 404


def test_thread_is_participants_only(client: TestClient, fake_db, login, buyer_user, admin_user):
    fake_db.seed("conversations", {"id": "c1", "property_id": "p1", "buyer_id": "buyer-9", "seller_id": "seller-1"})

    login(buyer_user)
    assert client.get("/messages/conversations/c1").status_code == 403

    login(admin_user)
    assert client.get("/messages/conversations/c1").status_code == 403


def test_missing_thread_is_not_found_before_participation(client: TestClient, fake_db, login, buyer_user):
    login(buyer_user)
    assert client.get("/messages/conversations/nope").status_code == 404


def test_reading_thread_marks_incoming_read(client: TestClient, fake_db, login, seller_user):
    fake_db.seed("conversations", {"id": "c1", "property_id": "p1", "buyer_id": "buyer-1", "seller_id": seller_user.id})
    fake_db.seed("messages", {"id": "m1", "conversation_id": "c1", "sender_id": "buyer-1",
                              "content": "Hi", "is_read": False})
    login(seller_user)

    response = client.get("/messages/conversations/c1")
    assert response.status_code == 200
    assert [m["id"] for m in response.json()["messages"]] == ["m1"]
    assert fake_db.rpc_calls == [("mark_conversation_read", {"p_conversation_id": "c1"})]


def test_list_conversations_covers_both_sides(client: TestClient, fake_db, login, seller_user):
    fake_db.seed(
        "conversations",
        {"id": "as-seller", "property_id": "p1", "buyer_id": "buyer-1", "seller_id": seller_user.id},
        {"id": "as-buyer", "property_id": "p2", "buyer_id": seller_user.id, "seller_id": "seller-9"},
        {"id": "other", "property_id": "p3", "buyer_id": "buyer-1", "seller_id": "seller-9"},
    )
    login(seller_user)

    ids = sorted(c["id"] for c in client.get("/messages/conversations").json())
    assert ids == ["as-buyer", "as-seller"]


def test_reply(client: TestClient, fake_db, login, buyer_user):
    fake_db.seed("conversations", {"id": "c1", "property_id": "p1", "buyer_id": buyer_user.id, "seller_id": "seller-1"})
    login(buyer_user)

    response = client.post("/messages/conversations/c1", json={"content": "Can I visit Friday?"})
    assert response.status_code == 201
    assert response.json()["sender_id"] == buyer_user.id

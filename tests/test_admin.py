# tests/test_admin.py

"""
Tests for admin user management.
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def users(fake_db):
    fake_db.seed(
        "profiles",
        {"id": "admin-1", "email": "admin-1@example.com", "role": "admin"},
        {"id": "seller-1", "email": "seller-1@example.com", "role": "seller", "is_active": True},
        {"id": "buyer-1", "email": "buyer-1@example.com", "role": "buyer", "is_active": True},
    )


def profile(fake_db, user_id):
    return next(r for r in fake_db.rows("profiles") if r["id"] == user_id)


def test_list_users_is_admin_only(client: TestClient, users, login, seller_user):
    login(seller_user)
    assert client.get("/admin/users").status_code == 403


def test_list_users_by_role(client: TestClient, users, login, admin_user):
    login(admin_user)

    assert len(client.get("/admin/users").json()) == 3
    assert [u["id"] for u in client.get("/admin/users", params={"role": "seller"}).json()] == ["seller-1"]


def test_admin_changes_role_and_verification(client: TestClient, fake_db, users, login, admin_user):
    login(admin_user)

    response = client.patch("/admin/users/seller-1", json={"role": "agent", "is_verified": True})
    assert response.status_code == 200
    assert profile(fake_db, "seller-1")["role"] == "agent"
    assert profile(fake_db, "seller-1")["is_verified"] is True


def test_admin_cannot_drop_own_admin_role(client: TestClient, users, login, admin_user):
    login(admin_user)
    assert client.patch("/admin/users/admin-1", json={"role": "buyer"}).status_code == 400


def test_update_missing_user(client: TestClient, users, login, admin_user):
    login(admin_user)
    response = client.patch("/admin/users/ghost", json={"full_name": "x"})
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


def test_invalid_role_is_rejected(client: TestClient, users, login, admin_user):
    login(admin_user)
    assert client.patch("/admin/users/seller-1", json={"role": "super_admin"}).status_code == 422


def test_deactivate_user(client: TestClient, fake_db, users, login, admin_user):
    login(admin_user)

    response = client.put("/admin/users/buyer-1/status", json={"is_active": False})
    assert response.status_code == 200
    assert profile(fake_db, "buyer-1")["is_active"] is False


def test_admin_cannot_deactivate_self(client: TestClient, users, login, admin_user):
    login(admin_user)
    assert client.put("/admin/users/admin-1/status", json={"is_active": False}).status_code == 400


def test_delete_user_removes_profile_and_auth_account(client: TestClient, fake_db, users, login, admin_user):
    login(admin_user)

    response = client.delete("/admin/users/buyer-1")
    assert response.status_code == 200
    assert [r["id"] for r in fake_db.rows("profiles")] == ["admin-1", "seller-1"]
    fake_db.auth.admin.delete_user.assert_called_once_with("buyer-1")


def test_delete_missing_user(client: TestClient, fake_db, users, login, admin_user):
    login(admin_user)
    assert client.delete("/admin/users/ghost").status_code == 404
    fake_db.auth.admin.delete_user.assert_not_called()


def test_pending_listings_queue(client: TestClient, fake_db, login, admin_user):
    fake_db.seed(
        "properties",
        {"id": "p1", "title": "A", "property_type": "land", "address": "x", "city": "y",
         "price": 1, "seller_id": "seller-1", "listing_status": "pending_approval"},
        {"id": "p2", "title": "B", "property_type": "land", "address": "x", "city": "y",
         "price": 1, "seller_id": "seller-1", "listing_status": "approved"},
    )
    login(admin_user)

    assert [p["id"] for p in client.get("/admin/properties/pending").json()] == ["p1"]

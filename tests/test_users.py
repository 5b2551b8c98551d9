"""User management tests"""
import uuid


def test_list_users_requires_admin(client, user, headers):
    assert client.get("/users").status_code == 401
    assert client.get("/users", headers=headers(user)).status_code == 403


def test_admin_lists_users(client, admin, user, headers):
    response = client.get("/users", headers=headers(admin))
    assert response.status_code == 200
    usernames = [u["username"] for u in response.json()]
    assert usernames == ["admin", "alice"]
    assert all("hashed_password" not in u for u in response.json())


def test_admin_creates_user(client, admin, headers):
    response = client.post(
        "/users",
        json={"username": "dave", "password": "secret99", "is_admin": True},
        headers=headers(admin),
    )
    assert response.status_code == 201
    assert response.json()["is_admin"] is True
    assert response.json()["is_active"] is True

    duplicate = client.post(
        "/users",
        json={"username": "dave", "password": "secret99"},
        headers=headers(admin),
    )
    assert duplicate.status_code == 409


def test_get_user_not_found(client, admin, headers):
    response = client.get(f"/users/{uuid.uuid4()}", headers=headers(admin))
    assert response.status_code == 404


def test_cannot_deactivate_last_active_user(client, admin, make_user, headers):
    make_user("sleepy", is_active=False)
    response = client.patch(
        f"/users/{admin.id}/status",
        json={"is_active": False},
        headers=headers(admin),
    )
    assert response.status_code == 400
    assert "last active user" in response.json()["detail"]


def test_deactivate_other_user(client, admin, user, headers):
    response = client.patch(
        f"/users/{user.id}/status",
        json={"is_active": False},
        headers=headers(admin),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["is_active"] is False
    assert body["self_deactivated"] is False

    login = client.post("/auth/login", json={"username": "alice", "password": "secret123"})
    assert login.status_code == 401


def test_admin_self_deactivation_is_flagged(client, admin, user, headers):
    response = client.patch(
        f"/users/{admin.id}/status",
        json={"is_active": False},
        headers=headers(admin),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["self_deactivated"] is True
    assert body["message"]


def test_reactivate_user(client, admin, make_user, headers):
    sleepy = make_user("sleepy", is_active=False)
    response = client.patch(
        f"/users/{sleepy.id}/status",
        json={"is_active": True},
        headers=headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is True


def test_user_stats(client, user, admin, make_campaign, headers):
    from datetime import timedelta
    from qrcampaigns.utils.dates import utcnow

    make_campaign(user, scan_count=7)
    make_campaign(user, name="Old", scan_count=3, end_date=utcnow() - timedelta(hours=1))
    make_campaign(admin, scan_count=100)

    response = client.get(f"/users/{user.id}/stats", headers=headers(user))
    assert response.status_code == 200
    body = response.json()
    assert body["total_campaigns"] == 2
    assert body["active_campaigns"] == 1
    assert body["expired_campaigns"] == 1
    assert body["total_scans"] == 10
    assert "created_at" in body


def test_user_stats_unknown_user(client, user, headers):
    response = client.get(f"/users/{uuid.uuid4()}/stats", headers=headers(user))
    assert response.status_code == 404

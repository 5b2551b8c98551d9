"""Auth endpoint tests"""


def test_health_endpoint(client):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_security_headers_present(client):
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_login_without_credentials(client):
    """Test login endpoint without credentials"""
    response = client.post("/auth/login", json={})
    assert response.status_code == 422  # Validation error


def test_login_with_invalid_credentials(client):
    """Test login with invalid credentials"""
    response = client.post(
        "/auth/login",
        json={"username": "nobody", "password": "wrong"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username or password"


def test_register_logs_user_in(client):
    response = client.post("/auth/register", json={"username": "bob", "password": "hunter22"})
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["username"] == "bob"
    assert body["user"]["is_admin"] is False
    assert "hashed_password" not in body["user"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["username"] == "bob"


def test_register_duplicate_username(client, user):
    response = client.post("/auth/register", json={"username": "alice", "password": "another1"})
    assert response.status_code == 409


def test_register_short_password(client):
    response = client.post("/auth/register", json={"username": "bob", "password": "123"})
    assert response.status_code == 422


def test_login_success(client, user):
    response = client.post("/auth/login", json={"username": "alice", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["id"] == str(user.id)


def test_inactive_user_cannot_login(client, make_user):
    make_user("carol", is_active=False)
    response = client.post("/auth/login", json={"username": "carol", "password": "secret123"})
    assert response.status_code == 401


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_deactivated_user_token_rejected(client, db, user, headers):
    auth = headers(user)
    user.is_active = False
    db.commit()
    assert client.get("/auth/me", headers=auth).status_code == 401


def test_change_password(client, user, headers):
    wrong = client.patch(
        "/auth/change-password",
        json={"current_password": "nope", "new_password": "newsecret"},
        headers=headers(user),
    )
    assert wrong.status_code == 400

    response = client.patch(
        "/auth/change-password",
        json={"current_password": "secret123", "new_password": "newsecret"},
        headers=headers(user),
    )
    assert response.status_code == 200

    login = client.post("/auth/login", json={"username": "alice", "password": "newsecret"})
    assert login.status_code == 200


def test_change_password_must_differ(client, user, headers):
    response = client.patch(
        "/auth/change-password",
        json={"current_password": "secret123", "new_password": "secret123"},
        headers=headers(user),
    )
    assert response.status_code == 422


def test_logout(client):
    response = client.post("/auth/logout")
    assert response.status_code == 200
    assert "message" in response.json()


def test_login_is_rate_limited(client, user):
    for _ in range(5):
        client.post("/auth/login", json={"username": "alice", "password": "wrong"})
    response = client.post("/auth/login", json={"username": "alice", "password": "secret123"})
    assert response.status_code == 429
    assert "Retry-After" in response.headers


def test_api_rate_limit_returns_retry_after(client, user, headers, monkeypatch):
    from qrcampaigns.core.config import settings
    monkeypatch.setattr(settings, "API_RATE_LIMIT_REQUESTS", 2)

    assert client.get("/stats/overall", headers=headers(user)).status_code == 200
    assert client.get("/stats/overall", headers=headers(user)).status_code == 200
    response = client.get("/stats/overall", headers=headers(user))
    assert response.status_code == 429
    assert response.json()["retry_after"] >= 1

    # Health checks are exempt
    assert client.get("/health").status_code == 200


def test_rate_limited_response_keeps_cors_headers(client, user, headers, monkeypatch):
    from qrcampaigns.core.config import settings
    monkeypatch.setattr(settings, "API_RATE_LIMIT_REQUESTS", 1)
    request_headers = {"Origin": "http://localhost:3000", **headers(user)}

    first = client.get("/stats/overall", headers=request_headers)
    assert first.status_code == 200
    assert first.headers["access-control-allow-origin"] == "http://localhost:3000"

    limited = client.get("/stats/overall", headers=request_headers)
    assert limited.status_code == 429
    assert limited.headers["access-control-allow-origin"] == "http://localhost:3000"

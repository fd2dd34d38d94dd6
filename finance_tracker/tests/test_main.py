# finance_tracker/tests/test_main.py
# Tests for registration, login, tokens and the profile endpoint.

from fastapi.testclient import TestClient

from finance_tracker import models


def test_register_user(client: TestClient):
    """
    Registering returns 201 with a token and the public user fields only.
    """
    response = client.post(
        "/register",
        json={"name": "Alice", "email": "alice@mail.com", "password": "s3cret-pass"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User registered successfully"
    assert data["token"]
    assert data["user"]["name"] == "Alice"
    assert data["user"]["email"] == "alice@mail.com"
    assert "id" in data["user"]
    # Ensure the password is not returned
    assert "password" not in data["user"]
    assert "hashed_password" not in data["user"]


def test_register_existing_email_conflicts(client: TestClient, db_session, register_user):
    """
    A second registration with the same email is a 409 and creates nobody.
    """
    register_user()

    response = client.post(
        "/register",
        json={"name": "Alice Again", "email": "alice@mail.com", "password": "another"},
    )
    assert response.status_code == 409
    assert response.json()["message"] == "User already exists"
    assert db_session.query(models.User).count() == 1


def test_register_race_on_same_email_conflicts(client: TestClient, db_session, register_user, monkeypatch):
    """
    When the existence check misses a concurrent insert, the unique index
    still turns the second registration into a 409.
    """
    register_user()
    monkeypatch.setattr(models, "get_user_by_email", lambda db, email: None)

    response = client.post(
        "/register",
        json={"name": "Alice Twin", "email": "alice@mail.com", "password": "another"},
    )

    assert response.status_code == 409
    assert response.json()["message"] == "User already exists"
    assert db_session.query(models.User).count() == 1


def test_register_missing_fields(client: TestClient):
    response = client.post("/register", json={"email": "alice@mail.com"})
    assert response.status_code == 400
    assert "name" in response.json()["detail"]
    assert "password" in response.json()["detail"]


def test_register_invalid_email(client: TestClient):
    response = client.post(
        "/register",
        json={"name": "Alice", "email": "not-an-email", "password": "pw"},
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "email"


def test_login_returns_token_and_user(client: TestClient, register_user):
    """
    Logging in with correct credentials returns a fresh token and the user.
    """
    register_user()

    response = client.post(
        "/login",
        json={"email": "alice@mail.com", "password": "s3cret-pass"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"] == {
        "id": data["user"]["id"],
        "name": "Alice",
        "email": "alice@mail.com",
    }


def test_login_wrong_password(client: TestClient, register_user):
    register_user()

    response = client.post(
        "/login",
        json={"email": "alice@mail.com", "password": "wrong"},
    )
    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid credentials"}


def test_login_unknown_user(client: TestClient):
    response = client.post(
        "/login",
        json={"email": "nobody@mail.com", "password": "whatever"},
    )
    assert response.status_code == 401


def test_login_missing_fields(client: TestClient):
    response = client.post("/login", json={"email": "alice@mail.com"})
    assert response.status_code == 400


def test_get_user_requires_token(client: TestClient):
    response = client.get("/user")
    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated"}


def test_get_user_rejects_garbage_token(client: TestClient):
    response = client.get("/user", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_get_user_profile(client: TestClient, auth_headers):
    response = client.get("/user", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Alice"
    assert data["email"] == "alice@mail.com"
    assert set(data) == {"id", "name", "email"}


def test_logout_revokes_only_the_presented_token(client: TestClient, auth_headers):
    """
    Full flow: issue a second token, log out with the first, and check the
    first stops working while the second still does.
    """
    # 1. Issue an additional token
    extra = client.post("/csrf-token", headers=auth_headers)
    assert extra.status_code == 200
    extra_headers = {"Authorization": f"Bearer {extra.json()['token']}"}

    # 2. Log out with the original token
    response = client.post("/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}

    # 3. The original token is revoked
    assert client.get("/user", headers=auth_headers).status_code == 401
    assert client.post("/logout", headers=auth_headers).status_code == 401

    # 4. The other token is untouched
    assert client.get("/user", headers=extra_headers).status_code == 200


def test_csrf_token_requires_auth(client: TestClient):
    assert client.post("/csrf-token").status_code == 401


def test_health_check(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

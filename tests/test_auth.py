"""Authentication API tests."""

from unittest.mock import patch

import pytest

from src.exceptions import AlreadyLoggedIn, Unauthenticated
from src.models.token import PersonalAccessToken
from src.models.user import User
from src.services import auth as auth_service
from src.services.auth import AuthService, find_token, get_password_hash, hash_token


def test_register_user(client):
    """Test user registration."""
    response = client.post(
        "/api/register",
        json={"name": "New User", "email": "newuser@example.com", "password": "password123"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Register successful"
    assert "|" in data["token"]


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email fails."""
    response = client.post(
        "/api/register",
        json={"name": "Duplicate", "email": auth_headers.email, "password": "password123"},
    )
    assert response.status_code == 422
    assert response.json() == {"error": "The email has already been taken."}


def test_register_stores_hashed_password_and_token(client, db):
    response = client.post(
        "/api/register",
        json={"name": "Hash Check", "email": "hash@example.com", "password": "password123"},
    )
    plain = response.json()["token"]
    token_id, secret = plain.split("|", 1)

    token = db.query(PersonalAccessToken).filter(PersonalAccessToken.id == int(token_id)).one()
    assert token.name == "auth_token"
    assert token.token == hash_token(secret)
    assert token.token != secret
    assert token.user.password_hash != "password123"


def test_login_while_logged_in_fails(client, auth_headers):
    """Registering issues a token, so logging in straight away is refused."""
    response = client.post(
        "/api/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 409
    assert response.json() == {"error": "User is already logged in"}


def test_login_after_logout(client, auth_headers):
    """Test user login."""
    assert client.post("/api/logout", headers=auth_headers).status_code == 200

    response = client.post(
        "/api/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful"

    profile = client.get("/api/profile", headers={"Authorization": f"Bearer {data['token']}"})
    assert profile.status_code == 200
    assert profile.json()["profile"]["id"] == auth_headers.user_id

    # Second login without logging out
    again = client.post("/api/login", json={"email": auth_headers.email, "password": "testpass123"})
    assert again.json() == {"error": "User is already logged in"}


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Password incorrect"}


def test_login_unknown_email(client):
    response = client.post(
        "/api/login", json={"email": "nobody@example.com", "password": "whatever1"}
    )
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_get_profile(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/profile", headers=auth_headers)
    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile == {"id": auth_headers.user_id, "name": "Test User", "email": auth_headers.email}


def test_logout_revokes_token(client, auth_headers):
    response = client.post("/api/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Logout successful"}

    response = client.get("/api/profile", headers=auth_headers)
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthenticated."}


def test_token_use_is_stamped(client, db, auth_headers):
    client.get("/api/profile", headers=auth_headers)

    token = db.query(PersonalAccessToken).filter(
        PersonalAccessToken.user_id == auth_headers.user_id
    ).one()
    assert token.last_used_at is not None


def test_service_rejects_missing_user(db):
    service = AuthService(db)
    with pytest.raises(Unauthenticated, match="User not authenticated"):
        service.profile(None)
    with pytest.raises(Unauthenticated):
        service.logout(None)


def test_find_token_rejects_malformed_ids(db):
    for plain in ["²|x", "99999999999999999999999|x", "-1|x", "|x"]:
        assert find_token(db, plain) is None


def test_concurrent_login_loses_race(db):
    """A token inserted after the existing-token check still blocks the login."""
    user = User(name="Racer", email="racer@example.com", password_hash=get_password_hash("testpass123"))
    db.add(user)
    db.commit()

    real_create_token = auth_service.create_token

    def create_token_after_other_login(session, owner, name=None):
        real_create_token(session, owner, name)
        return real_create_token(session, owner, name)

    with patch("src.services.auth.create_token", side_effect=create_token_after_other_login):
        with pytest.raises(AlreadyLoggedIn, match="User is already logged in"):
            AuthService(db).login("racer@example.com", "testpass123")

    # Session was rolled back and still works
    tokens = db.query(PersonalAccessToken).filter(PersonalAccessToken.user_id == user.id).all()
    assert len(tokens) == 1
    assert tokens[0].name == "auth_token"

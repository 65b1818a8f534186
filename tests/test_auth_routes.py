"""
Tests for registration, login, the auth gate and error formatting.
"""
import logging

from dogmatch.services.identity_service import account_key


def _register(client, email="alice@example.com", password="secret1", name="Alice"):
    return client.post('/api/auth/register', json={"email": email, "password": password, "name": name})


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_register_creates_user_and_account(client, db):
    response = _register(client)

    assert response.status_code == 201
    body = response.get_json()
    assert body["token"]
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["preferences"] == {"notifications": True, "emailUpdates": False, "radius": 10}

    user_id = body["user"]["id"]
    assert user_id in db.docs("users")
    account = db.docs("accounts")[account_key("alice@example.com")]
    assert account["uid"] == user_id
    assert account["passwordHash"] != "secret1"


def test_register_duplicate_email_conflicts(client, db):
    assert _register(client).status_code == 201

    response = _register(client, email="Alice@example.com", name="Other")

    assert response.status_code == 409
    assert response.get_json()["message"] == "Email is already in use"
    assert len(db.docs("users")) == 1


def test_register_validation_error(client):
    response = _register(client, password="123")

    assert response.status_code == 400
    body = response.get_json()
    assert body["status"] == "error"
    assert body["code"] == "ValidationError"
    assert body["field"] == "password"


def test_login_success(client):
    _register(client)

    response = client.post('/api/auth/login', json={"email": "alice@example.com", "password": "secret1"})

    assert response.status_code == 200
    assert response.get_json()["user"]["name"] == "Alice"


def test_login_wrong_password(client):
    _register(client)

    response = client.post('/api/auth/login', json={"email": "alice@example.com", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid email or password"


def test_login_unknown_email(client):
    response = client.post('/api/auth/login', json={"email": "nobody@example.com", "password": "secret1"})
    assert response.status_code == 401


def test_profile_requires_token(client):
    response = client.get('/api/auth/profile')

    assert response.status_code == 401
    body = response.get_json()
    assert body["status"] == "error"
    assert body["code"] == "AuthenticationError"


def test_missing_token_logged_with_request_context(client, caplog):
    with caplog.at_level(logging.INFO, logger="dogmatch.auth"):
        client.get('/api/auth/profile?verbose=1')

    assert "AuthenticationError" in caplog.text
    assert "/api/auth/profile" in caplog.text
    assert "verbose" in caplog.text


def test_profile_rejects_forged_token(client):
    response = client.get('/api/auth/profile', headers=_auth("not-a-real-token"))
    assert response.status_code == 401


def test_profile_with_token(client):
    token = _register(client).get_json()["token"]

    response = client.get('/api/auth/profile', headers=_auth(token))

    assert response.status_code == 200
    assert response.get_json()["email"] == "alice@example.com"


def test_update_profile_changes_login_email(client, db):
    token = _register(client).get_json()["token"]

    response = client.put('/api/auth/profile', json={"email": "alicia@example.com", "name": "Alicia"},
                          headers=_auth(token))

    assert response.status_code == 200
    assert response.get_json()["name"] == "Alicia"
    assert account_key("alice@example.com") not in db.docs("accounts")

    login = client.post('/api/auth/login', json={"email": "alicia@example.com", "password": "secret1"})
    assert login.status_code == 200


def test_update_profile_to_taken_email_conflicts(client, db):
    _register(client)
    token = _register(client, email="bob@example.com", name="Bob").get_json()["token"]

    response = client.put('/api/auth/profile', json={"email": "alice@example.com"}, headers=_auth(token))

    assert response.status_code == 409
    assert account_key("bob@example.com") in db.docs("accounts")


def test_unknown_route_returns_json(client):
    response = client.get('/api/nothing-here')

    assert response.status_code == 404
    assert response.get_json() == {"status": "error", "message": "Route not found", "code": "NotFoundError"}


def test_healthz(client):
    response = client.get('/healthz')
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}

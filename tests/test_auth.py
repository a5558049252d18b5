from venue_booking.models.user import User

from tests.conftest import client, headers_for

USER = {
    "name": "Ngozi",
    "email": "ngozi@example.com",
    "phone": "+2348000000000",
    "password": "secret123",
    "role": "planner",
}


def test_register_login_me():
    response = client.post("/auth/register", json=USER)
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == USER["email"]
    assert data["role"] == "planner"
    assert "password_hash" not in data

    response = client.post("/auth/login", json={"email": USER["email"], "password": USER["password"]})
    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.json()["role"] == "planner"

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["name"] == "Ngozi"


def test_register_duplicate_email():
    client.post("/auth/register", json=USER)
    response = client.post("/auth/register", json=USER)
    assert response.status_code == 422
    assert response.json()["kind"] == "validation_error"
    assert "email" in response.json()["fields"]


def test_register_cannot_claim_admin():
    response = client.post("/auth/register", json={**USER, "role": "admin"})
    assert response.status_code == 422
    assert response.json()["kind"] == "validation_error"
    assert "role" in response.json()["fields"]


def test_login_wrong_password():
    client.post("/auth/register", json=USER)
    response = client.post("/auth/login", json={"email": USER["email"], "password": "nope"})
    assert response.status_code == 401
    assert response.json()["kind"] == "unauthenticated"

    response = client.post("/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert response.status_code == 401
    assert response.json()["kind"] == "unauthenticated"


def test_me_requires_token():
    response = client.get("/auth/me")
    assert response.status_code in (401, 403)

    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json()["kind"] == "unauthenticated"


def test_suspended_user_is_rejected(test_db, planner):
    planner.suspended = True
    test_db.commit()

    response = client.get("/auth/me", headers=headers_for(planner))
    assert response.status_code == 401
    assert response.json()["kind"] == "unauthenticated"


def test_suspended_user_cannot_log_in(test_db):
    client.post("/auth/register", json=USER)
    user = test_db.query(User).filter(User.email == USER["email"]).one()
    user.suspended = True
    test_db.commit()

    response = client.post("/auth/login", json={"email": USER["email"], "password": USER["password"]})
    assert response.status_code == 403
    assert response.json()["kind"] == "unauthorized"


def test_venue_holders_start_unapproved():
    planner = client.post("/auth/register", json=USER).json()
    assert planner["approved"] is True

    holder = client.post(
        "/auth/register",
        json={**USER, "email": "holder@example.com", "role": "venue_holder"},
    ).json()
    assert holder["role"] == "venue_holder"
    assert holder["approved"] is False

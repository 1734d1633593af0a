import uuid


def test_register_login_and_me(client):
    email = f"asha-{uuid.uuid4().hex[:8]}@example.com"

    registered = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "testpassword", "preferred_language": "ta"},
    )
    assert registered.status_code == 201

    duplicate = client.post("/api/v1/auth/register", json={"email": email, "password": "testpassword"})
    assert duplicate.status_code == 409

    token = client.post(
        "/api/v1/auth/login",
        data={"username": email, "password": "testpassword"},
    ).json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["email"] == email
    assert me["preferred_language"] == "ta"


def test_wrong_password(client):
    response = client.post(
        "/api/v1/auth/login",
        data={"username": "nobody@example.com", "password": "wrongpassword"},
    )

    assert response.status_code == 401


def test_garbage_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "auth_required"


def test_position_options(client):
    options = client.get("/api/v1/location/options").json()

    assert options == {"enableHighAccuracy": True, "timeout": 10000, "maximumAge": 600000}


def test_current_position_fix(client):
    response = client.post("/api/v1/location/current", json={"latitude": 28.61, "longitude": 77.21})

    assert response.json() == {"latitude": 28.61, "longitude": 77.21}


def test_current_position_denied(client):
    response = client.post("/api/v1/location/current", json={"error_code": 1})

    assert response.status_code == 403
    body = response.json()["detail"]
    assert body["code"] == "permission_denied"
    assert "city" in body["message"]


def test_current_position_unavailable(client):
    response = client.post("/api/v1/location/current", json={})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "unsupported"


def test_health_endpoints(client):
    assert client.get("/").json() == {"status": "ok"}
    assert client.get("/readyz").json() == {"ready": True}


def test_profile_defaults(client, auth_headers):
    me = client.get("/api/v1/auth/me", headers=auth_headers).json()

    assert me["preferred_language"] == "en"
    assert me["phone_number"] is None
    assert me["notification_preferences"] == {
        "health_tips": True,
        "disease_alerts": True,
        "appointment_reminders": True,
    }


def test_update_profile(client, auth_headers):
    response = client.patch(
        "/api/v1/auth/me",
        json={
            "full_name": "Asha Verma",
            "phone_number": "+91-98000-11111",
            "location": "Pune",
            "preferred_language": "mr",
            "notification_preferences": {"health_tips": False},
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Asha Verma"
    assert body["location"] == "Pune"
    assert body["preferred_language"] == "mr"
    assert body["notification_preferences"] == {
        "health_tips": False,
        "disease_alerts": True,
        "appointment_reminders": True,
    }

    # fields not sent are left alone
    partial = client.patch("/api/v1/auth/me", json={"location": "Mumbai"}, headers=auth_headers).json()
    assert partial["full_name"] == "Asha Verma"
    assert partial["preferred_language"] == "mr"
    assert partial["notification_preferences"]["health_tips"] is False


def test_unsupported_language_is_rejected(client, auth_headers):
    response = client.patch("/api/v1/auth/me", json={"preferred_language": "xx"}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "validation_error"
    assert client.get("/api/v1/auth/me", headers=auth_headers).json()["preferred_language"] == "en"


def test_chat_uses_saved_language(client, auth_headers, fake_gateway):
    client.patch("/api/v1/auth/me", json={"preferred_language": "ta"}, headers=auth_headers)

    client.post("/api/v1/chat", json={"message": "How much water should I drink?"}, headers=auth_headers)

    assert fake_gateway.calls[0]["language"] == "ta"


def test_profile_update_requires_auth(client):
    assert client.patch("/api/v1/auth/me", json={"location": "Pune"}).status_code == 401

"""End-to-end tests of the HTTP API."""

API = "/api/v1"


def sign_in(client, email="fan@example.com", password="password123") -> dict:
    assert client.post(f"{API}/auth/register", json={"email": email, "password": password}).status_code == 201
    response = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    token = response.json()["value"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


def test_unauthenticated_requests_get_401(client):
    response = client.get(f"{API}/events/")
    assert response.status_code == 401
    assert response.json() == {"ok": False, "error": "Unauthorized", "kind": "unauthorized"}


def test_categories_are_public(client):
    response = client.get(f"{API}/events/categories")
    assert response.status_code == 200
    assert "Basketball" in response.json()["value"]


def test_event_lifecycle(client):
    headers = sign_in(client)
    venue = client.post(
        f"{API}/venues/", json={"name": "Arena", "address": "1 Main St"}, headers=headers
    ).json()["value"]

    created = client.post(
        f"{API}/events/",
        json={
            "name": "Finals",
            "category": "Basketball",
            "scheduled_at": "2025-06-01T18:00:00Z",
            "venue_ids": [venue["id"]],
        },
        headers=headers,
    )
    assert created.status_code == 201
    event = created.json()["value"]

    listed = client.get(f"{API}/events/", params={"query": "fin"}, headers=headers).json()
    assert [e["id"] for e in listed["value"]] == [event["id"]]
    assert listed["value"][0]["venues"][0]["name"] == "Arena"

    patched = client.patch(f"{API}/events/{event['id']}", json={"category": "Soccer"}, headers=headers)
    assert patched.status_code == 200
    assert patched.json()["value"]["category"] == "Soccer"
    assert patched.json()["value"]["name"] == "Finals"

    deleted = client.delete(f"{API}/events/{event['id']}", headers=headers)
    assert deleted.json() == {"ok": True, "value": {"ok": True}}

    fetched = client.get(f"{API}/events/{event['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json() == {"ok": True, "value": None}


def test_validation_failure_is_422(client):
    headers = sign_in(client)
    response = client.post(
        f"{API}/events/",
        json={"name": "", "category": "Basketball", "scheduled_at": "2025-06-01T18:00:00Z", "venue_ids": []},
        headers=headers,
    )
    assert response.status_code == 422
    assert response.json()["error"] == "Event name is required, At least one venue is required"


def test_updating_someone_elses_event_is_404(client):
    owner = sign_in(client, "owner@example.com")
    other = sign_in(client, "other@example.com")
    venue = client.post(f"{API}/venues/", json={"name": "Arena", "address": "1 Main St"}, headers=owner).json()
    event = client.post(
        f"{API}/events/",
        json={
            "name": "Finals",
            "category": "Basketball",
            "scheduled_at": "2025-06-01T18:00:00Z",
            "venue_ids": [venue["value"]["id"]],
        },
        headers=owner,
    ).json()["value"]
    response = client.patch(f"{API}/events/{event['id']}", json={"name": "Mine now"}, headers=other)
    assert response.status_code == 404
    assert response.json()["error"] == "Event not found"


def test_logout_invalidates_token(client):
    headers = sign_in(client)
    assert client.get(f"{API}/auth/me", headers=headers).status_code == 200
    assert client.post(f"{API}/auth/logout", headers=headers).json() == {"ok": True, "value": {"ok": True}}
    assert client.get(f"{API}/auth/me", headers=headers).status_code == 401


def test_bad_login_is_401(client):
    response = client.post(f"{API}/auth/login", json={"email": "ghost@example.com", "password": "password123"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid login credentials"


def test_external_login(client):
    response = client.post(f"{API}/auth/external", json={"provider": "google", "subject": "42"})
    assert response.status_code == 200
    token = response.json()["value"]["access_token"]
    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["value"]["provider"] == "google"


def test_anonymous_caller_with_malformed_body_is_unauthorized(client):
    response = client.post(f"{API}/events/", json=["x"])
    assert response.status_code == 401
    assert response.json() == {"ok": False, "error": "Unauthorized", "kind": "unauthorized"}


def test_non_object_body_is_an_action_failure(client):
    headers = sign_in(client)
    response = client.post(f"{API}/events/", json=["x"], headers=headers)
    assert response.status_code == 422
    body = response.json()
    assert set(body) == {"ok", "error", "kind"}
    assert body["ok"] is False
    assert body["kind"] == "validation"


def test_missing_body_reports_required_fields(client):
    headers = sign_in(client)
    response = client.post(f"{API}/venues/", headers=headers)
    assert response.status_code == 422
    assert response.json() == {
        "ok": False,
        "error": "Venue name is required, Address is required",
        "kind": "validation",
    }


def test_bad_query_parameter_is_an_action_failure(client):
    headers = sign_in(client)
    response = client.post(f"{API}/auth/logout", params={"everywhere": "maybe"}, headers=headers)
    assert response.status_code == 422
    assert response.json() == {"ok": False, "error": "Invalid request", "kind": "validation"}

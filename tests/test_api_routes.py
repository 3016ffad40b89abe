"""
Tests for the HTTP API: status codes, envelopes and authentication
"""

from datetime import timedelta

import pytest

from factories import auth_headers, future


def event_body(world, **overrides):
    body = {
        "name": "Tango Night",
        "description": "Milonga with live orchestra",
        "id_event_location": world["venue"]["id"],
        "start_date": future(days=10).isoformat(),
        "duration_in_minutes": 180,
        "price": 2000,
        "enabled_for_enrollment": True,
        "max_assistance": 3,
        "tags": [world["tag"]["id"]],
    }
    body.update(overrides)
    return body


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# -------- Users --------

def test_register_and_login(client):
    body = {"first_name": "Carla", "last_name": "Gomez", "username": "carla@example.com", "password": "pass123"}
    response = client.post("/api/user/register", json=body)
    assert response.status_code == 201
    assert response.json()["success"] is True
    assert response.json()["id"]

    response = client.post("/api/user/login", json={"username": "carla@example.com", "password": "pass123"})
    assert response.status_code == 200
    assert response.json()["token"]


def test_register_duplicate_username(client, api_world):
    body = {"first_name": "Ana", "last_name": "Lopez", "username": "ana@example.com", "password": "secret"}
    response = client.post("/api/user/register", json=body)
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == "CONFLICT"


def test_register_invalid_email(client):
    body = {"first_name": "Carla", "last_name": "Gomez", "username": "not-an-email", "password": "pass123"}
    response = client.post("/api/user/register", json=body)
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_login_wrong_password(client, api_world):
    response = client.post("/api/user/login", json={"username": "ana@example.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid username or password"
    assert "token" not in response.json()


# -------- Authentication --------

@pytest.mark.parametrize("method,path", [
    ("POST", "/api/event/"),
    ("PUT", "/api/event/"),
    ("DELETE", "/api/event/{event}"),
    ("POST", "/api/event/{event}/enrollment"),
    ("DELETE", "/api/event/{event}/enrollment"),
    ("GET", "/api/event-location/"),
    ("GET", "/api/event-location/{venue}"),
    ("POST", "/api/event-location/"),
    ("PUT", "/api/event-location/{venue}"),
    ("DELETE", "/api/event-location/{venue}"),
])
def test_protected_routes_require_token(client, api_world, method, path):
    url = path.format(event=api_world["event"]["id"], venue=api_world["venue"]["id"])
    body = None
    if method in ("POST", "PUT") and "enrollment" not in url:
        if url.startswith("/api/event/"):
            body = event_body(api_world, id=api_world["event"]["id"])
        else:
            body = {
                "id_location": api_world["location"]["id"],
                "name": "Estadio Unico",
                "full_address": "Av. 25 y 32",
                "max_capacity": 500,
            }

    response = client.request(method, url, json=body)
    assert response.status_code == 401
    assert response.json()["error_code"] == "AUTHENTICATION_FAILED"


def test_rejected_calls_leave_data_untouched(client, api_world):
    client.delete(f"/api/event/{api_world['event']['id']}")
    client.delete(f"/api/event-location/{api_world['venue']['id']}")
    assert client.get(f"/api/event/{api_world['event']['id']}").status_code == 200


def test_invalid_token_is_rejected(client, api_world):
    response = client.get("/api/event-location/", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "AUTHENTICATION_FAILED"


# -------- Events --------

def test_list_events_envelope(client, api_world):
    response = client.get("/api/event/", params={"page": 1, "limit": 5})
    assert response.status_code == 200
    data = response.json()
    assert data["pagination"] == {"page": 1, "limit": 5, "total": 1, "pages": 1}
    event = data["collection"][0]
    assert event["name"] == "Jazz Night"
    assert event["event_location"]["location"]["province"]["name"] == "Buenos Aires"
    assert event["creator_user"]["username"] == "ana@example.com"
    assert "password" not in event["creator_user"]
    assert event["tags"] == [{"id": api_world["tag"]["id"], "name": "music"}]


def test_list_events_filters(client, api_world):
    start = api_world["event"]["start_date"]
    assert client.get("/api/event/", params={"tag": "MUSIC"}).json()["pagination"]["total"] == 1
    assert client.get("/api/event/", params={"name": "rock"}).json()["collection"] == []
    assert client.get("/api/event/", params={"startdate": start.date().isoformat()}).json()["pagination"]["total"] == 1
    other_day = (start + timedelta(days=1)).date().isoformat()
    assert client.get("/api/event/", params={"startdate": other_day}).json()["pagination"]["total"] == 0


def test_bad_pagination_is_rejected(client):
    response = client.get("/api/event/", params={"page": 0})
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_get_missing_event(client):
    response = client.get("/api/event/9999")
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": "Event not found",
        "error_code": "NOT_FOUND",
        "details": None,
    }


def test_event_lifecycle(client, api_world):
    owner = auth_headers(api_world["owner"])

    response = client.post("/api/event/", json=event_body(api_world), headers=owner)
    assert response.status_code == 201
    event_id = response.json()["id"]

    body = event_body(api_world, id=event_id, name="Tango Gala")
    response = client.put("/api/event/", json=body, headers=owner)
    assert response.status_code == 200
    assert client.get(f"/api/event/{event_id}").json()["name"] == "Tango Gala"

    response = client.delete(f"/api/event/{event_id}", headers=owner)
    assert response.status_code == 200
    assert client.get(f"/api/event/{event_id}").status_code == 404


def test_create_event_validation(client, api_world):
    owner = auth_headers(api_world["owner"])
    response = client.post("/api/event/", json=event_body(api_world, max_assistance=4), headers=owner)
    assert response.status_code == 400

    response = client.post("/api/event/", json=event_body(api_world, name="ab"), headers=owner)
    assert response.status_code == 400

    body = event_body(api_world)
    del body["start_date"]
    response = client.post("/api/event/", json=body, headers=owner)
    assert response.status_code == 400
    assert any("start_date" in d["field"] for d in response.json()["details"])


def test_foreign_event_update_is_not_found(client, api_world):
    body = event_body(api_world, id=api_world["event"]["id"])
    response = client.put("/api/event/", json=body, headers=auth_headers(api_world["other"]))
    assert response.status_code == 404


def test_enrollment_flow(client, api_world):
    event_id = api_world["event"]["id"]
    guest = auth_headers(api_world["other"])

    response = client.post(f"/api/event/{event_id}/enrollment", headers=guest)
    assert response.status_code == 201

    response = client.post(f"/api/event/{event_id}/enrollment", headers=guest)
    assert response.status_code == 400

    participants = client.get(f"/api/event/{event_id}/participants").json()
    assert [p["user"]["username"] for p in participants["collection"]] == ["bruno@example.com"]
    assert participants["pagination"]["total"] == 1

    response = client.delete(f"/api/event/{event_id}", headers=auth_headers(api_world["owner"]))
    assert response.status_code == 400

    assert client.delete(f"/api/event/{event_id}/enrollment", headers=guest).status_code == 200
    assert client.delete(f"/api/event/{event_id}/enrollment", headers=guest).status_code == 400


def test_enroll_missing_event(client, api_world):
    response = client.post("/api/event/9999/enrollment", headers=auth_headers(api_world["other"]))
    assert response.status_code == 404


# -------- Event locations --------

def test_event_location_crud(client, api_world):
    owner = auth_headers(api_world["owner"])
    body = {
        "id_location": api_world["location"]["id"],
        "name": "Estadio Unico",
        "full_address": "Av. 25 y 32",
        "max_capacity": 500,
    }
    response = client.post("/api/event-location/", json=body, headers=owner)
    assert response.status_code == 201
    venue_id = response.json()["id"]

    listing = client.get("/api/event-location/", headers=owner).json()
    assert [v["name"] for v in listing["collection"]] == ["Teatro Argentino", "Estadio Unico"]

    body["max_capacity"] = 800
    assert client.put(f"/api/event-location/{venue_id}", json=body, headers=owner).status_code == 200
    assert client.get(f"/api/event-location/{venue_id}", headers=owner).json()["max_capacity"] == 800

    assert client.delete(f"/api/event-location/{venue_id}", headers=owner).status_code == 200
    assert client.get(f"/api/event-location/{venue_id}", headers=owner).status_code == 404


def test_event_location_of_another_user(client, api_world):
    other = auth_headers(api_world["other"])
    venue_id = api_world["venue"]["id"]
    assert client.get(f"/api/event-location/{venue_id}", headers=other).status_code == 404
    assert client.get("/api/event-location/", headers=other).json()["collection"] == []


def test_event_location_in_use_cannot_be_deleted(client, api_world):
    owner = auth_headers(api_world["owner"])
    response = client.delete(f"/api/event-location/{api_world['venue']['id']}", headers=owner)
    assert response.status_code == 400
    assert response.json()["error_code"] == "CONFLICT"


# -------- Reference data --------

def test_reference_data(client, api_world):
    province_id = api_world["province"]["id"]

    tags = client.get("/api/tags/").json()
    assert tags == {"collection": [{"id": api_world["tag"]["id"], "name": "music"}], "pagination": None}

    provinces = client.get("/api/provinces/").json()["collection"]
    assert [p["name"] for p in provinces] == ["Buenos Aires"]
    assert client.get(f"/api/provinces/{province_id}").json()["full_name"] == "Provincia de Buenos Aires"
    assert client.get("/api/provinces/9999").status_code == 404

    by_path = client.get(f"/api/locations/province/{province_id}").json()["collection"]
    by_query = client.get("/api/locations/", params={"province": province_id}).json()["collection"]
    assert by_path == by_query
    assert [loc["name"] for loc in by_path] == ["La Plata"]

    location = client.get(f"/api/locations/{api_world['location']['id']}").json()
    assert location["province"]["id"] == province_id
    assert client.get("/api/locations/province/9999").status_code == 404

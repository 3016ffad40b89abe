"""
Tests for the typed client data layer, driven through the ASGI test client
"""

import pytest

from app.client import ApiError, EventosClient

from factories import future


@pytest.fixture
def api(client):
    return EventosClient(http=client)


def test_register_login_and_create(api, api_world):
    created = api.register("Carla", "Gomez", "carla@example.com", "pass123")
    assert created.success is True

    token = api.login("carla@example.com", "pass123")
    assert api.token == token

    venue = api.create_event_location({
        "id_location": api_world["location"]["id"],
        "name": "Club Atenas",
        "full_address": "Calle 13 n 1234",
        "max_capacity": 40,
    })
    event = api.create_event({
        "name": "Folk Evening",
        "description": "Chacarera and zamba",
        "id_event_location": venue.id,
        "start_date": future(days=5).isoformat(),
        "max_assistance": 40,
        "tags": [api_world["tag"]["id"]],
    })

    detail = api.get_event(event.id)
    assert detail.creator_user.username == "carla@example.com"
    assert detail.event_location.name == "Club Atenas"

    api.update_event(event.id, {
        "name": "Folk Night",
        "description": "Chacarera and zamba",
        "id_event_location": venue.id,
        "start_date": future(days=6).isoformat(),
        "max_assistance": 20,
    })
    assert api.get_event(event.id).name == "Folk Night"

    assert [v.name for v in api.list_event_locations().collection] == ["Club Atenas"]
    api.delete_event(event.id)
    api.delete_event_location(venue.id)


def test_list_and_enroll(api, api_world):
    api.login("bruno@example.com", "secret")
    event_id = api_world["event"]["id"]

    listing = api.list_events(tag="music", limit=5)
    assert [e.id for e in listing.collection] == [event_id]
    assert listing.pagination.total == 1

    api.enroll(event_id)
    participants = api.list_participants(event_id)
    assert [p.user.username for p in participants.collection] == ["bruno@example.com"]

    api.unenroll(event_id)
    assert api.list_participants(event_id).collection == []


def test_reference_data(api, api_world):
    assert [t.name for t in api.list_tags()] == ["music"]
    provinces = api.list_provinces()
    assert provinces[0].name == "Buenos Aires"
    assert api.get_province(provinces[0].id).full_name == "Provincia de Buenos Aires"
    locations = api.list_locations(province_id=provinces[0].id)
    assert locations[0].province.id == provinces[0].id
    assert api.get_location(locations[0].id).name == "La Plata"


def test_errors_raise_api_error(api, api_world):
    with pytest.raises(ApiError) as exc_info:
        api.get_event(9999)
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Event not found"

    with pytest.raises(ApiError) as exc_info:
        api.login("ana@example.com", "wrong")
    assert exc_info.value.status_code == 401
    assert api.token is None

    with pytest.raises(ApiError) as exc_info:
        api.enroll(api_world["event"]["id"])
    assert exc_info.value.status_code == 401
    assert exc_info.value.payload["error_code"] == "AUTHENTICATION_FAILED"


def test_logout_drops_token(api, api_world):
    api.login("ana@example.com", "secret")
    assert api.list_event_locations().pagination.total == 1
    api.logout()
    with pytest.raises(ApiError):
        api.list_event_locations()

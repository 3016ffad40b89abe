"""
Typed HTTP client mirroring every API handler.

UI code talks to the API through EventosClient; each method maps to exactly
one route and returns the parsed response model. Non-2xx responses raise
ApiError carrying the status code and the server's ``message``.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from app.schemas.common import CollectionResponse, CreatedResponse, MessageResponse
from app.schemas.event import EventResponse, ParticipantResponse
from app.schemas.event_location import EventLocationResponse
from app.schemas.geo import LocationResponse, ProvinceResponse
from app.schemas.tag import TagResponse

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_BASE_URL = "http://localhost:8000"


class ApiError(Exception):
    """Raised for any non-2xx API response"""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload


class EventosClient:
    """Client data layer for the Eventos API.

    Pass an existing ``httpx.Client`` (for instance FastAPI's TestClient) to
    reuse its transport; otherwise one is created for ``base_url``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "EventosClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------- Transport --------

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.http.request(method, path, headers=self._headers(), **kwargs)
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if response.status_code >= 400:
            message = payload.get("message") if isinstance(payload, dict) else response.text
            logger.debug(f"{method} {path} failed with {response.status_code}: {message}")
            raise ApiError(response.status_code, message or response.reason_phrase, payload)
        return payload

    @staticmethod
    def _parse(model: Type[M], payload: Any) -> M:
        return model.model_validate(payload)

    @staticmethod
    def _params(**values) -> Dict[str, Any]:
        return {k: v for k, v in values.items() if v is not None}

    # -------- Users --------

    def register(self, first_name: str, last_name: str, username: str, password: str) -> CreatedResponse:
        payload = self._request("POST", "/api/user/register", json={
            "first_name": first_name,
            "last_name": last_name,
            "username": username,
            "password": password,
        })
        return self._parse(CreatedResponse, payload)

    def login(self, username: str, password: str) -> str:
        """Authenticate and keep the token for subsequent calls"""
        payload = self._request("POST", "/api/user/login", json={"username": username, "password": password})
        self.token = payload["token"]
        return self.token

    def logout(self) -> None:
        self.token = None

    # -------- Events --------

    def list_events(
        self,
        name: Optional[str] = None,
        startdate: Optional[date] = None,
        tag: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> CollectionResponse[EventResponse]:
        params = self._params(
            name=name,
            startdate=startdate.isoformat() if startdate else None,
            tag=tag,
            page=page,
            limit=limit,
        )
        return self._parse(CollectionResponse[EventResponse], self._request("GET", "/api/event/", params=params))

    def get_event(self, event_id: int) -> EventResponse:
        return self._parse(EventResponse, self._request("GET", f"/api/event/{event_id}"))

    def create_event(self, event: Dict[str, Any]) -> CreatedResponse:
        return self._parse(CreatedResponse, self._request("POST", "/api/event/", json=event))

    def update_event(self, event_id: int, event: Dict[str, Any]) -> MessageResponse:
        body = dict(event, id=event_id)
        return self._parse(MessageResponse, self._request("PUT", "/api/event/", json=body))

    def delete_event(self, event_id: int) -> MessageResponse:
        return self._parse(MessageResponse, self._request("DELETE", f"/api/event/{event_id}"))

    def enroll(self, event_id: int) -> CreatedResponse:
        return self._parse(CreatedResponse, self._request("POST", f"/api/event/{event_id}/enrollment"))

    def unenroll(self, event_id: int) -> MessageResponse:
        return self._parse(MessageResponse, self._request("DELETE", f"/api/event/{event_id}/enrollment"))

    def list_participants(
        self, event_id: int, page: int = 1, limit: Optional[int] = None
    ) -> CollectionResponse[ParticipantResponse]:
        payload = self._request(
            "GET", f"/api/event/{event_id}/participants", params=self._params(page=page, limit=limit)
        )
        return self._parse(CollectionResponse[ParticipantResponse], payload)

    # -------- Event locations --------

    def list_event_locations(
        self, page: int = 1, limit: Optional[int] = None
    ) -> CollectionResponse[EventLocationResponse]:
        payload = self._request("GET", "/api/event-location/", params=self._params(page=page, limit=limit))
        return self._parse(CollectionResponse[EventLocationResponse], payload)

    def get_event_location(self, event_location_id: int) -> EventLocationResponse:
        return self._parse(
            EventLocationResponse, self._request("GET", f"/api/event-location/{event_location_id}")
        )

    def create_event_location(self, venue: Dict[str, Any]) -> CreatedResponse:
        return self._parse(CreatedResponse, self._request("POST", "/api/event-location/", json=venue))

    def update_event_location(self, event_location_id: int, venue: Dict[str, Any]) -> MessageResponse:
        return self._parse(
            MessageResponse, self._request("PUT", f"/api/event-location/{event_location_id}", json=venue)
        )

    def delete_event_location(self, event_location_id: int) -> MessageResponse:
        return self._parse(
            MessageResponse, self._request("DELETE", f"/api/event-location/{event_location_id}")
        )

    # -------- Reference data --------

    def list_tags(self) -> List[TagResponse]:
        return self._parse(CollectionResponse[TagResponse], self._request("GET", "/api/tags/")).collection

    def list_provinces(self) -> List[ProvinceResponse]:
        payload = self._request("GET", "/api/provinces/")
        return self._parse(CollectionResponse[ProvinceResponse], payload).collection

    def get_province(self, province_id: int) -> ProvinceResponse:
        return self._parse(ProvinceResponse, self._request("GET", f"/api/provinces/{province_id}"))

    def list_locations(self, province_id: Optional[int] = None) -> List[LocationResponse]:
        payload = self._request("GET", "/api/locations/", params=self._params(province=province_id))
        return self._parse(CollectionResponse[LocationResponse], payload).collection

    def get_location(self, location_id: int) -> LocationResponse:
        return self._parse(LocationResponse, self._request("GET", f"/api/locations/{location_id}"))

"""
Venue (event location) management for the authenticated owner
"""

import logging
from typing import List, Tuple

from app.core.errors import DomainValidationError, NotFoundError
from app.schemas.common import PageParams, Pagination
from app.schemas.event_location import EventLocationCreate, EventLocationResponse
from app.services.presenters import present_event_location
from app.services.repositories import Repository, Row
from app.services.validators import (
    ensure_event_location_deletable,
    validate_capacity_covers_events,
    validate_event_location_fields,
)
from app.utils.security import CurrentUser

logger = logging.getLogger(__name__)

class EventLocationService:
    """Service for venue operations. Venues owned by other users look missing."""

    def __init__(self, repo: Repository):
        self.repo = repo

    def _get_owned(self, event_location_id: int, user: CurrentUser) -> Row:
        venue = self.repo.get_event_location(event_location_id)
        if not venue or venue["id_creator_user"] != user.id:
            raise NotFoundError(
                "Event location",
                "Event location not found or does not belong to the user.",
            )
        return venue

    def _validated_fields(self, payload: EventLocationCreate) -> Row:
        validate_event_location_fields(
            payload.id_location, payload.name, payload.full_address, payload.max_capacity
        )
        if not self.repo.get_location(payload.id_location):
            raise DomainValidationError("The specified location does not exist.")
        return {
            "id_location": payload.id_location,
            "name": payload.name.strip(),
            "full_address": payload.full_address.strip(),
            "max_capacity": payload.max_capacity,
            "latitude": payload.latitude,
            "longitude": payload.longitude,
        }

    def list_event_locations(
        self, user: CurrentUser, page: PageParams
    ) -> Tuple[List[EventLocationResponse], Pagination]:
        rows, total = self.repo.list_event_locations(user.id, page.limit, page.offset)
        return [present_event_location(self.repo, row) for row in rows], page.describe(total)

    def get_event_location(self, event_location_id: int, user: CurrentUser) -> EventLocationResponse:
        return present_event_location(self.repo, self._get_owned(event_location_id, user))

    def create_event_location(self, payload: EventLocationCreate, user: CurrentUser) -> Row:
        data = self._validated_fields(payload)
        data["id_creator_user"] = user.id
        venue = self.repo.create_event_location(data)
        logger.info(f"User {user.id} created event location {venue['id']}")
        return venue

    def update_event_location(
        self, event_location_id: int, payload: EventLocationCreate, user: CurrentUser
    ) -> Row:
        self._get_owned(event_location_id, user)
        data = self._validated_fields(payload)
        validate_capacity_covers_events(
            data["max_capacity"], self.repo.max_assistance_at_location(event_location_id)
        )
        venue = self.repo.update_event_location(event_location_id, data)
        logger.info(f"User {user.id} updated event location {event_location_id}")
        return venue

    def delete_event_location(self, event_location_id: int, user: CurrentUser) -> None:
        self._get_owned(event_location_id, user)
        ensure_event_location_deletable(self.repo.count_events_at_location(event_location_id))
        self.repo.delete_event_location(event_location_id)
        logger.info(f"User {user.id} deleted event location {event_location_id}")

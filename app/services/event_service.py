"""
Event lifecycle and enrollment service
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from app.core.errors import DomainValidationError, NotFoundError
from app.schemas.common import PageParams, Pagination
from app.schemas.event import EventCreate, EventResponse, EventUpdate, ParticipantResponse
from app.services.presenters import present_event, present_participant
from app.services.repositories import EventFilters, Repository, Row, to_naive_utc
from app.services.validators import (
    ensure_event_deletable,
    validate_assistance_within_capacity,
    validate_enrollment,
    validate_event_fields,
    validate_tags_exist,
    validate_unenrollment,
)
from app.utils.security import CurrentUser

logger = logging.getLogger(__name__)

class EventService:
    """Service for event operations"""

    def __init__(self, repo: Repository):
        self.repo = repo

    # -------- Helpers --------

    def _get_event(self, event_id: int) -> Row:
        event = self.repo.get_event(event_id)
        if not event:
            raise NotFoundError("Event")
        return event

    def _get_owned_event(self, event_id: int, user: CurrentUser) -> Row:
        event = self.repo.get_event(event_id)
        if not event:
            raise NotFoundError("Event")
        if event["id_creator_user"] != user.id:
            raise NotFoundError("Event", "The event does not belong to the authenticated user.")
        return event

    def _validated_fields(self, payload: EventCreate) -> Row:
        """Run field, venue-capacity and tag rules; return the columns to store"""
        validate_event_fields(
            payload.name,
            payload.description,
            payload.price,
            payload.duration_in_minutes,
            payload.max_assistance,
        )
        venue = self.repo.get_event_location(payload.id_event_location)
        if not venue:
            raise DomainValidationError("The event location does not exist.")
        validate_assistance_within_capacity(payload.max_assistance, venue)
        if payload.tags:
            known = [t["id"] for t in self.repo.list_tags()]
            validate_tags_exist(payload.tags, known)

        return {
            "name": payload.name.strip(),
            "description": payload.description.strip(),
            "id_event_location": payload.id_event_location,
            "start_date": to_naive_utc(payload.start_date),
            "duration_in_minutes": payload.duration_in_minutes or 0,
            "price": payload.price or 0,
            "enabled_for_enrollment": payload.enabled_for_enrollment,
            "max_assistance": payload.max_assistance,
        }

    # -------- Queries --------

    def list_events(
        self, filters: EventFilters, page: PageParams
    ) -> Tuple[List[EventResponse], Pagination]:
        rows, total = self.repo.list_events(filters, page.limit, page.offset)
        return [present_event(self.repo, row) for row in rows], page.describe(total)

    def get_event(self, event_id: int) -> EventResponse:
        return present_event(self.repo, self._get_event(event_id))

    def list_participants(
        self, event_id: int, page: PageParams
    ) -> Tuple[List[ParticipantResponse], Pagination]:
        """Enrolled users of an event.

        Enrollments whose user row no longer exists are left out of the page
        but still counted in ``pagination.total``, which reflects the stored
        enrollments (the same count the capacity check uses).
        """
        self._get_event(event_id)
        rows, total = self.repo.list_enrollments(event_id, page.limit, page.offset)
        participants = []
        for row in rows:
            participant = present_participant(self.repo, row)
            if participant is None:
                logger.warning(f"Enrollment {row['id']} of event {event_id} references missing user {row['id_user']}")
                continue
            participants.append(participant)
        return participants, page.describe(total)

    # -------- Commands --------

    def create_event(self, payload: EventCreate, user: CurrentUser) -> Row:
        data = self._validated_fields(payload)
        data["id_creator_user"] = user.id
        event = self.repo.create_event(data, payload.tags or [])
        logger.info(f"User {user.id} created event {event['id']}")
        return event

    def update_event(self, payload: EventUpdate, user: CurrentUser) -> Row:
        if not payload.id:
            raise DomainValidationError("The event id is missing.")
        self._get_owned_event(payload.id, user)
        data = self._validated_fields(payload)
        event = self.repo.update_event(payload.id, data, payload.tags)
        logger.info(f"User {user.id} updated event {payload.id}")
        return event

    def delete_event(self, event_id: int, user: CurrentUser) -> None:
        self._get_owned_event(event_id, user)
        ensure_event_deletable(self.repo.count_enrollments(event_id))
        self.repo.delete_event(event_id)
        logger.info(f"User {user.id} deleted event {event_id}")

    def enroll(self, event_id: int, user: CurrentUser, now: Optional[datetime] = None) -> Row:
        event = self._get_event(event_id)
        validate_enrollment(
            event,
            enrolled_count=self.repo.count_enrollments(event_id),
            already_enrolled=self.repo.get_enrollment(event_id, user.id) is not None,
            now=now,
        )
        enrollment = self.repo.create_enrollment(event_id, user.id)
        logger.info(f"User {user.id} enrolled in event {event_id}")
        return enrollment

    def unenroll(self, event_id: int, user: CurrentUser, now: Optional[datetime] = None) -> None:
        event = self._get_event(event_id)
        validate_unenrollment(
            event,
            is_enrolled=self.repo.get_enrollment(event_id, user.id) is not None,
            now=now,
        )
        self.repo.delete_enrollment(event_id, user.id)
        logger.info(f"User {user.id} left event {event_id}")

"""
Event routes - public listing/detail, authenticated management and enrollment
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import page_params
from app.schemas.common import CollectionResponse, CreatedResponse, MessageResponse, PageParams
from app.schemas.event import EventCreate, EventResponse, EventUpdate, ParticipantResponse
from app.services.event_service import EventService
from app.services.repositories import EventFilters, Repository, get_repository
from app.utils.security import CurrentUser, get_current_user

router = APIRouter()

@router.get("/", response_model=CollectionResponse[EventResponse])
async def list_events(
    name: Optional[str] = Query(None),
    startdate: Optional[date] = Query(None),
    tag: Optional[str] = Query(None),
    page: PageParams = Depends(page_params),
    repo: Repository = Depends(get_repository)
):
    """List events ordered by start date, filtered by name, day and tag"""
    filters = EventFilters(name=name, start_date=startdate, tag=tag)
    events, pagination = EventService(repo).list_events(filters, page)
    return CollectionResponse[EventResponse](collection=events, pagination=pagination)

@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    repo: Repository = Depends(get_repository)
):
    """Event detail with venue, creator and tags"""
    return EventService(repo).get_event(event_id)

@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    """Create an event owned by the caller"""
    event = EventService(repo).create_event(payload, user)
    return CreatedResponse(message="Event created successfully", id=event["id"])

@router.put("/", response_model=MessageResponse)
async def update_event(
    payload: EventUpdate,
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    """Update one of the caller's events (id travels in the body)"""
    EventService(repo).update_event(payload, user)
    return MessageResponse(message="Event updated successfully")

@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: int,
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    """Delete one of the caller's events if nobody is enrolled"""
    EventService(repo).delete_event(event_id, user)
    return MessageResponse(message="Event deleted successfully")

@router.post("/{event_id}/enrollment", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def enroll(
    event_id: int,
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    """Enroll the caller in an event"""
    enrollment = EventService(repo).enroll(event_id, user)
    return CreatedResponse(message="Enrollment successful", id=enrollment["id"])

@router.delete("/{event_id}/enrollment", response_model=MessageResponse)
async def unenroll(
    event_id: int,
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    """Remove the caller's enrollment"""
    EventService(repo).unenroll(event_id, user)
    return MessageResponse(message="Enrollment cancelled successfully")

@router.get("/{event_id}/participants", response_model=CollectionResponse[ParticipantResponse])
async def list_participants(
    event_id: int,
    page: PageParams = Depends(page_params),
    repo: Repository = Depends(get_repository)
):
    """Users enrolled in an event"""
    participants, pagination = EventService(repo).list_participants(event_id, page)
    return CollectionResponse[ParticipantResponse](collection=participants, pagination=pagination)

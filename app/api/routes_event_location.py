"""
Event location (venue) routes - every route requires authentication
"""

from fastapi import APIRouter, Depends, status

from app.api.deps import page_params
from app.schemas.common import CollectionResponse, CreatedResponse, MessageResponse, PageParams
from app.schemas.event_location import EventLocationCreate, EventLocationResponse
from app.services.event_location_service import EventLocationService
from app.services.repositories import Repository, get_repository
from app.utils.security import CurrentUser, get_current_user

router = APIRouter()

@router.get("/", response_model=CollectionResponse[EventLocationResponse])
async def list_event_locations(
    page: PageParams = Depends(page_params),
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    """List the caller's venues"""
    venues, pagination = EventLocationService(repo).list_event_locations(user, page)
    return CollectionResponse[EventLocationResponse](collection=venues, pagination=pagination)

@router.get("/{event_location_id}", response_model=EventLocationResponse)
async def get_event_location(
    event_location_id: int,
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    return EventLocationService(repo).get_event_location(event_location_id, user)

@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_event_location(
    payload: EventLocationCreate,
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    venue = EventLocationService(repo).create_event_location(payload, user)
    return CreatedResponse(message="Event location created successfully", id=venue["id"])

@router.put("/{event_location_id}", response_model=MessageResponse)
async def update_event_location(
    event_location_id: int,
    payload: EventLocationCreate,
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    EventLocationService(repo).update_event_location(event_location_id, payload, user)
    return MessageResponse(message="Event location updated successfully")

@router.delete("/{event_location_id}", response_model=MessageResponse)
async def delete_event_location(
    event_location_id: int,
    repo: Repository = Depends(get_repository),
    user: CurrentUser = Depends(get_current_user)
):
    """Delete a venue no event refers to"""
    EventLocationService(repo).delete_event_location(event_location_id, user)
    return MessageResponse(message="Event location deleted successfully")

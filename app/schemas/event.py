"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel

from app.schemas.event_location import EventLocationResponse
from app.schemas.tag import TagResponse
from app.schemas.user import UserPublic

class EventCreate(BaseModel):
    """Schema for creating an event"""
    name: Optional[str] = None
    description: Optional[str] = None
    id_event_location: int
    start_date: datetime
    duration_in_minutes: Optional[int] = 0
    price: Optional[float] = 0
    enabled_for_enrollment: bool = True
    max_assistance: int
    tags: List[int] = []

class EventUpdate(EventCreate):
    """Schema for updating an event; the id travels in the body"""
    id: Optional[int] = None
    tags: Optional[List[int]] = None

class EventResponse(BaseModel):
    """Event with its venue, creator and tags expanded"""
    id: int
    name: str
    description: str
    id_event_location: int
    start_date: datetime
    duration_in_minutes: int
    price: float
    enabled_for_enrollment: bool
    max_assistance: int
    id_creator_user: int
    event_location: Optional[EventLocationResponse] = None
    creator_user: Optional[UserPublic] = None
    tags: List[TagResponse] = []

class ParticipantResponse(BaseModel):
    """One enrollment as seen from the event"""
    user: UserPublic
    attended: bool = False
    rating: Optional[int] = None
    description: Optional[str] = None
    registration_date_time: Optional[datetime] = None

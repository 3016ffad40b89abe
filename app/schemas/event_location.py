"""
EventLocation (venue) schemas
"""

from typing import Optional
from pydantic import BaseModel

from app.schemas.geo import LocationResponse
from app.schemas.user import UserPublic

class EventLocationCreate(BaseModel):
    """Venue payload for create and update"""
    id_location: Optional[int] = None
    name: Optional[str] = None
    full_address: Optional[str] = None
    max_capacity: Optional[int] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None

class EventLocationResponse(BaseModel):
    id: int
    id_location: int
    name: str
    full_address: str
    max_capacity: int
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    id_creator_user: int
    location: Optional[LocationResponse] = None
    creator_user: Optional[UserPublic] = None

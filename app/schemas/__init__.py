"""
Pydantic schemas package
"""

from .common import *
from .user import *
from .geo import *
from .tag import *
from .event_location import *
from .event import *

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "CreatedResponse",
    "Pagination",
    "CollectionResponse",
    "PageParams",
    "UserRegister",
    "UserLogin",
    "UserPublic",
    "LoginResponse",
    "ProvinceResponse",
    "LocationResponse",
    "TagResponse",
    "EventLocationCreate",
    "EventLocationResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "ParticipantResponse",
]

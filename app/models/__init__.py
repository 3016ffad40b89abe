"""
Database models package
"""

from .user import User
from .province import Province
from .location import Location
from .event_location import EventLocation
from .event import Event
from .tag import Tag, EventTag
from .enrollment import EventEnrollment

__all__ = [
    "User",
    "Province",
    "Location",
    "EventLocation",
    "Event",
    "Tag",
    "EventTag",
    "EventEnrollment",
]

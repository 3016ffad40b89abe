"""
Repository layer abstracting storage (SQLAlchemy, JSON file or Supabase).

Every backend implements the same Repository contract and exchanges rows as
plain dicts keyed by column name. Datetimes inside those dicts are naive UTC
``datetime`` objects regardless of how the backend stores them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional, Tuple

from app.core.config import settings

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

DATETIME_FIELDS = ("start_date", "registration_date_time")


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_datetime(value: Any) -> Optional[datetime]:
    """Accept datetimes or ISO-8601 strings (with or without offset)"""
    if value is None or isinstance(value, datetime):
        return to_naive_utc(value) if value else value
    text = str(value).replace("Z", "+00:00")
    return to_naive_utc(datetime.fromisoformat(text))


def normalize_row(row: Optional[Row]) -> Optional[Row]:
    if row is None:
        return None
    row = dict(row)
    for key in DATETIME_FIELDS:
        if key in row and row[key] is not None:
            row[key] = parse_datetime(row[key])
    return row


@dataclass
class EventFilters:
    """Optional filters for the public event listing"""
    name: Optional[str] = None
    start_date: Optional[date] = None
    tag: Optional[str] = None


class Repository(ABC):
    """Storage contract shared by every backend"""

    backend_name: str = "abstract"

    # -------- Users --------

    @abstractmethod
    def create_user(self, data: Row) -> Row:
        """Insert a user; raises ConflictError when the username is taken"""

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[Row]:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[Row]:
        ...

    # -------- Provinces / locations --------

    @abstractmethod
    def create_province(self, data: Row) -> Row:
        ...

    @abstractmethod
    def list_provinces(self) -> List[Row]:
        """Ordered by display_order, then name"""

    @abstractmethod
    def get_province(self, province_id: int) -> Optional[Row]:
        ...

    @abstractmethod
    def create_location(self, data: Row) -> Row:
        ...

    @abstractmethod
    def list_locations(self, province_id: Optional[int] = None) -> List[Row]:
        ...

    @abstractmethod
    def get_location(self, location_id: int) -> Optional[Row]:
        ...

    # -------- Tags --------

    @abstractmethod
    def create_tag(self, name: str) -> Row:
        ...

    @abstractmethod
    def list_tags(self) -> List[Row]:
        ...

    @abstractmethod
    def list_event_tags(self, event_id: int) -> List[Row]:
        """Tags attached to an event"""

    # -------- Event locations --------

    @abstractmethod
    def create_event_location(self, data: Row) -> Row:
        ...

    @abstractmethod
    def get_event_location(self, event_location_id: int) -> Optional[Row]:
        ...

    @abstractmethod
    def list_event_locations(self, creator_user_id: int, limit: int, offset: int) -> Tuple[List[Row], int]:
        """Venues owned by a user, ordered by id, plus the total count"""

    @abstractmethod
    def update_event_location(self, event_location_id: int, data: Row) -> Optional[Row]:
        ...

    @abstractmethod
    def delete_event_location(self, event_location_id: int) -> bool:
        ...

    @abstractmethod
    def count_events_at_location(self, event_location_id: int) -> int:
        ...

    @abstractmethod
    def max_assistance_at_location(self, event_location_id: int) -> int:
        """Largest max_assistance among events held at the venue (0 if none)"""

    # -------- Events --------

    @abstractmethod
    def create_event(self, data: Row, tag_ids: List[int]) -> Row:
        ...

    @abstractmethod
    def get_event(self, event_id: int) -> Optional[Row]:
        ...

    @abstractmethod
    def list_events(self, filters: EventFilters, limit: int, offset: int) -> Tuple[List[Row], int]:
        """Events ordered by start_date, plus the total matching count"""

    @abstractmethod
    def update_event(self, event_id: int, data: Row, tag_ids: Optional[List[int]] = None) -> Optional[Row]:
        """Update columns; replace the tag set only when tag_ids is not None"""

    @abstractmethod
    def delete_event(self, event_id: int) -> bool:
        """Delete the event and its tag links"""

    # -------- Enrollments --------

    @abstractmethod
    def create_enrollment(self, event_id: int, user_id: int) -> Row:
        """Insert an enrollment; raises ConflictError on a duplicate pair"""

    @abstractmethod
    def get_enrollment(self, event_id: int, user_id: int) -> Optional[Row]:
        ...

    @abstractmethod
    def delete_enrollment(self, event_id: int, user_id: int) -> bool:
        ...

    @abstractmethod
    def count_enrollments(self, event_id: int) -> int:
        ...

    @abstractmethod
    def list_enrollments(self, event_id: int, limit: int, offset: int) -> Tuple[List[Row], int]:
        """Enrollments of an event ordered by registration time, plus the total"""


# -------- Backend selection --------

@lru_cache(maxsize=None)
def _shared_repository(backend: str) -> Repository:
    """JSON and Supabase repositories are process-wide singletons"""
    if backend == "json":
        from app.services.json_repository import JsonFileRepository
        return JsonFileRepository(settings.JSON_DB_PATH)
    if backend == "supabase":
        from app.services.supabase_repository import SupabaseRepository
        return SupabaseRepository()
    raise ValueError(f"Unknown storage backend: {backend!r}")


def uses_sql() -> bool:
    return settings.STORAGE_BACKEND.lower() in ("sql", "sqlite", "postgres", "postgresql")


def get_repository() -> Iterator[Repository]:
    """FastAPI dependency yielding the configured repository"""
    if uses_sql():
        from app.core.db import SessionLocal
        from app.services.sql_repository import SqlRepository

        db = SessionLocal()
        try:
            yield SqlRepository(db)
        finally:
            db.close()
    else:
        yield _shared_repository(settings.STORAGE_BACKEND.lower())

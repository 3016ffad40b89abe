"""
Supabase implementation of the repository contract.

Tables mirror the SQL schema (see app/models). Unique constraints live in the
database; a violated one comes back as a PostgREST APIError with code 23505.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from typing import Any, List, Optional, Tuple

from postgrest.exceptions import APIError

from app.core.errors import ConflictError
from app.services.repositories import EventFilters, Repository, Row, normalize_row, to_naive_utc
from app.services.supabase_client import get_supabase_client

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def escape_like(value: str) -> str:
    """Make LIKE wildcards in user input match literally"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _encode(data: Row) -> Row:
    return {
        key: to_naive_utc(value).isoformat() if isinstance(value, datetime) else value
        for key, value in data.items()
    }


class SupabaseRepository(Repository):
    backend_name = "supabase"

    def __init__(self, client: Any = None):
        self.client = client or get_supabase_client()

    def _table(self, name: str):
        return self.client.table(name)

    @staticmethod
    def _first(response) -> Optional[Row]:
        return normalize_row(response.data[0]) if response.data else None

    @staticmethod
    def _rows(response) -> List[Row]:
        return [normalize_row(row) for row in response.data or []]

    def _insert(self, table: str, data: Row, conflict_message: str = "Duplicate record") -> Row:
        try:
            response = self._table(table).insert(_encode(data)).execute()
        except APIError as exc:
            if getattr(exc, "code", None) == UNIQUE_VIOLATION:
                logger.warning(f"Unique violation on {table}: {exc.message}")
                raise ConflictError(conflict_message)
            raise
        return self._first(response)

    def _get(self, table: str, row_id: int) -> Optional[Row]:
        return self._first(self._table(table).select("*").eq("id", row_id).limit(1).execute())

    def _count(self, table: str, column: str, value: Any) -> int:
        response = self._table(table).select("id", count="exact").eq(column, value).execute()
        return response.count or 0

    # -------- Users --------

    def create_user(self, data: Row) -> Row:
        return self._insert("users", data, "The username is already registered.")

    def get_user(self, user_id: int) -> Optional[Row]:
        return self._get("users", user_id)

    def get_user_by_username(self, username: str) -> Optional[Row]:
        return self._first(
            self._table("users").select("*").eq("username", username).limit(1).execute()
        )

    # -------- Provinces / locations --------

    def create_province(self, data: Row) -> Row:
        return self._insert("provinces", data)

    def list_provinces(self) -> List[Row]:
        # Postgres sorts NULL display_order last in ascending order
        return self._rows(
            self._table("provinces").select("*").order("display_order").order("name").execute()
        )

    def get_province(self, province_id: int) -> Optional[Row]:
        return self._get("provinces", province_id)

    def create_location(self, data: Row) -> Row:
        return self._insert("locations", data)

    def list_locations(self, province_id: Optional[int] = None) -> List[Row]:
        query = self._table("locations").select("*")
        if province_id is not None:
            query = query.eq("id_province", province_id)
        return self._rows(query.order("name").execute())

    def get_location(self, location_id: int) -> Optional[Row]:
        return self._get("locations", location_id)

    # -------- Tags --------

    def create_tag(self, name: str) -> Row:
        return self._insert("tags", {"name": name}, f"Tag '{name}' already exists.")

    def list_tags(self) -> List[Row]:
        return self._rows(self._table("tags").select("*").order("name").execute())

    def list_event_tags(self, event_id: int) -> List[Row]:
        links = self._table("event_tags").select("id_tag").eq("id_event", event_id).execute()
        tag_ids = [link["id_tag"] for link in links.data or []]
        if not tag_ids:
            return []
        return self._rows(self._table("tags").select("*").in_("id", tag_ids).order("name").execute())

    def _set_event_tags(self, event_id: int, tag_ids: List[int]) -> None:
        self._table("event_tags").delete().eq("id_event", event_id).execute()
        links = [{"id_event": event_id, "id_tag": tag_id} for tag_id in dict.fromkeys(tag_ids)]
        if links:
            self._table("event_tags").insert(links).execute()

    # -------- Event locations --------

    def create_event_location(self, data: Row) -> Row:
        return self._insert("event_locations", data)

    def get_event_location(self, event_location_id: int) -> Optional[Row]:
        return self._get("event_locations", event_location_id)

    def list_event_locations(self, creator_user_id: int, limit: int, offset: int) -> Tuple[List[Row], int]:
        response = (
            self._table("event_locations")
            .select("*", count="exact")
            .eq("id_creator_user", creator_user_id)
            .order("id")
            .range(offset, offset + limit - 1)
            .execute()
        )
        return self._rows(response), response.count or 0

    def update_event_location(self, event_location_id: int, data: Row) -> Optional[Row]:
        response = self._table("event_locations").update(_encode(data)).eq("id", event_location_id).execute()
        return self._first(response)

    def delete_event_location(self, event_location_id: int) -> bool:
        response = self._table("event_locations").delete().eq("id", event_location_id).execute()
        return bool(response.data)

    def count_events_at_location(self, event_location_id: int) -> int:
        return self._count("events", "id_event_location", event_location_id)

    def max_assistance_at_location(self, event_location_id: int) -> int:
        response = (
            self._table("events")
            .select("max_assistance")
            .eq("id_event_location", event_location_id)
            .order("max_assistance", desc=True)
            .limit(1)
            .execute()
        )
        return response.data[0]["max_assistance"] if response.data else 0

    # -------- Events --------

    def create_event(self, data: Row, tag_ids: List[int]) -> Row:
        event = self._insert("events", data)
        self._set_event_tags(event["id"], tag_ids)
        return event

    def get_event(self, event_id: int) -> Optional[Row]:
        return self._get("events", event_id)

    def _tagged_event_ids(self, tag: str) -> List[int]:
        tag_ids = [t["id"] for t in self.list_tags() if t["name"].lower() == tag.lower()]
        if not tag_ids:
            return []
        links = self._table("event_tags").select("id_event").in_("id_tag", tag_ids).execute()
        return sorted({link["id_event"] for link in links.data or []})

    def list_events(self, filters: EventFilters, limit: int, offset: int) -> Tuple[List[Row], int]:
        query = self._table("events").select("*", count="exact")
        if filters.name:
            query = query.ilike("name", f"%{escape_like(filters.name)}%")
        if filters.start_date:
            day_start = datetime.combine(filters.start_date, time.min)
            query = query.gte("start_date", day_start.isoformat()).lt(
                "start_date", (day_start + timedelta(days=1)).isoformat()
            )
        if filters.tag:
            event_ids = self._tagged_event_ids(filters.tag)
            if not event_ids:
                return [], 0
            query = query.in_("id", event_ids)
        response = query.order("start_date").order("id").range(offset, offset + limit - 1).execute()
        return self._rows(response), response.count or 0

    def update_event(self, event_id: int, data: Row, tag_ids: Optional[List[int]] = None) -> Optional[Row]:
        response = self._table("events").update(_encode(data)).eq("id", event_id).execute()
        event = self._first(response)
        if event and tag_ids is not None:
            self._set_event_tags(event_id, tag_ids)
        return event

    def delete_event(self, event_id: int) -> bool:
        self._table("event_tags").delete().eq("id_event", event_id).execute()
        response = self._table("events").delete().eq("id", event_id).execute()
        return bool(response.data)

    # -------- Enrollments --------

    def create_enrollment(self, event_id: int, user_id: int) -> Row:
        return self._insert(
            "event_enrollments",
            {
                "id_event": event_id,
                "id_user": user_id,
                "registration_date_time": datetime.utcnow(),
                "attended": False,
            },
            "The user is already enrolled in the event.",
        )

    def get_enrollment(self, event_id: int, user_id: int) -> Optional[Row]:
        return self._first(
            self._table("event_enrollments")
            .select("*")
            .eq("id_event", event_id)
            .eq("id_user", user_id)
            .limit(1)
            .execute()
        )

    def delete_enrollment(self, event_id: int, user_id: int) -> bool:
        response = (
            self._table("event_enrollments")
            .delete()
            .eq("id_event", event_id)
            .eq("id_user", user_id)
            .execute()
        )
        return bool(response.data)

    def count_enrollments(self, event_id: int) -> int:
        return self._count("event_enrollments", "id_event", event_id)

    def list_enrollments(self, event_id: int, limit: int, offset: int) -> Tuple[List[Row], int]:
        response = (
            self._table("event_enrollments")
            .select("*", count="exact")
            .eq("id_event", event_id)
            .order("registration_date_time")
            .order("id")
            .range(offset, offset + limit - 1)
            .execute()
        )
        return self._rows(response), response.count or 0

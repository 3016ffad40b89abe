"""
JSON file implementation of the repository contract.

The whole document lives in memory and is rewritten to disk after every
write. Concurrent writers in separate processes can overwrite each other.
Pass ``path=None`` for a purely in-memory store.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from app.core.errors import ConflictError, StorageError
from app.services.repositories import (
    DATETIME_FIELDS,
    EventFilters,
    Repository,
    Row,
    normalize_row,
    to_naive_utc,
)

logger = logging.getLogger(__name__)

TABLES = (
    "users",
    "provinces",
    "locations",
    "event_locations",
    "events",
    "tags",
    "event_tags",
    "event_enrollments",
)


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonFileRepository(Repository):
    backend_name = "json"

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._data: Dict[str, List[Row]] = {table: [] for table in TABLES}
        self._load()

    # -------- Persistence --------

    def _load(self) -> None:
        if not self.path:
            return
        if not os.path.exists(self.path):
            self._save()
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not read JSON database at {self.path}") from exc
        for table in TABLES:
            self._data[table] = [normalize_row(row) for row in stored.get(table, [])]
        logger.info(f"Loaded JSON database from {self.path}")

    def _save(self) -> None:
        if not self.path:
            return
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        # Readers only ever see the old document or the complete new one
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".eventos-", suffix=".json.tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, default=_encode, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Could not write JSON database at {self.path}") from exc

    # -------- Generic helpers --------

    def _next_id(self, table: str) -> int:
        return max((row["id"] for row in self._data[table]), default=0) + 1

    def _insert(self, table: str, data: Row) -> Row:
        row = dict(data)
        for key in DATETIME_FIELDS:
            if isinstance(row.get(key), datetime):
                row[key] = to_naive_utc(row[key])
        row["id"] = self._next_id(table)
        self._data[table].append(row)
        self._save()
        return dict(row)

    def _find(self, table: str, predicate: Callable[[Row], bool]) -> Optional[Row]:
        for row in self._data[table]:
            if predicate(row):
                return row
        return None

    def _get(self, table: str, row_id: int) -> Optional[Row]:
        row = self._find(table, lambda r: r["id"] == row_id)
        return dict(row) if row else None

    def _filter(self, table: str, predicate: Callable[[Row], bool]) -> List[Row]:
        return [dict(row) for row in self._data[table] if predicate(row)]

    def _remove(self, table: str, predicate: Callable[[Row], bool]) -> int:
        before = len(self._data[table])
        self._data[table] = [row for row in self._data[table] if not predicate(row)]
        removed = before - len(self._data[table])
        if removed:
            self._save()
        return removed

    @staticmethod
    def _page(rows: List[Row], limit: int, offset: int) -> Tuple[List[Row], int]:
        return rows[offset:offset + limit], len(rows)

    # -------- Users --------

    def create_user(self, data: Row) -> Row:
        if self._find("users", lambda u: u["username"] == data["username"]):
            raise ConflictError("The username is already registered.")
        return self._insert("users", data)

    def get_user(self, user_id: int) -> Optional[Row]:
        return self._get("users", user_id)

    def get_user_by_username(self, username: str) -> Optional[Row]:
        row = self._find("users", lambda u: u["username"] == username)
        return dict(row) if row else None

    # -------- Provinces / locations --------

    def create_province(self, data: Row) -> Row:
        return self._insert("provinces", data)

    def list_provinces(self) -> List[Row]:
        rows = self._filter("provinces", lambda p: True)
        return sorted(
            rows,
            key=lambda p: (p.get("display_order") is None, p.get("display_order") or 0, p["name"]),
        )

    def get_province(self, province_id: int) -> Optional[Row]:
        return self._get("provinces", province_id)

    def create_location(self, data: Row) -> Row:
        return self._insert("locations", data)

    def list_locations(self, province_id: Optional[int] = None) -> List[Row]:
        rows = self._filter(
            "locations",
            lambda loc: province_id is None or loc["id_province"] == province_id,
        )
        return sorted(rows, key=lambda loc: loc["name"])

    def get_location(self, location_id: int) -> Optional[Row]:
        return self._get("locations", location_id)

    # -------- Tags --------

    def create_tag(self, name: str) -> Row:
        if self._find("tags", lambda t: t["name"] == name):
            raise ConflictError(f"Tag '{name}' already exists.")
        return self._insert("tags", {"name": name})

    def list_tags(self) -> List[Row]:
        return sorted(self._filter("tags", lambda t: True), key=lambda t: t["name"])

    def list_event_tags(self, event_id: int) -> List[Row]:
        tag_ids = {link["id_tag"] for link in self._data["event_tags"] if link["id_event"] == event_id}
        return sorted(self._filter("tags", lambda t: t["id"] in tag_ids), key=lambda t: t["name"])

    def _set_event_tags(self, event_id: int, tag_ids: List[int]) -> None:
        self._data["event_tags"] = [
            link for link in self._data["event_tags"] if link["id_event"] != event_id
        ]
        for tag_id in dict.fromkeys(tag_ids):
            self._data["event_tags"].append(
                {"id": self._next_id("event_tags"), "id_event": event_id, "id_tag": tag_id}
            )

    # -------- Event locations --------

    def create_event_location(self, data: Row) -> Row:
        return self._insert("event_locations", data)

    def get_event_location(self, event_location_id: int) -> Optional[Row]:
        return self._get("event_locations", event_location_id)

    def list_event_locations(self, creator_user_id: int, limit: int, offset: int) -> Tuple[List[Row], int]:
        rows = self._filter("event_locations", lambda v: v["id_creator_user"] == creator_user_id)
        return self._page(sorted(rows, key=lambda v: v["id"]), limit, offset)

    def update_event_location(self, event_location_id: int, data: Row) -> Optional[Row]:
        venue = self._find("event_locations", lambda v: v["id"] == event_location_id)
        if not venue:
            return None
        venue.update(data)
        self._save()
        return dict(venue)

    def delete_event_location(self, event_location_id: int) -> bool:
        return self._remove("event_locations", lambda v: v["id"] == event_location_id) > 0

    def count_events_at_location(self, event_location_id: int) -> int:
        return len(self._filter("events", lambda e: e["id_event_location"] == event_location_id))

    def max_assistance_at_location(self, event_location_id: int) -> int:
        events = self._filter("events", lambda e: e["id_event_location"] == event_location_id)
        return max((e["max_assistance"] for e in events), default=0)

    # -------- Events --------

    def create_event(self, data: Row, tag_ids: List[int]) -> Row:
        event = self._insert("events", data)
        self._set_event_tags(event["id"], tag_ids)
        self._save()
        return event

    def get_event(self, event_id: int) -> Optional[Row]:
        return self._get("events", event_id)

    def _matches(self, event: Row, filters: EventFilters) -> bool:
        if filters.name and filters.name.lower() not in event["name"].lower():
            return False
        if filters.start_date:
            day_start = datetime.combine(filters.start_date, datetime.min.time())
            if not day_start <= event["start_date"] < day_start + timedelta(days=1):
                return False
        if filters.tag:
            names = {t["name"].lower() for t in self.list_event_tags(event["id"])}
            if filters.tag.lower() not in names:
                return False
        return True

    def list_events(self, filters: EventFilters, limit: int, offset: int) -> Tuple[List[Row], int]:
        rows = self._filter("events", lambda e: self._matches(e, filters))
        rows.sort(key=lambda e: (e["start_date"], e["id"]))
        return self._page(rows, limit, offset)

    def update_event(self, event_id: int, data: Row, tag_ids: Optional[List[int]] = None) -> Optional[Row]:
        event = self._find("events", lambda e: e["id"] == event_id)
        if not event:
            return None
        event.update(data)
        if isinstance(event.get("start_date"), datetime):
            event["start_date"] = to_naive_utc(event["start_date"])
        if tag_ids is not None:
            self._set_event_tags(event_id, tag_ids)
        self._save()
        return dict(event)

    def delete_event(self, event_id: int) -> bool:
        self._data["event_tags"] = [
            link for link in self._data["event_tags"] if link["id_event"] != event_id
        ]
        removed = self._remove("events", lambda e: e["id"] == event_id)
        self._save()
        return removed > 0

    # -------- Enrollments --------

    def create_enrollment(self, event_id: int, user_id: int) -> Row:
        if self.get_enrollment(event_id, user_id):
            raise ConflictError("The user is already enrolled in the event.")
        return self._insert("event_enrollments", {
            "id_event": event_id,
            "id_user": user_id,
            "description": None,
            "registration_date_time": datetime.utcnow(),
            "attended": False,
            "observations": None,
            "rating": None,
        })

    def get_enrollment(self, event_id: int, user_id: int) -> Optional[Row]:
        row = self._find(
            "event_enrollments",
            lambda e: e["id_event"] == event_id and e["id_user"] == user_id,
        )
        return dict(row) if row else None

    def delete_enrollment(self, event_id: int, user_id: int) -> bool:
        return self._remove(
            "event_enrollments",
            lambda e: e["id_event"] == event_id and e["id_user"] == user_id,
        ) > 0

    def count_enrollments(self, event_id: int) -> int:
        return len(self._filter("event_enrollments", lambda e: e["id_event"] == event_id))

    def list_enrollments(self, event_id: int, limit: int, offset: int) -> Tuple[List[Row], int]:
        rows = self._filter("event_enrollments", lambda e: e["id_event"] == event_id)
        rows.sort(key=lambda e: (e["registration_date_time"], e["id"]))
        return self._page(rows, limit, offset)

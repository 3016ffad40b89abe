"""
In-memory stand-in for the supabase-py query builder.

Implements the subset of the PostgREST fluent API the Supabase repository
uses: select/insert/update/delete, eq/in_/ilike/gte/lt filters, order, range,
limit and exact counts. Unique constraints mirror the SQL schema.
"""

import re
from typing import Any, Callable, Dict, List, Optional

from postgrest.exceptions import APIError

UNIQUE_KEYS = {
    "users": [("username",)],
    "tags": [("name",)],
    "event_tags": [("id_event", "id_tag")],
    "event_enrollments": [("id_event", "id_user")],
}


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]], count: Optional[int] = None):
        self.data = data
        self.count = count


def _like_to_regex(pattern: str) -> re.Pattern:
    # Backslash escapes the next character, as in Postgres LIKE
    parts = []
    escaped = False
    for ch in pattern:
        if escaped:
            parts.append(re.escape(ch))
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class FakeQuery:
    def __init__(self, store: "FakeSupabase", table: str):
        self.store = store
        self.table = table
        self.operation = "select"
        self.columns = "*"
        self.count_mode = None
        self.payload: Any = None
        self.filters: List[Callable[[Dict[str, Any]], bool]] = []
        self.orders: List[tuple] = []
        self.window: Optional[tuple] = None
        self.max_rows: Optional[int] = None

    # -------- Operations --------

    def select(self, columns: str = "*", count: Optional[str] = None):
        self.operation, self.columns, self.count_mode = "select", columns, count
        return self

    def insert(self, data):
        self.operation, self.payload = "insert", data
        return self

    def update(self, data):
        self.operation, self.payload = "update", data
        return self

    def delete(self):
        self.operation = "delete"
        return self

    # -------- Filters and modifiers --------

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def ilike(self, column, pattern):
        regex = _like_to_regex(pattern)
        self.filters.append(lambda row: row.get(column) is not None and regex.fullmatch(str(row[column])) is not None)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def lt(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] < value)
        return self

    def order(self, column, desc: bool = False):
        self.orders.append((column, desc))
        return self

    def range(self, start, end):
        self.window = (start, end)
        return self

    def limit(self, size):
        self.max_rows = size
        return self

    # -------- Execution --------

    def _matching(self) -> List[Dict[str, Any]]:
        return [row for row in self.store.tables[self.table] if all(f(row) for f in self.filters)]

    def _check_unique(self, candidate: Dict[str, Any]) -> None:
        for key in UNIQUE_KEYS.get(self.table, []):
            for row in self.store.tables[self.table]:
                if all(row.get(col) == candidate.get(col) for col in key):
                    raise APIError({
                        "message": f'duplicate key value violates unique constraint on "{self.table}"',
                        "code": "23505",
                        "hint": None,
                        "details": None,
                    })

    def execute(self) -> FakeResponse:
        rows = self.store.tables[self.table]
        if self.operation == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in items:
                self._check_unique(item)
                row = dict(item, id=self.store.next_id(self.table))
                rows.append(row)
                created.append(dict(row))
            return FakeResponse(created)

        matched = self._matching()
        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResponse([dict(row) for row in matched])
        if self.operation == "delete":
            self.store.tables[self.table] = [row for row in rows if row not in matched]
            return FakeResponse([dict(row) for row in matched])

        for column, desc in reversed(self.orders):
            matched.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        total = len(matched)
        if self.window:
            matched = matched[self.window[0]:self.window[1] + 1]
        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        if self.columns != "*":
            wanted = [c.strip() for c in self.columns.split(",")]
            matched = [{c: row.get(c) for c in wanted} for row in matched]
        else:
            matched = [dict(row) for row in matched]
        return FakeResponse(matched, total if self.count_mode == "exact" else None)


class FakeSupabase:
    """Mimics ``supabase.Client.table``"""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self._ids: Dict[str, int] = {}

    def next_id(self, table: str) -> int:
        self._ids[table] = self._ids.get(table, 0) + 1
        return self._ids[table]

    def table(self, name: str) -> FakeQuery:
        self.tables.setdefault(name, [])
        return FakeQuery(self, name)

"""
In-memory stand-in for the Supabase (PostgREST) query builder.

Supports the subset the repos use: select/insert/update/delete, eq, ilike,
gte, or_ (ilike clauses only), order, limit, and rpc().
"""

from __future__ import annotations

import copy
import re
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable


def _like_to_regex(pattern: str) -> re.Pattern:
    out = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.IGNORECASE | re.DOTALL)


def _ilike(value: Any, pattern: str) -> bool:
    return value is not None and _like_to_regex(pattern).fullmatch(str(value)) is not None


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload: Any = None
        self.filters: list[Callable[[dict], bool]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None

    # --- operations ---
    def select(self, columns: str = "*"):
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    # --- filters ---
    def eq(self, col, value):
        self.filters.append(lambda r: r.get(col) == value)
        return self

    def ilike(self, col, pattern):
        self.filters.append(lambda r: _ilike(r.get(col), pattern))
        return self

    def gte(self, col, value):
        self.filters.append(lambda r: r.get(col) is not None and r.get(col) >= value)
        return self

    def or_(self, expr: str):
        clauses = []
        for part in expr.split(","):
            col, op, pattern = part.split(".", 2)
            assert op == "ilike"
            clauses.append((col, pattern))
        self.filters.append(lambda r: any(_ilike(r.get(c), p) for c, p in clauses))
        return self

    def order(self, col, desc: bool = False):
        self._order = (col, desc)
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    # --- execution ---
    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self.filters)

    def execute(self):
        self.db.calls.append((self.table_name, self.op))
        if self.table_name in self.db.fail_tables:
            raise RuntimeError(f"{self.table_name} unavailable")

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in items:
                row = dict(item)
                row.setdefault("id", str(uuid.uuid4()))
                row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
                rows.append(row)
                created.append(copy.deepcopy(row))
            return SimpleNamespace(data=created)

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(copy.deepcopy(row))
            return SimpleNamespace(data=updated)

        if self.op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.db.tables[self.table_name] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed)

        out = [copy.deepcopy(r) for r in rows if self._matches(r)]
        if self._order:
            col, desc = self._order
            out.sort(key=lambda r: str(r.get(col) or ""), reverse=desc)
        if self._limit is not None:
            out = out[: self._limit]
        return SimpleNamespace(data=out)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db, self.name, self.params = db, name, params

    def execute(self):
        self.db.calls.append((self.name, "rpc"))
        handler = self.db.rpc_handlers.get(self.name)
        return SimpleNamespace(data=handler(self.params) if handler else [])


class FakeSupabase:
    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables: dict[str, list[dict]] = {k: [dict(r) for r in v] for k, v in (tables or {}).items()}
        self.fail_tables: set[str] = set()
        self.rpc_handlers: dict[str, Callable[[dict], list]] = {}
        self.calls: list[tuple[str, str]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        return FakeRpc(self, name, params)

    def rows(self, name: str) -> list[dict]:
        return self.tables.get(name, [])

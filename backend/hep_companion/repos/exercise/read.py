"""
exercise/read.py
- Purpose: Read-side operations for the exercise library.
- Design: Keep query logic here for reuse and testability.
"""

from collections import Counter
from datetime import datetime

from hep_companion.db.supabase import execute
from hep_companion.schemas.exercise import ExerciseFilters


class ExerciseReadRepo:
    def __init__(self, client):
        self.client = client

    def list_exercises(self, filters: ExerciseFilters | None = None) -> list[dict]:
        query = self.client.table("exercises").select("*").order("created_at", desc=True)

        if filters is not None:
            if filters.condition:
                query = query.eq("condition", filters.condition.value)
            if filters.year:
                query = query.eq("year", filters.year)
            if filters.journal:
                query = query.ilike("journal", f"%{filters.journal}%")
            if filters.search:
                term = filters.search
                query = query.or_(f"name.ilike.%{term}%,description.ilike.%{term}%")

        return execute(query, action="fetch exercises")

    def get_by_id(self, exercise_id: str) -> dict | None:
        rows = execute(
            self.client.table("exercises").select("*").eq("id", exercise_id).limit(1),
            action="fetch exercise",
        )
        return rows[0] if rows else None

    def count_by_condition(self) -> dict[str, int]:
        rows = execute(
            self.client.table("exercises").select("condition").order("condition"),
            action="fetch exercise counts",
        )
        return dict(Counter(r["condition"] for r in rows if r.get("condition")))

    def list_created_since(self, since: datetime, *, limit: int = 10) -> list[dict]:
        return execute(
            self.client.table("exercises")
            .select("*")
            .gte("created_at", since.isoformat())
            .order("created_at", desc=True)
            .limit(limit),
            action="fetch recent exercises",
        )

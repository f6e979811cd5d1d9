"""
exercise/write.py
- Purpose: Write-side operations for the exercise library.
- Design: No business logic. Only persistence and minimal mapping.
"""

from hep_companion.db.supabase import execute


class ExerciseWriteRepo:
    def __init__(self, client):
        self.client = client

    def create(self, values: dict) -> dict:
        rows = execute(self.client.table("exercises").insert(values), action="create exercise")
        return rows[0]

    def update(self, exercise_id: str, changes: dict) -> dict | None:
        rows = execute(
            self.client.table("exercises").update(changes).eq("id", exercise_id),
            action="update exercise",
        )
        return rows[0] if rows else None

    def delete(self, exercise_id: str) -> None:
        execute(self.client.table("exercises").delete().eq("id", exercise_id), action="delete exercise")

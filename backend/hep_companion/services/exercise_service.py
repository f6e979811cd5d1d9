"""
exercise_service.py
- Purpose: CRUD and browsing for the evidence-based exercise library.
"""

from datetime import datetime, timedelta, timezone

from hep_companion.core.errors import not_found
from hep_companion.repos.exercise.read import ExerciseReadRepo
from hep_companion.repos.exercise.write import ExerciseWriteRepo
from hep_companion.schemas.exercise import ExerciseCreate, ExerciseFilters, ExerciseUpdate

RECENT_WINDOW_DAYS = 30


class ExerciseService:
    def __init__(self, client):
        self.read = ExerciseReadRepo(client)
        self.write = ExerciseWriteRepo(client)

    def list_exercises(self, filters: ExerciseFilters) -> list[dict]:
        return self.read.list_exercises(filters)

    def counts_by_condition(self) -> dict[str, int]:
        return self.read.count_by_condition()

    def recent(self, limit: int = 10) -> list[dict]:
        since = datetime.now(timezone.utc) - timedelta(days=RECENT_WINDOW_DAYS)
        return self.read.list_created_since(since, limit=limit)

    def get(self, exercise_id: str) -> dict:
        exercise = self.read.get_by_id(exercise_id)
        if not exercise:
            raise not_found(message="Exercise not found")
        return exercise

    def create(self, payload: ExerciseCreate) -> dict:
        return self.write.create(payload.model_dump(mode="json"))

    def update(self, exercise_id: str, payload: ExerciseUpdate) -> dict:
        changes = payload.changes()
        if not changes:
            return self.get(exercise_id)

        updated = self.write.update(exercise_id, changes)
        if not updated:
            raise not_found(message="Exercise not found")
        return updated

    def delete(self, exercise_id: str) -> None:
        self.write.delete(exercise_id)

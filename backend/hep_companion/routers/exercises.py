"""
exercises.py
- Purpose: Browse and curate the evidence-based exercise library.
- Design: Reads are public to signed-in and anonymous clients alike; writes
  require a session.
"""

from fastapi import APIRouter, Depends, Query, status

from hep_companion.api.deps import get_exercise_service
from hep_companion.auth.deps import require_user
from hep_companion.constants.conditions import CONDITION_LABELS, ExerciseCondition
from hep_companion.schemas.exercise import ExerciseCreate, ExerciseFilters, ExerciseUpdate
from hep_companion.services.exercise_service import ExerciseService

router = APIRouter(prefix="/api/exercises", tags=["Exercises"])


def _parse_condition(value: str | None) -> ExerciseCondition | None:
    # Unknown conditions are ignored rather than rejected
    try:
        return ExerciseCondition(value) if value else None
    except ValueError:
        return None


@router.get("")
def list_exercises(
    condition: str | None = None,
    year: int | None = None,
    journal: str | None = None,
    search: str | None = None,
    counts: bool = False,
    svc: ExerciseService = Depends(get_exercise_service),
):
    if counts:
        return {
            "counts": svc.counts_by_condition(),
            "labels": {c.value: label for c, label in CONDITION_LABELS.items()},
        }

    filters = ExerciseFilters(
        condition=_parse_condition(condition),
        year=year,
        journal=journal or None,
        search=search or None,
    )
    exercises = svc.list_exercises(filters)
    return {
        "exercises": exercises,
        "total": len(exercises),
        "filters": filters.model_dump(mode="json", exclude_none=True),
    }


@router.get("/recent")
def recent_exercises(
    limit: int = Query(10, ge=1, le=100),
    svc: ExerciseService = Depends(get_exercise_service),
):
    return {"exercises": svc.recent(limit)}


@router.get("/{exercise_id}")
def get_exercise(exercise_id: str, svc: ExerciseService = Depends(get_exercise_service)):
    return {"exercise": svc.get(exercise_id)}


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_user)])
def create_exercise(payload: ExerciseCreate, svc: ExerciseService = Depends(get_exercise_service)):
    return {"exercise": svc.create(payload), "message": "Exercise created successfully"}


@router.put("/{exercise_id}", dependencies=[Depends(require_user)])
def update_exercise(
    exercise_id: str,
    payload: ExerciseUpdate,
    svc: ExerciseService = Depends(get_exercise_service),
):
    return {"exercise": svc.update(exercise_id, payload), "message": "Exercise updated successfully"}


@router.delete("/{exercise_id}", dependencies=[Depends(require_user)])
def delete_exercise(exercise_id: str, svc: ExerciseService = Depends(get_exercise_service)):
    svc.delete(exercise_id)
    return {"message": "Exercise deleted successfully"}

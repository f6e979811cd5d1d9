"""
exercise.py (schemas)
- Purpose: DTOs for the evidence-based exercise library.
"""

from typing import Optional

from pydantic import BaseModel, Field

from hep_companion.constants.conditions import ExerciseCondition

MIN_PUBLICATION_YEAR = 1950


class ExerciseCreate(BaseModel):
    condition: ExerciseCondition
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    journal: str = Field(min_length=1, max_length=200)
    year: int = Field(ge=MIN_PUBLICATION_YEAR)
    doi: Optional[str] = None


class ExerciseUpdate(BaseModel):
    condition: Optional[ExerciseCondition] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    journal: Optional[str] = Field(default=None, min_length=1, max_length=200)
    year: Optional[int] = Field(default=None, ge=MIN_PUBLICATION_YEAR)
    doi: Optional[str] = None

    def changes(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(mode="json", exclude_unset=True)


class ExerciseFilters(BaseModel):
    condition: Optional[ExerciseCondition] = None
    year: Optional[int] = None
    journal: Optional[str] = None
    search: Optional[str] = None

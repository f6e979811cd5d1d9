"""
generation_schema.py (schemas)
- Purpose: DTOs for the generate flow and the shape we require from the model.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from hep_companion.validations.clinical_validators import validate_clinical_input


class GenerateRequest(BaseModel):
    prompt: str = Field(
        min_length=20,
        max_length=1000,
        description="Free-text clinical scenario",
    )
    mrn: Optional[str] = None
    clinic_id: Optional[str] = None

    @field_validator("prompt")
    @classmethod
    def _clinical_detail(cls, v: str) -> str:
        result = validate_clinical_input(v)
        if not result.is_valid:
            raise ValueError(result.error)
        return v


class ProgramExercise(BaseModel):
    name: str = Field(min_length=1)
    sets: int = Field(gt=0)
    reps: str = Field(min_length=1)  # string so ranges like "8-12" survive
    notes: Optional[str] = None
    evidence_source: str = Field(min_length=1)


class GeneratedProgram(BaseModel):
    exercises: List[ProgramExercise] = Field(min_length=1, max_length=10)
    clinical_notes: str = Field(min_length=1)
    citations: List[str] = Field(min_length=1)
    confidence_level: Optional[Literal["high", "medium", "low"]] = None


class SuggestedExercise(ProgramExercise):
    id: str


class GenerateResponse(BaseModel):
    id: str
    exercises: List[SuggestedExercise]
    clinical_notes: str
    citations: List[str]
    confidence_level: Optional[Literal["high", "medium", "low"]] = None

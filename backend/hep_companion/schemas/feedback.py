"""
feedback.py (schemas)
- Purpose: Clinician rating of a generated suggestion.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class FeedbackCreate(BaseModel):
    prompt_id: UUID
    suggestion_id: str = Field(min_length=1)
    relevance_score: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class FeedbackOut(BaseModel):
    id: str
    prompt_id: str
    suggestion_id: str
    relevance_score: int

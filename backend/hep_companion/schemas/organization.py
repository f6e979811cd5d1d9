"""
organization.py (schemas)
- Purpose: DTOs for clinic/organization selection during onboarding.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class OrganizationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    clinic_id: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("clinic_id", mode="before")
    @classmethod
    def _strip_clinic_id(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class OrganizationOut(BaseModel):
    id: str
    name: str
    clinic_id: Optional[str] = None
    created: bool

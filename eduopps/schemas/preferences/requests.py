from typing import List, Optional

from pydantic import BaseModel, field_validator

from .base import StudentPreferencesBase


class StudentPreferencesSet(StudentPreferencesBase):
    """Full replacement of a user's saved preferences"""


class StudentPreferencesUpdate(BaseModel):
    """Partial update; categories left out keep their saved values"""
    industries: Optional[List[str]] = None
    age_groups: Optional[List[str]] = None
    opportunity_types: Optional[List[str]] = None
    locations: Optional[List[str]] = None

    @field_validator("industries", "age_groups", "opportunity_types", "locations", mode="before")
    @classmethod
    def drop_blank_values(cls, v):
        if isinstance(v, list):
            return [item.strip() for item in v if isinstance(item, str) and item.strip()]
        return v

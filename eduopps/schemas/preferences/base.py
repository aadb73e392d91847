from typing import List

from pydantic import BaseModel, Field, field_validator


class StudentPreferencesBase(BaseModel):
    industries: List[str] = Field(default_factory=list)
    age_groups: List[str] = Field(default_factory=list)
    opportunity_types: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)

    @field_validator("industries", "age_groups", "opportunity_types", "locations", mode="before")
    @classmethod
    def drop_blank_values(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return [item.strip() for item in v if isinstance(item, str) and item.strip()]
        return v

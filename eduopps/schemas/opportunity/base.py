from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

OPTIONAL_TEXT_FIELDS = (
    "details",
    "requirements",
    "application_process",
    "image_url",
    "compensation",
    "ethnicity_focus",
    "gender_focus",
    "contact_person",
    "contact_email",
    "external_url",
)


class OpportunityBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    organization: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    details: Optional[str] = None
    requirements: Optional[str] = None
    application_process: Optional[str] = None
    image_url: Optional[str] = None
    location: str = Field(..., min_length=1, max_length=255)
    is_virtual: bool = False
    opportunity_type: str = Field(..., min_length=1, max_length=100)
    compensation: Optional[str] = None
    industry: str = Field(..., min_length=1, max_length=100)
    age_groups: List[str] = Field(default_factory=list)
    ethnicity_focus: Optional[str] = None
    gender_focus: Optional[str] = None
    contact_person: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    external_url: Optional[str] = None
    number_of_spaces: Optional[int] = Field(None, ge=0, description="NULL means unlimited")

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, v):
        # Forms send "" for cleared optional inputs
        if isinstance(v, str) and not v.strip():
            return None
        return v

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from eduopps.core.clock import as_utc
from .base import OPTIONAL_TEXT_FIELDS, OpportunityBase

REQUIRED_FIELDS = (
    "title",
    "organization",
    "description",
    "location",
    "opportunity_type",
    "industry",
    "start_date",
    "end_date",
    "application_deadline",
    "is_virtual",
    "is_global",
    "age_groups",
    "visible_to_schools",
)


class OpportunityCreate(OpportunityBase):
    start_date: datetime
    end_date: datetime
    application_deadline: datetime

    # Trusted only for platform-wide editors; overwritten otherwise
    school_id: Optional[int] = None
    is_global: bool = False
    visible_to_schools: List[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dates(self):
        if as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not be before start_date")
        return self


class OpportunityUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    organization: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    details: Optional[str] = None
    requirements: Optional[str] = None
    application_process: Optional[str] = None
    image_url: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    application_deadline: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    is_virtual: Optional[bool] = None
    opportunity_type: Optional[str] = Field(None, min_length=1, max_length=100)
    compensation: Optional[str] = None
    industry: Optional[str] = Field(None, min_length=1, max_length=100)
    age_groups: Optional[List[str]] = None
    ethnicity_focus: Optional[str] = None
    gender_focus: Optional[str] = None
    contact_person: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    external_url: Optional[str] = None
    number_of_spaces: Optional[int] = Field(None, ge=0)
    school_id: Optional[int] = None
    is_global: Optional[bool] = None
    visible_to_schools: Optional[List[int]] = None

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def reject_null_required(self):
        for field in REQUIRED_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class OpportunitySearchParams(BaseModel):
    query: Optional[str] = None
    industry: Optional[str] = None
    age_groups: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    ethnicity_focus: Optional[str] = None
    gender_focus: Optional[str] = None
    is_virtual: Optional[bool] = None
    created_by_id: Optional[int] = None

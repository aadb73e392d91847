# schemas/opportunity/responses.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from eduopps.core.clock import Clock, days_until_deadline, is_deadline_passed
from .base import OpportunityBase


class OpportunityResponse(OpportunityBase):
    id: int
    start_date: datetime
    end_date: datetime
    application_deadline: datetime
    school_id: Optional[int] = None
    created_by_id: Optional[int] = None
    is_global: bool = False
    visible_to_schools: List[int] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    # Derived, display only
    registered_count: int = 0
    spaces_left: Optional[int] = Field(None, description="NULL means unlimited")
    deadline_passed: bool = False
    days_until_deadline: Optional[int] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_opportunity(
        cls,
        opportunity,
        registered_count: int = 0,
        clock: Optional[Clock] = None
    ) -> "OpportunityResponse":
        from eduopps.services.registration_service import compute_spaces_left

        response = cls.model_validate(opportunity)
        return response.model_copy(update={
            "registered_count": registered_count,
            "spaces_left": compute_spaces_left(opportunity.number_of_spaces, registered_count),
            "deadline_passed": is_deadline_passed(opportunity, clock),
            "days_until_deadline": days_until_deadline(opportunity, clock),
        })

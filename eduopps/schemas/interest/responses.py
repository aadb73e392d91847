from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class StudentInterestResponse(BaseModel):
    id: int
    student_id: int
    opportunity_id: int
    registration_date: datetime
    status: str
    notes: Optional[str] = None

    class Config:
        from_attributes = True

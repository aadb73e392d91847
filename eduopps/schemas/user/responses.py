from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserSummaryResponse(BaseModel):
    id: int
    email: str
    username: str
    first_name: str
    last_name: str
    school_id: Optional[int] = None

    class Config:
        from_attributes = True


class AttendeeResponse(UserSummaryResponse):
    registration_date: datetime
    status: str

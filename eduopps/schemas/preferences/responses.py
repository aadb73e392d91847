from datetime import datetime
from typing import Optional

from .base import StudentPreferencesBase


class StudentPreferencesResponse(StudentPreferencesBase):
    user_id: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

from .context import UserContext
from .responses import AttendeeResponse, UserSummaryResponse

__all__ = [
    "UserContext",
    "AttendeeResponse",
    "UserSummaryResponse"
]

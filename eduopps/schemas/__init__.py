from .common import ErrorResponse, MessageResponse
from .interest import InterestCreate, StudentInterestResponse
from .opportunity import (
    OpportunityCreate,
    OpportunityResponse,
    OpportunitySearchParams,
    OpportunityUpdate,
)
from .preferences import (
    StudentPreferencesResponse,
    StudentPreferencesSet,
    StudentPreferencesUpdate,
)
from .user import AttendeeResponse, UserContext, UserSummaryResponse

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "InterestCreate",
    "StudentInterestResponse",
    "OpportunityCreate",
    "OpportunityResponse",
    "OpportunitySearchParams",
    "OpportunityUpdate",
    "StudentPreferencesResponse",
    "StudentPreferencesSet",
    "StudentPreferencesUpdate",
    "AttendeeResponse",
    "UserContext",
    "UserSummaryResponse"
]

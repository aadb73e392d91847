from .base import OpportunityBase
from .requests import OpportunityCreate, OpportunitySearchParams, OpportunityUpdate
from .responses import OpportunityResponse

__all__ = [
    "OpportunityBase",
    "OpportunityCreate",
    "OpportunityUpdate",
    "OpportunitySearchParams",
    "OpportunityResponse"
]

from .authorization import (
    MutationAction,
    can_create,
    can_mutate,
    can_view_attendees,
    ensure_can_create,
    ensure_can_mutate,
    sanitize_opportunity_payload,
)
from .opportunity_service import OpportunityService
from .preference_service import PreferenceService
from .preferences import apply_preferences
from .registration_service import RegistrationService, compute_spaces_left
from .visibility import filter_visible, is_visible

__all__ = [
    "MutationAction",
    "can_create",
    "can_mutate",
    "can_view_attendees",
    "ensure_can_create",
    "ensure_can_mutate",
    "sanitize_opportunity_payload",
    "OpportunityService",
    "PreferenceService",
    "apply_preferences",
    "RegistrationService",
    "compute_spaces_left",
    "filter_visible",
    "is_visible"
]

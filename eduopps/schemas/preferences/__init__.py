from .base import StudentPreferencesBase
from .requests import StudentPreferencesSet, StudentPreferencesUpdate
from .responses import StudentPreferencesResponse

__all__ = [
    "StudentPreferencesBase",
    "StudentPreferencesSet",
    "StudentPreferencesUpdate",
    "StudentPreferencesResponse"
]

# eduopps/routes/preferences.py
from fastapi import APIRouter, Depends, status

from eduopps.core.dependencies import get_current_active_user, get_preference_service
from eduopps.schemas import (
    StudentPreferencesResponse,
    StudentPreferencesSet,
    StudentPreferencesUpdate,
    UserContext,
)
from eduopps.services import PreferenceService
from .common import ERROR_RESPONSES

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("", response_model=StudentPreferencesResponse)
async def get_preferences(
    current_user: UserContext = Depends(get_current_active_user),
    preference_service: PreferenceService = Depends(get_preference_service)
):
    return await preference_service.get_preferences_response(current_user.id)


@router.post("", response_model=StudentPreferencesResponse, status_code=status.HTTP_201_CREATED)
async def set_preferences(
    request: StudentPreferencesSet,
    current_user: UserContext = Depends(get_current_active_user),
    preference_service: PreferenceService = Depends(get_preference_service)
):
    return await preference_service.set_preferences(current_user.id, request)


@router.put("", response_model=StudentPreferencesResponse)
async def update_preferences(
    request: StudentPreferencesUpdate,
    current_user: UserContext = Depends(get_current_active_user),
    preference_service: PreferenceService = Depends(get_preference_service)
):
    return await preference_service.update_preferences(current_user.id, request)

# eduopps/routes/interests.py
from typing import Dict, List

from fastapi import APIRouter, Depends, status

from eduopps.core.dependencies import (
    get_current_active_user,
    get_opportunity_service,
    get_registration_service,
)
from eduopps.schemas import (
    AttendeeResponse,
    ErrorResponse,
    InterestCreate,
    MessageResponse,
    StudentInterestResponse,
    UserContext,
)
from eduopps.services import OpportunityService, RegistrationService
from .common import ERROR_RESPONSES

router = APIRouter(responses=ERROR_RESPONSES)


@router.post(
    "",
    response_model=StudentInterestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "No spaces left"}}
)
async def register_interest(
    request: InterestCreate,
    current_user: UserContext = Depends(get_current_active_user),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    """Register for an opportunity. Registering twice returns the existing registration."""
    return await registration_service.register(current_user, request.opportunity_id)


@router.delete("/{opportunity_id}", response_model=MessageResponse)
async def unregister_interest(
    opportunity_id: int,
    current_user: UserContext = Depends(get_current_active_user),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    await registration_service.unregister(current_user.id, opportunity_id)
    return MessageResponse(message="Registration removed")


@router.get("/student", response_model=List[StudentInterestResponse])
async def my_interests(
    current_user: UserContext = Depends(get_current_active_user),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    return await registration_service.interests_for_student(current_user.id)


@router.get("/opportunity/{opportunity_id}", response_model=List[AttendeeResponse])
async def opportunity_attendees(
    opportunity_id: int,
    current_user: UserContext = Depends(get_current_active_user),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    return await registration_service.attendees(current_user, opportunity_id)


@router.get("/counts", response_model=Dict[int, int])
async def interest_counts(
    current_user: UserContext = Depends(get_current_active_user),
    opportunity_service: OpportunityService = Depends(get_opportunity_service),
    registration_service: RegistrationService = Depends(get_registration_service)
):
    """Registration counts for the opportunities the user can see"""
    opportunities = await opportunity_service.visible_opportunities(current_user)
    return await registration_service.interest_counts([o.id for o in opportunities])

# eduopps/routes/opportunities.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from eduopps.core.clock import Clock
from eduopps.core.dependencies import (
    get_clock,
    get_current_active_user,
    get_opportunity_service,
    get_registration_service,
    require_capability,
)
from eduopps.core.permissions import Capability
from eduopps.schemas import (
    MessageResponse,
    OpportunityCreate,
    OpportunityResponse,
    OpportunitySearchParams,
    OpportunityUpdate,
    UserContext,
)
from eduopps.services import OpportunityService, RegistrationService
from .common import ERROR_RESPONSES

router = APIRouter(responses=ERROR_RESPONSES)

can_view = require_capability(Capability.VIEW_OPPORTUNITIES)
can_create = require_capability(Capability.CREATE_OPPORTUNITIES)


async def _with_counts(
    opportunities,
    registration_service: RegistrationService,
    clock: Clock
) -> List[OpportunityResponse]:
    counts = await registration_service.interest_counts([o.id for o in opportunities])
    return [
        OpportunityResponse.from_opportunity(o, counts.get(o.id, 0), clock)
        for o in opportunities
    ]


@router.get("", response_model=List[OpportunityResponse])
async def list_opportunities(
    current_user: UserContext = Depends(can_view),
    opportunity_service: OpportunityService = Depends(get_opportunity_service),
    registration_service: RegistrationService = Depends(get_registration_service),
    clock: Clock = Depends(get_clock)
):
    """
    Opportunities for the current user's dashboard.
    Students see their school's listing narrowed by saved preferences.
    """
    opportunities = await opportunity_service.opportunities_for_user(current_user)
    return await _with_counts(opportunities, registration_service, clock)


@router.get("/search", response_model=List[OpportunityResponse])
async def search_opportunities(
    query: Optional[str] = Query(None, description="Matches title, description or organization"),
    industry: Optional[str] = Query(None),
    age_groups: Optional[List[str]] = Query(None, alias="age_group"),
    location: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, description="Starting on or after"),
    end_date: Optional[datetime] = Query(None, description="Ending on or before"),
    ethnicity_focus: Optional[str] = Query(None),
    gender_focus: Optional[str] = Query(None),
    is_virtual: Optional[bool] = Query(None),
    created_by_id: Optional[int] = Query(None, description="Only posts by this user"),
    current_user: UserContext = Depends(can_view),
    opportunity_service: OpportunityService = Depends(get_opportunity_service),
    registration_service: RegistrationService = Depends(get_registration_service),
    clock: Clock = Depends(get_clock)
):
    params = OpportunitySearchParams(
        query=query,
        industry=industry,
        age_groups=age_groups or [],
        location=location,
        start_date=start_date,
        end_date=end_date,
        ethnicity_focus=ethnicity_focus,
        gender_focus=gender_focus,
        is_virtual=is_virtual,
        created_by_id=created_by_id
    )
    opportunities = await opportunity_service.search(current_user, params)
    return await _with_counts(opportunities, registration_service, clock)


@router.get("/with-registered-students", response_model=List[OpportunityResponse])
async def list_opportunities_with_registrations(
    current_user: UserContext = Depends(can_view),
    opportunity_service: OpportunityService = Depends(get_opportunity_service),
    registration_service: RegistrationService = Depends(get_registration_service),
    clock: Clock = Depends(get_clock)
):
    """Visible opportunities with at least one registered student"""
    opportunities = await opportunity_service.opportunities_with_registrations(current_user)
    return await _with_counts(opportunities, registration_service, clock)


@router.get("/{opportunity_id}", response_model=OpportunityResponse)
async def get_opportunity(
    opportunity_id: int,
    current_user: UserContext = Depends(can_view),
    opportunity_service: OpportunityService = Depends(get_opportunity_service),
    registration_service: RegistrationService = Depends(get_registration_service),
    clock: Clock = Depends(get_clock)
):
    opportunity = await opportunity_service.get_visible_opportunity(current_user, opportunity_id)
    count = await registration_service.registered_count(opportunity.id)
    return OpportunityResponse.from_opportunity(opportunity, count, clock)


@router.post("", response_model=OpportunityResponse, status_code=status.HTTP_201_CREATED)
async def create_opportunity(
    request: OpportunityCreate,
    current_user: UserContext = Depends(can_create),
    opportunity_service: OpportunityService = Depends(get_opportunity_service),
    clock: Clock = Depends(get_clock)
):
    opportunity = await opportunity_service.create_opportunity(current_user, request)
    return OpportunityResponse.from_opportunity(opportunity, 0, clock)


@router.put("/{opportunity_id}", response_model=OpportunityResponse)
async def update_opportunity(
    opportunity_id: int,
    request: OpportunityUpdate,
    current_user: UserContext = Depends(get_current_active_user),
    opportunity_service: OpportunityService = Depends(get_opportunity_service),
    registration_service: RegistrationService = Depends(get_registration_service),
    clock: Clock = Depends(get_clock)
):
    opportunity = await opportunity_service.update_opportunity(current_user, opportunity_id, request)
    count = await registration_service.registered_count(opportunity.id)
    return OpportunityResponse.from_opportunity(opportunity, count, clock)


@router.delete("/{opportunity_id}", response_model=MessageResponse)
async def delete_opportunity(
    opportunity_id: int,
    current_user: UserContext = Depends(get_current_active_user),
    opportunity_service: OpportunityService = Depends(get_opportunity_service)
):
    await opportunity_service.delete_opportunity(current_user, opportunity_id)
    return MessageResponse(message="Opportunity deleted")

# eduopps/services/opportunity_service.py
import logging
from typing import Any, Dict, List

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError

from eduopps.core.clock import as_utc
from eduopps.core.errors import NotFoundError, PermissionDenied, TransientFailure, ValidationError
from eduopps.core.permissions import Capability
from eduopps.models import Opportunity, StudentInterest
from eduopps.schemas.opportunity import OpportunityCreate, OpportunitySearchParams, OpportunityUpdate
from eduopps.schemas.user import UserContext
from .authorization import (
    MutationAction,
    ensure_can_create,
    ensure_can_mutate,
    sanitize_opportunity_payload,
)
from .base_service import BaseService
from .preference_service import PreferenceService
from .preferences import apply_preferences, has_active_preferences
from .visibility import filter_visible, is_visible

logger = logging.getLogger(__name__)


class OpportunityService(BaseService):
    """Listing policy, search and authorized CRUD for opportunities"""

    def _ordered(self):
        return select(Opportunity).order_by(Opportunity.created_at.desc(), Opportunity.id.desc())

    async def get_opportunity(self, opportunity_id: int) -> Opportunity:
        opportunity = await self.db.get(Opportunity, opportunity_id)
        if opportunity is None:
            raise NotFoundError(f"Opportunity {opportunity_id} not found")
        return opportunity

    async def get_visible_opportunity(self, user: UserContext, opportunity_id: int) -> Opportunity:
        opportunity = await self.get_opportunity(opportunity_id)
        if not user.can(Capability.EDIT_ALL_OPPORTUNITIES) and not is_visible(user, opportunity):
            raise PermissionDenied("This opportunity is not available to your school")
        return opportunity

    async def visible_opportunities(self, user: UserContext) -> List[Opportunity]:
        """Every opportunity the user may see, newest first, before any preference filtering"""
        result = await self.db.execute(self._ordered())
        universe = list(result.scalars().all())
        if user.can(Capability.EDIT_ALL_OPPORTUNITIES):
            return universe
        return filter_visible(user, universe)

    async def opportunities_with_registrations(self, user: UserContext) -> List[Opportunity]:
        """Visible opportunities that have at least one registered student, newest first"""
        registered = select(StudentInterest.opportunity_id)
        result = await self.db.execute(self._ordered().where(Opportunity.id.in_(registered)))
        opportunities = list(result.scalars().all())
        if user.can(Capability.EDIT_ALL_OPPORTUNITIES):
            return opportunities
        return filter_visible(user, opportunities)

    async def opportunities_for_user(self, user: UserContext) -> List[Opportunity]:
        """
        The listing a user sees on their dashboard.

        Platform editors get every opportunity. Staff who create or curate
        opportunities get exactly the visible set. Everyone else gets the
        visible set narrowed by their saved preferences, when they have any.
        Newest first.
        """
        visible = await self.visible_opportunities(user)
        if user.can(Capability.EDIT_ALL_OPPORTUNITIES):
            return visible

        if user.can(Capability.EDIT_SCHOOL_OPPORTUNITIES) or user.can(Capability.CREATE_OPPORTUNITIES):
            return visible

        preferences = await PreferenceService(self.db).get_preferences(user.id)
        if not has_active_preferences(preferences):
            return visible
        return apply_preferences(preferences, visible)

    async def search(self, user: UserContext, params: OpportunitySearchParams) -> List[Opportunity]:
        """Free-text and field search over the opportunities the user may see"""
        query = self._ordered()

        if params.query:
            pattern = f"%{params.query}%"
            query = query.where(or_(
                Opportunity.title.ilike(pattern),
                Opportunity.description.ilike(pattern),
                Opportunity.organization.ilike(pattern)
            ))
        if params.industry:
            query = query.where(Opportunity.industry == params.industry)
        if params.location:
            query = query.where(Opportunity.location.ilike(f"%{params.location}%"))
        if params.start_date:
            query = query.where(Opportunity.start_date >= params.start_date)
        if params.end_date:
            query = query.where(Opportunity.end_date <= params.end_date)
        if params.ethnicity_focus:
            query = query.where(Opportunity.ethnicity_focus == params.ethnicity_focus)
        if params.gender_focus:
            query = query.where(Opportunity.gender_focus == params.gender_focus)
        if params.is_virtual is not None:
            query = query.where(Opportunity.is_virtual == params.is_virtual)
        if params.created_by_id is not None:
            query = query.where(Opportunity.created_by_id == params.created_by_id)

        result = await self.db.execute(query)
        opportunities = list(result.scalars().all())

        # age_groups is a JSON list; matched in Python for portability
        if params.age_groups:
            wanted = set(params.age_groups)
            opportunities = [
                opportunity for opportunity in opportunities
                if not wanted.isdisjoint(opportunity.age_groups or ())
            ]

        if user.can(Capability.EDIT_ALL_OPPORTUNITIES):
            return opportunities
        return filter_visible(user, opportunities)

    async def create_opportunity(self, user: UserContext, request: OpportunityCreate) -> Opportunity:
        ensure_can_create(user)

        data = sanitize_opportunity_payload(user, request.model_dump(), creating=True)
        if data.get("school_id") is None and not data.get("is_global"):
            # Platform editors without a school must either pick one or post globally
            if user.school_id is None:
                raise ValidationError("A school_id is required for opportunities that are not global")
            data["school_id"] = user.school_id

        opportunity = Opportunity(**data)
        self.db.add(opportunity)
        await self._commit("create opportunity")
        await self.db.refresh(opportunity)

        logger.info(
            f"Opportunity {opportunity.id} created by user {user.id}",
            extra={"user_id": user.id, "opportunity_id": opportunity.id, "school_id": opportunity.school_id}
        )
        return opportunity

    async def update_opportunity(
        self,
        user: UserContext,
        opportunity_id: int,
        request: OpportunityUpdate
    ) -> Opportunity:
        opportunity = await self.get_opportunity(opportunity_id)
        ensure_can_mutate(user, opportunity, MutationAction.EDIT)

        data = sanitize_opportunity_payload(user, request.model_dump(exclude_unset=True), creating=False)
        self._check_dates(opportunity, data)
        if "is_global" in data or "school_id" in data:
            is_global = data.get("is_global", opportunity.is_global)
            school_id = data.get("school_id", opportunity.school_id)
            if not is_global and school_id is None:
                raise ValidationError("A school_id is required for opportunities that are not global")

        for field, value in data.items():
            setattr(opportunity, field, value)

        await self._commit("update opportunity")
        await self.db.refresh(opportunity)

        logger.info(
            f"Opportunity {opportunity.id} updated by user {user.id}",
            extra={"user_id": user.id, "opportunity_id": opportunity.id}
        )
        return opportunity

    async def delete_opportunity(self, user: UserContext, opportunity_id: int) -> None:
        opportunity = await self.get_opportunity(opportunity_id)
        ensure_can_mutate(user, opportunity, MutationAction.DELETE)

        await self.db.delete(opportunity)
        await self._commit("delete opportunity")
        logger.info(
            f"Opportunity {opportunity_id} deleted by user {user.id}",
            extra={"user_id": user.id, "opportunity_id": opportunity_id}
        )

    @staticmethod
    def _check_dates(opportunity: Opportunity, data: Dict[str, Any]) -> None:
        start_date = data.get("start_date", opportunity.start_date)
        end_date = data.get("end_date", opportunity.end_date)
        if start_date is not None and end_date is not None:
            if as_utc(end_date) < as_utc(start_date):
                raise ValidationError("end_date must not be before start_date")

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to {action}", exc_info=True)
            raise TransientFailure(f"Failed to {action}, please retry") from e

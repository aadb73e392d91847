# eduopps/services/preference_service.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from tenacity import retry, retry_if_exception_type, stop_after_attempt

from eduopps.core.errors import TransientFailure
from eduopps.models import StudentPreferences
from eduopps.schemas.preferences import (
    StudentPreferencesResponse,
    StudentPreferencesSet,
    StudentPreferencesUpdate,
)
from .base_service import BaseService

logger = logging.getLogger(__name__)

CATEGORIES = ("industries", "age_groups", "opportunity_types", "locations")


class PreferenceService(BaseService):
    async def get_preferences(self, user_id: int) -> Optional[StudentPreferences]:
        result = await self.db.execute(
            select(StudentPreferences).where(StudentPreferences.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_preferences_response(self, user_id: int) -> StudentPreferencesResponse:
        """Saved preferences, or an empty set when the user has none yet"""
        preferences = await self.get_preferences(user_id)
        if preferences is None:
            return StudentPreferencesResponse(user_id=user_id)
        return StudentPreferencesResponse.model_validate(preferences)

    async def set_preferences(self, user_id: int, request: StudentPreferencesSet) -> StudentPreferences:
        """Replace every category"""
        return await self._upsert(user_id, request.model_dump(include=set(CATEGORIES)))

    async def update_preferences(self, user_id: int, request: StudentPreferencesUpdate) -> StudentPreferences:
        """Replace only the categories present in the request"""
        changes = {
            field: value
            for field, value in request.model_dump(exclude_unset=True).items()
            if value is not None
        }
        return await self._upsert(user_id, changes)

    async def _upsert(self, user_id: int, changes: Dict[str, Any]) -> StudentPreferences:
        try:
            preferences = await self._apply(user_id, changes)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to save preferences for user {user_id}", exc_info=True)
            raise TransientFailure("Failed to save preferences, please retry") from e

        logger.info(f"Preferences saved for user {user_id}", extra={"user_id": user_id})
        return preferences

    # A concurrent first save may win the insert; the retry applies on top of its row
    @retry(stop=stop_after_attempt(2), retry=retry_if_exception_type(IntegrityError), reraise=True)
    async def _apply(self, user_id: int, changes: Dict[str, Any]) -> StudentPreferences:
        preferences = await self.get_preferences(user_id)
        if preferences is None:
            preferences = StudentPreferences(user_id=user_id, **{field: [] for field in CATEGORIES})
            self.db.add(preferences)

        for field, value in changes.items():
            setattr(preferences, field, list(value))

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise
        await self.db.refresh(preferences)
        return preferences

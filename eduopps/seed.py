# eduopps/seed.py
import logging
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eduopps.core.logging import log_function_call
from eduopps.core.permissions import SEED_ROLES
from eduopps.models import UserRole

logger = logging.getLogger(__name__)


@log_function_call(logger)
async def seed_roles(db: AsyncSession) -> Dict[str, UserRole]:
    """Create the built-in roles, or bring existing rows back in line with their seeded flags"""
    result = await db.execute(select(UserRole))
    existing = {role.name: role for role in result.scalars().all()}

    roles = {}
    for name, seed in SEED_ROLES.items():
        role = existing.get(name)
        if role is None:
            role = UserRole(name=name)
            db.add(role)
            logger.info(f"Seeding role '{name}'")

        role.description = seed.description
        role.requires_school = seed.requires_school
        for field, value in seed.capabilities.model_dump().items():
            setattr(role, field, value)
        roles[name] = role

    await db.commit()
    return roles

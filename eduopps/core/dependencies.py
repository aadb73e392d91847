# eduopps/core/dependencies.py
from typing import Callable, Optional, Union

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from eduopps.core.clock import Clock
from eduopps.core.database import get_db
from eduopps.core.errors import AuthenticationError, PermissionDenied
from eduopps.core.permissions import Capability
from eduopps.core.security import decode_access_token
from eduopps.models import User
from eduopps.schemas.user import UserContext
from eduopps.services import OpportunityService, PreferenceService, RegistrationService

_clock = Clock()


def get_clock() -> Clock:
    return _clock


# Service providers
async def get_opportunity_service(db: AsyncSession = Depends(get_db)) -> OpportunityService:
    return OpportunityService(db)


async def get_registration_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock)
) -> RegistrationService:
    return RegistrationService(db, clock)


async def get_preference_service(db: AsyncSession = Depends(get_db)) -> PreferenceService:
    return PreferenceService(db)


def _extract_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if auth_header:
        scheme, _, credentials = auth_header.partition(" ")
        if scheme.lower() != "bearer" or not credentials:
            raise AuthenticationError("Malformed Authorization header")
        return credentials.strip()

    cookie = request.cookies.get("access_token")
    if cookie:
        cookie = cookie.strip('"')
        return cookie[len("Bearer "):] if cookie.startswith("Bearer ") else cookie
    return None


# User authentication and authorization
async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> UserContext:
    token = _extract_token(request)
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(token)
    user = await db.get(User, int(payload["sub"]))
    if user is None:
        raise AuthenticationError("Invalid token - user not found")

    context = UserContext.from_user(user)
    # Release the read transaction before the request does its own work
    await db.commit()
    return context


async def get_current_active_user(
    current_user: UserContext = Depends(get_current_user)
) -> UserContext:
    if not current_user.is_active:
        raise AuthenticationError("Inactive user", error_code="INACTIVE_USER")
    return current_user


class CapabilityChecker:
    """Dependency that admits only users whose role grants a capability"""

    def __init__(self, capability: Union[Capability, str]):
        self.capability = Capability(capability)

    async def __call__(
        self,
        current_user: UserContext = Depends(get_current_active_user)
    ) -> UserContext:
        if not current_user.can(self.capability):
            raise PermissionDenied(
                f"Role '{current_user.role_name}' lacks {self.capability.value}",
                details={
                    "required": self.capability.value,
                    "granted": sorted(c.value for c in current_user.role.granted())
                }
            )
        return current_user


def require_capability(capability: Union[Capability, str]) -> Callable:
    return CapabilityChecker(capability)

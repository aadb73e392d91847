# schemas/user/context.py
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from eduopps.core.permissions import Capability, RoleCapabilities, has_capability


class UserContext(BaseModel):
    """The caller as seen by the policy functions: identity, tenant and capabilities"""
    model_config = ConfigDict(frozen=True)

    id: int
    school_id: Optional[int] = None
    role_name: str = ""
    role: RoleCapabilities = Field(default_factory=RoleCapabilities)
    is_active: bool = True

    def can(self, capability: Union[Capability, str]) -> bool:
        return has_capability(self.role, capability)

    @classmethod
    def from_user(cls, user) -> "UserContext":
        """Build from a User row whose role relationship is loaded"""
        return cls(
            id=user.id,
            school_id=user.school_id,
            role_name=user.role.name,
            role=user.role.to_capabilities(),
            is_active=bool(user.is_active),
        )

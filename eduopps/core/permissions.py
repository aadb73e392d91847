# eduopps/core/permissions.py
from enum import Enum
from typing import Dict, NamedTuple, Union

from pydantic import BaseModel, ConfigDict


class Capability(str, Enum):
    CREATE_OPPORTUNITIES = "can_create_opportunities"
    EDIT_OWN_OPPORTUNITIES = "can_edit_own_opportunities"
    EDIT_SCHOOL_OPPORTUNITIES = "can_edit_school_opportunities"
    EDIT_ALL_OPPORTUNITIES = "can_edit_all_opportunities"
    VIEW_OPPORTUNITIES = "can_view_opportunities"
    VIEW_ATTENDEES = "can_view_attendees"
    VIEW_REPORTS = "can_view_reports"
    MANAGE_USERS = "can_manage_users"
    MANAGE_SCHOOLS = "can_manage_schools"
    MANAGE_SETTINGS = "can_manage_settings"
    MANAGE_PREFERENCES = "can_manage_preferences"
    UPLOAD_DOCUMENTS = "can_upload_documents"
    MANAGE_NEWS = "can_manage_news"


class RoleCapabilities(BaseModel):
    """
    Closed record of the capability flags carried by a role.

    Flags are independent: no role implies another role's flags, and every
    flag that is not set explicitly is False.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    can_create_opportunities: bool = False
    can_edit_own_opportunities: bool = False
    can_edit_school_opportunities: bool = False
    can_edit_all_opportunities: bool = False
    can_view_opportunities: bool = False
    can_view_attendees: bool = False
    can_view_reports: bool = False
    can_manage_users: bool = False
    can_manage_schools: bool = False
    can_manage_settings: bool = False
    can_manage_preferences: bool = False
    can_upload_documents: bool = False
    can_manage_news: bool = False

    @classmethod
    def from_role(cls, role) -> "RoleCapabilities":
        """Build from any object exposing the flags as attributes (e.g. a UserRole row)"""
        return cls(**{
            capability.value: bool(getattr(role, capability.value, False))
            for capability in Capability
        })

    def granted(self) -> set:
        return {capability for capability in Capability if getattr(self, capability.value)}


def has_capability(role: RoleCapabilities, capability: Union[Capability, str]) -> bool:
    """Typed lookup; unknown capability names raise ValueError instead of passing silently"""
    capability = Capability(capability)
    return bool(getattr(role, capability.value, False))


class RoleSeed(NamedTuple):
    description: str
    capabilities: RoleCapabilities
    requires_school: bool = True


SEED_ROLES: Dict[str, RoleSeed] = {
    "student": RoleSeed(
        description="Browses opportunities and registers interest",
        capabilities=RoleCapabilities(
            can_view_opportunities=True,
        ),
    ),
    "teacher": RoleSeed(
        description="Posts opportunities and manages the ones they created",
        capabilities=RoleCapabilities(
            can_create_opportunities=True,
            can_edit_own_opportunities=True,
            can_view_opportunities=True,
            can_view_attendees=True,
            can_upload_documents=True,
        ),
    ),
    "moderator": RoleSeed(
        description="Curates every opportunity of their school",
        capabilities=RoleCapabilities(
            can_create_opportunities=True,
            can_edit_own_opportunities=True,
            can_edit_school_opportunities=True,
            can_view_opportunities=True,
            can_view_attendees=True,
            can_upload_documents=True,
            can_manage_news=True,
        ),
    ),
    "admin": RoleSeed(
        description="Administers a school: users, settings and content",
        capabilities=RoleCapabilities(
            can_create_opportunities=True,
            can_edit_own_opportunities=True,
            can_edit_school_opportunities=True,
            can_view_opportunities=True,
            can_view_attendees=True,
            can_view_reports=True,
            can_manage_users=True,
            can_manage_settings=True,
            can_manage_preferences=True,
            can_upload_documents=True,
            can_manage_news=True,
        ),
    ),
    "superadmin": RoleSeed(
        description="Platform-wide administrator",
        capabilities=RoleCapabilities(**{capability.value: True for capability in Capability}),
        requires_school=False,
    ),
}

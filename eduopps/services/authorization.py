# eduopps/services/authorization.py
import logging
from enum import Enum
from typing import Any, Dict

from eduopps.core.errors import PermissionDenied
from eduopps.core.permissions import Capability

logger = logging.getLogger(__name__)


class MutationAction(str, Enum):
    EDIT = "edit"
    DELETE = "delete"


def _is_platform_editor(user) -> bool:
    return user.can(Capability.EDIT_ALL_OPPORTUNITIES)


def _same_school(user, opportunity) -> bool:
    return user.school_id is not None and user.school_id == opportunity.school_id


def _is_creator(user, opportunity) -> bool:
    return opportunity.created_by_id is not None and opportunity.created_by_id == user.id


def can_create(user) -> bool:
    return user.can(Capability.CREATE_OPPORTUNITIES)


def can_mutate(user, opportunity, action: MutationAction = MutationAction.EDIT) -> bool:
    """
    Edit and delete share one rule: platform editors may change anything,
    school editors anything of their own school, creators their own posts.
    """
    MutationAction(action)

    if _is_platform_editor(user):
        return True
    if user.can(Capability.EDIT_SCHOOL_OPPORTUNITIES) and _same_school(user, opportunity):
        return True
    if user.can(Capability.EDIT_OWN_OPPORTUNITIES) and _is_creator(user, opportunity):
        return True
    return False


def can_view_attendees(user, opportunity) -> bool:
    if _is_platform_editor(user):
        return True
    if user.can(Capability.VIEW_ATTENDEES) and _same_school(user, opportunity):
        return True
    return _is_creator(user, opportunity)


def ensure_can_create(user) -> None:
    if not can_create(user):
        logger.info(f"User {user.id} ({user.role_name}) may not create opportunities")
        raise PermissionDenied("You do not have permission to create opportunities")


def ensure_can_mutate(user, opportunity, action: MutationAction = MutationAction.EDIT) -> None:
    if not can_mutate(user, opportunity, action):
        action = MutationAction(action)
        logger.info(
            f"User {user.id} ({user.role_name}) may not {action.value} opportunity {opportunity.id}"
        )
        raise PermissionDenied(f"You do not have permission to {action.value} this opportunity")


def ensure_can_view_attendees(user, opportunity) -> None:
    if not can_view_attendees(user, opportunity):
        raise PermissionDenied("You do not have permission to view attendees of this opportunity")


def sanitize_opportunity_payload(user, payload: Dict[str, Any], creating: bool) -> Dict[str, Any]:
    """
    Apply the server-side overrides to a client-supplied opportunity payload.

    created_by_id is never taken from the client. On create it is set to the
    caller; unless the caller may edit every opportunity, school_id is pinned
    to the caller's school and is_global forced off. On edit, tenancy fields
    are dropped for everyone but platform editors. Returns a new dict.
    """
    data = dict(payload)
    data.pop("created_by_id", None)
    platform_editor = _is_platform_editor(user)

    if creating:
        data["created_by_id"] = user.id
        if not platform_editor:
            data["school_id"] = user.school_id
            data["is_global"] = False
        return data

    if not platform_editor:
        data.pop("school_id", None)
        data.pop("is_global", None)
    return data

from types import SimpleNamespace

import pytest

from eduopps.core.errors import PermissionDenied
from eduopps.services.authorization import (
    MutationAction,
    can_create,
    can_mutate,
    can_view_attendees,
    ensure_can_create,
    ensure_can_mutate,
    sanitize_opportunity_payload,
)
from conftest import context_for

NORTH, SOUTH = 1, 2


def opportunity(school_id=NORTH, created_by_id=None):
    return SimpleNamespace(id=7, school_id=school_id, created_by_id=created_by_id)


@pytest.mark.parametrize("action", list(MutationAction))
def test_superadmin_may_change_anything(action):
    user = context_for("superadmin", user_id=1, school_id=None)
    assert can_mutate(user, opportunity(school_id=SOUTH), action)
    assert can_mutate(user, opportunity(school_id=None), action)


@pytest.mark.parametrize("role_name", ["moderator", "admin"])
def test_school_editors_are_scoped_to_their_school(role_name):
    user = context_for(role_name, user_id=2, school_id=NORTH)
    assert can_mutate(user, opportunity(school_id=NORTH), MutationAction.EDIT)
    assert can_mutate(user, opportunity(school_id=NORTH), MutationAction.DELETE)
    assert not can_mutate(user, opportunity(school_id=SOUTH), MutationAction.EDIT)


def test_school_editor_without_school_matches_nothing():
    user = context_for("moderator", user_id=2, school_id=None)
    assert not can_mutate(user, opportunity(school_id=None))


def test_teacher_may_change_only_own_posts():
    teacher = context_for("teacher", user_id=3, school_id=NORTH)
    assert can_mutate(teacher, opportunity(created_by_id=3), MutationAction.DELETE)
    assert not can_mutate(teacher, opportunity(created_by_id=4), MutationAction.EDIT)


def test_unattributed_opportunity_has_no_owner():
    teacher = context_for("teacher", user_id=3, school_id=NORTH)
    assert not can_mutate(teacher, opportunity(created_by_id=None))


def test_student_may_change_nothing():
    student = context_for("student", user_id=5, school_id=NORTH)
    assert not can_mutate(student, opportunity(created_by_id=5))
    assert not can_create(student)


def test_ensure_helpers_raise_permission_denied():
    student = context_for("student", user_id=5, school_id=NORTH)
    with pytest.raises(PermissionDenied):
        ensure_can_create(student)
    with pytest.raises(PermissionDenied):
        ensure_can_mutate(student, opportunity(), MutationAction.DELETE)


def test_attendee_visibility():
    assert can_view_attendees(context_for("teacher", user_id=3, school_id=NORTH), opportunity())
    assert not can_view_attendees(context_for("teacher", user_id=3, school_id=SOUTH), opportunity())
    assert can_view_attendees(context_for("teacher", user_id=3, school_id=SOUTH), opportunity(created_by_id=3))
    assert can_view_attendees(context_for("superadmin", user_id=1), opportunity())
    assert not can_view_attendees(context_for("student", user_id=5, school_id=NORTH), opportunity())


class TestSanitizePayload:
    def test_create_pins_tenancy_for_school_staff(self):
        teacher = context_for("teacher", user_id=3, school_id=NORTH)
        payload = {"title": "Lab", "school_id": SOUTH, "is_global": True, "created_by_id": 99}

        data = sanitize_opportunity_payload(teacher, payload, creating=True)

        assert data == {"title": "Lab", "school_id": NORTH, "is_global": False, "created_by_id": 3}
        assert payload["created_by_id"] == 99

    def test_create_keeps_tenancy_for_platform_editors(self):
        superadmin = context_for("superadmin", user_id=1)
        data = sanitize_opportunity_payload(
            superadmin, {"school_id": SOUTH, "is_global": True, "created_by_id": 99}, creating=True
        )
        assert data == {"school_id": SOUTH, "is_global": True, "created_by_id": 1}

    def test_edit_drops_tenancy_fields_for_school_staff(self):
        moderator = context_for("moderator", user_id=2, school_id=NORTH)
        data = sanitize_opportunity_payload(
            moderator,
            {"title": "New", "school_id": SOUTH, "is_global": True, "created_by_id": 2},
            creating=False
        )
        assert data == {"title": "New"}

    def test_edit_keeps_tenancy_for_platform_editors(self):
        superadmin = context_for("superadmin", user_id=1)
        data = sanitize_opportunity_payload(
            superadmin, {"is_global": True, "created_by_id": 5}, creating=False
        )
        assert data == {"is_global": True}

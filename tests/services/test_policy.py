from types import SimpleNamespace

import pytest

from enquiry_svc.errors import AuthorizationError, InvalidAssigneeError
from enquiry_svc.models.enums import UserRole
from enquiry_svc.services.policy import EnquiryAction, check_assignee, enforce, enforce_role, evaluate, evaluate_role


ADMIN_ONLY = [
    EnquiryAction.ListStaff,
    EnquiryAction.Assign,
    EnquiryAction.Unassign,
    EnquiryAction.Delete,
]


@pytest.mark.parametrize("role", [None, UserRole.User, UserRole.Staff, UserRole.Admin, "bogus"])
def test_create_is_public(role):
    assert evaluate(role, EnquiryAction.Create).allowed


@pytest.mark.parametrize("role", [UserRole.User, UserRole.Staff, UserRole.Admin, "staff"])
def test_read_allowed_for_any_authenticated_role(role):
    assert evaluate(role, EnquiryAction.Read).allowed


@pytest.mark.parametrize("role", [None, "bogus"])
def test_read_denied_without_valid_role(role):
    assert not evaluate(role, EnquiryAction.Read).allowed


@pytest.mark.parametrize("action", ADMIN_ONLY)
def test_admin_only_actions(action):
    assert evaluate(UserRole.Admin, action).allowed
    assert not evaluate(UserRole.Staff, action).allowed
    assert not evaluate(UserRole.User, action).allowed
    assert not evaluate(None, action).allowed


def test_admin_may_update_status_and_assignment():
    decision = evaluate(UserRole.Admin, EnquiryAction.Update, actor_id=1, assigned_to_id=None, fields=["status", "assigned_to"])
    assert decision.allowed
    assert decision.allowed_fields == frozenset({"status", "assigned_to"})


def test_staff_may_update_status_on_own_enquiry():
    decision = evaluate(UserRole.Staff, EnquiryAction.Update, actor_id=7, assigned_to_id=7, fields=["status"])
    assert decision.allowed
    assert decision.allowed_fields == frozenset({"status"})


def test_staff_denied_on_enquiry_assigned_to_someone_else():
    decision = evaluate(UserRole.Staff, EnquiryAction.Update, actor_id=7, assigned_to_id=8, fields=["status"])
    assert not decision.allowed
    assert "assigned to you" in decision.reason


def test_staff_denied_on_unassigned_enquiry():
    assert not evaluate(UserRole.Staff, EnquiryAction.Update, actor_id=7, assigned_to_id=None, fields=["status"]).allowed


@pytest.mark.parametrize("value_fields", [["assigned_to"], ["status", "assigned_to"]])
def test_staff_denied_when_assignee_present_regardless_of_value(value_fields):
    decision = evaluate(UserRole.Staff, EnquiryAction.Update, actor_id=7, assigned_to_id=7, fields=value_fields)
    assert not decision.allowed
    assert decision.reason == "Staff cannot assign/unassign enquiries"


def test_user_role_cannot_update():
    assert not evaluate(UserRole.User, EnquiryAction.Update, actor_id=3, assigned_to_id=3, fields=["status"]).allowed


def test_unknown_fields_rejected_for_admin():
    decision = evaluate(UserRole.Admin, EnquiryAction.Update, actor_id=1, fields=["message"])
    assert not decision.allowed
    assert "message" in decision.reason


def test_enforce_raises_authorization_error_with_reason():
    with pytest.raises(AuthorizationError) as excinfo:
        enforce(UserRole.Staff, EnquiryAction.Delete, actor_id=2)
    assert excinfo.value.status_code == 403
    assert "delete" in excinfo.value.message


def test_enforce_returns_decision_when_allowed():
    assert enforce(UserRole.Admin, EnquiryAction.Delete, actor_id=1).allowed


def test_check_assignee_rules():
    check_assignee(SimpleNamespace(role=UserRole.Staff))
    check_assignee(SimpleNamespace(role=UserRole.Admin))

    with pytest.raises(InvalidAssigneeError):
        check_assignee(None)
    with pytest.raises(InvalidAssigneeError) as excinfo:
        check_assignee(SimpleNamespace(role=UserRole.User))
    assert excinfo.value.status_code == 400


def test_role_check_ignores_ownership_and_fields():
    staff = evaluate_role(UserRole.Staff, EnquiryAction.Update)
    assert staff.allowed
    assert staff.allowed_fields == frozenset({"status"})

    assert not evaluate_role(UserRole.User, EnquiryAction.Update).allowed
    assert not evaluate_role("nobody", EnquiryAction.Read).allowed
    assert evaluate_role(None, EnquiryAction.Create).allowed


def test_enforce_role_raises_for_roles_without_action():
    with pytest.raises(AuthorizationError):
        enforce_role(UserRole.User, EnquiryAction.Update, actor_id=3)
    assert enforce_role(UserRole.Admin, EnquiryAction.Update).allowed_fields == frozenset({"status", "assigned_to"})

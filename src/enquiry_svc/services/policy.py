"""Authorization rules for enquiry actions.

The whole permission matrix lives in ``ROLE_RULES``; only ``evaluate_role``
and ``evaluate`` read it. Neither has side effects or touches the
database: callers look up the enquiry and the acting user first and pass in
the identifiers that matter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Union

from enquiry_svc.errors import AuthorizationError, InvalidAssigneeError
from enquiry_svc.models.enums import UserRole

logger = logging.getLogger(__name__)


class EnquiryAction(str, Enum):
    Create = "create"
    Read = "read"
    ListStaff = "list_staff"
    Assign = "assign"
    Unassign = "unassign"
    Delete = "delete"
    Update = "update"


STATUS_FIELD = "status"
ASSIGNEE_FIELD = "assigned_to"

PUBLIC_ACTIONS: FrozenSet[EnquiryAction] = frozenset({EnquiryAction.Create})


@dataclass(frozen=True)
class RoleRules:
    actions: FrozenSet[EnquiryAction]
    update_fields: FrozenSet[str] = frozenset()
    # update only permitted on enquiries assigned to the actor
    owner_only_update: bool = False


ROLE_RULES = {
    UserRole.Admin: RoleRules(
        actions=frozenset(EnquiryAction),
        update_fields=frozenset({STATUS_FIELD, ASSIGNEE_FIELD}),
    ),
    UserRole.Staff: RoleRules(
        actions=frozenset({EnquiryAction.Create, EnquiryAction.Read, EnquiryAction.Update}),
        update_fields=frozenset({STATUS_FIELD}),
        owner_only_update=True,
    ),
    UserRole.User: RoleRules(
        actions=frozenset({EnquiryAction.Create, EnquiryAction.Read}),
    ),
}

_DENY_MESSAGES = {
    EnquiryAction.Read: "Authentication required",
    EnquiryAction.ListStaff: "Only admin can access staff list",
    EnquiryAction.Assign: "Only admin can assign enquiries",
    EnquiryAction.Unassign: "Only admin can unassign enquiries",
    EnquiryAction.Delete: "Only admin can delete enquiries",
    EnquiryAction.Update: "Insufficient permissions",
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""
    allowed_fields: FrozenSet[str] = field(default_factory=frozenset)


def _coerce_role(role: Union[UserRole, str, None]) -> Optional[UserRole]:
    if role is None:
        return None
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def evaluate_role(role: Union[UserRole, str, None], action: EnquiryAction) -> Decision:
    """Role-level half of ``evaluate``: may this role attempt ``action`` at all.

    Ownership and patch fields are not considered, so it can run before the
    enquiry is loaded.
    """
    if action in PUBLIC_ACTIONS:
        return Decision(allowed=True)

    actor_role = _coerce_role(role)
    rules = ROLE_RULES.get(actor_role) if actor_role is not None else None
    if rules is None or action not in rules.actions:
        return Decision(allowed=False, reason=_DENY_MESSAGES.get(action, "Forbidden"))

    if action == EnquiryAction.Update:
        return Decision(allowed=True, allowed_fields=rules.update_fields)
    return Decision(allowed=True)


def evaluate(
    role: Union[UserRole, str, None],
    action: EnquiryAction,
    *,
    actor_id: Optional[int] = None,
    assigned_to_id: Optional[int] = None,
    fields: Iterable[str] = (),
) -> Decision:
    """Decide whether ``role`` may perform ``action``.

    For updates, ``assigned_to_id`` is the enquiry's current assignee and
    ``fields`` the names present in the requested patch. The first matching
    rule decides.
    """
    decision = evaluate_role(role, action)
    if not decision.allowed or action != EnquiryAction.Update:
        return decision

    rules = ROLE_RULES[_coerce_role(role)]
    if rules.owner_only_update and (actor_id is None or assigned_to_id != actor_id):
        return Decision(allowed=False, reason="You can only update enquiries assigned to you")

    requested = set(fields)
    if ASSIGNEE_FIELD in requested and ASSIGNEE_FIELD not in rules.update_fields:
        return Decision(allowed=False, reason="Staff cannot assign/unassign enquiries")

    rejected = requested - rules.update_fields
    if rejected:
        return Decision(allowed=False, reason="Cannot update fields: " + ", ".join(sorted(rejected)))

    return decision


def _raise_if_denied(decision: Decision, role, action: EnquiryAction, actor_id: Optional[int]) -> Decision:
    if not decision.allowed:
        logger.warning("Denied %s for role=%s actor=%s: %s", action.value, role, actor_id, decision.reason)
        raise AuthorizationError(decision.reason)
    return decision


def enforce_role(
    role: Union[UserRole, str, None],
    action: EnquiryAction,
    *,
    actor_id: Optional[int] = None,
) -> Decision:
    return _raise_if_denied(evaluate_role(role, action), role, action, actor_id)


def enforce(
    role: Union[UserRole, str, None],
    action: EnquiryAction,
    *,
    actor_id: Optional[int] = None,
    assigned_to_id: Optional[int] = None,
    fields: Iterable[str] = (),
) -> Decision:
    """Evaluate and raise AuthorizationError when the action is denied."""
    decision = evaluate(role, action, actor_id=actor_id, assigned_to_id=assigned_to_id, fields=fields)
    return _raise_if_denied(decision, role, action, actor_id)


def check_assignee(user) -> None:
    """Raise InvalidAssigneeError unless ``user`` exists and may own enquiries."""
    if user is None:
        raise InvalidAssigneeError("Assigned user not found")
    if _coerce_role(user.role) not in (UserRole.Admin, UserRole.Staff):
        raise InvalidAssigneeError(
            "Cannot assign enquiry to regular user. Only staff or admin can be assigned."
        )

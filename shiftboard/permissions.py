"""Declarative role rules.

Every role decision in the API is answered from the tables in this module:
which capabilities a role carries, which user fields a caller may write, which
roles a caller may hand out, and which shift status changes are allowed.
"""

from __future__ import annotations

from .constants import ROLE_EMPLOYEE, ROLE_MANAGER, ROLE_OWNER

ROLE_RANK = {
    ROLE_EMPLOYEE: 1,
    ROLE_MANAGER: 2,
    ROLE_OWNER: 3,
}

MANAGE_USERS = "manage_users"
MANAGE_LOCATIONS = "manage_locations"
MANAGE_SHIFTS = "manage_shifts"
REVIEW_TIME_OFF = "review_time_off"
REVIEW_SWAPS = "review_swaps"
SUBMIT_FOR_OTHERS = "submit_for_others"
VIEW_ALL_REQUESTS = "view_all_requests"
VIEW_REPORTS = "view_reports"

_PRIVILEGED = frozenset(
    {
        MANAGE_USERS,
        MANAGE_LOCATIONS,
        MANAGE_SHIFTS,
        REVIEW_TIME_OFF,
        REVIEW_SWAPS,
        SUBMIT_FOR_OTHERS,
        VIEW_ALL_REQUESTS,
    }
)

CAPABILITIES: dict[str, frozenset[str]] = {
    ROLE_OWNER: _PRIVILEGED | {VIEW_REPORTS},
    ROLE_MANAGER: _PRIVILEGED,
    ROLE_EMPLOYEE: frozenset(),
}

# Roles each role may assign when creating or editing another user.
ASSIGNABLE_ROLES: dict[str, frozenset[str]] = {
    ROLE_OWNER: frozenset({ROLE_MANAGER, ROLE_EMPLOYEE}),
    ROLE_MANAGER: frozenset({ROLE_EMPLOYEE}),
    ROLE_EMPLOYEE: frozenset(),
}

PROFILE_FIELDS = frozenset({"first_name", "last_name", "email", "phone", "position"})
PRIVILEGED_FIELDS = frozenset({"role", "hourly_rate", "is_active"})

# (role, editing_self) -> writable user fields; anything else is dropped.
USER_FIELD_POLICY: dict[tuple[str, bool], frozenset[str]] = {
    (ROLE_OWNER, True): PROFILE_FIELDS | {"hourly_rate"},
    (ROLE_OWNER, False): PROFILE_FIELDS | PRIVILEGED_FIELDS,
    (ROLE_MANAGER, True): PROFILE_FIELDS | {"hourly_rate"},
    (ROLE_MANAGER, False): PROFILE_FIELDS | PRIVILEGED_FIELDS,
    (ROLE_EMPLOYEE, True): PROFILE_FIELDS,
    (ROLE_EMPLOYEE, False): frozenset(),
}

SHIFT_TRANSITIONS: dict[str, frozenset[str]] = {
    "scheduled": frozenset({"published", "cancelled"}),
    "published": frozenset({"scheduled", "completed", "cancelled"}),
    "cancelled": frozenset({"scheduled"}),
    "completed": frozenset(),
}

INITIAL_SHIFT_STATUSES = frozenset({"scheduled", "published"})


def has_capability(role: str, capability: str) -> bool:
    return capability in CAPABILITIES.get(role, frozenset())


def roles_with(capability: str) -> tuple[str, ...]:
    return tuple(role for role, capabilities in CAPABILITIES.items() if capability in capabilities)


def outranks(role: str, other_role: str) -> bool:
    return ROLE_RANK.get(role, 0) > ROLE_RANK.get(other_role, 0)


def can_assign_role(role: str, new_role: str) -> bool:
    return new_role in ASSIGNABLE_ROLES.get(role, frozenset())


def writable_user_fields(role: str, editing_self: bool, outranks_target: bool = True) -> frozenset[str]:
    """Fields ``role`` may write on a user; privileged ones only on users it outranks."""
    fields = USER_FIELD_POLICY.get((role, editing_self), frozenset())
    if not editing_self and not outranks_target:
        return fields - PRIVILEGED_FIELDS
    return fields


def can_transition_shift(current: str, new: str) -> bool:
    if current == new:
        return True
    return new in SHIFT_TRANSITIONS.get(current, frozenset())

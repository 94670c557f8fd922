"""
Role catalogue for the dashboard.

Display only: the UI hides what a role cannot do. Nothing here is
enforced on the API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

ROLES = ("superadmin", "depot_manager", "operator")
CRUD = ("create", "read", "update", "delete")


@dataclass(frozen=True)
class Permission:
    resource: str
    action: str


@dataclass(frozen=True)
class RoleConfig:
    role: str
    label: str
    description: str
    permissions: Tuple[Permission, ...]


def _grant(resource: str, *actions: str) -> Tuple[Permission, ...]:
    return tuple(Permission(resource, a) for a in actions)


ROLE_CONFIGS: Dict[str, RoleConfig] = {
    "superadmin": RoleConfig(
        role="superadmin",
        label="Super Admin",
        description="Full system access and user management",
        permissions=(
            *_grant("users", *CRUD),
            *_grant("depots", *CRUD),
            *_grant("containers", *CRUD),
            *_grant("allocations", *CRUD),
            *_grant("discharge", *CRUD),
            *_grant("reports", *CRUD),
            *_grant("activity_logs", "read", "delete"),
        ),
    ),
    "depot_manager": RoleConfig(
        role="depot_manager",
        label="Depot Manager",
        description="Manage depot operations and containers",
        permissions=(
            *_grant("users", "read"),
            *_grant("depots", "read", "update"),
            *_grant("containers", "create", "read", "update"),
            *_grant("allocations", "create", "read", "update"),
            *_grant("discharge", "create", "read", "update"),
            *_grant("reports", "read"),
            *_grant("activity_logs", "read"),
        ),
    ),
    "operator": RoleConfig(
        role="operator",
        label="Operator",
        description="Perform daily operations",
        permissions=(
            *_grant("depots", "read"),
            *_grant("containers", "create", "read"),
            *_grant("allocations", "create", "read"),
            *_grant("discharge", "read", "update"),
            *_grant("reports", "read"),
            *_grant("activity_logs", "read"),
        ),
    ),
}


def has_permission(role: Optional[str], resource: str, action: str) -> bool:
    config = ROLE_CONFIGS.get(role or "")
    if config is None:
        return False
    return Permission(resource, action) in config.permissions


def can_access(role: Optional[str], resource: str, action: str = "read") -> bool:
    return has_permission(role, resource, action)


def permissions_for_role(role: str) -> List[Permission]:
    config = ROLE_CONFIGS.get(role)
    return list(config.permissions) if config else []


def accessible_resources(role: Optional[str]) -> List[str]:
    seen: List[str] = []
    for p in permissions_for_role(role or ""):
        if p.resource not in seen:
            seen.append(p.resource)
    return seen


def role_label(role: str) -> str:
    config = ROLE_CONFIGS.get(role)
    return config.label if config else role


def role_description(role: str) -> str:
    config = ROLE_CONFIGS.get(role)
    return config.description if config else ""

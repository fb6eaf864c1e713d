"""Privilege rules: what the role list says about the access model."""

from __future__ import annotations

from apiposture.models.endpoint import Endpoint
from apiposture.models.finding import Finding
from apiposture.models.types import Severity
from apiposture.rules.base import SecurityRule

MAX_ROLES = 3

WEAK_ROLE_NAMES = frozenset({
    "user", "admin", "guest", "member", "moderator", "manager", "superuser",
    "root", "default", "basic", "standard", "premium", "vip",
})


class ExcessiveRoleAccess(SecurityRule):
    """AP005: more than MAX_ROLES roles on one endpoint."""

    id = "AP005"
    name = "Excessive role access"
    description = f"Endpoint allows more than {MAX_ROLES} roles"
    severity = Severity.LOW

    def __init__(self, max_roles: int = MAX_ROLES) -> None:
        self.max_roles = max_roles

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        roles = endpoint.authorization.roles
        if len(roles) <= self.max_roles:
            return []
        return [self.finding(
            endpoint,
            f"{endpoint.display()} allows {len(roles)} roles: {', '.join(roles)}",
            f"This endpoint allows {len(roles)} different roles which may indicate "
            "overly permissive access. Consider: (1) Creating a permission-based system "
            "instead of role-based, (2) Creating role hierarchies, or (3) Using policies "
            "to combine related access patterns.",
        )]


class WeakRoleNaming(SecurityRule):
    """AP006: generic role names like "Admin" or "User"."""

    id = "AP006"
    name = "Weak role naming"
    description = "Role names are too generic or weak"
    severity = Severity.LOW

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        weak = [r for r in endpoint.authorization.roles if r.lower() in WEAK_ROLE_NAMES]
        if not weak:
            return []
        return [self.finding(
            endpoint,
            f"{endpoint.display()} uses generic role names: {', '.join(weak)}",
            "Consider using more descriptive role names that indicate specific permissions "
            f'or responsibilities. Instead of "{weak[0]}", consider names like '
            '"billing-admin", "content-editor", "inventory-manager", or "read-only-analyst".',
        )]

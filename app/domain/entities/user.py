"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime

ROLE_ADMIN = "admin"
ROLE_SUPERVISOR = "supervisor"
ROLE_OPERATOR = "operator"
USER_ROLES = (ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_OPERATOR)


@dataclass
class User:
    """Core attributes describing an application user."""

    id: str | None
    name: str
    email: str
    password: str
    role: str
    is_active: bool = True
    created_at: datetime | None = None

    def has_role(self, alias: str) -> bool:
        """Return ``True`` when the user's role matches ``alias``."""

        return self.role.lower() == alias.lower()

    def is_admin(self) -> bool:
        return self.has_role(ROLE_ADMIN)

    def can_manage_tasks(self) -> bool:
        """Supervisors and administrators create and assign tasks."""

        return self.has_role(ROLE_SUPERVISOR) or self.is_admin()


__all__ = [
    "User",
    "ROLE_ADMIN",
    "ROLE_SUPERVISOR",
    "ROLE_OPERATOR",
    "USER_ROLES",
]

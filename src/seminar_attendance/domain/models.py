"""Domain models for callers."""

from dataclasses import dataclass
from enum import Enum


class UserRole(Enum):
    """Roles stored on a user's profile."""

    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"


@dataclass(frozen=True)
class UserIdentity:
    """Authenticated caller resolved from an auth token."""

    user_id: str
    role: UserRole = UserRole.STUDENT

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

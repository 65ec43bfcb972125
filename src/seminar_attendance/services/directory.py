"""Caller identity lookup."""

from typing import Protocol

from seminar_attendance.domain.models import UserIdentity


class Directory(Protocol):
    """Interface for resolving auth tokens to callers."""

    def authenticate(self, token: str) -> UserIdentity | None:
        """Return the caller for a token, or None when it is not valid."""

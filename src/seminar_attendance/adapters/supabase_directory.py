"""Supabase Auth-backed caller directory."""

import logging
from dataclasses import dataclass

from supabase import AuthApiError, Client

from seminar_attendance.domain.models import UserIdentity, UserRole
from seminar_attendance.services.directory import Directory

logger = logging.getLogger(__name__)


@dataclass
class SupabaseDirectory(Directory):
    """Resolves access tokens with Supabase Auth and roles from profiles."""

    client: Client

    def authenticate(self, token: str) -> UserIdentity | None:
        """Return the caller for a valid access token."""
        try:
            response = self.client.auth.get_user(token)
        except AuthApiError as exc:
            logger.info("Rejected auth token", extra={"status": exc.status})
            return None
        user = response.user if response else None
        if user is None:
            return None
        return UserIdentity(user_id=str(user.id), role=self._get_role(str(user.id)))

    def _get_role(self, user_id: str) -> UserRole:
        response = (
            self.client.table("profiles")
            .select("role")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return UserRole.STUDENT
        try:
            return UserRole(response.data[0].get("role") or UserRole.STUDENT.value)
        except ValueError:
            return UserRole.STUDENT

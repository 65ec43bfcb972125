"""Read access to seminars, sessions and their participants."""

from datetime import datetime
from typing import Protocol

from seminar_attendance.domain.errors import AccessDeniedError
from seminar_attendance.domain.models import UserIdentity
from seminar_attendance.domain.seminars import (
    Participant,
    ParticipantStatus,
    Seminar,
    SessionRecord,
)


class Registry(Protocol):
    """Persistence interface for seminar membership and scheduling."""

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""

    def get_seminar(self, seminar_id: str) -> Seminar | None:
        """Return a seminar by id, if present."""

    def list_sessions(self, seminar_id: str) -> list[SessionRecord]:
        """Return the seminar's sessions ordered by session number."""

    def get_participant(self, seminar_id: str, user_id: str) -> Participant | None:
        """Return the participant row for a user in a seminar, if present."""

    def list_participants(self, seminar_id: str) -> list[Participant]:
        """Return every participant of a seminar."""

    def update_participant_status(
        self,
        seminar_id: str,
        participant_id: str,
        status: ParticipantStatus,
        approved_by: str | None,
        approved_at: datetime | None,
    ) -> Participant | None:
        """Set a participant's status and return the updated row."""

    def insert_participant(
        self,
        seminar_id: str,
        user_id: str,
        status: ParticipantStatus,
        applied_at: datetime,
        approved_at: datetime | None,
    ) -> Participant:
        """Insert a membership row, raising AlreadyJoinedError if one exists."""

    def delete_participant(self, seminar_id: str, participant_id: str) -> bool:
        """Delete a membership row, returning whether one was removed."""


def require_seminar_owner(identity: UserIdentity, seminar: Seminar) -> None:
    """Raise unless the caller created the seminar or is an admin."""
    if identity.is_admin or identity.user_id == seminar.created_by:
        return
    raise AccessDeniedError()

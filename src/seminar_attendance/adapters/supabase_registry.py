"""Supabase-backed seminar registry."""

from dataclasses import dataclass
from datetime import datetime

from postgrest.exceptions import APIError
from supabase import Client

from seminar_attendance.adapters.uuids import is_uuid
from seminar_attendance.domain.errors import AlreadyJoinedError
from seminar_attendance.domain.seminars import (
    Participant,
    ParticipantStatus,
    Seminar,
    SessionRecord,
)
from seminar_attendance.services.registry import Registry

UNIQUE_VIOLATION = "23505"

_PARTICIPANT_COLUMNS = "id, seminar_id, user_id, status, approved_at, approved_by"


@dataclass
class SupabaseRegistry(Registry):
    """Supabase implementation for seminars, sessions and participants."""

    client: Client

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""
        if not is_uuid(session_id):
            return None
        response = (
            self.client.table("sessions")
            .select("id, seminar_id, session_number, title")
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def get_seminar(self, seminar_id: str) -> Seminar | None:
        """Return a seminar by id, if present."""
        if not is_uuid(seminar_id):
            return None
        response = (
            self.client.table("seminars")
            .select("id, title, created_by, max_participants")
            .eq("id", seminar_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Seminar(
            id=str(row["id"]),
            title=str(row.get("title") or ""),
            created_by=str(row["created_by"]),
            max_participants=_optional_int(row.get("max_participants")),
        )

    def list_sessions(self, seminar_id: str) -> list[SessionRecord]:
        """Return the seminar's sessions ordered by session number."""
        if not is_uuid(seminar_id):
            return []
        response = (
            self.client.table("sessions")
            .select("id, seminar_id, session_number, title")
            .eq("seminar_id", seminar_id)
            .order("session_number", desc=False)
            .execute()
        )
        return [_parse_session(row) for row in response.data or []]

    def get_participant(self, seminar_id: str, user_id: str) -> Participant | None:
        """Return the participant row for a user in a seminar, if present."""
        if not (is_uuid(seminar_id) and is_uuid(user_id)):
            return None
        response = (
            self.client.table("participants")
            .select(_PARTICIPANT_COLUMNS)
            .eq("seminar_id", seminar_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_participant(response.data[0])

    def list_participants(self, seminar_id: str) -> list[Participant]:
        """Return every participant of a seminar, newest first."""
        if not is_uuid(seminar_id):
            return []
        response = (
            self.client.table("participants")
            .select(_PARTICIPANT_COLUMNS)
            .eq("seminar_id", seminar_id)
            .order("applied_at", desc=True)
            .execute()
        )
        return [_parse_participant(row) for row in response.data or []]

    def update_participant_status(
        self,
        seminar_id: str,
        participant_id: str,
        status: ParticipantStatus,
        approved_by: str | None,
        approved_at: datetime | None,
    ) -> Participant | None:
        """Set a participant's status and return the updated row."""
        if not (is_uuid(seminar_id) and is_uuid(participant_id)):
            return None
        response = (
            self.client.table("participants")
            .update(
                {
                    "status": status.value,
                    "approved_by": approved_by,
                    "approved_at": approved_at.isoformat() if approved_at else None,
                }
            )
            .eq("id", participant_id)
            .eq("seminar_id", seminar_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_participant(response.data[0])

    def insert_participant(
        self,
        seminar_id: str,
        user_id: str,
        status: ParticipantStatus,
        applied_at: datetime,
        approved_at: datetime | None,
    ) -> Participant:
        """Insert a membership row, raising AlreadyJoinedError if one exists."""
        try:
            response = (
                self.client.table("participants")
                .insert(
                    {
                        "seminar_id": seminar_id,
                        "user_id": user_id,
                        "status": status.value,
                        "applied_at": applied_at.isoformat(),
                        "approved_at": approved_at.isoformat() if approved_at else None,
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise AlreadyJoinedError(seminar_id) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to join seminar")
        return _parse_participant(response.data[0])

    def delete_participant(self, seminar_id: str, participant_id: str) -> bool:
        """Delete a membership row, returning whether one was removed."""
        if not (is_uuid(seminar_id) and is_uuid(participant_id)):
            return False
        response = (
            self.client.table("participants")
            .delete()
            .eq("id", participant_id)
            .eq("seminar_id", seminar_id)
            .execute()
        )
        return bool(response.data)


def _optional_int(value: object) -> int | None:
    if value is None or value == "":
        return None
    return int(str(value))


def _parse_session(row: dict[str, object]) -> SessionRecord:
    return SessionRecord(
        id=str(row["id"]),
        seminar_id=str(row["seminar_id"]),
        session_number=int(row.get("session_number") or 0),
        title=str(row.get("title") or ""),
    )


def _parse_participant(row: dict[str, object]) -> Participant:
    approved_at_raw = row.get("approved_at")
    approved_by = row.get("approved_by")
    return Participant(
        id=str(row["id"]),
        seminar_id=str(row["seminar_id"]),
        user_id=str(row["user_id"]),
        status=ParticipantStatus(row["status"]),
        approved_at=(
            datetime.fromisoformat(approved_at_raw)
            if isinstance(approved_at_raw, str) and approved_at_raw
            else None
        ),
        approved_by=str(approved_by) if approved_by else None,
    )

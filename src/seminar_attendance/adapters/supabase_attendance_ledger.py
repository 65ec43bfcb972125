"""Supabase-backed attendance ledger."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from postgrest.exceptions import APIError
from supabase import Client

from seminar_attendance.adapters.uuids import is_uuid
from seminar_attendance.domain.attendance import AttendanceRecord, AttendanceStatus
from seminar_attendance.domain.errors import DuplicateRecordError
from seminar_attendance.services.attendance import AttendanceLedger

UNIQUE_VIOLATION = "23505"

_COLUMNS = "session_id, user_id, status, checked_at"


@dataclass
class SupabaseAttendanceLedger(AttendanceLedger):
    """Attendance ledger stored in the ``attendance`` table.

    The table carries a unique constraint on ``(session_id, user_id)`` so an
    insert is an atomic insert-if-absent; a violation surfaces as
    ``DuplicateRecordError``.
    """

    client: Client

    def record_exists(self, session_id: str, user_id: str) -> bool:
        """Return true when the pair already has a record."""
        response = (
            self.client.table("attendance")
            .select("session_id")
            .eq("session_id", session_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def append(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert a record and return the stored row."""
        try:
            response = (
                self.client.table("attendance")
                .insert(
                    {
                        "session_id": record.session_id,
                        "user_id": record.user_id,
                        "status": record.status.value,
                        "checked_at": record.checked_at.isoformat(),
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateRecordError(record.session_id, record.user_id) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to record attendance")
        return _parse_row(response.data[0])

    def list_records(
        self, session_ids: Iterable[str], user_ids: Iterable[str] | None = None
    ) -> list[AttendanceRecord]:
        """Return records for the sessions, optionally limited to users.

        Ids that are not UUIDs cannot match a row and are left out of the query.
        """
        sessions = [session_id for session_id in session_ids if is_uuid(session_id)]
        if not sessions:
            return []
        query = (
            self.client.table("attendance")
            .select(_COLUMNS)
            .in_("session_id", sessions)
        )
        if user_ids is not None:
            users = [user_id for user_id in user_ids if is_uuid(user_id)]
            if not users:
                return []
            query = query.in_("user_id", users)
        response = query.execute()
        return [_parse_row(row) for row in response.data or []]

    def list_recent(self, limit: int) -> list[AttendanceRecord]:
        """Return the most recent records."""
        response = (
            self.client.table("attendance")
            .select(_COLUMNS)
            .order("checked_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> AttendanceRecord:
    checked_at_raw = row.get("checked_at")
    checked_at = (
        datetime.fromisoformat(checked_at_raw)
        if isinstance(checked_at_raw, str) and checked_at_raw
        else datetime.min
    )
    return AttendanceRecord(
        session_id=str(row["session_id"]),
        user_id=str(row["user_id"]),
        status=AttendanceStatus(row.get("status") or AttendanceStatus.PRESENT.value),
        checked_at=checked_at,
    )

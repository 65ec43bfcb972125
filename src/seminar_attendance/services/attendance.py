"""Attendance ledger interface and rate reporting."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from seminar_attendance.domain.attendance import (
    AttendanceRecord,
    AttendanceStatus,
    SessionAttendanceSummary,
)
from seminar_attendance.domain.errors import AccessDeniedError, SessionNotFoundError
from seminar_attendance.domain.models import UserIdentity
from seminar_attendance.domain.seminars import ParticipantStatus, SessionRecord
from seminar_attendance.services.registry import Registry, require_seminar_owner


class AttendanceLedger(Protocol):
    """Append-only store of attendance records."""

    def record_exists(self, session_id: str, user_id: str) -> bool:
        """Return true when the user already checked in to the session."""

    def append(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert a record, raising DuplicateRecordError if the pair exists."""

    def list_records(
        self, session_ids: Iterable[str], user_ids: Iterable[str] | None = None
    ) -> list[AttendanceRecord]:
        """Return records for the sessions, optionally limited to users."""

    def list_recent(self, limit: int) -> list[AttendanceRecord]:
        """Return the most recent records."""


def attended_sessions(
    records: Iterable[AttendanceRecord], user_id: str, session_ids: set[str]
) -> set[str]:
    """Return the sessions in which the user has a present record."""
    return {
        record.session_id
        for record in records
        if record.user_id == user_id
        and record.session_id in session_ids
        and record.status is AttendanceStatus.PRESENT
    }


def calculate_rate(
    records: Iterable[AttendanceRecord], user_id: str, session_ids: set[str]
) -> float:
    """Return the percentage of sessions the user was present for.

    An empty session set yields 0.0.
    """
    if not session_ids:
        return 0.0
    attended = attended_sessions(records, user_id, session_ids)
    return len(attended) / len(session_ids) * 100


@dataclass
class AttendanceService:
    """Read-only attendance aggregates."""

    ledger: AttendanceLedger
    registry: Registry

    def attendance_rate(self, user_id: str, session_ids: set[str]) -> float:
        """Return the user's attendance percentage over the sessions."""
        if not session_ids:
            return 0.0
        records = self.ledger.list_records(sorted(session_ids), [user_id])
        return calculate_rate(records, user_id, session_ids)

    def attendance_rate_for(
        self, identity: UserIdentity, user_id: str, session_ids: set[str]
    ) -> float:
        """Return a rate the caller is allowed to see.

        Users may read their own rate and admins any rate. Anyone else must own
        the seminar of every requested session.

        Raises:
            AccessDeniedError: If the caller may not read this rate.
            SessionNotFoundError: If a requested session does not exist and the
                caller is neither the user nor an admin.
        """
        if identity.user_id != user_id and not identity.is_admin:
            if not session_ids:
                raise AccessDeniedError()
            for session_id in sorted(session_ids):
                self._owned_session(identity, session_id)
        return self.attendance_rate(user_id, session_ids)

    def session_summary(
        self, identity: UserIdentity, session_id: str
    ) -> SessionAttendanceSummary:
        """Return approved participant and present counts for a session.

        Only approved participants count as present, so the rate never
        exceeds 100.
        """
        session = self._owned_session(identity, session_id)
        approved = {
            participant.user_id
            for participant in self.registry.list_participants(session.seminar_id)
            if participant.status is ParticipantStatus.APPROVED
        }
        records = self.ledger.list_records([session.id])
        present = len(
            {
                record.user_id
                for record in records
                if record.status is AttendanceStatus.PRESENT
                and record.user_id in approved
            }
        )
        rate = present / len(approved) * 100 if approved else 0.0
        return SessionAttendanceSummary(
            session_id=session.id,
            total_participants=len(approved),
            present=present,
            attendance_rate=rate,
        )

    def list_recent(self, limit: int = 50) -> list[AttendanceRecord]:
        """Return the latest check-ins across all sessions."""
        return self.ledger.list_recent(limit)

    def _owned_session(self, identity: UserIdentity, session_id: str) -> SessionRecord:
        session = self.registry.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        seminar = self.registry.get_seminar(session.seminar_id)
        if seminar is None:
            raise AccessDeniedError()
        require_seminar_owner(identity, seminar)
        return session

"""Domain models for attendance check-in."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class AttendanceStatus(Enum):
    """Status stored on an attendance record."""

    PRESENT = "present"


class CheckinOutcome(Enum):
    """Every result a check-in attempt can produce."""

    SUCCESS = "checked_in"
    ALREADY_CHECKED_IN = "already_checked_in"
    INVALID_CODE = "invalid_code"
    SESSION_NOT_FOUND = "session_not_found"
    NOT_A_PARTICIPANT = "not_a_participant"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class AttendanceRecord:
    """One check-in for a (session, user) pair."""

    session_id: str
    user_id: str
    status: AttendanceStatus
    checked_at: datetime


@dataclass(frozen=True)
class AttendanceCode:
    """Daily attendance code and the URL encoded into its QR image."""

    session_id: str
    code: str
    checkin_url: str
    valid_on: date


@dataclass(frozen=True)
class CheckinResult:
    """Typed result of a check-in attempt."""

    outcome: CheckinOutcome
    session_id: str
    user_id: str | None = None
    record: AttendanceRecord | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is CheckinOutcome.SUCCESS


@dataclass(frozen=True)
class SessionAttendanceSummary:
    """Attendance totals for a single session."""

    session_id: str
    total_participants: int
    present: int
    attendance_rate: float


@dataclass(frozen=True)
class ParticipantAttendance:
    """Roster row with the participant's attendance rate."""

    participant_id: str
    user_id: str
    status: str
    attended_sessions: int
    total_sessions: int
    attendance_rate: int

"""Request and response payloads for the HTTP API."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from seminar_attendance.domain.seminars import ParticipantStatus


class CheckinRequest(BaseModel):
    """Body of a check-in submission."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId", min_length=1)
    code: str = ""


class CheckinResponse(BaseModel):
    """Result of a check-in submission."""

    status: str
    message: str


class AttendanceCodeResponse(BaseModel):
    """Today's code for a session."""

    session_id: str
    code: str
    checkin_url: str
    valid_on: date


class AttendanceRateResponse(BaseModel):
    """Attendance percentage for a user over a set of sessions."""

    user_id: str
    session_count: int
    attendance_rate: float


class SessionSummaryResponse(BaseModel):
    """Attendance totals for a session."""

    session_id: str
    total_participants: int
    present: int
    attendance_rate: float


class ParticipantRow(BaseModel):
    """Roster entry with attendance."""

    id: str
    user_id: str
    status: str
    attended_sessions: int
    total_sessions: int
    attendance_rate: int


class ParticipantStatusUpdate(BaseModel):
    """Body of a participant status change."""

    status: ParticipantStatus


class AttendanceRecordRow(BaseModel):
    """Serialized attendance record."""

    session_id: str
    user_id: str
    status: str
    checked_at: str

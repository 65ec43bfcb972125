"""Daily attendance code derivation and issuance.

The code is ``f"{session_id}-{YYYY-MM-DD}"`` truncated to eight characters and
upper-cased. It carries no secret and is guessable by anyone who knows the
session id and the date. For UUID session ids only the id prefix survives the
truncation, so the code stays the same from day to day.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol
from urllib.parse import quote, urlencode
from zoneinfo import ZoneInfo

from seminar_attendance.domain.attendance import AttendanceCode
from seminar_attendance.domain.errors import AccessDeniedError, SessionNotFoundError
from seminar_attendance.domain.models import UserIdentity
from seminar_attendance.services.registry import Registry, require_seminar_owner

CODE_LENGTH = 8


class QrRenderer(Protocol):
    """Interface for turning a check-in URL into an image."""

    def render_png(self, data: str) -> bytes:
        """Return PNG bytes encoding the data."""


def derive_code(session_id: str, day: date) -> str:
    """Return the attendance code for a session on a calendar day."""
    return f"{session_id}-{day.isoformat()}"[:CODE_LENGTH].upper()


def normalize_code(code: str | None) -> str:
    """Normalize a submitted code for comparison."""
    return (code or "").strip().upper()


def build_checkin_url(base_origin: str, session_id: str, code: str) -> str:
    """Build the absolute check-in URL encoded into the QR image."""
    origin = base_origin.rstrip("/")
    query = urlencode({"code": code})
    return f"{origin}/attendance/{quote(str(session_id), safe='')}?{query}"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class CodeService:
    """Issues attendance codes for sessions in the configured timezone."""

    registry: Registry
    base_url: str
    timezone_name: str = "UTC"
    clock: Callable[[], datetime] = field(default=_utc_now)

    def today(self) -> date:
        """Return the current calendar date in the attendance timezone."""
        return self.clock().astimezone(ZoneInfo(self.timezone_name)).date()

    def expected_code(self, session_id: str) -> str:
        """Return the code accepted for the session today."""
        return derive_code(session_id, self.today())

    def issue(self, session_id: str) -> AttendanceCode:
        """Return today's code and check-in URL for a session."""
        valid_on = self.today()
        code = derive_code(session_id, valid_on)
        return AttendanceCode(
            session_id=session_id,
            code=code,
            checkin_url=build_checkin_url(self.base_url, session_id, code),
            valid_on=valid_on,
        )

    def issue_for(self, identity: UserIdentity, session_id: str) -> AttendanceCode:
        """Issue a code after checking the caller owns the session's seminar.

        Raises:
            SessionNotFoundError: If the session does not exist.
            AccessDeniedError: If the caller is not the seminar owner or an admin.
        """
        session = self.registry.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        seminar = self.registry.get_seminar(session.seminar_id)
        if seminar is None:
            raise AccessDeniedError()
        require_seminar_owner(identity, seminar)
        return self.issue(session.id)

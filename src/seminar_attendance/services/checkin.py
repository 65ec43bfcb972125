"""Attendance check-in validation."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from seminar_attendance.domain.attendance import (
    AttendanceRecord,
    AttendanceStatus,
    CheckinOutcome,
    CheckinResult,
)
from seminar_attendance.domain.errors import DuplicateRecordError
from seminar_attendance.services.attendance import AttendanceLedger
from seminar_attendance.services.codes import CodeService, normalize_code
from seminar_attendance.services.directory import Directory
from seminar_attendance.services.registry import Registry

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class CheckinService:
    """Decides whether a submitted code results in a recorded attendance.

    Checks run in a fixed order and stop at the first failure: caller
    identity, code, session, approved membership, existing record. The ledger
    append is the only write and happens after every check has passed.
    """

    directory: Directory
    registry: Registry
    ledger: AttendanceLedger
    codes: CodeService
    clock: Callable[[], datetime] = field(default=_utc_now)

    def submit(
        self, token: str | None, session_id: str, code: str | None
    ) -> CheckinResult:
        """Validate a check-in attempt and record it on success."""
        identity = self.directory.authenticate(token) if token else None
        if identity is None:
            return self._result(CheckinOutcome.UNAUTHENTICATED, session_id)
        user_id = identity.user_id

        if normalize_code(code) != self.codes.expected_code(session_id):
            return self._result(CheckinOutcome.INVALID_CODE, session_id, user_id)

        session = self.registry.get_session(session_id)
        if session is None:
            return self._result(CheckinOutcome.SESSION_NOT_FOUND, session_id, user_id)

        participant = self.registry.get_participant(session.seminar_id, user_id)
        if participant is None or not participant.is_approved:
            return self._result(CheckinOutcome.NOT_A_PARTICIPANT, session_id, user_id)

        if self.ledger.record_exists(session.id, user_id):
            return self._result(
                CheckinOutcome.ALREADY_CHECKED_IN, session_id, user_id
            )

        try:
            record = self.ledger.append(
                AttendanceRecord(
                    session_id=session.id,
                    user_id=user_id,
                    status=AttendanceStatus.PRESENT,
                    checked_at=self.clock(),
                )
            )
        except DuplicateRecordError:
            return self._result(
                CheckinOutcome.ALREADY_CHECKED_IN, session_id, user_id
            )
        return self._result(CheckinOutcome.SUCCESS, session_id, user_id, record)

    def _result(
        self,
        outcome: CheckinOutcome,
        session_id: str,
        user_id: str | None = None,
        record: AttendanceRecord | None = None,
    ) -> CheckinResult:
        logger.info(
            "Check-in %s",
            outcome.value,
            extra={"session_id": session_id, "user_id": user_id},
        )
        return CheckinResult(
            outcome=outcome, session_id=session_id, user_id=user_id, record=record
        )

"""Seminar membership: joining, withdrawing and owner roster management."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from seminar_attendance.domain.attendance import ParticipantAttendance
from seminar_attendance.domain.errors import (
    AlreadyJoinedError,
    ParticipantNotFoundError,
    SeminarFullError,
    SeminarNotFoundError,
)
from seminar_attendance.domain.models import UserIdentity
from seminar_attendance.domain.seminars import (
    Participant,
    ParticipantStatus,
    Seminar,
)
from seminar_attendance.services.attendance import (
    AttendanceLedger,
    attended_sessions,
    calculate_rate,
)
from seminar_attendance.services.registry import Registry, require_seminar_owner

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ParticipantService:
    """Manages seminar membership and the owner's roster view."""

    registry: Registry
    ledger: AttendanceLedger
    clock: Callable[[], datetime] = field(default=_utc_now)

    def list_roster(
        self, identity: UserIdentity, seminar_id: str
    ) -> list[ParticipantAttendance]:
        """Return every participant with their rate over the seminar's sessions."""
        self._owned_seminar(identity, seminar_id)
        participants = self.registry.list_participants(seminar_id)
        sessions = self.registry.list_sessions(seminar_id)
        session_ids = {session.id for session in sessions}
        user_ids = [participant.user_id for participant in participants]
        records = (
            self.ledger.list_records(sorted(session_ids), user_ids)
            if session_ids and participants
            else []
        )
        roster = []
        for participant in participants:
            attended = attended_sessions(records, participant.user_id, session_ids)
            rate = calculate_rate(records, participant.user_id, session_ids)
            roster.append(
                ParticipantAttendance(
                    participant_id=participant.id,
                    user_id=participant.user_id,
                    status=participant.status.value,
                    attended_sessions=len(attended),
                    total_sessions=len(session_ids),
                    attendance_rate=_round_half_up(rate),
                )
            )
        return roster

    def update_status(
        self,
        identity: UserIdentity,
        seminar_id: str,
        participant_id: str,
        status: ParticipantStatus,
    ) -> Participant:
        """Set a participant's status, stamping approval details when approved."""
        self._owned_seminar(identity, seminar_id)
        approved = status is ParticipantStatus.APPROVED
        updated = self.registry.update_participant_status(
            seminar_id,
            participant_id,
            status,
            approved_by=identity.user_id if approved else None,
            approved_at=self.clock() if approved else None,
        )
        if updated is None:
            raise ParticipantNotFoundError(participant_id)
        return updated

    def join(self, identity: UserIdentity, seminar_id: str) -> Participant:
        """Add the caller to a seminar as an approved participant.

        Raises:
            SeminarNotFoundError: If the seminar does not exist.
            AlreadyJoinedError: If the caller already has a membership row.
            SeminarFullError: If approved participants fill the seminar.
        """
        seminar = self.registry.get_seminar(seminar_id)
        if seminar is None:
            raise SeminarNotFoundError(seminar_id)
        if self.registry.get_participant(seminar.id, identity.user_id) is not None:
            raise AlreadyJoinedError(seminar.id)
        if seminar.max_participants:
            approved = [
                participant
                for participant in self.registry.list_participants(seminar.id)
                if participant.is_approved
            ]
            if len(approved) >= seminar.max_participants:
                raise SeminarFullError(seminar.id)
        now = self.clock()
        participant = self.registry.insert_participant(
            seminar.id,
            identity.user_id,
            ParticipantStatus.APPROVED,
            applied_at=now,
            approved_at=now,
        )
        logger.info(
            "Participant joined",
            extra={"seminar_id": seminar.id, "user_id": identity.user_id},
        )
        return participant

    def withdraw(self, identity: UserIdentity, seminar_id: str) -> None:
        """Remove the caller's own membership. Attendance records are kept."""
        participant = self.registry.get_participant(seminar_id, identity.user_id)
        if participant is None:
            raise ParticipantNotFoundError(identity.user_id)
        self.registry.delete_participant(seminar_id, participant.id)
        logger.info(
            "Participant withdrew",
            extra={"seminar_id": seminar_id, "user_id": identity.user_id},
        )

    def remove(
        self, identity: UserIdentity, seminar_id: str, participant_id: str
    ) -> None:
        """Delete a participant from a seminar the caller owns."""
        self._owned_seminar(identity, seminar_id)
        if not self.registry.delete_participant(seminar_id, participant_id):
            raise ParticipantNotFoundError(participant_id)
        logger.info(
            "Participant removed",
            extra={"seminar_id": seminar_id, "participant_id": participant_id},
        )

    def _owned_seminar(self, identity: UserIdentity, seminar_id: str) -> Seminar:
        seminar = self.registry.get_seminar(seminar_id)
        if seminar is None:
            raise SeminarNotFoundError(seminar_id)
        require_seminar_owner(identity, seminar)
        return seminar


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)

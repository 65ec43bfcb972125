"""Tests for seminar membership and roster management."""

import pytest

from seminar_attendance.domain.attendance import AttendanceRecord, AttendanceStatus
from seminar_attendance.domain.errors import (
    AccessDeniedError,
    AlreadyJoinedError,
    ParticipantNotFoundError,
    SeminarFullError,
    SeminarNotFoundError,
)
from seminar_attendance.domain.models import UserIdentity, UserRole
from seminar_attendance.domain.seminars import ParticipantStatus
from seminar_attendance.services.participants import ParticipantService
from tests.conftest import (
    FIXED_NOW,
    OWNER_ID,
    SEMINAR_ID,
    STUDENT_ID,
    InMemoryAttendanceLedger,
    InMemoryRegistry,
    fixed_clock,
)

OWNER = UserIdentity(user_id=OWNER_ID, role=UserRole.INSTRUCTOR)


@pytest.fixture
def service(
    registry: InMemoryRegistry, ledger: InMemoryAttendanceLedger
) -> ParticipantService:
    return ParticipantService(registry=registry, ledger=ledger, clock=fixed_clock)


def _check_in(ledger: InMemoryAttendanceLedger, session_id: str, user_id: str) -> None:
    ledger.append(
        AttendanceRecord(
            session_id=session_id,
            user_id=user_id,
            status=AttendanceStatus.PRESENT,
            checked_at=FIXED_NOW,
        )
    )


def test_roster_rounds_rates_half_up(
    service: ParticipantService,
    registry: InMemoryRegistry,
    ledger: InMemoryAttendanceLedger,
) -> None:
    registry.add_session("S2", SEMINAR_ID, session_number=2)
    registry.add_session("S3", SEMINAR_ID, session_number=3)
    registry.add_participant(SEMINAR_ID, "student-2")
    _check_in(ledger, "S1", STUDENT_ID)
    _check_in(ledger, "S1", "student-2")
    _check_in(ledger, "S2", "student-2")

    roster = {row.user_id: row for row in service.list_roster(OWNER, SEMINAR_ID)}

    assert roster[STUDENT_ID].attendance_rate == 33
    assert roster[STUDENT_ID].attended_sessions == 1
    assert roster["student-2"].attendance_rate == 67
    assert roster["student-2"].total_sessions == 3


def test_roster_without_sessions_has_zero_rates(
    service: ParticipantService, registry: InMemoryRegistry
) -> None:
    registry.sessions.clear()

    roster = service.list_roster(OWNER, SEMINAR_ID)

    assert [row.attendance_rate for row in roster] == [0]
    assert roster[0].status == "approved"


def test_roster_requires_owner(service: ParticipantService) -> None:
    with pytest.raises(AccessDeniedError):
        service.list_roster(UserIdentity(user_id=STUDENT_ID), SEMINAR_ID)


def test_roster_unknown_seminar(service: ParticipantService) -> None:
    with pytest.raises(SeminarNotFoundError):
        service.list_roster(OWNER, "missing")


def test_approve_stamps_approver(
    service: ParticipantService, registry: InMemoryRegistry
) -> None:
    pending = registry.add_participant(
        SEMINAR_ID, "student-2", ParticipantStatus.PENDING
    )

    updated = service.update_status(
        OWNER, SEMINAR_ID, pending.id, ParticipantStatus.APPROVED
    )

    assert updated.status is ParticipantStatus.APPROVED
    assert updated.approved_by == OWNER_ID
    assert updated.approved_at == FIXED_NOW


def test_reject_clears_approval(
    service: ParticipantService, registry: InMemoryRegistry
) -> None:
    participant = registry.get_participant(SEMINAR_ID, STUDENT_ID)
    assert participant is not None

    updated = service.update_status(
        OWNER, SEMINAR_ID, participant.id, ParticipantStatus.REJECTED
    )

    assert updated.status is ParticipantStatus.REJECTED
    assert updated.approved_by is None


def test_update_unknown_participant(service: ParticipantService) -> None:
    with pytest.raises(ParticipantNotFoundError):
        service.update_status(OWNER, SEMINAR_ID, "nope", ParticipantStatus.APPROVED)


def test_update_requires_owner(
    service: ParticipantService, registry: InMemoryRegistry
) -> None:
    participant = registry.get_participant(SEMINAR_ID, STUDENT_ID)
    assert participant is not None
    with pytest.raises(AccessDeniedError):
        service.update_status(
            UserIdentity(user_id=STUDENT_ID),
            SEMINAR_ID,
            participant.id,
            ParticipantStatus.APPROVED,
        )


def test_join_adds_approved_participant(
    service: ParticipantService, registry: InMemoryRegistry
) -> None:
    joined = service.join(UserIdentity(user_id="student-2"), SEMINAR_ID)

    assert joined.status is ParticipantStatus.APPROVED
    assert joined.approved_at == FIXED_NOW
    assert registry.get_participant(SEMINAR_ID, "student-2") == joined


def test_join_twice_is_rejected(service: ParticipantService) -> None:
    with pytest.raises(AlreadyJoinedError):
        service.join(UserIdentity(user_id=STUDENT_ID), SEMINAR_ID)


def test_join_unknown_seminar(service: ParticipantService) -> None:
    with pytest.raises(SeminarNotFoundError):
        service.join(UserIdentity(user_id="student-2"), "missing")


def test_join_full_seminar_is_rejected(
    service: ParticipantService, registry: InMemoryRegistry
) -> None:
    registry.add_seminar("seminar-2", created_by=OWNER_ID, max_participants=1)
    registry.add_participant("seminar-2", "student-3")

    with pytest.raises(SeminarFullError):
        service.join(UserIdentity(user_id="student-2"), "seminar-2")
    assert registry.get_participant("seminar-2", "student-2") is None


def test_join_capacity_counts_only_approved(
    service: ParticipantService, registry: InMemoryRegistry
) -> None:
    registry.add_seminar("seminar-2", created_by=OWNER_ID, max_participants=1)
    registry.add_participant("seminar-2", "student-3", ParticipantStatus.PENDING)

    joined = service.join(UserIdentity(user_id="student-2"), "seminar-2")

    assert joined.seminar_id == "seminar-2"


def test_withdraw_removes_membership_and_keeps_attendance(
    service: ParticipantService,
    registry: InMemoryRegistry,
    ledger: InMemoryAttendanceLedger,
) -> None:
    _check_in(ledger, "S1", STUDENT_ID)

    service.withdraw(UserIdentity(user_id=STUDENT_ID), SEMINAR_ID)

    assert registry.get_participant(SEMINAR_ID, STUDENT_ID) is None
    assert ("S1", STUDENT_ID) in ledger.records


def test_withdraw_without_membership(service: ParticipantService) -> None:
    with pytest.raises(ParticipantNotFoundError):
        service.withdraw(UserIdentity(user_id="student-2"), SEMINAR_ID)


def test_owner_removes_participant(
    service: ParticipantService, registry: InMemoryRegistry
) -> None:
    service.remove(OWNER, SEMINAR_ID, f"participant-{STUDENT_ID}")

    assert registry.list_participants(SEMINAR_ID) == []


def test_remove_unknown_participant(service: ParticipantService) -> None:
    with pytest.raises(ParticipantNotFoundError):
        service.remove(OWNER, SEMINAR_ID, "nope")


def test_remove_requires_owner(
    service: ParticipantService, registry: InMemoryRegistry
) -> None:
    with pytest.raises(AccessDeniedError):
        service.remove(
            UserIdentity(user_id=STUDENT_ID), SEMINAR_ID, f"participant-{STUDENT_ID}"
        )
    assert registry.get_participant(SEMINAR_ID, STUDENT_ID) is not None

"""Shared test fixtures."""

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from seminar_attendance.config import Settings
from seminar_attendance.containers import AppContainer
from seminar_attendance.domain.attendance import AttendanceRecord
from seminar_attendance.domain.errors import AlreadyJoinedError, DuplicateRecordError
from seminar_attendance.domain.models import UserIdentity, UserRole
from seminar_attendance.domain.seminars import (
    Participant,
    ParticipantStatus,
    Seminar,
    SessionRecord,
)
from seminar_attendance.services.attendance import AttendanceLedger, AttendanceService
from seminar_attendance.services.checkin import CheckinService
from seminar_attendance.services.codes import CodeService, QrRenderer
from seminar_attendance.services.directory import Directory
from seminar_attendance.services.participants import ParticipantService
from seminar_attendance.services.registry import Registry

FIXED_NOW = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)

OWNER_ID = "owner-1"
STUDENT_ID = "student-1"
SEMINAR_ID = "seminar-1"
SESSION_ID = "S1"
SESSION_CODE = "S1-2024-"


def fixed_clock() -> datetime:
    return FIXED_NOW


@dataclass
class InMemoryDirectory(Directory):
    """In-memory token directory for tests."""

    tokens: dict[str, UserIdentity] = field(default_factory=dict)

    def add(self, token: str, user_id: str, role: UserRole = UserRole.STUDENT) -> None:
        self.tokens[token] = UserIdentity(user_id=user_id, role=role)

    def authenticate(self, token: str) -> UserIdentity | None:
        return self.tokens.get(token)


@dataclass
class InMemoryRegistry(Registry):
    """In-memory seminar registry for tests."""

    seminars: dict[str, Seminar] = field(default_factory=dict)
    sessions: dict[str, SessionRecord] = field(default_factory=dict)
    participants: dict[str, Participant] = field(default_factory=dict)

    def add_seminar(
        self, seminar_id: str, created_by: str, max_participants: int | None = None
    ) -> Seminar:
        seminar = Seminar(
            id=seminar_id,
            title="Seminar",
            created_by=created_by,
            max_participants=max_participants,
        )
        self.seminars[seminar_id] = seminar
        return seminar

    def add_session(
        self, session_id: str, seminar_id: str, session_number: int = 1
    ) -> SessionRecord:
        session = SessionRecord(
            id=session_id,
            seminar_id=seminar_id,
            session_number=session_number,
            title=f"Week {session_number}",
        )
        self.sessions[session_id] = session
        return session

    def add_participant(
        self,
        seminar_id: str,
        user_id: str,
        status: ParticipantStatus = ParticipantStatus.APPROVED,
    ) -> Participant:
        participant = Participant(
            id=f"participant-{user_id}",
            seminar_id=seminar_id,
            user_id=user_id,
            status=status,
        )
        self.participants[participant.id] = participant
        return participant

    def get_session(self, session_id: str) -> SessionRecord | None:
        return self.sessions.get(session_id)

    def get_seminar(self, seminar_id: str) -> Seminar | None:
        return self.seminars.get(seminar_id)

    def list_sessions(self, seminar_id: str) -> list[SessionRecord]:
        return sorted(
            (s for s in self.sessions.values() if s.seminar_id == seminar_id),
            key=lambda s: s.session_number,
        )

    def get_participant(self, seminar_id: str, user_id: str) -> Participant | None:
        for participant in self.participants.values():
            if participant.seminar_id == seminar_id and participant.user_id == user_id:
                return participant
        return None

    def list_participants(self, seminar_id: str) -> list[Participant]:
        return [p for p in self.participants.values() if p.seminar_id == seminar_id]

    def update_participant_status(
        self,
        seminar_id: str,
        participant_id: str,
        status: ParticipantStatus,
        approved_by: str | None,
        approved_at: datetime | None,
    ) -> Participant | None:
        current = self.participants.get(participant_id)
        if current is None or current.seminar_id != seminar_id:
            return None
        updated = Participant(
            id=current.id,
            seminar_id=current.seminar_id,
            user_id=current.user_id,
            status=status,
            approved_at=approved_at,
            approved_by=approved_by,
        )
        self.participants[participant_id] = updated
        return updated

    def insert_participant(
        self,
        seminar_id: str,
        user_id: str,
        status: ParticipantStatus,
        applied_at: datetime,
        approved_at: datetime | None,
    ) -> Participant:
        if self.get_participant(seminar_id, user_id) is not None:
            raise AlreadyJoinedError(seminar_id)
        participant = Participant(
            id=f"participant-{user_id}",
            seminar_id=seminar_id,
            user_id=user_id,
            status=status,
            approved_at=approved_at,
        )
        self.participants[participant.id] = participant
        return participant

    def delete_participant(self, seminar_id: str, participant_id: str) -> bool:
        current = self.participants.get(participant_id)
        if current is None or current.seminar_id != seminar_id:
            return False
        del self.participants[participant_id]
        return True


@dataclass
class InMemoryAttendanceLedger(AttendanceLedger):
    """In-memory ledger with an atomic insert-if-absent append."""

    records: dict[tuple[str, str], AttendanceRecord] = field(default_factory=dict)
    append_attempts: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def record_exists(self, session_id: str, user_id: str) -> bool:
        return (session_id, user_id) in self.records

    def append(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            self.append_attempts += 1
            key = (record.session_id, record.user_id)
            if key in self.records:
                raise DuplicateRecordError(record.session_id, record.user_id)
            self.records[key] = record
        return record

    def list_records(
        self, session_ids: Iterable[str], user_ids: Iterable[str] | None = None
    ) -> list[AttendanceRecord]:
        sessions = set(session_ids)
        users = set(user_ids) if user_ids is not None else None
        return [
            record
            for record in self.records.values()
            if record.session_id in sessions
            and (users is None or record.user_id in users)
        ]

    def list_recent(self, limit: int) -> list[AttendanceRecord]:
        return sorted(
            self.records.values(), key=lambda record: record.checked_at, reverse=True
        )[:limit]


@dataclass
class FakeQrRenderer(QrRenderer):
    """Fake QR renderer that records rendered data."""

    rendered: list[str] = field(default_factory=list)

    def render_png(self, data: str) -> bytes:
        self.rendered.append(data)
        return b"\x89PNG\r\n\x1a\nfake"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        admin_token="admin-token",
        public_base_url="https://seminars.example.com",
    )


@pytest.fixture
def directory() -> InMemoryDirectory:
    directory = InMemoryDirectory()
    directory.add("owner-token", OWNER_ID, UserRole.INSTRUCTOR)
    directory.add("student-token", STUDENT_ID)
    return directory


@pytest.fixture
def registry() -> InMemoryRegistry:
    registry = InMemoryRegistry()
    registry.add_seminar(SEMINAR_ID, created_by=OWNER_ID)
    registry.add_session(SESSION_ID, SEMINAR_ID)
    registry.add_participant(SEMINAR_ID, STUDENT_ID)
    return registry


@pytest.fixture
def ledger() -> InMemoryAttendanceLedger:
    return InMemoryAttendanceLedger()


@pytest.fixture
def code_service(registry: InMemoryRegistry, settings: Settings) -> CodeService:
    return CodeService(
        registry=registry,
        base_url=settings.public_base_url,
        timezone_name=settings.attendance_timezone,
        clock=fixed_clock,
    )


@pytest.fixture
def checkin_service(
    directory: InMemoryDirectory,
    registry: InMemoryRegistry,
    ledger: InMemoryAttendanceLedger,
    code_service: CodeService,
) -> CheckinService:
    return CheckinService(
        directory=directory,
        registry=registry,
        ledger=ledger,
        codes=code_service,
        clock=fixed_clock,
    )


@pytest.fixture
def container(
    settings: Settings,
    directory: InMemoryDirectory,
    registry: InMemoryRegistry,
    ledger: InMemoryAttendanceLedger,
    code_service: CodeService,
    checkin_service: CheckinService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        directory=directory,
        code_service=code_service,
        qr_renderer=FakeQrRenderer(),
        checkin_service=checkin_service,
        attendance_service=AttendanceService(ledger=ledger, registry=registry),
        participant_service=ParticipantService(
            registry=registry, ledger=ledger, clock=fixed_clock
        ),
        close_resources=close_resources,
    )

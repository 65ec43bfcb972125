"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from seminar_attendance.adapters.qr_renderer import QrcodePngRenderer
from seminar_attendance.adapters.supabase_attendance_ledger import (
    SupabaseAttendanceLedger,
)
from seminar_attendance.adapters.supabase_directory import SupabaseDirectory
from seminar_attendance.adapters.supabase_registry import SupabaseRegistry
from seminar_attendance.config import Settings
from seminar_attendance.services.attendance import AttendanceService
from seminar_attendance.services.checkin import CheckinService
from seminar_attendance.services.codes import CodeService, QrRenderer
from seminar_attendance.services.directory import Directory
from seminar_attendance.services.participants import ParticipantService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    directory: Directory
    code_service: CodeService
    qr_renderer: QrRenderer
    checkin_service: CheckinService
    attendance_service: AttendanceService
    participant_service: ParticipantService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    directory = SupabaseDirectory(supabase_client)
    registry = SupabaseRegistry(supabase_client)
    ledger = SupabaseAttendanceLedger(supabase_client)
    code_service = CodeService(
        registry=registry,
        base_url=resolved_settings.public_base_url,
        timezone_name=resolved_settings.attendance_timezone,
    )
    checkin_service = CheckinService(
        directory=directory,
        registry=registry,
        ledger=ledger,
        codes=code_service,
    )
    attendance_service = AttendanceService(ledger=ledger, registry=registry)
    participant_service = ParticipantService(registry=registry, ledger=ledger)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        directory=directory,
        code_service=code_service,
        qr_renderer=QrcodePngRenderer(),
        checkin_service=checkin_service,
        attendance_service=attendance_service,
        participant_service=participant_service,
        close_resources=close_resources,
    )

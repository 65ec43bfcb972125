"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from seminar_attendance.api.models import AttendanceRecordRow

if TYPE_CHECKING:
    from seminar_attendance.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/attendance", dependencies=[Depends(require_admin)])
async def recent_attendance(
    request: Request, limit: Annotated[int, Query(ge=1, le=500)] = 50
) -> dict[str, list[AttendanceRecordRow]]:
    """Return the most recent check-ins."""
    container: AppContainer = request.app.state.container
    records = container.attendance_service.list_recent(limit)
    return {
        "attendance": [
            AttendanceRecordRow(
                session_id=record.session_id,
                user_id=record.user_id,
                status=record.status.value,
                checked_at=record.checked_at.isoformat(),
            )
            for record in records
        ]
    }

"""Attendance check-in and code endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from seminar_attendance.api.dependencies import (
    get_access_token,
    get_container,
    require_identity,
)
from seminar_attendance.api.models import (
    AttendanceCodeResponse,
    AttendanceRateResponse,
    CheckinRequest,
    CheckinResponse,
    SessionSummaryResponse,
)
from seminar_attendance.domain.attendance import CheckinOutcome
from seminar_attendance.domain.models import UserIdentity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["attendance"])

_OUTCOME_RESPONSES: dict[CheckinOutcome, tuple[int, str]] = {
    CheckinOutcome.SUCCESS: (status.HTTP_200_OK, "Check-in complete."),
    CheckinOutcome.ALREADY_CHECKED_IN: (
        status.HTTP_200_OK,
        "You have already checked in to this session.",
    ),
    CheckinOutcome.INVALID_CODE: (
        status.HTTP_400_BAD_REQUEST,
        "Invalid attendance code.",
    ),
    CheckinOutcome.UNAUTHENTICATED: (
        status.HTTP_401_UNAUTHORIZED,
        "Login required.",
    ),
    CheckinOutcome.NOT_A_PARTICIPANT: (
        status.HTTP_403_FORBIDDEN,
        "You are not an approved participant of this seminar.",
    ),
    CheckinOutcome.SESSION_NOT_FOUND: (
        status.HTTP_404_NOT_FOUND,
        "Session not found.",
    ),
}

Identity = Annotated[UserIdentity, Depends(require_identity)]


@router.post("/check", response_model=CheckinResponse)
async def submit_checkin(
    payload: CheckinRequest,
    request: Request,
    token: str | None = Depends(get_access_token),
) -> JSONResponse:
    """Check the caller in to a session with today's code."""
    container = get_container(request)
    try:
        result = container.checkin_service.submit(
            token, payload.session_id, payload.code
        )
    except Exception:
        logger.exception(
            "Attendance check-in failed", extra={"session_id": payload.session_id}
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "error",
                "message": "Check-in failed. Please try again later.",
            },
        )
    status_code, message = _OUTCOME_RESPONSES[result.outcome]
    return JSONResponse(
        status_code=status_code,
        content={"status": result.outcome.value, "message": message},
    )


@router.get("/sessions/{session_id}/code", response_model=AttendanceCodeResponse)
async def attendance_code(
    session_id: str, request: Request, identity: Identity
) -> AttendanceCodeResponse:
    """Return today's attendance code and check-in URL for a session."""
    issued = get_container(request).code_service.issue_for(identity, session_id)
    return AttendanceCodeResponse(
        session_id=issued.session_id,
        code=issued.code,
        checkin_url=issued.checkin_url,
        valid_on=issued.valid_on,
    )


@router.get("/sessions/{session_id}/qr.png")
async def attendance_qr(
    session_id: str, request: Request, identity: Identity
) -> Response:
    """Return today's check-in URL as a PNG QR code."""
    container = get_container(request)
    issued = container.code_service.issue_for(identity, session_id)
    image = container.qr_renderer.render_png(issued.checkin_url)
    return Response(
        content=image,
        media_type="image/png",
        headers={
            "Content-Disposition": (
                f'attachment; filename="attendance-qr-{issued.session_id}.png"'
            )
        },
    )


@router.get("/sessions/{session_id}/summary", response_model=SessionSummaryResponse)
async def session_summary(
    session_id: str, request: Request, identity: Identity
) -> SessionSummaryResponse:
    """Return present and approved counts for a session."""
    summary = get_container(request).attendance_service.session_summary(
        identity, session_id
    )
    return SessionSummaryResponse(
        session_id=summary.session_id,
        total_participants=summary.total_participants,
        present=summary.present,
        attendance_rate=summary.attendance_rate,
    )


@router.get("/users/{user_id}/rate", response_model=AttendanceRateResponse)
async def attendance_rate(
    user_id: str,
    request: Request,
    identity: Identity,
    session_id: Annotated[list[str], Query()] = [],  # noqa: B006
) -> AttendanceRateResponse:
    """Return the user's attendance percentage over the given sessions."""
    session_ids = set(session_id)
    rate = get_container(request).attendance_service.attendance_rate_for(
        identity, user_id, session_ids
    )
    return AttendanceRateResponse(
        user_id=user_id, session_count=len(session_ids), attendance_rate=rate
    )

"""Seminar participant management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from seminar_attendance.api.dependencies import get_container, require_identity
from seminar_attendance.api.models import ParticipantRow, ParticipantStatusUpdate
from seminar_attendance.domain.models import UserIdentity

router = APIRouter(prefix="/seminars", tags=["seminars"])

Identity = Annotated[UserIdentity, Depends(require_identity)]


@router.get("/{seminar_id}/participants")
async def list_participants(
    seminar_id: str, request: Request, identity: Identity
) -> dict[str, list[ParticipantRow]]:
    """Return the seminar's participants with their attendance rates."""
    roster = get_container(request).participant_service.list_roster(
        identity, seminar_id
    )
    return {
        "participants": [
            ParticipantRow(
                id=row.participant_id,
                user_id=row.user_id,
                status=row.status,
                attended_sessions=row.attended_sessions,
                total_sessions=row.total_sessions,
                attendance_rate=row.attendance_rate,
            )
            for row in roster
        ]
    }


@router.put("/{seminar_id}/participants/{participant_id}")
async def update_participant(
    seminar_id: str,
    participant_id: str,
    payload: ParticipantStatusUpdate,
    request: Request,
    identity: Identity,
) -> dict[str, str]:
    """Approve, reject or otherwise change a participant's status."""
    participant = get_container(request).participant_service.update_status(
        identity, seminar_id, participant_id, payload.status
    )
    return {"id": participant.id, "status": participant.status.value}


@router.delete(
    "/{seminar_id}/participants/{participant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_participant(
    seminar_id: str, participant_id: str, request: Request, identity: Identity
) -> Response:
    """Remove a participant from the seminar."""
    get_container(request).participant_service.remove(
        identity, seminar_id, participant_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{seminar_id}/join", status_code=status.HTTP_201_CREATED)
async def join_seminar(
    seminar_id: str, request: Request, identity: Identity
) -> dict[str, str]:
    """Join the seminar as the calling user."""
    participant = get_container(request).participant_service.join(
        identity, seminar_id
    )
    return {"id": participant.id, "status": participant.status.value}


@router.delete("/{seminar_id}/join", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw_from_seminar(
    seminar_id: str, request: Request, identity: Identity
) -> Response:
    """Withdraw the calling user from the seminar."""
    get_container(request).participant_service.withdraw(identity, seminar_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Domain models for seminars, their sessions and participants."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ParticipantStatus(Enum):
    """Membership state of a participant in a seminar."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


@dataclass(frozen=True)
class Seminar:
    """Minimal view of a seminar."""

    id: str
    title: str
    created_by: str
    max_participants: int | None = None


@dataclass(frozen=True)
class SessionRecord:
    """A scheduled meeting belonging to a seminar."""

    id: str
    seminar_id: str
    session_number: int
    title: str


@dataclass(frozen=True)
class Participant:
    """Membership record linking a user to a seminar."""

    id: str
    seminar_id: str
    user_id: str
    status: ParticipantStatus
    approved_at: datetime | None = None
    approved_by: str | None = None

    @property
    def is_approved(self) -> bool:
        return self.status is ParticipantStatus.APPROVED

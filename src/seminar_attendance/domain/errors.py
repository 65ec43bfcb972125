"""Domain error codes for seminar attendance."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    ACCESS_DENIED = "ACCESS_DENIED"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SEMINAR_NOT_FOUND = "SEMINAR_NOT_FOUND"
    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    ALREADY_JOINED = "ALREADY_JOINED"
    SEMINAR_FULL = "SEMINAR_FULL"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class UnauthenticatedError(DomainError):
    """Raised when the caller could not be identified."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.UNAUTHENTICATED,
            message="Login required",
        )


class AccessDeniedError(DomainError):
    """Raised when the caller may not act on a seminar."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ACCESS_DENIED,
            message="You do not have permission for this seminar",
        )


class SessionNotFoundError(DomainError):
    """Raised when a session does not exist."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Session not found",
        )
        self.session_id = session_id


class SeminarNotFoundError(DomainError):
    """Raised when a seminar does not exist."""

    def __init__(self, seminar_id: str) -> None:
        super().__init__(
            code=ErrorCode.SEMINAR_NOT_FOUND,
            message="Seminar not found",
        )
        self.seminar_id = seminar_id


class ParticipantNotFoundError(DomainError):
    """Raised when a participant does not belong to the seminar."""

    def __init__(self, participant_id: str) -> None:
        super().__init__(
            code=ErrorCode.PARTICIPANT_NOT_FOUND,
            message="Participant not found",
        )
        self.participant_id = participant_id


class AlreadyJoinedError(DomainError):
    """Raised when a user applies to a seminar they already belong to."""

    def __init__(self, seminar_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_JOINED,
            message="You have already applied to this seminar",
        )
        self.seminar_id = seminar_id


class SeminarFullError(DomainError):
    """Raised when a seminar has no approved places left."""

    def __init__(self, seminar_id: str) -> None:
        super().__init__(
            code=ErrorCode.SEMINAR_FULL,
            message="The seminar is full",
        )
        self.seminar_id = seminar_id


class DuplicateRecordError(Exception):
    """Raised by a ledger when a (session, user) record already exists."""

    def __init__(self, session_id: str, user_id: str) -> None:
        super().__init__(f"Attendance already recorded for {session_id}/{user_id}")
        self.session_id = session_id
        self.user_id = user_id

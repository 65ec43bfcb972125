"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, Request

from seminar_attendance.config import parse_bearer_token
from seminar_attendance.domain.errors import UnauthenticatedError
from seminar_attendance.domain.models import UserIdentity

if TYPE_CHECKING:
    from seminar_attendance.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


def get_access_token(
    request: Request, authorization: str | None = Header(default=None)
) -> str | None:
    """Read the caller's token from the Authorization header or auth cookie."""
    token = parse_bearer_token(authorization)
    if token:
        return token
    container = get_container(request)
    return request.cookies.get(container.settings.auth_cookie_name) or None


def require_identity(
    request: Request, token: str | None = Depends(get_access_token)
) -> UserIdentity:
    """Resolve the caller or fail with a login-required error."""
    if not token:
        raise UnauthenticatedError()
    identity = get_container(request).directory.authenticate(token)
    if identity is None:
        raise UnauthenticatedError()
    return identity

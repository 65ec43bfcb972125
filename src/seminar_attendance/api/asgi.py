"""ASGI entrypoint for the seminar attendance API."""

from seminar_attendance.api.app import create_app
from seminar_attendance.containers import build_container

app = create_app(build_container())

"""Identifier checks for uuid-typed Supabase columns."""

from uuid import UUID


def is_uuid(value: str) -> bool:
    """Return true when the value parses as a UUID.

    Postgres rejects malformed values for uuid columns, so adapters skip
    queries for them.
    """
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True

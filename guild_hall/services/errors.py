"""Error taxonomy shared by the store, the gateways and the HTTP layer."""

from __future__ import annotations


class GuildHallError(Exception):
    """Base exception carrying the HTTP status the error maps to."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(GuildHallError):
    """Malformed body or missing required fields."""

    status_code = 400


class NotFoundError(GuildHallError):
    status_code = 404


class ConflictError(GuildHallError):
    status_code = 409


class InvalidSessionIdError(InvalidRequestError):
    """Session identifier that could escape the storage root."""

    def __init__(self, session_id: str):
        super().__init__(f"Invalid session id: {session_id!r}")
        self.session_id = session_id


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: str):
        super().__init__("Session not found")
        self.session_id = session_id


class SessionConflictError(ConflictError):
    pass


__all__ = [
    "GuildHallError",
    "InvalidRequestError",
    "NotFoundError",
    "ConflictError",
    "InvalidSessionIdError",
    "SessionNotFoundError",
    "SessionConflictError",
]

"""AWS STS integration for mfasession."""

from .sessions import SessionHandle, assume_role, get_session_token, session_from_credentials

__all__ = [
    "SessionHandle",
    "assume_role",
    "get_session_token",
    "session_from_credentials",
]

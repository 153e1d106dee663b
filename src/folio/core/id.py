"""ID Generation.

ULID-based identifiers with type prefixes so log lines read well
(``sess_01J…`` for preview sessions, ``req_01J…`` for one-shot requests).
"""

from typing import NewType

from ulid import ULID

SessionID = NewType("SessionID", str)
"""Live preview session identifier"""

RequestID = NewType("RequestID", str)
"""One-shot preview/render request identifier"""


class Prefix:
    """ID prefix constants."""

    SESSION = "sess"
    REQUEST = "req"


def _prefixed(prefix: str) -> str:
    return f"{prefix}_{ULID()}"


def new_session_id() -> SessionID:
    """Generate new preview session ID."""
    return SessionID(_prefixed(Prefix.SESSION))


def new_request_id() -> RequestID:
    """Generate new request ID."""
    return RequestID(_prefixed(Prefix.REQUEST))


__all__ = [
    "SessionID",
    "RequestID",
    "Prefix",
    "new_session_id",
    "new_request_id",
]

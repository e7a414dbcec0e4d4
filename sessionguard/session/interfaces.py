"""Collaborator protocols consumed by the session manager.

The manager never touches HTTP or storage directly; it talks to a per-request
store handle, a cookie transport and a request identity source. Swap any of
them without touching the validation logic.
"""
from typing import Any, Dict, Optional, Protocol


class SessionBackend(Protocol):
    """Persistent record storage keyed by session identifier."""

    save_path: str

    def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        ...

    def save(self, session_id: str, data: Dict[str, Any], ttl_seconds: int) -> None:
        ...

    def delete(self, session_id: str) -> None:
        ...

    def exists(self, session_id: str) -> bool:
        ...

    def available(self) -> bool:
        ...

    def cleanup_expired(self) -> int:
        ...


class CookieTransport(Protocol):
    """Reads and writes the session cookie for the current request."""

    def configure_cookie_params(
        self,
        lifetime: int,
        path: str,
        domain: str,
        secure: bool,
        http_only: bool,
        same_site: str,
    ) -> None:
        ...

    def read_cookie(self, name: str) -> Optional[str]:
        ...

    def read_query(self, name: str) -> Optional[str]:
        ...

    def has_cookie(self, name: str) -> bool:
        """
        True if the client presented the cookie, or one was issued earlier
        in this response.
        """
        ...

    def send_session_cookie(self, name: str, value: str) -> None:
        ...

    def expire_cookie(
        self,
        name: str,
        path: str,
        domain: str,
        secure: bool,
        http_only: bool,
        same_site: str,
    ) -> None:
        ...


class RequestIdentity(Protocol):
    """Clock plus the client fingerprint of the current request."""

    def current_user_agent(self) -> str:
        ...

    def current_client_address(self) -> str:
        ...

    def now(self) -> int:
        """Seconds since the epoch."""
        ...

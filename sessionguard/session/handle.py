"""Per-request session store handle.

A handle is opened at request start, owns the session record for the
duration of the request and flushes it back to the backend on close. There
is no process-wide session: every request gets its own handle.
"""

import re
import secrets
from typing import Any, Dict, Optional

from sessionguard.obs.context import session_id_var
from sessionguard.obs.logger import log_event
from sessionguard.obs.metrics import inc_counter
from sessionguard.session.errors import SessionUnavailableError
from sessionguard.session.interfaces import SessionBackend
from sessionguard.types import SessionStatus

# Same alphabet as secrets.token_urlsafe; anything else is never adopted
_VALID_ID = re.compile(r"^[A-Za-z0-9_-]{22,256}$")


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def is_valid_session_id(value: Optional[str]) -> bool:
    return bool(value) and _VALID_ID.match(value) is not None


class SessionHandle:
    def __init__(self, backend: SessionBackend, cookie_name: str = "SESSIONID"):
        self.backend = backend
        self._cookie_name = cookie_name
        self._id = ""
        self._record: Dict[str, Any] = {}
        self._active = False
        # One availability probe per request handle
        self._available: Optional[bool] = None

        self.strict_mode = True
        self.max_lifetime = 86400
        self.cookie_only = True

    def __enter__(self) -> "SessionHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            # A failed request must not persist whatever state it left behind
            self.abandon()
            return
        self.close()

    @property
    def record(self) -> Dict[str, Any]:
        return self._record

    def _backend_available(self) -> bool:
        if self._available is None:
            self._available = self.backend.available()
        return self._available

    def configure(self, strict_mode: bool, max_lifetime: int, cookie_only: bool) -> None:
        self.strict_mode = strict_mode
        self.max_lifetime = max_lifetime
        self.cookie_only = cookie_only

    def status(self) -> SessionStatus:
        if self._active:
            return SessionStatus.ACTIVE
        if not self._backend_available():
            return SessionStatus.DISABLED
        return SessionStatus.INACTIVE

    def start(self, cookie_id: Optional[str] = None, query_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Bind to a record and return it.

        The client's cookie wins; the query string is only consulted when
        cookie-only transport is off. A candidate that the backend knows is
        resumed. An unknown candidate is adopted only outside strict mode,
        otherwise a fresh identifier is issued.
        """
        if self._active:
            return self._record
        if not self._backend_available():
            raise SessionUnavailableError(f"session store at {self.backend.save_path} is unavailable")

        candidate = cookie_id
        if not candidate and not self.cookie_only:
            candidate = query_id

        record = self.backend.load(candidate) if is_valid_session_id(candidate) else None
        if record is not None:
            self._id = candidate
            self._record = record
            resumed = True
        else:
            if candidate and (self.strict_mode or not is_valid_session_id(candidate)):
                log_event("session_id_rejected", level="WARNING", session_id=candidate, strict=self.strict_mode)
                candidate = None
            self._id = candidate or new_session_id()
            self._record = {}
            resumed = False

        self._active = True
        session_id_var.set(self._id)
        inc_counter("session_starts_total", {"resumed": str(resumed).lower()})
        log_event("session_started", session_id=self._id, resumed=resumed)
        return self._record

    def unset_all(self) -> None:
        self._record.clear()

    def destroy_session(self) -> bool:
        """Delete the record from the backend and leave the handle inactive."""
        if not self._active:
            return False
        self.backend.delete(self._id)
        log_event("session_destroyed", session_id=self._id)
        self._id = ""
        self._active = False
        session_id_var.set(None)
        return True

    def regenerate_id(self, delete_old: bool = True) -> bool:
        """Move the current record under a fresh identifier."""
        if not self._active:
            return False
        old_id = self._id
        if delete_old:
            self.backend.delete(old_id)
        self._id = new_session_id()
        session_id_var.set(self._id)
        inc_counter("session_regenerations_total")
        log_event("session_regenerated", old_session_id=old_id, new_session_id=self._id)
        return True

    def current_id(self) -> str:
        return self._id

    def cookie_name(self) -> str:
        return self._cookie_name

    def save_path(self) -> str:
        return self.backend.save_path

    def close(self) -> None:
        """Flush the record and release the handle; safe to call twice."""
        if not self._active:
            return
        self.backend.save(self._id, self._record, self.max_lifetime)
        self._active = False

    def abandon(self) -> None:
        """Release the handle without writing the record back."""
        if self._active:
            log_event("session_abandoned", level="WARNING", session_id=self._id)
        self._active = False

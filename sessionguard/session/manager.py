"""Session manager: binds a request to a validated session record.

Construction runs the whole validation pass in order: start the store,
enforce the inactivity timeout, check the client fingerprint and regenerate
the identifier on first use. Timeout and fingerprint violations are answered
with a silent full reset, never an error, so a caller cannot tell a stale
session from a hijacked one.
"""

from typing import Any, Dict, Optional

from sessionguard.config import settings
from sessionguard.obs.logger import log_event
from sessionguard.obs.metrics import inc_counter
from sessionguard.session.errors import SessionUnavailableError
from sessionguard.session.handle import SessionHandle
from sessionguard.session.interfaces import CookieTransport, RequestIdentity
from sessionguard.types import (
    INITIATED,
    IP,
    LAST_ACTIVITY,
    USER_AGENT,
    SessionConfig,
    SessionStatus,
)


class SessionManager:
    def __init__(
        self,
        store: SessionHandle,
        cookies: CookieTransport,
        identity: RequestIdentity,
        config: Optional[SessionConfig] = None,
    ):
        self.config = config or SessionConfig.from_settings(settings)
        self._store = store
        self._cookies = cookies
        self._identity = identity
        self._presented_id: Optional[str] = None

        status = store.status()
        if status is SessionStatus.DISABLED:
            log_event("session_store_unavailable", level="ERROR", save_path=store.save_path())
            raise SessionUnavailableError(f"session store at {store.save_path()} is unavailable")
        if status is SessionStatus.ACTIVE:
            # Another manager already validated this request
            return

        cfg = self.config
        store.configure(cfg.use_strict_mode, cfg.gc_maxlifetime, cfg.use_cookies_only)
        cookies.configure_cookie_params(
            cfg.lifetime, cfg.path, cfg.domain, cfg.secure, cfg.http_only, cfg.same_site
        )

        name = store.cookie_name()
        self._presented_id = cookies.read_cookie(name)
        store.start(self._presented_id, cookies.read_query(name))

        self._check_timeout()
        self._check_integrity()

        if INITIATED not in self._record:
            store.regenerate_id(delete_old=True)
            self._record[INITIATED] = True

        self._sync_cookie()

    @property
    def _record(self) -> Dict[str, Any]:
        # Always the handle's live record; a reset swaps it out
        return self._store.record

    # -- validation -------------------------------------------------------

    def _reset(self, reason: str) -> None:
        """Purge, destroy and restart: the one full reset."""
        old_id = self._store.current_id()
        self._store.unset_all()
        self._store.destroy_session()
        self._store.start()
        inc_counter("session_resets_total", {"reason": reason})
        log_event(
            "session_reset",
            level="WARNING",
            reason=reason,
            old_session_id=old_id,
            new_session_id=self._store.current_id(),
        )

    def _check_timeout(self) -> None:
        if self.is_expired():
            self._reset("timeout")
        self._record[LAST_ACTIVITY] = self._identity.now()

    def _bind_fingerprint(self, key: str, current: str) -> None:
        bound = self._record.get(key)
        if bound is not None and bound != current:
            self._reset(key)
        self._record[key] = current

    def _check_integrity(self) -> None:
        # Each check stamps the record even right after a reset
        self._bind_fingerprint(USER_AGENT, self._identity.current_user_agent())
        self._bind_fingerprint(IP, self._identity.current_client_address())

    def _sync_cookie(self) -> None:
        current = self._store.current_id()
        if current and current != self._presented_id:
            self._cookies.send_session_cookie(self._store.cookie_name(), current)
            self._presented_id = current

    # -- accessors --------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self._record.get(key, default)

    def all(self) -> Dict[str, Any]:
        return dict(self._record)

    def set(self, key: str, value: Any) -> None:
        self._record[key] = value

    def has(self, key: str) -> bool:
        return key in self._record

    def unset(self, key: str) -> None:
        self._record.pop(key, None)

    def clear(self) -> None:
        self._record.clear()

    def regenerate_id(self) -> None:
        """Issue a new identifier for the same contents, e.g. after login."""
        self._store.regenerate_id(delete_old=True)
        self._sync_cookie()

    def destroy(self) -> None:
        """Terminate the session and make sure the client drops its cookie."""
        self._store.unset_all()
        self._store.destroy_session()

        name = self._store.cookie_name()
        if self._cookies.has_cookie(name):
            cfg = self.config
            self._cookies.expire_cookie(
                name, cfg.path, cfg.domain, cfg.secure, cfg.http_only, cfg.same_site
            )
            log_event("session_cookie_expired", cookie=name)

    def close(self) -> None:
        self._store.close()

    # -- introspection ----------------------------------------------------

    def get_current_id(self) -> str:
        return self._store.current_id()

    def get_cookie_name(self) -> str:
        return self._store.cookie_name()

    def get_save_path(self) -> str:
        return self._store.save_path()

    def get_status(self) -> SessionStatus:
        return self._store.status()

    def get_timeout(self) -> int:
        return self.config.timeout

    def get_last_activity(self) -> Optional[int]:
        return self._record.get(LAST_ACTIVITY)

    def is_expired(self) -> bool:
        last_activity = self.get_last_activity()
        if last_activity is None:
            return False
        # A timestamp we cannot compare is treated as stale, so it gets reset
        if isinstance(last_activity, bool) or not isinstance(last_activity, (int, float)):
            return True
        return self._identity.now() - last_activity > self.config.timeout

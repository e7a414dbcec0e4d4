import os
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pytest

# Ensure project root is on sys.path so `import sessionguard` works in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from sessionguard.obs.metrics import reset_metrics  # noqa: E402
from sessionguard.session import MemorySessionBackend, SessionHandle  # noqa: E402
from sessionguard.types import SessionConfig  # noqa: E402


@dataclass
class FakeClient:
    """Controllable identity source: one browser on one address, plus a clock."""

    user_agent: str = "Test User Agent"
    address: str = "127.0.0.1"
    clock: int = 1_700_000_000

    def current_user_agent(self) -> str:
        return self.user_agent

    def current_client_address(self) -> str:
        return self.address

    def now(self) -> int:
        return self.clock


@dataclass
class RecordingCookies:
    """Cookie transport double that keeps what was presented and written."""

    presented: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    params: Optional[Tuple] = None
    sent: List[Tuple[str, str]] = field(default_factory=list)
    expired: List[Tuple] = field(default_factory=list)

    def configure_cookie_params(self, lifetime, path, domain, secure, http_only, same_site):
        self.params = (lifetime, path, domain, secure, http_only, same_site)

    def read_cookie(self, name):
        return self.presented.get(name)

    def read_query(self, name):
        return self.query.get(name)

    def has_cookie(self, name):
        return name in self.presented or any(n == name for n, _ in self.sent)

    def send_session_cookie(self, name, value):
        self.sent.append((name, value))

    def expire_cookie(self, name, path, domain, secure, http_only, same_site):
        self.expired.append((name, path, domain, secure, http_only, same_site))

    def next_request(self) -> "RecordingCookies":
        """What the browser presents on its following request."""
        jar = dict(self.presented)
        for name, value in self.sent:
            jar[name] = value
        for entry in self.expired:
            jar.pop(entry[0], None)
        return RecordingCookies(presented=jar)


@pytest.fixture(autouse=True)
def _fresh_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def backend():
    return MemorySessionBackend()


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def config():
    return SessionConfig()


@pytest.fixture
def open_session(backend, client, config):
    """Run one request: returns (manager, cookies) with the handle still open."""
    from sessionguard.session import SessionManager

    def _open(cookies=None, identity=None, cfg=None):
        cookies = cookies if cookies is not None else RecordingCookies()
        cfg = cfg or config
        handle = SessionHandle(backend, cookie_name=cfg.cookie_name)
        manager = SessionManager(handle, cookies, identity or client, cfg)
        return manager, cookies

    return _open

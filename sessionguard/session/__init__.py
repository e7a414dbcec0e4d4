"""
Session lifecycle: per-request store handles, persistent backends and the
validating manager.
"""

from .errors import SessionError, SessionUnavailableError
from .handle import SessionHandle
from .manager import SessionManager
from .redis_store import RedisSessionBackend
from .store import MemorySessionBackend

__all__ = [
    "MemorySessionBackend",
    "RedisSessionBackend",
    "SessionError",
    "SessionHandle",
    "SessionManager",
    "SessionUnavailableError",
]

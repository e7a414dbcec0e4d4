from __future__ import annotations

"""In-memory session backend with per-record TTL semantics.

Suitable for development, tests and single-process deployments. Records are
deep-copied in and out so a request handle never aliases stored state.
"""

from typing import Optional, Dict, Any
import copy
import time
import threading


class MemorySessionBackend:
    """In-memory session dictionary with TTL semantics."""

    save_path = "memory://"

    def __init__(self, clock=time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Any]] = {}

    def _expired(self, rec: Dict[str, Any]) -> bool:
        ttl = rec.get("ttl_seconds", 0)
        if ttl <= 0:
            return False
        return (self._clock() - rec.get("updated_at", 0)) > ttl

    def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Return a copy of the stored record if not expired, else None."""
        with self._lock:
            rec = self._data.get(session_id)
            if not rec:
                return None
            if self._expired(rec):
                self._data.pop(session_id, None)
                return None
            return copy.deepcopy(rec["state"])

    def save(self, session_id: str, data: Dict[str, Any], ttl_seconds: int) -> None:
        """Save the record for session_id; ttl_seconds <= 0 never expires."""
        now = self._clock()
        with self._lock:
            self._data[session_id] = {
                "state": copy.deepcopy(data),
                "updated_at": now,
                "ttl_seconds": ttl_seconds,
                "started_at": self._data.get(session_id, {}).get("started_at", now),
            }

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._data.pop(session_id, None)

    def exists(self, session_id: str) -> bool:
        with self._lock:
            rec = self._data.get(session_id)
            if not rec:
                return False
            if self._expired(rec):
                self._data.pop(session_id, None)
                return False
            return True

    def available(self) -> bool:
        return True

    def cleanup_expired(self) -> int:
        """Sweep expired records; returns how many were dropped."""
        with self._lock:
            stale = [sid for sid, rec in self._data.items() if self._expired(rec)]
            for sid in stale:
                del self._data[sid]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

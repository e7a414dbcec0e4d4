import json
import redis
from contextlib import contextmanager
from typing import Dict, Optional, Any
from sessionguard.config import settings
from sessionguard.obs.logger import log_event
from sessionguard.session.errors import SessionUnavailableError


class RedisSessionBackend:
    """Session records as JSON strings under ``session:<id>`` with SETEX TTLs.

    Redis expires keys on its own, so garbage collection is free.
    """

    def __init__(self, redis_url: str = None, client: redis.Redis = None, prefix: str = "session:"):
        self.redis_url = redis_url or settings.REDIS_URL
        self.client = client if client is not None else redis.from_url(self.redis_url, decode_responses=True)
        self.prefix = prefix

    @property
    def save_path(self) -> str:
        return f"{self.redis_url}#{self.prefix}"

    def _get_key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    @contextmanager
    def _connection(self, op: str):
        # A store that drops mid-request is reported like one that never answered
        try:
            yield
        except (redis.ConnectionError, redis.TimeoutError) as e:
            log_event("session_store_unavailable", level="ERROR", backend="redis", op=op, error=str(e))
            raise SessionUnavailableError(f"session store at {self.save_path} is unavailable") from e

    def available(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            log_event("session_store_unavailable", level="ERROR", backend="redis", error=str(e))
            return False

    def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        with self._connection("load"):
            data = self.client.get(self._get_key(session_id))
        if not data:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError:
            # A record we cannot read is as good as no record
            log_event("session_record_corrupt", level="WARNING", session_id=session_id)
            return None

    def save(self, session_id: str, data: Dict[str, Any], ttl_seconds: int) -> None:
        key = self._get_key(session_id)
        payload = json.dumps(data)
        with self._connection("save"):
            if ttl_seconds > 0:
                self.client.setex(key, ttl_seconds, payload)
            else:
                self.client.set(key, payload)

    def delete(self, session_id: str) -> None:
        with self._connection("delete"):
            self.client.delete(self._get_key(session_id))

    def exists(self, session_id: str) -> bool:
        with self._connection("exists"):
            return bool(self.client.exists(self._get_key(session_id)))

    def cleanup_expired(self) -> int:
        # Redis automatically handles expiration
        # This method is for compatibility with the interface
        return 0

    def count_sessions(self) -> int:
        return sum(1 for _ in self.client.scan_iter(f"{self.prefix}*"))

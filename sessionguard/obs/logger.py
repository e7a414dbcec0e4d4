"""Structured JSON logging to stdout.

Low overhead, minimal dependencies, safe for production stdout collectors.
Session identifiers are bearer credentials, so only their tail is ever logged.
"""

from typing import Any, Dict
from datetime import datetime, timezone
import json

from sessionguard.obs.context import request_id_var, session_id_var, client_ip_var


def redact_session_id(value: Any) -> Any:
    s = str(value) if value is not None else ""
    if not s:
        return s
    if len(s) <= 6:
        return "***"
    return f"***{s[-6:]}"


def log_event(event: str, **fields: Any) -> None:
    now = datetime.now(timezone.utc).isoformat()
    payload: Dict[str, Any] = {
        "ts": now,
        "level": fields.pop("level", "INFO"),
        "event": event,
        "request_id": request_id_var.get(),
    }
    # Attach context vars if not provided explicitly
    payload.setdefault("client_ip", client_ip_var.get())
    if "session_id" not in fields:
        payload["session_id"] = redact_session_id(session_id_var.get())

    # Merge remaining fields
    for k, v in fields.items():
        if k in ("session_id", "old_session_id", "new_session_id"):
            payload[k] = redact_session_id(v)
        else:
            payload[k] = v

    try:
        print(json.dumps(payload, separators=(",", ":"), default=str))
    except (TypeError, ValueError, OSError):
        # As a last resort, avoid crashing the request due to logging
        pass

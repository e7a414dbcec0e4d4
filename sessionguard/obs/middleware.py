"""ASGI middleware for lightweight observability."""

from typing import Callable, Any
import time
import uuid

from fastapi import FastAPI

from sessionguard.obs.context import request_id_var, client_ip_var, session_id_var
from sessionguard.obs.logger import log_event
from sessionguard.obs.metrics import record_timing, inc_counter


def _route_label(scope: dict) -> str:
    # FastAPI stores the matched route in scope; "/session/{key}" beats one label per key
    route = scope.get("route")
    return getattr(route, "path", None) or scope.get("path", "")


class ObservabilityMiddleware:
    def __init__(self, app: FastAPI):
        self.app = app

    async def __call__(self, scope: dict, receive: Callable, send: Callable[[dict], Any]):
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        request_id_var.set(str(uuid.uuid4()))
        session_id_var.set(None)
        client = scope.get("client")
        client_ip_var.set(client[0] if client else None)
        method = scope.get("method", "")
        start = time.monotonic()
        status_code = 500

        async def send_wrapper(message: dict):
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 200))
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (time.monotonic() - start) * 1000.0
            route = _route_label(scope)
            record_timing("request_latency_ms", elapsed_ms, {"route": route})
            inc_counter("requests_total", {"route": route, "status": str(status_code)})
            log_event(
                "request",
                method=method,
                route=route,
                status=status_code,
                ms_total=round(elapsed_ms, 2),
            )

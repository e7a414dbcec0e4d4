from contextlib import asynccontextmanager
from typing import Any, Iterator, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sessionguard.config import settings
from sessionguard.obs.logger import log_event
from sessionguard.obs.metrics import get_metrics_snapshot
from sessionguard.obs.middleware import ObservabilityMiddleware
from sessionguard.session import (
    MemorySessionBackend,
    RedisSessionBackend,
    SessionHandle,
    SessionManager,
    SessionUnavailableError,
)
from sessionguard.transport import StarletteCookieTransport, StarletteRequestIdentity
from sessionguard.types import RESERVED_KEYS, SessionConfig, SessionSnapshot

load_dotenv()


class SetValue(BaseModel):
    value: Any = None


def build_backend():
    if settings.SESSION_BACKEND == "redis":
        return RedisSessionBackend(settings.REDIS_URL)
    return MemorySessionBackend()


def get_session(request: Request, response: Response) -> Iterator[SessionManager]:
    """Open a store handle for this request, validate it and close it afterwards."""
    config: SessionConfig = request.app.state.session_config
    handle = SessionHandle(request.app.state.backend, cookie_name=config.cookie_name)
    with handle:
        yield SessionManager(
            handle,
            StarletteCookieTransport(request, response),
            StarletteRequestIdentity(request, trust_proxy_headers=settings.TRUST_PROXY_HEADERS),
            config,
        )


# Tear down with the endpoint, so the record is stored before the cookie reaches the client
SessionDep = Depends(get_session, scope="function")


def writable_key(key: str) -> str:
    if key in RESERVED_KEYS:
        raise HTTPException(status_code=400, detail=f"{key!r} is managed by the session layer")
    return key


def snapshot(session: SessionManager) -> dict:
    return SessionSnapshot(
        id=session.get_current_id(),
        status=session.get_status(),
        attributes=session.all(),
        timeout=session.get_timeout(),
        last_activity=session.get_last_activity(),
        expired=session.is_expired(),
    ).model_dump(mode="json")


def create_app(config: Optional[SessionConfig] = None, backend=None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        log_event("startup", env=settings.APP_ENV, backend=settings.SESSION_BACKEND)
        if not hasattr(app.state, "backend"):
            app.state.backend = build_backend()
        yield
        # Shutdown
        log_event("shutdown")

    app = FastAPI(title="Session Guard", version="1.0.0", lifespan=lifespan)
    app.state.session_config = config or SessionConfig.from_settings(settings)
    if backend is not None:
        app.state.backend = backend

    @app.exception_handler(SessionUnavailableError)
    async def session_unavailable(request: Request, exc: SessionUnavailableError):
        log_event("session_unavailable", level="ERROR", error=str(exc))
        return JSONResponse({"detail": "session store unavailable"}, status_code=503)

    @app.get("/health")
    async def health():
        return {"status": "healthy", "service": "sessionguard"}

    @app.get("/health/detailed")
    async def detailed_health(request: Request):
        store = request.app.state.backend
        ok = store.available()
        body = {
            "status": "healthy" if ok else "unhealthy",
            "checks": {"session_store": ok},
            "save_path": store.save_path,
        }
        return JSONResponse(body, status_code=200 if ok else 503)

    @app.get("/metrics")
    async def metrics():
        return get_metrics_snapshot()

    @app.get("/session")
    def read_session(session: SessionManager = SessionDep):
        return snapshot(session)

    @app.put("/session/{key}")
    def set_value(body: SetValue, key: str = Depends(writable_key), session: SessionManager = SessionDep):
        session.set(key, body.value)
        return snapshot(session)

    @app.delete("/session/{key}")
    def unset_value(key: str = Depends(writable_key), session: SessionManager = SessionDep):
        session.unset(key)
        return snapshot(session)

    @app.post("/session/clear")
    def clear_session(session: SessionManager = SessionDep):
        session.clear()
        return snapshot(session)

    @app.post("/session/regenerate")
    def regenerate_session(session: SessionManager = SessionDep):
        """Call after a privilege change such as login"""
        session.regenerate_id()
        return snapshot(session)

    @app.post("/session/destroy")
    def destroy_session(session: SessionManager = SessionDep):
        session.destroy()
        return {"status": "destroyed", "id": session.get_current_id()}

    @app.post("/admin/sessions/cleanup", include_in_schema=False)
    async def cleanup_sessions(request: Request):
        """
        Internal admin endpoint to sweep expired session records.

        Unauthenticated: keep /admin/ off the public ingress and call it from
        a cron job or sidecar inside the cluster.
        """
        removed = request.app.state.backend.cleanup_expired()
        log_event("session_cleanup", removed=removed)
        return {"status": "ok", "removed": removed}

    return app


# Apply middleware
app = ObservabilityMiddleware(create_app())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
        log_level="info"
    )

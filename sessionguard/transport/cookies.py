from datetime import datetime, timedelta, timezone
from typing import Final, Optional, Set

from starlette.requests import Request
from starlette.responses import Response

# How far in the past an expiring cookie is dated
EXPIRED_OFFSET: Final[timedelta] = timedelta(hours=1)


class StarletteCookieTransport:
    """
    Session cookie transport over a Starlette request/response pair.

    Reads come from the incoming request; writes are Set-Cookie headers on
    the response that FastAPI merges into whatever the endpoint returns.
    """

    def __init__(self, request: Request, response: Response):
        self.request = request
        self.response = response
        self._issued: Set[str] = set()
        self.lifetime = 0
        self.path = "/"
        self.domain = ""
        self.secure = True
        self.http_only = True
        self.same_site = "Strict"

    def configure_cookie_params(
        self,
        lifetime: int,
        path: str,
        domain: str,
        secure: bool,
        http_only: bool,
        same_site: str,
    ) -> None:
        self.lifetime = lifetime
        self.path = path
        self.domain = domain
        self.secure = secure
        self.http_only = http_only
        self.same_site = same_site

    def read_cookie(self, name: str) -> Optional[str]:
        return self.request.cookies.get(name) or None

    def read_query(self, name: str) -> Optional[str]:
        return self.request.query_params.get(name) or None

    def has_cookie(self, name: str) -> bool:
        return name in self.request.cookies or name in self._issued

    def send_session_cookie(self, name: str, value: str) -> None:
        self.response.set_cookie(
            key=name,
            value=value,
            max_age=self.lifetime or None,
            path=self.path,
            domain=self.domain or None,
            secure=self.secure,
            httponly=self.http_only,
            samesite=self.same_site.lower(),
        )
        self._issued.add(name)

    def expire_cookie(
        self,
        name: str,
        path: str,
        domain: str,
        secure: bool,
        http_only: bool,
        same_site: str,
    ) -> None:
        self.response.set_cookie(
            key=name,
            value="",
            max_age=0,
            expires=datetime.now(timezone.utc) - EXPIRED_OFFSET,
            path=path,
            domain=domain or None,
            secure=secure,
            httponly=http_only,
            samesite=same_site.lower(),
        )
        self._issued.discard(name)

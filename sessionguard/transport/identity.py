import time

from starlette.requests import Request


class StarletteRequestIdentity:
    """User agent, client address and clock for one Starlette request."""

    def __init__(self, request: Request, trust_proxy_headers: bool = False):
        self.request = request
        self.trust_proxy_headers = trust_proxy_headers

    def current_user_agent(self) -> str:
        return self.request.headers.get("user-agent", "")

    def current_client_address(self) -> str:
        if self.trust_proxy_headers:
            forwarded = self.request.headers.get("x-forwarded-for", "")
            # Left-most entry is the original client
            first = forwarded.split(",")[0].strip()
            if first:
                return first
        client = self.request.client
        return client.host if client else ""

    def now(self) -> int:
        return int(time.time())

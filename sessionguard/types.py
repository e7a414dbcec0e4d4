from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SessionStatus(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    DISABLED = "disabled"  # no store capability at all


# Reserved record keys written by the validation pass
INITIATED = "initiated"
LAST_ACTIVITY = "last_activity"
USER_AGENT = "user_agent"
IP = "ip"
RESERVED_KEYS = frozenset({INITIATED, LAST_ACTIVITY, USER_AGENT, IP})


class SessionConfig(BaseModel):
    """Immutable per-manager session configuration."""

    model_config = ConfigDict(frozen=True)

    cookie_name: str = "SESSIONID"
    lifetime: int = Field(0, ge=0, description="Cookie lifetime in seconds, 0 = browser session")
    secure: bool = True
    http_only: bool = True
    same_site: str = "Strict"
    path: str = "/"
    domain: str = ""
    use_strict_mode: bool = True
    gc_maxlifetime: int = Field(86400, ge=0, description="Store-side record TTL in seconds")
    use_cookies_only: bool = True
    timeout: int = Field(1800, gt=0, description="Inactivity window in seconds")

    @field_validator("same_site")
    @classmethod
    def _normalize_same_site(cls, value: str) -> str:
        normalized = value.strip().capitalize()
        if normalized not in ("Strict", "Lax", "None"):
            raise ValueError(f"same_site must be Strict, Lax or None, got {value!r}")
        return normalized

    @model_validator(mode="after")
    def _none_requires_secure(self) -> "SessionConfig":
        # Browsers drop SameSite=None cookies that are not Secure
        if self.same_site == "None" and not self.secure:
            raise ValueError("same_site=None requires secure=True")
        return self

    @classmethod
    def from_settings(cls, settings) -> "SessionConfig":
        return cls(
            cookie_name=settings.SESSION_COOKIE_NAME,
            lifetime=settings.SESSION_LIFETIME,
            secure=settings.SESSION_SECURE,
            http_only=settings.SESSION_HTTPONLY,
            same_site=settings.SESSION_SAMESITE,
            path=settings.SESSION_PATH,
            domain=settings.SESSION_DOMAIN,
            use_strict_mode=settings.SESSION_STRICT_MODE,
            gc_maxlifetime=settings.SESSION_GC_MAXLIFETIME,
            use_cookies_only=settings.SESSION_COOKIES_ONLY,
            timeout=settings.SESSION_TIMEOUT,
        )


class SessionSnapshot(BaseModel):
    """What the HTTP layer reports about the bound session."""

    id: str
    status: SessionStatus
    attributes: dict
    timeout: int
    last_activity: Optional[int] = None
    expired: bool = False

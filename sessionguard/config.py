# sessionguard/config.py
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # App
    APP_ENV: Literal["dev", "prod", "staging"] = "dev"

    # Storage
    SESSION_BACKEND: Literal["memory", "redis"] = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"

    # Cookie
    SESSION_COOKIE_NAME: str = "SESSIONID"
    SESSION_LIFETIME: int = 0  # 0 = expires when the browser closes
    SESSION_SECURE: bool = True
    SESSION_HTTPONLY: bool = True
    SESSION_SAMESITE: str = "Strict"
    SESSION_PATH: str = "/"
    SESSION_DOMAIN: str = ""

    # Store behaviour
    SESSION_STRICT_MODE: bool = True
    SESSION_GC_MAXLIFETIME: int = 86400  # 24 hours store-side TTL
    SESSION_COOKIES_ONLY: bool = True
    SESSION_TIMEOUT: int = 1800  # 30 minutes of inactivity

    # Behind a load balancer the client address comes from X-Forwarded-For
    TRUST_PROXY_HEADERS: bool = False

    # read .env and ignore any extra keys so this doesn't break again
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()

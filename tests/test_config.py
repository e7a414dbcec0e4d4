import pytest
from pydantic import ValidationError

from sessionguard.config import Settings
from sessionguard.types import SessionConfig


def test_defaults_match_hardened_profile():
    cfg = SessionConfig()
    assert cfg.lifetime == 0
    assert cfg.secure and cfg.http_only
    assert cfg.same_site == "Strict"
    assert cfg.use_strict_mode and cfg.use_cookies_only
    assert cfg.gc_maxlifetime == 86400
    assert cfg.timeout == 1800


def test_same_site_is_normalized():
    assert SessionConfig(same_site="lax").same_site == "Lax"
    assert SessionConfig(same_site=" STRICT ").same_site == "Strict"


@pytest.mark.parametrize("kwargs", [
    {"same_site": "sometimes"},
    {"same_site": "none", "secure": False},
    {"timeout": 0},
    {"lifetime": -1},
])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValidationError):
        SessionConfig(**kwargs)


def test_config_is_immutable():
    cfg = SessionConfig()
    with pytest.raises(ValidationError):
        cfg.timeout = 10


def test_from_settings(monkeypatch):
    monkeypatch.setenv("SESSION_TIMEOUT", "600")
    monkeypatch.setenv("SESSION_SAMESITE", "lax")
    monkeypatch.setenv("SESSION_COOKIE_NAME", "APPSESS")

    cfg = SessionConfig.from_settings(Settings())

    assert cfg.timeout == 600
    assert cfg.same_site == "Lax"
    assert cfg.cookie_name == "APPSESS"

from .cookies import StarletteCookieTransport
from .identity import StarletteRequestIdentity

__all__ = ["StarletteCookieTransport", "StarletteRequestIdentity"]

class SessionError(Exception):
    """Base class for session layer failures."""


class SessionUnavailableError(SessionError):
    """The session store is disabled, so no session capability exists."""

"""Server-side session lifecycle management with fingerprint binding."""

__version__ = "1.0.0"

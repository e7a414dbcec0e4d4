"""Observability package.

Lightweight middleware, in-process metrics, structured logging and
request-scoped context shared by the session layer and the HTTP service.
"""

__all__ = [
    "middleware",
    "metrics",
    "logger",
    "context",
]

"""Routers package: HTTP route handlers."""
from csrf_guard.routers import misc

__all__ = [
    "misc",
]

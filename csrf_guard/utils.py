"""Utility functions for header normalisation and origin handling."""
import logging
from typing import Any, Optional
from urllib.parse import urlsplit

from csrf_guard.constants import DEFAULT_PORTS

logger = logging.getLogger(__name__)


def normalize_content_type(value: Optional[str]) -> str:
    """
    Reduce a Content-Type header to its bare media type.
    Parameters such as ``charset`` are dropped; absent becomes "".
    """
    if not value:
        return ""
    return value.split(";", 1)[0].strip().lower()


def origin_of(url: Optional[str]) -> Optional[str]:
    """
    Serialize the origin (scheme://host[:port]) of an absolute URL.
    Default ports are elided. Returns None for anything that has no
    tuple origin: relative or malformed URLs and non-network schemes.
    """
    if not url:
        return None

    try:
        parsed = urlsplit(url.strip())
        port = parsed.port
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        return None

    hostname = parsed.hostname
    if not hostname:
        return None

    # urlsplit strips the brackets from IPv6 literals
    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is None or port == DEFAULT_PORTS[scheme]:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def request_origin(request: Any) -> str:
    """Origin the server was addressed at, as seen on a Starlette request."""
    origin = origin_of(str(request.url))
    if origin is None:
        # Only reachable with a broken scope; nothing can match an empty origin
        logger.warning("Could not derive request origin from %r", str(request.url))
        return ""
    return origin


def header_or_none(headers: Any, name: str) -> Optional[str]:
    """Read a header, folding empty values into None."""
    value = headers.get(name)
    return value if value else None

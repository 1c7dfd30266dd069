"""Centralized constants for csrf-guard."""
from typing import Literal, get_args

# ---- Methods ----
SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS"})

# ---- Content Types ----
DEFAULT_CONTENT_TYPES: tuple[str, ...] = (
    "application/x-www-form-urlencoded",
    "multipart/form-data",
    "text/plain",
    "application/json",
    "application/xml",
    "text/xml",
)

# ---- Sec-Fetch-Site ----
SecFetchSite = Literal["same-origin", "same-site", "none", "cross-site"]
SEC_FETCH_SITE_VALUES: frozenset[str] = frozenset(get_args(SecFetchSite))
DEFAULT_SEC_FETCH_SITE: str = "same-origin"

# ---- Origins ----
# Ports elided when serializing an origin, as browsers do.
DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
}

# ---- Headers ----
HEADER_ORIGIN: str = "origin"
HEADER_REFERER: str = "referer"
HEADER_SEC_FETCH_SITE: str = "sec-fetch-site"
HEADER_CONTENT_TYPE: str = "content-type"
HEADER_REQUEST_ID: str = "X-Request-ID"

# ---- Environment ----
ENV_ALLOWED_ORIGINS: str = "CSRF_ALLOWED_ORIGINS"
ENV_SEC_FETCH_SITE: str = "CSRF_SEC_FETCH_SITE"
ENV_CHECK_REFERER: str = "CSRF_CHECK_REFERER"
ENV_ALLOWED_CONTENT_TYPES: str = "CSRF_ALLOWED_CONTENT_TYPES"
ENV_EXEMPT_PATHS: str = "CSRF_EXEMPT_PATHS"

# ---- Misc ----
APP_VERSION: str = "0.1.0"

# ---- Error Codes ----
ERR_CSRF_FAILED: str = "CSRF_FAILED"
CSRF_FAILED_STATUS: int = 403
CSRF_FAILED_MESSAGE: str = "CSRF validation failed"

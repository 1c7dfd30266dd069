"""Environment-driven configuration.

Values come from the process environment, optionally seeded from a ``.env``
file. Unset variables leave the corresponding option at its default.
"""
import logging
import os
from typing import Any, Optional

from dotenv import load_dotenv

from csrf_guard.constants import (
    ENV_ALLOWED_CONTENT_TYPES,
    ENV_ALLOWED_ORIGINS,
    ENV_CHECK_REFERER,
    ENV_EXEMPT_PATHS,
    ENV_SEC_FETCH_SITE,
)
from csrf_guard.evaluator import build_options
from csrf_guard.schemas import CSRFOptions

logger = logging.getLogger(__name__)

load_dotenv()


def _split(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _one_or_many(raw: Optional[str]) -> Optional[Any]:
    """A single entry configures an exact match, several a set match."""
    if raw is None:
        return None
    values = _split(raw)
    if not values:
        return None
    return values[0] if len(values) == 1 else values


def get_csrf_options() -> CSRFOptions:
    """Build policy options from ``CSRF_*`` environment variables.

    ``CSRF_ALLOWED_CONTENT_TYPES`` set to an empty string protects every
    content type; leaving it unset keeps the defaults.

    Raises:
        CSRFConfigError: If a variable holds an invalid value.
    """
    values: dict[str, Any] = {}

    origin = _one_or_many(os.getenv(ENV_ALLOWED_ORIGINS))
    if origin is not None:
        values["origin"] = origin

    sec_fetch_site = _one_or_many(os.getenv(ENV_SEC_FETCH_SITE))
    if sec_fetch_site is not None:
        values["sec_fetch_site"] = sec_fetch_site

    check_referer = os.getenv(ENV_CHECK_REFERER)
    if check_referer is not None and check_referer.strip():
        values["check_referer"] = check_referer.strip()

    content_types = os.getenv(ENV_ALLOWED_CONTENT_TYPES)
    if content_types is not None:
        values["allowed_content_types"] = _split(content_types)

    options = build_options(values)
    logger.info(
        "CSRF options loaded origin=%r sec_fetch_site=%r check_referer=%s allowed_content_types=%r",
        options.origin, options.sec_fetch_site, options.check_referer, options.allowed_content_types,
    )
    return options


def get_exempt_paths() -> frozenset[str]:
    """Request paths the app-wide middleware never checks."""
    return frozenset(_split(os.getenv(ENV_EXEMPT_PATHS, "")))

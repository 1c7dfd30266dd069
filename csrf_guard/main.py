import logging
from typing import Iterable, Optional

from fastapi import FastAPI

from csrf_guard.config import get_csrf_options, get_exempt_paths
from csrf_guard.constants import APP_VERSION
from csrf_guard.errors import CSRFValidationError, csrf_validation_error_handler
from csrf_guard.evaluator import CSRFPolicy
from csrf_guard.middleware import register_middleware
from csrf_guard.routers import misc
from csrf_guard.schemas import CSRFOptions

logger = logging.getLogger(__name__)


def create_app(
    options: Optional[CSRFOptions] = None,
    exempt_paths: Optional[Iterable[str]] = None,
    protect_all: bool = True,
) -> FastAPI:
    """Build the FastAPI app with CSRF protection wired in.

    Args:
        options: App-wide policy options. Read from the environment when None.
        exempt_paths: Paths skipped by the app-wide check. Read from the
            environment when None.
        protect_all: Install the app-wide CSRF middleware. Turn off to rely on
            per-route ``csrf_protect`` dependencies only.

    Returns:
        The configured application.
    """
    app = FastAPI(
        title="CSRF Guard",
        description="Header-based CSRF protection for FastAPI applications",
        version=APP_VERSION,
    )

    policy: Optional[CSRFPolicy] = None
    if protect_all:
        policy = CSRFPolicy(options if options is not None else get_csrf_options())
        skip = frozenset(exempt_paths) if exempt_paths is not None else get_exempt_paths()
        logger.info("App-wide CSRF protection enabled exempt_paths=%s", sorted(skip))
        register_middleware(app, policy, skip)
    else:
        register_middleware(app)
    app.state.csrf_policy = policy

    app.add_exception_handler(CSRFValidationError, csrf_validation_error_handler)
    app.include_router(misc.router)
    return app


# ASGI entry point: uvicorn csrf_guard.main:app
app = create_app()

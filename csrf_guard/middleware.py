"""Middleware module: CSRF protection, request ID, request logging."""
import logging
import time
import uuid
from typing import Any, Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from csrf_guard.constants import (
    HEADER_CONTENT_TYPE,
    HEADER_ORIGIN,
    HEADER_REFERER,
    HEADER_REQUEST_ID,
    HEADER_SEC_FETCH_SITE,
)
from csrf_guard.errors import CSRFValidationError
from csrf_guard.evaluator import CSRFPolicy, RequestFacts
from csrf_guard.utils import header_or_none, request_origin

logger = logging.getLogger(__name__)


def facts_from_request(request: Request) -> RequestFacts:
    """Collect the headers the policy reads from a Starlette request."""
    headers = request.headers
    return RequestFacts(
        method=request.method,
        content_type=header_or_none(headers, HEADER_CONTENT_TYPE),
        origin=header_or_none(headers, HEADER_ORIGIN),
        referer=header_or_none(headers, HEADER_REFERER),
        sec_fetch_site=header_or_none(headers, HEADER_SEC_FETCH_SITE),
        request_origin=request_origin(request),
        context=request,
    )


def register_middleware(
    app: FastAPI,
    policy: Optional[CSRFPolicy] = None,
    exempt_paths: Iterable[str] = (),
) -> None:
    """Register all HTTP middleware on the FastAPI app.

    Starlette runs the most recently registered middleware first, so the
    request ID is assigned before logging and CSRF checks see the request.

    Args:
        app: The FastAPI application instance.
        policy: App-wide CSRF policy. None skips the CSRF middleware, for apps
            that protect individual routes with :func:`csrf_guard.dependencies.csrf_protect`.
        exempt_paths: Request paths the CSRF middleware never checks.
    """
    if policy is not None:
        skip = frozenset(exempt_paths)

        @app.middleware("http")
        async def csrf_protection(request: Request, call_next: Any) -> Any:
            """Reject unsafe requests that fail every CSRF signal."""
            if request.url.path not in skip:
                evaluation = await policy.inspect_async(facts_from_request(request))
                if not evaluation.allowed:
                    request_id = getattr(request.state, "request_id", "")
                    error = CSRFValidationError(evaluation, request_id=request_id)
                    return JSONResponse(status_code=error.status_code, content=error.to_detail())
            return await call_next(request)

    @app.middleware("http")
    async def request_logging(request: Request, call_next: Any) -> Any:
        """Log method, path, status, and duration for every request."""
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        request_id = getattr(request.state, "request_id", "")
        logger.info(
            "[%s] %s %s %s %.1fms",
            request_id, request.method, request.url.path, response.status_code, duration_ms,
        )
        return response

    @app.middleware("http")
    async def add_request_id(request: Request, call_next: Any) -> Any:
        """Attach a unique request ID to every request and response."""
        request_id = request.headers.get(HEADER_REQUEST_ID, str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[HEADER_REQUEST_ID] = request_id
        return response

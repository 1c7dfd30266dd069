"""Miscellaneous routes: health."""
import logging

from fastapi import APIRouter, Request

from csrf_guard.constants import APP_VERSION
from csrf_guard.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["misc"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Liveness check that also reports the active CSRF policy.",
    response_description="Health status with policy summary.",
)
async def health(request: Request) -> HealthResponse:
    """Health check endpoint.

    Args:
        request: The incoming request.

    Returns:
        HealthResponse with status and the app-wide policy summary.
    """
    request_id = getattr(request.state, "request_id", "")
    policy = getattr(request.app.state, "csrf_policy", None)
    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        check_referer=policy.check_referer if policy else False,
        protected_content_types=list(policy.allowed_content_types) if policy else [],
        request_id=request_id,
    )

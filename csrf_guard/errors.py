"""Exceptions raised by csrf-guard."""
from typing import Any, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from csrf_guard.constants import CSRF_FAILED_STATUS, ERR_CSRF_FAILED
from csrf_guard.schemas import CSRFFailure


class CSRFConfigError(ValueError):
    """Raised when a policy is built from an unsupported option shape."""


class CSRFValidationError(HTTPException):
    """The request failed every CSRF signal.

    Renders as 403 Forbidden. Without :func:`csrf_validation_error_handler`
    FastAPI nests the structured body under ``detail``; with it the body is
    flat, matching the middleware's response.

    Args:
        evaluation: The evaluation that produced the ``deny`` verdict.
        request_id: Request id to echo back in the body.
    """

    code: str = ERR_CSRF_FAILED

    def __init__(self, evaluation: Optional[Any] = None, request_id: str = "") -> None:
        self.evaluation = evaluation
        self.request_id = request_id
        super().__init__(status_code=CSRF_FAILED_STATUS, detail=self.to_detail())

    def to_detail(self) -> dict[str, str]:
        return CSRFFailure(code=self.code, request_id=self.request_id).model_dump()


async def csrf_validation_error_handler(request: Request, exc: CSRFValidationError) -> JSONResponse:
    """Render :class:`CSRFValidationError` with the same body as the middleware."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_detail())

"""Per-route CSRF protection as a FastAPI dependency."""
from typing import Any, Awaitable, Callable, Optional, Union

from fastapi import Request

from csrf_guard.errors import CSRFValidationError
from csrf_guard.evaluator import CSRFPolicy, Evaluation
from csrf_guard.middleware import facts_from_request
from csrf_guard.schemas import CSRFFailure, CSRFOptions

# OpenAPI declaration for routes guarded by csrf_protect
CSRF_RESPONSES: dict[Union[int, str], dict[str, Any]] = {403: {"model": CSRFFailure, "description": "CSRF validation failed"}}


def csrf_protect(
    options: Optional[CSRFOptions] = None, **option_kwargs: Any
) -> Callable[[Request], Awaitable[Evaluation]]:
    """Build a dependency that enforces its own CSRF policy.

    The policy is resolved here, once, so misconfiguration fails at import
    time rather than on the first request::

        @app.post(
            "/lenient",
            dependencies=[Depends(csrf_protect(check_referer=False))],
            responses=CSRF_RESPONSES,
        )
        async def lenient() -> dict: ...

    Args:
        options: Policy options model.
        **option_kwargs: Policy options by name, as accepted by :class:`CSRFPolicy`.

    Returns:
        An async dependency that returns the :class:`Evaluation` on success.

    Raises:
        CSRFConfigError: If the options are invalid.
    """
    policy = CSRFPolicy(options, **option_kwargs)

    async def verify_csrf(request: Request) -> Evaluation:
        evaluation = await policy.inspect_async(facts_from_request(request))
        if not evaluation.allowed:
            raise CSRFValidationError(evaluation, request_id=getattr(request.state, "request_id", ""))
        return evaluation

    verify_csrf.policy = policy  # type: ignore[attr-defined]
    return verify_csrf

"""
csrf-guard
==========

Header-based CSRF protection for FastAPI. Unsafe requests must present a
same-origin Sec-Fetch-Site, an allowed Origin, or a same-origin Referer.

App-wide::

    from csrf_guard import CSRFPolicy, register_middleware

    register_middleware(app, CSRFPolicy(origin="https://example.com"))

Per route::

    from csrf_guard import csrf_protect

    @app.post("/form", dependencies=[Depends(csrf_protect(sec_fetch_site=["same-origin", "same-site"]))])
    async def form() -> dict: ...
"""
from csrf_guard.constants import APP_VERSION as __version__
from csrf_guard.dependencies import CSRF_RESPONSES, csrf_protect
from csrf_guard.errors import CSRFConfigError, CSRFValidationError, csrf_validation_error_handler
from csrf_guard.evaluator import CSRFPolicy, Evaluation, Reason, RequestFacts, SignalResults, Verdict
from csrf_guard.middleware import facts_from_request, register_middleware
from csrf_guard.schemas import CSRFFailure, CSRFOptions

__all__ = [
    "__version__",
    "CSRF_RESPONSES",
    "csrf_protect",
    "CSRFConfigError",
    "CSRFValidationError",
    "csrf_validation_error_handler",
    "CSRFPolicy",
    "CSRFFailure",
    "CSRFOptions",
    "Evaluation",
    "Reason",
    "RequestFacts",
    "SignalResults",
    "Verdict",
    "facts_from_request",
    "register_middleware",
]

"""CSRF policy evaluation.

A :class:`CSRFPolicy` is built once from :class:`~csrf_guard.schemas.CSRFOptions`
and then evaluated per request. Evaluation has three stages:

1. Safe methods (GET, HEAD, OPTIONS) are always allowed.
2. Requests whose Content-Type is present but outside the protected set are
   allowed; an absent Content-Type is always protected.
3. The Sec-Fetch-Site, Origin and Referer signals are computed independently
   and the request is allowed if any one of them passes.

The policy holds no per-request state, so one instance can serve any number
of concurrent requests.
"""
import inspect as pyinspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from csrf_guard.constants import (
    DEFAULT_CONTENT_TYPES,
    DEFAULT_SEC_FETCH_SITE,
    SAFE_METHODS,
    SEC_FETCH_SITE_VALUES,
)
from csrf_guard.errors import CSRFConfigError
from csrf_guard.matchers import ExactMatch, MatchResult, SameOriginMatch, resolve_matcher
from csrf_guard.schemas import CSRFOptions
from csrf_guard.utils import normalize_content_type, origin_of

logger = logging.getLogger(__name__)


class Verdict(str, Enum):
    """Outcome of one evaluation."""
    ALLOW = "allow"
    DENY = "deny"


class Reason(str, Enum):
    """Why a verdict was reached."""
    SAFE_METHOD = "safe_method"
    EXEMPT_CONTENT_TYPE = "exempt_content_type"
    SIGNALS = "signals"


@dataclass(frozen=True)
class RequestFacts:
    """Everything the policy reads from one request.

    Header fields are None when the header is absent. ``request_origin`` is
    the origin the server was addressed at; ``context`` is passed untouched
    to caller-supplied predicates.
    """

    method: str
    content_type: Optional[str] = None
    origin: Optional[str] = None
    referer: Optional[str] = None
    sec_fetch_site: Optional[str] = None
    request_origin: str = ""
    context: Any = None


@dataclass(frozen=True)
class SignalResults:
    sec_fetch_site: bool = False
    origin: bool = False
    referer: bool = False

    def any(self) -> bool:
        return self.sec_fetch_site or self.origin or self.referer


@dataclass(frozen=True)
class Evaluation:
    """Verdict plus the reasoning behind it."""

    verdict: Verdict
    reason: Reason
    signals: Optional[SignalResults] = None

    @property
    def allowed(self) -> bool:
        return self.verdict is Verdict.ALLOW


class CSRFPolicy:
    """Header-based CSRF policy.

    Args:
        options: A validated options model. Mutually exclusive with keyword options.
        **option_kwargs: Options by name (``origin``, ``sec_fetch_site``,
            ``check_referer``, ``allowed_content_types``) or by their camelCase alias.

    Raises:
        CSRFConfigError: If any option has an unsupported shape or value.
    """

    def __init__(self, options: Optional[CSRFOptions] = None, **option_kwargs: Any) -> None:
        if options is not None and option_kwargs:
            raise CSRFConfigError("Pass either an options model or keyword options, not both")
        self.options = options if options is not None else build_options(option_kwargs)

        self.origin_matcher = resolve_matcher(self.options.origin, SameOriginMatch(), name="origin")
        self.sec_fetch_site_matcher = resolve_matcher(
            self.options.sec_fetch_site, ExactMatch(DEFAULT_SEC_FETCH_SITE), name="sec_fetch_site",
        )
        self.check_referer = self.options.check_referer
        if self.options.allowed_content_types is None:
            self.allowed_content_types = DEFAULT_CONTENT_TYPES
        else:
            self.allowed_content_types = self.options.allowed_content_types

    # ---- Gating ----

    def needs_protection(self, method: str, content_type: Optional[str] = None) -> bool:
        """Whether a request with this method and Content-Type must pass a signal."""
        return self._exemption(method, content_type) is None

    def _exemption(self, method: str, content_type: Optional[str]) -> Optional[Reason]:
        if method.upper() in SAFE_METHODS:
            return Reason.SAFE_METHOD
        ct = normalize_content_type(content_type)
        if not ct or not self.allowed_content_types:
            return None
        if any(t in ct for t in self.allowed_content_types):
            return None
        return Reason.EXEMPT_CONTENT_TYPE

    # ---- Signals ----

    def _sec_fetch_site_result(self, facts: RequestFacts) -> MatchResult:
        if not facts.sec_fetch_site or facts.sec_fetch_site not in SEC_FETCH_SITE_VALUES:
            return False
        return self.sec_fetch_site_matcher(facts.sec_fetch_site, facts)

    def _origin_result(self, facts: RequestFacts) -> MatchResult:
        if not facts.origin:
            return False
        return self.origin_matcher(facts.origin, facts)

    def _referer_result(self, facts: RequestFacts) -> bool:
        if not self.check_referer or not facts.referer:
            return False
        referer_origin = origin_of(facts.referer)
        return referer_origin is not None and referer_origin == facts.request_origin

    # ---- Evaluation ----

    def inspect(self, facts: RequestFacts) -> Evaluation:
        """Evaluate a request synchronously.

        Raises:
            CSRFConfigError: If a configured predicate returns an awaitable.
                Use :meth:`inspect_async` for asynchronous predicates.
        """
        exemption = self._exemption(facts.method, facts.content_type)
        if exemption is not None:
            return self._exempt(facts, exemption)

        sec_fetch_site = _require_sync(self._sec_fetch_site_result(facts))
        origin = _require_sync(self._origin_result(facts))
        referer = self._referer_result(facts)
        return self._combine(facts, SignalResults(sec_fetch_site, origin, referer))

    async def inspect_async(self, facts: RequestFacts) -> Evaluation:
        """Evaluate a request, awaiting any asynchronous predicate results."""
        exemption = self._exemption(facts.method, facts.content_type)
        if exemption is not None:
            return self._exempt(facts, exemption)

        sec_fetch_site = await _resolve(self._sec_fetch_site_result(facts))
        origin = await _resolve(self._origin_result(facts))
        referer = self._referer_result(facts)
        return self._combine(facts, SignalResults(sec_fetch_site, origin, referer))

    def evaluate(
        self,
        method: str,
        content_type: Optional[str] = None,
        origin_header: Optional[str] = None,
        referer_header: Optional[str] = None,
        sec_fetch_site_header: Optional[str] = None,
        request_origin: str = "",
        context: Any = None,
    ) -> Verdict:
        """Evaluate raw request values and return the verdict."""
        facts = RequestFacts(
            method, content_type, origin_header, referer_header, sec_fetch_site_header, request_origin, context,
        )
        return self.inspect(facts).verdict

    async def evaluate_async(
        self,
        method: str,
        content_type: Optional[str] = None,
        origin_header: Optional[str] = None,
        referer_header: Optional[str] = None,
        sec_fetch_site_header: Optional[str] = None,
        request_origin: str = "",
        context: Any = None,
    ) -> Verdict:
        """Async counterpart of :meth:`evaluate`."""
        facts = RequestFacts(
            method, content_type, origin_header, referer_header, sec_fetch_site_header, request_origin, context,
        )
        return (await self.inspect_async(facts)).verdict

    def _exempt(self, facts: RequestFacts, reason: Reason) -> Evaluation:
        logger.debug("CSRF check skipped method=%s content_type=%r reason=%s", facts.method, facts.content_type, reason.value)
        return Evaluation(Verdict.ALLOW, reason)

    def _combine(self, facts: RequestFacts, signals: SignalResults) -> Evaluation:
        if signals.any():
            return Evaluation(Verdict.ALLOW, Reason.SIGNALS, signals)
        logger.warning(
            "CSRF validation failed method=%s origin=%r referer=%r sec_fetch_site=%r request_origin=%s",
            facts.method, facts.origin, facts.referer, facts.sec_fetch_site, facts.request_origin,
        )
        return Evaluation(Verdict.DENY, Reason.SIGNALS, signals)


def build_options(values: Mapping[str, Any]) -> CSRFOptions:
    """Validate raw option values into a :class:`CSRFOptions`.

    Raises:
        CSRFConfigError: On any validation error.
    """
    try:
        return CSRFOptions(**values)
    except ValidationError as exc:
        raise CSRFConfigError(f"Invalid CSRF options: {exc}") from exc


def _require_sync(result: MatchResult) -> bool:
    if pyinspect.isawaitable(result):
        if pyinspect.iscoroutine(result):
            result.close()
        raise CSRFConfigError("An asynchronous predicate is configured; use inspect_async()")
    return bool(result)


async def _resolve(result: MatchResult) -> bool:
    if pyinspect.isawaitable(result):
        result = await result
    return bool(result)

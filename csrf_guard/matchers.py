"""Matchers for the Origin and Sec-Fetch-Site signals.

An option may be given as nothing, a single string, a collection of strings
or a predicate. Each shape is resolved once, when the policy is built, into
one of the variants below. All variants share the call signature
``matcher(candidate, facts)`` where ``facts`` is the request's
:class:`~csrf_guard.evaluator.RequestFacts`.
"""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from csrf_guard.errors import CSRFConfigError

logger = logging.getLogger(__name__)

MatchResult = Union[bool, Awaitable[Any]]
Predicate = Callable[[str, Any], Any]


@dataclass(frozen=True)
class SameOriginMatch:
    """Accept a candidate equal to the request's own origin."""

    def __call__(self, candidate: str, facts: Any) -> MatchResult:
        return candidate == facts.request_origin


@dataclass(frozen=True)
class ExactMatch:
    """Accept exactly one configured value."""

    value: str

    def __call__(self, candidate: str, facts: Any) -> MatchResult:
        return candidate == self.value


@dataclass(frozen=True)
class SetMatch:
    """Accept any of the configured values. An empty set accepts nothing."""

    values: frozenset[str]

    def __call__(self, candidate: str, facts: Any) -> MatchResult:
        return candidate in self.values


@dataclass(frozen=True)
class PredicateMatch:
    """Delegate to a caller-supplied predicate.

    The predicate receives ``(candidate, context)`` where ``context`` is
    whatever the host passed along with the request (the Starlette
    ``Request`` in the HTTP layer). It may return an awaitable; the async
    evaluation path awaits it.
    """

    predicate: Predicate

    def __call__(self, candidate: str, facts: Any) -> MatchResult:
        return self.predicate(candidate, facts.context)


Matcher = Union[SameOriginMatch, ExactMatch, SetMatch, PredicateMatch]


def resolve_matcher(
    value: Any,
    default: Matcher,
    *,
    name: str,
) -> Matcher:
    """Turn an option value into a matcher.

    Args:
        value: The configured option (None, str, collection of str, or callable).
        default: Matcher used when the option is absent.
        name: Option name, for error messages.

    Returns:
        The resolved matcher.

    Raises:
        CSRFConfigError: If the option has an unsupported shape.
    """
    if value is None or value == "":
        return default

    if isinstance(value, str):
        return ExactMatch(value)

    if callable(value):
        return PredicateMatch(value)

    if isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            if not isinstance(item, str):
                raise CSRFConfigError(f"{name} entries must be strings, got {type(item).__name__}")
        if not value:
            logger.warning("%s configured as an empty collection; the signal can never pass", name)
        return SetMatch(frozenset(value))

    raise CSRFConfigError(
        f"{name} must be a string, a collection of strings or a callable, got {type(value).__name__}"
    )

"""Pydantic schemas for policy configuration and error responses."""
from typing import Any, Callable, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from csrf_guard.constants import CSRF_FAILED_MESSAGE, ERR_CSRF_FAILED, SecFetchSite
from csrf_guard.utils import normalize_content_type

OriginOption = Union[StrictStr, Tuple[StrictStr, ...], Callable[..., Any]]
SecFetchSiteOption = Union[SecFetchSite, Tuple[SecFetchSite, ...], Callable[..., Any]]


class CSRFOptions(BaseModel):
    """Immutable CSRF policy configuration.

    Field names follow Python conventions; the camelCase names
    (``secFetchSite``, ``checkReferer``, ``allowedContentTypes``) are
    accepted as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    origin: Optional[OriginOption] = Field(
        None,
        description="Allowed Origin values. Defaults to the request's own origin.",
        examples=["https://example.com", ["https://a.example.com", "https://b.example.com"]],
    )
    sec_fetch_site: Optional[SecFetchSiteOption] = Field(
        None,
        alias="secFetchSite",
        description="Allowed Sec-Fetch-Site values. Defaults to 'same-origin'.",
        examples=["same-origin", ["same-origin", "same-site"]],
    )
    check_referer: bool = Field(
        True,
        alias="checkReferer",
        description="Let a same-origin Referer authorize the request.",
    )
    allowed_content_types: Optional[Tuple[StrictStr, ...]] = Field(
        None,
        alias="allowedContentTypes",
        description="Content types that require protection. Empty means all of them.",
        examples=[["application/json", "multipart/form-data"]],
    )

    @field_validator("allowed_content_types", mode="after")
    @classmethod
    def normalize_content_types(cls, v: Optional[Tuple[str, ...]]) -> Optional[Tuple[str, ...]]:
        """Reduce entries to bare media types, as headers are before matching."""
        if v is None:
            return None
        normalized = tuple(ct for ct in (normalize_content_type(t) for t in v) if ct)
        if v and not normalized:
            raise ValueError("allowed_content_types has only blank entries; use an empty list to protect all types")
        return normalized


class CSRFFailure(BaseModel):
    """Body of the 403 response sent when CSRF validation fails."""

    detail: str = Field(CSRF_FAILED_MESSAGE, examples=[CSRF_FAILED_MESSAGE])
    code: str = Field(ERR_CSRF_FAILED, examples=[ERR_CSRF_FAILED])
    request_id: str = Field("", examples=["9b1c3f0e-2d4a-4b8e-9a51-0f6f2f0f8c11"])


class HealthResponse(BaseModel):
    """Health check payload."""

    status: str = Field(..., examples=["healthy"])
    version: str = Field(..., examples=["0.1.0"])
    check_referer: bool = Field(..., examples=[True])
    protected_content_types: list[str] = Field(..., examples=[["application/json"]])
    request_id: str = Field("", examples=["9b1c3f0e-2d4a-4b8e-9a51-0f6f2f0f8c11"])

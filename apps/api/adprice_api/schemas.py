"""Pydantic schemas for API requests/responses."""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

# Strings keep their digits; JSON numbers render like the browser would.
PriceField = Union[str, float]


class KeyPair(str, Enum):
    """Trust boundary of an encrypted price."""

    EXTERNAL = "external"
    INTERNAL = "internal"


# ============================================================================
# POST /v1/creatives/render - Request/Response
# ============================================================================


class CreativeRenderRequest(BaseModel):
    """Request body for POST /v1/creatives/render."""

    ad_id: str = Field(..., min_length=1, description="Ad/impression id, nonce seed")
    markup: str = Field(..., description="Creative markup containing price macros")
    auction_price: PriceField = Field(..., description="Clearing price")
    exchange_rate: Optional[PriceField] = Field(
        None, description="Currency multiplier for the external price"
    )
    first_bid: Optional[PriceField] = None
    second_bid: Optional[PriceField] = None
    third_bid: Optional[PriceField] = None


class CreativeRenderResponse(BaseModel):
    """Response for POST /v1/creatives/render."""

    ad_id: str
    markup: str


# ============================================================================
# POST /v1/prices/* - Request/Response
# ============================================================================


class PriceTruncateRequest(BaseModel):
    """Request body for POST /v1/prices/truncate."""

    price: PriceField


class PriceTruncateResponse(BaseModel):
    """Response for POST /v1/prices/truncate."""

    price: str
    truncated: str


class PriceEncryptRequest(BaseModel):
    """Request body for POST /v1/prices/encrypt."""

    key_pair: KeyPair
    nonce_seed: str = Field(..., min_length=1, description="Ad/impression id")
    price: PriceField


class PriceEncryptResponse(BaseModel):
    """Response for POST /v1/prices/encrypt."""

    price: str
    encrypted: str


class PriceDecryptRequest(BaseModel):
    """Request body for POST /v1/prices/decrypt."""

    key_pair: KeyPair
    blob: str = Field(..., min_length=1, description="URL-safe encrypted price")


class PriceDecryptResponse(BaseModel):
    """Response for POST /v1/prices/decrypt."""

    price: str


# ============================================================================
# RFC 9457 Problem Details
# ============================================================================


class ProblemDetail(BaseModel):
    """RFC 9457 Problem Details for HTTP API errors.

    RFC 9457: detail can be either a string or a structured object (dict).
    """

    type: str = Field(..., description="URI reference identifying the problem type")
    title: str = Field(..., description="Short, human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: str | dict[str, Any] = Field(..., description="Human-readable explanation or structured error details")
    instance: Optional[str] = Field(None, description="URI reference identifying the specific occurrence")

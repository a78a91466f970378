"""
Pydantic v2 schemas for the push dispatch endpoint
==================================================

Request schema for an inbound notification batch and the response schema
for the aggregated per-token delivery result. Wire names are camelCase to
match the mobile client; Python attributes stay snake_case.
"""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

# FCM rejects multicast messages addressed to more than 500 tokens.
MAX_MULTICAST_TOKENS: int = 500

DeviceToken = Annotated[str, StringConstraints(strict=True, min_length=1)]
NonEmptyText = Annotated[str, StringConstraints(strict=True, min_length=1)]
DataValue = Annotated[str, StringConstraints(strict=True)]


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class NotificationRequest(BaseModel):
    """Inbound request describing one notification and its recipients."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    tokens: list[DeviceToken] = Field(
        min_length=1,
        max_length=MAX_MULTICAST_TOKENS,
        description="FCM registration tokens, in delivery-report order",
    )
    title: NonEmptyText = Field(description="Notification title")
    body: NonEmptyText = Field(description="Notification body text")
    data: Optional[dict[str, DataValue]] = Field(
        default=None,
        description="Optional key-value payload delivered to the app verbatim",
    )


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------

class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TokenResponse(_CamelModel):
    """Delivery outcome for the token at the same index in the request."""

    success: bool
    error_detail: Optional[str] = None
    message_id: Optional[str] = None


class DeliveryResult(_CamelModel):
    """Aggregated outcome of one multicast send."""

    success_count: int = Field(ge=0)
    failure_count: int = Field(ge=0)
    per_token_responses: list[TokenResponse] = Field(
        default_factory=list,
        alias="responses",
    )

    def to_wire(self) -> dict:
        """Serialise with camelCase keys, dropping absent optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ErrorResponse(BaseModel):
    """Body of every 400 and 500 response."""

    error: str

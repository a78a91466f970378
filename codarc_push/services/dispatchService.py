"""
Notification Dispatch Service
=============================

Validates an inbound notification batch, hands it to the push backend as a
single multicast send, and folds the per-token outcomes into a
``DeliveryResult``.

  1. ``parse_request`` deserialises the decoded JSON body into a
     ``NotificationRequest``; any schema violation becomes one
     ``InvalidRequest`` naming the offending fields.
  2. ``dispatch`` issues exactly one backend call, bounded by a timeout,
     and preserves the input token order in the result.

Per-token failures are data in the result. Only a failure of the backend
call as a whole (or a timeout) raises ``DeliveryBackendError``. There are no
retries.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from codarc_push.api.schemas.notification import (
    MAX_MULTICAST_TOKENS,
    DeliveryResult,
    NotificationRequest,
    TokenResponse,
)
from codarc_push.core.errors import DeliveryBackendError, InvalidRequest
from codarc_push.integrations.fcm import OutboundMulticast, PushBackend, TokenOutcome

logger = logging.getLogger(__name__)

DEFAULT_SEND_TIMEOUT_SECONDS: float = 30.0


# ---------------------------------------------------------------------------
# Validation messages
# ---------------------------------------------------------------------------

_FIELD_MESSAGES: dict[str, str] = {
    "tokens": "tokens array is required and must not be empty",
    "title": "title is required and must be a non-empty string",
    "body": "body is required and must be a non-empty string",
    "data": "data must be an object mapping string keys to string values",
}


def _describe_error(error: dict) -> str:
    """Turn one pydantic error entry into a client-facing message."""
    loc = error.get("loc", ())
    if not loc:
        return "request body must be a JSON object"

    field_name = str(loc[0])
    if field_name == "tokens":
        if len(loc) > 1:
            return f"tokens[{loc[1]}] must be a non-empty string"
        if error.get("type") == "too_long":
            return f"tokens array must not contain more than {MAX_MULTICAST_TOKENS} entries"
    return _FIELD_MESSAGES.get(field_name, f"{field_name} is invalid")


def describe_validation_error(exc: ValidationError) -> str:
    """Join the distinct field messages of ``exc`` in schema order."""
    messages: list[str] = []
    for error in exc.errors():
        message = _describe_error(error)
        if message not in messages:
            messages.append(message)
    return "; ".join(messages)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class NotificationDispatcher:
    """Forwards one notification batch to a push backend per call.

    Holds no per-request state, so a single instance serves concurrent
    requests.
    """

    def __init__(
        self,
        backend: PushBackend,
        timeout_seconds: float = DEFAULT_SEND_TIMEOUT_SECONDS,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self.backend = backend
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def parse_request(payload: Any) -> NotificationRequest:
        """Validate a decoded JSON body.

        Raises:
            InvalidRequest: If any field violates the request schema.
        """
        try:
            return NotificationRequest.model_validate(payload)
        except ValidationError as exc:
            raise InvalidRequest(describe_validation_error(exc)) from exc

    async def dispatch(self, request: NotificationRequest) -> DeliveryResult:
        """Send ``request`` to every token with one multicast call.

        Raises:
            DeliveryBackendError: If the backend call fails, times out, or
                reports a different number of outcomes than tokens sent.
        """
        message = OutboundMulticast(
            tokens=list(request.tokens),
            title=request.title,
            body=request.body,
            data=dict(request.data or {}),
        )

        logger.info(
            "Dispatching notification to %d tokens: title=%r",
            len(message.tokens),
            message.title,
        )

        try:
            outcomes = await asyncio.wait_for(
                asyncio.to_thread(self.backend.send_multicast, message),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Push backend %r timed out after %.1fs",
                self.backend.name,
                self.timeout_seconds,
            )
            raise DeliveryBackendError(
                f"push backend timed out after {self.timeout_seconds:g} seconds"
            ) from exc
        except DeliveryBackendError:
            raise
        except Exception as exc:
            logger.error("Push backend %r failed: %s", self.backend.name, exc)
            raise DeliveryBackendError(str(exc) or exc.__class__.__name__) from exc

        if len(outcomes) != len(message.tokens):
            raise DeliveryBackendError(
                f"push backend returned {len(outcomes)} results "
                f"for {len(message.tokens)} tokens"
            )

        result = _aggregate(outcomes)
        logger.info(
            "Dispatch complete: %d success, %d failures",
            result.success_count,
            result.failure_count,
        )
        return result


def _aggregate(outcomes: list[TokenOutcome]) -> DeliveryResult:
    responses = [
        TokenResponse(
            success=outcome.success,
            message_id=outcome.message_id if outcome.success else None,
            error_detail=None if outcome.success else (outcome.error or "Unknown error"),
        )
        for outcome in outcomes
    ]
    success_count = sum(1 for r in responses if r.success)
    return DeliveryResult(
        success_count=success_count,
        failure_count=len(responses) - success_count,
        per_token_responses=responses,
    )

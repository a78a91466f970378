"""
Push Dispatch Routes
====================

  POST     {dispatch_path}  -- Send one notification to a batch of device tokens
  OPTIONS  {dispatch_path}  -- CORS preflight

The router declares its paths relative to the mount point; ``create_app``
includes it under ``settings.dispatch_path``. Any other verb on the path is
answered with a plain-text 405 by the application's exception handlers.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from codarc_push.api.deps import Dispatcher
from codarc_push.api.schemas.notification import DeliveryResult, ErrorResponse
from codarc_push.core.errors import InvalidRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])

PREFLIGHT_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Methods": "POST",
    "Access-Control-Allow-Headers": "Content-Type",
}


# ---------------------------------------------------------------------------
# OPTIONS {dispatch_path}
# ---------------------------------------------------------------------------

@router.options(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    include_in_schema=False,
)
async def preflight() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=PREFLIGHT_HEADERS)


# ---------------------------------------------------------------------------
# POST {dispatch_path}
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=DeliveryResult,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    summary="Send a push notification to device tokens",
    description=(
        "Sends one notification (title, body and an optional string data "
        "payload) to every token with a single FCM multicast call. Per-token "
        "results are returned in the same order as the submitted tokens."
    ),
)
async def send_push_notification(
    request: Request,
    dispatcher: Dispatcher,
) -> JSONResponse:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise InvalidRequest("request body must be valid JSON") from exc

    notification = dispatcher.parse_request(payload)
    result = await dispatcher.dispatch(notification)

    return JSONResponse(status_code=status.HTTP_200_OK, content=result.to_wire())

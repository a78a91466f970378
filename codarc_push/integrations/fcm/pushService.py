"""
Firebase Cloud Messaging (FCM) Push Backend
===========================================

Low-level integration with the Firebase Admin SDK for multicast sends.

The dispatcher depends on the ``PushBackend`` interface only; the
``FirebasePushBackend`` adapter is constructed explicitly at application
startup and injected, so tests substitute their own backend.

Initialization:
  ``FirebasePushBackend.from_settings`` creates a *named* Firebase app so the
  process-wide default app is never touched. Credentials come from one of:
    - FIREBASE_SERVICE_ACCOUNT_PATH  -- path to a JSON service account file
    - FIREBASE_CREDENTIALS_JSON      -- raw JSON string of the service account
    - Application Default Credentials when neither is set (Cloud Run,
      Cloud Functions and ``gcloud auth application-default login``)

Failure model:
  Per-token failures (stale or unregistered tokens, invalid arguments) are
  returned as ``TokenOutcome(success=False)``. Any exception raised by the
  SDK call itself is re-raised as ``DeliveryBackendError``. Nothing is
  retried here.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import firebase_admin
from firebase_admin import credentials, messaging

from codarc_push.core.errors import DeliveryBackendError

if TYPE_CHECKING:
    from codarc_push.core.config import Settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Backend message and result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OutboundMulticast:
    """One notification addressed to an ordered list of tokens."""
    tokens: list[str]
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TokenOutcome:
    """Result of delivering to a single token."""
    success: bool
    message_id: str | None = None
    error: str | None = None


# ---------------------------------------------------------------------------
# Backend interface
# ---------------------------------------------------------------------------

class PushBackend(ABC):
    """A push-delivery service reachable through a multicast send."""

    name: str = "base"

    @abstractmethod
    def send_multicast(self, message: OutboundMulticast) -> list[TokenOutcome]:
        """Deliver ``message`` and return one outcome per token, in order.

        This call blocks. Raise ``DeliveryBackendError`` when the send fails
        as a whole.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the backend."""


# ---------------------------------------------------------------------------
# Firebase Admin SDK adapter
# ---------------------------------------------------------------------------

def load_credentials(settings: Settings) -> credentials.Base:
    """Build Firebase credentials from the configured source.

    Args:
        settings: Application settings.

    Returns:
        A certificate credential when a service account is configured,
        otherwise Application Default Credentials.
    """
    if settings.firebase_service_account_path:
        logger.info(
            "Loading Firebase credentials from service account file: %s",
            settings.firebase_service_account_path,
        )
        return credentials.Certificate(settings.firebase_service_account_path)
    if settings.firebase_credentials_json:
        logger.info("Loading Firebase credentials from JSON environment variable")
        return credentials.Certificate(json.loads(settings.firebase_credentials_json))

    logger.info("No service account configured; using Application Default Credentials")
    return credentials.ApplicationDefault()


class FirebasePushBackend(PushBackend):
    """Sends multicast messages through ``messaging.send_each_for_multicast``."""

    name = "fcm"

    def __init__(self, app: firebase_admin.App, *, dry_run: bool = False) -> None:
        self.app = app
        self.dry_run = dry_run

    @classmethod
    def from_settings(cls, settings: Settings) -> FirebasePushBackend:
        """Initialise a dedicated Firebase app from ``settings``."""
        options: dict = {"httpTimeout": settings.fcm_send_timeout_seconds}
        if settings.firebase_project_id:
            options["projectId"] = settings.firebase_project_id

        app = firebase_admin.initialize_app(
            load_credentials(settings),
            options,
            name=settings.firebase_app_name,
        )
        logger.info("Firebase app %r initialised", settings.firebase_app_name)
        return cls(app, dry_run=settings.fcm_dry_run)

    def send_multicast(self, message: OutboundMulticast) -> list[TokenOutcome]:
        multicast = messaging.MulticastMessage(
            tokens=list(message.tokens),
            notification=messaging.Notification(title=message.title, body=message.body),
            data=dict(message.data),
        )

        try:
            response: messaging.BatchResponse = messaging.send_each_for_multicast(
                multicast, dry_run=self.dry_run, app=self.app
            )
        except Exception as exc:
            logger.error(
                "FCM multicast failed for %d tokens: %s", len(message.tokens), exc
            )
            raise DeliveryBackendError(str(exc) or exc.__class__.__name__) from exc

        outcomes: list[TokenOutcome] = []
        for send_response in response.responses:
            if send_response.success:
                outcomes.append(
                    TokenOutcome(success=True, message_id=send_response.message_id)
                )
            else:
                error = send_response.exception
                outcomes.append(
                    TokenOutcome(
                        success=False,
                        error=str(error) if error else "Unknown error",
                    )
                )

        logger.info(
            "FCM multicast complete: %d success, %d failures",
            response.success_count,
            response.failure_count,
        )
        return outcomes

    def close(self) -> None:
        firebase_admin.delete_app(self.app)
        logger.info("Firebase app %r deleted", self.app.name)

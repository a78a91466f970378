"""
Shared pytest fixtures for the push dispatcher tests.

Provides a recording fake ``PushBackend`` in place of Firebase, a dispatcher
wired to it, and an httpx AsyncClient bound to the FastAPI app via ASGI
transport (no network needed).
"""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from codarc_push.integrations.fcm import OutboundMulticast, PushBackend, TokenOutcome
from codarc_push.main import create_app
from codarc_push.services.dispatchService import NotificationDispatcher

DISPATCH_PATH = "/sendPushNotification"


# ---------------------------------------------------------------------------
# Fake push backend
# ---------------------------------------------------------------------------

class FakePushBackend(PushBackend):
    """Records every multicast it receives.

    By default every token succeeds. Set ``outcomes`` to script per-token
    results, ``error`` to fail the whole call, or ``delay`` to block.
    """

    name = "fake"

    def __init__(self) -> None:
        self.calls: list[OutboundMulticast] = []
        self.outcomes: list[TokenOutcome] | None = None
        self.error: Exception | None = None
        self.delay: float = 0.0
        self.closed = False

    def send_multicast(self, message: OutboundMulticast) -> list[TokenOutcome]:
        self.calls.append(message)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.outcomes is not None:
            return list(self.outcomes)
        return [
            TokenOutcome(success=True, message_id=f"projects/p/messages/{i}")
            for i, _ in enumerate(message.tokens)
        ]

    def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Dispatcher + HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_backend() -> FakePushBackend:
    return FakePushBackend()


@pytest.fixture
def dispatcher(fake_backend: FakePushBackend) -> NotificationDispatcher:
    return NotificationDispatcher(fake_backend, timeout_seconds=2.0)


@pytest_asyncio.fixture
async def client(dispatcher: NotificationDispatcher) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient connected to the app via ASGI transport."""
    app = create_app(dispatcher=dispatcher)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

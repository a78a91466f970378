"""
Shared FastAPI dependencies for the push dispatcher.

The dispatcher is built once per application (see ``codarc_push.main``) and
stored on ``app.state``; route handlers receive it through ``Dispatcher``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from codarc_push.core.errors import DeliveryBackendError
from codarc_push.services.dispatchService import NotificationDispatcher


def get_dispatcher(request: Request) -> NotificationDispatcher:
    """Return the dispatcher attached to the running application.

    Usage in a route::

        @router.post("")
        async def send(dispatcher: Dispatcher):
            ...
    """
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise DeliveryBackendError("push backend is not configured")
    return dispatcher


Dispatcher = Annotated[NotificationDispatcher, Depends(get_dispatcher)]

"""
Firebase Cloud Messaging integration
====================================

Public re-exports for the FCM push backend.
"""

from .pushService import (
    FirebasePushBackend,
    OutboundMulticast,
    PushBackend,
    TokenOutcome,
    load_credentials,
)

__all__ = [
    "FirebasePushBackend",
    "OutboundMulticast",
    "PushBackend",
    "TokenOutcome",
    "load_credentials",
]

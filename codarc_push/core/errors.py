"""
Dispatcher error hierarchy.

Each error carries the HTTP status it maps to at the handler boundary.
Per-token delivery failures are not errors; they are reported as data in
the delivery result.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base exception for notification dispatch errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequest(DispatchError):
    """Raised when the inbound request is malformed or missing fields."""

    status_code = 400


class MethodNotAllowed(DispatchError):
    """Raised for any HTTP verb other than POST or OPTIONS."""

    status_code = 405

    def __init__(self, message: str = "Method Not Allowed") -> None:
        super().__init__(message)


class DeliveryBackendError(DispatchError):
    """Raised when the push backend call fails as a whole."""

    status_code = 500

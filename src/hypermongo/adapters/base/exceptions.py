"""Adapter-specific exceptions."""

from __future__ import annotations

from hypermongo.models.response import HyperErr


class AdapterError(Exception):
    """Base exception for adapter errors."""


class HyperError(AdapterError):
    """A failure that is already normalized.

    Raised by business-rule checks (existence, empty documents) and by
    clients that can't support an action. Carries the ``HyperErr`` value
    that the port hands back to callers.
    """

    def __init__(self, status: int, msg: str) -> None:
        super().__init__(msg)
        self.err = HyperErr(status=status, msg=msg)

    @property
    def status(self) -> int:
        return self.err.status

    @property
    def msg(self) -> str:
        return self.err.msg


class StoreRequestError(AdapterError):
    """Raised when a remote store rejects a request."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ConnectionError(AdapterError):
    """Raised when the client cannot connect to the backing store."""


class ConfigurationError(AdapterError):
    """Raised when adapter or client configuration is invalid."""

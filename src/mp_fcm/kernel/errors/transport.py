"""Transport errors — raised by HTTP adapters, never by the messaging core."""

from __future__ import annotations

from typing import Any

from mp_fcm.kernel.errors.base import BaseError


class TransportError(BaseError):
    """A request failed below HTTP (connect, read, timeout, protocol)."""

    default_code = "transport_error"

    def __init__(self, message: str, *, url: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.url = url


class SessionFaultError(TransportError):
    """The shared session itself broke; every open stream on it is lost."""

    default_code = "session_fault"


__all__ = ["SessionFaultError", "TransportError"]

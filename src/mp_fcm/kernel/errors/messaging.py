"""Messaging errors — validation, backend, credential and network failures."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from mp_fcm.kernel.errors.base import BaseError
from mp_fcm.kernel.errors.codes import DEFAULT_MESSAGES, RETRYABLE_CODES, ErrorCode

if TYPE_CHECKING:
    from mp_fcm.messaging.responses import BatchResponse


class MessagingError(BaseError):
    """An error reported by, or on the way to, the messaging backend.

    ``http_status`` is set when the error was mapped from an HTTP response.
    """

    default_code = ErrorCode.UNKNOWN_ERROR.value

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | ErrorCode | None = None,
        http_status: int | None = None,
        **kwargs: Any,
    ) -> None:
        resolved = ErrorCode(code) if code is not None else ErrorCode(self.default_code)
        super().__init__(message or DEFAULT_MESSAGES[resolved], code=resolved.value, **kwargs)
        self.http_status = http_status

    @property
    def is_retryable(self) -> bool:
        return self.code in RETRYABLE_CODES


class InvalidArgumentError(MessagingError, ValueError):
    """A message or argument failed local validation; nothing was sent."""

    default_code = ErrorCode.INVALID_ARGUMENT.value

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class CredentialError(MessagingError):
    """The access-token provider failed or returned an unusable token."""

    default_code = ErrorCode.INVALID_CREDENTIAL.value


class NetworkError(MessagingError):
    """The request never produced an HTTP response."""

    default_code = ErrorCode.NETWORK_ERROR.value


class MessagingSessionError(MessagingError):
    """The shared multiplexed session failed while a batch was in flight.

    ``pending_batch_response`` resolves to the partial :class:`BatchResponse`
    once every in-flight request has been settled or cancelled. Outcomes that
    completed before the fault are preserved; the rest carry
    ``app/network-error``.
    """

    default_code = ErrorCode.SESSION_NETWORK_ERROR.value

    def __init__(
        self,
        message: str | None = None,
        *,
        pending_batch_response: asyncio.Future[BatchResponse],
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.pending_batch_response = pending_batch_response


__all__ = [
    "CredentialError",
    "InvalidArgumentError",
    "MessagingError",
    "MessagingSessionError",
    "NetworkError",
]

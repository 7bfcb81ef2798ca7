"""Messaging – SingleSendClient.

Sends one message per request to ``/v1/projects/{project_id}/messages:send``.
:meth:`SingleSendClient.send` raises mapped errors; :meth:`dispatch` is the
non-raising primitive the batch engine fills its result slots with.
"""
from __future__ import annotations

import platform
from typing import Awaitable, Callable

from mp_fcm import __version__
from mp_fcm.adapters.http import HttpRequest, HttpResponse, HttpTransport
from mp_fcm.config.settings import MessagingSettings
from mp_fcm.credentials import AccessTokenProvider, fetch_access_token
from mp_fcm.kernel.errors import ErrorCode, MessagingError, TransportError
from mp_fcm.messaging.encoder import encode_send_request
from mp_fcm.messaging.error_mapper import ErrorMapper
from mp_fcm.messaging.models import Message
from mp_fcm.messaging.responses import SendResponse
from mp_fcm.messaging.validators import check_dry_run, validate_message
from mp_fcm.observability import get_logger
from mp_fcm.resilience import RetryPolicy

logger = get_logger(__name__)

SendFn = Callable[[HttpRequest], Awaitable[HttpResponse]]


def build_headers(access_token: str) -> dict[str, str]:
    """Headers every backend request carries."""
    return {
        "Authorization": f"Bearer {access_token}",
        "X-Firebase-Client": f"mp-fcm/{__version__}",
        "X-Goog-Api-Client": f"gl-python/{platform.python_version()} fire/{__version__}",
    }


def _message_id(response: HttpResponse) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    name = body.get("name") if isinstance(body, dict) else None
    if not isinstance(name, str) or not name:
        raise MessagingError(
            f'Unexpected send response without a message name: "{response.text}"',
            code=ErrorCode.UNKNOWN_ERROR,
            http_status=response.status_code,
        )
    return name


class SingleSendClient:
    """Validate, encode and POST a single message."""

    def __init__(
        self,
        settings: MessagingSettings,
        credentials: AccessTokenProvider,
        transport: HttpTransport,
        retry: RetryPolicy | None = None,
    ) -> None:
        self._settings = settings
        self._credentials = credentials
        self._transport = transport
        self._retry = retry

    def build_request(self, message: Message, access_token: str, dry_run: bool = False) -> HttpRequest:
        """Encode an already validated *message* into an HTTP request."""
        return HttpRequest(
            method="POST",
            url=self._settings.send_url,
            headers=build_headers(access_token),
            json=encode_send_request(message, dry_run),
            timeout=self._settings.timeout_seconds,
        )

    async def send(self, message: Message, dry_run: bool = False) -> str:
        """Send *message* and return the backend message id.

        Raises
        ------
        InvalidArgumentError
            Validation failed; nothing was sent.
        CredentialError
            No usable access token could be obtained.
        MessagingError
            The backend rejected the message or could not be reached.
        """
        check_dry_run(dry_run)
        validate_message(message)
        access_token = await fetch_access_token(self._credentials)
        return await self._execute(self.build_request(message, access_token, dry_run))

    async def dispatch(self, request: HttpRequest, send: SendFn | None = None) -> SendResponse:
        """Send a prepared request; failures come back as a failed response.

        *send* overrides the discrete transport, e.g. with a multiplexed
        session's ``send``. Retries apply to the discrete transport only.
        Unexpected exceptions become ``messaging/unknown-error`` so one slot
        never aborts its batch.
        """
        try:
            message_id = await self._execute(request, send)
        except MessagingError as exc:
            return SendResponse.failed(exc)
        except Exception as exc:
            logger.warning("messaging.send.unexpected_error", url=request.url, exc_info=exc)
            return SendResponse.failed(
                MessagingError(
                    f"Unexpected error while sending message: {exc!r}",
                    code=ErrorCode.UNKNOWN_ERROR,
                    cause=exc,
                )
            )
        return SendResponse.ok(message_id)

    async def _execute(self, request: HttpRequest, send: SendFn | None = None) -> str:
        try:
            if send is not None:
                response = await send(request)
            elif self._retry is not None:
                response = await self._retry.execute_async(lambda: self._transport.send(request))
            else:
                response = await self._transport.send(request)
        except TransportError as exc:
            error = ErrorMapper.from_transport_error(exc)
            logger.debug("messaging.send.failed", code=error.code, reason=exc.message)
            raise error from exc
        if not response.is_success:
            error = ErrorMapper.from_response(
                response.status_code, response.content, response.content_type
            )
            logger.debug("messaging.send.failed", code=error.code, status=response.status_code)
            raise error
        return _message_id(response)


__all__ = ["SingleSendClient", "build_headers"]

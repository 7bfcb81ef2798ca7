"""Messaging – BatchCoordinator.

Fans a list of up to 500 messages out as independent sends and gathers the
outcomes into a :class:`BatchResponse` whose ``responses[i]`` always belongs
to ``messages[i]``. Each message either fails validation locally or is
dispatched; a failing message never aborts its siblings.

In ``multiplexed`` mode all sends share one HTTP/2 session. If that session
faults mid-batch the call raises :class:`MessagingSessionError`; its
``pending_batch_response`` task resolves to the partial outcome once every
in-flight send has been settled or cancelled.
"""
from __future__ import annotations

import asyncio
from typing import Sequence

from mp_fcm.adapters.http import HttpRequest, SessionTransport
from mp_fcm.config.settings import MessagingSettings, TransportMode
from mp_fcm.credentials import AccessTokenProvider, fetch_access_token
from mp_fcm.kernel.errors import (
    CredentialError,
    InvalidArgumentError,
    MessagingSessionError,
    NetworkError,
)
from mp_fcm.messaging.models import Message, MulticastMessage
from mp_fcm.messaging.responses import BatchResponse, SendResponse
from mp_fcm.messaging.single import SingleSendClient
from mp_fcm.messaging.validators import (
    check_dry_run,
    validate_batch,
    validate_message,
    validate_multicast,
)
from mp_fcm.observability import get_logger

logger = get_logger(__name__)

_Slots = list["SendResponse | None"]


def _fill(slots: _Slots, response: SendResponse) -> None:
    for index, slot in enumerate(slots):
        if slot is None:
            slots[index] = response


class BatchCoordinator:
    """Send many messages concurrently with ordered, per-message outcomes."""

    def __init__(
        self,
        settings: MessagingSettings,
        credentials: AccessTokenProvider,
        single: SingleSendClient,
        transport: SessionTransport,
    ) -> None:
        self._settings = settings
        self._credentials = credentials
        self._single = single
        self._transport = transport

    async def send_each(self, messages: Sequence[Message], dry_run: bool = False) -> BatchResponse:
        validate_batch(messages)
        check_dry_run(dry_run)

        slots: _Slots = [None] * len(messages)
        valid: list[int] = []
        for index, message in enumerate(messages):
            try:
                validate_message(message)
            except InvalidArgumentError as exc:
                slots[index] = SendResponse.failed(exc)
            else:
                valid.append(index)

        if valid:
            try:
                access_token = await fetch_access_token(self._credentials)
            except CredentialError as exc:
                logger.debug("messaging.batch.credential_failed", size=len(messages))
                _fill(slots, SendResponse.failed(exc))
                return BatchResponse(list(slots))  # type: ignore[arg-type]

            requests = {
                index: self._single.build_request(messages[index], access_token, dry_run)
                for index in valid
            }
            if self._settings.transport_mode is TransportMode.MULTIPLEXED:
                await self._send_multiplexed(requests, slots)
            else:
                await self._send_discrete(requests, slots)

        response = BatchResponse(list(slots))  # type: ignore[arg-type]
        logger.debug(
            "messaging.batch.completed",
            size=len(messages),
            mode=self._settings.transport_mode.value,
            success_count=response.success_count,
            failure_count=response.failure_count,
        )
        return response

    async def send_each_for_multicast(
        self, multicast: MulticastMessage, dry_run: bool = False
    ) -> BatchResponse:
        validate_multicast(multicast)
        return await self.send_each(multicast.to_messages(), dry_run)

    # ------------------------------------------------------------------
    # Dispatch modes
    # ------------------------------------------------------------------

    async def _send_discrete(self, requests: dict[int, HttpRequest], slots: _Slots) -> None:
        results = await asyncio.gather(*(self._single.dispatch(r) for r in requests.values()))
        for index, result in zip(requests, results):
            slots[index] = result

    async def _send_multiplexed(self, requests: dict[int, HttpRequest], slots: _Slots) -> None:
        async with self._transport.open_session() as session:
            tasks = {
                asyncio.create_task(self._single.dispatch(request, session.send)): index
                for index, request in requests.items()
            }
            pending = set(tasks)
            fault_watch = asyncio.create_task(session.wait_fault())
            try:
                while pending and session.fault is None:
                    done, pending = await asyncio.wait(
                        pending | {fault_watch}, return_when=asyncio.FIRST_COMPLETED
                    )
                    pending.discard(fault_watch)
                    for task in done:
                        if task is not fault_watch:
                            slots[tasks[task]] = task.result()
            finally:
                fault_watch.cancel()

            fault = session.fault
            if fault is None:
                return

            logger.warning(
                "messaging.batch.session_fault",
                settled=sum(1 for s in slots if s is not None),
                in_flight=len(pending),
                reason=str(fault),
            )
            for task in pending:
                task.cancel()
            drain = asyncio.create_task(self._drain(pending, tasks, slots))
            raise MessagingSessionError(
                "The HTTP/2 session failed while the batch was in flight.",
                pending_batch_response=drain,
                cause=fault,
            )

    @staticmethod
    async def _drain(
        pending: set[asyncio.Task[SendResponse]],
        tasks: dict[asyncio.Task[SendResponse], int],
        slots: _Slots,
    ) -> BatchResponse:
        if pending:
            await asyncio.wait(pending)
        for task in pending:
            if not task.cancelled():
                slots[tasks[task]] = task.result()
        _fill(
            slots,
            SendResponse.failed(NetworkError("Request aborted: the HTTP/2 session failed.")),
        )
        return BatchResponse(list(slots))  # type: ignore[arg-type]


__all__ = ["BatchCoordinator"]

"""Messaging – MessagingClient facade."""
from __future__ import annotations

from typing import Any, Sequence

from mp_fcm.adapters.http import HttpxTransport
from mp_fcm.config.loaders import EnvSettingsLoader
from mp_fcm.config.settings import MessagingSettings
from mp_fcm.credentials import AccessTokenProvider
from mp_fcm.kernel.errors import InvalidArgumentError
from mp_fcm.messaging.batch import BatchCoordinator
from mp_fcm.messaging.models import Message, MulticastMessage
from mp_fcm.messaging.responses import BatchResponse, TopicManagementResponse
from mp_fcm.messaging.single import SingleSendClient
from mp_fcm.messaging.topics import TopicMembershipClient
from mp_fcm.resilience import RetryPolicy


class MessagingClient:
    """Entry point for sending messages and managing topic membership.

    Usage::

        settings = MessagingSettings(project_id="my-project")
        async with MessagingClient(settings, StaticAccessTokenProvider(token)) as client:
            message_id = await client.send(Message(token=device, notification=Notification("Hi")))

    When *transport* is omitted an :class:`HttpxTransport` is created and
    closed with the client. *retry* defaults to the policy described by the
    settings (none when ``max_retries`` is 0).
    """

    def __init__(
        self,
        settings: MessagingSettings,
        credentials: AccessTokenProvider,
        transport: Any = None,
        retry: RetryPolicy | None = None,
    ) -> None:
        if not isinstance(settings.project_id, str) or not settings.project_id:
            raise InvalidArgumentError(
                "Failed to determine project ID for Messaging. Set FCM_PROJECT_ID "
                "or pass project_id in MessagingSettings."
            )
        self._settings = settings
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(timeout=settings.timeout_seconds)
        if retry is None:
            retry = RetryPolicy.from_settings(settings)
        self._single = SingleSendClient(settings, credentials, self._transport, retry)
        self._batch = BatchCoordinator(settings, credentials, self._single, self._transport)
        self._topics = TopicMembershipClient(settings, credentials, self._transport)

    @classmethod
    def from_env(
        cls,
        credentials: AccessTokenProvider,
        environ: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> "MessagingClient":
        """Build a client from ``FCM_*`` environment variables."""
        settings = EnvSettingsLoader(environ).load(MessagingSettings)
        return cls(settings, credentials, **kwargs)

    @property
    def settings(self) -> MessagingSettings:
        return self._settings

    async def __aenter__(self) -> "MessagingClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def send(self, message: Message, dry_run: bool = False) -> str:
        """Send one message; returns the message id assigned by the backend."""
        return await self._single.send(message, dry_run)

    async def send_each(self, messages: Sequence[Message], dry_run: bool = False) -> BatchResponse:
        """Send up to 500 messages; ``responses[i]`` is the outcome of ``messages[i]``."""
        return await self._batch.send_each(messages, dry_run)

    async def send_each_for_multicast(
        self, multicast: MulticastMessage, dry_run: bool = False
    ) -> BatchResponse:
        return await self._batch.send_each_for_multicast(multicast, dry_run)

    async def subscribe_to_topic(
        self, tokens: str | list[str], topic: str
    ) -> TopicManagementResponse:
        return await self._topics.subscribe_to_topic(tokens, topic)

    async def unsubscribe_from_topic(
        self, tokens: str | list[str], topic: str
    ) -> TopicManagementResponse:
        return await self._topics.unsubscribe_from_topic(tokens, topic)


__all__ = ["MessagingClient"]

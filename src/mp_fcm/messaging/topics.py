"""Messaging – TopicMembershipClient.

Adds or removes up to 1000 registration tokens to or from a topic with one
call to the Instance ID ``batchAdd`` / ``batchRemove`` endpoints and reports
per-token failures by index into the caller's token list.
"""
from __future__ import annotations

from typing import Any

from mp_fcm.adapters.http import HttpRequest, HttpResponse, HttpTransport
from mp_fcm.config.settings import MessagingSettings
from mp_fcm.credentials import AccessTokenProvider, fetch_access_token
from mp_fcm.kernel.errors import TransportError
from mp_fcm.messaging.error_mapper import ErrorMapper
from mp_fcm.messaging.responses import TopicManagementError, TopicManagementResponse
from mp_fcm.messaging.single import build_headers
from mp_fcm.messaging.validators import (
    TOPIC_PREFIX,
    validate_registration_tokens,
    validate_topic_management_topic,
)
from mp_fcm.observability import get_logger

logger = get_logger(__name__)

_SUBSCRIBE_PATH = "/iid/v1:batchAdd"
_UNSUBSCRIBE_PATH = "/iid/v1:batchRemove"


def _body(response: HttpResponse) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class TopicMembershipClient:
    def __init__(
        self,
        settings: MessagingSettings,
        credentials: AccessTokenProvider,
        transport: HttpTransport,
    ) -> None:
        self._settings = settings
        self._credentials = credentials
        self._transport = transport

    async def subscribe_to_topic(
        self, tokens: str | list[str], topic: str
    ) -> TopicManagementResponse:
        return await self._manage(tokens, topic, "subscribe_to_topic", _SUBSCRIBE_PATH)

    async def unsubscribe_from_topic(
        self, tokens: str | list[str], topic: str
    ) -> TopicManagementResponse:
        return await self._manage(tokens, topic, "unsubscribe_from_topic", _UNSUBSCRIBE_PATH)

    async def _manage(
        self, tokens: str | list[str], topic: str, method: str, path: str
    ) -> TopicManagementResponse:
        token_list = validate_registration_tokens(tokens, method)
        name = validate_topic_management_topic(topic, method)
        access_token = await fetch_access_token(self._credentials)

        headers = build_headers(access_token)
        headers["access_token_auth"] = "true"
        request = HttpRequest(
            method="POST",
            url=self._settings.topic_management_endpoint.rstrip("/") + path,
            headers=headers,
            json={"to": TOPIC_PREFIX + name, "registration_tokens": token_list},
            timeout=self._settings.timeout_seconds,
        )
        try:
            response = await self._transport.send(request)
        except TransportError as exc:
            raise ErrorMapper.from_transport_error(exc) from exc

        body = _body(response)
        if not response.is_success or (isinstance(body, dict) and "error" in body):
            error = ErrorMapper.from_response(
                response.status_code, response.content, response.content_type
            )
            logger.debug("messaging.topic.failed", method=method, code=error.code)
            raise error

        results = body.get("results") if isinstance(body, dict) else None
        if not isinstance(results, list):
            results = []
        errors = [
            TopicManagementError(index, ErrorMapper.from_topic_result(result["error"]))
            for index, result in enumerate(results)
            if isinstance(result, dict) and result.get("error")
        ]
        success_count = len(results) - len(errors)
        logger.debug(
            "messaging.topic.completed",
            method=method,
            topic=name,
            success_count=success_count,
            failure_count=len(errors),
        )
        return TopicManagementResponse(
            success_count=success_count, failure_count=len(errors), errors=errors
        )


__all__ = ["TopicMembershipClient"]

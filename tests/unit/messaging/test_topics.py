"""Unit tests for topic subscription management."""
from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest
import respx

from mp_fcm.config import MessagingSettings
from mp_fcm.credentials import StaticAccessTokenProvider
from mp_fcm.kernel.errors import InvalidArgumentError, MessagingError, NetworkError
from mp_fcm.messaging import MessagingClient, TopicManagementResponse

ADD_URL = "https://iid.googleapis.com/iid/v1:batchAdd"
REMOVE_URL = "https://iid.googleapis.com/iid/v1:batchRemove"


def _call(method: str, tokens: Any, topic: str) -> TopicManagementResponse:
    async def run() -> TopicManagementResponse:
        async with MessagingClient(
            MessagingSettings(project_id="proj"), StaticAccessTokenProvider("access-token")
        ) as client:
            return await getattr(client, method)(tokens, topic)

    return asyncio.run(run())


def _results(*entries: dict[str, str]) -> httpx.Response:
    return httpx.Response(200, json={"results": list(entries)})


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------


class TestTopicRequests:
    @respx.mock
    def test_subscribe_request(self) -> None:
        route = respx.post(ADD_URL).mock(return_value=_results({}, {}))
        result = _call("subscribe_to_topic", ["a", "b"], "news")

        sent = route.calls.last.request
        assert json.loads(sent.content) == {"to": "/topics/news", "registration_tokens": ["a", "b"]}
        assert sent.headers["access_token_auth"] == "true"
        assert sent.headers["authorization"] == "Bearer access-token"
        assert result == TopicManagementResponse(success_count=2, failure_count=0, errors=[])

    @respx.mock
    def test_unsubscribe_single_token_and_prefixed_topic(self) -> None:
        route = respx.post(REMOVE_URL).mock(return_value=_results({}))
        result = _call("unsubscribe_from_topic", "a", "/topics/news")

        assert json.loads(route.calls.last.request.content) == {
            "to": "/topics/news",
            "registration_tokens": ["a"],
        }
        assert result.success_count == 1

    @respx.mock
    def test_private_topic(self) -> None:
        route = respx.post(ADD_URL).mock(return_value=_results({}))
        _call("subscribe_to_topic", "a", "/topics/private/news")
        assert json.loads(route.calls.last.request.content)["to"] == "/topics/private/news"

    @respx.mock
    def test_1000_tokens_in_one_request(self) -> None:
        route = respx.post(ADD_URL).mock(return_value=_results(*([{}] * 1000)))
        result = _call("subscribe_to_topic", [f"t{i}" for i in range(1000)], "news")
        assert route.call_count == 1
        assert result.success_count == 1000


# ---------------------------------------------------------------------------
# Per-token results
# ---------------------------------------------------------------------------


class TestTopicResults:
    @respx.mock
    def test_errors_reported_by_index(self) -> None:
        respx.post(ADD_URL).mock(
            return_value=_results({}, {"error": "NOT_FOUND"}, {"error": "TOO_MANY_TOPICS"})
        )
        result = _call("subscribe_to_topic", ["a", "b", "c"], "news")

        assert result.success_count == 1
        assert result.failure_count == 2
        assert [e.index for e in result.errors] == [1, 2]
        assert [e.error.code for e in result.errors] == [
            "messaging/registration-token-not-registered",
            "messaging/too-many-topics",
        ]

    @respx.mock
    def test_unknown_result_error(self) -> None:
        respx.post(REMOVE_URL).mock(return_value=_results({"error": "WHATEVER"}))
        result = _call("unsubscribe_from_topic", ["a"], "news")
        assert result.errors[0].error.code == "messaging/unknown-error"


# ---------------------------------------------------------------------------
# Whole-call failures
# ---------------------------------------------------------------------------


class TestTopicFailures:
    @respx.mock(assert_all_called=False)
    def test_1001_tokens_rejected_before_request(self) -> None:
        route = respx.post(ADD_URL).mock(return_value=_results())
        with pytest.raises(InvalidArgumentError):
            _call("subscribe_to_topic", ["t"] * 1001, "news")
        assert not route.called

    @pytest.mark.parametrize("topic", ["", "foo bar", "/topics/"])
    def test_invalid_topic_rejected(self, topic: str) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            _call("subscribe_to_topic", ["t"], topic)
        assert "subscribe_to_topic()" in exc_info.value.message

    @respx.mock
    def test_top_level_error_with_200(self) -> None:
        respx.post(ADD_URL).mock(
            return_value=httpx.Response(200, json={"error": "InvalidParameters"})
        )
        with pytest.raises(MessagingError) as exc_info:
            _call("subscribe_to_topic", ["t"], "news")
        assert exc_info.value.code == "messaging/invalid-argument"

    @respx.mock
    def test_http_error_status(self) -> None:
        respx.post(REMOVE_URL).mock(return_value=httpx.Response(401, text="Unauthorized"))
        with pytest.raises(MessagingError) as exc_info:
            _call("unsubscribe_from_topic", ["t"], "news")
        assert exc_info.value.code == "messaging/authentication-error"

    @respx.mock
    def test_network_failure(self) -> None:
        respx.post(ADD_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))
        with pytest.raises(NetworkError):
            _call("subscribe_to_topic", ["t"], "news")

    @respx.mock
    def test_json_error_without_known_code(self) -> None:
        respx.post(ADD_URL).mock(return_value=httpx.Response(400, json={"error": "Unknown"}))
        with pytest.raises(MessagingError) as exc_info:
            _call("subscribe_to_topic", ["t"], "news")
        assert exc_info.value.code == "messaging/unknown-error"

    @respx.mock
    def test_json_body_without_error(self) -> None:
        respx.post(REMOVE_URL).mock(return_value=httpx.Response(400, json={"foo": "bar"}))
        with pytest.raises(MessagingError) as exc_info:
            _call("unsubscribe_from_topic", ["t"], "news")
        assert exc_info.value.code == "messaging/unknown-error"

    @respx.mock
    def test_malformed_result_error(self) -> None:
        respx.post(ADD_URL).mock(return_value=_results({"error": ["NOT_FOUND"]}, {}))
        result = _call("subscribe_to_topic", ["a", "b"], "news")
        assert result.failure_count == 1
        assert result.errors[0].error.code == "messaging/unknown-error"

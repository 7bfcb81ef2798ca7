"""Messaging error mapper – backend responses to client error codes.

Precedence, first match wins:

1. transport failure (no HTTP response)     -> ``app/network-error``
2. FCM ``errorCode`` in ``error.details``   -> FCM table
3. ``error.status`` (or legacy ``error``)   -> status / legacy table
4. any other JSON body                      -> ``messaging/unknown-error``
5. non-JSON body                            -> HTTP status table
"""
from __future__ import annotations

import json
from typing import Any

from mp_fcm.kernel.errors import (
    DEFAULT_MESSAGES,
    ErrorCode,
    MessagingError,
    NetworkError,
    TransportError,
)

__all__ = ["ErrorMapper"]

FCM_ERROR_TYPE = "type.googleapis.com/google.firebase.fcm.v1.FcmError"

_FCM_ERROR_CODES: dict[str, ErrorCode] = {
    "APNS_AUTH_ERROR": ErrorCode.THIRD_PARTY_AUTH_ERROR,
    "THIRD_PARTY_AUTH_ERROR": ErrorCode.THIRD_PARTY_AUTH_ERROR,
    "INTERNAL": ErrorCode.INTERNAL_ERROR,
    "INVALID_ARGUMENT": ErrorCode.INVALID_ARGUMENT,
    "QUOTA_EXCEEDED": ErrorCode.MESSAGE_RATE_EXCEEDED,
    "SENDER_ID_MISMATCH": ErrorCode.MISMATCHED_CREDENTIAL,
    "UNAVAILABLE": ErrorCode.SERVER_UNAVAILABLE,
    "UNREGISTERED": ErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED,
    "UNSPECIFIED_ERROR": ErrorCode.UNKNOWN_ERROR,
}

_STATUS_CODES: dict[str, ErrorCode] = {
    "INVALID_ARGUMENT": ErrorCode.INVALID_ARGUMENT,
    "NOT_FOUND": ErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED,
    "PERMISSION_DENIED": ErrorCode.MISMATCHED_CREDENTIAL,
    "RESOURCE_EXHAUSTED": ErrorCode.MESSAGE_RATE_EXCEEDED,
    "UNAUTHENTICATED": ErrorCode.THIRD_PARTY_AUTH_ERROR,
    "INTERNAL": ErrorCode.INTERNAL_ERROR,
    "UNAVAILABLE": ErrorCode.SERVER_UNAVAILABLE,
}

_LEGACY_CODES: dict[str, ErrorCode] = {
    "NotRegistered": ErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED,
    "InvalidRegistration": ErrorCode.INVALID_REGISTRATION_TOKEN,
    "MismatchSenderId": ErrorCode.MISMATCHED_CREDENTIAL,
    "InvalidPackageName": ErrorCode.INVALID_PACKAGE_NAME,
    "MessageTooBig": ErrorCode.PAYLOAD_SIZE_LIMIT_EXCEEDED,
    "InvalidDataKey": ErrorCode.INVALID_DATA_PAYLOAD_KEY,
    "InvalidTtl": ErrorCode.INVALID_OPTIONS,
    "Unavailable": ErrorCode.SERVER_UNAVAILABLE,
    "InternalServerError": ErrorCode.INTERNAL_ERROR,
    "DeviceMessageRateExceeded": ErrorCode.DEVICE_MESSAGE_RATE_EXCEEDED,
    "TopicsMessageRateExceeded": ErrorCode.TOPICS_MESSAGE_RATE_EXCEEDED,
    "InvalidParameters": ErrorCode.INVALID_ARGUMENT,
    "TOO_MANY_TOPICS": ErrorCode.TOO_MANY_TOPICS,
}

_HTTP_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.INVALID_ARGUMENT,
    401: ErrorCode.AUTHENTICATION_ERROR,
    403: ErrorCode.AUTHENTICATION_ERROR,
    500: ErrorCode.INTERNAL_ERROR,
    503: ErrorCode.SERVER_UNAVAILABLE,
}

_TOPIC_RESULT_CODES: dict[str, ErrorCode] = {
    "NOT_FOUND": ErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED,
    "INVALID_ARGUMENT": ErrorCode.INVALID_REGISTRATION_TOKEN,
    "TOO_MANY_TOPICS": ErrorCode.TOO_MANY_TOPICS,
    "RESOURCE_EXHAUSTED": ErrorCode.TOO_MANY_TOPICS,
    "PERMISSION_DENIED": ErrorCode.AUTHENTICATION_ERROR,
    "DEADLINE_EXCEEDED": ErrorCode.SERVER_UNAVAILABLE,
    "INTERNAL": ErrorCode.INTERNAL_ERROR,
}


def _parse_json(content: bytes | str, content_type: str | None) -> Any:
    if content_type is not None and "json" not in content_type.lower():
        return None
    try:
        return json.loads(content)
    except (TypeError, ValueError):
        return None


def _lookup(table: dict[str, ErrorCode], value: Any) -> ErrorCode | None:
    return table.get(value) if isinstance(value, str) else None


def _fcm_error_code(error: dict[str, Any]) -> ErrorCode | None:
    details = error.get("details")
    if not isinstance(details, list):
        return None
    for entry in details:
        if isinstance(entry, dict) and entry.get("@type") == FCM_ERROR_TYPE:
            return _lookup(_FCM_ERROR_CODES, entry.get("errorCode"))
    return None


class ErrorMapper:
    """Translate failed sends into :class:`MessagingError` instances."""

    @staticmethod
    def from_transport_error(exc: TransportError) -> NetworkError:
        return NetworkError(
            f"Error while making request: {exc.message}",
            detail={"url": exc.url} if exc.url else None,
            cause=exc,
        )

    @classmethod
    def from_response(
        cls,
        status: int,
        content: bytes | str,
        content_type: str | None = None,
    ) -> MessagingError:
        """Map a non-2xx (or error-carrying) response to a messaging error."""
        parsed = _parse_json(content, content_type)
        error = parsed.get("error") if isinstance(parsed, dict) else None

        server_message: str | None = None
        code: ErrorCode | None = None
        if isinstance(error, dict):
            message = error.get("message")
            server_message = message if isinstance(message, str) and message else None
            code = _fcm_error_code(error) or _lookup(_STATUS_CODES, error.get("status"))
        else:
            code = _lookup(_LEGACY_CODES, error)

        if code is not None:
            return MessagingError(
                server_message, code=code, http_status=status, detail={"response": parsed}
            )

        text = content.decode("utf-8", "replace") if isinstance(content, bytes) else content
        if parsed is not None:
            code = ErrorCode.UNKNOWN_ERROR
            base = server_message or DEFAULT_MESSAGES[code]
            return MessagingError(
                f'{base} Raw server response: "{text}".',
                code=code,
                http_status=status,
                detail={"response": parsed},
            )

        code = _HTTP_CODES.get(status, ErrorCode.UNKNOWN_ERROR)
        base = server_message or f"Unexpected response with status: {status}."
        return MessagingError(
            f'{base} Raw server response: "{text}". HTTP status code: {status}.',
            code=code,
            http_status=status,
            detail={"status": status},
        )

    @staticmethod
    def from_topic_result(error: Any) -> MessagingError:
        """Map a per-token topic-management result error such as ``NOT_FOUND``."""
        code = _lookup(_TOPIC_RESULT_CODES, error)
        if code is None:
            return MessagingError(
                f"Unknown topic management error: {error}", code=ErrorCode.UNKNOWN_ERROR
            )
        return MessagingError(code=code)

"""Client-side error codes and their default messages.

Codes are stable identifiers independent of backend HTTP statuses. Callers
branch on them; never on the message text.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes surfaced by the messaging client."""

    INVALID_ARGUMENT = "messaging/invalid-argument"
    INVALID_RECIPIENT = "messaging/invalid-recipient"
    INVALID_PAYLOAD = "messaging/invalid-payload"
    INVALID_DATA_PAYLOAD_KEY = "messaging/invalid-data-payload-key"
    PAYLOAD_SIZE_LIMIT_EXCEEDED = "messaging/payload-size-limit-exceeded"
    INVALID_OPTIONS = "messaging/invalid-options"
    INVALID_REGISTRATION_TOKEN = "messaging/invalid-registration-token"
    REGISTRATION_TOKEN_NOT_REGISTERED = "messaging/registration-token-not-registered"
    MISMATCHED_CREDENTIAL = "messaging/mismatched-credential"
    INVALID_PACKAGE_NAME = "messaging/invalid-package-name"
    DEVICE_MESSAGE_RATE_EXCEEDED = "messaging/device-message-rate-exceeded"
    TOPICS_MESSAGE_RATE_EXCEEDED = "messaging/topics-message-rate-exceeded"
    MESSAGE_RATE_EXCEEDED = "messaging/message-rate-exceeded"
    THIRD_PARTY_AUTH_ERROR = "messaging/third-party-auth-error"
    TOO_MANY_TOPICS = "messaging/too-many-topics"
    AUTHENTICATION_ERROR = "messaging/authentication-error"
    SERVER_UNAVAILABLE = "messaging/server-unavailable"
    INTERNAL_ERROR = "messaging/internal-error"
    UNKNOWN_ERROR = "messaging/unknown-error"
    SESSION_NETWORK_ERROR = "messaging/app/network-error"
    INVALID_CREDENTIAL = "app/invalid-credential"
    NETWORK_ERROR = "app/network-error"


DEFAULT_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_ARGUMENT: "Invalid argument provided.",
    ErrorCode.INVALID_RECIPIENT: "Invalid message recipient provided.",
    ErrorCode.INVALID_PAYLOAD: "Invalid message payload provided.",
    ErrorCode.INVALID_DATA_PAYLOAD_KEY: (
        "The data message payload contains a key reserved by the messaging service."
    ),
    ErrorCode.PAYLOAD_SIZE_LIMIT_EXCEEDED: (
        "The message payload exceeds the size limit accepted by the messaging service."
    ),
    ErrorCode.INVALID_OPTIONS: "Invalid message options provided.",
    ErrorCode.INVALID_REGISTRATION_TOKEN: (
        "Invalid registration token provided. It must match the token the client "
        "app received when registering."
    ),
    ErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED: (
        "The registration token is not registered. Remove it and stop sending to it."
    ),
    ErrorCode.MISMATCHED_CREDENTIAL: (
        "The credential in use may not send messages to the target. The credential "
        "and the registration token must belong to the same project."
    ),
    ErrorCode.INVALID_PACKAGE_NAME: (
        "The registration token's package name does not match restricted_package_name."
    ),
    ErrorCode.DEVICE_MESSAGE_RATE_EXCEEDED: (
        "The rate of messages to this device is too high. Do not retry immediately."
    ),
    ErrorCode.TOPICS_MESSAGE_RATE_EXCEEDED: (
        "The rate of messages to this topic is too high. Do not retry immediately."
    ),
    ErrorCode.MESSAGE_RATE_EXCEEDED: "Sending limit exceeded for the message target.",
    ErrorCode.THIRD_PARTY_AUTH_ERROR: (
        "The message could not be delivered because the APNs or web push "
        "credential is missing or expired."
    ),
    ErrorCode.TOO_MANY_TOPICS: (
        "The registration token is subscribed to the maximum number of topics."
    ),
    ErrorCode.AUTHENTICATION_ERROR: (
        "Authentication against the messaging service failed. Check the "
        "permissions of the credential."
    ),
    ErrorCode.SERVER_UNAVAILABLE: "The messaging service could not process the request in time.",
    ErrorCode.INTERNAL_ERROR: "An internal error has occurred. Please retry the request.",
    ErrorCode.UNKNOWN_ERROR: "An unknown server error was returned.",
    ErrorCode.SESSION_NETWORK_ERROR: "The shared HTTP/2 session failed.",
    ErrorCode.INVALID_CREDENTIAL: "Failed to obtain a valid access token.",
    ErrorCode.NETWORK_ERROR: "Failed to reach the messaging service.",
}

RETRYABLE_CODES: frozenset[str] = frozenset(
    {
        ErrorCode.SERVER_UNAVAILABLE.value,
        ErrorCode.INTERNAL_ERROR.value,
        ErrorCode.MESSAGE_RATE_EXCEEDED.value,
        ErrorCode.NETWORK_ERROR.value,
        ErrorCode.SESSION_NETWORK_ERROR.value,
    }
)


__all__ = ["DEFAULT_MESSAGES", "RETRYABLE_CODES", "ErrorCode"]

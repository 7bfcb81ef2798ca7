"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── MessagingError              (messaging.py)
    │   ├── InvalidArgumentError    also a ValueError
    │   ├── CredentialError         app/invalid-credential
    │   ├── NetworkError            app/network-error
    │   └── MessagingSessionError   messaging/app/network-error
    └── TransportError              (transport.py)
        └── SessionFaultError
"""

from mp_fcm.kernel.errors.base import BaseError
from mp_fcm.kernel.errors.codes import DEFAULT_MESSAGES, RETRYABLE_CODES, ErrorCode
from mp_fcm.kernel.errors.messaging import (
    CredentialError,
    InvalidArgumentError,
    MessagingError,
    MessagingSessionError,
    NetworkError,
)
from mp_fcm.kernel.errors.transport import SessionFaultError, TransportError

__all__ = [
    "DEFAULT_MESSAGES",
    "RETRYABLE_CODES",
    "BaseError",
    "CredentialError",
    "ErrorCode",
    "InvalidArgumentError",
    "MessagingError",
    "MessagingSessionError",
    "NetworkError",
    "SessionFaultError",
    "TransportError",
]

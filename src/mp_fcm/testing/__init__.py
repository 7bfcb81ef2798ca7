"""Testing – in-memory doubles for the transport ports."""
from mp_fcm.testing.fakes import (
    Delayed,
    FakeSession,
    FakeTransport,
    SessionFault,
    json_response,
    text_response,
)

__all__ = [
    "Delayed",
    "FakeSession",
    "FakeTransport",
    "SessionFault",
    "json_response",
    "text_response",
]

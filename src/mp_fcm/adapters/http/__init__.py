"""HTTP adapter – httpx transports for discrete and multiplexed sends."""
from mp_fcm.adapters.http.transport import (
    HttpRequest,
    HttpResponse,
    HttpTransport,
    HttpxSession,
    HttpxTransport,
    SessionTransport,
    TransportSession,
)

__all__ = [
    "HttpRequest",
    "HttpResponse",
    "HttpTransport",
    "HttpxSession",
    "HttpxTransport",
    "SessionTransport",
    "TransportSession",
]

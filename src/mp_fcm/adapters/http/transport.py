"""HTTP adapter – discrete and multiplexed httpx transports.

Both transports return every HTTP response, whatever its status, and raise
:class:`~mp_fcm.kernel.errors.TransportError` only when no response was
produced. Inside a multiplexed session a connection-level failure faults
the session as a whole: every later ``send`` fails fast and
:meth:`HttpxSession.wait_fault` resolves.
"""
from __future__ import annotations

import asyncio
import json as _json
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Protocol, runtime_checkable

import httpx

from mp_fcm.kernel.errors import SessionFaultError, TransportError

__all__ = [
    "HttpRequest",
    "HttpResponse",
    "HttpTransport",
    "HttpxSession",
    "HttpxTransport",
    "SessionTransport",
    "TransportSession",
]


@dataclass(frozen=True)
class HttpRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    json: Any = None
    timeout: float | None = None


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    content: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str | None:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return None

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", "replace")

    def json(self) -> Any:
        return _json.loads(self.content)


@runtime_checkable
class HttpTransport(Protocol):
    """One request per call over pooled connections."""

    async def send(self, request: HttpRequest) -> HttpResponse: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class TransportSession(Protocol):
    """Many concurrent streams over one shared connection."""

    @property
    def fault(self) -> BaseException | None: ...

    async def wait_fault(self) -> BaseException: ...

    async def send(self, request: HttpRequest) -> HttpResponse: ...


@runtime_checkable
class SessionTransport(Protocol):
    def open_session(self) -> Any:
        """Return an async context manager yielding a :class:`TransportSession`."""
        ...


def _to_response(response: httpx.Response) -> HttpResponse:
    return HttpResponse(
        status_code=response.status_code,
        content=response.content,
        headers=dict(response.headers),
    )


class HttpxSession:
    """A :class:`TransportSession` over an HTTP/2 ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self._fault: asyncio.Future[BaseException] = asyncio.get_running_loop().create_future()

    @property
    def fault(self) -> BaseException | None:
        return self._fault.result() if self._fault.done() else None

    async def wait_fault(self) -> BaseException:
        return await asyncio.shield(self._fault)

    def fail(self, exc: BaseException) -> None:
        """Mark the session faulted; the first fault wins."""
        if not self._fault.done():
            self._fault.set_result(exc)

    async def send(self, request: HttpRequest) -> HttpResponse:
        if self.fault is not None:
            raise SessionFaultError("HTTP/2 session already failed", url=request.url)
        try:
            response = await self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                json=request.json,
                timeout=request.timeout if request.timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"HTTP request timed out: {request.method} {request.url}", url=request.url, cause=exc
            ) from exc
        except httpx.TransportError as exc:
            fault = SessionFaultError(f"HTTP/2 session failed: {exc}", url=request.url, cause=exc)
            self.fail(fault)
            raise fault from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or type(exc).__name__, url=request.url, cause=exc) from exc
        return _to_response(response)


class HttpxTransport:
    """httpx-backed :class:`HttpTransport` and :class:`SessionTransport`.

    Discrete sends share one pooled ``AsyncClient``; each
    :meth:`open_session` builds a fresh HTTP/2 client that is closed when the
    session context exits.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
        **client_kwargs: Any,
    ) -> None:
        self._timeout = timeout
        self._client_kwargs = client_kwargs
        self._client = client or httpx.AsyncClient(timeout=timeout, **client_kwargs)

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(self, request: HttpRequest) -> HttpResponse:
        try:
            response = await self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                json=request.json,
                timeout=request.timeout if request.timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"HTTP request timed out: {request.method} {request.url}", url=request.url, cause=exc
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or type(exc).__name__, url=request.url, cause=exc) from exc
        return _to_response(response)

    @asynccontextmanager
    async def open_session(self) -> AsyncIterator[HttpxSession]:
        async with httpx.AsyncClient(
            http2=True, timeout=self._timeout, **self._client_kwargs
        ) as client:
            yield HttpxSession(client)

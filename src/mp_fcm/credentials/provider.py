"""Credentials – access-token provider port and simple implementations."""
from __future__ import annotations

from typing import Awaitable, Callable, Protocol, runtime_checkable

from mp_fcm.kernel.errors import CredentialError


@runtime_checkable
class AccessTokenProvider(Protocol):
    """Port: yields an OAuth2 bearer token for the messaging scopes."""

    async def get_access_token(self) -> str: ...


class StaticAccessTokenProvider:
    """Always returns the same token; useful for tests and short-lived jobs."""

    def __init__(self, token: str) -> None:
        self._token = token

    async def get_access_token(self) -> str:
        return self._token


class CallableAccessTokenProvider:
    """Adapt an ``async () -> str`` callable, e.g. a google-auth refresh hook."""

    def __init__(self, fetch: Callable[[], Awaitable[str]]) -> None:
        self._fetch = fetch

    async def get_access_token(self) -> str:
        return await self._fetch()


async def fetch_access_token(provider: AccessTokenProvider) -> str:
    """Return a usable token or raise :class:`CredentialError`."""
    try:
        token = await provider.get_access_token()
    except CredentialError:
        raise
    except Exception as exc:
        raise CredentialError(
            f"Failed to obtain an access token: {exc}", cause=exc
        ) from exc
    if not isinstance(token, str) or not token:
        raise CredentialError("Access token provider returned an empty token")
    return token


__all__ = [
    "AccessTokenProvider",
    "CallableAccessTokenProvider",
    "StaticAccessTokenProvider",
    "fetch_access_token",
]

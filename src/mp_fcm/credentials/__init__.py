"""Credentials – access-token providers."""
from mp_fcm.credentials.provider import (
    AccessTokenProvider,
    CallableAccessTokenProvider,
    StaticAccessTokenProvider,
    fetch_access_token,
)

__all__ = [
    "AccessTokenProvider",
    "CallableAccessTokenProvider",
    "StaticAccessTokenProvider",
    "fetch_access_token",
]

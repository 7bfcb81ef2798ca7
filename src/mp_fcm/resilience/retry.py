"""Resilience – tenacity-backed retry for discrete sends.

Retries a request when it failed below HTTP (a
:class:`~mp_fcm.kernel.errors.TransportError` other than a session fault) or
when the response status is one of ``retry_statuses``. Once attempts are
exhausted the last response is returned, or the last error re-raised, so the
caller maps it exactly as it would an unretried outcome.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Iterable, TypeVar

import tenacity

from mp_fcm.kernel.errors import SessionFaultError, TransportError

T = TypeVar("T")


def _is_retryable_error(exc: BaseException) -> bool:
    return isinstance(exc, TransportError) and not isinstance(exc, SessionFaultError)


class RetryPolicy:
    """Retry policy backed by ``tenacity.AsyncRetrying``.

    Parameters
    ----------
    max_attempts:
        Maximum number of call attempts (including the first call).
    backoff_factor:
        Multiplier of the exponential wait, in seconds.
    max_delay:
        Upper bound on a single wait, in seconds.
    retry_statuses:
        HTTP statuses whose responses are retried.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        backoff_factor: float = 0.5,
        max_delay: float = 30.0,
        retry_statuses: Iterable[int] = (503,),
        **kwargs: Any,
    ) -> None:
        self._max_attempts = max_attempts
        self._wait = tenacity.wait_exponential(multiplier=backoff_factor, max=max_delay)
        self._retry_statuses = frozenset(retry_statuses)
        self._extra_kwargs = kwargs

    @classmethod
    def from_settings(cls, settings: Any) -> "RetryPolicy | None":
        """Build from :class:`MessagingSettings`; ``None`` when retries are off."""
        if settings.max_retries <= 0:
            return None
        return cls(
            max_attempts=settings.max_retries + 1,
            backoff_factor=settings.retry_backoff_factor,
            max_delay=settings.retry_max_delay_seconds,
            retry_statuses=settings.retry_statuses,
        )

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def _is_retryable_result(self, result: Any) -> bool:
        return getattr(result, "status_code", None) in self._retry_statuses

    def _build_async_retrying(self) -> tenacity.AsyncRetrying:
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=(
                tenacity.retry_if_exception(_is_retryable_error)
                | tenacity.retry_if_result(self._is_retryable_result)
            ),
            retry_error_callback=lambda state: state.outcome.result(),
            **self._extra_kwargs,
        )

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Execute *func* asynchronously with tenacity retry.

        *func* is called afresh on every attempt, so it may be a lambda that
        returns a new coroutine each time.
        """
        async for attempt in self._build_async_retrying():
            with attempt:
                result = await func()
            # retry_if_result only sees outcomes recorded on the retry state
            if not attempt.retry_state.outcome.failed:  # type: ignore[union-attr]
                attempt.retry_state.set_result(result)
        return result  # type: ignore[return-value]


__all__ = ["RetryPolicy"]

"""Config settings – messaging client settings."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import ClassVar

from mp_fcm.config.errors import InvalidSettingValueError


class TransportMode(str, Enum):
    """How a batch reaches the backend."""

    DISCRETE = "discrete"
    MULTIPLEXED = "multiplexed"


@dataclasses.dataclass(frozen=True)
class Settings:
    """Base class for 12-factor settings."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass(frozen=True)
class MessagingSettings(Settings):
    """Settings for :class:`~mp_fcm.messaging.client.MessagingClient`.

    Loaded from ``FCM_*`` environment variables by
    :class:`~mp_fcm.config.loaders.EnvSettingsLoader`. ``max_retries=0``
    disables retries; only ``discrete`` sends are ever retried.
    """

    _prefix: ClassVar[str] = "FCM"

    project_id: str
    transport_mode: TransportMode = TransportMode.DISCRETE
    timeout_seconds: float = 15.0
    send_endpoint: str = "https://fcm.googleapis.com"
    topic_management_endpoint: str = "https://iid.googleapis.com"
    max_retries: int = 0
    retry_backoff_factor: float = 0.5
    retry_max_delay_seconds: float = 30.0
    retry_statuses: tuple[int, ...] = (503,)

    def _validate(self) -> None:
        if not isinstance(self.transport_mode, TransportMode):
            try:
                object.__setattr__(self, "transport_mode", TransportMode(self.transport_mode))
            except ValueError as exc:
                raise InvalidSettingValueError(
                    "transport_mode", self.transport_mode, "expected 'discrete' or 'multiplexed'"
                ) from exc
        if self.timeout_seconds <= 0:
            raise InvalidSettingValueError("timeout_seconds", self.timeout_seconds, "must be > 0")
        if self.max_retries < 0:
            raise InvalidSettingValueError("max_retries", self.max_retries, "must be >= 0")
        if self.retry_backoff_factor < 0:
            raise InvalidSettingValueError(
                "retry_backoff_factor", self.retry_backoff_factor, "must be >= 0"
            )
        object.__setattr__(self, "retry_statuses", tuple(self.retry_statuses))

    @property
    def send_url(self) -> str:
        return f"{self.send_endpoint.rstrip('/')}/v1/projects/{self.project_id}/messages:send"


__all__ = ["MessagingSettings", "Settings", "TransportMode"]

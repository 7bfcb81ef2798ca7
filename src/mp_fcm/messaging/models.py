"""Messaging models – typed message variants and platform sub-configs.

Every model is a plain dataclass using Python attribute names. The wire
names (snake_case for Android/top-level, dash-case for APNs, camelCase for
the browser Notification API) are produced by
:class:`~mp_fcm.messaging.encoder.MessageEncoder`; these classes never hold
wire-format values.

Open-ended APNs and Webpush fields are modelled as explicit ``custom_data``
dicts whose keys and values are copied to the wire verbatim.
"""
from __future__ import annotations

import dataclasses
import datetime
from dataclasses import dataclass, field
from typing import Any, Literal

__all__ = [
    "AndroidConfig",
    "AndroidFcmOptions",
    "AndroidNotification",
    "ApnsConfig",
    "ApnsFcmOptions",
    "ApnsPayload",
    "Aps",
    "ApsAlert",
    "CriticalSound",
    "FcmOptions",
    "LightSettings",
    "Message",
    "MulticastMessage",
    "Notification",
    "WebpushConfig",
    "WebpushFcmOptions",
    "WebpushNotification",
    "WebpushNotificationAction",
]

Duration = int | float | datetime.timedelta


@dataclass(frozen=True)
class Notification:
    """Basic notification shown on every platform."""

    title: str | None = None
    body: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class FcmOptions:
    analytics_label: str | None = None


# ---------------------------------------------------------------------------
# Android
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LightSettings:
    """LED settings; *color* is ``#RRGGBB`` or ``#RRGGBBAA``."""

    color: str
    light_on_duration_millis: Duration
    light_off_duration_millis: Duration


@dataclass(frozen=True)
class AndroidNotification:
    """Android-specific notification options."""

    title: str | None = None
    body: str | None = None
    icon: str | None = None
    color: str | None = None
    sound: str | None = None
    tag: str | None = None
    image_url: str | None = None
    click_action: str | None = None
    body_loc_key: str | None = None
    body_loc_args: list[str] | None = None
    title_loc_key: str | None = None
    title_loc_args: list[str] | None = None
    channel_id: str | None = None
    ticker: str | None = None
    sticky: bool | None = None
    event_timestamp: datetime.datetime | None = None
    local_only: bool | None = None
    priority: Literal["min", "low", "default", "high", "max"] | None = None
    vibrate_timings_millis: list[Duration] | None = None
    default_vibrate_timings: bool | None = None
    default_sound: bool | None = None
    light_settings: LightSettings | None = None
    default_light_settings: bool | None = None
    visibility: Literal["private", "public", "secret"] | None = None
    notification_count: int | None = None
    proxy: Literal["allow", "deny", "if_priority_lowered"] | None = None


@dataclass(frozen=True)
class AndroidFcmOptions:
    analytics_label: str | None = None


@dataclass(frozen=True)
class AndroidConfig:
    """Android delivery options. ``ttl`` is in milliseconds or a timedelta."""

    collapse_key: str | None = None
    priority: Literal["normal", "high"] | None = None
    ttl: Duration | None = None
    restricted_package_name: str | None = None
    data: dict[str, str] | None = None
    notification: AndroidNotification | None = None
    fcm_options: AndroidFcmOptions | None = None
    direct_boot_ok: bool | None = None


# ---------------------------------------------------------------------------
# APNs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ApsAlert:
    title: str | None = None
    subtitle: str | None = None
    body: str | None = None
    loc_key: str | None = None
    loc_args: list[str] | None = None
    title_loc_key: str | None = None
    title_loc_args: list[str] | None = None
    subtitle_loc_key: str | None = None
    subtitle_loc_args: list[str] | None = None
    action_loc_key: str | None = None
    launch_image: str | None = None
    custom_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CriticalSound:
    """Structured APNs sound; ``volume`` lies in ``[0, 1]``."""

    name: str
    critical: bool | None = None
    volume: float | None = None


@dataclass(frozen=True)
class Aps:
    """The ``aps`` dictionary of an APNs payload.

    Keys in ``custom_data`` are sent verbatim and may not shadow a typed
    field under either its camelCase or dash-case spelling.
    """

    alert: str | ApsAlert | None = None
    badge: int | None = None
    sound: str | CriticalSound | None = None
    content_available: bool | None = None
    mutable_content: bool | None = None
    category: str | None = None
    thread_id: str | None = None
    custom_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ApnsPayload:
    aps: Aps = field(default_factory=Aps)
    custom_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ApnsFcmOptions:
    analytics_label: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class ApnsConfig:
    headers: dict[str, str] | None = None
    payload: ApnsPayload | None = None
    fcm_options: ApnsFcmOptions | None = None


# ---------------------------------------------------------------------------
# Webpush
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WebpushNotificationAction:
    action: str
    title: str
    icon: str | None = None


@dataclass(frozen=True)
class WebpushNotification:
    """Web notification following the browser Notification API."""

    title: str | None = None
    body: str | None = None
    icon: str | None = None
    actions: list[WebpushNotificationAction] | None = None
    badge: str | None = None
    data: Any = None
    direction: Literal["auto", "ltr", "rtl"] | None = None
    image: str | None = None
    language: str | None = None
    renotify: bool | None = None
    require_interaction: bool | None = None
    silent: bool | None = None
    tag: str | None = None
    timestamp_millis: int | None = None
    vibrate: int | list[int] | None = None
    custom_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WebpushFcmOptions:
    link: str | None = None


@dataclass(frozen=True)
class WebpushConfig:
    headers: dict[str, str] | None = None
    data: dict[str, str] | None = None
    notification: WebpushNotification | None = None
    fcm_options: WebpushFcmOptions | None = None


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Message:
    """A message addressed to exactly one of *token*, *topic* or *condition*.

    *topic* may carry the ``/topics/`` prefix.
    """

    token: str | None = None
    topic: str | None = None
    condition: str | None = None
    data: dict[str, str] | None = None
    notification: Notification | None = None
    android: AndroidConfig | None = None
    apns: ApnsConfig | None = None
    webpush: WebpushConfig | None = None
    fcm_options: FcmOptions | None = None


@dataclass(frozen=True)
class MulticastMessage:
    """One payload template sent to up to 500 registration tokens."""

    tokens: list[str]
    data: dict[str, str] | None = None
    notification: Notification | None = None
    android: AndroidConfig | None = None
    apns: ApnsConfig | None = None
    webpush: WebpushConfig | None = None
    fcm_options: FcmOptions | None = None

    def to_messages(self) -> list[Message]:
        """Expand into one :class:`Message` per token, sharing the template."""
        template = {
            f.name: getattr(self, f.name) for f in dataclasses.fields(self) if f.name != "tokens"
        }
        return [Message(token=token, **template) for token in self.tokens]

"""Messaging encoder – typed models to the HTTP v1 wire format.

The encoder assumes its input already passed
:func:`~mp_fcm.messaging.validators.validate_message`; it never raises for
shape problems and never mutates the models it reads. ``None`` values,
empty lists and empty dicts are left out of the wire form.
"""
from __future__ import annotations

import datetime
from typing import Any

from mp_fcm.messaging.models import (
    AndroidConfig,
    AndroidNotification,
    ApnsConfig,
    ApnsPayload,
    Aps,
    ApsAlert,
    CriticalSound,
    LightSettings,
    Message,
    Notification,
    WebpushConfig,
    WebpushNotification,
)
from mp_fcm.messaging.validators import TOPIC_PREFIX, normalize_topic

__all__ = [
    "MessageEncoder",
    "encode_duration",
    "encode_send_request",
    "encode_timestamp",
]

_NANOS_PER_SECOND = 1_000_000_000
_NANOS_PER_MILLI = 1_000_000


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None and v != [] and v != {}}


def encode_duration(value: int | float | datetime.timedelta) -> str:
    """Encode milliseconds (or a timedelta) as ``"<s>s"`` / ``"<s>.<9 digits>s"``."""
    if isinstance(value, datetime.timedelta):
        nanos = (value.days * 86_400 + value.seconds) * _NANOS_PER_SECOND
        nanos += value.microseconds * 1_000
    else:
        nanos = round(value * _NANOS_PER_MILLI)
    seconds, remainder = divmod(nanos, _NANOS_PER_SECOND)
    if remainder == 0:
        return f"{seconds}s"
    return f"{seconds}.{remainder:09d}s"


def encode_timestamp(value: datetime.datetime) -> str:
    """Encode as ``YYYY-MM-DDTHH:MM:SS.mmmZ``; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    value = value.astimezone(datetime.timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _encode_color(value: str) -> dict[str, float]:
    channels = [int(value[i:i + 2], 16) / 255.0 for i in range(1, len(value), 2)]
    alpha = channels[3] if len(channels) == 4 else 1.0
    return {"red": channels[0], "green": channels[1], "blue": channels[2], "alpha": alpha}


def _flag(value: bool | None) -> int | None:
    return 1 if value else None


class MessageEncoder:
    """Pure transform from :class:`Message` to the ``message`` JSON object."""

    @classmethod
    def encode(cls, message: Message) -> dict[str, Any]:
        topic = message.topic
        if topic:
            topic = TOPIC_PREFIX + normalize_topic(topic)
        return _compact(
            {
                "token": message.token or None,
                "topic": topic or None,
                "condition": message.condition or None,
                "data": dict(message.data) if message.data else None,
                "notification": cls.encode_notification(message.notification),
                "android": cls.encode_android(message.android),
                "apns": cls.encode_apns(message.apns),
                "webpush": cls.encode_webpush(message.webpush),
                "fcm_options": (
                    _compact({"analytics_label": message.fcm_options.analytics_label})
                    if message.fcm_options
                    else None
                ),
            }
        )

    @staticmethod
    def encode_notification(notification: Notification | None) -> dict[str, Any] | None:
        if notification is None:
            return None
        return _compact(
            {
                "title": notification.title,
                "body": notification.body,
                "image": notification.image_url,
            }
        )

    # -- Android -------------------------------------------------------------

    @classmethod
    def encode_android(cls, android: AndroidConfig | None) -> dict[str, Any] | None:
        if android is None:
            return None
        return _compact(
            {
                "collapse_key": android.collapse_key,
                "priority": android.priority,
                "ttl": encode_duration(android.ttl) if android.ttl is not None else None,
                "restricted_package_name": android.restricted_package_name,
                "data": dict(android.data) if android.data else None,
                "notification": cls.encode_android_notification(android.notification),
                "fcm_options": (
                    _compact({"analytics_label": android.fcm_options.analytics_label})
                    if android.fcm_options
                    else None
                ),
                "direct_boot_ok": android.direct_boot_ok,
            }
        )

    @classmethod
    def encode_android_notification(
        cls, notification: AndroidNotification | None
    ) -> dict[str, Any] | None:
        if notification is None:
            return None
        n = notification
        return _compact(
            {
                "title": n.title,
                "body": n.body,
                "icon": n.icon,
                "color": n.color,
                "sound": n.sound,
                "tag": n.tag,
                "image": n.image_url,
                "click_action": n.click_action,
                "body_loc_key": n.body_loc_key,
                "body_loc_args": list(n.body_loc_args) if n.body_loc_args else None,
                "title_loc_key": n.title_loc_key,
                "title_loc_args": list(n.title_loc_args) if n.title_loc_args else None,
                "channel_id": n.channel_id,
                "ticker": n.ticker,
                "sticky": n.sticky,
                "event_time": encode_timestamp(n.event_timestamp) if n.event_timestamp else None,
                "local_only": n.local_only,
                "notification_priority": f"PRIORITY_{n.priority.upper()}" if n.priority else None,
                "vibrate_timings": (
                    [encode_duration(t) for t in n.vibrate_timings_millis]
                    if n.vibrate_timings_millis
                    else None
                ),
                "default_vibrate_timings": n.default_vibrate_timings,
                "default_sound": n.default_sound,
                "light_settings": cls.encode_light_settings(n.light_settings),
                "default_light_settings": n.default_light_settings,
                "visibility": n.visibility.upper() if n.visibility else None,
                "notification_count": n.notification_count,
                "proxy": n.proxy.upper() if n.proxy else None,
            }
        )

    @staticmethod
    def encode_light_settings(settings: LightSettings | None) -> dict[str, Any] | None:
        if settings is None:
            return None
        return {
            "color": _encode_color(settings.color),
            "light_on_duration": encode_duration(settings.light_on_duration_millis),
            "light_off_duration": encode_duration(settings.light_off_duration_millis),
        }

    # -- APNs ----------------------------------------------------------------

    @classmethod
    def encode_apns(cls, apns: ApnsConfig | None) -> dict[str, Any] | None:
        if apns is None:
            return None
        return _compact(
            {
                "headers": dict(apns.headers) if apns.headers else None,
                "payload": cls.encode_apns_payload(apns.payload),
                "fcm_options": (
                    _compact(
                        {
                            "analytics_label": apns.fcm_options.analytics_label,
                            "image": apns.fcm_options.image_url,
                        }
                    )
                    if apns.fcm_options
                    else None
                ),
            }
        )

    @classmethod
    def encode_apns_payload(cls, payload: ApnsPayload | None) -> dict[str, Any] | None:
        if payload is None:
            return None
        result = {"aps": cls.encode_aps(payload.aps)}
        result.update(payload.custom_data)
        return result

    @classmethod
    def encode_aps(cls, aps: Aps) -> dict[str, Any]:
        result = _compact(
            {
                "alert": cls.encode_aps_alert(aps.alert),
                "badge": aps.badge,
                "sound": cls.encode_aps_sound(aps.sound),
                "content-available": _flag(aps.content_available),
                "mutable-content": _flag(aps.mutable_content),
                "category": aps.category,
                "thread-id": aps.thread_id,
            }
        )
        result.update(aps.custom_data)
        return result

    @staticmethod
    def encode_aps_alert(alert: str | ApsAlert | None) -> str | dict[str, Any] | None:
        if alert is None or isinstance(alert, str):
            return alert
        result = _compact(
            {
                "title": alert.title,
                "subtitle": alert.subtitle,
                "body": alert.body,
                "loc-key": alert.loc_key,
                "loc-args": list(alert.loc_args) if alert.loc_args else None,
                "title-loc-key": alert.title_loc_key,
                "title-loc-args": list(alert.title_loc_args) if alert.title_loc_args else None,
                "subtitle-loc-key": alert.subtitle_loc_key,
                "subtitle-loc-args": (
                    list(alert.subtitle_loc_args) if alert.subtitle_loc_args else None
                ),
                "action-loc-key": alert.action_loc_key,
                "launch-image": alert.launch_image,
            }
        )
        result.update(alert.custom_data)
        return result

    @staticmethod
    def encode_aps_sound(sound: str | CriticalSound | None) -> str | dict[str, Any] | None:
        if sound is None or isinstance(sound, str):
            return sound
        return _compact(
            {"critical": _flag(sound.critical), "name": sound.name, "volume": sound.volume}
        )

    # -- Webpush -------------------------------------------------------------

    @classmethod
    def encode_webpush(cls, webpush: WebpushConfig | None) -> dict[str, Any] | None:
        if webpush is None:
            return None
        return _compact(
            {
                "headers": dict(webpush.headers) if webpush.headers else None,
                "data": dict(webpush.data) if webpush.data else None,
                "notification": cls.encode_webpush_notification(webpush.notification),
                "fcm_options": (
                    _compact({"link": webpush.fcm_options.link}) if webpush.fcm_options else None
                ),
            }
        )

    @staticmethod
    def encode_webpush_notification(
        notification: WebpushNotification | None,
    ) -> dict[str, Any] | None:
        if notification is None:
            return None
        n = notification
        actions = [
            _compact({"action": a.action, "title": a.title, "icon": a.icon})
            for a in (n.actions or [])
        ]
        result = _compact(
            {
                "title": n.title,
                "body": n.body,
                "icon": n.icon,
                "actions": actions,
                "badge": n.badge,
                "data": n.data,
                "dir": n.direction,
                "image": n.image,
                "lang": n.language,
                "renotify": n.renotify,
                "requireInteraction": n.require_interaction,
                "silent": n.silent,
                "tag": n.tag,
                "timestamp": n.timestamp_millis,
                "vibrate": n.vibrate,
            }
        )
        result.update(n.custom_data)
        return result


def encode_send_request(message: Message, dry_run: bool = False) -> dict[str, Any]:
    """Build the ``messages:send`` request body."""
    body: dict[str, Any] = {"message": MessageEncoder.encode(message)}
    if dry_run:
        body["validate_only"] = True
    return body

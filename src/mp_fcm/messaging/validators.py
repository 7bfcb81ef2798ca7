"""Messaging validators – shape, range and mutual-exclusion checks.

Every function raises :class:`~mp_fcm.kernel.errors.InvalidArgumentError` on
the first violated rule and returns ``None`` (or the normalised value) when
the input is acceptable. Nothing here touches the network.
"""
from __future__ import annotations

import datetime
import math
import re
from typing import Any
from urllib.parse import urlparse

from mp_fcm.kernel.errors import InvalidArgumentError
from mp_fcm.messaging.models import (
    AndroidConfig,
    AndroidFcmOptions,
    AndroidNotification,
    ApnsConfig,
    ApnsFcmOptions,
    ApnsPayload,
    Aps,
    ApsAlert,
    CriticalSound,
    FcmOptions,
    LightSettings,
    Message,
    MulticastMessage,
    Notification,
    WebpushConfig,
    WebpushFcmOptions,
    WebpushNotification,
    WebpushNotificationAction,
)

__all__ = [
    "MAX_BATCH_SIZE",
    "MAX_TOPIC_MANAGEMENT_TOKENS",
    "TOPIC_PREFIX",
    "check_dry_run",
    "is_valid_duration",
    "normalize_topic",
    "validate_android_config",
    "validate_apns_config",
    "validate_batch",
    "validate_message",
    "validate_multicast",
    "validate_registration_tokens",
    "validate_topic_management_topic",
    "validate_webpush_config",
]

TOPIC_PREFIX = "/topics/"
MAX_BATCH_SIZE = 500
MAX_TOPIC_MANAGEMENT_TOKENS = 1000

_TOPIC_NAME = re.compile(r"^[a-zA-Z0-9\-_.~%]+$")
_MANAGED_TOPIC = re.compile(r"^(/topics/)?(private/)?[a-zA-Z0-9\-_.~%]+$")
_ANALYTICS_LABEL = re.compile(r"^[a-zA-Z0-9\-_.~%]{1,50}$")
_ANDROID_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
_LIGHT_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

_ANDROID_PRIORITIES = ("high", "normal")
_NOTIFICATION_PRIORITIES = ("min", "low", "default", "high", "max")
_VISIBILITIES = ("private", "public", "secret")
_PROXIES = ("allow", "deny", "if_priority_lowered")
_DIRECTIONS = ("auto", "ltr", "rtl")


# ---------------------------------------------------------------------------
# Primitive checks
# ---------------------------------------------------------------------------


def _fail(message: str) -> None:
    raise InvalidArgumentError(message)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def is_valid_duration(value: Any) -> bool:
    """True for a non-negative millisecond count or ``timedelta``."""
    if isinstance(value, datetime.timedelta):
        return value.total_seconds() >= 0
    return _is_number(value) and value >= 0


def _check_object(value: Any, cls: type, label: str) -> None:
    if not isinstance(value, cls):
        _fail(f"{label} must be a non-null object")


def _check_string(value: Any, label: str) -> None:
    if value is not None and not isinstance(value, str):
        _fail(f"{label} must be a string")


def _check_boolean(value: Any, label: str) -> None:
    if value is not None and not isinstance(value, bool):
        _fail(f"{label} must be a boolean")


def _check_number(value: Any, label: str) -> None:
    if value is not None and not _is_number(value):
        _fail(f"{label} must be a number")


def _check_string_list(value: Any, label: str) -> None:
    if value is None:
        return
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        _fail(f"{label} must be a list of strings")


def _check_string_map(value: Any, label: str) -> None:
    if value is None:
        return
    if not isinstance(value, dict):
        _fail(f"{label} must be a non-null object")
    for key, val in value.items():
        if not isinstance(key, str) or not isinstance(val, str):
            _fail(f"{label} must only contain string values")


def _check_custom_data(value: Any, label: str) -> None:
    if not isinstance(value, dict):
        _fail(f"{label} must be a dict")
    if not all(isinstance(key, str) for key in value):
        _fail(f"{label} must only contain string keys")


def _check_url(value: Any, label: str) -> None:
    if value is None:
        return
    parsed = urlparse(value) if isinstance(value, str) else None
    if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
        _fail(f"{label} must be a valid URL string")


def _check_enum(value: Any, allowed: tuple[str, ...], label: str) -> None:
    if value is None or value in allowed:
        return
    quoted = [f'"{v}"' for v in allowed]
    _fail(f"{label} must be one of {', '.join(quoted[:-1])} or {quoted[-1]}")


def _check_localization(
    args: Any, key: Any, prefix: str, key_name: str, args_name: str
) -> None:
    _check_string_list(args, f"{prefix}.{args_name}")
    _check_string(key, f"{prefix}.{key_name}")
    if args and not key:
        _fail(f"{prefix}.{key_name} is required when specifying {args_name}")


def _check_analytics_label(value: Any, label: str) -> None:
    if value is None:
        return
    if not isinstance(value, str) or not _ANALYTICS_LABEL.match(value):
        _fail(f"Malformed {label}")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _dash(name: str) -> str:
    return name.replace("_", "-")


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


def normalize_topic(topic: Any) -> str:
    """Strip an optional ``/topics/`` prefix and check the topic grammar."""
    if not isinstance(topic, str):
        _fail("Malformed topic name")
    name = topic[len(TOPIC_PREFIX):] if topic.startswith(TOPIC_PREFIX) else topic
    if not _TOPIC_NAME.match(name):
        _fail("Malformed topic name")
    return name


def check_dry_run(dry_run: Any) -> None:
    if not isinstance(dry_run, bool):
        _fail("dry_run must be a boolean")


# ---------------------------------------------------------------------------
# Message
# ---------------------------------------------------------------------------


def validate_message(message: Any) -> None:
    """Validate a :class:`Message` and every sub-config it carries."""
    if not isinstance(message, Message):
        _fail("Message must be a non-null object")

    targets = {
        name: getattr(message, name)
        for name in ("token", "topic", "condition")
        if getattr(message, name) not in (None, "")
    }
    if len(targets) != 1:
        _fail("Exactly one of topic, token or condition is required")
    ((name, value),) = targets.items()
    if not isinstance(value, str):
        _fail(f"{name} must be a non-empty string")
    if name == "topic":
        normalize_topic(value)

    _check_string_map(message.data, "data")
    if message.notification is not None:
        _check_object(message.notification, Notification, "notification")
        _check_string(message.notification.title, "notification.title")
        _check_string(message.notification.body, "notification.body")
        _check_url(message.notification.image_url, "notification.image_url")
    if message.android is not None:
        validate_android_config(message.android)
    if message.apns is not None:
        validate_apns_config(message.apns)
    if message.webpush is not None:
        validate_webpush_config(message.webpush)
    if message.fcm_options is not None:
        _check_object(message.fcm_options, FcmOptions, "fcm_options")
        _check_analytics_label(message.fcm_options.analytics_label, "analytics label")


def validate_multicast(multicast: Any) -> None:
    if not isinstance(multicast, MulticastMessage):
        _fail("MulticastMessage must be a non-null object")
    if not isinstance(multicast.tokens, list) or not multicast.tokens:
        _fail("tokens must be a non-empty list")
    if len(multicast.tokens) > MAX_BATCH_SIZE:
        _fail(f"tokens list must not contain more than {MAX_BATCH_SIZE} items")


def validate_batch(messages: Any) -> None:
    if not isinstance(messages, (list, tuple)) or not messages:
        _fail("messages must be a non-empty list")
    if len(messages) > MAX_BATCH_SIZE:
        _fail(f"messages list must not contain more than {MAX_BATCH_SIZE} items")


# ---------------------------------------------------------------------------
# Android
# ---------------------------------------------------------------------------


def validate_android_config(android: Any) -> None:
    _check_object(android, AndroidConfig, "android")
    _check_string(android.collapse_key, "android.collapse_key")
    _check_string(android.restricted_package_name, "android.restricted_package_name")
    _check_enum(android.priority, _ANDROID_PRIORITIES, "android.priority")
    if android.ttl is not None and not is_valid_duration(android.ttl):
        _fail("TTL must be a non-negative duration in milliseconds")
    _check_string_map(android.data, "android.data")
    _check_boolean(android.direct_boot_ok, "android.direct_boot_ok")
    if android.notification is not None:
        _validate_android_notification(android.notification)
    if android.fcm_options is not None:
        _check_object(android.fcm_options, AndroidFcmOptions, "android.fcm_options")
        _check_analytics_label(android.fcm_options.analytics_label, "analytics label")


def _validate_android_notification(notification: Any) -> None:
    prefix = "android.notification"
    _check_object(notification, AndroidNotification, prefix)
    for name in ("title", "body", "icon", "sound", "tag", "click_action", "channel_id", "ticker"):
        _check_string(getattr(notification, name), f"{prefix}.{name}")
    if notification.color is not None and (
        not isinstance(notification.color, str) or not _ANDROID_COLOR.match(notification.color)
    ):
        _fail(f"{prefix}.color must be in the form #RRGGBB")
    _check_url(notification.image_url, f"{prefix}.image_url")
    _check_localization(
        notification.title_loc_args, notification.title_loc_key,
        prefix, "title_loc_key", "title_loc_args",
    )
    _check_localization(
        notification.body_loc_args, notification.body_loc_key,
        prefix, "body_loc_key", "body_loc_args",
    )
    if notification.event_timestamp is not None and not isinstance(
        notification.event_timestamp, datetime.datetime
    ):
        _fail(f"{prefix}.event_timestamp must be a datetime")
    _check_enum(notification.priority, _NOTIFICATION_PRIORITIES, f"{prefix}.priority")
    _check_enum(notification.visibility, _VISIBILITIES, f"{prefix}.visibility")
    _check_enum(notification.proxy, _PROXIES, f"{prefix}.proxy")

    timings = notification.vibrate_timings_millis
    if timings is not None:
        if not isinstance(timings, list) or not timings:
            _fail(f"{prefix}.vibrate_timings_millis must be a non-empty list of numbers")
        if not all(is_valid_duration(t) for t in timings):
            _fail(
                f"{prefix}.vibrate_timings_millis must be non-negative durations in milliseconds"
            )

    for name in ("sticky", "local_only", "default_vibrate_timings", "default_sound",
                 "default_light_settings"):
        _check_boolean(getattr(notification, name), f"{prefix}.{name}")
    _check_number(notification.notification_count, f"{prefix}.notification_count")
    if notification.light_settings is not None:
        _validate_light_settings(notification.light_settings)


def _validate_light_settings(settings: Any) -> None:
    prefix = "android.notification.light_settings"
    _check_object(settings, LightSettings, prefix)
    if not isinstance(settings.color, str) or not _LIGHT_COLOR.match(settings.color):
        _fail(f"{prefix}.color must be in the form #RRGGBB or #RRGGBBAA format")
    for name in ("light_on_duration_millis", "light_off_duration_millis"):
        if not is_valid_duration(getattr(settings, name)):
            _fail(f"{prefix}.{name} must be a non-negative duration in milliseconds")


# ---------------------------------------------------------------------------
# APNs
# ---------------------------------------------------------------------------


def validate_apns_config(apns: Any) -> None:
    _check_object(apns, ApnsConfig, "apns")
    _check_string_map(apns.headers, "apns.headers")
    if apns.payload is not None:
        _validate_apns_payload(apns.payload)
    if apns.fcm_options is not None:
        _check_object(apns.fcm_options, ApnsFcmOptions, "apns.fcm_options")
        _check_analytics_label(apns.fcm_options.analytics_label, "analytics label")
        _check_url(apns.fcm_options.image_url, "apns.fcm_options.image_url")


def _validate_apns_payload(payload: Any) -> None:
    _check_object(payload, ApnsPayload, "apns.payload")
    _check_custom_data(payload.custom_data, "apns.payload.custom_data")
    if "aps" in payload.custom_data:
        _fail("Multiple specifications for aps in ApnsPayload")
    _validate_aps(payload.aps)


def _validate_aps(aps: Any) -> None:
    prefix = "apns.payload.aps"
    _check_object(aps, Aps, prefix)

    if aps.alert is not None and not isinstance(aps.alert, str):
        if not isinstance(aps.alert, ApsAlert):
            _fail(f"{prefix}.alert must be a string or a non-null object")
        _validate_aps_alert(aps.alert)

    if aps.sound is not None:
        if isinstance(aps.sound, CriticalSound):
            _validate_critical_sound(aps.sound)
        elif not isinstance(aps.sound, str) or not aps.sound:
            _fail(f"{prefix}.sound must be a non-empty string or a non-null object")

    _check_number(aps.badge, f"{prefix}.badge")
    _check_boolean(aps.content_available, f"{prefix}.content_available")
    _check_boolean(aps.mutable_content, f"{prefix}.mutable_content")
    _check_string(aps.category, f"{prefix}.category")
    _check_string(aps.thread_id, f"{prefix}.thread_id")

    _check_custom_data(aps.custom_data, f"{prefix}.custom_data")
    for name in ("alert", "badge", "sound", "content_available", "mutable_content",
                 "category", "thread_id"):
        aliases = {name, _camel(name), _dash(name)}
        if getattr(aps, name) is not None and aliases & aps.custom_data.keys():
            _fail(f"Multiple specifications for {name} in Aps")


def _validate_aps_alert(alert: ApsAlert) -> None:
    prefix = "apns.payload.aps.alert"
    for name in ("title", "subtitle", "body", "action_loc_key", "launch_image"):
        _check_string(getattr(alert, name), f"{prefix}.{name}")
    _check_localization(alert.loc_args, alert.loc_key, prefix, "loc_key", "loc_args")
    _check_localization(
        alert.title_loc_args, alert.title_loc_key, prefix, "title_loc_key", "title_loc_args"
    )
    _check_localization(
        alert.subtitle_loc_args, alert.subtitle_loc_key,
        prefix, "subtitle_loc_key", "subtitle_loc_args",
    )
    _check_custom_data(alert.custom_data, f"{prefix}.custom_data")
    for name in ("title", "subtitle", "body", "loc_key", "loc_args", "title_loc_key",
                 "title_loc_args", "subtitle_loc_key", "subtitle_loc_args",
                 "action_loc_key", "launch_image"):
        aliases = {name, _camel(name), _dash(name)}
        if getattr(alert, name) is not None and aliases & alert.custom_data.keys():
            _fail(f"Multiple specifications for {name} in ApsAlert")


def _validate_critical_sound(sound: CriticalSound) -> None:
    prefix = "apns.payload.aps.sound"
    if not isinstance(sound.name, str) or not sound.name:
        _fail(f"{prefix}.name must be a non-empty string")
    _check_boolean(sound.critical, f"{prefix}.critical")
    if sound.volume is not None and (not _is_number(sound.volume) or not 0 <= sound.volume <= 1):
        _fail(f"{prefix}.volume must be in the interval [0, 1]")


# ---------------------------------------------------------------------------
# Webpush
# ---------------------------------------------------------------------------

_WEBPUSH_NOTIFICATION_KEYS = frozenset(
    {"title", "body", "icon", "actions", "badge", "data", "dir", "image", "lang",
     "renotify", "requireInteraction", "silent", "tag", "timestamp", "vibrate"}
)


def validate_webpush_config(webpush: Any) -> None:
    _check_object(webpush, WebpushConfig, "webpush")
    _check_string_map(webpush.headers, "webpush.headers")
    _check_string_map(webpush.data, "webpush.data")
    if webpush.notification is not None:
        _validate_webpush_notification(webpush.notification)
    if webpush.fcm_options is not None:
        _check_object(webpush.fcm_options, WebpushFcmOptions, "webpush.fcm_options")
        link = webpush.fcm_options.link
        if link is not None and (
            not isinstance(link, str) or not link.startswith("https://") or not urlparse(link).netloc
        ):
            _fail("webpush.fcm_options.link must be a HTTPS URL")


def _validate_webpush_notification(notification: Any) -> None:
    prefix = "webpush.notification"
    _check_object(notification, WebpushNotification, prefix)
    for name in ("title", "body", "icon", "badge", "image", "language", "tag"):
        _check_string(getattr(notification, name), f"{prefix}.{name}")
    _check_enum(notification.direction, _DIRECTIONS, f"{prefix}.direction")
    _check_number(notification.timestamp_millis, f"{prefix}.timestamp_millis")
    if notification.actions is not None:
        if not isinstance(notification.actions, list) or not all(
            isinstance(a, WebpushNotificationAction) for a in notification.actions
        ):
            _fail(f"{prefix}.actions must be a list of WebpushNotificationAction")
    _check_custom_data(notification.custom_data, f"{prefix}.custom_data")
    for key in notification.custom_data:
        if key in _WEBPUSH_NOTIFICATION_KEYS:
            _fail(f"Multiple specifications for {key} in WebpushNotification")


# ---------------------------------------------------------------------------
# Topic management
# ---------------------------------------------------------------------------


def validate_registration_tokens(tokens: Any, method: str) -> list[str]:
    """Return *tokens* as a list, enforcing the 1..1000 non-empty-string rule."""
    if isinstance(tokens, str) and tokens:
        return [tokens]
    if not isinstance(tokens, list) or not tokens:
        _fail(
            f"Registration token(s) provided to {method}() must be a non-empty string "
            "or a non-empty list."
        )
    if len(tokens) > MAX_TOPIC_MANAGEMENT_TOKENS:
        _fail(
            f"Too many registration tokens provided in a single request to {method}(). "
            f"Batch your requests to contain no more than {MAX_TOPIC_MANAGEMENT_TOKENS:,} "
            "registration tokens per request."
        )
    for index, token in enumerate(tokens):
        if not isinstance(token, str) or not token:
            _fail(
                f"Registration token provided to {method}() at index {index} "
                "must be a non-empty string."
            )
    return list(tokens)


def validate_topic_management_topic(topic: Any, method: str) -> str:
    """Return the topic name without its ``/topics/`` prefix."""
    if not isinstance(topic, str) or not _MANAGED_TOPIC.match(topic):
        _fail(
            f"Topic provided to {method}() must be a string which matches "
            "/^(/topics/)?(private/)?[a-zA-Z0-9-_.~%]+$/."
        )
    return topic[len(TOPIC_PREFIX):] if topic.startswith(TOPIC_PREFIX) else topic

"""Unit tests for message validation."""
from __future__ import annotations

import datetime
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

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
)
from mp_fcm.messaging.validators import (
    check_dry_run,
    normalize_topic,
    validate_batch,
    validate_message,
    validate_multicast,
    validate_registration_tokens,
    validate_topic_management_topic,
)


def _invalid(message: Any) -> InvalidArgumentError:
    with pytest.raises(InvalidArgumentError) as exc_info:
        validate_message(message)
    assert exc_info.value.code == "messaging/invalid-argument"
    return exc_info.value


def _android(**kwargs: Any) -> Message:
    return Message(token="t", android=AndroidConfig(**kwargs))


def _android_notification(**kwargs: Any) -> Message:
    return _android(notification=AndroidNotification(**kwargs))


def _aps(**kwargs: Any) -> Message:
    return Message(token="t", apns=ApnsConfig(payload=ApnsPayload(aps=Aps(**kwargs))))


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


class TestTargets:
    def test_non_message_rejected(self) -> None:
        assert _invalid({"token": "t"}).message == "Message must be a non-null object"

    def test_no_target(self) -> None:
        err = _invalid(Message())
        assert err.message == "Exactly one of topic, token or condition is required"

    def test_empty_token_counts_as_missing(self) -> None:
        err = _invalid(Message(token=""))
        assert err.message == "Exactly one of topic, token or condition is required"

    def test_two_targets(self) -> None:
        err = _invalid(Message(token="t", topic="news"))
        assert err.message == "Exactly one of topic, token or condition is required"

    def test_non_string_target(self) -> None:
        assert _invalid(Message(token=1)).message == "token must be a non-empty string"  # type: ignore[arg-type]

    @pytest.mark.parametrize("topic", ["/topics/", "/foo/bar", "foo bar", "a/b"])
    def test_malformed_topic(self, topic: str) -> None:
        assert _invalid(Message(topic=topic)).message == "Malformed topic name"

    @pytest.mark.parametrize("topic", ["news", "/topics/news", "a-b_c.d~e%f"])
    def test_valid_topic(self, topic: str) -> None:
        validate_message(Message(topic=topic))

    def test_normalize_topic_strips_prefix(self) -> None:
        assert normalize_topic("/topics/news") == "news"
        assert normalize_topic("news") == "news"

    def test_condition_accepted(self) -> None:
        validate_message(Message(condition="'a' in topics && 'b' in topics"))

    @given(
        token=st.one_of(st.none(), st.just(""), st.text(min_size=1)),
        topic=st.one_of(st.none(), st.just(""), st.sampled_from(["news", "/topics/sport"])),
        condition=st.one_of(st.none(), st.just(""), st.text(min_size=1)),
    )
    def test_exactly_one_target_required(
        self, token: str | None, topic: str | None, condition: str | None
    ) -> None:
        present = sum(1 for v in (token, topic, condition) if v)
        message = Message(token=token, topic=topic, condition=condition)
        if present == 1:
            validate_message(message)
        else:
            with pytest.raises(InvalidArgumentError):
                validate_message(message)


class TestDryRunAndBatch:
    @pytest.mark.parametrize("value", ["", "true", 1, 0, None, [], {}])
    def test_dry_run_must_be_boolean(self, value: Any) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            check_dry_run(value)
        assert exc_info.value.message == "dry_run must be a boolean"

    def test_empty_batch(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_batch([])
        assert exc_info.value.message == "messages must be a non-empty list"

    def test_batch_of_501(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_batch([Message(token="t")] * 501)
        assert exc_info.value.message == "messages list must not contain more than 500 items"

    def test_batch_of_500(self) -> None:
        validate_batch([Message(token="t")] * 500)

    def test_multicast_limits(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_multicast(MulticastMessage(tokens=[]))
        assert exc_info.value.message == "tokens must be a non-empty list"
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_multicast(MulticastMessage(tokens=["t"] * 501))
        assert exc_info.value.message == "tokens list must not contain more than 500 items"


# ---------------------------------------------------------------------------
# Top-level fields
# ---------------------------------------------------------------------------


class TestTopLevel:
    def test_data_must_be_dict(self) -> None:
        err = _invalid(Message(token="t", data=["a"]))  # type: ignore[arg-type]
        assert err.message == "data must be a non-null object"

    @pytest.mark.parametrize("data", [{"k": 1}, {"k": None}, {"k": True}, {1: "v"}])
    def test_data_values_must_be_strings(self, data: dict[Any, Any]) -> None:
        assert _invalid(Message(token="t", data=data)).message == "data must only contain string values"

    @pytest.mark.parametrize("url", ["", "image", "ftp://host/x.png", "http://"])
    def test_notification_image_url(self, url: str) -> None:
        err = _invalid(Message(token="t", notification=Notification(image_url=url)))
        assert err.message == "notification.image_url must be a valid URL string"

    def test_notification_must_be_model(self) -> None:
        err = _invalid(Message(token="t", notification={"title": "x"}))  # type: ignore[arg-type]
        assert err.message == "notification must be a non-null object"

    @pytest.mark.parametrize("label", ["", "a" * 51, "has space", "é"])
    def test_malformed_analytics_label(self, label: str) -> None:
        err = _invalid(Message(token="t", fcm_options=FcmOptions(analytics_label=label)))
        assert err.message == "Malformed analytics label"


# ---------------------------------------------------------------------------
# Android
# ---------------------------------------------------------------------------


class TestAndroid:
    def test_android_must_be_model(self) -> None:
        err = _invalid(Message(token="t", android={"priority": "high"}))  # type: ignore[arg-type]
        assert err.message == "android must be a non-null object"

    def test_priority(self) -> None:
        err = _invalid(_android(priority="urgent"))
        assert err.message == 'android.priority must be one of "high" or "normal"'

    @pytest.mark.parametrize("ttl", [-1, -0.5, "10", True, datetime.timedelta(seconds=-1)])
    def test_invalid_ttl(self, ttl: Any) -> None:
        assert _invalid(_android(ttl=ttl)).message == "TTL must be a non-negative duration in milliseconds"

    @pytest.mark.parametrize("ttl", [0, 5, 5000, 1.5, datetime.timedelta(hours=1)])
    def test_valid_ttl(self, ttl: Any) -> None:
        validate_message(_android(ttl=ttl))

    def test_android_data(self) -> None:
        err = _invalid(_android(data={"k": 1}))
        assert err.message == "android.data must only contain string values"

    def test_fcm_options_must_be_model(self) -> None:
        err = _invalid(_android(fcm_options={"analytics_label": "x"}))
        assert err.message == "android.fcm_options must be a non-null object"

    def test_fcm_options_label(self) -> None:
        err = _invalid(_android(fcm_options=AndroidFcmOptions(analytics_label="bad label")))
        assert err.message == "Malformed analytics label"

    @pytest.mark.parametrize("color", ["112233", "#112", "#11223344", "#GGHHII"])
    def test_notification_color(self, color: str) -> None:
        err = _invalid(_android_notification(color=color))
        assert err.message == "android.notification.color must be in the form #RRGGBB"

    def test_notification_image_url(self) -> None:
        err = _invalid(_android_notification(image_url="nope"))
        assert err.message == "android.notification.image_url must be a valid URL string"

    def test_title_loc_args_require_key(self) -> None:
        err = _invalid(_android_notification(title_loc_args=["a"]))
        assert err.message == (
            "android.notification.title_loc_key is required when specifying title_loc_args"
        )

    def test_body_loc_args_require_key(self) -> None:
        err = _invalid(_android_notification(body_loc_args=["a"]))
        assert err.message == (
            "android.notification.body_loc_key is required when specifying body_loc_args"
        )

    def test_loc_args_with_key_accepted(self) -> None:
        validate_message(_android_notification(title_loc_key="k", title_loc_args=["a"]))

    def test_notification_priority(self) -> None:
        err = _invalid(_android_notification(priority="urgent"))
        assert err.message == (
            'android.notification.priority must be one of "min", "low", "default", "high" or "max"'
        )

    def test_visibility(self) -> None:
        err = _invalid(_android_notification(visibility="hidden"))
        assert err.message == (
            'android.notification.visibility must be one of "private", "public" or "secret"'
        )

    def test_event_timestamp_must_be_datetime(self) -> None:
        err = _invalid(_android_notification(event_timestamp="2024-01-01"))
        assert err.message == "android.notification.event_timestamp must be a datetime"

    @pytest.mark.parametrize("timings", [[], "100", 100])
    def test_vibrate_timings_shape(self, timings: Any) -> None:
        err = _invalid(_android_notification(vibrate_timings_millis=timings))
        assert err.message == "android.notification.vibrate_timings_millis must be a non-empty list of numbers"

    @pytest.mark.parametrize("timings", [[100, -1], [None, 500], ["100"]])
    def test_vibrate_timings_values(self, timings: list[Any]) -> None:
        err = _invalid(_android_notification(vibrate_timings_millis=timings))
        assert err.message == (
            "android.notification.vibrate_timings_millis must be non-negative durations in milliseconds"
        )

    @pytest.mark.parametrize("color", ["#112", "112233", "#1122334", "#GG2233"])
    def test_light_settings_color(self, color: str) -> None:
        light = LightSettings(color=color, light_on_duration_millis=1, light_off_duration_millis=1)
        err = _invalid(_android_notification(light_settings=light))
        assert err.message == (
            "android.notification.light_settings.color must be in the form #RRGGBB or #RRGGBBAA format"
        )

    def test_light_settings_on_duration(self) -> None:
        light = LightSettings(color="#112233", light_on_duration_millis=-1, light_off_duration_millis=1)
        err = _invalid(_android_notification(light_settings=light))
        assert err.message == (
            "android.notification.light_settings.light_on_duration_millis "
            "must be a non-negative duration in milliseconds"
        )

    def test_light_settings_off_duration(self) -> None:
        light = LightSettings(color="#112233", light_on_duration_millis=1, light_off_duration_millis="x")
        err = _invalid(_android_notification(light_settings=light))
        assert err.message == (
            "android.notification.light_settings.light_off_duration_millis "
            "must be a non-negative duration in milliseconds"
        )

    def test_full_android_config_accepted(self) -> None:
        validate_message(
            _android(
                collapse_key="k",
                priority="high",
                ttl=5000,
                restricted_package_name="com.example",
                data={"a": "b"},
                direct_boot_ok=True,
                notification=AndroidNotification(
                    title="t",
                    color="#112233",
                    event_timestamp=datetime.datetime(2024, 1, 1),
                    priority="max",
                    visibility="private",
                    proxy="deny",
                    vibrate_timings_millis=[100, 200.5],
                    light_settings=LightSettings("#11223344", 100, 200),
                    notification_count=3,
                ),
                fcm_options=AndroidFcmOptions(analytics_label="label"),
            )
        )


# ---------------------------------------------------------------------------
# APNs
# ---------------------------------------------------------------------------


class TestApns:
    def test_apns_must_be_model(self) -> None:
        err = _invalid(Message(token="t", apns="x"))  # type: ignore[arg-type]
        assert err.message == "apns must be a non-null object"

    def test_headers(self) -> None:
        err = _invalid(Message(token="t", apns=ApnsConfig(headers={"apns-priority": 10})))  # type: ignore[dict-item]
        assert err.message == "apns.headers must only contain string values"

    def test_aps_must_be_model(self) -> None:
        payload = ApnsPayload(aps=None)  # type: ignore[arg-type]
        err = _invalid(Message(token="t", apns=ApnsConfig(payload=payload)))
        assert err.message == "apns.payload.aps must be a non-null object"

    def test_alert_type(self) -> None:
        err = _invalid(_aps(alert=10))
        assert err.message == "apns.payload.aps.alert must be a string or a non-null object"

    @pytest.mark.parametrize(
        "alert, message",
        [
            (ApsAlert(loc_args=["a"]), "apns.payload.aps.alert.loc_key is required when specifying loc_args"),
            (
                ApsAlert(title_loc_args=["a"]),
                "apns.payload.aps.alert.title_loc_key is required when specifying title_loc_args",
            ),
            (
                ApsAlert(subtitle_loc_args=["a"]),
                "apns.payload.aps.alert.subtitle_loc_key is required when specifying subtitle_loc_args",
            ),
        ],
    )
    def test_alert_loc_args_require_key(self, alert: ApsAlert, message: str) -> None:
        assert _invalid(_aps(alert=alert)).message == message

    @pytest.mark.parametrize("sound", ["", 1, ["x"]])
    def test_sound_type(self, sound: Any) -> None:
        err = _invalid(_aps(sound=sound))
        assert err.message == "apns.payload.aps.sound must be a non-empty string or a non-null object"

    def test_critical_sound_name(self) -> None:
        err = _invalid(_aps(sound=CriticalSound(name="")))
        assert err.message == "apns.payload.aps.sound.name must be a non-empty string"

    @pytest.mark.parametrize("volume", [-0.1, 1.1, "1"])
    def test_critical_sound_volume(self, volume: Any) -> None:
        err = _invalid(_aps(sound=CriticalSound(name="s", volume=volume)))
        assert err.message == "apns.payload.aps.sound.volume must be in the interval [0, 1]"

    @pytest.mark.parametrize("volume", [0, 0.5, 1])
    def test_critical_sound_volume_bounds(self, volume: float) -> None:
        validate_message(_aps(sound=CriticalSound(name="s", critical=True, volume=volume)))

    @pytest.mark.parametrize("key", ["mutable_content", "mutableContent", "mutable-content"])
    def test_alias_conflict(self, key: str) -> None:
        err = _invalid(_aps(mutable_content=True, custom_data={key: 1}))
        assert err.message == "Multiple specifications for mutable_content in Aps"

    @pytest.mark.parametrize("key", ["loc_key", "locKey", "loc-key"])
    def test_alert_alias_conflict(self, key: str) -> None:
        alert = ApsAlert(loc_key="typed", custom_data={key: "custom"})
        err = _invalid(_aps(alert=alert))
        assert err.message == "Multiple specifications for loc_key in ApsAlert"

    def test_alert_custom_key_without_typed_field_accepted(self) -> None:
        validate_message(_aps(alert=ApsAlert(body="b", custom_data={"title": "t", "extra": 1})))

    def test_custom_key_without_typed_field_accepted(self) -> None:
        validate_message(_aps(custom_data={"content-available": 1, "custom": {"a": 1}}))

    def test_payload_custom_aps_key(self) -> None:
        payload = ApnsPayload(custom_data={"aps": {}})
        err = _invalid(Message(token="t", apns=ApnsConfig(payload=payload)))
        assert err.message == "Multiple specifications for aps in ApnsPayload"

    def test_fcm_options(self) -> None:
        options = ApnsFcmOptions(image_url="not a url")
        err = _invalid(Message(token="t", apns=ApnsConfig(fcm_options=options)))
        assert err.message == "apns.fcm_options.image_url must be a valid URL string"


# ---------------------------------------------------------------------------
# Webpush
# ---------------------------------------------------------------------------


class TestWebpush:
    @pytest.mark.parametrize("link", ["", "http://example.com", "example.com", "https://"])
    def test_link_must_be_https(self, link: str) -> None:
        webpush = WebpushConfig(fcm_options=WebpushFcmOptions(link=link))
        err = _invalid(Message(token="t", webpush=webpush))
        assert err.message == "webpush.fcm_options.link must be a HTTPS URL"

    def test_direction(self) -> None:
        webpush = WebpushConfig(notification=WebpushNotification(direction="up"))  # type: ignore[arg-type]
        err = _invalid(Message(token="t", webpush=webpush))
        assert err.message == 'webpush.notification.direction must be one of "auto", "ltr" or "rtl"'

    def test_custom_key_conflict(self) -> None:
        webpush = WebpushConfig(
            notification=WebpushNotification(title="t", custom_data={"requireInteraction": True})
        )
        err = _invalid(Message(token="t", webpush=webpush))
        assert err.message == "Multiple specifications for requireInteraction in WebpushNotification"

    def test_headers(self) -> None:
        err = _invalid(Message(token="t", webpush=WebpushConfig(headers={"TTL": 60})))  # type: ignore[dict-item]
        assert err.message == "webpush.headers must only contain string values"


# ---------------------------------------------------------------------------
# Topic management arguments
# ---------------------------------------------------------------------------


class TestTopicManagementArguments:
    def test_single_token_wrapped(self) -> None:
        assert validate_registration_tokens("t", "subscribe_to_topic") == ["t"]

    @pytest.mark.parametrize("tokens", ["", [], None, 1, {"t": 1}])
    def test_empty_or_wrong_type(self, tokens: Any) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_registration_tokens(tokens, "subscribe_to_topic")
        assert exc_info.value.message == (
            "Registration token(s) provided to subscribe_to_topic() must be a non-empty "
            "string or a non-empty list."
        )

    def test_bad_element(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_registration_tokens(["a", ""], "unsubscribe_from_topic")
        assert "at index 1" in exc_info.value.message

    def test_1000_tokens_accepted(self) -> None:
        assert len(validate_registration_tokens(["t"] * 1000, "subscribe_to_topic")) == 1000

    def test_1001_tokens_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_registration_tokens(["t"] * 1001, "subscribe_to_topic")
        assert exc_info.value.message.startswith(
            "Too many registration tokens provided in a single request to subscribe_to_topic()."
        )
        assert "1,000" in exc_info.value.message

    @pytest.mark.parametrize(
        "topic, expected",
        [("news", "news"), ("/topics/news", "news"), ("/topics/private/news", "private/news")],
    )
    def test_topic_normalised(self, topic: str, expected: str) -> None:
        assert validate_topic_management_topic(topic, "subscribe_to_topic") == expected

    @pytest.mark.parametrize("topic", ["", "foo bar", "/topics/", 1, "/other/news"])
    def test_invalid_topic(self, topic: Any) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_topic_management_topic(topic, "subscribe_to_topic")
        assert exc_info.value.message.startswith(
            "Topic provided to subscribe_to_topic() must be a string which matches"
        )

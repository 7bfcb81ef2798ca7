"""Messaging – message models, validation, encoding and sending."""
from mp_fcm.messaging.batch import BatchCoordinator
from mp_fcm.messaging.client import MessagingClient
from mp_fcm.messaging.encoder import MessageEncoder, encode_send_request
from mp_fcm.messaging.error_mapper import ErrorMapper
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
from mp_fcm.messaging.responses import (
    BatchResponse,
    SendResponse,
    TopicManagementError,
    TopicManagementResponse,
)
from mp_fcm.messaging.single import SingleSendClient
from mp_fcm.messaging.topics import TopicMembershipClient

__all__ = [
    "AndroidConfig",
    "AndroidFcmOptions",
    "AndroidNotification",
    "ApnsConfig",
    "ApnsFcmOptions",
    "ApnsPayload",
    "Aps",
    "ApsAlert",
    "BatchCoordinator",
    "BatchResponse",
    "CriticalSound",
    "ErrorMapper",
    "FcmOptions",
    "LightSettings",
    "Message",
    "MessageEncoder",
    "MessagingClient",
    "MulticastMessage",
    "Notification",
    "SendResponse",
    "SingleSendClient",
    "TopicManagementError",
    "TopicManagementResponse",
    "TopicMembershipClient",
    "WebpushConfig",
    "WebpushFcmOptions",
    "WebpushNotification",
    "WebpushNotificationAction",
    "encode_send_request",
]

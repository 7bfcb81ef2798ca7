"""
mp_fcm – async client for a push-notification delivery service.

Import path convention::

    from mp_fcm.messaging import MessagingClient, Message, Notification
    from mp_fcm.config import EnvSettingsLoader, MessagingSettings
    from mp_fcm.credentials import StaticAccessTokenProvider
    from mp_fcm.kernel.errors import MessagingError, MessagingSessionError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

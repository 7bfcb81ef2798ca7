"""Observability – structured logging."""
from mp_fcm.observability.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from mp_fcm.observability.logging import configure_logging, get_logger

__all__ = ["DEFAULT_SENSITIVE_FIELDS", "SensitiveFieldsFilter", "configure_logging", "get_logger"]

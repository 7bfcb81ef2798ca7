"""Resilience – retry for discrete sends."""
from mp_fcm.resilience.retry import RetryPolicy

__all__ = ["RetryPolicy"]

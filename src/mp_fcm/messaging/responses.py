"""Messaging responses – per-message outcomes and batch aggregates."""
from __future__ import annotations

from dataclasses import dataclass, field

from mp_fcm.kernel.errors import BaseError

__all__ = [
    "BatchResponse",
    "SendResponse",
    "TopicManagementError",
    "TopicManagementResponse",
]


@dataclass(frozen=True)
class SendResponse:
    """Outcome of one message: a message id on success, an error otherwise."""

    success: bool
    message_id: str | None = None
    error: BaseError | None = None

    @classmethod
    def ok(cls, message_id: str) -> "SendResponse":
        return cls(success=True, message_id=message_id)

    @classmethod
    def failed(cls, error: BaseError) -> "SendResponse":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class BatchResponse:
    """Outcomes of a batch, in the order the messages were given."""

    responses: list[SendResponse] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.responses if r.success)

    @property
    def failure_count(self) -> int:
        return len(self.responses) - self.success_count


@dataclass(frozen=True)
class TopicManagementError:
    """A failed token; ``index`` points into the caller's token list."""

    index: int
    error: BaseError


@dataclass(frozen=True)
class TopicManagementResponse:
    success_count: int
    failure_count: int
    errors: list[TopicManagementError] = field(default_factory=list)

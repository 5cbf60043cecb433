"""Delivery outcomes for notification channels.

A channel attempt ends in exactly one of three states:
- Delivered: provider accepted the request (HTTP 2xx)
- Skipped: channel not configured, message logged instead (degraded mode)
- Failed: provider error, non-2xx response, timeout, or network failure

Outcomes are created by the channel and consumed immediately by the HTTP
handler; they are never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class Delivered:
    provider_response: Any

    @property
    def success(self) -> bool:
        return True

    def as_dict(self) -> dict[str, Any]:
        return {"success": True, "data": self.provider_response}


@dataclass(frozen=True)
class Skipped:
    reason: str

    @property
    def success(self) -> bool:
        return False

    def as_dict(self) -> dict[str, Any]:
        return {"success": False, "reason": self.reason}


@dataclass(frozen=True)
class Failed:
    error: Any

    @property
    def success(self) -> bool:
        return False

    def as_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.error}


DeliveryOutcome = Delivered | Skipped | Failed


@runtime_checkable
class Channel(Protocol):
    """Protocol for notification channels."""

    @property
    def channel_type(self) -> str:
        """Type of channel (whatsapp, ...)."""
        ...

    @property
    def is_configured(self) -> bool:
        """Whether this channel has credentials to actually send."""
        ...

    def deliver(self, message: str) -> DeliveryOutcome:
        """Make at most one delivery attempt. Never raises."""
        ...

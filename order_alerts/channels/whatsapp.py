"""WhatsApp notification channel: sends text messages via the WhatsApp Cloud API.

POST {api_base}/{phone_number_id}/messages with a bearer token.
One attempt per message, bounded by a timeout; no retries, no queue.

Degraded mode: without credentials the message is logged instead of sent.

Security: Token never logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from order_alerts.channels.protocol import (
    Delivered,
    DeliveryOutcome,
    Failed,
    Skipped,
)
from order_alerts.errors import DeliveryFailure

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://graph.facebook.com/v18.0"
DEFAULT_TIMEOUT_SECONDS = 10.0
NOT_CONFIGURED = "not configured"


@dataclass(frozen=True)
class WhatsAppCredentials:
    token: str
    sender_id: str

    def __repr__(self) -> str:
        return f"WhatsAppCredentials(token=***, sender_id={self.sender_id!r})"


def _response_body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


class WhatsAppChannel:
    """WhatsApp Cloud API text-message channel for a single destination."""

    def __init__(
        self,
        destination: str,
        credentials: WhatsAppCredentials | None = None,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        log: logging.Logger | None = None,
    ):
        self._destination = destination
        self._credentials = credentials
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._log = log or logger

    @property
    def channel_type(self) -> str:
        return "whatsapp"

    @property
    def is_configured(self) -> bool:
        return self._credentials is not None

    def format_message(self, message: str) -> dict[str, Any]:
        """Cloud API payload for a plain text message."""
        return {
            "messaging_product": "whatsapp",
            "to": self._destination,
            "type": "text",
            "text": {"body": message},
        }

    def _post(self, creds: WhatsAppCredentials, payload: dict[str, Any]) -> Any:
        """Single POST to the messages endpoint. Raises DeliveryFailure."""
        try:
            resp = requests.post(
                f"{self._api_base}/{creds.sender_id}/messages",
                json=payload,
                headers={
                    "Authorization": f"Bearer {creds.token}",
                    "Content-Type": "application/json",
                },
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise DeliveryFailure(str(e)) from e

        body = _response_body(resp)
        if not 200 <= resp.status_code < 300:
            raise DeliveryFailure(f"WhatsApp API error: {resp.status_code}", detail=body)
        return body

    def deliver(self, message: str) -> DeliveryOutcome:
        """Send the message, or log it when the channel is not configured."""
        if self._credentials is None:
            self._log.info(
                "WhatsApp credentials not configured. Message would be:\n---\n%s\n---",
                message,
            )
            return Skipped(reason=NOT_CONFIGURED)

        try:
            body = self._post(self._credentials, self.format_message(message))
        except DeliveryFailure as e:
            self._log.error("Error sending WhatsApp message: %s", e.detail)
            return Failed(error=e.detail)

        self._log.info("WhatsApp message sent successfully: %s", body)
        return Delivered(provider_response=body)

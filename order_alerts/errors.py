"""Error taxonomy for the order alert pipeline.

Response contract:
- AuthenticationFailure -> 401 (the only non-2xx answer Shopify ever sees)
- PayloadError -> 200 with status "error_logged" (Shopify retries on non-2xx)
- DeliveryFailure -> never propagates; reported as whatsapp_sent=false
"""

from __future__ import annotations


class OrderAlertsError(Exception):
    """Base exception for order alert processing."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationFailure(OrderAlertsError):
    """Webhook signature missing or invalid."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class PayloadError(OrderAlertsError):
    """Order payload could not be decoded or validated."""


class DeliveryFailure(OrderAlertsError):
    """WhatsApp API call failed, timed out, or returned non-2xx."""

    def __init__(self, message: str, detail: object = None) -> None:
        super().__init__(message)
        self.detail = detail if detail is not None else message

"""Shopify order payload models.

Only the fields the notification needs are modelled; everything else in the
orders/create payload is ignored. Models are frozen snapshots of one event.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Union

from pydantic import BaseModel, ValidationError, field_validator

from order_alerts.errors import PayloadError

logger = logging.getLogger(__name__)

# Shopify sends money as strings ("29.99"), phones sometimes as numbers; render verbatim.
Scalar = Union[int, float, str]


class Customer(BaseModel):
    first_name: Scalar | None = None
    last_name: Scalar | None = None
    email: Scalar | None = None
    phone: Scalar | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class LineItem(BaseModel):
    title: Scalar | None = None
    quantity: Scalar | None = None
    price: Scalar | None = None

    model_config = {"frozen": True, "extra": "ignore"}


class ShippingAddress(BaseModel):
    address1: Scalar | None = None
    city: Scalar | None = None
    province: Scalar | None = None
    zip: Scalar | None = None
    country: Scalar | None = None

    model_config = {"frozen": True, "extra": "ignore"}


class Order(BaseModel):
    """An orders/create webhook payload."""

    order_number: Scalar | None = None
    currency: Scalar | None = None
    total_price: Scalar | None = None
    email: Scalar | None = None
    phone: Scalar | None = None
    customer: Customer | None = None
    line_items: tuple[LineItem, ...] = ()
    shipping_address: ShippingAddress | None = None
    created_at: str | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("line_items", mode="before")
    @classmethod
    def _null_items_to_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("created_at", mode="before")
    @classmethod
    def _unusable_timestamp_to_none(cls, value: Any) -> Any:
        # Anything but a string renders as N/A rather than rejecting the order
        return value if isinstance(value, str) else None

    @property
    def contact_email(self) -> Scalar | None:
        return self.email or (self.customer.email if self.customer else None)

    @property
    def contact_phone(self) -> Scalar | None:
        return self.phone or (self.customer.phone if self.customer else None)


def parse_order(body: bytes | str | dict) -> Order:
    """Decode and validate an order payload.

    Args:
        body: Raw request bytes, a JSON string, or an already-decoded dict

    Returns:
        The validated Order

    Raises:
        PayloadError: if the body is not JSON, not an object, or fails validation
    """
    if isinstance(body, dict):
        payload = body
    else:
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PayloadError(f"Invalid JSON payload: {e}") from e

    if not isinstance(payload, dict):
        raise PayloadError(f"Order payload must be a JSON object, got {type(payload).__name__}")

    try:
        return Order.model_validate(payload)
    except ValidationError as e:
        logger.debug("Order validation failed: %s", e)
        raise PayloadError(
            f"Invalid order payload: {e.error_count()} validation error(s)"
        ) from e

"""Shared fixtures for the order alerts test suite."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from typing import Any

import pytest

from order_alerts.config import Settings

WEBHOOK_SECRET = "shopify-test-secret"


def _sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    digest = hmac.new(secret.encode(), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def _make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "whatsapp_token": "",
        "phone_number_id": "",
        "shopify_webhook_secret": "",
        "company_whatsapp": "971500000000",
        "display_timezone": "Asia/Kolkata",
        "store_label": "AD Plants Shop",
        "app_env": "test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def order_payload() -> dict[str, Any]:
    """A realistic orders/create payload."""
    return {
        "id": 820982911946154508,
        "order_number": 1001,
        "email": "jon@example.com",
        "phone": "+971501234567",
        "currency": "AED",
        "total_price": "149.00",
        "created_at": "2024-01-15T10:30:00-05:00",
        "customer": {"first_name": "Jon", "last_name": "Snow", "email": "jon@example.com"},
        "line_items": [
            {"title": "Monstera Deliciosa", "quantity": 1, "price": "99.00"},
            {"title": "Ceramic Pot", "quantity": 2, "price": "25.00"},
        ],
        "shipping_address": {
            "address1": "12 Palm Street",
            "city": "Dubai",
            "province": "Dubai",
            "zip": "00000",
            "country": "United Arab Emirates",
        },
        "tags": "",
    }


@pytest.fixture
def order_body(order_payload) -> bytes:
    return json.dumps(order_payload).encode()


@pytest.fixture
def webhook_secret() -> str:
    return WEBHOOK_SECRET


@pytest.fixture
def sign():
    """Factory computing a valid X-Shopify-Hmac-Sha256 header for a body."""
    return _sign


@pytest.fixture
def make_settings():
    """Factory for Settings isolated from the developer's .env file."""
    return _make_settings

"""HTTP-level test fixtures.

Responsibilities:
- Builds the FastAPI app from explicit Settings (no env, no .env file)
- Wraps it in TestClient variants: permissive (no secret), enforced (secret
  configured), and a WhatsApp-configured client for delivery paths
- Scoped to tests/security/ only
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from order_alerts.app import create_app


@pytest.fixture
def make_client(make_settings):
    """Factory: TestClient for an app built from the given setting overrides."""
    clients: list[TestClient] = []

    def _make(channel=None, **overrides) -> TestClient:
        app = create_app(make_settings(**overrides), channel=channel)
        c = TestClient(app, raise_server_exceptions=False)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()


@pytest.fixture
def client(make_client):
    """Permissive mode: no webhook secret, no WhatsApp credentials."""
    return make_client()


@pytest.fixture
def enforced_client(make_client, webhook_secret):
    """Signature verification enforced, WhatsApp not configured."""
    return make_client(shopify_webhook_secret=webhook_secret)


@pytest.fixture
def whatsapp_client(make_client, webhook_secret):
    """Signature enforced and WhatsApp credentials configured."""
    return make_client(
        shopify_webhook_secret=webhook_secret,
        whatsapp_token="wa-token",
        phone_number_id="123456789",
    )

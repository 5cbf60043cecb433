"""Webhook HTTP handlers: FastAPI route for Shopify orders/create.

The handler:
1. Reads the raw body (needed for HMAC verification)
2. Verifies the signature against the configured AuthMode
3. Parses the order and formats the notification
4. Delivers it through the channel (one attempt, off the event loop)
5. Returns 200 with order number, latency and delivery flag

Response contract:
- 401 only for signature failures
- 200 with status "error_logged" for anything that breaks after verification,
  so Shopify does not keep redelivering an event we cannot process
- Delivery failures never fail the webhook; they show up as whatsapp_sent=false
"""

from __future__ import annotations

import asyncio
import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from order_alerts.channels.protocol import Channel
from order_alerts.config import Settings
from order_alerts.errors import AuthenticationFailure
from order_alerts.orders.formatter import format_order_message, summarize_order
from order_alerts.orders.models import parse_order
from order_alerts.webhooks.verification import SIGNATURE_HEADER, verify_request

logger = logging.getLogger(__name__)

ORDERS_CREATE_PATH = "/webhooks/orders/create"


def elapsed_ms(start: float) -> int:
    return int(round((time.monotonic() - start) * 1000))


async def handle_order_created(
    request: Request,
    settings: Settings,
    channel: Channel,
    log: logging.Logger | None = None,
) -> JSONResponse:
    """Process one orders/create webhook.

    Raises:
        AuthenticationFailure: signature verification failed
    """
    log = log or logger
    start = time.monotonic()
    log.info("=== NEW WEBHOOK RECEIVED ===")

    body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    # Verify before touching the untrusted bytes
    if not verify_request(settings.auth_mode, body, signature, log=log):
        log.warning("Webhook verification failed after %dms", elapsed_ms(start))
        raise AuthenticationFailure()

    try:
        order = parse_order(body)
        log.info("Order received: %s", summarize_order(order))

        message = format_order_message(
            order,
            store_label=settings.store_label,
            timezone_label=settings.display_timezone,
        )

        log.info("Sending %s notification...", channel.channel_type)
        outcome = await asyncio.to_thread(channel.deliver, message)
    except Exception as e:
        processing_time = elapsed_ms(start)
        log.exception("Webhook processing error after %dms", processing_time)
        # 200 so Shopify does not retry application errors
        return JSONResponse(
            {
                "status": "error_logged",
                "error": str(e),
                "processing_time_ms": processing_time,
            },
            status_code=200,
        )

    processing_time = elapsed_ms(start)
    log.info(
        "Order %s processed in %dms, WhatsApp result: %s",
        order.order_number,
        processing_time,
        type(outcome).__name__,
    )
    log.info("=== WEBHOOK COMPLETE ===")

    return JSONResponse(
        {
            "status": "success",
            "order_number": order.order_number,
            "processing_time_ms": processing_time,
            "whatsapp_sent": outcome.success,
        },
        status_code=200,
    )


def register_webhook_routes(
    app: FastAPI,
    settings: Settings,
    channel: Channel,
    log: logging.Logger | None = None,
) -> None:
    """Register the Shopify webhook route on the FastAPI app."""

    @app.post(ORDERS_CREATE_PATH)
    async def orders_create_webhook(request: Request):
        """Receive Shopify orders/create webhooks (signature-verified)."""
        return await handle_order_created(request, settings, channel, log=log)

    logger.info("Webhook route registered: %s", ORDERS_CREATE_PATH)

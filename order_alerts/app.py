"""FastAPI application: status, health, test message, Shopify webhook.

create_app() takes the frozen Settings explicitly; tests build their own
Settings and channel instead of patching module globals.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from order_alerts import __version__
from order_alerts.channels.protocol import Channel
from order_alerts.channels.whatsapp import WhatsAppChannel
from order_alerts.config import Settings, get_settings
from order_alerts.errors import AuthenticationFailure
from order_alerts.orders.formatter import format_test_message, format_timestamp
from order_alerts.webhooks.handlers import ORDERS_CREATE_PATH, register_webhook_routes

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /health",
    "POST /test",
    f"POST {ORDERS_CREATE_PATH}",
]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_channel(settings: Settings, log: logging.Logger | None = None) -> WhatsAppChannel:
    """WhatsApp channel wired from settings (degraded mode without credentials)."""
    return WhatsAppChannel(
        destination=settings.company_whatsapp,
        credentials=settings.whatsapp_credentials,
        api_base=settings.whatsapp_api_base,
        timeout=settings.whatsapp_timeout_seconds,
        log=log,
    )


def create_app(
    settings: Settings | None = None,
    channel: Channel | None = None,
    log: logging.Logger | None = None,
) -> FastAPI:
    """Build the order alert server.

    Args:
        settings: Frozen configuration (defaults to get_settings())
        channel: Notification channel (defaults to WhatsApp from settings)
        log: Base logger; each component gets a child of it
    """
    settings = settings or get_settings()
    log = log or logger
    channel = channel or build_channel(settings, log=log.getChild("whatsapp"))

    app = FastAPI(title="Order Alerts", version=__version__)
    app.state.settings = settings
    app.state.channel = channel
    app.state.started_at = time.monotonic()

    @app.get("/")
    async def status():
        """Server status and configuration summary."""
        now = _utc_now()
        return {
            "status": "Shopify WhatsApp Webhook Server is running!",
            "timestamp": now.isoformat(),
            "server_time": format_timestamp(now, settings.display_timezone),
            "configuration": {
                "whatsapp_configured": channel.is_configured,
                "webhook_secret_configured": bool(settings.shopify_webhook_secret),
                "company_whatsapp": settings.company_whatsapp,
            },
            "endpoints": {
                "health": "GET /health",
                "test": "POST /test",
                "webhook": f"POST {ORDERS_CREATE_PATH}",
            },
        }

    @app.get("/health")
    async def health():
        """Liveness probe."""
        return {
            "status": "OK",
            "timestamp": _utc_now().isoformat(),
            "uptime": round(time.monotonic() - app.state.started_at, 3),
        }

    @app.post("/test")
    async def send_test_message():
        """Send a synthetic message through the channel."""
        log.info("Test endpoint called")
        message = format_test_message(
            now=_utc_now(),
            timezone_label=settings.display_timezone,
            environment=settings.app_env,
            destination=settings.company_whatsapp,
        )
        outcome = await asyncio.to_thread(channel.deliver, message)
        return {
            "message": "Test completed!",
            "whatsapp_result": outcome.as_dict(),
            "timestamp": _utc_now().isoformat(),
        }

    register_webhook_routes(app, settings, channel, log=log.getChild("webhooks"))

    @app.exception_handler(AuthenticationFailure)
    async def _unauthorized(request: Request, exc: AuthenticationFailure):
        return JSONResponse({"error": exc.message}, status_code=401)

    @app.exception_handler(StarletteHTTPException)
    async def _not_found(request: Request, exc: StarletteHTTPException):
        # Unknown path or method: list what exists instead of a bare 404/405
        if exc.status_code not in (404, 405):
            return await http_exception_handler(request, exc)
        log.warning("404 - Endpoint not found: %s %s", request.method, request.url.path)
        return JSONResponse(
            {
                "error": "Endpoint not found",
                "method": request.method,
                "path": request.url.path,
                "available_endpoints": AVAILABLE_ENDPOINTS,
            },
            status_code=404,
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    return app

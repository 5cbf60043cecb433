"""Run the order alert server: python -m order_alerts"""

from __future__ import annotations

import logging
import sys

import uvicorn

from order_alerts.app import AVAILABLE_ENDPOINTS, create_app
from order_alerts.config import Settings, get_settings
from order_alerts.webhooks.verification import log_auth_mode

logger = logging.getLogger("order_alerts")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Single stdout handler for the whole process, uvicorn included."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )


def _configured(value: object) -> str:
    return "configured" if value else "NOT configured"


def log_startup_banner(settings: Settings, log: logging.Logger | None = None) -> None:
    """Configuration summary; secrets reported as booleans only."""
    log = log or logger
    log.info("Order alert server starting on %s:%d", settings.host, settings.port)
    log.info("Available endpoints: %s", ", ".join(AVAILABLE_ENDPOINTS))
    log.info("WhatsApp API token: %s", _configured(settings.whatsapp_token))
    log.info("WhatsApp phone number id: %s", _configured(settings.phone_number_id))
    log.info("Target WhatsApp: %s", settings.company_whatsapp)
    log.info("Display timezone: %s", settings.display_timezone)
    log_auth_mode(settings.auth_mode, production=settings.is_production, log=log)
    if settings.whatsapp_credentials is None:
        log.warning("WhatsApp delivery disabled: messages will only be logged")


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    log_startup_banner(settings)
    app = create_app(settings, log=logger)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()

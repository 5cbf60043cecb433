"""Order alerts configuration.

Settings are read from the environment (and an optional .env file) once at
startup, frozen, and handed to create_app(). Nothing reads os.environ after
that point.
"""

from __future__ import annotations

import functools
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings

from order_alerts.channels.whatsapp import WhatsAppCredentials
from order_alerts.webhooks.verification import AuthMode, Disabled, Enforced


class Settings(BaseSettings):
    """Environment-driven settings for the order alert server."""

    # WhatsApp Cloud API
    whatsapp_token: str = ""
    phone_number_id: str = ""
    company_whatsapp: str = "9715*******9"
    whatsapp_api_base: str = "https://graph.facebook.com/v18.0"
    whatsapp_timeout_seconds: float = 10.0

    # Shopify
    shopify_webhook_secret: str = ""

    # Message rendering
    display_timezone: str = "Asia/Kolkata"
    store_label: str = "AD Plants Shop"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore", "frozen": True}

    @field_validator("display_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown IANA timezone: {value!r}") from e
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def auth_mode(self) -> AuthMode:
        """Enforced when a webhook secret is configured, Disabled otherwise."""
        if self.shopify_webhook_secret:
            return Enforced(self.shopify_webhook_secret)
        return Disabled()

    @property
    def whatsapp_credentials(self) -> WhatsAppCredentials | None:
        """Credentials only when both token and sender id are present."""
        if self.whatsapp_token and self.phone_number_id:
            return WhatsAppCredentials(
                token=self.whatsapp_token,
                sender_id=self.phone_number_id,
            )
        return None

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build the process-wide settings once."""
    return Settings()

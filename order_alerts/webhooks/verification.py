"""Shopify webhook signature verification: constant-time HMAC.

Security contract:
- Shopify signs the exact request bytes: X-Shopify-Hmac-Sha256 carries the
  base64-encoded HMAC-SHA256 of the raw body. Never verify re-serialized JSON.
- Comparison uses hmac.compare_digest() (constant-time, no timing attacks)
- Malformed or missing header -> verification fails, never raises
- No secret configured -> verification skipped (permissive mode). This is an
  explicit AuthMode chosen at startup and logged loudly, not a silent default.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-shopify-hmac-sha256"


@dataclass(frozen=True)
class Enforced:
    """Signature verification required with the given shared secret."""

    secret: str

    def __repr__(self) -> str:
        return "Enforced(secret=***)"


@dataclass(frozen=True)
class Disabled:
    """Signature verification skipped (no secret configured)."""


AuthMode = Enforced | Disabled


def verify_shopify(
    body: bytes,
    signature_header: str | None,
    secret: str | None,
    log: logging.Logger | None = None,
) -> bool:
    """Verify a Shopify webhook HMAC-SHA256 signature.

    Args:
        body: Raw request body bytes, exactly as received
        signature_header: Value of the X-Shopify-Hmac-Sha256 header
        secret: Shared webhook secret; None or empty skips verification
        log: Logger to report the result on (defaults to this module's)

    Returns:
        True if the signature matches, or if no secret is configured
    """
    log = log or logger

    if not secret:
        log.warning("No webhook secret configured, skipping verification")
        return True

    try:
        if not signature_header:
            raise ValueError("missing signature header")
        received = base64.b64decode(signature_header, validate=True)
        computed = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
        is_valid = hmac.compare_digest(computed, received)
    except (ValueError, TypeError, binascii.Error) as e:
        log.warning("Webhook verification error: %s", e)
        return False

    log.info("Webhook verification: %s", "valid" if is_valid else "invalid")
    return is_valid


def verify_request(
    mode: AuthMode,
    body: bytes,
    signature_header: str | None,
    log: logging.Logger | None = None,
) -> bool:
    """Verify an inbound webhook according to the configured AuthMode."""
    secret = mode.secret if isinstance(mode, Enforced) else None
    return verify_shopify(body, signature_header, secret, log=log)


def log_auth_mode(mode: AuthMode, production: bool, log: logging.Logger | None = None) -> None:
    """Report the verification mode at startup.

    Disabled mode is flagged on every start; in production it is logged as an
    error so operators see it in alerting, but the server still starts.
    """
    log = log or logger
    if isinstance(mode, Enforced):
        log.info("Webhook signature verification: ENFORCED")
        return

    if production:
        log.error(
            "Webhook signature verification DISABLED in production; "
            "set SHOPIFY_WEBHOOK_SECRET to reject unsigned requests"
        )
    else:
        log.warning(
            "Webhook signature verification DISABLED (no SHOPIFY_WEBHOOK_SECRET); "
            "any caller can post orders"
        )

"""Order -> WhatsApp notification text.

Pure functions: no I/O, no clock reads. The same Order, store label and
display timezone always produce the same message.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from order_alerts.orders.models import Order, ShippingAddress

MAX_LISTED_ITEMS = 5
GUEST_NAME = "Guest Customer"
MISSING = "N/A"
NO_SHIPPING = "No shipping address provided"
MORE_ITEMS_NOTICE = "... and more items"
DISPLAY_FORMAT = "%d/%m/%Y %H:%M"

_ORDER_TEMPLATE = """\
🛍️ NEW ORDER ALERT!

📋 Order #{order_number}
👤 Customer: {customer_name}
📧 Email: {email}
📱 Phone: {phone}

💰 Total Amount: {currency} {total}
📦 Total Items: {item_count}

🛒 Items Ordered:
{items}

📍 Shipping Address:
{shipping}

🕒 Order Time: {order_time}
🏪 Store: {store_label}

---
Powered by {store_label} Webhook System"""

_TEST_TEMPLATE = """\
🧪 TEST MESSAGE

This is a test from your Shopify-WhatsApp webhook server!

✅ Server: Running successfully
🕒 Time: {now}
🌐 Environment: {environment}
📱 Target WhatsApp: {destination}

Your webhook is ready to receive Shopify orders! 🛍️"""


def _text(value: Any) -> str:
    """Render an optional field; None becomes an empty string."""
    return "" if value is None else str(value)


def customer_name(order: Order) -> str:
    if order.customer is None:
        return GUEST_NAME
    return order.customer.display_name


def format_items(order: Order) -> str:
    """First MAX_LISTED_ITEMS line items, one per line, plus a truncation notice."""
    currency = _text(order.currency)
    lines = [
        f"• {_text(item.title)} (Qty: {_text(item.quantity)}) - {currency} {_text(item.price)}"
        for item in order.line_items[:MAX_LISTED_ITEMS]
    ]
    if len(order.line_items) > MAX_LISTED_ITEMS:
        lines.append(MORE_ITEMS_NOTICE)
    return "\n".join(lines)


def format_shipping(address: ShippingAddress | None) -> str:
    if address is None:
        return NO_SHIPPING
    return (
        f"{_text(address.address1)}\n"
        f"{_text(address.city)}, {_text(address.province)} {_text(address.zip)}\n"
        f"{_text(address.country)}"
    )


def format_timestamp(value: Any, timezone_label: str) -> str:
    """Render a timestamp as DD/MM/YYYY HH:MM in the given IANA zone.

    Naive timestamps are taken as UTC. Anything unparseable renders as N/A.
    """
    if not isinstance(value, (str, datetime)) or value == "":
        return MISSING
    try:
        if isinstance(value, datetime):
            moment = value
        else:
            text = value.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            moment = datetime.fromisoformat(text)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(ZoneInfo(timezone_label)).strftime(DISPLAY_FORMAT)
    except (ValueError, TypeError, OverflowError, ZoneInfoNotFoundError):
        return MISSING


def format_order_message(order: Order, store_label: str, timezone_label: str) -> str:
    """Build the new-order notification for an Order."""
    return _ORDER_TEMPLATE.format(
        order_number=_text(order.order_number),
        customer_name=customer_name(order),
        email=order.contact_email or MISSING,
        phone=order.contact_phone or MISSING,
        currency=_text(order.currency),
        total=_text(order.total_price),
        item_count=len(order.line_items),
        items=format_items(order),
        shipping=format_shipping(order.shipping_address),
        order_time=format_timestamp(order.created_at, timezone_label),
        store_label=store_label,
    )


def format_test_message(
    now: datetime,
    timezone_label: str,
    environment: str,
    destination: str,
) -> str:
    """Build the synthetic message sent by POST /test."""
    return _TEST_TEMPLATE.format(
        now=format_timestamp(now, timezone_label),
        environment=environment,
        destination=destination,
    )


def summarize_order(order: Order) -> dict[str, Any]:
    """Short order summary for the 'order received' log line."""
    first_name = order.customer.first_name if order.customer else None
    return {
        "order_number": order.order_number,
        "customer": first_name or "Guest",
        "total": f"{_text(order.currency)} {_text(order.total_price)}",
        "items_count": len(order.line_items),
    }

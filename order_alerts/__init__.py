"""Shopify order alerts.

Receives signed orders/create webhooks from Shopify, formats each order as a
WhatsApp message, and relays it to one company number via the WhatsApp Cloud
API. Delivery is best-effort: one attempt per order, logged when WhatsApp is
not configured.
"""

__version__ = "1.0.0"

"""Webhook inbound system.

Receives Shopify orders/create webhooks, verifies the HMAC signature over the
raw body, and hands the order to the notification pipeline.
"""

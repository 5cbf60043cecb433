"""Shopify order payload parsing and message formatting."""

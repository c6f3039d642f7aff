"""Outbound delivery connectors (WhatsApp Cloud API, console)."""

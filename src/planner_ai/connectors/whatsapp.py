# src/planner_ai/connectors/whatsapp.py

from __future__ import annotations

import logging
import re

import httpx

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


class DeliveryError(RuntimeError):
    """The message could not be handed to the delivery transport."""


def digits_only(phone: str | None) -> str:
    return _NON_DIGITS.sub("", phone or "")


class WhatsAppMessenger:
    """
    OutboundMessenger backed by the WhatsApp Cloud API (plain text messages).

    `to` overrides the default recipient; both are reduced to digits.
    """

    def __init__(
        self,
        *,
        phone_number_id: str,
        token: str,
        recipient: str,
        api_version: str = "v21.0",
        base_url: str = "https://graph.facebook.com",
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._phone_number_id = phone_number_id
        self._token = token
        self._recipient = digits_only(recipient)
        self._url = f"{base_url.rstrip('/')}/{api_version}/{phone_number_id}/messages"
        self._timeout = timeout
        self._transport = transport

    async def send_text(self, *, text: str, to: str | None = None) -> None:
        recipient = digits_only(to) if to else self._recipient
        if not recipient:
            raise DeliveryError("No recipient phone number configured.")
        if not self._phone_number_id or not self._token:
            raise DeliveryError("WhatsApp phone number id / token are not configured.")

        payload = {
            "messaging_product": "whatsapp",
            "to": recipient,
            "type": "text",
            "text": {"body": text},
        }
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(self._url, json=payload, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DeliveryError(
                f"WhatsApp API returned {e.response.status_code}: {e.response.text[:300]}"
            ) from e
        except httpx.HTTPError as e:
            raise DeliveryError(f"WhatsApp API request failed: {e}") from e

        try:
            message_ids = [m.get("id") for m in resp.json().get("messages", []) if isinstance(m, dict)]
        except (ValueError, AttributeError):
            message_ids = []
        logger.info("WhatsApp message accepted to=%s ids=%s", recipient, message_ids)

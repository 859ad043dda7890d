"""Generic JSON webhook notifier."""

from __future__ import annotations

import logging

import httpx

from helpline.errors import DeliveryError
from helpline.notify.base import DispatchResult, Notifier, raise_for_delivery

logger = logging.getLogger(__name__)


class WebhookNotifier(Notifier):
    """POSTs ``{"text": ...}`` to a configured URL."""

    channel = "webhook"

    def __init__(self, url: str, timeout: float = 10.0) -> None:
        self._url = url
        self._timeout = timeout

    async def send_text(self, text: str) -> DispatchResult:
        try:
            async with httpx.AsyncClient(verify=True, timeout=self._timeout) as client:
                resp = await client.post(self._url, json={"text": text})
        except httpx.HTTPError as exc:
            raise DeliveryError(f"Webhook request failed: {type(exc).__name__}") from exc

        raise_for_delivery("Webhook", resp)
        logger.info("Alert delivered to webhook")
        return DispatchResult(via=self.channel)

"""Telegram Bot API notifier: text messages and voice-note documents."""

from __future__ import annotations

import logging

import httpx

from helpline.errors import DeliveryError
from helpline.notify.base import Document, DispatchResult, Notifier, raise_for_delivery

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramNotifier(Notifier):
    """Pushes alerts to a single Telegram chat through a bot.

    TLS certificate verification stays enabled. Failures are raised, never
    retried; the bot token is kept out of every error message.
    """

    channel = "telegram"
    supports_documents = True

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        timeout: float = 10.0,
        api_base: str = TELEGRAM_API_BASE,
    ) -> None:
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._timeout = timeout
        self._api_base = api_base.rstrip("/")

    def _url(self, method: str) -> str:
        return f"{self._api_base}/bot{self._bot_token}/{method}"

    async def send_text(self, text: str) -> DispatchResult:
        payload = {"chat_id": self._chat_id, "text": text}
        try:
            async with httpx.AsyncClient(verify=True, timeout=self._timeout) as client:
                resp = await client.post(self._url("sendMessage"), json=payload)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"Telegram request failed: {type(exc).__name__}") from exc

        raise_for_delivery("Telegram", resp)
        logger.info("Alert delivered to Telegram chat %s", self._chat_id)
        return DispatchResult(via=self.channel)

    async def send_document(self, document: Document) -> DispatchResult:
        data = {"chat_id": self._chat_id, "caption": document.caption}
        files = {
            "document": (
                document.filename,
                document.content,
                document.mime_type or "application/octet-stream",
            ),
        }
        try:
            async with httpx.AsyncClient(verify=True, timeout=self._timeout) as client:
                resp = await client.post(self._url("sendDocument"), data=data, files=files)
        except httpx.HTTPError as exc:
            raise DeliveryError(
                f"Telegram file upload request failed: {type(exc).__name__}",
            ) from exc

        raise_for_delivery("Telegram file upload", resp)
        logger.info(
            "Document %s (%d bytes) delivered to Telegram chat %s",
            document.filename, len(document.content), self._chat_id,
        )
        return DispatchResult(via=self.channel)

"""Channel selection: the first configured notifier wins."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from helpline.config import Settings
from helpline.notify.base import Document, DispatchResult, Notifier
from helpline.notify.server_log import ServerLogNotifier
from helpline.notify.telegram import TelegramNotifier
from helpline.notify.webhook import WebhookNotifier

logger = logging.getLogger(__name__)


def build_channels(settings: Settings) -> list[Notifier]:
    """Ranked list of channels whose configuration is present.

    Telegram first, then the webhook, with the server log always last.
    """
    channels: list[Notifier] = []
    if settings.telegram_enabled:
        channels.append(TelegramNotifier(
            bot_token=settings.telegram_bot_token,
            chat_id=settings.telegram_chat_id,
            timeout=settings.outbound_timeout,
        ))
    if settings.notify_webhook_url:
        channels.append(WebhookNotifier(
            url=settings.notify_webhook_url,
            timeout=settings.outbound_timeout,
        ))
    channels.append(ServerLogNotifier())
    return channels


class DispatchRouter:
    """Delivers every alert through exactly one channel.

    Lower-ranked channels are never tried when the active one fails.
    """

    def __init__(self, channels: Sequence[Notifier]) -> None:
        if not channels:
            channels = [ServerLogNotifier()]
        self._channels = list(channels)

    @classmethod
    def from_settings(cls, settings: Settings) -> DispatchRouter:
        router = cls(build_channels(settings))
        logger.info("Alert channel: %s", router.active.channel)
        return router

    @property
    def active(self) -> Notifier:
        return self._channels[0]

    @property
    def supports_documents(self) -> bool:
        return self.active.supports_documents

    async def dispatch_text(self, text: str) -> DispatchResult:
        return await self.active.send_text(text)

    async def dispatch_document(self, document: Document) -> DispatchResult:
        return await self.active.send_document(document)

"""Last-resort notifier that writes alerts to the process log."""

from __future__ import annotations

import logging

from helpline.notify.base import DispatchResult, Notifier

logger = logging.getLogger("helpline.alerts")

SETUP_HINT = "Set TELEGRAM_BOT_TOKEN + TELEGRAM_CHAT_ID for phone push notifications."


class ServerLogNotifier(Notifier):
    channel = "server-log"

    async def send_text(self, text: str) -> DispatchResult:
        logger.warning("[Assistant Alert] %s", text)
        return DispatchResult(via=self.channel, note=SETUP_HINT)

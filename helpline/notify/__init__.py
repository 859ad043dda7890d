"""Delivery channels for helpline alerts.

- Telegram bot (text and documents)
- Generic JSON webhook (text)
- Server log fallback (text)
"""

from helpline.notify.base import Document, DispatchResult, Notifier
from helpline.notify.router import DispatchRouter, build_channels
from helpline.notify.server_log import ServerLogNotifier
from helpline.notify.telegram import TelegramNotifier
from helpline.notify.webhook import WebhookNotifier

__all__ = [
    "DispatchResult",
    "DispatchRouter",
    "Document",
    "Notifier",
    "ServerLogNotifier",
    "TelegramNotifier",
    "WebhookNotifier",
    "build_channels",
]

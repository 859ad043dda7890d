"""Shared test fixtures for helpline-relay."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from helpline.audit.logger import AuditLogger
from helpline.config import Settings
from helpline.errors import DeliveryError
from helpline.notify.base import Document, DispatchResult, Notifier


class RecordingNotifier(Notifier):
    """In-memory channel that records what it was asked to deliver."""

    def __init__(
        self,
        channel: str = "telegram",
        supports_documents: bool = True,
        fail_with: DeliveryError | None = None,
    ) -> None:
        self.channel = channel
        self.supports_documents = supports_documents
        self.fail_with = fail_with
        self.texts: list[str] = []
        self.documents: list[Document] = []

    async def send_text(self, text: str) -> DispatchResult:
        if self.fail_with:
            raise self.fail_with
        self.texts.append(text)
        return DispatchResult(via=self.channel)

    async def send_document(self, document: Document) -> DispatchResult:
        if not self.supports_documents:
            return await super().send_document(document)
        if self.fail_with:
            raise self.fail_with
        self.documents.append(document)
        return DispatchResult(via=self.channel)


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """Factory for Settings rooted in a temporary public directory."""

    def _make(**kwargs: Any) -> Settings:
        defaults: dict[str, Any] = {
            "public_dir": tmp_path / "public",
        }
        defaults.update(kwargs)
        return Settings(**defaults)

    return _make


@pytest.fixture
def telegram_notifier() -> RecordingNotifier:
    return RecordingNotifier(channel="telegram", supports_documents=True)


@pytest.fixture
def webhook_notifier() -> RecordingNotifier:
    return RecordingNotifier(channel="webhook", supports_documents=False)


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)

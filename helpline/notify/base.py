"""Notifier capability interface shared by every delivery channel."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from helpline.errors import DeliveryError

# Characters of a failed downstream response kept in the error message.
ERROR_BODY_LIMIT = 300


@dataclass(frozen=True)
class Document:
    """Binary attachment for channels that can carry files."""

    content: bytes
    filename: str
    mime_type: str
    caption: str = ""


@dataclass
class DispatchResult:
    via: str
    note: str | None = None

    def as_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"via": self.via}
        if self.note is not None:
            body["note"] = self.note
        return body


class Notifier(ABC):
    """One delivery channel.

    Every channel can send text. Channels that can also carry a binary
    document set ``supports_documents`` and override ``send_document``.
    """

    channel: str
    supports_documents: bool = False

    @abstractmethod
    async def send_text(self, text: str) -> DispatchResult:
        """Deliver a text alert or raise DeliveryError."""
        ...

    async def send_document(self, document: Document) -> DispatchResult:
        raise DeliveryError(f"{self.channel} cannot deliver documents")


def raise_for_delivery(label: str, resp: httpx.Response) -> None:
    """Raise DeliveryError for any non-success downstream response."""
    if resp.is_success:
        return
    body = resp.text[:ERROR_BODY_LIMIT]
    raise DeliveryError(
        f"{label} failed: {resp.status_code} {body}".rstrip(),
        status_code=resp.status_code,
    )

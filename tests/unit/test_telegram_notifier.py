"""Tests for the Telegram notifier."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from helpline.errors import DeliveryError
from helpline.notify.base import Document
from helpline.notify.telegram import TelegramNotifier

BOT_TOKEN = "123:ABC"


def _mock_client(mock_client_cls: AsyncMock, **post_kwargs: object) -> AsyncMock:
    mock_client = AsyncMock()
    for key, value in post_kwargs.items():
        setattr(mock_client.post, key, value)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = mock_client
    return mock_client


class TestTelegramSendText:
    @pytest.mark.asyncio
    async def test_posts_send_message_with_tls_verification(self) -> None:
        notifier = TelegramNotifier(bot_token=BOT_TOKEN, chat_id="42", timeout=5.0)

        with patch("helpline.notify.telegram.httpx.AsyncClient") as mock_client_cls:
            mock_client = _mock_client(
                mock_client_cls, return_value=httpx.Response(200, json={"ok": True}),
            )
            result = await notifier.send_text("help")

        mock_client_cls.assert_called_once_with(verify=True, timeout=5.0)
        url = mock_client.post.call_args[0][0]
        assert url == f"https://api.telegram.org/bot{BOT_TOKEN}/sendMessage"
        assert mock_client.post.call_args[1]["json"] == {"chat_id": "42", "text": "help"}
        assert result.via == "telegram"
        assert result.note is None

    @pytest.mark.asyncio
    async def test_non_success_raises_with_truncated_body(self) -> None:
        notifier = TelegramNotifier(bot_token=BOT_TOKEN, chat_id="42")

        with patch("helpline.notify.telegram.httpx.AsyncClient") as mock_client_cls:
            _mock_client(mock_client_cls, return_value=httpx.Response(400, text="E" * 1000))
            with pytest.raises(DeliveryError) as exc_info:
                await notifier.send_text("help")

        err = exc_info.value
        assert err.upstream_status == 400
        assert err.message.startswith("Telegram failed: 400 ")
        assert err.message.count("E") == 300

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self) -> None:
        notifier = TelegramNotifier(bot_token=BOT_TOKEN, chat_id="42")

        with patch("helpline.notify.telegram.httpx.AsyncClient") as mock_client_cls:
            mock_client = _mock_client(mock_client_cls, return_value=httpx.Response(503))
            with pytest.raises(DeliveryError):
                await notifier.send_text("help")

        assert mock_client.post.call_count == 1

    @pytest.mark.asyncio
    async def test_timeout_becomes_delivery_error_without_token(self) -> None:
        notifier = TelegramNotifier(bot_token=BOT_TOKEN, chat_id="42")

        with patch("helpline.notify.telegram.httpx.AsyncClient") as mock_client_cls:
            _mock_client(mock_client_cls, side_effect=httpx.ReadTimeout("timed out"))
            with pytest.raises(DeliveryError) as exc_info:
                await notifier.send_text("help")

        assert "ReadTimeout" in exc_info.value.message
        assert BOT_TOKEN not in exc_info.value.message


class TestTelegramSendDocument:
    @pytest.mark.asyncio
    async def test_uploads_multipart_document(self) -> None:
        notifier = TelegramNotifier(bot_token=BOT_TOKEN, chat_id="42")
        document = Document(
            content=b"audio",
            filename="voice-note-1.ogg",
            mime_type="audio/ogg",
            caption="Voice note from Ana",
        )

        with patch("helpline.notify.telegram.httpx.AsyncClient") as mock_client_cls:
            mock_client = _mock_client(mock_client_cls, return_value=httpx.Response(200))
            result = await notifier.send_document(document)

        args, kwargs = mock_client.post.call_args
        assert args[0].endswith("/sendDocument")
        assert kwargs["data"] == {"chat_id": "42", "caption": "Voice note from Ana"}
        assert kwargs["files"]["document"] == ("voice-note-1.ogg", b"audio", "audio/ogg")
        assert result.via == "telegram"

    @pytest.mark.asyncio
    async def test_missing_mime_type_falls_back_to_octet_stream(self) -> None:
        notifier = TelegramNotifier(bot_token=BOT_TOKEN, chat_id="42")
        document = Document(content=b"a", filename="f.webm", mime_type="")

        with patch("helpline.notify.telegram.httpx.AsyncClient") as mock_client_cls:
            mock_client = _mock_client(mock_client_cls, return_value=httpx.Response(200))
            await notifier.send_document(document)

        assert mock_client.post.call_args[1]["files"]["document"][2] == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_upload_failure_raises(self) -> None:
        notifier = TelegramNotifier(bot_token=BOT_TOKEN, chat_id="42")
        document = Document(content=b"a", filename="f.webm", mime_type="audio/webm")

        with patch("helpline.notify.telegram.httpx.AsyncClient") as mock_client_cls:
            _mock_client(mock_client_cls, return_value=httpx.Response(413, text="too big"))
            with pytest.raises(DeliveryError, match="Telegram file upload failed: 413 too big"):
                await notifier.send_document(document)

    def test_supports_documents(self) -> None:
        assert TelegramNotifier(bot_token=BOT_TOKEN, chat_id="42").supports_documents is True

"""Tests for the helpline CLI."""

from __future__ import annotations

import json
import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from helpline.cli import cli
from helpline.errors import DeliveryError
from helpline.notify.base import DispatchResult
from helpline.notify.webhook import WebhookNotifier

_CONFIG_VARS = (
    "APP_SECRET", "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID", "NOTIFY_WEBHOOK_URL",
    "HOST", "PORT", "LOG_LEVEL", "AUDIT_LOG_PATH",
)


@pytest.fixture(autouse=True)
def _isolated_env() -> Iterator[None]:
    """The CLI loads .env files straight into os.environ; undo that after each test."""
    with patch.dict(os.environ):
        for var in _CONFIG_VARS:
            os.environ.pop(var, None)
        yield


def _write_env(tmp_path: Path, content: str) -> str:
    env_file = tmp_path / ".env"
    env_file.write_text(content)
    return str(env_file)


def test_notify_without_channels_uses_server_log(tmp_path: Path) -> None:
    env_file = _write_env(tmp_path, "LOG_LEVEL=WARNING\n")
    runner = CliRunner()
    result = runner.invoke(cli, ["--env-file", env_file, "notify", "hello"])

    assert result.exit_code == 0
    body = json.loads(result.output.strip().splitlines()[-1])
    assert body["ok"] is True
    assert body["via"] == "server-log"


def test_notify_uses_webhook_from_env_file(tmp_path: Path) -> None:
    env_file = _write_env(tmp_path, "NOTIFY_WEBHOOK_URL=https://hooks.example.com\n")
    runner = CliRunner()
    with patch.object(WebhookNotifier, "send_text", new_callable=AsyncMock) as send:
        send.return_value = DispatchResult(via="webhook")
        result = runner.invoke(cli, ["--env-file", env_file, "notify", "hello"])

    assert result.exit_code == 0
    send.assert_awaited_once_with("hello")
    assert json.loads(result.output.strip().splitlines()[-1])["via"] == "webhook"


def test_notify_delivery_failure_exits_nonzero(tmp_path: Path) -> None:
    env_file = _write_env(tmp_path, "NOTIFY_WEBHOOK_URL=https://hooks.example.com\n")
    runner = CliRunner()
    with patch.object(
        WebhookNotifier, "send_text", new_callable=AsyncMock,
        side_effect=DeliveryError("Webhook failed: 500"),
    ):
        result = runner.invoke(cli, ["--env-file", env_file, "notify", "hello"])

    assert result.exit_code == 1
    assert "Delivery failed" in result.output


def test_serve_runs_uvicorn(tmp_path: Path) -> None:
    env_file = _write_env(tmp_path, "")
    runner = CliRunner()
    with patch("helpline.cli.uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["--env-file", env_file, "serve", "--port", "8123"])

    assert result.exit_code == 0
    kwargs = mock_run.call_args[1]
    assert kwargs["port"] == 8123
    assert kwargs["host"] == "0.0.0.0"


@pytest.mark.parametrize(("env_level", "uvicorn_level"), [
    ("WARN", "warning"),
    ("debug", "debug"),
    ("VERBOSE", "info"),
])
def test_serve_passes_valid_uvicorn_log_level(
    tmp_path: Path, env_level: str, uvicorn_level: str,
) -> None:
    env_file = _write_env(tmp_path, f"LOG_LEVEL={env_level}\n")
    runner = CliRunner()
    with patch("helpline.cli.uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["--env-file", env_file, "serve"])

    assert result.exit_code == 0
    assert mock_run.call_args[1]["log_level"] == uvicorn_level

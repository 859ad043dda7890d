"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Value shipped in the example .env; treated as "no secret configured".
PLACEHOLDER_SECRET = "change-this-secret"

_DEFAULT_TIMEOUT_SECONDS = 10.0


def load_env_file(env_file: str | None = None) -> None:
    """Load a .env file into the process environment, overriding existing values."""
    load_dotenv(dotenv_path=env_file, override=True)


@dataclass(frozen=True)
class Settings:
    app_secret: str = ""
    notify_webhook_url: str = ""
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    host: str = "0.0.0.0"
    port: int = 3000
    public_dir: Path = field(default_factory=lambda: Path("public"))
    photos_dir: Path | None = None
    outbound_timeout: float = _DEFAULT_TIMEOUT_SECONDS
    audit_log_path: str | None = None
    log_level: str = "INFO"

    @property
    def resolved_photos_dir(self) -> Path:
        return self.photos_dir if self.photos_dir is not None else self.public_dir / "photos"

    @property
    def telegram_enabled(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        raw_secret = env.get("APP_SECRET", "").strip()
        photos_dir = env.get("PHOTOS_DIR", "").strip()
        return cls(
            app_secret="" if raw_secret == PLACEHOLDER_SECRET else raw_secret,
            notify_webhook_url=env.get("NOTIFY_WEBHOOK_URL", "").strip(),
            telegram_bot_token=env.get("TELEGRAM_BOT_TOKEN", "").strip(),
            telegram_chat_id=env.get("TELEGRAM_CHAT_ID", "").strip(),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", "3000")),
            public_dir=Path(env.get("PUBLIC_DIR", "public")),
            photos_dir=Path(photos_dir) if photos_dir else None,
            outbound_timeout=float(
                env.get("OUTBOUND_TIMEOUT_SECONDS", str(_DEFAULT_TIMEOUT_SECONDS)),
            ),
            audit_log_path=env.get("AUDIT_LOG_PATH") or None,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def secrets(self) -> list[str]:
        """Configured values that must never be echoed back to a caller.

        Only the bot token can end up in a delivery error; the app secret is
        never sent downstream.
        """
        return [self.telegram_bot_token] if self.telegram_bot_token else []

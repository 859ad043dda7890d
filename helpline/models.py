"""Shared Pydantic data models for helpline-relay."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class EventType(str, Enum):
    CALL = "call"
    MOOD = "mood"
    VOICE = "voice"


class AuditEventType(str, Enum):
    AUTH_FAILURE = "auth_failure"
    RATE_LIMITED = "rate_limited"
    ALERT_DISPATCHED = "alert_dispatched"
    DELIVERY_FAILED = "delivery_failed"


# --- Request Models ---


class _AlertRequest(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    name: str | None = None


class CallRequest(_AlertRequest):
    message: str | None = None


class MoodRequest(_AlertRequest):
    mood: str | None = None
    mood_message: str | None = Field(default=None, alias="moodMessage")


class VoiceNoteRequest(_AlertRequest):
    # audioBase64 is read raw by decode_audio so a non-string counts as missing.
    mime_type: str | None = Field(default=None, alias="mimeType")


# --- Mood Table Entry ---


class Mood(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    emoji: str
    default_message: str


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    source_ip: str | None = None
    action: str
    result: str  # "success" | "failure" | "blocked"
    details: dict[str, object] | None = None

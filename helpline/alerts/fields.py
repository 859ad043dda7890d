"""Normalization of caller-supplied fields and voice payloads."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Any

from helpline.errors import PayloadTooLargeError, ValidationError

NAME_MAX_LENGTH = 50
CALL_MESSAGE_MAX_LENGTH = 180
MOOD_MESSAGE_MAX_LENGTH = 220
MIME_TYPE_MAX_LENGTH = 80

MAX_VOICE_NOTE_BYTES = 12 * 1024 * 1024
DEFAULT_AUDIO_MIME_TYPE = "audio/webm"

_DATA_URL_PREFIX = re.compile(r"^data:[^,]*;base64,", re.IGNORECASE)
_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")
_URL_SAFE = str.maketrans("-_", "+/")

# Checked in order; a later match overrides an earlier one.
_EXTENSION_HINTS: tuple[tuple[str, str], ...] = (
    ("ogg", "ogg"),
    ("mpeg", "mp3"),
    ("mp3", "mp3"),
    ("mp4", "m4a"),
    ("m4a", "m4a"),
)


def safe_text(value: Any, fallback: str, max_length: int) -> str:
    """Coerce to text, fall back when blank, trim, then truncate.

    Truncation happens after trimming, so the result never exceeds
    ``max_length`` and never carries surrounding whitespace.
    """
    text = str(value).strip() if value else ""
    if not text:
        text = fallback.strip()
    return text[:max_length]


def decode_audio(audio_base64: Any) -> bytes:
    """Decode a base64 (optionally data-URL) audio field and enforce size limits."""
    if not audio_base64 or not isinstance(audio_base64, str):
        raise ValidationError("Missing recorded audio.")

    encoded = _DATA_URL_PREFIX.sub("", audio_base64.strip(), count=1)
    try:
        audio = base64.b64decode(_normalize_base64(encoded))
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Invalid audio payload.") from exc

    if not audio:
        raise ValidationError("Invalid audio payload.")
    if len(audio) > MAX_VOICE_NOTE_BYTES:
        raise PayloadTooLargeError("Voice note is too large. Keep it under 12 MB.")
    return audio


def _normalize_base64(encoded: str) -> str:
    """Lenient base64: accept the URL-safe alphabet, skip stray characters, fix padding.

    Decoding stops at the first "=". A single dangling character carries
    no full byte and is dropped.
    """
    cleaned = _NON_BASE64.sub("", encoded.split("=", 1)[0].translate(_URL_SAFE))
    if len(cleaned) % 4 == 1:
        cleaned = cleaned[:-1]
    return cleaned + "=" * (-len(cleaned) % 4)


def extension_for(mime_type: str) -> str:
    ext = "webm"
    lowered = mime_type.lower()
    for hint, candidate in _EXTENSION_HINTS:
        if hint in lowered:
            ext = candidate
    return ext


def voice_note_filename(mime_type: str, timestamp_ms: int) -> str:
    return f"voice-note-{timestamp_ms}.{extension_for(mime_type)}"

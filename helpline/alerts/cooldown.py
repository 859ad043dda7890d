"""In-memory per-event-type cooldown for alert endpoints."""

from __future__ import annotations

import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass

from helpline.models import EventType

DEFAULT_COOLDOWNS_MS: dict[str, int] = {
    EventType.CALL.value: 10_000,
    EventType.MOOD.value: 3_000,
    EventType.VOICE.value: 5_000,
}


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CooldownDecision:
    allowed: bool
    retry_after_ms: int = 0


class CooldownRegistry:
    """Last-event debounce per event type.

    Each type remembers when its last request was accepted. A new request is
    accepted only once the type's cooldown has fully elapsed; rejected requests
    leave the stored timestamp untouched. The registry is global per type, not
    per caller.
    """

    def __init__(self, cooldowns_ms: Mapping[str, int] | None = None) -> None:
        self._cooldowns_ms = dict(DEFAULT_COOLDOWNS_MS if cooldowns_ms is None else cooldowns_ms)
        self._last_accepted: dict[str, int] = {t: 0 for t in self._cooldowns_ms}
        self._lock = threading.Lock()

    def cooldown_ms(self, event_type: str | EventType) -> int:
        return self._cooldowns_ms.get(_key(event_type), 0)

    def last_accepted(self, event_type: str | EventType) -> int:
        """Timestamp (ms) of the last accepted event, 0 if it never fired."""
        return self._last_accepted.get(_key(event_type), 0)

    def check(self, event_type: str | EventType) -> CooldownDecision:
        """Accept and record the event, or report how long to wait."""
        key = _key(event_type)
        with self._lock:
            now = now_ms()
            wait_ms = self._cooldowns_ms.get(key, 0)
            last_at = self._last_accepted.get(key, 0)
            elapsed = now - last_at

            if elapsed < wait_ms:
                return CooldownDecision(allowed=False, retry_after_ms=wait_ms - elapsed)

            self._last_accepted[key] = max(last_at, now)
            return CooldownDecision(allowed=True)

    def reset(self) -> None:
        with self._lock:
            for key in self._last_accepted:
                self._last_accepted[key] = 0


def _key(event_type: str | EventType) -> str:
    return event_type.value if isinstance(event_type, EventType) else event_type

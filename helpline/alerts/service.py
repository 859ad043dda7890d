"""Alert relay pipeline.

Every handler runs the same stages:
1. Authorize (shared secret)
2. Cooldown check for the event type
3. Validate and normalize type-specific fields
4. Build the alert text (or voice document)
5. Dispatch through the active channel
"""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from helpline.alerts.cooldown import CooldownRegistry, now_ms
from helpline.alerts.fields import (
    CALL_MESSAGE_MAX_LENGTH,
    DEFAULT_AUDIO_MIME_TYPE,
    MIME_TYPE_MAX_LENGTH,
    MOOD_MESSAGE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    decode_audio,
    safe_text,
    voice_note_filename,
)
from helpline.alerts.moods import resolve_mood
from helpline.errors import (
    AuthorizationError,
    DeliveryError,
    RateLimitError,
    ValidationError,
)
from helpline.models import (
    AuditEvent,
    AuditEventType,
    CallRequest,
    EventType,
    MoodRequest,
    VoiceNoteRequest,
)
from helpline.notify.base import Document, DispatchResult

if TYPE_CHECKING:
    from helpline.audit.logger import AuditLogger
    from helpline.notify.router import DispatchRouter

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

CALL_DEFAULT_NAME = "Her"
CALL_DEFAULT_MESSAGE = "Needs your help right now."
CHECKIN_DEFAULT_NAME = "Bhaviiii"


def is_authorized(configured_secret: str, supplied_secret: object) -> bool:
    """Allow everything when no secret is configured, else require an exact match."""
    if not configured_secret:
        return True
    if not isinstance(supplied_secret, str):
        return False
    return hmac.compare_digest(supplied_secret.encode(), configured_secret.encode())


class AlertRelayService:
    """Owns the cooldown registry and turns raw request bodies into deliveries."""

    def __init__(
        self,
        router: DispatchRouter,
        secret: str = "",
        cooldowns: CooldownRegistry | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self.router = router
        self.cooldowns = cooldowns if cooldowns is not None else CooldownRegistry()
        self._secret = secret
        self._audit = audit_logger

    # --- Handlers ---

    async def call_assistant(
        self, payload: dict[str, Any], source_ip: str | None = None,
    ) -> DispatchResult:
        self._admit(EventType.CALL, payload, source_ip)
        req = _parse(CallRequest, payload)

        name = safe_text(req.name, CALL_DEFAULT_NAME, NAME_MAX_LENGTH)
        message = safe_text(req.message, CALL_DEFAULT_MESSAGE, CALL_MESSAGE_MAX_LENGTH)
        text = f"Assistant Alert: {name} pressed the help button. Message: {message}"
        return await self._deliver_text(EventType.CALL, text, source_ip)

    async def mood_checkin(
        self, payload: dict[str, Any], source_ip: str | None = None,
    ) -> DispatchResult:
        self._admit(EventType.MOOD, payload, source_ip)
        req = _parse(MoodRequest, payload)

        mood = resolve_mood(req.mood)
        name = safe_text(req.name, CHECKIN_DEFAULT_NAME, NAME_MAX_LENGTH)
        message = safe_text(req.mood_message, mood.default_message, MOOD_MESSAGE_MAX_LENGTH)
        text = (
            f"Mood Check-in: {name} is feeling {mood.label} {mood.emoji}. "
            f"Message: {message}"
        )
        return await self._deliver_text(EventType.MOOD, text, source_ip)

    async def voice_note(
        self, payload: dict[str, Any], source_ip: str | None = None,
    ) -> DispatchResult:
        self._admit(EventType.VOICE, payload, source_ip)
        req = _parse(VoiceNoteRequest, payload)

        audio = decode_audio(payload.get("audioBase64"))
        name = safe_text(req.name, CHECKIN_DEFAULT_NAME, NAME_MAX_LENGTH)
        mime_type = safe_text(
            req.mime_type, DEFAULT_AUDIO_MIME_TYPE, MIME_TYPE_MAX_LENGTH,
        ).lower()

        if not self.router.supports_documents:
            text = (
                f"Voice note received from {name}, but Telegram is not "
                "configured for audio delivery."
            )
            return await self._deliver_text(EventType.VOICE, text, source_ip)

        document = Document(
            content=audio,
            filename=voice_note_filename(mime_type, now_ms()),
            mime_type=mime_type,
            caption=f"Voice note from {name}",
        )
        try:
            result = await self.router.dispatch_document(document)
        except DeliveryError as exc:
            self._record_delivery_failure(EventType.VOICE, exc, source_ip)
            raise
        self._record_dispatch(EventType.VOICE, result, source_ip)
        return result

    # --- Shared stages ---

    def _admit(
        self, event_type: EventType, payload: dict[str, Any], source_ip: str | None,
    ) -> None:
        """Authorize, then consume the cooldown slot for this event type."""
        if not is_authorized(self._secret, payload.get("secret")):
            logger.warning("Rejected unauthorized %s request from %s", event_type.value, source_ip)
            self._log(AuditEventType.AUTH_FAILURE, event_type, "failure", source_ip)
            raise AuthorizationError()

        decision = self.cooldowns.check(event_type)
        if not decision.allowed:
            logger.info(
                "Rate limited %s request, retry after %d ms",
                event_type.value, decision.retry_after_ms,
            )
            self._log(
                AuditEventType.RATE_LIMITED, event_type, "blocked", source_ip,
                {"retry_after_ms": decision.retry_after_ms},
            )
            raise RateLimitError(decision.retry_after_ms)

    async def _deliver_text(
        self, event_type: EventType, text: str, source_ip: str | None,
    ) -> DispatchResult:
        try:
            result = await self.router.dispatch_text(text)
        except DeliveryError as exc:
            self._record_delivery_failure(event_type, exc, source_ip)
            raise
        self._record_dispatch(event_type, result, source_ip)
        return result

    def _record_dispatch(
        self, event_type: EventType, result: DispatchResult, source_ip: str | None,
    ) -> None:
        self._log(
            AuditEventType.ALERT_DISPATCHED, event_type, "success", source_ip,
            {"via": result.via},
        )

    def _record_delivery_failure(
        self, event_type: EventType, exc: DeliveryError, source_ip: str | None,
    ) -> None:
        logger.error("Delivery of %s alert failed: %s", event_type.value, exc.message)
        self._log(
            AuditEventType.DELIVERY_FAILED, event_type, "failure", source_ip,
            {"via": self.router.active.channel, "upstream_status": exc.upstream_status},
        )

    def _log(
        self,
        audit_type: AuditEventType,
        event_type: EventType,
        result: str,
        source_ip: str | None,
        details: dict[str, object] | None = None,
    ) -> None:
        if self._audit:
            self._audit.log(AuditEvent(
                event_type=audit_type,
                source_ip=source_ip,
                action=event_type.value,
                result=result,
                details=details,
            ))


def _parse(model: type[M], payload: dict[str, Any]) -> M:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise ValidationError(f"Invalid field(s): {', '.join(fields)}.") from exc

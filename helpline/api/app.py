"""FastAPI application exposing the alert relay endpoints."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from helpline.alerts.cooldown import CooldownRegistry
from helpline.alerts.service import AlertRelayService
from helpline.api.photos import list_photos
from helpline.audit.logger import AuditLogger
from helpline.config import Settings, load_env_file
from helpline.errors import PayloadTooLargeError, RelayError
from helpline.notify.base import DispatchResult
from helpline.notify.router import DispatchRouter

logger = logging.getLogger(__name__)

_DETAIL_LIMIT = 300

MAX_BODY_BYTES = 25 * 1024 * 1024

Operation = Callable[[dict[str, Any], str | None], Awaitable[DispatchResult]]


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from .env and the environment."""
    load_env_file()
    return create_app(Settings.from_env())


def create_app(
    settings: Settings,
    router: DispatchRouter | None = None,
    cooldowns: CooldownRegistry | None = None,
    audit_logger: AuditLogger | None = None,
) -> FastAPI:
    """Create the relay app. Collaborators default to ones built from settings."""
    app = FastAPI(docs_url=None, redoc_url=None)

    if audit_logger is None and settings.audit_log_path:
        audit_logger = AuditLogger(settings.audit_log_path)
    service = AlertRelayService(
        router=router if router is not None else DispatchRouter.from_settings(settings),
        secret=settings.app_secret,
        cooldowns=cooldowns,
        audit_logger=audit_logger,
    )
    app.state.service = service
    app.state.settings = settings
    redact = _redactor(settings.secrets())
    photos_dir = settings.resolved_photos_dir

    async def handle(request: Request, operation: Operation) -> JSONResponse:
        source_ip = request.client.host if request.client else None
        try:
            payload = await _read_payload(request)
            result = await operation(payload, source_ip)
        except RelayError as exc:
            body = exc.to_body()
            if "details" in body:
                body["details"] = redact(exc.message)
            return JSONResponse(body, status_code=exc.status_code)
        except Exception as exc:
            logger.exception("Unexpected error handling %s", request.url.path)
            return JSONResponse(
                {
                    "ok": False,
                    "error": "Unexpected server error",
                    "details": redact(str(exc) or type(exc).__name__),
                },
                status_code=500,
            )
        return JSONResponse({"ok": True, **result.as_dict()})

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/photos")
    async def photos() -> dict[str, Any]:
        return {"ok": True, "photos": list_photos(photos_dir)}

    @app.post("/api/call-assistant")
    async def call_assistant(request: Request) -> JSONResponse:
        return await handle(request, service.call_assistant)

    @app.post("/api/mood-checkin")
    async def mood_checkin(request: Request) -> JSONResponse:
        return await handle(request, service.mood_checkin)

    @app.post("/api/voice-note")
    async def voice_note(request: Request) -> JSONResponse:
        return await handle(request, service.voice_note)

    # Static front-end last so API routes take precedence.
    if photos_dir.is_dir():
        app.mount("/photos", StaticFiles(directory=photos_dir), name="photos")
    if settings.public_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")

    return app


async def _read_payload(request: Request) -> dict[str, Any]:
    """Parse the JSON body; anything that is not a JSON object counts as empty.

    Bodies over MAX_BODY_BYTES are rejected without buffering the rest.
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > MAX_BODY_BYTES:
        raise PayloadTooLargeError("Request body is too large.")

    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > MAX_BODY_BYTES:
            raise PayloadTooLargeError("Request body is too large.")
        chunks.append(chunk)
    body = b"".join(chunks)
    if not body:
        return {}
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _redactor(secrets: list[str]) -> Callable[[str], str]:
    def redact(text: str) -> str:
        for secret in secrets:
            text = text.replace(secret, "***")
        return text[:_DETAIL_LIMIT]

    return redact

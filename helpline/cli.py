"""Click CLI for running the relay and sending test alerts."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click
import uvicorn

from helpline.api.app import create_app
from helpline.config import Settings, load_env_file
from helpline.errors import DeliveryError
from helpline.notify.router import DispatchRouter


def _log_level(name: str) -> int:
    level = getattr(logging, name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_log_level(level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option("--env-file", default=None, help="Path to a .env file (default: ./.env).")
@click.pass_context
def cli(ctx: click.Context, env_file: str | None) -> None:
    """Helpline alert relay."""
    ctx.ensure_object(dict)
    load_env_file(env_file)
    settings = Settings.from_env()
    _configure_logging(settings.log_level)
    ctx.obj["settings"] = settings


@cli.command()
@click.option("--host", default=None, help="Bind address (default: HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: PORT or 3000).")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Run the HTTP server."""
    settings: Settings = ctx.obj["settings"]
    app = create_app(settings)
    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        log_level=logging.getLevelName(_log_level(settings.log_level)).lower(),
    )


@cli.command()
@click.argument("text")
@click.pass_context
def notify(ctx: click.Context, text: str) -> None:
    """Send TEXT through the configured alert channel."""
    settings: Settings = ctx.obj["settings"]
    router = DispatchRouter.from_settings(settings)
    try:
        result = asyncio.run(router.dispatch_text(text))
    except DeliveryError as exc:
        click.echo(f"Delivery failed: {exc.message}", err=True)
        sys.exit(1)
    click.echo(json.dumps({"ok": True, **result.as_dict()}))

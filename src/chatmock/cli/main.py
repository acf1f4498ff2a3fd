"""chatmock CLI — run the mock platform and poke it from a terminal.

Usage:
    chatmock serve                               # http :3000, eventsub :8080
    chatmock serve --cert cert.pem --key key.pem # ...plus https :3443
    chatmock say "pong"                          # Post a reply as the bot
    chatmock status                              # Connected browsers/bots
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from typing import Optional

import click
import httpx
import structlog

from chatmock import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_URL = "http://localhost:3000"


def _base_url(url: Optional[str]) -> str:
    return (url or os.environ.get("CHATMOCK_URL", DEFAULT_URL)).rstrip("/")


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="chatmock")
def main():
    """chatmock — a local chat platform for bot development."""


@main.command()
@click.option("--host", help="Bind address (CHATMOCK_HOST)")
@click.option("--port", type=int, help="Plain HTTP/WS port (CHATMOCK_HTTP_PORT)")
@click.option("--https-port", type=int, help="TLS port (CHATMOCK_HTTPS_PORT)")
@click.option("--eventsub-port", type=int, help="Dedicated EventSub port, 0 to disable")
@click.option("--cert", type=click.Path(exists=True, dir_okay=False), help="TLS certificate (PEM)")
@click.option("--key", type=click.Path(exists=True, dir_okay=False), help="TLS private key (PEM)")
def serve(host: Optional[str], port: Optional[int], https_port: Optional[int],
          eventsub_port: Optional[int], cert: Optional[str], key: Optional[str]):
    """Start the mock API, the EventSub socket and the chat page."""
    from chatmock.config import Settings, settings
    from chatmock.main import create_app
    from chatmock.server import serve as run_servers

    overrides = {
        "host": host,
        "http_port": port,
        "https_port": https_port,
        "eventsub_port": eventsub_port,
        "ssl_certfile": cert,
        "ssl_keyfile": key,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        cfg = Settings(**{**settings.model_dump(), **overrides})
    except ValueError as e:
        _fail(str(e))

    _configure_logging(cfg.log_level)
    app = create_app(cfg)
    try:
        asyncio.run(run_servers(app, cfg))
    except KeyboardInterrupt:
        pass


@main.command()
@click.argument("text")
@click.option("--url", help=f"Server base URL (default {DEFAULT_URL} or CHATMOCK_URL)")
def say(text: str, url: Optional[str]):
    """Post TEXT to the chat as the bot, exactly like a bot reply would."""
    try:
        r = httpx.post(
            f"{_base_url(url)}/mock/helix/chat/messages",
            json={"message": text},
            timeout=10.0,
        )
        r.raise_for_status()
    except httpx.HTTPError as e:
        _fail(f"could not reach chatmock: {e}")
    sent = r.json()["data"][0]
    click.secho(f"Sent ({sent['message_id']})", fg="green")


@main.command()
@click.option("--url", help=f"Server base URL (default {DEFAULT_URL} or CHATMOCK_URL)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def status(url: Optional[str], as_json: bool):
    """Show connected browsers and bots per listener."""
    try:
        r = httpx.get(f"{_base_url(url)}/health", timeout=10.0)
        r.raise_for_status()
    except httpx.HTTPError as e:
        _fail(f"could not reach chatmock: {e}")
    data = r.json()
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return
    click.secho(f"chatmock {data['version']} — {data['status']}", bold=True)
    for role, endpoints in data["sessions"].items():
        counts = ", ".join(f"{ep}: {n}" for ep, n in endpoints.items())
        click.echo(f"  {role:<8} {counts}")


if __name__ == "__main__":
    main()

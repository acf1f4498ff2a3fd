"""Multi-listener runner — one app, several ports.

Learn: The plain listener, the TLS listener and the dedicated EventSub port
are separate uvicorn servers sharing a single FastAPI app (and so a single
RelayCoordinator). A browser on https and a bot on the EventSub port land
in the same registry. Only the first server runs the app lifespan.

When any server stops (signal, crash) the rest are asked to stop too.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI

from chatmock.config import Settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class Listener:
    name: str
    port: int
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None

    @property
    def scheme(self) -> str:
        return "https" if self.ssl_certfile else "http"


def plan_listeners(cfg: Settings) -> list[Listener]:
    """Which ports to open for a given configuration."""
    listeners = [Listener("http", cfg.http_port)]
    if cfg.tls_enabled:
        listeners.append(
            Listener("https", cfg.https_port, cfg.ssl_certfile, cfg.ssl_keyfile)
        )
    taken = {listener.port for listener in listeners}
    if cfg.eventsub_port and cfg.eventsub_port not in taken:
        listeners.append(Listener("eventsub", cfg.eventsub_port))
    return listeners


def build_servers(app: FastAPI, cfg: Settings, listeners: list[Listener]) -> list[uvicorn.Server]:
    servers = []
    for i, listener in enumerate(listeners):
        config = uvicorn.Config(
            app,
            host=cfg.host,
            port=listener.port,
            ssl_certfile=listener.ssl_certfile,
            ssl_keyfile=listener.ssl_keyfile,
            lifespan="on" if i == 0 else "off",
            log_level=cfg.log_level.lower(),
        )
        servers.append(uvicorn.Server(config))
    return servers


async def serve(app: FastAPI, cfg: Settings) -> None:
    """Run every listener until one of them stops."""
    listeners = plan_listeners(cfg)
    servers = build_servers(app, cfg, listeners)
    for listener in listeners:
        logger.info(
            "chatmock.listening",
            listener=listener.name,
            url=f"{listener.scheme}://localhost:{listener.port}",
        )

    tasks = [asyncio.create_task(server.serve()) for server in servers]
    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    for server in servers:
        server.should_exit = True
    if pending:
        await asyncio.wait(pending)
    for task in done:
        task.result()

"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance with its own RelayCoordinator on `app.state`. Every listener
(plain, TLS, EventSub port) serves this *one* app object, which is what
puts all of them in a single session space.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from chatmock import __version__
from chatmock.api import api_router
from chatmock.config import Settings, settings as default_settings
from chatmock.middleware.request_id import RequestIdMiddleware
from chatmock.realtime.websocket import router as ws_router
from chatmock.relay.coordinator import RelayCoordinator

logger = structlog.get_logger()

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    cfg: Settings = app.state.settings
    logger.info(
        "chatmock.starting",
        version=__version__,
        environment=cfg.environment,
        channel=cfg.broadcaster_user_login,
        stable_guest_ids=cfg.stable_guest_ids,
    )

    yield

    logger.info("chatmock.shutdown", sessions=app.state.relay.registry.counts())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    cfg = settings or default_settings
    app = FastAPI(
        title="chatmock",
        description="Local stand-in for a chat platform's Helix API and EventSub socket",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.relay = RelayCoordinator.from_settings(cfg)

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.include_router(ws_router)

    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(STATIC_DIR / "index.html")

    return app


# Default app instance (used by uvicorn: chatmock.main:app)
app = create_app()

"""Test fixtures — a fresh app (and so a fresh relay) per test.

Learn: Two kinds of clients:
1. `client` — httpx AsyncClient over ASGITransport, for plain REST calls
2. `ws_client` — Starlette TestClient used as a context manager, so every
   WebSocket session in a test shares one event loop with the app

Relay unit tests don't need a server at all: `FakeConnection` stands in
for a Peer and records the frames queued on it.
"""

import json

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from chatmock.config import Settings
from chatmock.main import create_app
from chatmock.relay.peer import PeerClosed


class FakeConnection:
    """Records frames; can be flipped to closed to simulate a dead socket."""

    def __init__(self, name: str = "conn", open: bool = True):
        self.name = name
        self.open = open
        self.frames: list[dict] = []

    def __repr__(self) -> str:
        return f"<FakeConnection {self.name}>"

    @property
    def is_open(self) -> bool:
        return self.open

    def send(self, text: str) -> None:
        if not self.open:
            raise PeerClosed(self.name)
        self.frames.append(json.loads(text))


@pytest.fixture()
def make_conn():
    return FakeConnection


@pytest.fixture()
def settings():
    return Settings(eventsub_port=0, ssl_certfile=None, ssl_keyfile=None)


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def relay(app):
    return app.state.relay


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def ws_client(app):
    with TestClient(app) as tc:
        yield tc

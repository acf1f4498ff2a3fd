"""WebSocket endpoints — operator chat page and bot notification channel.

Learn: A connection is registered *before* it is accepted. Frames queued in
between simply wait in the peer's outbox, and the client can never observe
an accepted socket that isn't in the registry yet. For bots the welcome
frame is queued before registration, so it is always the first frame.

The endpoint tag comes from the connection scheme: the same app is served
by a plain and a TLS listener, and `wss` means the encrypted one.

Exceptions from the per-connection tasks are collected when the connection
ends and logged, so a crashing reader never fails silently.
"""

import asyncio
import json

import structlog
from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketState

from chatmock.relay.coordinator import RelayCoordinator
from chatmock.relay.messages import CHAT_EVENT
from chatmock.relay.peer import Peer
from chatmock.relay.registry import ENDPOINT_ENCRYPTED, ENDPOINT_PLAIN, Endpoint

logger = structlog.get_logger()
router = APIRouter()


def endpoint_for(websocket: WebSocket) -> Endpoint:
    return ENDPOINT_ENCRYPTED if websocket.url.scheme == "wss" else ENDPOINT_PLAIN


async def _serve(
    websocket: WebSocket,
    peer: Peer,
    relay: RelayCoordinator,
    reader,
    keepalive: bool = False,
) -> None:
    """Run writer and reader (and keepalive) until one ends, then tear down."""
    tasks = []
    try:
        await websocket.accept()
        tasks = [
            asyncio.create_task(peer.pump(on_broken=relay.disconnect)),
            asyncio.create_task(reader()),
        ]
        if keepalive:
            tasks.append(asyncio.create_task(
                peer.keep_alive(relay.keepalive_interval_seconds, relay.keepalive_frame)
            ))
        # Wait for either to finish (usually client disconnect)
        await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        relay.disconnect(peer)
        peer.close()
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error(
                    "relay.connection_task_failed",
                    peer=peer.id,
                    error=repr(result),
                )
    if websocket.client_state == WebSocketState.CONNECTED:
        try:
            await websocket.close()
        except RuntimeError:
            pass


@router.websocket("/ws/chat")
async def browser_websocket(websocket: WebSocket):
    """Operator page socket: `chat message` frames in both directions."""
    relay: RelayCoordinator = websocket.app.state.relay
    peer = Peer(websocket)
    relay.connect_browser(peer, endpoint_for(websocket))

    async def client_listener():
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return
            raw = message.get("text")
            if raw is None:
                continue
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug("relay.browser_frame_unparseable", peer=peer.id)
                continue
            if not isinstance(frame, dict) or frame.get("event") != CHAT_EVENT:
                logger.debug("relay.browser_frame_ignored", peer=peer.id)
                continue
            relay.handle_browser_chat(frame.get("data"))

    await _serve(websocket, peer, relay, client_listener)


@router.websocket("/eventsub")
@router.websocket("/")
async def eventsub_websocket(websocket: WebSocket):
    """Bot socket: one `session_welcome`, then `notification` envelopes.

    A `session_keepalive` goes out whenever the channel has been idle for
    the keepalive interval. Also mounted at `/`, since bots dial the bare
    EventSub port URL.
    """
    relay: RelayCoordinator = websocket.app.state.relay
    peer = Peer(websocket)
    relay.connect_bot(peer, endpoint_for(websocket))

    async def client_listener():
        # Bots never send anything meaningful; read only to notice the close
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

    await _serve(websocket, peer, relay, client_listener, keepalive=True)

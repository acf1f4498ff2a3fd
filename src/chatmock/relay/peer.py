"""Peer — one WebSocket connection with an ordered outbox.

Learn: Fan-out must never await a slow socket, yet each socket must see
messages in the order they were broadcast. The answer is one FIFO queue per
connection, drained by a single writer task (`pump`). Enqueueing is
synchronous and cheap; the writer is the only coroutine that touches
`send_text`.
"""

import asyncio
import time
import uuid
from typing import Callable, Optional

import structlog
from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

logger = structlog.get_logger()


class PeerClosed(Exception):
    """Raised when queuing onto a connection that is no longer open."""


class Peer:
    """Outbound side of a single WebSocket connection."""

    def __init__(self, websocket: WebSocket):
        self.id = uuid.uuid4().hex[:8]
        self.websocket = websocket
        self._outbox: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self._closed = False
        self.last_queued = time.monotonic()

    def __repr__(self) -> str:
        return f"<Peer {self.id}>"

    @property
    def is_open(self) -> bool:
        """True until the transport reports a disconnect or a send fails."""
        if self._closed:
            return False
        return (
            self.websocket.client_state != WebSocketState.DISCONNECTED
            and self.websocket.application_state != WebSocketState.DISCONNECTED
        )

    def send(self, text: str) -> None:
        """Queue a frame. Never blocks, never awaits."""
        if not self.is_open:
            raise PeerClosed(self.id)
        self._outbox.put_nowait(text)
        self.last_queued = time.monotonic()

    def close(self) -> None:
        """Stop accepting frames and let the writer drain and exit."""
        if not self._closed:
            self._closed = True
            self._outbox.put_nowait(None)

    async def pump(self, on_broken: Optional[Callable[["Peer"], None]] = None) -> None:
        """Writer loop: send queued frames in order until closed or broken."""
        while True:
            text = await self._outbox.get()
            if text is None:
                return
            try:
                await self.websocket.send_text(text)
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                self._closed = True
                logger.info("peer.send_failed", peer=self.id, error=str(e))
                if on_broken is not None:
                    on_broken(self)
                return

    async def keep_alive(self, interval: float, make_frame: Callable[[], str]) -> None:
        """Queue a heartbeat whenever nothing was queued for `interval` seconds."""
        while self.is_open:
            idle = time.monotonic() - self.last_queued
            if idle >= interval:
                try:
                    self.send(make_frame())
                except PeerClosed:
                    return
                idle = 0.0
            await asyncio.sleep(interval - idle)

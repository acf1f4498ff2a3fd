"""Broadcast fan-out — one logical message to every member of a role.

Learn: Inbound events don't call sockets. They produce *commands*
(`Broadcast`, `NotifyBots`) which `FanOut.dispatch` executes. Translation
stays pure; delivery stays in one place.

Delivery is fire-and-forget: each frame is serialized once and queued on
every connection in a registry snapshot. A connection that is no longer
open is skipped and unregistered; it never stops the rest of the loop.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

import structlog

from chatmock.relay.messages import CHAT_EVENT, ChatMessage, NotificationEnvelope
from chatmock.relay.peer import PeerClosed
from chatmock.relay.registry import SessionRegistry

logger = structlog.get_logger()


# ─── Outbound commands ────────────────────────────────────


@dataclass(frozen=True)
class Broadcast:
    """Show a chat message on every browser."""

    message: ChatMessage


@dataclass(frozen=True)
class NotifyBots:
    """Push a notification envelope to every bot."""

    envelope: NotificationEnvelope


Command = Union[Broadcast, NotifyBots]


def browser_frame(msg: ChatMessage) -> str:
    return json.dumps({"event": CHAT_EVENT, "data": msg.to_wire()})


# ─── Fan-out ──────────────────────────────────────────────


class FanOut:
    """Delivers frames to every connection the registry knows about."""

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    def broadcast(self, msg: ChatMessage) -> int:
        """Queue `msg` on every browser connection. Returns how many took it."""
        return self._deliver(self.registry.browser_connections(), browser_frame(msg))

    def send_to_bots(self, envelope: NotificationEnvelope) -> int:
        """Queue `envelope` on every bot connection. Returns how many took it."""
        return self._deliver(self.registry.bot_connections(), json.dumps(envelope.to_wire()))

    def dispatch(self, commands: Iterable[Command]) -> None:
        for command in commands:
            if isinstance(command, Broadcast):
                self.broadcast(command.message)
            elif isinstance(command, NotifyBots):
                self.send_to_bots(command.envelope)
            else:
                raise TypeError(f"Unknown relay command: {command!r}")

    def _deliver(self, connections: list, frame: str) -> int:
        delivered = 0
        for conn in connections:
            if not conn.is_open:
                self._drop(conn)
                continue
            try:
                conn.send(frame)
            except PeerClosed:
                self._drop(conn)
                continue
            delivered += 1
        return delivered

    def _drop(self, conn) -> None:
        if self.registry.unregister(conn):
            logger.info("relay.stale_connection_dropped", peer=repr(conn))

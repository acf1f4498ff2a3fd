"""Relay core — session bridging between the browser page and the bot.

Learn: Messages flow in two directions:
1. Browser → Coordinator → Fan-out (all browsers) + Translator → bot sockets
2. Bot REST call → Coordinator → Translator → Fan-out (all browsers)

Nothing here touches a socket directly. Connections are handed in as peers
with an ordered outbox, which keeps every step testable without a server.
"""

from chatmock.relay.coordinator import RelayCoordinator
from chatmock.relay.registry import SessionRegistry

__all__ = ["RelayCoordinator", "SessionRegistry"]

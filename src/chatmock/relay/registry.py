"""Session registry — who is connected, as what, on which listener.

Learn: This is the only shared mutable state in the relay. Every read and
write goes through one lock, and reads hand back a *copy*, so a fan-out
iterating over a snapshot never sees the set change underneath it.

Listeners (plain / encrypted) are just a tag on each entry. Fan-out asks for
a role across all listeners, which is what keeps both endpoints in one
logical chat room.
"""

import threading
from collections.abc import Hashable
from typing import Literal, Optional

Role = Literal["browser", "bot"]
Endpoint = Literal["plain", "encrypted"]

ROLE_BROWSER: Role = "browser"
ROLE_BOT: Role = "bot"
ENDPOINT_PLAIN: Endpoint = "plain"
ENDPOINT_ENCRYPTED: Endpoint = "encrypted"

ROLES: tuple[Role, ...] = (ROLE_BROWSER, ROLE_BOT)
ENDPOINTS: tuple[Endpoint, ...] = (ENDPOINT_PLAIN, ENDPOINT_ENCRYPTED)


class SessionRegistry:
    """Thread-safe set of open connections, partitioned by role and endpoint."""

    def __init__(self):
        self._lock = threading.Lock()
        self._members: dict[Hashable, tuple[Endpoint, Role]] = {}

    def register(self, endpoint: Endpoint, connection: Hashable, role: Role) -> None:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        if endpoint not in ENDPOINTS:
            raise ValueError(f"Unknown endpoint: {endpoint}")
        with self._lock:
            self._members[connection] = (endpoint, role)

    def unregister(self, connection: Hashable) -> bool:
        """Remove a connection. Returns False if it was already gone."""
        with self._lock:
            return self._members.pop(connection, None) is not None

    def connections(self, role: Role, endpoint: Optional[Endpoint] = None) -> list:
        """Snapshot of open connections for a role (optionally one endpoint)."""
        with self._lock:
            return [
                conn
                for conn, (ep, r) in self._members.items()
                if r == role and (endpoint is None or ep == endpoint)
            ]

    def browser_connections(self) -> list:
        return self.connections(ROLE_BROWSER)

    def bot_connections(self) -> list:
        return self.connections(ROLE_BOT)

    def counts(self) -> dict[str, dict[str, int]]:
        """Per-role, per-endpoint connection counts (for /health)."""
        result = {role: {ep: 0 for ep in ENDPOINTS} for role in ROLES}
        with self._lock:
            for ep, role in self._members.values():
                result[role][ep] += 1
        return result

    def __contains__(self, connection: Hashable) -> bool:
        with self._lock:
            return connection in self._members

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)

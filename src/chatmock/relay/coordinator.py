"""Relay coordinator — wires chat events to translation and fan-out.

Learn: Handlers here are synchronous and never await. A browser event
becomes a list of commands (`plan_browser_chat`) which fan-out executes;
the two branches (browsers, bots) run independently, so a bot that has
gone away never stops the message reaching the page and vice versa.
"""

import json
from typing import Any, Optional

import structlog

from chatmock.relay.fanout import Broadcast, Command, FanOut, NotifyBots
from chatmock.relay.messages import SendAck
from chatmock.relay.registry import (
    ENDPOINT_PLAIN,
    ROLE_BOT,
    ROLE_BROWSER,
    Endpoint,
    SessionRegistry,
)
from chatmock.relay.translator import (
    BOT_SENDER,
    DEFAULT_CHANNEL,
    Channel,
    GuestIdFactory,
    InvalidChatEvent,
    parse_browser_event,
    random_guest_id,
    send_ack,
    session_keepalive,
    stable_guest_id,
    to_browser_message,
    to_notification_envelope,
    welcome_handshake,
)

logger = structlog.get_logger()


class RelayCoordinator:
    """Owns the session registry and routes every relay event."""

    def __init__(
        self,
        channel: Channel = DEFAULT_CHANNEL,
        registry: Optional[SessionRegistry] = None,
        guest_ids: GuestIdFactory = random_guest_id,
        keepalive_timeout_seconds: int = 10,
        keepalive_interval_seconds: float = 8.0,
    ):
        self.channel = channel
        self.registry = registry or SessionRegistry()
        self.fanout = FanOut(self.registry)
        self.guest_ids = guest_ids
        self.keepalive_timeout_seconds = keepalive_timeout_seconds
        self.keepalive_interval_seconds = keepalive_interval_seconds

    @classmethod
    def from_settings(cls, settings) -> "RelayCoordinator":
        return cls(
            channel=Channel.from_settings(settings),
            guest_ids=stable_guest_id if settings.stable_guest_ids else random_guest_id,
            keepalive_timeout_seconds=settings.keepalive_timeout_seconds,
            keepalive_interval_seconds=settings.keepalive_interval_seconds,
        )

    # ─── Browser → everyone ───────────────────────────────

    def plan_browser_chat(self, data: Any) -> list[Command]:
        """Turn a raw browser event into relay commands. Invalid → no commands."""
        try:
            msg = parse_browser_event(data)
        except InvalidChatEvent as e:
            logger.debug("relay.browser_event_dropped", reason=str(e))
            return []
        envelope = to_notification_envelope(msg, self.channel, self.guest_ids)
        return [Broadcast(msg), NotifyBots(envelope)]

    def handle_browser_chat(self, data: Any) -> list[Command]:
        commands = self.plan_browser_chat(data)
        self.fanout.dispatch(commands)
        if commands:
            logger.info("relay.guest_message", user=commands[0].message.sender)
        return commands

    # ─── Bot → browsers ───────────────────────────────────

    def handle_bot_message(self, text: str) -> SendAck:
        """Show a bot reply on every browser and acknowledge unconditionally."""
        msg = to_browser_message(BOT_SENDER, text, is_bot=True)
        delivered = self.fanout.broadcast(msg)
        logger.info("relay.bot_message", text=text, browsers=delivered)
        return send_ack()

    # ─── Connection lifecycle ─────────────────────────────

    def connect_bot(self, connection, endpoint: Endpoint = ENDPOINT_PLAIN) -> None:
        """Welcome first, then register, so the welcome is always frame #1."""
        welcome = welcome_handshake(keepalive_timeout_seconds=self.keepalive_timeout_seconds)
        connection.send(json.dumps(welcome.to_wire()))
        self.registry.register(endpoint, connection, ROLE_BOT)
        logger.info(
            "relay.bot_connected",
            endpoint=endpoint,
            session_id=welcome.payload.session.id,
        )

    def keepalive_frame(self) -> str:
        return json.dumps(session_keepalive().to_wire())

    def connect_browser(self, connection, endpoint: Endpoint = ENDPOINT_PLAIN) -> None:
        self.registry.register(endpoint, connection, ROLE_BROWSER)
        logger.info("relay.browser_connected", endpoint=endpoint)

    def disconnect(self, connection) -> None:
        if self.registry.unregister(connection):
            logger.info("relay.disconnected", peer=repr(connection))

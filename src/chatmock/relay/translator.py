"""Event translator — browser events ⇄ EventSub envelopes.

Learn: Every function here is pure apart from reading the clock and the
random source. Ids and timestamps are stamped when the envelope is *built*,
not when it is sent, so two envelopes built from the same ChatMessage share
sender and text but never a message_id.
"""

import hashlib
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError

from chatmock.relay.messages import (
    MESSAGE_TYPE_KEEPALIVE,
    MESSAGE_TYPE_NOTIFICATION,
    MESSAGE_TYPE_WELCOME,
    SUBSCRIPTION_CHAT_MESSAGE,
    SUBSCRIPTION_VERSION,
    BrowserChatEvent,
    ChatMessage,
    ChatMessageEvent,
    EnvelopeMetadata,
    MessageBody,
    NotificationEnvelope,
    NotificationPayload,
    SendAck,
    SessionKeepalive,
    SentMessage,
    SubscriptionDescriptor,
    WelcomeHandshake,
    WelcomePayload,
    WelcomeSession,
)

BOT_SENDER = "Bot"
BOT_COLOR = "#9147ff"


class InvalidChatEvent(ValueError):
    """Raised when a browser chat event does not have the minimal shape."""


@dataclass(frozen=True)
class Channel:
    """The single simulated channel every notification is addressed from."""

    broadcaster_user_id: str = "12345"
    broadcaster_user_login: str = "MyStream"

    @classmethod
    def from_settings(cls, settings) -> "Channel":
        return cls(
            broadcaster_user_id=settings.broadcaster_user_id,
            broadcaster_user_login=settings.broadcaster_user_login,
        )


DEFAULT_CHANNEL = Channel()

GuestIdFactory = Callable[[str], str]


def random_guest_id(login: str) -> str:
    """Fresh chatter id per message. Only there to fill the protocol shape."""
    return f"guest_{uuid.uuid4().hex[:12]}"


def stable_guest_id(login: str) -> str:
    """Same chatter id for every message from the same login."""
    return "guest_" + hashlib.sha1(login.encode("utf-8")).hexdigest()[:12]


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ─── Browser side ─────────────────────────────────────────


def to_browser_message(
    sender: str,
    text: str,
    is_bot: bool,
    color: Optional[str] = None,
) -> ChatMessage:
    """Build the message every browser will render.

    Bot messages always show as "Bot" in the highlight color. Guest messages
    keep whatever sender and color they came with; no color stays no color.
    """
    if is_bot:
        return ChatMessage(sender=BOT_SENDER, text=text, color=BOT_COLOR, is_bot=True)
    return ChatMessage(sender=sender, text=text, color=color, is_bot=False)


def parse_browser_event(data: Any) -> ChatMessage:
    """Validate a raw `chat message` payload from the page."""
    try:
        event = BrowserChatEvent.model_validate(data)
    except ValidationError as e:
        raise InvalidChatEvent(str(e)) from e
    return to_browser_message(event.user, event.text, is_bot=False, color=event.color)


# ─── EventSub side ────────────────────────────────────────


def to_notification_envelope(
    msg: ChatMessage,
    channel: Channel = DEFAULT_CHANNEL,
    guest_ids: GuestIdFactory = random_guest_id,
) -> NotificationEnvelope:
    """Wrap a chat message as a `channel.chat.message` notification."""
    return NotificationEnvelope(
        metadata=EnvelopeMetadata(
            message_id=str(uuid.uuid4()),
            message_type=MESSAGE_TYPE_NOTIFICATION,
            message_timestamp=_now(),
            subscription_type=SUBSCRIPTION_CHAT_MESSAGE,
            subscription_version=SUBSCRIPTION_VERSION,
        ),
        payload=NotificationPayload(
            subscription=SubscriptionDescriptor(),
            event=ChatMessageEvent(
                broadcaster_user_id=channel.broadcaster_user_id,
                broadcaster_user_login=channel.broadcaster_user_login,
                broadcaster_user_name=channel.broadcaster_user_login,
                chatter_user_id=guest_ids(msg.sender),
                chatter_user_login=msg.sender,
                chatter_user_name=msg.sender,
                message_id=str(uuid.uuid4()),
                message=MessageBody(text=msg.text),
                color=msg.color,
            ),
        ),
    )


def welcome_handshake(
    session_id: Optional[str] = None,
    keepalive_timeout_seconds: int = 10,
) -> WelcomeHandshake:
    now = _now()
    return WelcomeHandshake(
        metadata=EnvelopeMetadata(
            message_id=str(uuid.uuid4()),
            message_type=MESSAGE_TYPE_WELCOME,
            message_timestamp=now,
        ),
        payload=WelcomePayload(
            session=WelcomeSession(
                id=session_id or f"mock_session_{uuid.uuid4().hex}",
                keepalive_timeout_seconds=keepalive_timeout_seconds,
                reconnect_url=None,
                connected_at=now,
            )
        ),
    )


def session_keepalive() -> SessionKeepalive:
    """Sent to a bot whose channel has been quiet for a while."""
    return SessionKeepalive(
        metadata=EnvelopeMetadata(
            message_id=str(uuid.uuid4()),
            message_type=MESSAGE_TYPE_KEEPALIVE,
            message_timestamp=_now(),
        )
    )


def send_ack() -> SendAck:
    """Synthetic delivery receipt for a bot's send-message call."""
    return SendAck(data=[SentMessage(message_id=f"msg_{uuid.uuid4().hex}")])

"""Wire shapes for the relay.

Learn: Pydantic models double as validation (inbound browser events) and
serialization (outbound frames). Aliases keep Python-side names snake_case
while the browser page keeps its camelCase `isBot` / `user` keys.

The EventSub shapes mirror the real notification protocol closely enough
that bot code written against the mock works against the real thing.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

# ─── Fixed protocol tags ──────────────────────────────────

CHAT_EVENT = "chat message"
MESSAGE_TYPE_NOTIFICATION = "notification"
MESSAGE_TYPE_WELCOME = "session_welcome"
MESSAGE_TYPE_KEEPALIVE = "session_keepalive"
SUBSCRIPTION_CHAT_MESSAGE = "channel.chat.message"
SUBSCRIPTION_VERSION = "1"


# ─── Browser side ─────────────────────────────────────────


class ChatMessage(BaseModel):
    """One chat line as the browser page renders it. Immutable."""

    sender: str = Field(min_length=1, alias="user")
    text: str = ""
    color: Optional[str] = None
    is_bot: bool = Field(False, alias="isBot")

    model_config = {"frozen": True, "populate_by_name": True}

    def to_wire(self) -> dict[str, Any]:
        """Browser payload: {user, text, color?, isBot}. Unset color is omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class BrowserChatEvent(BaseModel):
    """Inbound `chat message` payload typed into the operator page."""

    user: str = Field(min_length=1)
    text: str = ""
    color: Optional[str] = None


# ─── EventSub notification ────────────────────────────────


class EnvelopeMetadata(BaseModel):
    message_id: str
    message_type: str
    message_timestamp: datetime
    subscription_type: Optional[str] = None
    subscription_version: Optional[str] = None


class SubscriptionDescriptor(BaseModel):
    type: str = SUBSCRIPTION_CHAT_MESSAGE
    version: str = SUBSCRIPTION_VERSION


class MessageBody(BaseModel):
    text: str


class ChatMessageEvent(BaseModel):
    broadcaster_user_id: str
    broadcaster_user_login: str
    broadcaster_user_name: str
    chatter_user_id: str
    chatter_user_login: str
    chatter_user_name: str
    message_id: str
    message: MessageBody
    color: Optional[str] = None


class NotificationPayload(BaseModel):
    subscription: SubscriptionDescriptor
    event: ChatMessageEvent


class NotificationEnvelope(BaseModel):
    """A `notification` message pushed to the bot over EventSub."""

    metadata: EnvelopeMetadata
    payload: NotificationPayload

    model_config = {"frozen": True}

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# ─── EventSub welcome ─────────────────────────────────────


class WelcomeSession(BaseModel):
    id: str
    status: str = "connected"
    keepalive_timeout_seconds: int
    reconnect_url: Optional[str] = None
    connected_at: datetime


class WelcomePayload(BaseModel):
    session: WelcomeSession


class WelcomeHandshake(BaseModel):
    """First and only `session_welcome` frame on a bot connection."""

    metadata: EnvelopeMetadata
    payload: WelcomePayload

    def to_wire(self) -> dict[str, Any]:
        # reconnect_url must stay an explicit null
        data = self.model_dump(mode="json")
        data["metadata"] = {k: v for k, v in data["metadata"].items() if v is not None}
        return data


class SessionKeepalive(BaseModel):
    """Idle-channel heartbeat: metadata only, empty payload."""

    metadata: EnvelopeMetadata
    payload: dict[str, Any] = {}

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# ─── REST acknowledgement ─────────────────────────────────


class SentMessage(BaseModel):
    message_id: str
    is_sent: bool = True
    drop_reason: Optional[dict[str, str]] = None


class SendAck(BaseModel):
    data: list[SentMessage]

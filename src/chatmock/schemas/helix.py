"""Pydantic schemas for the mocked Helix endpoints.

Learn: Only the fields a bot actually sends are modelled. Everything is
optional with a harmless default. The mock should accept whatever a
half-finished bot throws at it rather than reject it with a 422.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from chatmock.relay.messages import SUBSCRIPTION_CHAT_MESSAGE, SUBSCRIPTION_VERSION


# ─── EventSub subscriptions ───────────────────────────────


class SubscriptionCreate(BaseModel):
    type: str = SUBSCRIPTION_CHAT_MESSAGE
    version: str = SUBSCRIPTION_VERSION
    condition: Optional[dict[str, Any]] = None
    transport: Optional[dict[str, Any]] = None


class SubscriptionRead(BaseModel):
    id: str
    status: str = "enabled"
    type: str
    version: str
    condition: Optional[dict[str, Any]] = None
    transport: Optional[dict[str, Any]] = None
    created_at: datetime
    cost: int = 0


class SubscriptionList(BaseModel):
    data: list[SubscriptionRead]
    total: int
    total_cost: int = 0
    max_total_cost: int = 10000


# ─── Chat ─────────────────────────────────────────────────


class ChatMessageCreate(BaseModel):
    message: str = ""
    broadcaster_id: Optional[str] = None
    sender_id: Optional[str] = None
    reply_parent_message_id: Optional[str] = None


# ─── Users / streams ──────────────────────────────────────


class UserRead(BaseModel):
    id: str
    login: str
    display_name: str
    type: str = ""
    broadcaster_type: str = ""
    description: str = ""
    profile_image_url: str = ""


class UserList(BaseModel):
    data: list[UserRead]


class StreamList(BaseModel):
    data: list[dict[str, Any]] = []


# ─── OAuth ────────────────────────────────────────────────


class TokenValidation(BaseModel):
    client_id: str = "mock_client_id"
    login: str
    user_id: str
    scopes: list[str] = []
    expires_in: int = 0

"""Mocked Helix REST routes — the calls a bot makes to the platform API.

Learn: Only `POST /helix/chat/messages` reaches the relay. The rest return
fixed or pass-through data shaped like the real API so a bot's startup
sequence (look up user → subscribe → listen) runs unchanged.
"""

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from chatmock.api.deps import get_relay, get_settings
from chatmock.config import Settings
from chatmock.relay.coordinator import RelayCoordinator
from chatmock.relay.messages import SendAck
from chatmock.schemas.helix import (
    ChatMessageCreate,
    StreamList,
    SubscriptionCreate,
    SubscriptionList,
    SubscriptionRead,
    UserList,
    UserRead,
)

router = APIRouter(prefix="/helix")


@router.post("/eventsub/subscriptions", response_model=SubscriptionList, status_code=202)
async def create_subscription(body: SubscriptionCreate):
    """Accept any subscription and echo its condition back as enabled."""
    sub = SubscriptionRead(
        id=str(uuid.uuid4()),
        type=body.type,
        version=body.version,
        condition=body.condition,
        transport=body.transport,
        created_at=datetime.now(timezone.utc),
    )
    return SubscriptionList(data=[sub], total=1)


@router.post("/chat/messages", response_model=SendAck)
async def send_chat_message(
    body: ChatMessageCreate,
    relay: RelayCoordinator = Depends(get_relay),
):
    """Bot reply: shown on every browser, always acknowledged as sent."""
    return relay.handle_bot_message(body.message)


@router.get("/streams", response_model=StreamList)
async def list_streams():
    """Nobody is ever live on the mock channel."""
    return StreamList()


@router.get("/users", response_model=UserList)
async def list_users(
    login: str = Query("test_user"),
    settings: Settings = Depends(get_settings),
):
    """Every login resolves to the simulated broadcaster."""
    user = UserRead(
        id=settings.broadcaster_user_id,
        login=login,
        display_name=login,
    )
    return UserList(data=[user])

"""Event translator tests — browser messages, envelopes, fixed shapes."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from chatmock.relay.translator import (
    BOT_COLOR,
    BOT_SENDER,
    Channel,
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


def _parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# ─── Browser messages ─────────────────────────────────────


def test_bot_message_is_normalized():
    msg = to_browser_message("whatever", "pong", is_bot=True, color="#000")
    assert msg.sender == BOT_SENDER == "Bot"
    assert msg.color == BOT_COLOR == "#9147ff"
    assert msg.is_bot is True
    assert msg.to_wire() == {"user": "Bot", "text": "pong", "color": "#9147ff", "isBot": True}


def test_guest_message_passes_through():
    msg = to_browser_message("Bob", "hi", is_bot=False, color="#fff")
    assert msg.to_wire() == {"user": "Bob", "text": "hi", "color": "#fff", "isBot": False}


def test_missing_color_stays_unset():
    msg = to_browser_message("Bob", "hi", is_bot=False)
    assert msg.color is None
    assert "color" not in msg.to_wire()


def test_empty_text_is_valid():
    msg = parse_browser_event({"user": "Bob", "text": ""})
    assert msg.text == ""


def test_chat_message_is_immutable():
    msg = to_browser_message("Bob", "hi", is_bot=False)
    with pytest.raises(ValidationError):
        msg.text = "changed"


@pytest.mark.parametrize(
    "data",
    [
        {"user": "", "text": "hi"},
        {"text": "hi"},
        {"user": "Bob", "text": 42},
        {"user": None, "text": "hi"},
        "Bob: hi",
        None,
    ],
)
def test_invalid_browser_events_raise(data):
    with pytest.raises(InvalidChatEvent):
        parse_browser_event(data)


def test_text_defaults_to_empty():
    msg = parse_browser_event({"user": "Bob"})
    assert msg.text == ""
    assert msg.is_bot is False


# ─── Envelopes ────────────────────────────────────────────


def test_envelope_shape():
    msg = to_browser_message("Bob", "hi", is_bot=False, color="#fff")
    wire = to_notification_envelope(msg).to_wire()

    meta = wire["metadata"]
    assert meta["message_type"] == "notification"
    assert meta["subscription_type"] == "channel.chat.message"
    assert _parse_ts(meta["message_timestamp"]).tzinfo is not None

    assert wire["payload"]["subscription"]["type"] == "channel.chat.message"
    event = wire["payload"]["event"]
    assert event["broadcaster_user_id"] == "12345"
    assert event["broadcaster_user_login"] == "MyStream"
    assert event["chatter_user_login"] == "Bob"
    assert event["chatter_user_name"] == "Bob"
    assert event["chatter_user_id"].startswith("guest_")
    assert event["message"] == {"text": "hi"}
    assert event["color"] == "#fff"


def test_envelope_omits_unset_color():
    msg = to_browser_message("Bob", "hi", is_bot=False)
    event = to_notification_envelope(msg).to_wire()["payload"]["event"]
    assert "color" not in event


def test_identical_input_gives_distinct_envelopes():
    """Same message twice: new ids and guest identity, same content."""
    msg = to_browser_message("Bob", "hi", is_bot=False)
    a = to_notification_envelope(msg).to_wire()
    b = to_notification_envelope(msg).to_wire()

    assert a["metadata"]["message_id"] != b["metadata"]["message_id"]
    assert a["payload"]["event"]["chatter_user_id"] != b["payload"]["event"]["chatter_user_id"]
    for key in ("chatter_user_login", "message", "broadcaster_user_id"):
        assert a["payload"]["event"][key] == b["payload"]["event"][key]


def test_envelope_uses_configured_channel():
    channel = Channel(broadcaster_user_id="777", broadcaster_user_login="OtherStream")
    msg = to_browser_message("Bob", "hi", is_bot=False)
    event = to_notification_envelope(msg, channel).to_wire()["payload"]["event"]
    assert event["broadcaster_user_id"] == "777"
    assert event["broadcaster_user_login"] == "OtherStream"


def test_stable_guest_ids_follow_login():
    assert stable_guest_id("Bob") == stable_guest_id("Bob")
    assert stable_guest_id("Bob") != stable_guest_id("Alice")
    assert random_guest_id("Bob") != random_guest_id("Bob")

    msg = to_browser_message("Bob", "hi", is_bot=False)
    a = to_notification_envelope(msg, guest_ids=stable_guest_id).to_wire()
    b = to_notification_envelope(msg, guest_ids=stable_guest_id).to_wire()
    assert a["payload"]["event"]["chatter_user_id"] == b["payload"]["event"]["chatter_user_id"]


# ─── Fixed shapes ─────────────────────────────────────────


def test_welcome_handshake_shape():
    wire = welcome_handshake(session_id="s-1", keepalive_timeout_seconds=30).to_wire()
    assert wire["metadata"]["message_type"] == "session_welcome"
    assert "subscription_type" not in wire["metadata"]
    session = wire["payload"]["session"]
    assert session["id"] == "s-1"
    assert session["status"] == "connected"
    assert session["keepalive_timeout_seconds"] == 30
    assert "reconnect_url" in session
    assert session["reconnect_url"] is None


def test_welcome_generates_session_id():
    a = welcome_handshake().payload.session.id
    b = welcome_handshake().payload.session.id
    assert a and b and a != b


def test_send_ack_is_unconditional():
    a = send_ack().model_dump()
    b = send_ack().model_dump()
    assert a["data"][0]["is_sent"] is True
    assert a["data"][0]["message_id"].startswith("msg_")
    assert a["data"][0]["message_id"] != b["data"][0]["message_id"]


def test_session_keepalive_shape():
    wire = session_keepalive().to_wire()
    assert wire["metadata"]["message_type"] == "session_keepalive"
    assert wire["metadata"]["message_id"]
    assert _parse_ts(wire["metadata"]["message_timestamp"]).tzinfo is not None
    assert "subscription_type" not in wire["metadata"]
    assert wire["payload"] == {}

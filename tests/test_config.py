"""Settings tests."""

import pytest
from pydantic import ValidationError

from chatmock.config import Settings


def test_defaults():
    cfg = Settings(ssl_certfile=None, ssl_keyfile=None)
    assert cfg.tls_enabled is False
    assert cfg.stable_guest_ids is False


def test_cert_requires_key():
    with pytest.raises(ValidationError):
        Settings(ssl_certfile="cert.pem", ssl_keyfile=None)
    with pytest.raises(ValidationError):
        Settings(ssl_certfile=None, ssl_keyfile="key.pem")


def test_tls_enabled_with_pair():
    cfg = Settings(ssl_certfile="cert.pem", ssl_keyfile="key.pem")
    assert cfg.tls_enabled is True


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("CHATMOCK_BROADCASTER_USER_LOGIN", "EnvStream")
    monkeypatch.setenv("CHATMOCK_STABLE_GUEST_IDS", "true")
    cfg = Settings()
    assert cfg.broadcaster_user_login == "EnvStream"
    assert cfg.stable_guest_ids is True


def test_keepalive_interval_must_beat_timeout():
    with pytest.raises(ValidationError):
        Settings(keepalive_timeout_seconds=10, keepalive_interval_seconds=10)
    with pytest.raises(ValidationError):
        Settings(keepalive_interval_seconds=0)
    cfg = Settings(keepalive_timeout_seconds=10, keepalive_interval_seconds=9.5)
    assert cfg.keepalive_interval_seconds == 9.5

"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with CHATMOCK_ prefix.
Everything has a development default so `chatmock serve` works with no setup.

Learn: The simulated channel (broadcaster id/login) lives here rather than in
the relay code. It is fixed for the lifetime of the process, so it is
configuration, not state.
"""

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via CHATMOCK_* env vars."""

    # Server
    environment: str = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    http_port: int = 3000
    https_port: int = 3443
    eventsub_port: int = 8080  # 0 disables the dedicated EventSub listener

    # TLS: the encrypted listener only starts when both are set
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "https://localhost:3443",
    ]

    # Simulated channel
    broadcaster_user_id: str = "12345"
    broadcaster_user_login: str = "MyStream"
    bot_user_id: str = "999"
    bot_user_login: str = "bot_user"

    # EventSub behaviour
    stable_guest_ids: bool = False  # one chatter id per login instead of per message
    keepalive_timeout_seconds: int = 10
    keepalive_interval_seconds: float = 8.0  # idle time before a session_keepalive is sent

    model_config = {"env_prefix": "CHATMOCK_"}

    @model_validator(mode="after")
    def validate_tls_pair(self):
        """A certificate without its key (or the reverse) is a config mistake."""
        if bool(self.ssl_certfile) != bool(self.ssl_keyfile):
            raise ValueError(
                "CHATMOCK_SSL_CERTFILE and CHATMOCK_SSL_KEYFILE must be set together"
            )
        return self

    @model_validator(mode="after")
    def validate_keepalive(self):
        """Keepalives must go out before the advertised timeout expires."""
        if not 0 < self.keepalive_interval_seconds < self.keepalive_timeout_seconds:
            raise ValueError(
                "CHATMOCK_KEEPALIVE_INTERVAL_SECONDS must be positive and below "
                "CHATMOCK_KEEPALIVE_TIMEOUT_SECONDS"
            )
        return self

    @property
    def tls_enabled(self) -> bool:
        return bool(self.ssl_certfile and self.ssl_keyfile)


# Singleton — import this everywhere
settings = Settings()

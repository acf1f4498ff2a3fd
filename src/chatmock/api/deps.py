"""Shared FastAPI dependencies."""

from fastapi import Request

from chatmock.config import Settings
from chatmock.relay.coordinator import RelayCoordinator


def get_relay(request: Request) -> RelayCoordinator:
    return request.app.state.relay


def get_settings(request: Request) -> Settings:
    return request.app.state.settings

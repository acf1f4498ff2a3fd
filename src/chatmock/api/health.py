"""Health check endpoint.

Learn: Besides liveness, reports how many browsers and bots are connected
on each listener. That is the quickest way to see whether the bot actually made
it onto the EventSub socket.
"""

from fastapi import APIRouter, Depends

from chatmock import __version__
from chatmock.api.deps import get_relay
from chatmock.relay.coordinator import RelayCoordinator

router = APIRouter()


@router.get("/health")
async def health_check(relay: RelayCoordinator = Depends(get_relay)):
    """Server status, version and live session counts."""
    return {
        "status": "ok",
        "version": __version__,
        "sessions": relay.registry.counts(),
    }

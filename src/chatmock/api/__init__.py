"""API route aggregation.

All routers registered here get mounted in main.py. Platform mocks live
under /mock so a bot only needs its base URLs pointed here; health sits at
the root.
"""

from fastapi import APIRouter

from chatmock.api.health import router as health_router
from chatmock.api.helix import router as helix_router
from chatmock.api.oauth import router as oauth_router

mock_router = APIRouter(prefix="/mock")
mock_router.include_router(oauth_router, tags=["oauth"])
mock_router.include_router(helix_router, tags=["helix"])

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(mock_router)

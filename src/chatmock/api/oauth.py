"""Token validation mock — any token is valid and belongs to the bot user."""

from fastapi import APIRouter, Depends

from chatmock.api.deps import get_settings
from chatmock.config import Settings
from chatmock.schemas.helix import TokenValidation

router = APIRouter(prefix="/oauth2")


@router.get("/validate", response_model=TokenValidation)
async def validate_token(settings: Settings = Depends(get_settings)):
    return TokenValidation(
        login=settings.bot_user_login,
        user_id=settings.bot_user_id,
    )

"""
Playback settings routes.

Endpoints:
- GET /api/settings/playback - Get audio/captions/autoplay/mute toggles
- PATCH /api/settings/playback - Update some of the toggles
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.media.settings import FROM_JSON_FIELDS, settings_to_dict
from web_api.services import MediaServices, get_services

router = APIRouter(prefix="/api/settings", tags=["settings"])


class PlaybackSettingsUpdate(BaseModel):
    """Schema for a partial settings update."""

    audioOn: bool | None = None
    captionsOn: bool | None = None
    autoplayOn: bool | None = None
    mutedByDefault: bool | None = None


@router.get("/playback")
async def get_playback_settings(services: MediaServices = Depends(get_services)):
    return settings_to_dict(services.settings.load())


@router.patch("/playback")
async def update_playback_settings(
    updates: PlaybackSettingsUpdate,
    services: MediaServices = Depends(get_services),
):
    """Only fields present in the body are changed."""
    changes = {
        FROM_JSON_FIELDS[name]: value
        for name, value in updates.model_dump(exclude_none=True).items()
    }
    return settings_to_dict(services.settings.update(**changes))

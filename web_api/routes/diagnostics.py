"""
Diagnostics API routes.

Endpoints:
- GET /api/diagnostics/media/{slug} - Check media endpoints for a slug
"""

from fastapi import APIRouter, Depends

from core.config import get_api_base_url
from core.media.diagnostics import format_report, run_media_endpoint_diagnostics
from web_api.services import MediaServices, get_services

router = APIRouter(prefix="/api/diagnostics", tags=["diagnostics"])


@router.get("/media/{slug}")
async def media_diagnostics(slug: str, services: MediaServices = Depends(get_services)):
    """
    Run HEAD/GET checks against the video and WebVTT endpoints of a slug.

    The reported api_base is the configured one ("" means same origin).
    The playback probe needs a real player, so it is reported as not run.
    """
    diagnostics = await run_media_endpoint_diagnostics(services.client, slug)
    return format_report({"base_url": get_api_base_url()}, diagnostics)

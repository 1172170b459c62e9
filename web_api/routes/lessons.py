"""
Lesson API routes.

Endpoints:
- GET /api/lessons - List lessons
- GET /api/lessons/{lesson_id} - Get lesson detail (video/thumbnail resolved)
- GET /api/lessons/{lesson_id}/media - Get resolved media URLs
- GET /api/lessons/{lesson_id}/cues - Get caption cues (optionally the active one)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from core.lessons import Lesson, LessonNotFoundError, load_lesson, load_lessons
from core.media.captions import active_cue
from core.media.types import ResolvedMediaSet
from web_api.services import MediaServices, get_services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lessons", tags=["lessons"])


def serialize_lesson(lesson: Lesson) -> dict:
    """Serialize a lesson to the camelCase shape the player expects."""
    return {
        "id": lesson.id,
        "title": lesson.title,
        "description": lesson.description,
        "summary": lesson.summary,
        "tags": list(lesson.tags),
        "durationSeconds": lesson.duration_seconds,
        "videoUrl": lesson.video_url,
        "thumbnail": lesson.thumbnail,
        "takeaways": list(lesson.takeaways),
        "cta": lesson.cta,
    }


def serialize_media(media: ResolvedMediaSet) -> dict:
    return {
        "slug": media.slug,
        "videoUrl": media.video_url,
        "posterUrl": media.poster_url,
        "captionsVttUrl": media.captions_vtt_url,
        "audioUrl": media.audio_url,
        "captionsJsonUrl": media.captions_json_url,
        "textUrl": media.text_url,
        "ssmlUrl": media.ssml_url,
    }


def _get_lesson_or_404(lesson_id: str) -> Lesson:
    try:
        return load_lesson(lesson_id)
    except LessonNotFoundError:
        raise HTTPException(status_code=404, detail="Lesson not found")


@router.get("")
async def list_lessons():
    """List all lessons in feed order."""
    return [serialize_lesson(lesson) for lesson in load_lessons()]


@router.get("/{lesson_id}")
async def get_lesson(lesson_id: str, services: MediaServices = Depends(get_services)):
    """Get a lesson, filling in videoUrl/thumbnail from the asset host if missing."""
    lesson = _get_lesson_or_404(lesson_id)
    lesson = await services.resolver.attach_video(lesson)
    return serialize_lesson(lesson)


@router.get("/{lesson_id}/media")
async def get_lesson_media(
    lesson_id: str, services: MediaServices = Depends(get_services)
):
    """Resolve every media asset for a lesson (cached per lesson id)."""
    lesson = _get_lesson_or_404(lesson_id)
    media = await services.resolver.resolve(lesson)
    return serialize_media(media)


@router.get("/{lesson_id}/cues")
async def get_lesson_cues(
    lesson_id: str,
    t: float | None = Query(default=None, ge=0),
    services: MediaServices = Depends(get_services),
):
    """
    Get caption cues from the best available source.

    With ?t=<seconds>, also returns the cue text active at that time.
    """
    lesson = _get_lesson_or_404(lesson_id)
    media = await services.resolver.resolve(lesson)
    track = await services.captions.load(media, lesson)

    response = {
        "source": track.source,
        "cues": [{"start": c.start, "end": c.end, "text": c.text} for c in track.cues],
    }
    if t is not None:
        response["active"] = active_cue(track.cues, t)
    return response

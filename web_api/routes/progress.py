"""
Progress API routes.

Endpoints:
- GET /api/progress - Get the caller's lesson progress and stats
- POST /api/progress/{lesson_id} - Record watched/completed/score for a lesson

The caller is identified by the X-User-Id header ("anon" when absent).
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from core.lessons import LessonNotFoundError, ProgressRecord, get_available_lessons, load_lesson
from web_api.services import MediaServices, get_services, get_user_id

router = APIRouter(prefix="/api/progress", tags=["progress"])


class ProgressUpdate(BaseModel):
    """Schema for a progress update. Flags only ever turn on."""

    watched: bool = False
    completed: bool = False
    score: float | None = Field(default=None, ge=0, le=100)


def serialize_record(record: ProgressRecord) -> dict:
    return {
        "lessonId": record.lesson_id,
        "watched": record.watched,
        "completed": record.completed,
        "score": record.score,
        "updatedAt": record.updated_at.isoformat(),
    }


def serialize_stats(stats: dict) -> dict:
    return {
        "watched": stats["watched"],
        "completed": stats["completed"],
        "overall": stats["overall"],
        "totalLessons": stats["total_lessons"],
        "points": stats["points"],
    }


def _response(services: MediaServices, user_id: str) -> dict:
    stats = services.progress.stats(user_id, get_available_lessons())
    return {
        "userId": user_id,
        "items": [serialize_record(r) for r in services.progress.get(user_id)],
        "stats": serialize_stats(stats),
    }


@router.get("")
async def get_progress(
    user_id: str = Depends(get_user_id),
    services: MediaServices = Depends(get_services),
):
    """Get progress for the calling user."""
    return _response(services, user_id)


@router.post("/{lesson_id}")
async def update_progress(
    lesson_id: str,
    update: ProgressUpdate,
    user_id: str = Depends(get_user_id),
    services: MediaServices = Depends(get_services),
):
    """Record progress (e.g. the player's "watched" event) for a lesson."""
    try:
        load_lesson(lesson_id)
    except LessonNotFoundError:
        raise HTTPException(status_code=404, detail="Lesson not found")

    services.progress.mark(
        user_id,
        lesson_id,
        watched=update.watched,
        completed=update.completed,
        score=update.score,
    )
    return _response(services, user_id)

"""
Skills API routes.

Endpoints:
- GET /api/skills - List skills (optional search, level and tag filters)
- GET /api/skills/{skill_id} - Get skill detail with its lessons
- POST /api/skills/{skill_id}/enroll - Enroll the caller in a skill
- GET /api/skills/{skill_id}/progress - Get the caller's progress in a skill
- POST /api/skills/{skill_id}/progress - Record progress for a lesson of a skill
"""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from core.skills import Skill, SkillNotFoundError, load_skill, search_skills
from web_api.routes.progress import serialize_record, serialize_stats
from web_api.services import MediaServices, get_services, get_user_id

router = APIRouter(prefix="/api/skills", tags=["skills"])


class SkillProgressUpdate(BaseModel):
    """Schema for a progress update on one lesson of a skill."""

    lessonId: str = Field(min_length=1, max_length=64)
    watched: bool = False
    completed: bool = False
    score: float | None = Field(default=None, ge=0, le=100)


def _get_skill(skill_id: str) -> Skill:
    try:
        return load_skill(skill_id)
    except SkillNotFoundError:
        raise HTTPException(status_code=404, detail="Skill not found")


def _scope(skill: Skill) -> str:
    return f"skill:{skill.id}"


def serialize_skill_summary(skill: Skill) -> dict:
    return {
        "id": skill.id,
        "title": skill.title,
        "brief": skill.brief,
        "duration": skill.duration,
        "level": skill.level,
        "tags": list(skill.tags),
    }


def serialize_skill(skill: Skill) -> dict:
    return {
        **serialize_skill_summary(skill),
        "description": skill.description,
        "lessons": [
            {"id": lesson.id, "title": lesson.title, "duration": lesson.duration}
            for lesson in skill.lessons
        ],
    }


def _progress_response(services: MediaServices, user_id: str, skill: Skill) -> dict:
    scope = _scope(skill)
    stats = services.progress.stats(user_id, skill.lesson_ids, scope=scope)
    updated_at = services.progress.updated_at(user_id, scope)
    return {
        "userId": user_id,
        "skillId": skill.id,
        "enrolled": services.enrollments.is_enrolled(user_id, skill.id),
        "items": [serialize_record(r) for r in services.progress.get(user_id, scope)],
        "stats": serialize_stats(stats),
        "updatedAt": updated_at.isoformat() if updated_at else None,
    }


@router.get("")
async def list_skills(
    search: str = Query(default="", max_length=120),
    level: Literal["beginner", "intermediate", "advanced"] | None = Query(default=None),
    tag: str | None = Query(default=None, min_length=1, max_length=32),
):
    """List skills matching all given filters."""
    return {
        "skills": [
            serialize_skill_summary(s)
            for s in search_skills(search, level=level, tag=tag)
        ]
    }


@router.get("/{skill_id}")
async def get_skill(skill_id: str):
    """Get a skill with its lessons."""
    return serialize_skill(_get_skill(skill_id))


@router.post("/{skill_id}/enroll")
async def enroll(
    skill_id: str,
    user_id: str = Depends(get_user_id),
    services: MediaServices = Depends(get_services),
):
    """Enroll the caller. Enrolling twice is allowed."""
    skill = _get_skill(skill_id)
    services.enrollments.enroll(user_id, skill.id)
    return {"ok": True, "enrolled": True, "userId": user_id, "skillId": skill.id}


@router.get("/{skill_id}/progress")
async def get_skill_progress(
    skill_id: str,
    user_id: str = Depends(get_user_id),
    services: MediaServices = Depends(get_services),
):
    """Get the caller's progress over the lessons of a skill."""
    skill = _get_skill(skill_id)
    return _progress_response(services, user_id, skill)


@router.post("/{skill_id}/progress")
async def update_skill_progress(
    skill_id: str,
    update: SkillProgressUpdate,
    user_id: str = Depends(get_user_id),
    services: MediaServices = Depends(get_services),
):
    """Record watched/completed/score for one lesson of a skill."""
    skill = _get_skill(skill_id)
    services.progress.mark(
        user_id,
        update.lessonId,
        watched=update.watched,
        completed=update.completed,
        score=update.score,
        scope=_scope(skill),
    )
    return {"ok": True, **_progress_response(services, user_id, skill)}

# core/lessons/loader.py
"""Load lesson definitions from the demo content JSON file."""

import json
import re
from pathlib import Path

from .types import Lesson


class LessonNotFoundError(Exception):
    """Raised when a lesson cannot be found."""
    pass


# Path to lesson JSON (educational_content at project root)
LESSONS_FILE = Path(__file__).parent.parent.parent / "educational_content" / "lessons.json"

SUMMARY_MAX_CHARS = 160
DEFAULT_SUMMARY = "A quick, practical micro-lesson to boost your skills."
DEFAULT_TAKEAWAYS = (
    "Understand the concept",
    "Apply it quickly",
    "Avoid common pitfalls",
)
MIN_DURATION_SECONDS = 30

_SENTENCE_SPLIT = re.compile(r"[.?!]")


def summary_from(text: str | None) -> str:
    """Trim a description to a short summary."""
    if not text:
        return DEFAULT_SUMMARY
    s = text.strip()
    if len(s) > SUMMARY_MAX_CHARS:
        return s[: SUMMARY_MAX_CHARS - 3] + "..."
    return s


def takeaways_from(text: str | None) -> tuple[str, ...]:
    """First three sentences of a description, or generic takeaways."""
    if not text:
        return DEFAULT_TAKEAWAYS
    parts = [p.strip() for p in _SENTENCE_SPLIT.split(text) if p.strip()][:3]
    return tuple(parts) if parts else DEFAULT_TAKEAWAYS


def _parse_lesson(data: dict) -> Lesson:
    """Parse a lesson dict into a Lesson dataclass, filling derived fields."""
    description = data.get("description", "")

    if "durationSeconds" in data:
        duration = int(data["durationSeconds"])
    else:
        # "duration" is given in minutes
        duration = max(MIN_DURATION_SECONDS, int(data.get("duration") or 1) * 60)

    return Lesson(
        id=data["id"],
        title=data.get("title", ""),
        description=description,
        summary=data.get("summary") or summary_from(description),
        tags=tuple(data.get("tags", [])),
        duration_seconds=duration,
        video_url=data.get("videoUrl"),
        thumbnail=data.get("thumbnail"),
        takeaways=tuple(data.get("takeaways") or takeaways_from(description)),
        cta=data.get("cta", "Start Lesson"),
    )


def load_lessons(path: Path | None = None) -> list[Lesson]:
    """
    Load all lessons in file order.

    Args:
        path: Override for the lessons JSON file

    Returns:
        List of Lesson dataclasses (empty if the file doesn't exist)
    """
    lessons_path = path or LESSONS_FILE

    if not lessons_path.exists():
        return []

    with open(lessons_path, encoding="utf-8") as f:
        data = json.load(f)

    return [_parse_lesson(item) for item in data["lessons"]]


def load_lesson(lesson_id: str, path: Path | None = None) -> Lesson:
    """
    Load a lesson by ID.

    Raises:
        LessonNotFoundError: If no lesson has this ID
    """
    for lesson in load_lessons(path):
        if lesson.id == lesson_id:
            return lesson
    raise LessonNotFoundError(f"Lesson not found: {lesson_id}")


def get_available_lessons(path: Path | None = None) -> list[str]:
    """Get list of available lesson IDs."""
    return [lesson.id for lesson in load_lessons(path)]

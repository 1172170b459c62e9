"""Lesson management module."""

from .types import (
    Lesson,
    ProgressRecord,
)
from .loader import (
    LessonNotFoundError,
    load_lesson,
    load_lessons,
    get_available_lessons,
)
from .progress import ProgressStore

__all__ = [
    "Lesson",
    "ProgressRecord",
    "LessonNotFoundError",
    "load_lesson",
    "load_lessons",
    "get_available_lessons",
    "ProgressStore",
]

"""
Type definitions for lessons and learner progress.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Lesson:
    """A single micro lesson as listed in the feed."""
    id: str
    title: str
    description: str = ""
    summary: str = ""
    tags: tuple[str, ...] = ()
    duration_seconds: int | None = None
    video_url: str | None = None  # None means resolve by title/id
    thumbnail: str | None = None
    takeaways: tuple[str, ...] = ()
    cta: str = "Start Lesson"


@dataclass
class ProgressRecord:
    """Progress of one learner on one lesson."""
    lesson_id: str
    watched: bool = False
    completed: bool = False
    score: float | None = None
    updated_at: datetime = field(default_factory=datetime.now)

"""In-memory learner progress.

Watched/completed flags are sticky: once set they are never cleared by a
later update. Records live in a scope: the lesson feed uses the default
scope, each skill uses its own id. Nothing is persisted across restarts.
"""

import logging
from datetime import datetime

from .types import ProgressRecord

logger = logging.getLogger(__name__)

POINTS_PER_COMPLETION = 10
FEED_SCOPE = "lessons"


class ProgressStore:
    """Per-user lesson progress keyed by (user_id, scope) then lesson_id."""

    def __init__(self):
        self._records: dict[tuple[str, str], dict[str, ProgressRecord]] = {}

    def mark(
        self,
        user_id: str,
        lesson_id: str,
        *,
        watched: bool = False,
        completed: bool = False,
        score: float | None = None,
        scope: str = FEED_SCOPE,
    ) -> ProgressRecord:
        """Create or update a progress record and return it."""
        by_lesson = self._records.setdefault((user_id, scope), {})
        record = by_lesson.get(lesson_id)
        if record is None:
            record = ProgressRecord(lesson_id=lesson_id)
            by_lesson[lesson_id] = record

        record.watched = record.watched or watched
        record.completed = record.completed or completed
        if score is not None:
            record.score = score
        record.updated_at = datetime.now()

        logger.info(
            f"Progress for {user_id}/{scope}/{lesson_id}: "
            f"watched={record.watched} completed={record.completed}"
        )
        return record

    def get(self, user_id: str, scope: str = FEED_SCOPE) -> list[ProgressRecord]:
        """All records for a user in one scope, in insertion order."""
        return list(self._records.get((user_id, scope), {}).values())

    def updated_at(self, user_id: str, scope: str = FEED_SCOPE) -> datetime | None:
        records = self.get(user_id, scope)
        return max((r.updated_at for r in records), default=None)

    def stats(self, user_id: str, lesson_ids: list[str], scope: str = FEED_SCOPE) -> dict:
        """
        Summarise progress over a set of lessons.

        Returns dict: {"watched", "completed", "overall", "total_lessons", "points"}
        where overall is the completed percentage, rounded.
        """
        by_lesson = self._records.get((user_id, scope), {})
        watched = sum(1 for lid in lesson_ids if lid in by_lesson and by_lesson[lid].watched)
        completed = sum(
            1 for lid in lesson_ids if lid in by_lesson and by_lesson[lid].completed
        )
        total = len(lesson_ids)
        overall = round(completed / total * 100) if total else 0
        return {
            "watched": watched,
            "completed": completed,
            "overall": overall,
            "total_lessons": total,
            "points": completed * POINTS_PER_COMPLETION,
        }

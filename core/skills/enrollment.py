"""In-memory skill enrollments. Nothing is persisted across restarts."""

import logging

logger = logging.getLogger(__name__)


class EnrollmentStore:
    """Which skills each user is enrolled in. Enrolling twice is a no-op."""

    def __init__(self):
        self._by_user: dict[str, set[str]] = {}

    def enroll(self, user_id: str, skill_id: str) -> None:
        skills = self._by_user.setdefault(user_id, set())
        if skill_id not in skills:
            skills.add(skill_id)
            logger.info(f"User {user_id} enrolled in {skill_id}")

    def is_enrolled(self, user_id: str, skill_id: str) -> bool:
        return skill_id in self._by_user.get(user_id, set())

    def skills_for(self, user_id: str) -> list[str]:
        return sorted(self._by_user.get(user_id, set()))

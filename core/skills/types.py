"""
Type definitions for the skills catalogue.
"""

from dataclasses import dataclass
from typing import Literal

SkillLevel = Literal["beginner", "intermediate", "advanced"]
SKILL_LEVELS: tuple[str, ...] = ("beginner", "intermediate", "advanced")


@dataclass(frozen=True)
class SkillLesson:
    """A lesson inside a skill. Duration is in minutes."""
    id: str
    title: str
    duration: int = 0


@dataclass(frozen=True)
class Skill:
    """A micro skill: a short, ordered bundle of lessons."""
    id: str
    title: str
    brief: str = ""
    duration: int = 0  # minutes
    level: SkillLevel = "beginner"
    tags: tuple[str, ...] = ()
    description: str = ""
    lessons: tuple[SkillLesson, ...] = ()

    @property
    def lesson_ids(self) -> list[str]:
        return [lesson.id for lesson in self.lessons]

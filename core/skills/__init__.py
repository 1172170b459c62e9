"""Micro skills: a catalogue of short lesson bundles learners enroll in."""

from .types import Skill, SkillLesson, SKILL_LEVELS
from .loader import (
    SkillNotFoundError,
    load_skill,
    load_skills,
    search_skills,
)
from .enrollment import EnrollmentStore

__all__ = [
    "Skill",
    "SkillLesson",
    "SKILL_LEVELS",
    "SkillNotFoundError",
    "load_skill",
    "load_skills",
    "search_skills",
    "EnrollmentStore",
]

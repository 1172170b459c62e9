# core/skills/loader.py
"""Load and filter the skills catalogue from the demo content JSON file."""

import json
from pathlib import Path

from .types import Skill, SkillLesson


class SkillNotFoundError(Exception):
    """Raised when a skill cannot be found."""
    pass


# Path to skills JSON (educational_content at project root)
SKILLS_FILE = Path(__file__).parent.parent.parent / "educational_content" / "skills.json"


def _parse_skill(data: dict) -> Skill:
    return Skill(
        id=data["id"],
        title=data.get("title", ""),
        brief=data.get("brief", ""),
        duration=int(data.get("duration") or 0),
        level=data.get("level", "beginner"),
        tags=tuple(data.get("tags", [])),
        description=data.get("description", ""),
        lessons=tuple(
            SkillLesson(
                id=item["id"],
                title=item.get("title", ""),
                duration=int(item.get("duration") or 0),
            )
            for item in data.get("lessons", [])
        ),
    )


def load_skills(path: Path | None = None) -> list[Skill]:
    """
    Load all skills in file order.

    Returns:
        List of Skill dataclasses (empty if the file doesn't exist)
    """
    skills_path = path or SKILLS_FILE

    if not skills_path.exists():
        return []

    with open(skills_path, encoding="utf-8") as f:
        data = json.load(f)

    return [_parse_skill(item) for item in data["skills"]]


def load_skill(skill_id: str, path: Path | None = None) -> Skill:
    """
    Load a skill by ID.

    Raises:
        SkillNotFoundError: If no skill has this ID
    """
    for skill in load_skills(path):
        if skill.id == skill_id:
            return skill
    raise SkillNotFoundError(f"Skill not found: {skill_id}")


def search_skills(
    search: str = "",
    level: str | None = None,
    tag: str | None = None,
    path: Path | None = None,
) -> list[Skill]:
    """
    Filter the catalogue.

    Args:
        search: Case-insensitive substring of the title, brief or any tag
        level: Exact level match
        tag: Case-insensitive exact tag match
    """
    skills = load_skills(path)

    query = (search or "").strip().lower()
    if query:
        skills = [
            s for s in skills
            if query in s.title.lower()
            or query in s.brief.lower()
            or any(query in t.lower() for t in s.tags)
        ]
    if level:
        skills = [s for s in skills if s.level == level]
    if tag:
        wanted = tag.strip().lower()
        skills = [s for s in skills if any(t.lower() == wanted for t in s.tags)]
    return skills

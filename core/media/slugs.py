# core/media/slugs.py
"""Derive canonical asset slugs from lesson titles and ids."""

import json
import logging
import re
import unicodedata

from core.lessons.types import Lesson

logger = logging.getLogger(__name__)


# Slugs that may exist as asset filenames even when no lesson title maps to them
KNOWN_ALIAS_SLUGS = (
    "quick-inbox-zero",
    "focus-sprints",
    "g-m-a-formula",
    "five-minute-map",
    "4-4-6-reset",
    "memory-ladder",
    "micro-leadership-tips",
)

DEFAULT_AUDIO_TITLE_MAP = {
    "Inbox Zero in Minutes": "quick-inbox-zero",
    "Inbox Zero": "quick-inbox-zero",
    "60-Second Focus Reset": "4-4-6-reset",
    "4-4 Breathing Reset": "4-4-6-reset",
    "The Two-Minute Rule": "two-minute-rule",
    "Make a Clear Ask": "clear-ask",
    "Feedback in 30 Seconds": "feedback-fast",
    "Make It Obvious": "atomic-habit",
    "Async Standups That Work": "async-standup",
}

DEFAULT_VIDEO_TITLE_MAP = {
    "Inbox Zero in Minutes": "quick-inbox-zero",
    "Inbox Zero": "quick-inbox-zero",
    "Focus Sprints": "focus-sprints",
    "G-M-A Formula": "g-m-a-formula",
    "Five-Minute Map": "five-minute-map",
    "60-Second Focus Reset": "4-4-6-reset",
    "The 4-4-6 Reset": "4-4-6-reset",
    "Memory Ladder": "memory-ladder",
    "Micro Leadership Tips": "micro-leadership-tips",
}

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9 -]")
_DASHES = re.compile(r"-+")


def to_slug(value: str | None) -> str:
    """Create a canonical slug from a free-form string.

    Examples:
        "Inbox Zero in Minutes!" -> "inbox-zero-in-minutes"
        "  Füß  " -> "fuss"
        "G-M-A Formula" -> "g-m-a-formula"
    """
    if not value:
        return ""
    # casefold() rather than lower() so that "ß" becomes "ss"
    lowered = _WHITESPACE.sub(" ", str(value).casefold().strip())
    decomposed = unicodedata.normalize("NFD", lowered)
    no_accents = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = _DISALLOWED.sub("", no_accents)
    dashed = _DASHES.sub("-", _WHITESPACE.sub("-", cleaned))
    return dashed.strip("-")


def parse_title_map(raw: str | None) -> dict[str, str]:
    """Parse a JSON title -> slug override table. Bad input yields {}."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse title map JSON; ignoring: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning("Title map must be a JSON object; ignoring")
        return {}
    return {str(k): str(v) for k, v in data.items()}


class SlugResolver:
    """Builds ordered candidate slugs for a lesson.

    Priority: alias table hit on the title, normalized title, normalized id,
    then the known alias slugs. The result only depends on the lesson and
    the tables, so repeated calls give the same order.
    """

    def __init__(
        self,
        title_map: dict[str, str] | None = None,
        overrides: dict[str, str] | None = None,
        known_aliases: tuple[str, ...] = KNOWN_ALIAS_SLUGS,
    ):
        self.title_map = {**(title_map or {}), **(overrides or {})}
        self.known_aliases = known_aliases

    def registry_slug(self, lesson: Lesson) -> str | None:
        title = lesson.title or ""
        return self.title_map.get(title) or self.title_map.get(title.strip())

    def primary_slug(self, lesson: Lesson) -> str:
        """The single slug reported for a lesson (registry, title, then id)."""
        return self.registry_slug(lesson) or to_slug(lesson.title) or to_slug(lesson.id)

    def candidates(self, lesson: Lesson) -> list[str]:
        ordered: list[str] = []

        def push(slug: str | None) -> None:
            if slug and slug not in ordered:
                ordered.append(slug)

        push(self.registry_slug(lesson))
        push(to_slug(lesson.title))
        push(to_slug(lesson.id))
        for alias in self.known_aliases:
            push(alias)
        return ordered


def audio_slug_resolver(overrides: dict[str, str] | None = None) -> SlugResolver:
    return SlugResolver(DEFAULT_AUDIO_TITLE_MAP, overrides)


def video_slug_resolver(overrides: dict[str, str] | None = None) -> SlugResolver:
    return SlugResolver(DEFAULT_VIDEO_TITLE_MAP, overrides)

# core/media/captions.py
"""Caption cues: parsing, synthesis and selection by playback time.

Cue sources, best first:
1. WebVTT or captions JSON published next to the media
2. Plain-text transcript, one line per cue
3. Sentences from the lesson description / summary / title

Sources 2 and 3 have no timing, so cues are synthesized in fixed windows.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from functools import partial
from typing import Literal

import httpx

from core.lessons.types import Lesson

from .strategies import first_success
from .types import Cue, Notice, Notify, ResolvedMediaSet

logger = logging.getLogger(__name__)

CUE_WINDOW_S = 3.0
CUE_DWELL_S = 2.8
MAX_FALLBACK_LINES = 8

# "00:01:02.500" or "01:02.500" (comma accepted for SRT-style files)
_TS = r"(?:(\d+):)?(\d{2}):(\d{2})[.,](\d{3})"
CUE_TIMING_PATTERN = re.compile(rf"{_TS}\s+-->\s+{_TS}")
_TAG_PATTERN = re.compile(r"<[^>]+>")
_SENTENCE_SPLIT = re.compile(r"[.?!]")

CaptionSource = Literal["vtt", "json", "text", "lesson", "none"]


@dataclass
class CaptionTrack:
    """Cues plus where they came from."""
    source: CaptionSource
    cues: list[Cue] = field(default_factory=list)


def active_cue(cues: list[Cue], t: float) -> str:
    """
    Text of the first cue whose [start, end] contains t, else "".

    Overlapping cues resolve to whichever comes first in the list.
    """
    for cue in cues:
        if cue.start <= t <= cue.end:
            return cue.text
    return ""


def _seconds(hours: str | None, minutes: str, seconds: str, millis: str) -> float:
    return int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds) + int(millis) / 1000


def parse_vtt(content: str) -> list[Cue]:
    """
    Parse WebVTT content into cues.

    Blocks without a timing line (header, NOTE, STYLE, REGION) are skipped.
    Voice/formatting tags are stripped and multi-line text is joined.
    """
    cues: list[Cue] = []
    normalized = content.replace("\r\n", "\n").replace("\r", "\n")

    for block in normalized.strip().split("\n\n"):
        lines = [line for line in block.strip().split("\n") if line.strip()]
        timing_idx = next(
            (i for i, line in enumerate(lines) if CUE_TIMING_PATTERN.search(line)), None
        )
        if timing_idx is None:
            continue

        match = CUE_TIMING_PATTERN.search(lines[timing_idx])
        start = _seconds(*match.group(1, 2, 3, 4))
        end = _seconds(*match.group(5, 6, 7, 8))
        text = " ".join(
            _TAG_PATTERN.sub("", line).strip() for line in lines[timing_idx + 1 :]
        ).strip()
        if text:
            cues.append(Cue(start=start, end=end, text=text))

    return cues


def parse_captions_json(data) -> list[Cue]:
    """
    Parse a captions JSON document.

    Accepts a list of {"start", "end", "text"} objects or an object with a
    "cues" list. Malformed entries are skipped.
    """
    items = data.get("cues", []) if isinstance(data, dict) else data
    if not isinstance(items, list):
        return []

    cues: list[Cue] = []
    for item in items:
        try:
            cues.append(
                Cue(start=float(item["start"]), end=float(item["end"]), text=str(item["text"]))
            )
        except (KeyError, TypeError, ValueError):
            logger.debug(f"Skipping malformed caption entry: {item!r}")
    return cues


def cues_from_lines(lines: list[str]) -> list[Cue]:
    """Synthesize cues: line i shows from i*3s for 2.8s."""
    return [
        Cue(start=i * CUE_WINDOW_S, end=i * CUE_WINDOW_S + CUE_DWELL_S, text=line)
        for i, line in enumerate(lines)
    ]


def transcript_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def fallback_caption_lines(lesson: Lesson) -> list[str]:
    """Sentences of the lesson description (or summary, or title), at most 8."""
    source = (lesson.description or lesson.summary or lesson.title or "").strip()
    if not source:
        return []
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(source) if s.strip()]
    return sentences[:MAX_FALLBACK_LINES]


class CaptionLoader:
    """Fetches and parses the best available cue source for a lesson."""

    def __init__(self, client: httpx.AsyncClient, notify: Notify | None = None):
        self.client = client
        self.notify = notify

    async def _fetch(self, url: str) -> str | None:
        """GET a caption resource; failures become a notice and None."""
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Caption fetch failed for {url}: {e}")
            if self.notify:
                self.notify(Notice("error", "Could not load captions"))
            return None
        return response.text

    async def _from_vtt(self, url: str | None) -> CaptionTrack | None:
        if not url:
            return None
        content = await self._fetch(url)
        cues = parse_vtt(content) if content else []
        return CaptionTrack("vtt", cues) if cues else None

    async def _from_json(self, url: str | None) -> CaptionTrack | None:
        if not url:
            return None
        content = await self._fetch(url)
        if not content:
            return None
        try:
            cues = parse_captions_json(json.loads(content))
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid captions JSON at {url}: {e}")
            return None
        return CaptionTrack("json", cues) if cues else None

    async def _from_text(self, url: str | None) -> CaptionTrack | None:
        if not url:
            return None
        content = await self._fetch(url)
        lines = transcript_lines(content) if content else []
        return CaptionTrack("text", cues_from_lines(lines)) if lines else None

    async def _from_lesson(self, lesson: Lesson) -> CaptionTrack | None:
        lines = fallback_caption_lines(lesson)
        return CaptionTrack("lesson", cues_from_lines(lines)) if lines else None

    async def load(self, media: ResolvedMediaSet, lesson: Lesson) -> CaptionTrack:
        track = await first_success(
            [
                partial(self._from_vtt, media.captions_vtt_url),
                partial(self._from_json, media.captions_json_url),
                partial(self._from_text, media.text_url),
                partial(self._from_lesson, lesson),
            ]
        )
        if track is None:
            return CaptionTrack("none")
        logger.debug(f"Loaded {len(track.cues)} {track.source} cues for {lesson.id}")
        return track

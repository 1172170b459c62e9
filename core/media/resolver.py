# core/media/resolver.py
"""Resolve a lesson to its video, audio and caption assets.

Video and audio are resolved independently (each with its own alias table)
and in parallel. Results are cached per lesson id for the lifetime of the
resolver; concurrent requests for the same lesson share one probe sequence.
"""

import asyncio
import dataclasses
import logging

from core.lessons.types import Lesson

from .probe import AUDIO_BASE, CAPTIONS_JSON_BASE, AssetKind, AssetProber, candidate_urls
from .slugs import SlugResolver, audio_slug_resolver, video_slug_resolver
from .types import AudioAssets, ResolvedMediaSet, VideoAssets

logger = logging.getLogger(__name__)


# Direct lesson id -> file mappings for assets published before slug resolution
LEGACY_AUDIO_FILES = {
    "focus-60": "focus-60.mp3",
    "inbox-zero": "inbox-zero.mp3",
    "clear-ask": "clear-ask.mp3",
    "two-minute-rule": "two-minute-rule.mp3",
    "feedback-fast": "feedback-fast.mp3",
    "atomic-habit": "atomic-habit.mp3",
    "async-standup": "async-standup.mp3",
}

LEGACY_CAPTION_FILES = {
    lesson_id: f"{lesson_id}.captions.json" for lesson_id in LEGACY_AUDIO_FILES
}


def legacy_audio_url(lesson: Lesson, base: str = "") -> str | None:
    file = LEGACY_AUDIO_FILES.get(lesson.id)
    return f"{base.rstrip('/')}{AUDIO_BASE}/{file}" if file else None


def legacy_captions_url(lesson: Lesson, base: str = "") -> str | None:
    file = LEGACY_CAPTION_FILES.get(lesson.id)
    return f"{base.rstrip('/')}{CAPTIONS_JSON_BASE}/{file}" if file else None


class MediaResolver:
    """Maps lessons to a ResolvedMediaSet by probing the static asset host."""

    def __init__(
        self,
        prober: AssetProber,
        *,
        video_slugs: SlugResolver | None = None,
        audio_slugs: SlugResolver | None = None,
        base_url: str = "",
    ):
        self.prober = prober
        self.video_slugs = video_slugs or video_slug_resolver()
        self.audio_slugs = audio_slugs or audio_slug_resolver()
        self.base_url = base_url
        self._cache: dict[str, ResolvedMediaSet] = {}
        self._inflight: dict[str, asyncio.Task] = {}

    async def resolve_video(self, lesson: Lesson) -> VideoAssets:
        """Probe video, poster and WebVTT captions for a lesson."""
        slugs = self.video_slugs.candidates(lesson)
        logger.debug(f"Probing video candidates for {lesson.id}: {slugs}")

        video_url, poster_url, captions_vtt_url = await asyncio.gather(
            self.prober.probe_kind(AssetKind.VIDEO, slugs, self.base_url),
            self.prober.probe_kind(AssetKind.POSTER, slugs, self.base_url),
            self.prober.probe_kind(AssetKind.CAPTIONS_VTT, slugs, self.base_url),
        )

        if not video_url:
            logger.info(f"No video found for {lesson.id!r}; falling back to audio")

        return VideoAssets(
            slug=self.video_slugs.primary_slug(lesson),
            video_url=video_url,
            poster_url=poster_url,
            captions_vtt_url=captions_vtt_url,
        )

    async def resolve_audio(self, lesson: Lesson) -> AudioAssets:
        """Probe mp3, SSML, text transcript and captions JSON for a lesson."""
        slugs = self.audio_slugs.candidates(lesson)
        base = self.base_url

        legacy_mp3 = legacy_audio_url(lesson, base)
        legacy_captions = legacy_captions_url(lesson, base)
        mp3_urls = ([legacy_mp3] if legacy_mp3 else []) + candidate_urls(
            AssetKind.AUDIO, slugs, base
        )
        captions_urls = ([legacy_captions] if legacy_captions else []) + candidate_urls(
            AssetKind.CAPTIONS_JSON, slugs, base
        )

        audio_url, ssml_url, text_url, captions_json_url = await asyncio.gather(
            self.prober.probe_first(mp3_urls, ranged=True),
            self.prober.probe_kind(AssetKind.SSML, slugs, base),
            self.prober.probe_kind(AssetKind.TEXT, slugs, base),
            self.prober.probe_first(captions_urls),
        )

        if not any((audio_url, ssml_url, text_url, captions_json_url)):
            logger.info(f"No audio assets found for {lesson.id!r}")

        return AudioAssets(
            slug=self.audio_slugs.primary_slug(lesson),
            audio_url=audio_url,
            ssml_url=ssml_url,
            text_url=text_url,
            captions_json_url=captions_json_url,
        )

    async def _resolve_uncached(self, lesson: Lesson) -> ResolvedMediaSet:
        video, audio = await asyncio.gather(
            self.resolve_video(lesson), self.resolve_audio(lesson)
        )
        media = ResolvedMediaSet(
            slug=video.slug or audio.slug,
            video_url=lesson.video_url or video.video_url,
            poster_url=lesson.thumbnail or video.poster_url,
            captions_vtt_url=video.captions_vtt_url,
            audio_url=audio.audio_url,
            captions_json_url=audio.captions_json_url,
            text_url=audio.text_url,
            ssml_url=audio.ssml_url,
        )
        self._cache[lesson.id] = media
        return media

    async def resolve(self, lesson: Lesson) -> ResolvedMediaSet:
        """
        Resolve every asset of a lesson, using the per-lesson cache.

        A caller being cancelled does not cancel the shared probe task, so
        other callers waiting on the same lesson still get the result.
        """
        cached = self._cache.get(lesson.id)
        if cached is not None:
            return cached

        task = self._inflight.get(lesson.id)
        if task is None:
            task = asyncio.create_task(
                self._resolve_uncached(lesson), name=f"resolve-{lesson.id}"
            )
            self._inflight[lesson.id] = task
            task.add_done_callback(lambda _t, key=lesson.id: self._inflight.pop(key, None))

        return await asyncio.shield(task)

    def cached(self, lesson_id: str) -> ResolvedMediaSet | None:
        return self._cache.get(lesson_id)

    def clear(self) -> None:
        self._cache.clear()

    async def attach_video(self, lesson: Lesson) -> Lesson:
        """Return a copy of the lesson with missing video_url/thumbnail filled in."""
        if lesson.video_url and lesson.thumbnail:
            return lesson
        media = await self.resolve(lesson)
        return dataclasses.replace(
            lesson,
            video_url=lesson.video_url or media.video_url,
            thumbnail=lesson.thumbnail or media.poster_url,
        )

# core/media/probe.py
"""Existence probing for optional media assets.

Assets are discovered without a manifest: for each candidate URL we ask the
static host whether the file exists. A miss is the normal "asset absent"
signal, never an error.
"""

import logging
from enum import Enum
from functools import partial

import httpx

from .strategies import first_success

logger = logging.getLogger(__name__)

# Bytes requested by the ranged GET fallback for large media files
RANGE_HEADER = {"Range": "bytes=0-255"}
NO_STORE = {"Cache-Control": "no-store"}


class AssetKind(str, Enum):
    VIDEO = "video"
    POSTER = "poster"
    CAPTIONS_VTT = "captions_vtt"
    AUDIO = "audio"
    SSML = "ssml"
    TEXT = "text"
    CAPTIONS_JSON = "captions_json"


VIDEO_BASE = "/assets/video/mp4"
THUMB_BASE = "/assets/video/thumb"
CAPTIONS_VTT_BASE = "/assets/captions"
AUDIO_BASE = "/assets/audio/mp3"
SSML_BASE = "/assets/audio/ssml"
TEXT_BASE = "/assets/audio/text"
CAPTIONS_JSON_BASE = "/assets/audio/captions"

# Path templates per kind, tried in order for each slug
PATH_TEMPLATES: dict[AssetKind, tuple[str, ...]] = {
    AssetKind.VIDEO: (VIDEO_BASE + "/{slug}.mp4",),
    AssetKind.POSTER: (
        THUMB_BASE + "/{slug}.jpg",
        THUMB_BASE + "/{slug}.png",
    ),
    AssetKind.CAPTIONS_VTT: (CAPTIONS_VTT_BASE + "/{slug}.vtt",),
    AssetKind.AUDIO: (AUDIO_BASE + "/{slug}.mp3",),
    AssetKind.SSML: (SSML_BASE + "/{slug}.ssml",),
    AssetKind.TEXT: (TEXT_BASE + "/{slug}.txt",),
    AssetKind.CAPTIONS_JSON: (CAPTIONS_JSON_BASE + "/{slug}.captions.json",),
}

# Kinds large enough that the GET fallback should only ask for a byte range
RANGED_KINDS = frozenset({AssetKind.VIDEO, AssetKind.AUDIO})


def asset_path(kind: AssetKind, slug: str, base: str = "") -> str:
    """Primary URL for a kind/slug pair."""
    return base.rstrip("/") + PATH_TEMPLATES[kind][0].format(slug=slug)


def candidate_urls(kind: AssetKind, slugs: list[str], base: str = "") -> list[str]:
    """
    Build ordered candidate URLs for one asset kind.

    Args:
        kind: Asset kind (selects the path templates)
        slugs: Candidate slugs in priority order
        base: Optional origin prefix, e.g. "http://localhost:3001"

    Returns:
        URLs grouped by slug, so every template of the first slug comes
        before any template of the second.
    """
    prefix = base.rstrip("/")
    return [
        prefix + template.format(slug=slug)
        for slug in slugs
        for template in PATH_TEMPLATES[kind]
    ]


class AssetProber:
    """HEAD -> ranged GET -> GET existence checks over a shared HTTP client."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _head(self, url: str) -> bool:
        try:
            response = await self.client.head(url, headers=NO_STORE)
        except httpx.HTTPError as e:
            logger.debug(f"HEAD {url} failed: {e}")
            return False
        return response.is_success

    async def _get(self, url: str, headers: dict[str, str]) -> bool:
        # Stream so the body is never downloaded; the status line is enough
        try:
            async with self.client.stream(
                "GET", url, headers={**NO_STORE, **headers}
            ) as response:
                return response.is_success or response.status_code == 206
        except httpx.HTTPError as e:
            logger.debug(f"GET {url} failed: {e}")
            return False

    async def exists(self, url: str, *, ranged: bool = False) -> bool:
        """True if the host reports the URL as present (2xx, or 206 for ranges)."""
        if await self._head(url):
            return True
        if ranged and await self._get(url, RANGE_HEADER):
            return True
        return await self._get(url, {})

    async def _check(self, url: str, ranged: bool) -> str | None:
        return url if await self.exists(url, ranged=ranged) else None

    async def probe_first(self, urls: list[str], *, ranged: bool = False) -> str | None:
        """
        Return the first existing URL, probing strictly in order.

        Stops at the first hit, so later candidates are never requested.
        """
        found = await first_success(partial(self._check, url, ranged) for url in urls)
        if found:
            logger.debug(f"Probe hit: {found}")
        return found

    async def probe_kind(
        self, kind: AssetKind, slugs: list[str], base: str = ""
    ) -> str | None:
        """Probe every candidate URL of one kind."""
        return await self.probe_first(
            candidate_urls(kind, slugs, base), ranged=kind in RANGED_KINDS
        )

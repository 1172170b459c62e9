"""
Application-scoped media services.

Built once per app (see main.py lifespan) and handed to routes through the
`get_services` dependency, so tests can swap them with
`app.dependency_overrides`.
"""

from dataclasses import dataclass

import httpx
from fastapi import Header, Request

from core.config import get_audio_title_map, get_settings_path, get_video_title_map
from core.lessons import ProgressStore
from core.media.captions import CaptionLoader
from core.media.probe import AssetProber
from core.media.resolver import MediaResolver
from core.media.settings import SettingsStore
from core.media.slugs import audio_slug_resolver, video_slug_resolver
from core.skills import EnrollmentStore

ANONYMOUS_USER = "anon"


@dataclass
class MediaServices:
    client: httpx.AsyncClient
    resolver: MediaResolver
    captions: CaptionLoader
    progress: ProgressStore
    settings: SettingsStore
    enrollments: EnrollmentStore


def build_services(
    client: httpx.AsyncClient, settings: SettingsStore | None = None
) -> MediaServices:
    """Wire resolver, caption loader and stores around one HTTP client."""
    resolver = MediaResolver(
        AssetProber(client),
        video_slugs=video_slug_resolver(get_video_title_map()),
        audio_slugs=audio_slug_resolver(get_audio_title_map()),
    )
    return MediaServices(
        client=client,
        resolver=resolver,
        captions=CaptionLoader(client),
        progress=ProgressStore(),
        settings=settings or SettingsStore(get_settings_path()),
        enrollments=EnrollmentStore(),
    )


def get_services(request: Request) -> MediaServices:
    return request.app.state.services


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """The caller, from the X-User-Id header ("anon" when absent or blank)."""
    return (x_user_id or "").strip() or ANONYMOUS_USER

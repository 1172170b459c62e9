"""
Type definitions for media resolution and playback.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Literal


@dataclass(frozen=True)
class VideoAssets:
    """Video-side assets found for a lesson."""
    slug: str
    video_url: str | None = None
    poster_url: str | None = None
    captions_vtt_url: str | None = None


@dataclass(frozen=True)
class AudioAssets:
    """Audio-side assets found for a lesson."""
    slug: str
    audio_url: str | None = None
    ssml_url: str | None = None
    text_url: str | None = None
    captions_json_url: str | None = None


@dataclass(frozen=True)
class ResolvedMediaSet:
    """Every asset URL resolved for one lesson. Absent assets are None."""
    slug: str
    video_url: str | None = None
    poster_url: str | None = None
    captions_vtt_url: str | None = None
    audio_url: str | None = None
    captions_json_url: str | None = None
    text_url: str | None = None
    ssml_url: str | None = None

    @property
    def has_video(self) -> bool:
        return self.video_url is not None

    @property
    def has_audio(self) -> bool:
        return self.audio_url is not None


@dataclass(frozen=True)
class Cue:
    """A timed caption fragment, offsets in seconds."""
    start: float
    end: float
    text: str


@dataclass(frozen=True)
class PlaybackSettings:
    audio_on: bool = True
    captions_on: bool = True
    autoplay_on: bool = True
    muted_by_default: bool = True


NoticeType = Literal["info", "success", "warning", "error"]


@dataclass(frozen=True)
class Notice:
    """User-facing toast."""
    type: NoticeType
    message: str


Notify = Callable[[Notice], None]


class PlaybackState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"
    DEGRADED = "degraded"
    UNMOUNTED = "unmounted"


class MediaMode(str, Enum):
    """Presentation tier, narrowest last."""
    VIDEO = "video"
    AUDIO_CAPTIONS = "audio_captions"
    CAPTIONS_ONLY = "captions_only"
    WAITING = "waiting"  # neutral "waiting for media" placeholder


class PlaybackBadge(str, Enum):
    NONE = "none"
    LOADING = "loading"
    BUFFERING = "buffering"
    ERROR = "error"

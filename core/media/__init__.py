"""Media resolution and playback policy for lesson cards."""

from .arbiter import PlaybackArbiter, guard
from .captions import CaptionLoader, CaptionTrack, active_cue, parse_vtt
from .clock import (
    AutoplayBlocked,
    MediaElement,
    MediaLoadError,
    PlaybackRejected,
)
from .feed import LessonFeed
from .policy import LessonPlayback, classify_rejection
from .probe import AssetKind, AssetProber, candidate_urls
from .resolver import MediaResolver
from .settings import SettingsStore
from .slugs import SlugResolver, to_slug
from .types import (
    Cue,
    MediaMode,
    Notice,
    PlaybackBadge,
    PlaybackSettings,
    PlaybackState,
    ResolvedMediaSet,
)

__all__ = [
    "PlaybackArbiter",
    "guard",
    "CaptionLoader",
    "CaptionTrack",
    "active_cue",
    "parse_vtt",
    "AutoplayBlocked",
    "MediaElement",
    "MediaLoadError",
    "PlaybackRejected",
    "LessonFeed",
    "LessonPlayback",
    "classify_rejection",
    "AssetKind",
    "AssetProber",
    "candidate_urls",
    "MediaResolver",
    "SettingsStore",
    "SlugResolver",
    "to_slug",
    "Cue",
    "MediaMode",
    "Notice",
    "PlaybackBadge",
    "PlaybackSettings",
    "PlaybackState",
    "ResolvedMediaSet",
]

"""Persisted playback toggles (audio / captions / autoplay / muted default).

Stored as a small camelCase JSON file. A missing or unreadable file means
defaults; it is never an error.
"""

import dataclasses
import json
import logging
from pathlib import Path

from .types import PlaybackSettings

logger = logging.getLogger(__name__)

_TO_JSON = {
    "audio_on": "audioOn",
    "captions_on": "captionsOn",
    "autoplay_on": "autoplayOn",
    "muted_by_default": "mutedByDefault",
}
# camelCase JSON key -> PlaybackSettings field
FROM_JSON_FIELDS = {v: k for k, v in _TO_JSON.items()}


def settings_to_dict(settings: PlaybackSettings) -> dict[str, bool]:
    return {_TO_JSON[k]: v for k, v in dataclasses.asdict(settings).items()}


def settings_from_dict(data: dict) -> PlaybackSettings:
    """Merge known keys over the defaults; unknown keys and non-bool values are ignored."""
    known = {
        FROM_JSON_FIELDS[k]: v
        for k, v in data.items()
        if k in FROM_JSON_FIELDS and isinstance(v, bool)
    }
    return PlaybackSettings(**known)


class SettingsStore:
    def __init__(self, path: Path):
        self.path = path

    def load(self) -> PlaybackSettings:
        if not self.path.exists():
            return PlaybackSettings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable settings at {self.path}; using defaults: {e}")
            return PlaybackSettings()
        if not isinstance(data, dict):
            return PlaybackSettings()
        return settings_from_dict(data)

    def save(self, settings: PlaybackSettings) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(settings_to_dict(settings)), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not save settings to {self.path}: {e}")

    def update(self, **changes: bool) -> PlaybackSettings:
        """Apply a partial update, persist it, and return the new settings."""
        updated = dataclasses.replace(self.load(), **changes)
        self.save(updated)
        return updated

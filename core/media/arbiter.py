# core/media/arbiter.py
"""Single-playback arbiter.

Keeps at most one registered handle playing. Every "play" event from a
registered handle pauses all the others in the same call, so exclusivity
holds as soon as the event has been processed.

One arbiter is created by the application root and passed to every player
that needs it; there is no module-level instance.
"""

import logging
from typing import Any, Iterable

from .clock import MediaElement, PlaybackRejected

logger = logging.getLogger(__name__)


def _safe_pause(handle: MediaElement) -> None:
    """Pause and ignore failures; pausing is expected to be safe."""
    try:
        handle.pause()
    except Exception as e:
        logger.debug(f"Ignoring pause failure on {handle!r}: {e}")


class PlaybackArbiter:
    """Registry of playable handles with a "currently active" pointer."""

    def __init__(self):
        # dict as an ordered set
        self._handles: dict[MediaElement, None] = {}
        self.current: MediaElement | None = None

    def __contains__(self, handle: MediaElement) -> bool:
        return handle in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    async def register(self, handle: MediaElement, play_immediately: bool = False) -> None:
        """
        Track a handle; optionally make it the only one playing.

        Play failures are logged and ignored here. Callers that need to react
        to a rejected play() should register without play_immediately and
        call play() themselves.
        """
        if handle not in self._handles:
            self._handles[handle] = None
            handle.on("play", self._on_play)
            handle.on("ended", self._on_ended)

        if not play_immediately:
            return

        self.pause_all_except(handle)
        try:
            await handle.play()
        except PlaybackRejected as e:
            logger.info(f"Arbiter play request rejected for {handle!r}: {e}")
            if self.current is handle:
                self.current = None
            return

        if handle not in self._handles:
            # Unregistered while play() was pending
            _safe_pause(handle)
            return
        self.current = handle

    def unregister(self, handle: MediaElement) -> None:
        if handle not in self._handles:
            return
        handle.off("play", self._on_play)
        handle.off("ended", self._on_ended)
        del self._handles[handle]
        if self.current is handle:
            self.current = None

    def pause_all(self) -> None:
        for handle in list(self._handles):
            _safe_pause(handle)
        self.current = None

    def pause_all_except(self, keep: MediaElement) -> None:
        for handle in list(self._handles):
            if handle is not keep:
                _safe_pause(handle)
        self.current = keep

    def playing_count(self) -> int:
        return sum(1 for handle in self._handles if handle.playing)

    def _on_play(self, handle: MediaElement, _payload: Any) -> None:
        if handle in self._handles:
            self.pause_all_except(handle)

    def _on_ended(self, handle: MediaElement, _payload: Any) -> None:
        if self.current is handle:
            self.current = None


def guard(handles: Iterable[MediaElement]) -> bool:
    """True if at most one of the handles is playing."""
    return sum(1 for handle in handles if handle.playing) <= 1

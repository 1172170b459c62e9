# core/media/clock.py
"""Playable media handles with an explicit event interface.

A MediaElement is the only thing the arbiter and the playback policy talk
to. Hosts bind it to a real player by subclassing and overriding `_start`
(to request playback) and `_stop`; tests and simulations drive the clock
directly with `tick`, `end`, `fail`, `ready` and `stall`.
"""

import logging
from typing import Any, Callable, Literal

logger = logging.getLogger(__name__)

MediaEvent = Literal["play", "pause", "timeupdate", "ended", "error", "canplay", "waiting"]
Listener = Callable[["MediaElement", Any], None]

EVENTS: tuple[str, ...] = (
    "play",
    "pause",
    "timeupdate",
    "ended",
    "error",
    "canplay",
    "waiting",
)


class PlaybackRejected(Exception):
    """play() was refused by the host (autoplay policy, decode failure, ...)."""
    pass


class AutoplayBlocked(PlaybackRejected):
    """play() was refused because it was not triggered by a user gesture."""
    pass


class MediaLoadError(PlaybackRejected):
    """The media source is missing or could not be loaded."""
    pass


class MediaElement:
    """A video or audio handle with play/pause state and event callbacks."""

    def __init__(self, kind: Literal["video", "audio"], src: str | None = None):
        self.kind = kind
        self.src = src
        self.paused = True
        self.muted = False
        self.ended = False
        self.current_time = 0.0
        self.error: str | None = None
        self._listeners: dict[str, list[Listener]] = {event: [] for event in EVENTS}

    def __repr__(self) -> str:
        return f"<MediaElement {self.kind} src={self.src!r} paused={self.paused}>"

    # --- Events ---

    def on(self, event: MediaEvent, listener: Listener) -> None:
        self._listeners[event].append(listener)

    def off(self, event: MediaEvent, listener: Listener) -> None:
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            pass

    def emit(self, event: MediaEvent, payload: Any = None) -> None:
        # Copy so listeners may detach themselves while being called
        for listener in list(self._listeners[event]):
            listener(self, payload)

    # --- Host hooks ---

    async def _start(self) -> None:
        """Ask the underlying player to start. Raise PlaybackRejected to refuse."""

    def _stop(self) -> None:
        """Ask the underlying player to stop."""

    # --- Commands ---

    @property
    def playing(self) -> bool:
        return not self.paused and not self.ended

    async def play(self) -> None:
        """
        Start playback and emit "play".

        Raises:
            MediaLoadError: If there is no source
            PlaybackRejected: If the host refuses to start
        """
        if not self.src:
            raise MediaLoadError(f"No {self.kind} source")
        await self._start()
        was_paused = self.paused
        self.paused = False
        self.ended = False
        if was_paused:
            self.emit("play")

    def pause(self) -> None:
        if self.paused:
            return
        self._stop()
        self.paused = True
        self.emit("pause")

    def load(self, src: str | None) -> None:
        """Swap the source and rewind."""
        if not self.paused:
            self.pause()
        self.src = src
        self.current_time = 0.0
        self.ended = False
        self.error = None

    # --- Clock inputs ---

    def tick(self, current_time: float) -> None:
        """Advance the playback clock (timeupdate)."""
        self.current_time = current_time
        self.emit("timeupdate", current_time)

    def end(self) -> None:
        self.paused = True
        self.ended = True
        self.emit("ended")

    def fail(self, message: str = "Media error") -> None:
        """Report a native media error."""
        self.error = message
        self.paused = True
        logger.debug(f"{self.kind} element error: {message}")
        self.emit("error", message)

    def ready(self) -> None:
        self.emit("canplay")

    def stall(self) -> None:
        self.emit("waiting")

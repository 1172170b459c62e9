# core/media/policy.py
"""Playback policy for one lesson card.

State machine:

    Idle -> Resolving -> Ready -> Playing <-> Paused
                                    |
                                    v
                                  Error -> Degraded

Presentation tiers, widest first: video, audio + captions, captions only,
then a neutral "waiting for media" placeholder. Every failure narrows the
tier; none of them is fatal.
"""

import asyncio
import logging
from typing import Any, Callable, Literal

from core.lessons.types import Lesson

from .arbiter import PlaybackArbiter
from .captions import (
    CaptionLoader,
    CaptionTrack,
    active_cue,
    cues_from_lines,
    fallback_caption_lines,
)
from .clock import AutoplayBlocked, MediaElement, MediaLoadError, PlaybackRejected
from .resolver import MediaResolver
from .types import (
    MediaMode,
    Notice,
    Notify,
    PlaybackBadge,
    PlaybackSettings,
    PlaybackState,
    ResolvedMediaSet,
)

logger = logging.getLogger(__name__)

WATCH_THRESHOLD_S = 20
DEFAULT_DURATION_S = 45

# Words browsers use when refusing play() without a user gesture
POLICY_HINTS = ("gesture", "autoplay", "user")

RejectionKind = Literal["policy-blocked", "load-failure"]


def classify_rejection(error: Exception) -> RejectionKind:
    """Tell an autoplay-policy refusal apart from a load failure."""
    if isinstance(error, AutoplayBlocked):
        return "policy-blocked"
    if isinstance(error, MediaLoadError):
        return "load-failure"
    message = str(error).lower()
    if any(hint in message for hint in POLICY_HINTS):
        return "policy-blocked"
    return "load-failure"


def watch_threshold(lesson: Lesson) -> float:
    """Seconds of playback after which a lesson counts as watched."""
    return min(lesson.duration_seconds or DEFAULT_DURATION_S, WATCH_THRESHOLD_S)


class LessonPlayback:
    """Drives the video and audio handles of one lesson card."""

    def __init__(
        self,
        lesson: Lesson,
        *,
        resolver: MediaResolver,
        arbiter: PlaybackArbiter,
        captions: CaptionLoader | None = None,
        settings: PlaybackSettings | None = None,
        video: MediaElement | None = None,
        audio: MediaElement | None = None,
        on_watched: Callable[[str], None] | None = None,
        notify: Notify | None = None,
        on_state: Callable[[PlaybackState], None] | None = None,
    ):
        self.lesson = lesson
        self.resolver = resolver
        self.arbiter = arbiter
        self.captions = captions
        self.settings = settings or PlaybackSettings()
        self.video = video or MediaElement("video")
        self.audio = audio or MediaElement("audio")
        self.on_watched = on_watched
        self.notify = notify
        self.on_state = on_state

        self.state = PlaybackState.IDLE
        self.mode = MediaMode.WAITING
        self.badge = PlaybackBadge.NONE
        self.media: ResolvedMediaSet | None = None
        self.track = CaptionTrack("none")
        self.caption_text = ""
        self.active = False
        self.muted = self.settings.muted_by_default
        self.blocked_by_policy = False
        self.degraded = False

        self._user_gesture = False
        self._video_failed = False
        self._audio_failed = False
        self._watched = False
        self._cancelled = False
        self._generation = 0
        self._pending: set[asyncio.Task] = set()

    # --- Lifecycle ---

    async def mount(self) -> None:
        """Resolve media and captions, then become Ready (and play if active)."""
        self._generation += 1
        generation = self._generation
        self._cancelled = False
        self._reset()
        self._attach()
        self.badge = PlaybackBadge.LOADING
        self._set_state(PlaybackState.RESOLVING)

        media = await self.resolver.resolve(self.lesson)
        if self.captions:
            track = await self.captions.load(media, self.lesson)
        else:
            track = CaptionTrack("lesson", cues_from_lines(fallback_caption_lines(self.lesson)))

        if self._cancelled or generation != self._generation:
            logger.debug(f"Dropping late resolution for unmounted {self.lesson.id}")
            return

        self.media = media
        self.track = track
        self.video.load(media.video_url)
        self.audio.load(media.audio_url)
        self.mode = self._best_mode()
        if self.mode in (MediaMode.CAPTIONS_ONLY, MediaMode.WAITING):
            self.badge = PlaybackBadge.NONE
        self._set_state(PlaybackState.READY)

        if self.active:
            await self._start()

    def _reset(self) -> None:
        """Forget everything learned during a previous mount."""
        self._watched = False
        self._video_failed = False
        self._audio_failed = False
        self._user_gesture = False
        self.degraded = False
        self.blocked_by_policy = False
        self.muted = self.settings.muted_by_default
        self.caption_text = ""
        self.mode = MediaMode.WAITING

    def unmount(self) -> None:
        """Stop everything; late results from mount() are ignored afterwards."""
        self._cancelled = True
        for task in self._pending:
            task.cancel()
        self._pending.clear()
        self._detach()
        self.arbiter.unregister(self.audio)
        for element in (self.video, self.audio):
            try:
                element.pause()
            except Exception as e:
                logger.debug(f"Ignoring pause failure on unmount: {e}")
        self._set_state(PlaybackState.UNMOUNTED)

    async def drain(self) -> None:
        """Wait for recovery work scheduled by media event callbacks."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # --- Commands ---

    async def set_active(self, active: bool) -> None:
        """Called when the card becomes (or stops being) the most visible one."""
        self.active = active
        if self.state in (PlaybackState.IDLE, PlaybackState.RESOLVING, PlaybackState.UNMOUNTED):
            # mount() starts playback once Ready if still active
            return
        if active:
            await self._start()
        else:
            self._pause()

    async def toggle_mute(self) -> bool:
        """
        Flip the mute flag (user gesture).

        Unmuting after an autoplay refusal retries playback, since the
        gesture unlocks it. Returns the new muted value.
        """
        self._user_gesture = True
        self.muted = not self.muted
        self.video.muted = self.muted
        self.audio.muted = self.muted

        if not self.muted and self.blocked_by_policy and self.active:
            self.blocked_by_policy = False
            self.degraded = self._video_failed or self._audio_failed
            await self._start()
        return self.muted

    def advance(self, t: float) -> None:
        """
        Feed the playback clock: update captions and the watched latch.

        Called on every timeupdate of the clock element; hosts showing
        captions only call it from their own timer.
        """
        if self.settings.captions_on:
            self.caption_text = active_cue(self.track.cues, t)
        else:
            self.caption_text = ""

        if not self._watched and t >= watch_threshold(self.lesson):
            self._watched = True
            logger.info(f"Lesson {self.lesson.id} watched at {t:.1f}s")
            if self.on_watched:
                self.on_watched(self.lesson.id)

    # --- Internals ---

    def _set_state(self, state: PlaybackState) -> None:
        if state == self.state:
            return
        logger.debug(f"{self.lesson.id}: {self.state.value} -> {state.value}")
        self.state = state
        if self.on_state:
            self.on_state(state)

    def _notify(self, type_: str, message: str) -> None:
        if self.notify:
            self.notify(Notice(type_, message))

    def _audio_allowed(self) -> bool:
        return (
            self.settings.audio_on
            and self.settings.autoplay_on
            and self.media is not None
            and self.media.has_audio
            and not self._audio_failed
        )

    def _best_mode(self) -> MediaMode:
        media = self.media
        if media and media.has_video and not self._video_failed:
            return MediaMode.VIDEO
        if media and media.has_audio and self.settings.audio_on and not self._audio_failed:
            return MediaMode.AUDIO_CAPTIONS
        if self.track.cues:
            return MediaMode.CAPTIONS_ONLY
        return MediaMode.WAITING

    def _clock_element(self) -> MediaElement:
        return self.video if self.mode == MediaMode.VIDEO else self.audio

    async def _attempt(self, element: MediaElement) -> bool:
        try:
            await element.play()
        except PlaybackRejected as e:
            self._handle_rejection(element, e)
            return False
        return True

    async def _start(self) -> None:
        started = False

        if self.mode == MediaMode.VIDEO:
            # Muted autoplay is never refused; keep sound only after a gesture
            self.video.muted = self.muted if self._user_gesture else True
            started = await self._attempt(self.video)

        if self._audio_allowed() and self.active:
            await self.arbiter.register(self.audio)
            self.audio.muted = self.muted
            started = await self._attempt(self.audio) or started

        if self._cancelled or not self.active:
            return
        if started:
            self._set_state(PlaybackState.DEGRADED if self.degraded else PlaybackState.PLAYING)
        elif self.mode in (MediaMode.CAPTIONS_ONLY, MediaMode.WAITING) or self.degraded:
            self._set_state(PlaybackState.DEGRADED)
        else:
            self._set_state(PlaybackState.PAUSED)

    def _pause(self) -> None:
        self.video.pause()
        self.audio.pause()
        self._set_state(PlaybackState.PAUSED)

    def _handle_rejection(self, element: MediaElement, error: PlaybackRejected) -> None:
        kind = classify_rejection(error)
        logger.info(f"{element.kind} play() rejected for {self.lesson.id} ({kind}): {error}")
        self._set_state(PlaybackState.ERROR)
        self.degraded = True

        if kind == "policy-blocked":
            self.blocked_by_policy = True
            self._notify("warning", "Tap to unmute and play")
        else:
            self._lose(element)
        self._set_state(PlaybackState.DEGRADED)

    def _lose(self, element: MediaElement) -> None:
        """Mark a media element unusable and narrow the presentation tier."""
        if element is self.video:
            self._video_failed = True
        else:
            self._audio_failed = True
            self.arbiter.unregister(self.audio)

        previous = self.mode
        self.mode = self._best_mode()
        if self.mode != previous:
            logger.info(f"{self.lesson.id}: degraded {previous.value} -> {self.mode.value}")

        messages = {
            MediaMode.AUDIO_CAPTIONS: "Video unavailable, playing audio with captions",
            MediaMode.CAPTIONS_ONLY: "Media unavailable, showing captions only",
            MediaMode.WAITING: "Media unavailable",
        }
        self._notify("error", messages.get(self.mode, f"Could not play {element.kind}"))

    async def _recover(self) -> None:
        if self.active and not self._cancelled:
            await self._start()

    # --- Media event listeners ---

    def _attach(self) -> None:
        for element in (self.video, self.audio):
            element.on("timeupdate", self._on_timeupdate)
            element.on("error", self._on_error)
            element.on("canplay", self._on_canplay)
            element.on("waiting", self._on_waiting)

    def _detach(self) -> None:
        for element in (self.video, self.audio):
            element.off("timeupdate", self._on_timeupdate)
            element.off("error", self._on_error)
            element.off("canplay", self._on_canplay)
            element.off("waiting", self._on_waiting)

    def _on_timeupdate(self, element: MediaElement, t: Any) -> None:
        if element is self._clock_element():
            self.advance(float(t))

    def _on_canplay(self, element: MediaElement, _payload: Any) -> None:
        if self.badge in (PlaybackBadge.LOADING, PlaybackBadge.BUFFERING):
            self.badge = PlaybackBadge.NONE

    def _on_waiting(self, element: MediaElement, _payload: Any) -> None:
        self.badge = PlaybackBadge.BUFFERING

    def _on_error(self, element: MediaElement, message: Any) -> None:
        logger.warning(f"{element.kind} error for {self.lesson.id}: {message}")
        self.badge = PlaybackBadge.ERROR
        self._set_state(PlaybackState.ERROR)
        self.degraded = True
        self._lose(element)
        self._set_state(PlaybackState.DEGRADED)

        # Listeners are synchronous; the fallback tier is started in a task
        task = asyncio.get_running_loop().create_task(
            self._recover(), name=f"recover-{self.lesson.id}"
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

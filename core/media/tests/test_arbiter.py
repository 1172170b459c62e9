"""Tests for the single-playback arbiter."""

import pytest

from core.media.arbiter import PlaybackArbiter, guard
from core.media.clock import AutoplayBlocked, MediaElement, MediaLoadError


def audio(src="/a.mp3") -> MediaElement:
    return MediaElement("audio", src)


class TestRegister:
    @pytest.mark.asyncio
    async def test_play_immediately_pauses_others(self):
        arbiter = PlaybackArbiter()
        first, second = audio(), audio("/b.mp3")

        await arbiter.register(first, play_immediately=True)
        await arbiter.register(second, play_immediately=True)

        assert second.playing
        assert first.paused
        assert arbiter.current is second
        assert arbiter.playing_count() == 1

    @pytest.mark.asyncio
    async def test_register_is_idempotent(self):
        arbiter = PlaybackArbiter()
        handle = audio()

        await arbiter.register(handle)
        await arbiter.register(handle)

        assert len(arbiter) == 1
        assert len(handle._listeners["play"]) == 1

    @pytest.mark.asyncio
    async def test_rejected_play_is_swallowed(self, rejecting_element):
        arbiter = PlaybackArbiter()
        handle = rejecting_element("audio", "/a.mp3", AutoplayBlocked("gesture required"))

        await arbiter.register(handle, play_immediately=True)

        assert handle in arbiter
        assert handle.paused
        assert handle.play_calls == 1

    @pytest.mark.asyncio
    async def test_rejected_play_clears_current(self, rejecting_element):
        arbiter = PlaybackArbiter()
        first = audio()
        second = rejecting_element("audio", "/b.mp3", MediaLoadError("decode"))
        await arbiter.register(first, play_immediately=True)

        await arbiter.register(second, play_immediately=True)

        assert arbiter.current is None
        assert first.paused
        assert arbiter.playing_count() == 0

    @pytest.mark.asyncio
    async def test_missing_source_is_swallowed(self):
        arbiter = PlaybackArbiter()
        handle = MediaElement("audio")

        await arbiter.register(handle, play_immediately=True)

        assert handle.paused

    @pytest.mark.asyncio
    async def test_unregistered_during_play_is_paused(self, rejecting_element):
        arbiter = PlaybackArbiter()

        class SlowStart(MediaElement):
            async def _start(self):
                arbiter.unregister(self)

        handle = SlowStart("audio", "/a.mp3")

        await arbiter.register(handle, play_immediately=True)

        assert handle not in arbiter
        assert handle.paused
        assert arbiter.current is None


class TestExclusivity:
    @pytest.mark.asyncio
    async def test_direct_play_pauses_others_in_same_call(self):
        arbiter = PlaybackArbiter()
        first, second = audio(), audio("/b.mp3")
        await arbiter.register(first)
        await arbiter.register(second)

        await first.play()
        await second.play()

        assert first.paused
        assert second.playing
        assert guard([first, second])

    @pytest.mark.asyncio
    async def test_unregistered_handle_is_not_managed(self):
        arbiter = PlaybackArbiter()
        managed, outsider = audio(), audio("/b.mp3")
        await arbiter.register(managed)

        await managed.play()
        await outsider.play()

        assert managed.playing
        assert outsider.playing
        assert not guard([managed, outsider])

    @pytest.mark.asyncio
    async def test_unregister_detaches_listeners(self):
        arbiter = PlaybackArbiter()
        first, second = audio(), audio("/b.mp3")
        await arbiter.register(first)
        await arbiter.register(second)
        await first.play()

        arbiter.unregister(first)
        await second.play()

        assert first.playing
        assert first not in arbiter

    @pytest.mark.asyncio
    async def test_unregister_unknown_is_noop(self):
        arbiter = PlaybackArbiter()
        arbiter.unregister(audio())
        assert len(arbiter) == 0

    @pytest.mark.asyncio
    async def test_pause_all(self):
        arbiter = PlaybackArbiter()
        handle = audio()
        await arbiter.register(handle, play_immediately=True)

        arbiter.pause_all()

        assert handle.paused
        assert arbiter.current is None
        assert arbiter.playing_count() == 0

    @pytest.mark.asyncio
    async def test_pause_failure_does_not_stop_others(self):
        arbiter = PlaybackArbiter()

        class BrokenPause(MediaElement):
            def _stop(self):
                raise MediaLoadError("detached")

        broken, healthy = BrokenPause("audio", "/x.mp3"), audio()
        await arbiter.register(broken, play_immediately=True)
        await arbiter.register(healthy)
        await healthy.play()

        assert healthy.playing
        assert arbiter.current is healthy

    @pytest.mark.asyncio
    async def test_ended_clears_current(self):
        arbiter = PlaybackArbiter()
        handle = audio()
        await arbiter.register(handle, play_immediately=True)

        handle.end()

        assert arbiter.current is None
        assert arbiter.playing_count() == 0


class TestMediaElement:
    @pytest.mark.asyncio
    async def test_play_emits_once(self):
        handle = audio()
        events = []
        handle.on("play", lambda h, p: events.append("play"))

        await handle.play()
        await handle.play()

        assert events == ["play"]

    @pytest.mark.asyncio
    async def test_play_without_source_raises(self):
        with pytest.raises(MediaLoadError):
            await MediaElement("video").play()

    @pytest.mark.asyncio
    async def test_load_rewinds_and_pauses(self):
        handle = audio()
        await handle.play()
        handle.tick(12.0)

        handle.load("/c.mp3")

        assert handle.paused
        assert handle.current_time == 0.0
        assert handle.src == "/c.mp3"

    def test_fail_records_error(self):
        handle = audio()
        errors = []
        handle.on("error", lambda h, msg: errors.append(msg))

        handle.fail("decode error")

        assert handle.error == "decode error"
        assert errors == ["decode error"]

# core/media/diagnostics.py
"""Media endpoint and playback diagnostics.

Used to check a deployment: are the media routes reachable, do they send
the right content types, and does a player actually reach "canplay".
"""

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any

import httpx

from .clock import MediaElement, PlaybackRejected
from .probe import AssetKind, asset_path

logger = logging.getLogger(__name__)

DEFAULT_DIAGNOSTIC_SLUG = "quick-inbox-zero"
DEFAULT_PLAYBACK_TIMEOUT_S = 8.0
MIN_PLAYBACK_TIMEOUT_S = 1.0

EXPECTED_VIDEO_CONTENT_TYPE = "video/mp4"
EXPECTED_VTT_CONTENT_TYPE_PREFIX = "text/vtt"


@dataclass
class RequestResult:
    ok: bool
    status: int
    content_type: str
    error: str | None = None


@dataclass
class PlaybackProbeResult:
    ok: bool
    can_play: bool
    error: str | None = None


async def _request(client: httpx.AsyncClient, method: str, url: str) -> RequestResult:
    try:
        async with client.stream(method, url, headers={"Cache-Control": "no-store"}) as response:
            return RequestResult(
                ok=response.is_success,
                status=response.status_code,
                content_type=response.headers.get("content-type", ""),
            )
    except httpx.HTTPError as e:
        return RequestResult(ok=False, status=0, content_type="", error=str(e))


async def run_media_endpoint_diagnostics(
    client: httpx.AsyncClient,
    slug: str = DEFAULT_DIAGNOSTIC_SLUG,
    base: str = "",
) -> dict[str, Any]:
    """
    Check the video and WebVTT endpoints of one slug.

    Validates:
    - HEAD on the video returns 200 with content-type video/mp4
    - GET on the captions returns 200 with content-type text/vtt
    GET on the video and HEAD on the captions are recorded as well.
    """
    video_url = asset_path(AssetKind.VIDEO, slug, base)
    vtt_url = asset_path(AssetKind.CAPTIONS_VTT, slug, base)

    head_video, get_video, head_vtt, get_vtt = await asyncio.gather(
        _request(client, "HEAD", video_url),
        _request(client, "GET", video_url),
        _request(client, "HEAD", vtt_url),
        _request(client, "GET", vtt_url),
    )

    video_ok = (
        head_video.ok
        and head_video.status == 200
        and head_video.content_type.lower().startswith(EXPECTED_VIDEO_CONTENT_TYPE)
    )
    vtt_ok = (
        get_vtt.ok
        and get_vtt.status == 200
        and get_vtt.content_type.lower().startswith(EXPECTED_VTT_CONTENT_TYPE_PREFIX)
    )
    logger.info(f"Media diagnostics for {slug}: video_ok={video_ok} vtt_ok={vtt_ok}")

    return {
        "slug": slug,
        "base": base,
        "urls": {"video_url": video_url, "vtt_url": vtt_url},
        "results": {
            "head_video": head_video,
            "get_video": get_video,
            "head_vtt": head_vtt,
            "get_vtt": get_vtt,
        },
        "assertions": {"video_ok": video_ok, "vtt_ok": vtt_ok},
    }


async def probe_backend(client: httpx.AsyncClient, base: str = "") -> dict[str, Any]:
    """Hit the health endpoint; returns {"ok", "status", "message"}."""
    try:
        response = await client.get(f"{base.rstrip('/')}/")
    except httpx.HTTPError as e:
        return {"ok": False, "status": 0, "message": str(e)}
    if not response.is_success:
        return {
            "ok": False,
            "status": response.status_code,
            "message": response.reason_phrase or "health not ok",
        }
    try:
        message = response.json().get("message", "ok")
    except ValueError:
        message = "ok"
    return {"ok": True, "status": response.status_code, "message": message}


async def probe_playback(
    element: MediaElement, timeout: float = DEFAULT_PLAYBACK_TIMEOUT_S
) -> PlaybackProbeResult:
    """
    Wait for a player to report "canplay" (or "error").

    Resolves as failed after the timeout (at least one second) instead of
    waiting forever. A refused play() is ignored: canplay can still fire.
    """
    loop = asyncio.get_running_loop()
    outcome: asyncio.Future[PlaybackProbeResult] = loop.create_future()

    def on_canplay(_element, _payload):
        if not outcome.done():
            outcome.set_result(PlaybackProbeResult(ok=True, can_play=True))

    def on_error(_element, message):
        if not outcome.done():
            outcome.set_result(
                PlaybackProbeResult(
                    ok=False, can_play=False, error=str(message or "Media error event fired")
                )
            )

    element.on("canplay", on_canplay)
    element.on("error", on_error)
    element.muted = True
    try:
        try:
            await element.play()
        except PlaybackRejected as e:
            logger.debug(f"Playback probe play() refused: {e}")
        return await asyncio.wait_for(outcome, max(MIN_PLAYBACK_TIMEOUT_S, timeout))
    except asyncio.TimeoutError:
        return PlaybackProbeResult(ok=False, can_play=False, error="Timeout waiting for canplay")
    finally:
        element.off("canplay", on_canplay)
        element.off("error", on_error)


def _request_summary(result: RequestResult | None) -> dict[str, Any]:
    if result is None:
        return {"status": None, "content_type": None, "ok": False, "error": None}
    return {
        "status": result.status,
        "content_type": result.content_type or None,
        "ok": result.ok,
        "error": result.error,
    }


def format_report(
    status: dict | None,
    diagnostics: dict | None,
    playback: PlaybackProbeResult | None = None,
) -> dict[str, Any]:
    """Flatten backend status, endpoint diagnostics and playback probe into one report."""
    status = status or {}
    diagnostics = diagnostics or {}
    results = diagnostics.get("results", {})
    assertions = diagnostics.get("assertions", {})
    slug = diagnostics.get("slug", DEFAULT_DIAGNOSTIC_SLUG)
    api_base = status.get("base_url", "")

    urls = diagnostics.get("urls") or {
        "video_url": asset_path(AssetKind.VIDEO, slug, api_base),
        "vtt_url": asset_path(AssetKind.CAPTIONS_VTT, slug, api_base),
    }

    return {
        "api_base": api_base,
        "tested_slug": slug,
        "endpoints": {"video": urls["video_url"], "captions": urls["vtt_url"]},
        "requests": {
            "video": {
                "HEAD": _request_summary(results.get("head_video")),
                "GET": _request_summary(results.get("get_video")),
            },
            "captions": {
                "HEAD": _request_summary(results.get("head_vtt")),
                "GET": _request_summary(results.get("get_vtt")),
            },
        },
        "validations": {
            "video_ok": bool(assertions.get("video_ok")),
            "vtt_ok": bool(assertions.get("vtt_ok")),
            "expected": {
                "video_content_type": EXPECTED_VIDEO_CONTENT_TYPE,
                "vtt_content_type_prefix": EXPECTED_VTT_CONTENT_TYPE_PREFIX,
            },
        },
        "playback_probe": asdict(playback) if playback else {
            "ok": False,
            "can_play": False,
            "error": None,
        },
    }

"""Runtime configuration read from environment variables.

`.env.local` is loaded by main.py before anything here is called, so every
getter reads the live environment.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_DEV_API_BASE = "http://localhost:3001"
LOCAL_HOSTS = ("localhost", "127.0.0.1")


def get_environment() -> str:
    return os.environ.get("ENVIRONMENT", "development")


def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").upper()


def get_api_base_url(explicit: str | None = None, host: str | None = None) -> str:
    """
    Resolve the API base URL.

    Precedence:
    1. explicit value passed by the caller
    2. API_BASE or BACKEND_URL environment variable
    3. http://localhost:3001 when the page host is localhost / 127.0.0.1
    4. "" (same origin)
    """
    if explicit:
        return explicit.rstrip("/")

    env_base = os.environ.get("API_BASE") or os.environ.get("BACKEND_URL") or ""
    if env_base:
        return env_base.rstrip("/")

    if host in LOCAL_HOSTS:
        return DEFAULT_DEV_API_BASE

    return ""


def _load_title_map(var_name: str) -> dict[str, str]:
    from core.media.slugs import parse_title_map

    return parse_title_map(os.environ.get(var_name))


def get_audio_title_map() -> dict[str, str]:
    """Title -> slug overrides for audio assets (AUDIO_TITLE_MAP)."""
    return _load_title_map("AUDIO_TITLE_MAP")


def get_video_title_map() -> dict[str, str]:
    """Title -> slug overrides for video assets (VIDEO_TITLE_MAP)."""
    return _load_title_map("VIDEO_TITLE_MAP")


def get_assets_dir() -> Path:
    return Path(os.environ.get("ASSETS_DIR") or PROJECT_ROOT / "public" / "assets")


def get_settings_path() -> Path:
    return Path(
        os.environ.get("MEDIA_SETTINGS_PATH")
        or PROJECT_ROOT / ".local" / "lms_media_settings_v1.json"
    )


def get_probe_timeout() -> float:
    """Timeout in seconds for asset probe requests."""
    try:
        return float(os.environ.get("PROBE_TIMEOUT_S", "10"))
    except ValueError:
        logger.warning("PROBE_TIMEOUT_S is not a number; using 10s")
        return 10.0


def get_allowed_origins() -> list[str]:
    raw = os.environ.get("FRONTEND_ORIGIN", "http://localhost:3000")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]

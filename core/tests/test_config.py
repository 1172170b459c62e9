"""Tests for environment configuration."""

import os
from pathlib import Path
from unittest.mock import patch

from core.config import (
    get_allowed_origins,
    get_api_base_url,
    get_audio_title_map,
    get_probe_timeout,
    get_settings_path,
    get_video_title_map,
)


class TestApiBaseUrl:
    """Precedence: explicit > env > localhost heuristic > same origin."""

    @patch.dict(os.environ, {"API_BASE": "http://env.example"}, clear=True)
    def test_explicit_wins(self):
        assert get_api_base_url("http://explicit.example/") == "http://explicit.example"

    @patch.dict(os.environ, {"API_BASE": "http://env.example/"}, clear=True)
    def test_env_over_localhost(self):
        assert get_api_base_url(host="localhost") == "http://env.example"

    @patch.dict(os.environ, {"BACKEND_URL": "http://backend.example"}, clear=True)
    def test_backend_url_alias(self):
        assert get_api_base_url() == "http://backend.example"

    @patch.dict(os.environ, {}, clear=True)
    def test_localhost_heuristic(self):
        assert get_api_base_url(host="127.0.0.1") == "http://localhost:3001"

    @patch.dict(os.environ, {}, clear=True)
    def test_same_origin(self):
        assert get_api_base_url(host="lessons.example") == ""
        assert get_api_base_url() == ""


class TestTitleMaps:
    @patch.dict(os.environ, {"AUDIO_TITLE_MAP": '{"My Lesson": "my-audio"}'}, clear=True)
    def test_audio_override(self):
        assert get_audio_title_map() == {"My Lesson": "my-audio"}
        assert get_video_title_map() == {}

    @patch.dict(os.environ, {"VIDEO_TITLE_MAP": "not json"}, clear=True)
    def test_invalid_override_ignored(self):
        assert get_video_title_map() == {}


class TestMisc:
    @patch.dict(os.environ, {"PROBE_TIMEOUT_S": "soon"}, clear=True)
    def test_bad_probe_timeout_falls_back(self):
        assert get_probe_timeout() == 10.0

    @patch.dict(os.environ, {"PROBE_TIMEOUT_S": "2.5"}, clear=True)
    def test_probe_timeout(self):
        assert get_probe_timeout() == 2.5

    @patch.dict(os.environ, {"FRONTEND_ORIGIN": "http://a.test, http://b.test,"}, clear=True)
    def test_allowed_origins(self):
        assert get_allowed_origins() == ["http://a.test", "http://b.test"]

    @patch.dict(os.environ, {"MEDIA_SETTINGS_PATH": "/tmp/s.json"}, clear=True)
    def test_settings_path_override(self):
        assert get_settings_path() == Path("/tmp/s.json")

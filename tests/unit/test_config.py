"""Unit tests for Settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from gisty.config import DEFAULT_API_BASE_URL, Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GISTY_CACHE_DIR", raising=False)
        settings = Settings(_env_file=None)

        assert settings.api_base_url == DEFAULT_API_BASE_URL
        assert settings.cache_dir is None
        assert settings.iter_page_size == 40
        assert settings.iter_cursor == "offset"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty_api_base_url(self, value):
        assert Settings(api_base_url=value).api_base_url == DEFAULT_API_BASE_URL

    def test_trailing_slash_stripped(self):
        assert Settings(api_base_url="http://localhost:9000/").api_base_url == "http://localhost:9000"

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("GISTY_USERNAME", "arsham")
        monkeypatch.setenv("GISTY_TOKEN", "s3cr3t")
        monkeypatch.setenv("GISTY_ITER_CURSOR", "page_number")

        settings = Settings(_env_file=None)

        assert settings.username == "arsham"
        assert settings.token == "s3cr3t"
        assert settings.iter_cursor == "page_number"

    def test_cache_dir_expanded(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))

        settings = Settings(cache_dir="~/gisty")

        assert settings.cache_dir == Path(tmp_path) / "gisty"

    def test_empty_cache_dir_disables_cache(self):
        assert Settings(cache_dir="").cache_dir is None

    def test_unknown_cursor(self):
        with pytest.raises(ValidationError):
            Settings(iter_cursor="random")

    def test_frozen(self):
        settings = Settings(username="arsham")

        with pytest.raises(ValidationError):
            settings.username = "someone-else"

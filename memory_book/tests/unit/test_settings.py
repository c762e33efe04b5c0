"""Tests for the settings module."""

import pytest
from pydantic import ValidationError

from memory_book.config.settings import Settings


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MEMORY_SOURCE_URL", raising=False)
        monkeypatch.delenv("IDENTITY_CACHE_BACKEND", raising=False)

        settings = Settings(_env_file=None)

        assert settings.memory_source_url == ""
        assert settings.memory_source_timeout == 30
        assert settings.memory_source_retries == 0
        assert settings.image_host == "lh3.googleusercontent.com"
        assert settings.image_width == 800
        assert settings.identity_storage_key == "memory-book-user"
        assert settings.identity_cache_backend == "session"
        assert settings.log_file == "logs/memory_book.log"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MEMORY_SOURCE_URL", "https://script.example.com/exec")
        monkeypatch.setenv("memory_source_timeout", "5")
        monkeypatch.setenv("HONOREE_NAME", "Grandpa Joe")
        monkeypatch.setenv("IDENTITY_CACHE_BACKEND", "file")

        settings = Settings(_env_file=None)

        assert settings.memory_source_url == "https://script.example.com/exec"
        assert settings.memory_source_timeout == 5
        assert settings.honoree_name == "Grandpa Joe"
        assert settings.identity_cache_backend == "file"

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MEMORY_SOURCE_URL", raising=False)
        env_path = tmp_path / ".env"
        env_path.write_text("MEMORY_SOURCE_URL=https://from-file.example.com/exec\n", encoding="utf-8")

        settings = Settings(_env_file=str(env_path))

        assert settings.memory_source_url == "https://from-file.example.com/exec"

    def test_invalid_cache_backend(self, monkeypatch):
        monkeypatch.setenv("IDENTITY_CACHE_BACKEND", "cookies")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

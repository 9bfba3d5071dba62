"""Tests for settings and request option models."""

import pytest

from aitools.ai.models import PromptOptions, UserPreferences
from aitools.ai.settings import get_ai_config, read_settings, sanitize_api_key


class TestGetAiConfig:
    """Tests for deriving the endpoint configuration."""

    def test_provider_url_mapping(self):
        config = get_ai_config({"ai_model": "openai:gpt-4o-mini", "ai_api_key": " key "})

        assert config.api_url == "https://api.openai.com/v1"
        assert config.model == "gpt-4o-mini"
        assert config.provider == "openai"
        assert config.api_key == "key"

    def test_explicit_url_wins_and_loses_trailing_slash(self):
        config = get_ai_config({"ai_model": "openai:gpt-4o", "ai_api_url": "https://proxy.local/v1/"})

        assert config.api_url == "https://proxy.local/v1"

    def test_model_with_colons(self):
        config = get_ai_config({"ai_model": "ollama:llama3:8b"})

        assert config.provider == "ollama"
        assert config.model == "llama3:8b"

    def test_custom_model(self):
        config = get_ai_config(
            {"ai_model": "custom", "ai_custom_model": "my-model", "ai_api_url": "http://llm/v1"}
        )

        assert config.model == "my-model"
        assert config.api_url == "http://llm/v1"

    def test_nothing_configured(self):
        config = get_ai_config({})

        assert config.api_url is None
        assert config.model is None
        assert config.api_key == ""

    @pytest.mark.parametrize("value,expected", [("2048", 2048), (512, 512), ("", None), ("many", None)])
    def test_max_tokens(self, value, expected):
        assert get_ai_config({"ai_max_tokens": value}).max_tokens == expected


def test_read_settings_maps_config_keys():
    settings = read_settings({"AI_MODEL": "openai:gpt-4o", "DEEPL_API_KEY": "k"})

    assert settings["ai_model"] == "openai:gpt-4o"
    assert settings["deepl_api_key"] == "k"
    assert settings["ai_api_url"] is None


def test_sanitize_api_key():
    assert sanitize_api_key("abc\r\ndef\n") == "abcdef"
    assert sanitize_api_key(None) == ""


class TestPromptOptions:
    """Tests for PromptOptions.from_value."""

    def test_bool(self):
        assert PromptOptions.from_value(True).is_html is True

    def test_mapping(self):
        options = PromptOptions.from_value({"is_markup": 1, "source_lang": "de"})

        assert options.is_html is True
        assert options.source_lang == "de"

    @pytest.mark.parametrize("value,expected", [("false", False), ("0", False), ("true", True), (1, True)])
    def test_string_flags(self, value, expected):
        assert PromptOptions.from_value({"is_html": value}).is_html is expected
        assert PromptOptions.from_value(value).is_html is expected

    def test_none_uses_default(self):
        assert PromptOptions.from_value(None).is_html is None
        assert PromptOptions.from_value(None, default_is_html=True).is_html is True
        assert PromptOptions.from_value({}, default_is_html=False).is_html is False


class TestUserPreferences:
    """Tests for UserPreferences.parse_languages."""

    def test_comma_string(self):
        assert UserPreferences.parse_languages("de, fr,,it") == ["de", "fr", "it"]

    def test_list(self):
        assert UserPreferences.parse_languages(["de", " pt "]) == ["de", "pt"]

    def test_empty(self):
        assert UserPreferences.parse_languages(None) == []

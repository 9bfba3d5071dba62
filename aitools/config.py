"""Application configuration."""

import os

INSTALLED_LANGUAGES = {
    "ar": "Arabic",
    "cs": "Czech",
    "da": "Danish",
    "de": "German",
    "en": "English",
    "es-es": "Spanish",
    "fa": "Persian",
    "fi": "Finnish",
    "fr": "French",
    "hu": "Hungarian",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "nl": "Dutch",
    "no": "Norwegian",
    "pl": "Polish",
    "pt": "Portuguese",
    "pt-br": "Brazilian Portuguese",
    "ru": "Russian",
    "sv": "Swedish",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "zh": "Chinese",
}


class Config:
    """Base configuration."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key-change-in-production")
    DEBUG = False
    TESTING = False

    # AI Provider Configuration, AI_MODEL is "provider:model" or "custom"
    AI_MODEL = os.environ.get("AI_MODEL", "")
    AI_API_URL = os.environ.get("AI_API_URL")
    AI_API_KEY = os.environ.get("AI_API_KEY", "")
    AI_CUSTOM_MODEL = os.environ.get("AI_CUSTOM_MODEL")
    AI_MAX_TOKENS = os.environ.get("AI_MAX_TOKENS")

    # DeepL Configuration, a key routes all translations to DeepL
    DEEPL_API_KEY = os.environ.get("DEEPL_API_KEY", "")
    DEEPL_API_URL = os.environ.get("DEEPL_API_URL")

    # Languages
    AITOOLS_DEFAULT_LANGUAGE = os.environ.get("AITOOLS_DEFAULT_LANGUAGE", "en")
    AITOOLS_TRANSLATION_LANGUAGES = os.environ.get("AITOOLS_TRANSLATION_LANGUAGES", "")
    AITOOLS_INSTALLED_LANGUAGES = INSTALLED_LANGUAGES

    # Output with more tag-like substrings than this is purified as HTML
    AITOOLS_MARKUP_TAG_THRESHOLD = int(
        os.environ.get("AITOOLS_MARKUP_TAG_THRESHOLD", "3")
    )

    AITOOLS_FAIL_ON_CONFIG_ERRORS = (
        os.environ.get("AITOOLS_FAIL_ON_CONFIG_ERRORS", "false").lower() == "true"
    )


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""

    TESTING = True
    SECRET_KEY = "testing-secret"  # noqa: S105
    # Mock AI client is used in tests, the key only has to be present
    AI_MODEL = "openai:gpt-4o-mini"
    AI_API_URL = None
    AI_API_KEY = "test-key"
    AI_CUSTOM_MODEL = None
    AI_MAX_TOKENS = None
    DEEPL_API_KEY = ""
    DEEPL_API_URL = None
    AITOOLS_DEFAULT_LANGUAGE = "en"
    AITOOLS_TRANSLATION_LANGUAGES = ""
    AITOOLS_MARKUP_TAG_THRESHOLD = 3
    AITOOLS_FAIL_ON_CONFIG_ERRORS = False

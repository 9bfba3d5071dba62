"""
AI Settings

Reads the AI Tools settings from the Flask config and derives the
chat-completion endpoint configuration from them.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from .models import AiConfig

logger = logging.getLogger(__name__)

# Base URLs of OpenAI-compatible endpoints, keyed by the provider prefix of AI_MODEL
PROVIDER_URL_MAPPING = {
    "openai": "https://api.openai.com/v1",
    "anthropic": "https://api.anthropic.com/v1",
    "deepseek": "https://api.deepseek.com",
    "google": "https://generativelanguage.googleapis.com/v1beta/openai",
    "mistral": "https://api.mistral.ai/v1",
    "ollama": "http://localhost:11434/v1",
}

SETTING_KEYS = {
    "ai_model": "AI_MODEL",
    "ai_api_url": "AI_API_URL",
    "ai_api_key": "AI_API_KEY",
    "ai_custom_model": "AI_CUSTOM_MODEL",
    "ai_max_tokens": "AI_MAX_TOKENS",
    "deepl_api_key": "DEEPL_API_KEY",
    "deepl_api_url": "DEEPL_API_URL",
}


def read_settings(app_config: Mapping[str, Any]) -> dict[str, Any]:
    """Return the AI Tools settings, keyed by their setting names."""
    return {name: app_config.get(key) for name, key in SETTING_KEYS.items()}


def sanitize_api_key(api_key: str | None) -> str:
    """Remove CR/LF so the key cannot inject additional HTTP headers."""
    return re.sub(r"[\r\n]", "", api_key or "")


def get_ai_config(settings: Mapping[str, Any]) -> AiConfig:
    """
    Derive the chat-completion configuration.

    ``ai_model`` is either ``provider:model`` or a bare provider such as
    ``custom``, in which case the model comes from ``ai_custom_model``.
    """
    provider, _, model = str(settings.get("ai_model") or "").partition(":")

    api_url = settings.get("ai_api_url") or PROVIDER_URL_MAPPING.get(provider)
    if api_url:
        api_url = str(api_url).rstrip("/")

    return AiConfig(
        api_url=api_url,
        api_key=str(settings.get("ai_api_key") or "").strip(),
        model=model or settings.get("ai_custom_model") or None,
        provider=provider or None,
        max_tokens=_parse_max_tokens(settings.get("ai_max_tokens")),
    )


def _parse_max_tokens(value: Any) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid AI max tokens setting: %r", value)
        return None

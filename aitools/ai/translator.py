"""
Translators

Translation prompts go either to the chat-completion endpoint or to DeepL,
depending on which credentials are configured.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from .client import AIClient
from .deepl_client import DeepLClient, deepl_translate
from .errors import ConfigurationError
from .models import AiConfig, TranslationResult
from .prompts import TRANSLATE_PREFIX, PromptCatalog
from .request_builder import build_request
from .sanitizer import DEFAULT_TAG_THRESHOLD
from .settings import get_ai_config

logger = logging.getLogger(__name__)


class Translator(ABC):
    """Abstract translation capability."""

    name: str = "translator"

    @abstractmethod
    def translate(
        self,
        content: str,
        target_lang: str,
        source_lang: str | None,
        is_markup: bool | None,
        catalog: PromptCatalog,
    ) -> TranslationResult:
        """
        Translate content into target_lang.

        Args:
            content: Untrusted text or HTML
            target_lang: Target language code
            source_lang: Known source language or None
            is_markup: Content is markup, None if unknown
            catalog: Prompt catalog of the current user

        Returns:
            TranslationResult with the translated (unsanitized) content
        """
        ...


def require_ai_config(config: AiConfig) -> AiConfig:
    """Raise ConfigurationError unless the chat endpoint can be called."""
    if not config.api_key:
        raise ConfigurationError("AI API not configured. Please contact your administrator.")
    if not config.api_url or not config.model:
        raise ConfigurationError(
            "AI API URL or model not configured. Please contact your administrator."
        )
    return config


class ChatCompletionTranslator(Translator):
    """Translate through the chat-completion endpoint."""

    name = "chat"

    def __init__(self, ai_client: AIClient, settings: Mapping[str, Any]):
        self.ai_client = ai_client
        self.settings = settings

    def translate(self, content, target_lang, source_lang, is_markup, catalog):
        prompt_id = TRANSLATE_PREFIX + target_lang
        request = build_request(prompt_id, content, bool(is_markup), catalog)
        config = require_ai_config(get_ai_config(self.settings))
        response = self.ai_client.chat_sync(config, request)
        return TranslationResult(
            content=response.content,
            source_lang=source_lang,
            usage=response.usage,
        )


class DeepLTranslator(Translator):
    """Translate through DeepL."""

    name = "deepl"

    def __init__(self, client: DeepLClient, tag_threshold: int = DEFAULT_TAG_THRESHOLD):
        self.client = client
        self.tag_threshold = tag_threshold

    def translate(self, content, target_lang, source_lang, is_markup, catalog):
        # Only languages offered to the user may be requested
        catalog.lookup(TRANSLATE_PREFIX + target_lang)
        result = deepl_translate(
            self.client,
            content,
            target_lang,
            source_lang=source_lang,
            is_markup=is_markup,
            tag_threshold=self.tag_threshold,
        )
        return TranslationResult(
            content=result.text,
            source_lang=result.detected_source_lang or source_lang,
        )


def select_translator(
    settings: Mapping[str, Any],
    ai_client: AIClient,
    tag_threshold: int = DEFAULT_TAG_THRESHOLD,
) -> Translator:
    """Use DeepL when a DeepL key is configured, the chat endpoint otherwise."""
    deepl_api_key = str(settings.get("deepl_api_key") or "").strip()
    if deepl_api_key:
        return DeepLTranslator(
            DeepLClient(deepl_api_key, settings.get("deepl_api_url")),
            tag_threshold=tag_threshold,
        )
    return ChatCompletionTranslator(ai_client, settings)

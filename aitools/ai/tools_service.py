"""
AI Tools Service

Runs a predefined prompt on widget content: prompt lookup, request building,
the call to the AI (or DeepL) endpoint and sanitizing of the result.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .client import AIClient, ChatCompletionClient, MockAIClient
from .models import PromptOptions, PromptResult, UserPreferences
from .prompts import (
    PromptCatalog,
    build_prompt_catalog,
    is_translation_prompt,
    translation_target,
)
from .request_builder import build_request, check_content_size
from .sanitizer import DEFAULT_TAG_THRESHOLD, ResponseSanitizer
from .settings import get_ai_config, read_settings
from .translator import Translator, require_ai_config, select_translator

if TYPE_CHECKING:
    from flask import Flask

logger = logging.getLogger(__name__)


class AIToolsService:
    """
    Service behind the text widgets' AI menu.

    Settings are read from the given config mapping on every call, so changes
    to the configuration apply without re-creating the service.
    """

    def __init__(
        self,
        config: Mapping[str, Any],
        ai_client: AIClient | None = None,
        translator: Translator | None = None,
        sanitizer: ResponseSanitizer | None = None,
    ):
        """
        Initialize the service.

        Args:
            config: Flask config (or any mapping with the same keys)
            ai_client: Chat-completion client. Uses ChatCompletionClient if not provided.
            translator: Fixed translator. Selected from the settings if not provided.
            sanitizer: Response sanitizer. Built from the config if not provided.
        """
        self.config = config
        self.ai_client = ai_client or ChatCompletionClient()
        self._translator = translator
        if sanitizer is None:
            threshold = config.get("AITOOLS_MARKUP_TAG_THRESHOLD")
            sanitizer = ResponseSanitizer(
                DEFAULT_TAG_THRESHOLD if threshold is None else int(threshold)
            )
        self.sanitizer = sanitizer

    @property
    def installed_languages(self) -> dict[str, str]:
        return dict(self.config.get("AITOOLS_INSTALLED_LANGUAGES") or {})

    def default_preferences(self) -> UserPreferences:
        """Preferences used when the caller supplies none."""
        return UserPreferences(
            ui_language=self.config.get("AITOOLS_DEFAULT_LANGUAGE") or "en",
            translation_languages=UserPreferences.parse_languages(
                self.config.get("AITOOLS_TRANSLATION_LANGUAGES")
            ),
        )

    def get_catalog(self, preferences: UserPreferences | None = None) -> PromptCatalog:
        """Build the prompt catalog for a user."""
        preferences = preferences or self.default_preferences()
        return build_prompt_catalog(
            preferences.ui_language,
            preferences.translation_languages,
            self.installed_languages,
        )

    def get_translator(self) -> Translator:
        if self._translator is not None:
            return self._translator
        return select_translator(
            read_settings(self.config), self.ai_client, self.sanitizer.tag_threshold
        )

    def process_prompt(
        self,
        prompt_id: str,
        content: str,
        options: PromptOptions | Mapping[str, Any] | bool | None = None,
        preferences: UserPreferences | None = None,
    ) -> PromptResult:
        """
        Process a predefined prompt.

        Args:
            prompt_id: The predefined prompt ID
            content: The text content to process
            options: Markup flag and optional source language
            preferences: Language preferences of the calling user

        Returns:
            PromptResult with the sanitized content and usage details

        Raises:
            AIToolsError: With a message safe to show to the user
        """
        options = PromptOptions.from_value(options)
        check_content_size(content)
        catalog = self.get_catalog(preferences)

        if is_translation_prompt(prompt_id):
            translator = self.get_translator()
            logger.debug("Translating with %s translator", translator.name)
            translation = translator.translate(
                content,
                translation_target(prompt_id),
                options.source_lang,
                options.is_html,
                catalog,
            )
            return PromptResult(
                content=self.sanitizer.sanitize(translation.content),
                usage=translation.usage,
                source_lang=translation.source_lang,
            )

        settings = read_settings(self.config)
        ai_config = get_ai_config(settings)
        request = build_request(
            prompt_id,
            content,
            bool(options.is_html),
            catalog,
            max_tokens=ai_config.max_tokens,
        )
        response = self.ai_client.chat_sync(require_ai_config(ai_config), request)

        return PromptResult(
            content=self.sanitizer.sanitize(response.content),
            usage=response.usage,
        )


# Module-level service instance
_tools_service: AIToolsService | None = None


def get_tools_service() -> AIToolsService | None:
    """Get the configured AI Tools service singleton."""
    return _tools_service


def init_tools_service(app: Flask) -> AIToolsService:
    """
    Initialize the AI Tools service from Flask app config.

    In testing mode the service uses MockAIClient, so no request leaves
    the process.
    """
    global _tools_service

    if app.config.get("TESTING"):
        _tools_service = AIToolsService(app.config, ai_client=MockAIClient())
        logger.info("AI Tools service initialized with MockAIClient for testing")
    else:
        _tools_service = AIToolsService(app.config)
        ai_config = get_ai_config(read_settings(app.config))
        logger.info(
            "AI Tools service initialized (provider: %s, model: %s)",
            ai_config.provider,
            ai_config.model,
        )

    app.extensions["aitools_service"] = _tools_service
    return _tools_service

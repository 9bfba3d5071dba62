"""
AI Data Models

Dataclasses for prompts, requests and responses. All of them are
request-scoped: created, used and discarded within one call.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from aitools.utils import parse_bool


@dataclass(frozen=True)
class PromptTemplate:
    """A predefined prompt exposed to the text widgets."""

    id: str
    instruction: str


@dataclass(frozen=True)
class AiConfig:
    """Chat-completion endpoint settings derived from the configuration."""

    api_url: str | None
    api_key: str
    model: str | None
    provider: str | None = None
    max_tokens: int | None = None


@dataclass(frozen=True)
class ChatMessage:
    """One message of the chat payload."""

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatRequest:
    """Chat payload plus the sampling parameters selected for the task."""

    messages: list[ChatMessage]
    is_translation: bool
    temperature: float
    max_tokens: int
    timeout: int


@dataclass
class AIResponse:
    """Response from an AI provider."""

    content: str
    usage: dict[str, Any] | None = None


@dataclass(frozen=True)
class StatusResult:
    """Outcome derived from a provider's finish_reason / error fields."""

    ok: bool
    message: str


@dataclass
class TranslationResult:
    """Translated text plus the (detected) source language."""

    content: str
    source_lang: str | None = None
    usage: dict[str, Any] | None = None


@dataclass
class PromptResult:
    """Final, sanitized result of a processed prompt."""

    content: str
    usage: dict[str, Any] | None = None
    source_lang: str | None = None


@dataclass(frozen=True)
class PromptOptions:
    """Options a widget may send along with a prompt."""

    is_html: bool | None = None
    source_lang: str | None = None

    @classmethod
    def from_value(cls, value: Any, default_is_html: bool | None = None) -> PromptOptions:
        """
        Build options from what the widget sent.

        Older widgets send a bare boolean (the markup flag), newer ones a
        mapping with ``is_html`` (or ``is_markup``) and ``source_lang``.
        """
        if isinstance(value, PromptOptions):
            return value
        if isinstance(value, Mapping):
            is_html = value.get("is_html", value.get("is_markup"))
            if is_html is None:
                is_html = default_is_html
            source_lang = value.get("source_lang")
            return cls(
                is_html=None if is_html is None else parse_bool(is_html),
                source_lang=str(source_lang) if source_lang else None,
            )
        if value is None:
            return cls(is_html=default_is_html)
        return cls(is_html=parse_bool(value))


@dataclass(frozen=True)
class UserPreferences:
    """Language preferences of the calling user."""

    ui_language: str = "en"
    translation_languages: list[str] = field(default_factory=list)

    @staticmethod
    def parse_languages(value: Any) -> list[str]:
        """Accept a comma separated string or a list of language codes."""
        if not value:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [str(code).strip() for code in value if str(code).strip()]

"""
Prompt Catalog

The fixed set of prompts the text widgets may request, plus translation
prompts generated from the user's languages. The catalog is rebuilt for every
request from explicit language parameters.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from aitools.utils import sanitize_input

from .errors import PromptNotFoundError
from .models import PromptTemplate

logger = logging.getLogger(__name__)

TRANSLATE_PREFIX = "aiassist.translate-"

STATIC_PROMPTS = {
    # Text improvement
    "aiassist.summarize": "Summarize this text concisely, preserving key information and main points.",
    "aiassist.formal": "Rewrite this text in a professional and formal tone.",
    "aiassist.casual": "Rewrite this text in a casual and friendly tone.",
    "aiassist.grammar": "Correct grammar, spelling, and punctuation errors.",
    "aiassist.concise": "Make this text more concise while preserving all important information.",
    # Content generation
    "aiassist.generate_reply": "Generate a professional email reply based on this content.",
    "aiassist.meeting_followup": "Create a professional meeting follow-up message.",
    "aiassist.thank_you": "Create a professional thank you note.",
    "aiassist.generate_subject": "Generate a clear and concise subject line (no quotes).",
}

TRANSLATION_TEMPLATE = "Translate to {lang}. Output only the translation."

DEFAULT_TRANSLATION_LANGUAGES = ["en", "de", "fr", "it"]

# Labels and loading messages shown by the widgets
PROMPT_LABELS = {
    "aiassist.summarize": ("Summarize text", "Summarizing your text..."),
    "aiassist.formal": ("Make more formal", "Making text more formal..."),
    "aiassist.casual": ("Make more casual", "Making text more casual..."),
    "aiassist.grammar": ("Fix grammar & spelling", "Checking grammar and spelling..."),
    "aiassist.concise": ("Make concise", "Making text more concise..."),
    "aiassist.generate_reply": ("Professional reply", "Generating professional reply..."),
    "aiassist.meeting_followup": ("Meeting follow-up", "Creating meeting follow-up..."),
    "aiassist.thank_you": ("Thank you note", "Composing thank you note..."),
    "aiassist.generate_subject": ("Generate subject", "Generating subject line..."),
}

TEXTAREA_PROMPTS = [
    "aiassist.summarize",
    "aiassist.formal",
    "aiassist.grammar",
    "aiassist.concise",
]
HTMLAREA_PROMPTS = [
    "aiassist.summarize",
    "aiassist.formal",
    "aiassist.casual",
    "aiassist.grammar",
    "aiassist.concise",
]
GENERATE_PROMPTS = [
    "aiassist.generate_reply",
    "aiassist.meeting_followup",
    "aiassist.thank_you",
]

DEFAULT_LOADING_MESSAGE = "AI is processing..."


def is_translation_prompt(prompt_id: str) -> bool:
    """Return True for ``aiassist.translate-<code>`` prompt IDs."""
    return prompt_id.startswith(TRANSLATE_PREFIX)


def translation_target(prompt_id: str) -> str:
    """Return the language code of a translation prompt ID."""
    return prompt_id[len(TRANSLATE_PREFIX):]


class PromptCatalog:
    """Immutable mapping of prompt IDs to instructions."""

    def __init__(
        self,
        prompts: Mapping[str, str],
        language_names: Mapping[str, str] | None = None,
    ):
        self._prompts = dict(prompts)
        self._language_names = dict(language_names or {})

    def __contains__(self, prompt_id: object) -> bool:
        return prompt_id in self._prompts

    def __len__(self) -> int:
        return len(self._prompts)

    def lookup(self, prompt_id: str) -> str:
        """
        Return the instruction for a prompt ID.

        Raises:
            PromptNotFoundError: If the ID is unknown. The ID is escaped before
                being echoed, since the message ends up in an HTML context.
        """
        try:
            return self._prompts[prompt_id]
        except KeyError:
            raise PromptNotFoundError(
                "Unknown prompt ID: " + sanitize_input(prompt_id)
            ) from None

    def templates(self) -> list[PromptTemplate]:
        return [PromptTemplate(id=key, instruction=value) for key, value in self._prompts.items()]

    def translation_languages(self) -> dict[str, str]:
        """Return code -> language name for every translation prompt."""
        return {
            translation_target(prompt_id): self._language_names.get(
                translation_target(prompt_id), translation_target(prompt_id)
            )
            for prompt_id in self._prompts
            if is_translation_prompt(prompt_id)
        }


def resolve_language_codes(
    ui_language: str | None, preferred_languages: Iterable[str] | None
) -> list[str]:
    """
    Return the translation target codes for a user, in order, without duplicates.

    The user's own language always comes first. Without saved preferences a
    small default set is offered.
    """
    preferred = [code for code in (preferred_languages or []) if code]
    codes = [ui_language] if ui_language else []
    codes += preferred if preferred else DEFAULT_TRANSLATION_LANGUAGES
    return list(dict.fromkeys(codes))


def build_translation_prompts(
    ui_language: str | None,
    preferred_languages: Iterable[str] | None,
    installed_languages: Mapping[str, str],
) -> dict[str, str]:
    """Build one translation prompt per installed language of the user."""
    prompts = {}
    for code in resolve_language_codes(ui_language, preferred_languages):
        if code not in installed_languages:
            logger.debug("Skipping translation prompt for uninstalled language %s", code)
            continue
        prompts[TRANSLATE_PREFIX + code] = TRANSLATION_TEMPLATE.format(
            lang=installed_languages[code]
        )
    return prompts


def build_prompt_catalog(
    ui_language: str | None,
    preferred_languages: Iterable[str] | None,
    installed_languages: Mapping[str, str],
) -> PromptCatalog:
    """Build the prompt catalog for one request."""
    prompts = dict(STATIC_PROMPTS)
    prompts.update(
        build_translation_prompts(ui_language, preferred_languages, installed_languages)
    )
    return PromptCatalog(prompts, installed_languages)


def loading_message(prompt_id: str, language_names: Mapping[str, str] | None = None) -> str:
    """Return the message a widget shows while the prompt is processed."""
    if is_translation_prompt(prompt_id):
        code = translation_target(prompt_id)
        name = (language_names or {}).get(code) or code.upper()
        return f"Translating to {name}..."
    label = PROMPT_LABELS.get(prompt_id)
    return label[1] if label else DEFAULT_LOADING_MESSAGE


def _menu_item(prompt_id: str, catalog: PromptCatalog) -> dict[str, Any]:
    label = PROMPT_LABELS.get(prompt_id, (prompt_id, DEFAULT_LOADING_MESSAGE))[0]
    return {
        "id": prompt_id,
        "label": label,
        "loading_message": loading_message(prompt_id, catalog.translation_languages()),
    }


def prompt_menu(widget_type: str, catalog: PromptCatalog) -> list[dict[str, Any]]:
    """
    Return the prompt menu for a widget.

    Plain textareas get a short flat list. HTML editors get the full list with
    "Translate" and "Generate" submenus.
    """
    if widget_type != "htmlarea":
        return [_menu_item(prompt_id, catalog) for prompt_id in TEXTAREA_PROMPTS]

    menu = [_menu_item(prompt_id, catalog) for prompt_id in HTMLAREA_PROMPTS]
    languages = catalog.translation_languages()
    if languages:
        menu.append(
            {
                "label": "Translate",
                "items": [
                    {
                        "id": TRANSLATE_PREFIX + code,
                        "label": name,
                        "loading_message": loading_message(TRANSLATE_PREFIX + code, languages),
                    }
                    for code, name in languages.items()
                ],
            }
        )
    menu.append(
        {
            "label": "Generate",
            "items": [_menu_item(prompt_id, catalog) for prompt_id in GENERATE_PROMPTS],
        }
    )
    return menu

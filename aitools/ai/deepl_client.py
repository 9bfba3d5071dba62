"""
DeepL Client

Translation through the DeepL REST API, used instead of the chat-completion
endpoint whenever a DeepL key is configured.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Any

import requests

from .client import CONNECT_TIMEOUT, http_error_message, transport_error
from .errors import ConfigurationError, HttpError, InvalidResponseError
from .sanitizer import DEFAULT_TAG_THRESHOLD, looks_like_markup, strip_tags
from .settings import sanitize_api_key

logger = logging.getLogger(__name__)

DEEPL_API_URL = "https://api.deepl.com"
DEEPL_FREE_API_URL = "https://api-free.deepl.com"

TRANSLATE_TIMEOUT = 90
LANGUAGES_TIMEOUT = 15

# DeepL rejects some generic codes, map them to a regional variant
TARGET_LANGUAGE_REMAP = {
    "en": "en-GB",
    "es-es": "es",
    "pt": "pt-PT",
}

DEEPL_ERROR_PREFIX = "Translation service request failed. "


@dataclass
class DeepLTranslation:
    """Translated text and the source language DeepL detected."""

    text: str
    detected_source_lang: str | None = None


def deepl_target_language(target_lang: str) -> str:
    """Return the DeepL target language code for a language code."""
    return TARGET_LANGUAGE_REMAP.get(target_lang.lower(), target_lang).upper()


class DeepLClient:
    """Minimal DeepL API client."""

    def __init__(self, api_key: str, server_url: str | None = None):
        """
        Initialize the DeepL client.

        Args:
            api_key: DeepL authentication key, free keys end with ":fx"
            server_url: Optional server URL overriding the official endpoints
        """
        if not api_key:
            raise ConfigurationError(
                "DeepL API not configured. Please contact your administrator."
            )
        self.api_key = sanitize_api_key(api_key.strip())
        if server_url:
            self.server_url = server_url.rstrip("/")
        elif self.api_key.endswith(":fx"):
            self.server_url = DEEPL_FREE_API_URL
        else:
            self.server_url = DEEPL_API_URL

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"DeepL-Auth-Key {self.api_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, timeout: int, **kwargs) -> Any:
        try:
            resp = requests.request(
                method,
                f"{self.server_url}{path}",
                headers=self.headers,
                timeout=(CONNECT_TIMEOUT, timeout),
                verify=True,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.error("DeepL request to %s failed: %s", self.server_url, e)
            raise transport_error(e, service="Translation service") from e

        if resp.status_code != 200:
            logger.error(
                "DeepL request failed with status: %s - %s (URL: %s)",
                resp.status_code,
                resp.text[:500],
                self.server_url,
            )
            if resp.status_code == 456:
                message = DEEPL_ERROR_PREFIX + "Translation quota exceeded. Please contact your administrator."
            else:
                message = http_error_message(
                    resp.status_code, prefix=DEEPL_ERROR_PREFIX, auth_codes=(401, 403)
                )
            raise HttpError(message, resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            logger.error("Failed to decode DeepL response: %s", resp.text[:200])
            raise InvalidResponseError("Invalid response from translation service.") from e

    def translate_text(
        self,
        text: str,
        target_lang: str,
        source_lang: str | None = None,
        preserve_formatting: bool = True,
    ) -> DeepLTranslation:
        """
        Translate text or HTML.

        Args:
            text: Text to translate, HTML tags are kept intact
            target_lang: Target language code, e.g. "de" or "en"
            source_lang: Known source language, None to let DeepL detect it
            preserve_formatting: Ask DeepL to keep punctuation and casing

        Returns:
            DeepLTranslation with translated text and detected source language
        """
        payload: dict[str, Any] = {
            "text": [text],
            "target_lang": deepl_target_language(target_lang),
            "preserve_formatting": preserve_formatting,
            "tag_handling": "html",
        }
        if source_lang:
            # Source languages carry no regional variant
            payload["source_lang"] = source_lang.split("-")[0].upper()

        result = self._request("POST", "/v2/translate", TRANSLATE_TIMEOUT, json=payload)
        try:
            translation = result["translations"][0]
        except (KeyError, IndexError, TypeError) as e:
            logger.error("DeepL response missing translations: %r", result)
            raise InvalidResponseError(
                "Unexpected response format from translation service."
            ) from e

        detected = translation.get("detected_source_language")
        return DeepLTranslation(
            text=str(translation.get("text", "")),
            detected_source_lang=detected.lower() if detected else None,
        )

    def target_languages(self) -> list[dict[str, Any]]:
        """Return the target languages offered by the account (connectivity test)."""
        result = self._request(
            "GET", "/v2/languages", LANGUAGES_TIMEOUT, params={"type": "target"}
        )
        if not isinstance(result, list):
            raise InvalidResponseError("Unexpected response format from translation service.")
        return result


def wrap_plain_text(content: str) -> str:
    """Encode plain-text line breaks as markup, DeepL does not keep bare newlines."""
    content = content.replace("&", "&amp;").replace("<", "&lt;")
    content = content.replace("\n\n", "</p><p>").replace("\n", "<br/>")
    return f"<p>{content}</p>"


def unwrap_plain_text(translation: str) -> str:
    """Reverse wrap_plain_text on the translated text."""
    translation = translation.replace("</p><p>", "\n\n")
    translation = translation.replace("<br/>", "\n").replace("<br>", "\n")
    return html.unescape(strip_tags(translation))


def deepl_translate(
    client: DeepLClient,
    content: str,
    target_lang: str,
    source_lang: str | None = None,
    is_markup: bool | None = None,
    tag_threshold: int = DEFAULT_TAG_THRESHOLD,
) -> DeepLTranslation:
    """
    Translate HTML or plain text through DeepL.

    Args:
        client: DeepL client
        content: HTML or plain text
        target_lang: Target language code
        source_lang: Known source language or None
        is_markup: Content is markup, None to detect it from the content
        tag_threshold: Markup detection threshold
    """
    if is_markup is None:
        is_markup = looks_like_markup(content, tag_threshold)

    text = content if is_markup else wrap_plain_text(content)
    result = client.translate_text(text, target_lang, source_lang)
    if not is_markup:
        result.text = unwrap_plain_text(result.text)
    return result

"""
Response Sanitizer

Model output is untrusted: it may reflect instructions injected through the
content, and it is rendered inside UI widgets. Output that looks like markup
is purified against an allow-list, anything else has all tags stripped.
"""

from __future__ import annotations

import logging
import re
from html import escape
from html.parser import HTMLParser
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

DEFAULT_TAG_THRESHOLD = 3

TAG_RE = re.compile(r"<[^>]+>")

# Tag left open at the end of the text, HTMLParser hands it back as data
TRAILING_TAG_RE = re.compile(r"<[A-Za-z!/?][^>]*\Z")

ALLOWED_TAGS = {
    'a', 'abbr', 'b', 'blockquote', 'br', 'caption', 'code', 'del', 'div', 'em',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'hr', 'i', 'img', 'ins', 'li', 'ol', 'p',
    'pre', 's', 'small', 'span', 'strike', 'strong', 'sub', 'sup', 'table', 'tbody',
    'td', 'tfoot', 'th', 'thead', 'tr', 'u', 'ul',
}

VOID_TAGS = {'br', 'hr', 'img'}

# Dropped together with everything inside them
DROP_CONTENT_TAGS = {'script', 'style', 'iframe', 'object', 'embed', 'template', 'noscript'}

COMMON_ATTRIBUTES = {'class', 'style', 'title', 'dir', 'lang'}

ALLOWED_ATTRIBUTES = {
    'a': {'href', 'target', 'rel'},
    'img': {'src', 'alt', 'width', 'height'},
    'td': {'colspan', 'rowspan', 'align', 'valign'},
    'th': {'colspan', 'rowspan', 'scope', 'align', 'valign'},
    'table': {'border', 'cellpadding', 'cellspacing', 'width'},
    'ol': {'start', 'type'},
    'p': {'align'},
    'div': {'align'},
}

ALLOWED_STYLES = {
    'background-color', 'border', 'border-collapse', 'color', 'font-family',
    'font-size', 'font-style', 'font-weight', 'height', 'line-height', 'margin',
    'margin-bottom', 'margin-left', 'margin-right', 'margin-top', 'padding',
    'padding-bottom', 'padding-left', 'padding-right', 'padding-top', 'text-align',
    'text-decoration', 'vertical-align', 'width',
}

URL_ATTRIBUTES = {'href', 'src'}
ALLOWED_PROTOCOLS = {'http', 'https', 'mailto', 'tel'}

# Sanitizing twice must be a no-op; this bounds the passes needed to get there
MAX_PASSES = 5


def count_tags(text: str) -> int:
    """Count HTML-tag-like substrings."""
    return len(TAG_RE.findall(text))


def looks_like_markup(text: str, threshold: int = DEFAULT_TAG_THRESHOLD) -> bool:
    """Treat text with more than ``threshold`` tag-like substrings as markup."""
    return count_tags(text) > threshold


def _is_safe_url(value: str) -> bool:
    value = value.strip()
    if not value:
        return False
    if value.startswith(('#', '/')):
        return True
    parts = urlsplit(value)
    if not parts.scheme:
        # "javascript :alert(1)" and friends hide the scheme from urlsplit
        return ':' not in value.split('/', 1)[0]
    return parts.scheme.lower() in ALLOWED_PROTOCOLS


def _sanitize_style(value: str) -> str:
    cleaned_rules: list[str] = []
    for rule in value.split(';'):
        if ':' not in rule:
            continue
        prop, val = rule.split(':', 1)
        prop = prop.strip().lower()
        val = val.strip()
        if prop not in ALLOWED_STYLES or not val:
            continue
        if 'url(' in val.lower() or 'expression(' in val.lower():
            continue
        cleaned_rules.append(f"{prop}: {val}")
    return '; '.join(cleaned_rules)


class _HtmlPurifier(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self._output: list[str] = []
        self._open_tags: list[str] = []
        self._drop_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth += 1
            return
        if self._drop_depth or tag not in ALLOWED_TAGS:
            return

        allowed_attrs = COMMON_ATTRIBUTES | ALLOWED_ATTRIBUTES.get(tag, set())
        cleaned_attrs: list[str] = []
        for attr_name, attr_value in attrs:
            if attr_name not in allowed_attrs or attr_value is None:
                continue

            attr_value = attr_value.strip()
            if attr_name in URL_ATTRIBUTES and not _is_safe_url(attr_value):
                continue

            if attr_name == 'style':
                attr_value = _sanitize_style(attr_value)
                if not attr_value:
                    continue

            cleaned_attrs.append(f'{attr_name}="{escape(attr_value, quote=True)}"')

        attr_string = ' ' + ' '.join(cleaned_attrs) if cleaned_attrs else ''
        if tag in VOID_TAGS:
            self._output.append(f'<{tag}{attr_string} />')
            return
        self._output.append(f'<{tag}{attr_string}>')
        self._open_tags.append(tag)

    def handle_endtag(self, tag: str) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth = max(0, self._drop_depth - 1)
            return
        if self._drop_depth or tag not in ALLOWED_TAGS or tag in VOID_TAGS:
            return
        for index in range(len(self._open_tags) - 1, -1, -1):
            if self._open_tags[index] == tag:
                # Close everything opened after it as well
                for open_tag in reversed(self._open_tags[index:]):
                    self._output.append(f'</{open_tag}>')
                del self._open_tags[index:]
                break

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)
        if tag not in VOID_TAGS and tag not in DROP_CONTENT_TAGS:
            self.handle_endtag(tag)
        elif tag in DROP_CONTENT_TAGS:
            self.handle_endtag(tag)

    def handle_data(self, data: str) -> None:
        if not self._drop_depth:
            self._output.append(escape(data, quote=False))

    def handle_entityref(self, name: str) -> None:
        if not self._drop_depth:
            self._output.append(f'&{name};')

    def handle_charref(self, name: str) -> None:
        if not self._drop_depth:
            self._output.append(f'&#{name};')

    def get_html(self) -> str:
        return ''.join(self._output) + ''.join(f'</{tag}>' for tag in reversed(self._open_tags))


class _TagStripper(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self._output: list[str] = []
        self._drop_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth = max(0, self._drop_depth - 1)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        return

    def handle_data(self, data: str) -> None:
        if not self._drop_depth:
            self._output.append(data)

    def handle_entityref(self, name: str) -> None:
        if not self._drop_depth:
            self._output.append(f'&{name};')

    def handle_charref(self, name: str) -> None:
        if not self._drop_depth:
            self._output.append(f'&#{name};')

    def get_text(self) -> str:
        return ''.join(self._output)


def purify_html(raw_html: str | None) -> str:
    """Purify HTML: keep structural markup, drop scripts, handlers and unknown tags."""
    if not raw_html:
        return ''
    parser = _HtmlPurifier()
    parser.feed(raw_html)
    parser.close()
    return parser.get_html()


def strip_tags(text: str | None) -> str:
    """Remove all tags, keeping text and entities as they are."""
    if not text:
        return ''
    previous = None
    # Removing tags can assemble new ones ("<<b>script>"), repeat until stable
    while text != previous:
        previous = text
        parser = _TagStripper()
        parser.feed(text)
        parser.close()
        text = parser.get_text()
        text = TRAILING_TAG_RE.sub('', text)
    return text


class ResponseSanitizer:
    """Purify or strip model output depending on whether it looks like markup."""

    def __init__(self, tag_threshold: int = DEFAULT_TAG_THRESHOLD):
        self.tag_threshold = tag_threshold

    def _sanitize_once(self, text: str) -> str:
        if looks_like_markup(text, self.tag_threshold):
            return purify_html(text)
        return strip_tags(text)

    def sanitize(self, raw_text: str | None) -> str:
        """
        Return text that is safe to render inside the widgets.

        Purify or strip is repeated until the output is stable, so markup that
        purifies down to the tag threshold or below ends up as plain text.
        """
        text = raw_text or ''
        for _ in range(MAX_PASSES):
            sanitized = self._sanitize_once(text)
            if sanitized == text:
                return sanitized
            text = sanitized
        logger.warning("Sanitized output did not stabilize, falling back to plain text")
        return escape(strip_tags(text), quote=False)

"""Utility functions."""

from typing import Any


def sanitize_input(text: Any) -> str:
    """Escape user input before echoing it inside an HTML context."""
    if not isinstance(text, str):
        return ""
    # Ampersand first so the entities below are not double-escaped
    sanitized = text.replace("&", "&amp;")
    sanitized = sanitized.replace("<", "&lt;").replace(">", "&gt;")
    sanitized = sanitized.replace("'", "&#39;").replace('"', "&quot;")
    return sanitized


def parse_bool(value: Any, default: bool = False) -> bool:
    """Parse a boolean from config or request values ("1", "true", "yes", "on")."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")

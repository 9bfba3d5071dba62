"""Startup validation of the AI Tools configuration."""

from __future__ import annotations

import os

from flask import Flask

from aitools.ai.settings import PROVIDER_URL_MAPPING, get_ai_config, read_settings

_DEV_CONFIG_SENTINEL = "dev-" + "key-change-in-production"


def run_startup_config_audit(app: Flask) -> dict[str, list[str]]:
    """Audit critical startup settings and return warnings/errors."""
    warnings: list[str] = []
    errors: list[str] = []

    is_production = _is_production_context(app)
    secret_key = app.config.get("SECRET_KEY")
    if not secret_key or secret_key == _DEV_CONFIG_SENTINEL:  # noqa: S105
        message = "SECRET_KEY is using a development default."
        if is_production:
            errors.append(message)
        else:
            warnings.append(message)

    settings = read_settings(app.config)
    ai_config = get_ai_config(settings)
    has_deepl = bool(str(settings.get("deepl_api_key") or "").strip())

    if not settings.get("ai_model"):
        warnings.append("AI_MODEL is not set. AI prompts will be unavailable.")
    else:
        if not ai_config.api_key:
            warnings.append("AI_MODEL is set but AI_API_KEY is not set.")
        if not ai_config.model:
            errors.append(
                "AI_MODEL has no model part and AI_CUSTOM_MODEL is not set."
            )
        if not ai_config.api_url:
            if ai_config.provider and ai_config.provider not in PROVIDER_URL_MAPPING:
                errors.append(
                    f"AI provider '{ai_config.provider}' needs AI_API_URL to be set."
                )
            else:
                errors.append("AI_API_URL is not set.")

    raw_max_tokens = settings.get("ai_max_tokens")
    if raw_max_tokens not in (None, "") and (
        ai_config.max_tokens is None or ai_config.max_tokens <= 0
    ):
        errors.append("AI_MAX_TOKENS must be a positive integer.")

    if settings.get("deepl_api_url") and not has_deepl:
        warnings.append("DEEPL_API_URL is set but DEEPL_API_KEY is not set.")

    if not ai_config.api_key and not has_deepl:
        warnings.append("Neither AI_API_KEY nor DEEPL_API_KEY is set.")

    return {"warnings": warnings, "errors": errors}


def should_fail_fast_on_config_audit(app: Flask) -> bool:
    """True when startup should fail on config audit errors."""
    return bool(app.config.get("AITOOLS_FAIL_ON_CONFIG_ERRORS", False))


def _is_production_context(app: Flask) -> bool:
    if app.config.get("TESTING"):
        return False
    if app.config.get("DEBUG"):
        return False

    explicit_env = os.getenv("FLASK_ENV") or os.getenv("APP_ENV") or ""
    return explicit_env.lower() == "production"

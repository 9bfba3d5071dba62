"""
AI Tools Blueprint

JSON endpoints used by the text widgets.

Endpoints:
- POST /api/aitools/ajax - JSON-RPC style call, {"action": "process_prompt", "params": [...]}
- POST /api/aitools/process_prompt - Run a predefined prompt on content
- GET /api/aitools/prompts - Prompt menu for a textarea or htmlarea widget

Every handled failure is answered with HTTP 200 and
{"success": false, "error": "..."}, the widgets only look at the envelope.
"""

import logging

from flask import Blueprint, jsonify, request

from aitools.ai import (
    AIToolsError,
    AIToolsService,
    PromptOptions,
    UserPreferences,
    ValidationError,
    get_tools_service,
    prompt_menu,
)
from aitools.utils import parse_bool, sanitize_input

logger = logging.getLogger(__name__)

aitools_bp = Blueprint("aitools", __name__, url_prefix="/api/aitools")

GENERIC_ERROR = "An error occurred processing your request"


def _get_service() -> AIToolsService:
    service = get_tools_service()
    if service is None:
        raise AIToolsError("AI Tools service not available. Please contact your administrator.")
    return service


def get_user_preferences(data: dict | None, service: AIToolsService) -> UserPreferences:
    """
    Resolve the caller's language preferences.

    Explicit "lang" / "translation_languages" fields win, then the
    Accept-Language header, then the configured defaults.
    """
    defaults = service.default_preferences()
    data = data or {}

    ui_language = data.get("lang")
    if not isinstance(ui_language, str) or not ui_language:
        ui_language = (
            request.accept_languages.best_match(list(service.installed_languages))
            or defaults.ui_language
        )

    languages = data.get("translation_languages")
    if languages is None:
        languages = request.args.get("translation_languages")
    translation_languages = UserPreferences.parse_languages(languages)

    return UserPreferences(
        ui_language=ui_language,
        translation_languages=translation_languages or defaults.translation_languages,
    )


def _error(message: str):
    return jsonify({"success": False, "error": message})


def process_prompt(prompt_id, content, options, data: dict | None = None):
    """
    Validate inputs, run the prompt and build the response envelope.

    Returns:
        Flask JSON response with success, result, usage and source_lang
    """
    try:
        if not prompt_id or not isinstance(prompt_id, str):
            raise ValidationError("Valid prompt ID is required")
        if not isinstance(content, str):
            raise ValidationError("Valid content is required")

        service = _get_service()
        default_is_html = (data or {}).get("is_html")
        prompt_options = PromptOptions.from_value(
            options,
            default_is_html=None if default_is_html is None else parse_bool(default_is_html),
        )
        result = service.process_prompt(
            prompt_id,
            content,
            prompt_options,
            get_user_preferences(data, service),
        )

        response = {"success": True, "result": result.content, "usage": result.usage}
        if result.source_lang:
            response["source_lang"] = result.source_lang
        return jsonify(response)

    except AIToolsError as e:
        logger.info("AI Tools prompt %r failed: %s", prompt_id, e)
        return _error(str(e))
    except Exception as e:
        logger.exception(f"Unexpected AI Tools error: {e}")
        return _error(GENERIC_ERROR)


# =============================================================================
# API Routes
# =============================================================================


@aitools_bp.route("/ajax", methods=["POST"])
def api_ajax():
    """
    JSON-RPC style entry point mirroring the widget's request call.

    Request (JSON):
        - action: "process_prompt"
        - params: [prompt_id, content, options] (optional)
        - prompt_id, content, options, is_html: named alternatives to params
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _error("JSON body required")

    params = data.get("params") or []
    if not isinstance(params, list):
        return _error("params must be a list")

    action = data.get("action") or (params[0] if params else "")
    if action != "process_prompt":
        action_name = action if isinstance(action, str) else ""
        return _error("Unknown action: " + sanitize_input(action_name))

    args = params[1:] if params and params[0] == action else params
    args = list(args) + [None] * (3 - len(args))
    prompt_id = args[0] if args[0] is not None else data.get("prompt_id", "")
    content = args[1] if args[1] is not None else data.get("content", "")
    options = args[2] if args[2] is not None else data.get("options")

    return process_prompt(prompt_id, content, options, data)


@aitools_bp.route("/process_prompt", methods=["POST"])
def api_process_prompt():
    """
    Run a predefined prompt.

    Request (JSON):
        - prompt_id: Prompt ID from the catalog (required)
        - content: Text or HTML to process (required)
        - options: {"is_html": bool, "source_lang": str} (optional)
        - lang: UI language of the user (optional)
        - translation_languages: Preferred translation languages (optional)

    Response:
        - success: boolean
        - result: Processed content
        - usage: Token usage reported by the provider
        - source_lang: Detected source language (DeepL translations)
        - error: Message on failure
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _error("JSON body required")

    return process_prompt(
        data.get("prompt_id", ""),
        data.get("content", ""),
        data.get("options"),
        data,
    )


@aitools_bp.route("/prompts", methods=["GET"])
def api_prompts():
    """
    Return the prompt menu for a widget.

    Query params:
        - widget: "textarea" (default) or "htmlarea"
        - lang: UI language (optional)
        - translation_languages: comma separated codes (optional)
    """
    try:
        service = _get_service()
        widget = request.args.get("widget", "textarea")
        data = {"lang": request.args.get("lang")}
        catalog = service.get_catalog(get_user_preferences(data, service))
        return jsonify({"success": True, "widget": widget, "prompts": prompt_menu(widget, catalog)})
    except AIToolsError as e:
        return _error(str(e))
    except Exception as e:
        logger.exception(f"Unexpected error building prompt menu: {e}")
        return _error(GENERIC_ERROR)

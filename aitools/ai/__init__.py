"""
AI Module

Predefined prompts for text widgets, sent to an OpenAI-compatible
chat-completion endpoint or to DeepL, with sanitized results.

Usage:
    from aitools.ai import get_tools_service, PromptOptions

    service = get_tools_service()
    result = service.process_prompt(
        "aiassist.summarize", "Long text ...", PromptOptions(is_html=False)
    )
    print(result.content)

    # Or use the pieces directly
    from aitools.ai import build_prompt_catalog, build_request, ChatCompletionClient
    catalog = build_prompt_catalog("en", ["de"], {"en": "English", "de": "German"})
    request = build_request("aiassist.translate-de", "Hello", False, catalog)
"""

from .client import (
    AIClient,
    ChatCompletionClient,
    MockAIClient,
    response_status,
    verify_api_connection,
)
from .deepl_client import DeepLClient, DeepLTranslation, deepl_translate
from .errors import (
    AIServiceError,
    AIToolsError,
    ConfigurationError,
    ConnectionTestError,
    ContentTooLargeError,
    HttpError,
    InvalidResponseError,
    PromptNotFoundError,
    ProviderRefusedError,
    TransportError,
    ValidationError,
)
from .models import (
    AiConfig,
    AIResponse,
    ChatMessage,
    ChatRequest,
    PromptOptions,
    PromptResult,
    PromptTemplate,
    StatusResult,
    TranslationResult,
    UserPreferences,
)
from .prompts import PromptCatalog, build_prompt_catalog, prompt_menu
from .request_builder import build_request
from .sanitizer import ResponseSanitizer
from .settings import get_ai_config, read_settings
from .tools_service import AIToolsService, get_tools_service, init_tools_service
from .translator import (
    ChatCompletionTranslator,
    DeepLTranslator,
    Translator,
    select_translator,
)

__all__ = [
    # Models
    "AiConfig",
    "AIResponse",
    "ChatMessage",
    "ChatRequest",
    "PromptOptions",
    "PromptResult",
    "PromptTemplate",
    "StatusResult",
    "TranslationResult",
    "UserPreferences",
    # Clients
    "AIClient",
    "ChatCompletionClient",
    "MockAIClient",
    "DeepLClient",
    "DeepLTranslation",
    "deepl_translate",
    "response_status",
    "verify_api_connection",
    # Exceptions
    "AIToolsError",
    "AIServiceError",
    "ConfigurationError",
    "ConnectionTestError",
    "ContentTooLargeError",
    "HttpError",
    "InvalidResponseError",
    "PromptNotFoundError",
    "ProviderRefusedError",
    "TransportError",
    "ValidationError",
    # Prompts and requests
    "PromptCatalog",
    "build_prompt_catalog",
    "prompt_menu",
    "build_request",
    "ResponseSanitizer",
    "get_ai_config",
    "read_settings",
    # Translators
    "Translator",
    "ChatCompletionTranslator",
    "DeepLTranslator",
    "select_translator",
    # Service
    "AIToolsService",
    "get_tools_service",
    "init_tools_service",
]

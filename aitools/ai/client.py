"""
AI Client

Abstract base class and implementations for the chat-completion endpoint.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import requests

from .errors import (
    ConfigurationError,
    ConnectionTestError,
    HttpError,
    InvalidResponseError,
    ProviderRefusedError,
    TransportError,
)
from .models import AiConfig, AIResponse, ChatRequest, StatusResult
from .settings import sanitize_api_key

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 10
MODELS_TIMEOUT = 15

DEFAULT_CONTENT = "I processed your request."

FINISH_REASON_MESSAGES = {
    "length": "The response was too long to complete. "
    "Please try a shorter or more specific request.",
    "content_filter": "The request could not be completed due to content restrictions.",
    "tool_calls": "The AI could not return a final answer for this request.",
}
UNKNOWN_FINISH_REASON_MESSAGE = "The request could not be completed. Please try again."
PROVIDER_ERROR_MESSAGE = (
    "The AI service could not process your request. Please try again later."
)


def http_error_message(
    status_code: int,
    prefix: str = "AI service request failed. ",
    auth_codes: tuple[int, ...] = (401,),
) -> str:
    """Map an HTTP status to a user-facing message without internal details."""
    if status_code in auth_codes:
        detail = "Authentication error. Please contact your administrator."
    elif status_code == 404:
        detail = "Service endpoint not found. Please contact your administrator."
    elif status_code == 429:
        detail = "Rate limit exceeded. Please try again later."
    elif status_code >= 500:
        detail = "Service temporarily unavailable. Please try again later."
    else:
        detail = "Please contact your administrator."
    return prefix + detail


def transport_error(exc: requests.RequestException, service: str = "AI service") -> TransportError:
    """Convert a requests exception into a TransportError with a generic message."""
    if isinstance(exc, requests.Timeout):
        return TransportError(f"{service} request timed out. Please try again later.")
    return TransportError(f"{service} request failed. Could not reach the service.")


def response_status(result: dict[str, Any]) -> StatusResult:
    """
    Return a simple, user-friendly status for a decoded chat-completion response.

    A missing finish_reason or "stop" counts as success.
    """
    if "error" in result:
        return StatusResult(ok=False, message=PROVIDER_ERROR_MESSAGE)

    finish_reason = None
    for key in ("choices", "output"):
        entries = result.get(key)
        if isinstance(entries, list) and entries and isinstance(entries[0], dict):
            if entries[0].get("finish_reason") is not None:
                finish_reason = entries[0]["finish_reason"]
                break

    if finish_reason is None or finish_reason == "stop":
        return StatusResult(ok=True, message="Request completed successfully.")

    return StatusResult(
        ok=False,
        message=FINISH_REASON_MESSAGES.get(finish_reason, UNKNOWN_FINISH_REASON_MESSAGE),
    )


def _auth_headers(api_key: str | None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {sanitize_api_key(api_key)}"
    return headers


class AIClient(ABC):
    """Abstract base class for chat-completion clients."""

    @abstractmethod
    def chat_sync(self, config: AiConfig, request: ChatRequest) -> AIResponse:
        """
        Send a chat request synchronously.

        Args:
            config: Endpoint, key and model to use
            request: Messages and sampling parameters

        Returns:
            AIResponse with content and usage info
        """
        ...


class ChatCompletionClient(AIClient):
    """Client for OpenAI-compatible /chat/completions endpoints."""

    def chat_sync(self, config: AiConfig, request: ChatRequest) -> AIResponse:
        """
        Send a chat request synchronously.

        Raises:
            TransportError: On connection failures and timeouts
            HttpError: If the endpoint answers with a non-200 status
            InvalidResponseError: If the response is not a chat completion
            ProviderRefusedError: If the finish reason signals a failure
        """
        payload = {
            "model": config.model,
            "messages": [message.to_dict() for message in request.messages],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        headers = _auth_headers(config.api_key)
        # None drops the header, no "Expect: 100-continue" round trip
        headers["Expect"] = None

        try:
            resp = requests.post(
                f"{config.api_url}/chat/completions",
                data=json.dumps(payload),
                headers=headers,
                timeout=(CONNECT_TIMEOUT, request.timeout),
                verify=True,
            )
        except requests.RequestException as e:
            logger.error("AI API request to %s failed: %s", config.api_url, e)
            raise transport_error(e) from e

        if resp.status_code != 200:
            logger.error(
                "AI API request failed with status: %s - %s (URL: %s)",
                resp.status_code,
                _error_details(resp),
                config.api_url,
            )
            raise HttpError(http_error_message(resp.status_code), resp.status_code)

        content_type = resp.headers.get("Content-Type", "")
        if content_type and "application/json" not in content_type:
            logger.error("Unexpected content type from AI API: %s", content_type)
            raise InvalidResponseError("Invalid response format from AI service.")

        try:
            result = resp.json()
        except ValueError:
            result = None
        if not result or not isinstance(result, dict):
            logger.error("Failed to decode AI API response: %s", resp.text[:200])
            raise InvalidResponseError("Invalid response from AI service.")

        message = _first_message(result)
        if message is None:
            logger.error("AI API response missing expected structure")
            raise InvalidResponseError("Unexpected response format from AI service.")

        status = response_status(result)
        if not status.ok:
            logger.warning(
                "AI API response not usable (finish_reason=%s)",
                result["choices"][0].get("finish_reason"),
            )
            raise ProviderRefusedError(status.message)

        return AIResponse(
            content=message.get("content") or DEFAULT_CONTENT,
            usage=result.get("usage"),
        )


class MockAIClient(AIClient):
    """Mock AI client for testing."""

    def __init__(self, response_content: str = "Mock response"):
        """
        Initialize mock client.

        Args:
            response_content: Content to return in responses
        """
        self.response_content = response_content
        self.call_history: list[dict] = []

    def chat_sync(self, config: AiConfig, request: ChatRequest) -> AIResponse:
        """Record call and return mock response."""
        self.call_history.append({"config": config, "request": request})
        return AIResponse(
            content=self.response_content,
            usage={"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
        )


def verify_api_connection(config: AiConfig) -> bool:
    """
    Check that the endpoint is reachable and offers the configured model.

    Raises:
        ConfigurationError: If API URL or model are missing
        ConnectionTestError: If the endpoint fails or lacks the model
    """
    if not config.api_url or not config.model:
        raise ConfigurationError("Missing configuration: API URL or Model!")

    try:
        resp = requests.get(
            f"{config.api_url}/models",
            headers=_auth_headers(config.api_key),
            timeout=MODELS_TIMEOUT,
        )
    except requests.RequestException as e:
        raise ConnectionTestError(f"API request failed: {e}") from e

    if resp.status_code != 200:
        raise ConnectionTestError(f"HTTP {resp.status_code}: {resp.text[:500]}")

    try:
        result = resp.json()
    except ValueError as e:
        raise ConnectionTestError("Invalid JSON returned by models endpoint") from e

    models = result.get("data") if isinstance(result, dict) else None
    if not any(
        isinstance(model, dict) and model.get("id") == config.model
        for model in models or []
    ):
        raise ConnectionTestError(
            f"Invalid model {config.model}, not supported by endpoint!"
        )
    return True


def _first_message(result: dict[str, Any]) -> dict[str, Any] | None:
    choices = result.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    return message if isinstance(message, dict) else None


def _error_details(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", ""))
    return resp.text[:500]

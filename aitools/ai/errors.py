"""
AI Tools exceptions.

Every message carried by these exceptions is safe to show to the end user.
Provider details (URLs, raw response bodies) are logged, never put here.
"""


class AIToolsError(Exception):
    """Base exception for AI Tools errors."""


class ValidationError(AIToolsError):
    """Raised for bad or missing input."""


class ContentTooLargeError(ValidationError):
    """Raised when the content exceeds the size limit."""


class PromptNotFoundError(ValidationError):
    """Raised when a prompt ID is not in the catalog."""


class ConfigurationError(AIToolsError):
    """Raised when the AI or translation service is not configured."""


class AIServiceError(AIToolsError):
    """Base class for failures talking to a remote AI or translation service."""


class TransportError(AIServiceError):
    """Raised on network failures (DNS, TLS, connection, timeout)."""


class HttpError(AIServiceError):
    """Raised when the service answers with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class InvalidResponseError(AIServiceError):
    """Raised when the response is not JSON or lacks the expected shape."""


class ProviderRefusedError(AIServiceError):
    """Raised when the provider signals a non-success finish reason."""


class ConnectionTestError(AIToolsError):
    """Raised by the connectivity checks used from the admin CLI."""

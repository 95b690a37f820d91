"""
Centralized exception handling for the support agent service.
"""
from typing import Any, Dict, Optional
import structlog

logger = structlog.get_logger(__name__)


class SupportAgentException(Exception):
    """Base exception for the support agent service."""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
        user_message: Optional[str] = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.status_code = status_code
        self.user_message = user_message or message

        super().__init__(self.message)

        log = logger.error if is_server_error(self) else logger.warning
        log(
            "Support agent exception raised",
            error_code=self.error_code,
            message=self.message,
            details=self.details,
            status_code=self.status_code
        )


class ValidationError(SupportAgentException):
    """Malformed chat input."""

    def __init__(self, message: str = "Please provide a valid message", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
            status_code=400
        )


class KnowledgeBaseNotReadyError(SupportAgentException):
    """A query arrived before the first successful ingestion."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Knowledge base is still initializing. Please try again in a moment.",
            error_code="SERVICE_UNAVAILABLE",
            details=details,
            status_code=503
        )


class FetchError(SupportAgentException):
    """A single page could not be loaded."""

    def __init__(self, page_name: str, url: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Failed to fetch {page_name} ({url}): {message}",
            error_code="FETCH_ERROR",
            details=details or {"page_name": page_name, "url": url},
            status_code=502
        )


class EmbeddingError(SupportAgentException):
    """A single text could not be embedded."""

    def __init__(self, provider: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Embedding provider {provider} failed: {message}",
            error_code="EMBEDDING_ERROR",
            details=details or {"provider": provider},
            status_code=502
        )


class DimensionMismatchError(SupportAgentException, ValueError):
    """Two vectors of different lengths were compared."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            message=f"Vectors must have the same length (got {expected} and {actual})",
            error_code="DIMENSION_MISMATCH",
            details={"expected": expected, "actual": actual},
            status_code=500
        )


class IngestionAbortError(SupportAgentException):
    """An initialization attempt retrieved no content at all."""

    def __init__(self, message: str = "No content was retrieved from any configured page", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="INGESTION_ABORTED",
            details=details,
            status_code=500
        )


class RetrievalError(SupportAgentException):
    """Similarity search failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Retrieval failed: {message}",
            error_code="RETRIEVAL_ERROR",
            details=details,
            status_code=500
        )


class CompletionError(SupportAgentException):
    """Completion model call failed."""

    def __init__(self, provider: str, model: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"AI model {provider}/{model} failed: {message}",
            error_code="COMPLETION_ERROR",
            details=details or {"provider": provider, "model": model},
            status_code=502
        )


class ConfigurationError(SupportAgentException):
    """Configuration and setup errors."""

    def __init__(self, component: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Configuration error in {component}: {message}",
            error_code="CONFIGURATION_ERROR",
            details=details or {"component": component},
            status_code=500
        )


def handle_exception(exc: Exception) -> Dict[str, Any]:
    """Convert any exception to a standardized error response."""
    if isinstance(exc, SupportAgentException):
        return {
            "error": exc.error_code,
            "message": exc.user_message,
            "details": exc.details,
            "status_code": exc.status_code,
        }

    logger.error("Unexpected exception", error=str(exc), exc_info=True)

    return {
        "error": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
        "details": {},
        "status_code": 500,
    }


def is_server_error(exc: Exception) -> bool:
    """Check if the exception represents a server error (5xx)."""
    if isinstance(exc, SupportAgentException):
        return 500 <= exc.status_code < 600
    return True

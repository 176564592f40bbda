"""Application exception hierarchy.

All custom exceptions inherit from VectorSearchError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "VS-1000"
    CONFIGURATION_ERROR = "VS-1001"

    # Connectivity and auth errors (2xxx)
    AUTHENTICATION_ERROR = "VS-2000"
    CONNECTION_ERROR = "VS-2001"

    # Record file errors (3xxx)
    RECORD_FILE_NOT_FOUND = "VS-3000"
    RECORD_FILE_PARSE_ERROR = "VS-3001"
    RECORD_FILE_WRITE_ERROR = "VS-3002"
    NO_VECTOR_RECORDS = "VS-3003"

    # Embedding errors (4xxx)
    EMBEDDING_SERVICE_ERROR = "VS-4000"
    EMBEDDING_DIMENSION_MISMATCH = "VS-4001"
    EMBEDDING_RESPONSE_ERROR = "VS-4002"

    # Vector store errors (5xxx)
    VECTOR_STORE_ERROR = "VS-5000"
    INSERT_FAILED = "VS-5001"
    INDEX_CREATION_FAILED = "VS-5002"
    INDEX_TIER_UNSUPPORTED = "VS-5003"
    SEARCH_FAILED = "VS-5004"


class VectorSearchError(Exception):
    """Base exception for all vector search sample errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(VectorSearchError):
    """Missing or invalid setting."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class AuthenticationError(VectorSearchError):
    """Token acquisition or credential error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.AUTHENTICATION_ERROR, details)


class DatabaseConnectionError(VectorSearchError):
    """Database unreachable or handshake failed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONNECTION_ERROR, details)


class RecordFileError(VectorSearchError):
    """Sample record file could not be read or written."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RECORD_FILE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class EmbeddingError(VectorSearchError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(VectorSearchError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class UnsupportedIndexTierError(VectorStoreError):
    """The cluster tier does not support the requested index algorithm.

    ``details["alternatives"]`` lists the other algorithm kinds to try.
    """

    def __init__(
        self,
        message: str,
        kind: str,
        alternatives: list[str],
        server_message: str,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.INDEX_TIER_UNSUPPORTED,
            details={
                "kind": kind,
                "alternatives": alternatives,
                "server_message": server_message,
            },
        )
        self.kind = kind
        self.alternatives = alternatives
        self.server_message = server_message

"""Embedding service interface and Azure OpenAI implementation."""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from vectorsearch.config import EmbeddingSettings, get_settings
from vectorsearch.credentials import TokenSupplier
from vectorsearch.embeddings.models import EmbeddingResult
from vectorsearch.exceptions import ConfigurationError, EmbeddingError, ErrorCode
from vectorsearch.logging_config import get_logger

logger = get_logger(__name__)


class EmbeddingService(ABC):
    """Abstract base class for embedding services.

    Defines the interface for generating text embeddings.
    """

    @abstractmethod
    def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @abstractmethod
    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for a batch of texts in one request.

        Args:
            texts: Texts to embed.

        Returns:
            One EmbeddingResult per input, in input order.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...

    def close(self) -> None:
        """Release any underlying connection."""


class AzureOpenAIEmbeddingService(EmbeddingService):
    """Embedding service backed by the Azure OpenAI v1 REST API.

    Authenticates with either an ``api-key`` header or a bearer token
    fetched from a token supplier on every request.
    """

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        client: httpx.Client | None = None,
        api_key: str | None = None,
        token_supplier: TokenSupplier | None = None,
    ) -> None:
        """Initialize the embedding service.

        Args:
            settings: Embedding configuration. Uses defaults if not provided.
            client: HTTP client. Creates new one if not provided.
            api_key: Static API key.
            token_supplier: Bearer token source, preferred over api_key.

        Raises:
            ConfigurationError: If no endpoint or no credential is configured.
        """
        self._settings = settings or get_settings().embedding
        if not self._settings.endpoint:
            raise ConfigurationError(
                "AZURE_OPENAI_EMBEDDING_ENDPOINT environment variable is required",
                details={"setting": "AZURE_OPENAI_EMBEDDING_ENDPOINT"},
            )
        if api_key is None and token_supplier is None:
            raise ConfigurationError(
                "Either an API key or a token supplier is required for the embedding service",
                details={"setting": "AZURE_OPENAI_EMBEDDING_KEY"},
            )

        self._api_key = api_key
        self._token_supplier = token_supplier
        self._client = client
        self._owns_client = client is None

    @property
    def url(self) -> str:
        """Embeddings endpoint URL."""
        endpoint = (self._settings.endpoint or "").rstrip("/")
        return f"{endpoint}/openai/v1/embeddings"

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self._settings.timeout)
        return self._client

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def _auth_headers(self) -> dict[str, str]:
        if self._token_supplier is not None:
            return {"Authorization": f"Bearer {self._token_supplier()}"}
        return {"api-key": self._api_key or ""}

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            EmbeddingError: If embedding fails.
        """
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for a batch of texts in one request.

        Args:
            texts: Texts to embed.

        Returns:
            One EmbeddingResult per input, in input order.

        Raises:
            EmbeddingError: If the request fails or the response is malformed.
        """
        if not texts:
            return []

        client = self._get_client()
        payload = {
            "input": texts,
            "model": self._settings.model,
        }

        logger.debug(f"Generating embeddings for {len(texts)} texts")

        try:
            response = client.post(self.url, json=payload, headers=self._auth_headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Embedding request failed: {e.response.status_code}",
                extra={"url": self.url, "status": e.response.status_code},
            )
            raise EmbeddingError(
                f"Embedding service returned {e.response.status_code}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(
                f"Embedding request error: {e}",
                extra={"url": self.url},
            )
            raise EmbeddingError(
                f"Failed to connect to embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"url": self.url},
            ) from e

        try:
            return self._parse_response(response.json(), texts)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise EmbeddingError(
                f"Invalid response from embedding service: {e}",
                code=ErrorCode.EMBEDDING_RESPONSE_ERROR,
                details={"error": str(e)},
            ) from e

    def _parse_response(
        self,
        data: dict[str, Any],
        texts: list[str],
    ) -> list[EmbeddingResult]:
        items = data["data"]
        if len(items) != len(texts):
            raise ValueError(f"expected {len(texts)} embeddings, got {len(items)}")

        # The API may return items out of order; "index" ties each to its input
        ordered = sorted(
            enumerate(items),
            key=lambda pair: pair[1].get("index", pair[0]),
        )

        results: list[EmbeddingResult] = []
        for position, (_, item) in enumerate(ordered):
            embedding = [float(value) for value in item["embedding"]]
            results.append(
                EmbeddingResult(
                    text=texts[position],
                    embedding=embedding,
                    model=self._settings.model,
                    dimensions=len(embedding),
                )
            )

        return results

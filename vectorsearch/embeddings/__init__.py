"""Embedding service module."""

from vectorsearch.embeddings.generator import RecordEmbedder
from vectorsearch.embeddings.models import EmbeddingResult, EmbeddingStats
from vectorsearch.embeddings.service import AzureOpenAIEmbeddingService, EmbeddingService

__all__ = [
    "AzureOpenAIEmbeddingService",
    "EmbeddingResult",
    "EmbeddingService",
    "EmbeddingStats",
    "RecordEmbedder",
]

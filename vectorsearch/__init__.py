"""Vector search samples for DocumentDB with Azure OpenAI embeddings."""

__version__ = "0.1.0"

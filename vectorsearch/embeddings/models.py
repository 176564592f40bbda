"""Embedding data models."""

from pydantic import BaseModel, Field


class EmbeddingResult(BaseModel):
    """Result of an embedding operation.

    Attributes:
        text: The original text that was embedded.
        embedding: The embedding vector.
        model: The model used to generate the embedding.
        dimensions: Number of dimensions in the embedding.
    """

    text: str = Field(description="Original text")
    embedding: list[float] = Field(description="Embedding vector")
    model: str = Field(description="Model used for embedding")
    dimensions: int = Field(description="Vector dimensions")

    def model_post_init(self, __context: object) -> None:
        """Validate dimensions match embedding length."""
        if self.dimensions != len(self.embedding):
            raise ValueError(
                f"dimensions ({self.dimensions}) does not match "
                f"embedding length ({len(self.embedding)})"
            )


class EmbeddingStats(BaseModel):
    """Outcome of embedding a record set.

    Attributes:
        total: Records examined.
        embedded: Records that received a vector.
        skipped: Records without usable text.
        batches: Embedding requests issued.
    """

    total: int = Field(default=0, description="Records examined")
    embedded: int = Field(default=0, description="Records that received a vector")
    skipped: int = Field(default=0, description="Records without usable text")
    batches: int = Field(default=0, description="Embedding requests issued")

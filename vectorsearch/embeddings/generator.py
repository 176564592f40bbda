"""Attach embedding vectors to records in batches."""

import time
from collections.abc import Callable
from typing import Any

from vectorsearch.batching import batch_count, chunk
from vectorsearch.embeddings.models import EmbeddingStats
from vectorsearch.embeddings.service import EmbeddingService
from vectorsearch.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_BATCH_DELAY = 1.0


class RecordEmbedder:
    """Embed one text field of each record into a vector field.

    Records are processed in batches; each batch is a single embedding
    request, followed by a fixed delay to stay under the service's rate
    limits. Records whose text field is missing, empty or not a string are
    left without a vector.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        field_to_embed: str,
        embedded_field: str,
        batch_size: int,
        batch_delay: float = DEFAULT_BATCH_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        id_field: str = "HotelId",
    ) -> None:
        """Initialize the embedder.

        Args:
            embedding_service: Service that produces vectors.
            field_to_embed: Source text field.
            embedded_field: Destination vector field.
            batch_size: Records per embedding request.
            batch_delay: Seconds to wait between batches.
            sleep: Sleep function (replaced in tests).
            id_field: Field used to identify records in warnings.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self._service = embedding_service
        self.field_to_embed = field_to_embed
        self.embedded_field = embedded_field
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self._sleep = sleep
        self._id_field = id_field

    def embed_records(self, records: list[dict[str, Any]]) -> EmbeddingStats:
        """Add vectors to records in place.

        Args:
            records: Records to enrich.

        Returns:
            Counts of embedded and skipped records.

        Raises:
            EmbeddingError: If an embedding request fails.
        """
        stats = EmbeddingStats(total=len(records))
        total_batches = batch_count(len(records), self.batch_size)

        logger.info(
            f"Processing {len(records)} documents in {total_batches} batches",
            extra={"batch_size": self.batch_size},
        )

        for batch_number, batch in enumerate(chunk(records, self.batch_size), start=1):
            logger.info(
                f"Processing batch {batch_number}/{total_batches} ({len(batch)} documents)"
            )
            embedded, skipped = self._embed_batch(batch)
            stats.embedded += embedded
            stats.skipped += skipped
            if embedded:
                stats.batches += 1

            if batch_number < total_batches:
                self._sleep(self.batch_delay)

        return stats

    def _embed_batch(self, batch: list[dict[str, Any]]) -> tuple[int, int]:
        texts: list[str] = []
        targets: list[dict[str, Any]] = []

        for record in batch:
            text = record.get(self.field_to_embed)
            if not isinstance(text, str) or not text:
                state = "missing" if self.field_to_embed not in record else "invalid"
                logger.warning(
                    f"Document {record.get(self._id_field)} has {state} "
                    f"{self.field_to_embed} field, skipping"
                )
                continue
            texts.append(text)
            targets.append(record)

        skipped = len(batch) - len(targets)
        if not texts:
            logger.info("No texts found to embed in this batch")
            return 0, skipped

        results = self._service.embed_batch(texts)
        for record, result in zip(targets, results, strict=True):
            record[self.embedded_field] = result.embedding

        logger.info(f"Added embeddings to {len(results)} documents in batch")
        return len(results), skipped

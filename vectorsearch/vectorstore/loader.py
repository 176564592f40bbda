"""Batched record insertion with partial-failure accounting."""

import time
from collections.abc import Callable, Iterable
from typing import Any

from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import BulkWriteError, PyMongoError

from vectorsearch.batching import batch_count, chunk
from vectorsearch.exceptions import ErrorCode, VectorStoreError
from vectorsearch.logging_config import get_logger
from vectorsearch.vectorstore.models import BatchInsertResult, InsertStats

logger = get_logger(__name__)

DEFAULT_BATCH_PAUSE = 0.1


def clear_collection(collection: Collection) -> int:
    """Delete every document in the collection.

    Returns:
        Number of documents deleted.

    Raises:
        VectorStoreError: If the delete fails.
    """
    try:
        result = collection.delete_many({})
    except PyMongoError as e:
        raise VectorStoreError(
            f"Failed to clear existing data: {e}",
            code=ErrorCode.VECTOR_STORE_ERROR,
            details={"collection": collection.name, "error": str(e)},
        ) from e

    if result.deleted_count:
        logger.info(f"Cleared {result.deleted_count} existing documents from collection")
    return result.deleted_count


def create_field_indexes(collection: Collection, fields: Iterable[str]) -> list[str]:
    """Create ascending indexes on plain fields, best effort.

    Returns:
        Names of the indexes created.
    """
    created: list[str] = []
    for field in fields:
        try:
            created.append(collection.create_index([(field, ASCENDING)]))
            logger.info(f"Created index on field: {field}")
        except PyMongoError as e:
            logger.warning(f"Could not create index on {field}: {e}")
    return created


def insert_batch(
    collection: Collection,
    batch: list[dict[str, Any]],
    batch_number: int,
) -> BatchInsertResult:
    """Insert one chunk with ordered inserts disabled.

    A bad document does not stop the rest of its chunk; the server reports
    each rejected document as a write error.
    """
    result = BatchInsertResult(batch_number=batch_number, size=len(batch))

    try:
        outcome = collection.insert_many(batch, ordered=False)
    except BulkWriteError as e:
        write_errors = e.details.get("writeErrors", [])
        result.failed = len(write_errors)
        result.inserted = e.details.get("nInserted", len(batch) - result.failed)
        result.errors = [err.get("errmsg", str(err)) for err in write_errors]
        logger.warning(
            f"Batch {batch_number} had errors: {result.inserted} inserted, {result.failed} failed",
            extra={"errors": result.errors},
        )
        return result
    except PyMongoError as e:
        result.failed = len(batch)
        result.errors = [str(e)]
        logger.error(f"Batch {batch_number} failed completely: {e}")
        return result

    result.inserted = len(outcome.inserted_ids)
    logger.info(f"Batch {batch_number} completed: {result.inserted} documents inserted")
    return result


def insert_records(
    collection: Collection,
    records: list[dict[str, Any]],
    batch_size: int,
    index_fields: Iterable[str] = (),
    pause: float = DEFAULT_BATCH_PAUSE,
    sleep: Callable[[float], None] = time.sleep,
) -> InsertStats:
    """Insert records in contiguous chunks, continuing past failed chunks.

    Failed documents are counted, never retried.

    Args:
        collection: Target collection.
        records: Documents to insert.
        batch_size: Maximum documents per chunk.
        index_fields: Plain fields to index before loading.
        pause: Seconds to wait between chunks.
        sleep: Sleep function (replaced in tests).

    Returns:
        Insert totals and per-chunk outcomes.
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    stats = InsertStats(total=len(records))
    total_batches = batch_count(len(records), batch_size)

    logger.info(f"Starting batch insertion of {len(records)} documents...")
    create_field_indexes(collection, index_fields)

    for batch_number, batch in enumerate(chunk(records, batch_size), start=1):
        result = insert_batch(collection, list(batch), batch_number)
        stats.batches.append(result)
        stats.inserted += result.inserted
        stats.failed += result.failed

        if batch_number < total_batches:
            sleep(pause)

    return stats

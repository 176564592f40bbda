"""Vector similarity search through the $search / cosmosSearch stage."""

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from pydantic import ValidationError
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from vectorsearch.embeddings.service import EmbeddingService
from vectorsearch.exceptions import ErrorCode, VectorStoreError
from vectorsearch.logging_config import get_logger
from vectorsearch.vectorstore.models import SearchResult

logger = get_logger(__name__)

SCORE_FIELD = "score"
DOCUMENT_FIELD = "document"


def build_search_pipeline(
    vector: list[float],
    path: str,
    k: int,
    projection: Sequence[str] | None = None,
) -> list[dict[str, Any]]:
    """Build the two-stage similarity search aggregation.

    Args:
        vector: Query embedding.
        path: Field holding the document vectors.
        k: Maximum number of results.
        projection: Fields to return. Returns the whole document if omitted.

    Returns:
        Aggregation pipeline.
    """
    if k <= 0:
        raise ValueError(f"k must be positive, got {k}")

    if projection:
        project: dict[str, Any] = {field: 1 for field in projection}
    else:
        project = {DOCUMENT_FIELD: "$$ROOT"}
    project[SCORE_FIELD] = {"$meta": "searchScore"}

    return [
        {
            "$search": {
                "cosmosSearch": {
                    "vector": vector,
                    "path": path,
                    "k": k,
                },
            },
        },
        {"$project": project},
    ]


def _decode(raw: dict[str, Any]) -> SearchResult:
    score = raw[SCORE_FIELD]
    if DOCUMENT_FIELD in raw and isinstance(raw[DOCUMENT_FIELD], dict):
        document = dict(raw[DOCUMENT_FIELD])
    else:
        document = {key: value for key, value in raw.items() if key != SCORE_FIELD}
    return SearchResult(document=document, score=score)


class VectorSearcher:
    """Embed a query and run a similarity search against one collection."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        collection: Collection,
        vector_field: str,
    ) -> None:
        """Initialize the searcher.

        Args:
            embedding_service: Service used to embed query text.
            collection: Collection carrying the vector index.
            vector_field: Field holding document vectors.
        """
        self._embedding_service = embedding_service
        self._collection = collection
        self._vector_field = vector_field

    def search(
        self,
        query: str,
        k: int = 5,
        projection: Sequence[str] | None = None,
    ) -> Iterator[SearchResult]:
        """Yield scored results in the order the database returns them.

        The query is embedded before the first result is produced. A result
        that cannot be decoded is skipped with a warning. The cursor is
        closed when iteration ends or the generator is closed.

        Raises:
            EmbeddingError: If the query cannot be embedded.
            VectorStoreError: If the aggregation fails.
        """
        logger.info(f"Performing vector search for: '{query}'")
        vector = self._embedding_service.embed(query).embedding
        pipeline = build_search_pipeline(vector, self._vector_field, k, projection)

        try:
            cursor = self._collection.aggregate(pipeline)
        except PyMongoError as e:
            raise VectorStoreError(
                f"Error performing vector search: {e}",
                code=ErrorCode.SEARCH_FAILED,
                details={"collection": self._collection.name, "error": str(e)},
            ) from e

        try:
            for raw in cursor:
                try:
                    yield _decode(raw)
                except (KeyError, TypeError, ValidationError) as e:
                    logger.warning(f"Could not decode result: {e}")
        except PyMongoError as e:
            raise VectorStoreError(
                f"Cursor error: {e}",
                code=ErrorCode.SEARCH_FAILED,
                details={"collection": self._collection.name, "error": str(e)},
            ) from e
        finally:
            cursor.close()


def format_search_results(
    results: Iterable[SearchResult],
    display_field: str = "HotelName",
    show_score: bool = True,
) -> list[str]:
    """Render ranked result lines, e.g. ``1. HotelName: Foo, Score: 0.8123``."""
    lines: list[str] = []
    for rank, result in enumerate(results, start=1):
        line = f"{rank}. {display_field}: {result.document.get(display_field)}"
        if show_score:
            line += f", Score: {result.score:.4f}"
        lines.append(line)
    return lines

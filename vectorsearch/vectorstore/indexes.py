"""Vector index lifecycle: inspect, drop and create cosmosSearch indexes."""

import time
from collections.abc import Callable

from pymongo.collection import Collection
from pymongo.errors import OperationFailure, PyMongoError

from vectorsearch.exceptions import ErrorCode, UnsupportedIndexTierError, VectorStoreError
from vectorsearch.logging_config import get_logger
from vectorsearch.vectorstore.models import IndexInfo, VectorIndexSpec

logger = get_logger(__name__)

TIER_UNSUPPORTED_MARKER = "not enabled for this cluster tier"
DEFAULT_INDEX_WAIT = 2.0


def list_indexes(collection: Collection) -> list[IndexInfo]:
    """Describe every index on the collection.

    Raises:
        VectorStoreError: If the indexes cannot be listed.
    """
    try:
        with collection.list_indexes() as cursor:
            return [IndexInfo.model_validate(dict(index)) for index in cursor]
    except PyMongoError as e:
        raise VectorStoreError(
            f"Error retrieving indexes for collection '{collection.name}': {e}",
            code=ErrorCode.VECTOR_STORE_ERROR,
            details={"collection": collection.name, "error": str(e)},
        ) from e


def find_vector_indexes(collection: Collection, field: str) -> list[str]:
    """Names of the vector indexes keyed on ``field``."""
    return [
        info.name
        for info in list_indexes(collection)
        if info.is_vector_index_on(field)
    ]


def drop_vector_indexes(collection: Collection, field: str) -> list[str]:
    """Drop every vector index on ``field``, best effort.

    Listing and drop failures are logged, never raised.

    Returns:
        Names of the indexes that were dropped.
    """
    try:
        names = find_vector_indexes(collection, field)
    except VectorStoreError as e:
        logger.warning(f"Could not list indexes: {e}")
        return []

    dropped: list[str] = []
    for name in names:
        logger.info(f"Dropping existing vector index: {name}")
        try:
            collection.drop_index(name)
        except PyMongoError as e:
            logger.warning(f"Could not drop index {name}: {e}")
            continue
        dropped.append(name)

    if names:
        logger.info(f"Dropped {len(dropped)} existing vector index(es)")
    else:
        logger.info("No existing vector indexes found to drop")
    return dropped


def create_vector_index(collection: Collection, spec: VectorIndexSpec) -> None:
    """Replace any vector index on the target field with a new one.

    Raises:
        UnsupportedIndexTierError: If the cluster tier lacks the algorithm.
        VectorStoreError: If the server rejects the command otherwise.
    """
    kind = spec.kind
    logger.info(f"Creating {kind.label} vector index on field '{spec.field}'...")

    drop_vector_indexes(collection, spec.field)

    try:
        collection.database.command(spec.to_command(collection.name))
    except OperationFailure as e:
        server_message = str(e)
        if TIER_UNSUPPORTED_MARKER in server_message:
            alternatives = [alt.value for alt in kind.alternatives()]
            logger.error(
                f"{kind.label} indexes require a higher cluster tier. "
                f"Upgrade the cluster or try one of: {', '.join(alternatives)}"
            )
            raise UnsupportedIndexTierError(
                f"Error creating {kind.label} vector index: {server_message}",
                kind=kind.value,
                alternatives=alternatives,
                server_message=server_message,
            ) from e
        raise VectorStoreError(
            f"Error creating {kind.label} vector index: {server_message}",
            code=ErrorCode.INDEX_CREATION_FAILED,
            details={"index": spec.index_name, "error": server_message},
        ) from e
    except PyMongoError as e:
        raise VectorStoreError(
            f"Error creating {kind.label} vector index: {e}",
            code=ErrorCode.INDEX_CREATION_FAILED,
            details={"index": spec.index_name, "error": str(e)},
        ) from e

    logger.info(f"{kind.label} vector index '{spec.index_name}' created successfully")


def wait_for_index(
    seconds: float = DEFAULT_INDEX_WAIT,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Give the service a moment to make a new index queryable."""
    logger.info("Waiting for index to be ready...")
    sleep(seconds)


_ALGORITHM_LABELS = {
    "diskann": ("DiskANN", (("maxDegree", "Max Degree"), ("lBuild", "Build Parameter"))),
    "hnsw": (
        "HNSW (Hierarchical Navigable Small World)",
        (("m", "Max Connections"), ("efConstruction", "EF Construction")),
    ),
    "ivf": ("IVF (Inverted File)", (("numLists", "Number of Lists"),)),
}


def format_index_info(info: IndexInfo) -> str:
    """Readable, indented multi-line description of one index."""
    lines = [f"Index Name: {info.name}"]
    options = info.cosmos_search_options

    if options:
        lines.append("Type: DocumentDB Vector Search Index")
        if "similarity" in options:
            lines.append(f"Similarity Metric: {options['similarity']}")
        if "dimensions" in options:
            lines.append(f"Vector Dimensions: {options['dimensions']}")

        if "kind" in options:
            kind = str(options["kind"])
            for marker, (label, params) in _ALGORITHM_LABELS.items():
                if marker in kind:
                    lines.append(f"Algorithm: {label}")
                    lines.extend(
                        f"  {title}: {options[key]}" for key, title in params if key in options
                    )
                    break
            else:
                lines.append(f"Algorithm: {kind}")
    elif info.vector_search_configuration:
        config = info.vector_search_configuration
        lines.append("Type: MongoDB Vector Search Index")
        if "similarity" in config:
            lines.append(f"Similarity Metric: {config['similarity']}")
        if "dimensions" in config:
            lines.append(f"Vector Dimensions: {config['dimensions']}")
    else:
        lines.append("Type: Standard MongoDB Index")
        if info.key:
            pattern = ", ".join(f"{k}: {v}" for k, v in info.key.items())
            lines.append(f"Key Pattern: {pattern}")

    if info.unique:
        lines.append("Unique: Yes")
    if info.sparse:
        lines.append("Sparse: Yes")
    if info.background:
        lines.append("Built in Background: Yes")

    return "\n".join(f"  {line}" for line in lines)

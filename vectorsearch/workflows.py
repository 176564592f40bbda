"""End-to-end sample workflows run by the scripts.

Each workflow is a single sequential pass. Nothing is checkpointed: a run
that fails partway must be restarted, and the database keeps whatever the
last successful step left behind.
"""

import time
from collections.abc import Callable, Sequence

from pymongo import MongoClient

from vectorsearch.clients import ServiceClients
from vectorsearch.config import Settings
from vectorsearch.embeddings.generator import RecordEmbedder
from vectorsearch.embeddings.models import EmbeddingStats
from vectorsearch.embeddings.service import EmbeddingService
from vectorsearch.exceptions import ErrorCode, RecordFileError, VectorStoreError
from vectorsearch.logging_config import get_logger
from vectorsearch.records import (
    read_records,
    records_with_vectors,
    validate_dimensions,
    write_records,
)
from vectorsearch.vectorstore.indexes import (
    DEFAULT_INDEX_WAIT,
    create_vector_index,
    format_index_info,
    list_indexes,
    wait_for_index,
)
from vectorsearch.vectorstore.loader import clear_collection, insert_records
from vectorsearch.vectorstore.models import IndexKind, SearchResult, VectorIndexSpec
from vectorsearch.vectorstore.search import VectorSearcher, format_search_results

logger = get_logger(__name__)

SAMPLE_QUERY = "quintessential lodging near running trails, eateries, retail"
SYSTEM_DATABASES = frozenset({"admin", "local", "config"})

Echo = Callable[[str], None]


def create_embeddings(
    settings: Settings,
    embedding_service: EmbeddingService,
    sleep: Callable[[float], None] = time.sleep,
    echo: Echo = print,
) -> EmbeddingStats:
    """Embed the sample file's text field and write the enriched file."""
    data = settings.data
    echo("Configuration:")
    echo(f"  Input file: {data.data_file_without_vectors}")
    echo(f"  Output file: {data.data_file_with_vectors}")
    echo(f"  Field to embed: {data.field_to_embed}")
    echo(f"  Embedding field: {data.embedded_field}")
    echo(f"  Batch size: {data.embedding_size_batch}")
    echo(f"  Model: {embedding_service.model_name}")

    records = read_records(data.data_file_without_vectors)
    embedder = RecordEmbedder(
        embedding_service,
        field_to_embed=data.field_to_embed,
        embedded_field=data.embedded_field,
        batch_size=data.embedding_size_batch,
        sleep=sleep,
    )
    stats = embedder.embed_records(records)
    write_records(records, data.data_file_with_vectors)

    echo("")
    echo("Summary:")
    echo(f"  Total documents processed: {stats.total}")
    echo(f"  Documents with embeddings: {stats.embedded}")
    embedded = records_with_vectors(records, data.embedded_field)
    if embedded:
        echo(f"  Embedding dimensions: {len(embedded[0][data.embedded_field])}")
    return stats


def run_vector_search(
    settings: Settings,
    clients: ServiceClients,
    kind: IndexKind,
    query: str = SAMPLE_QUERY,
    top_k: int = 5,
    index_fields: Sequence[str] = (),
    index_wait: float = DEFAULT_INDEX_WAIT,
    sleep: Callable[[float], None] = time.sleep,
    echo: Echo = print,
) -> list[SearchResult]:
    """Load vectors, build one vector index and run a sample query.

    Raises:
        ConfigurationError: If either client is missing a required setting.
        RecordFileError: If the file has no records with vectors.
        EmbeddingError: If a vector length differs from EMBEDDING_DIMENSIONS.
        VectorStoreError: If nothing was inserted or the index cannot be built.
    """
    clients.connect()
    data = settings.data
    records = read_records(data.data_file_with_vectors)
    records = records_with_vectors(records, data.embedded_field)
    if not records:
        raise RecordFileError(
            f"No documents found with embeddings in field '{data.embedded_field}'. "
            "Run create_embeddings first.",
            code=ErrorCode.NO_VECTOR_RECORDS,
            details={"path": data.data_file_with_vectors, "field": data.embedded_field},
        )
    validate_dimensions(records, data.embedded_field, data.embedding_dimensions)

    collection = clients.mongo[settings.mongo.database_name][settings.mongo.collection_name]
    logger.info(f"Inserting data into collection '{collection.name}'...")
    clear_collection(collection)

    stats = insert_records(
        collection,
        records,
        batch_size=data.load_size_batch,
        index_fields=index_fields,
        sleep=sleep,
    )
    if stats.inserted == 0:
        raise VectorStoreError(
            "No documents were inserted successfully",
            code=ErrorCode.INSERT_FAILED,
            details={"total": stats.total, "failed": stats.failed},
        )
    echo(f"Insertion completed: {stats.inserted} inserted, {stats.failed} failed")

    spec = VectorIndexSpec.for_kind(kind, data.embedded_field, data.embedding_dimensions)
    create_vector_index(collection, spec)
    wait_for_index(index_wait, sleep=sleep)

    searcher = VectorSearcher(clients.embeddings, collection, data.embedded_field)
    results = list(searcher.search(query, k=top_k))

    if not results:
        echo("No search results found.")
    else:
        echo(f"\nSearch Results (showing top {len(results)}):")
        echo("=" * 80)
        for line in format_search_results(results):
            echo(line)
    return results


def show_collection_indexes(
    client: MongoClient,
    database_name: str,
    collection_name: str,
    echo: Echo = print,
) -> None:
    """Print every index of one collection."""
    echo("\n" + "=" * 80)
    echo(f"INDEXES FOR COLLECTION: {collection_name}")
    echo("=" * 80)

    indexes = list_indexes(client[database_name][collection_name])
    if not indexes:
        echo("No indexes found in this collection.")
        return

    echo(f"Found {len(indexes)} index(es):\n")
    for position, info in enumerate(indexes, start=1):
        echo(f"Index {position}:")
        echo(format_index_info(info))
        if position < len(indexes):
            echo("\n" + "-" * 60)
        echo("")


def show_indexes(
    settings: Settings,
    client: MongoClient,
    echo: Echo = print,
) -> None:
    """Print the default collection's indexes, then those of every user database."""
    mongo = settings.mongo
    echo(f"Default Database: {mongo.database_name}")
    echo(f"Default Collection: {mongo.collection_name}")

    collection = client[mongo.database_name][mongo.collection_name]
    count = collection.count_documents({})
    if count > 0:
        echo(f"Collection '{mongo.collection_name}' contains {count} documents")
        show_collection_indexes(client, mongo.database_name, mongo.collection_name, echo)
    else:
        echo(f"Collection '{mongo.collection_name}' is empty or doesn't exist.")
        echo("Run one of the vector search scripts (diskann, hnsw, ivf) first.")

    user_databases = [
        name for name in client.list_database_names() if name not in SYSTEM_DATABASES
    ]
    if not user_databases:
        echo("No user databases found.")
        return

    echo(f"\nFound {len(user_databases)} user database(s):")
    for database_name in user_databases:
        echo("\n" + "#" * 80)
        echo(f"DATABASE: {database_name}")
        echo("#" * 80)
        database = client[database_name]
        for collection_name in database.list_collection_names():
            count = database[collection_name].count_documents({})
            echo(f"\nCollection: {collection_name} ({count} documents)")
            try:
                show_collection_indexes(client, database_name, collection_name, echo)
            except VectorStoreError as e:
                logger.warning(f"Error showing indexes for collection '{collection_name}': {e}")

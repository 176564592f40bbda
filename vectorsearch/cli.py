"""Entry points for the sample scripts.

Every script is configuration-driven: the only option is ``--help``.
Exit status is 0 on success and 1 on any handled failure.
"""

import argparse
import sys
from collections.abc import Callable, Sequence

from vectorsearch import workflows
from vectorsearch.clients import ServiceClients
from vectorsearch.config import Settings, get_settings
from vectorsearch.exceptions import UnsupportedIndexTierError, VectorSearchError
from vectorsearch.logging_config import get_logger, setup_logging
from vectorsearch.vectorstore.models import IndexKind

logger = get_logger(__name__)


def _run(
    description: str,
    job: Callable[[Settings], None],
    argv: Sequence[str] | None = None,
) -> int:
    argparse.ArgumentParser(
        description=description,
        epilog="All settings come from environment variables or the .env file.",
    ).parse_args(argv)

    settings = get_settings()
    setup_logging(level=settings.log_level)

    try:
        job(settings)
    except UnsupportedIndexTierError as e:
        logger.error(e.message, extra={"code": e.code.value})
        print(f"\n{e.kind} indexes are not available on this cluster tier.")
        print("Try one of these alternatives:")
        print("  - Upgrade your DocumentDB cluster to a higher tier")
        for alternative in e.alternatives:
            print(f"  - Use {IndexKind(alternative).label} instead")
        return 1
    except VectorSearchError as e:
        logger.error(e.message, extra={"code": e.code.value, "details": e.details})
        return 1

    return 0


def create_embeddings_main(argv: Sequence[str] | None = None) -> int:
    """Generate embeddings for the sample data file."""

    def job(settings: Settings) -> None:
        with ServiceClients(settings) as clients:
            workflows.create_embeddings(settings, clients.embeddings)
        print("\nEmbedding creation completed successfully!")

    return _run("Generate embeddings for the sample data file", job, argv)


def vector_search_main(kind: IndexKind, argv: Sequence[str] | None = None) -> int:
    """Load data, build a ``kind`` vector index and run the sample query."""

    def job(settings: Settings) -> None:
        with ServiceClients(settings) as clients:
            workflows.run_vector_search(
                settings,
                clients,
                kind,
                index_fields=("HotelName", "Category"),
            )
        print(f"\n{kind.label} demonstration completed successfully!")

    return _run(f"Vector search demonstration using a {kind.label} index", job, argv)


def diskann_main(argv: Sequence[str] | None = None) -> int:
    """DiskANN sample."""
    return vector_search_main(IndexKind.DISKANN, argv)


def hnsw_main(argv: Sequence[str] | None = None) -> int:
    """HNSW sample."""
    return vector_search_main(IndexKind.HNSW, argv)


def ivf_main(argv: Sequence[str] | None = None) -> int:
    """IVF sample."""
    return vector_search_main(IndexKind.IVF, argv)


def show_indexes_main(argv: Sequence[str] | None = None) -> int:
    """Print collection and index information."""

    def job(settings: Settings) -> None:
        with ServiceClients(settings) as clients:
            workflows.show_indexes(settings, clients.mongo)
        print("\nIndex information display completed.")

    return _run("Display vector indexes and collection information", job, argv)


def main() -> None:
    """Console entry point dispatching on the script name."""
    commands = {
        "create-embeddings": create_embeddings_main,
        "diskann": diskann_main,
        "hnsw": hnsw_main,
        "ivf": ivf_main,
        "show-indexes": show_indexes_main,
    }
    if len(sys.argv) < 2 or sys.argv[1] not in commands:
        print(f"usage: vectorsearch {{{','.join(commands)}}}", file=sys.stderr)
        sys.exit(2)
    sys.exit(commands[sys.argv[1]](sys.argv[2:]))

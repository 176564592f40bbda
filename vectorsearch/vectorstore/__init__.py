"""Vector store module."""

from vectorsearch.vectorstore.indexes import (
    create_vector_index,
    drop_vector_indexes,
    find_vector_indexes,
    format_index_info,
    list_indexes,
)
from vectorsearch.vectorstore.loader import clear_collection, insert_records
from vectorsearch.vectorstore.models import (
    DiskANNIndexOptions,
    HNSWIndexOptions,
    IndexInfo,
    IndexKind,
    InsertStats,
    IVFIndexOptions,
    SearchResult,
    VectorIndexSpec,
)
from vectorsearch.vectorstore.search import VectorSearcher, build_search_pipeline

__all__ = [
    "DiskANNIndexOptions",
    "HNSWIndexOptions",
    "IVFIndexOptions",
    "IndexInfo",
    "IndexKind",
    "InsertStats",
    "SearchResult",
    "VectorIndexSpec",
    "VectorSearcher",
    "build_search_pipeline",
    "clear_collection",
    "create_vector_index",
    "drop_vector_indexes",
    "find_vector_indexes",
    "format_index_info",
    "insert_records",
    "list_indexes",
]

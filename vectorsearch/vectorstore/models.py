"""Vector store data models."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class IndexKind(str, Enum):
    """Vector index algorithms offered by the service."""

    DISKANN = "vector-diskann"
    HNSW = "vector-hnsw"
    IVF = "vector-ivf"

    @property
    def label(self) -> str:
        """Short algorithm name used in index names and messages."""
        return self.value.removeprefix("vector-")

    def alternatives(self) -> list["IndexKind"]:
        """The other algorithm kinds, in declaration order."""
        return [kind for kind in IndexKind if kind is not self]


VECTOR_KEY_TYPE = "cosmosSearch"


class Similarity(str, Enum):
    """Similarity metrics accepted by cosmosSearchOptions."""

    COSINE = "COS"
    EUCLIDEAN = "L2"
    INNER_PRODUCT = "IP"


class _IndexOptionsBase(BaseModel, ABC):
    kind: str = Field(description="Algorithm kind")
    dimensions: int = Field(gt=0, description="Vector dimensionality")
    similarity: Similarity = Field(
        default=Similarity.COSINE,
        description="Similarity metric",
    )

    @abstractmethod
    def _tuning(self) -> dict[str, Any]:
        """Algorithm-specific keys of ``cosmosSearchOptions``."""
        ...

    def to_cosmos_options(self) -> dict[str, Any]:
        """Render the ``cosmosSearchOptions`` sub-document."""
        return {
            "kind": self.kind,
            "dimensions": self.dimensions,
            "similarity": self.similarity.value,
            **self._tuning(),
        }


class DiskANNIndexOptions(_IndexOptionsBase):
    """Disk-resident graph index.

    Attributes:
        max_degree: Edges per node; higher improves recall, costs memory.
        l_build: Candidates evaluated per node during construction.
    """

    kind: Literal["vector-diskann"] = IndexKind.DISKANN.value
    max_degree: int = Field(default=20, gt=0)
    l_build: int = Field(default=10, gt=0)

    def _tuning(self) -> dict[str, Any]:
        return {"maxDegree": self.max_degree, "lBuild": self.l_build}


class HNSWIndexOptions(_IndexOptionsBase):
    """In-memory hierarchical graph index.

    Attributes:
        m: Maximum connections per node.
        ef_construction: Candidate list size during construction.
    """

    kind: Literal["vector-hnsw"] = IndexKind.HNSW.value
    m: int = Field(default=16, gt=0)
    ef_construction: int = Field(default=64, gt=0)

    def _tuning(self) -> dict[str, Any]:
        return {"m": self.m, "efConstruction": self.ef_construction}


class IVFIndexOptions(_IndexOptionsBase):
    """Inverted-file index over coarse clusters.

    Attributes:
        num_lists: Number of clusters.
    """

    kind: Literal["vector-ivf"] = IndexKind.IVF.value
    num_lists: int = Field(default=1, gt=0)

    def _tuning(self) -> dict[str, Any]:
        return {"numLists": self.num_lists}


IndexOptions = Annotated[
    DiskANNIndexOptions | HNSWIndexOptions | IVFIndexOptions,
    Field(discriminator="kind"),
]

_OPTIONS_BY_KIND: dict[IndexKind, type[_IndexOptionsBase]] = {
    IndexKind.DISKANN: DiskANNIndexOptions,
    IndexKind.HNSW: HNSWIndexOptions,
    IndexKind.IVF: IVFIndexOptions,
}


class VectorIndexSpec(BaseModel):
    """A vector index to create on one field.

    Attributes:
        field: Document field holding the vectors.
        options: Algorithm and tuning parameters.
        name: Index name; defaults to ``<algorithm>_index_<field>``.
    """

    field: str = Field(min_length=1, description="Vector field")
    options: IndexOptions
    name: str | None = Field(default=None, description="Index name")

    @classmethod
    def for_kind(
        cls,
        kind: IndexKind,
        field: str,
        dimensions: int,
        **tuning: Any,
    ) -> "VectorIndexSpec":
        """Build a spec for ``kind`` with default tuning unless overridden."""
        options = _OPTIONS_BY_KIND[kind](dimensions=dimensions, **tuning)
        return cls(field=field, options=options)  # type: ignore[arg-type]

    @property
    def kind(self) -> IndexKind:
        """Algorithm kind of this index."""
        return IndexKind(self.options.kind)

    @property
    def index_name(self) -> str:
        """Effective index name."""
        return self.name or f"{self.kind.label}_index_{self.field}"

    def to_command(self, collection_name: str) -> dict[str, Any]:
        """Render the ``createIndexes`` command document."""
        return {
            "createIndexes": collection_name,
            "indexes": [
                {
                    "name": self.index_name,
                    "key": {self.field: VECTOR_KEY_TYPE},
                    "cosmosSearchOptions": self.options.to_cosmos_options(),
                }
            ],
        }


class BatchInsertResult(BaseModel):
    """Outcome of inserting one chunk."""

    batch_number: int = Field(description="1-based chunk number")
    size: int = Field(description="Documents in the chunk")
    inserted: int = Field(default=0, description="Documents written")
    failed: int = Field(default=0, description="Documents rejected")
    errors: list[str] = Field(default_factory=list, description="Server error messages")


class InsertStats(BaseModel):
    """Totals for a batched insert.

    Attributes:
        total: Documents submitted.
        inserted: Documents written.
        failed: Documents rejected.
        batches: Per-chunk outcomes.
    """

    total: int = Field(default=0, description="Documents submitted")
    inserted: int = Field(default=0, description="Documents written")
    failed: int = Field(default=0, description="Documents rejected")
    batches: list[BatchInsertResult] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Result from a vector similarity search.

    Attributes:
        document: Projected document fields.
        score: Similarity score (higher is more similar).
    """

    document: dict[str, Any] = Field(default_factory=dict, description="Projected document")
    score: float = Field(description="Similarity score")


class IndexInfo(BaseModel):
    """An entry returned by ``list_indexes``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(default="Unknown")
    key: dict[str, Any] = Field(default_factory=dict)
    unique: bool = False
    sparse: bool = False
    background: bool = False
    cosmos_search_options: dict[str, Any] = Field(
        default_factory=dict,
        alias="cosmosSearchOptions",
    )
    vector_search_configuration: dict[str, Any] = Field(
        default_factory=dict,
        alias="vectorSearchConfiguration",
    )

    def is_vector_index_on(self, field: str) -> bool:
        """Whether this index is a vector index keyed on ``field``."""
        return self.key.get(field) == VECTOR_KEY_TYPE

    @property
    def is_vector_index(self) -> bool:
        """Whether any key of this index is a vector key."""
        return any(self.is_vector_index_on(field) for field in self.key)

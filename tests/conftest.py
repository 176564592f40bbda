"""Pytest configuration and shared fixtures.

The fakes below stand in for a DocumentDB collection with the
vector-search extension and for the embedding service.
"""

import math
from collections.abc import Iterator
from typing import Any

import pytest
from pymongo.errors import BulkWriteError, OperationFailure

from vectorsearch.config import DataSettings, EmbeddingSettings, MongoSettings, Settings
from vectorsearch.embeddings.models import EmbeddingResult
from vectorsearch.embeddings.service import EmbeddingService


class FakeCursor:
    """Minimal stand-in for a pymongo command cursor."""

    def __init__(self, items: list[dict[str, Any]]) -> None:
        self._items = items
        self.closed = False

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self._items)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b, strict=True))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class FakeCollection:
    """In-memory collection.

    Documents containing the key ``"_reject"`` fail to insert, mimicking a
    per-document write error under unordered inserts.
    """

    def __init__(self, name: str, database: "FakeDatabase") -> None:
        self.name = name
        self.database = database
        self.documents: list[dict[str, Any]] = []
        self.indexes: list[dict[str, Any]] = [
            {"v": 2, "key": {"_id": 1}, "name": "_id_"},
        ]
        self.insert_calls: list[int] = []
        self.dropped: list[str] = []
        self.last_pipeline: list[dict[str, Any]] | None = None
        self.last_cursor: FakeCursor | None = None

    def insert_many(self, documents: list[dict[str, Any]], ordered: bool = True) -> Any:
        self.insert_calls.append(len(documents))
        write_errors = []
        inserted_ids = []
        for position, document in enumerate(documents):
            if "_reject" in document:
                write_errors.append(
                    {"index": position, "code": 2, "errmsg": "invalid document"}
                )
                if ordered:
                    break
                continue
            stored = dict(document)
            stored.setdefault("_id", len(self.documents) + 1)
            self.documents.append(stored)
            inserted_ids.append(stored["_id"])

        if write_errors:
            raise BulkWriteError(
                {"writeErrors": write_errors, "nInserted": len(inserted_ids)}
            )

        class _Result:
            pass

        result = _Result()
        result.inserted_ids = inserted_ids  # type: ignore[attr-defined]
        return result

    def delete_many(self, query: dict[str, Any]) -> Any:
        class _Result:
            pass

        result = _Result()
        result.deleted_count = len(self.documents)  # type: ignore[attr-defined]
        self.documents.clear()
        return result

    def count_documents(self, query: dict[str, Any]) -> int:
        return len(self.documents)

    def create_index(self, keys: list[tuple[str, int]]) -> str:
        name = "_".join(f"{field}_{direction}" for field, direction in keys)
        self.indexes.append({"v": 2, "key": dict(keys), "name": name})
        return name

    def list_indexes(self) -> FakeCursor:
        return FakeCursor([dict(index) for index in self.indexes])

    def drop_index(self, name: str) -> None:
        self.indexes = [index for index in self.indexes if index["name"] != name]
        self.dropped.append(name)

    def aggregate(self, pipeline: list[dict[str, Any]]) -> FakeCursor:
        self.last_pipeline = pipeline
        search = pipeline[0]["$search"]["cosmosSearch"]
        project = pipeline[1]["$project"]

        scored = [
            (_cosine(search["vector"], document[search["path"]]), document)
            for document in self.documents
            if search["path"] in document
        ]
        scored.sort(key=lambda pair: pair[0], reverse=True)

        rows = []
        for score, document in scored[: search["k"]]:
            row: dict[str, Any] = {"_id": document["_id"]}
            for key, value in project.items():
                if value == "$$ROOT":
                    row[key] = dict(document)
                elif value == 1:
                    row[key] = document.get(key)
                elif value == {"$meta": "searchScore"}:
                    row[key] = score
            rows.append(row)

        self.last_cursor = FakeCursor(rows)
        return self.last_cursor


class FakeDatabase:
    """In-memory database that understands ``createIndexes``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.collections: dict[str, FakeCollection] = {}
        self.commands: list[dict[str, Any]] = []
        self.command_error: Exception | None = None

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name, self)
        return self.collections[name]

    def list_collection_names(self) -> list[str]:
        return list(self.collections)

    def command(self, command: dict[str, Any]) -> dict[str, Any]:
        self.commands.append(command)
        if self.command_error is not None:
            raise self.command_error
        collection = self[command["createIndexes"]]
        for index in command["indexes"]:
            collection.indexes.append(dict(index))
        return {"ok": 1}


class FakeMongoClient:
    """In-memory client holding FakeDatabases."""

    def __init__(self) -> None:
        self.databases: dict[str, FakeDatabase] = {}
        self.closed = False

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.databases:
            self.databases[name] = FakeDatabase(name)
        return self.databases[name]

    def list_database_names(self) -> list[str]:
        return ["admin", *self.databases]

    def close(self) -> None:
        self.closed = True


class FakeEmbeddingService(EmbeddingService):
    """Deterministic embeddings looked up from a table, one call per batch."""

    def __init__(self, vectors: dict[str, list[float]]) -> None:
        self.vectors = vectors
        self.calls: list[list[str]] = []
        self.closed = False

    def embed(self, text: str) -> EmbeddingResult:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        self.calls.append(list(texts))
        return [
            EmbeddingResult(
                text=text,
                embedding=self.vectors[text],
                model="fake-model",
                dimensions=len(self.vectors[text]),
            )
            for text in texts
        ]

    @property
    def model_name(self) -> str:
        return "fake-model"

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeMongoClient:
    """Empty in-memory database client."""
    return FakeMongoClient()


@pytest.fixture
def collection(fake_client: FakeMongoClient) -> FakeCollection:
    """Empty in-memory collection."""
    return fake_client["testdb"]["hotels"]


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    """Three hotels with 3-dimensional vectors."""
    return [
        {"HotelId": "1", "HotelName": "Harbor Inn", "Description": "sea view",
         "DescriptionVector": [1.0, 0.0, 0.0]},
        {"HotelId": "2", "HotelName": "Trail Lodge", "Description": "running trails",
         "DescriptionVector": [0.0, 1.0, 0.0]},
        {"HotelId": "3", "HotelName": "City Suites", "Description": "shops and eateries",
         "DescriptionVector": [0.6, 0.8, 0.0]},
    ]


@pytest.fixture
def settings(tmp_path: Any) -> Settings:
    """Settings pointing at temporary data files with 3-dim vectors."""
    return Settings(
        mongo=MongoSettings(database_name="testdb", collection_name="hotels"),
        embedding=EmbeddingSettings(endpoint="https://example.openai.azure.com"),
        data=DataSettings(
            data_file_without_vectors=str(tmp_path / "hotels.json"),
            data_file_with_vectors=str(tmp_path / "hotels_vectors.json"),
            embedding_dimensions=3,
            load_size_batch=2,
            embedding_size_batch=2,
        ),
    )

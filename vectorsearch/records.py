"""Sample record files: JSON arrays of open-ended objects."""

import json
from pathlib import Path
from typing import Any

from vectorsearch.exceptions import EmbeddingError, ErrorCode, RecordFileError
from vectorsearch.logging_config import get_logger

logger = get_logger(__name__)

Record = dict[str, Any]


def read_records(source: str | Path, encoding: str = "utf-8") -> list[Record]:
    """Read a JSON array of records.

    Args:
        source: Path to the JSON file.
        encoding: Text encoding of the file.

    Returns:
        The records, in file order.

    Raises:
        RecordFileError: If the file is missing, unreadable, or not a JSON array of objects.
    """
    path = Path(source)

    if not path.is_file():
        raise RecordFileError(
            f"File not found: {path}",
            code=ErrorCode.RECORD_FILE_NOT_FOUND,
            details={"path": str(path)},
        )

    try:
        with path.open(encoding=encoding) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RecordFileError(
            f"Error parsing JSON in file '{path}': {e}",
            code=ErrorCode.RECORD_FILE_PARSE_ERROR,
            details={"path": str(path), "error": str(e)},
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise RecordFileError(
            f"Error reading file '{path}': {e}",
            code=ErrorCode.RECORD_FILE_PARSE_ERROR,
            details={"path": str(path), "error": str(e)},
        ) from e

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise RecordFileError(
            f"Expected a JSON array of objects in '{path}'",
            code=ErrorCode.RECORD_FILE_PARSE_ERROR,
            details={"path": str(path)},
        )

    logger.info(f"Loaded {len(data)} documents from {path}")
    return data


def write_records(records: list[Record], target: str | Path) -> None:
    """Write records as an indented JSON array, creating parent directories.

    Raises:
        RecordFileError: If the file cannot be written.
    """
    path = Path(target)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
    except (OSError, TypeError) as e:
        raise RecordFileError(
            f"Error writing to file '{path}': {e}",
            code=ErrorCode.RECORD_FILE_WRITE_ERROR,
            details={"path": str(path), "error": str(e)},
        ) from e

    logger.info(f"Data successfully written to '{path}'")


def records_with_vectors(records: list[Record], vector_field: str) -> list[Record]:
    """Records that carry a vector in ``vector_field``."""
    return [record for record in records if isinstance(record.get(vector_field), list)]


def validate_dimensions(
    records: list[Record],
    vector_field: str,
    dimensions: int,
    id_field: str = "HotelId",
) -> None:
    """Check every vector has the configured length.

    A mismatch would otherwise only surface as an opaque index build or
    query failure on the server.

    Raises:
        EmbeddingError: On the first record whose vector length differs.
    """
    for position, record in enumerate(records):
        vector = record.get(vector_field)
        if vector is None:
            continue
        if len(vector) != dimensions:
            raise EmbeddingError(
                f"Document {record.get(id_field, position)} has a {len(vector)}-dimensional "
                f"vector in '{vector_field}', expected {dimensions}. "
                "Check EMBEDDING_DIMENSIONS against the embedding model.",
                code=ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
                details={
                    "position": position,
                    "expected": dimensions,
                    "actual": len(vector),
                },
            )

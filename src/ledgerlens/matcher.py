"""Match a whole file against every definition, and parse it with the chosen one.

Both operations fan fixed-size chunks out over a ``ThreadPoolExecutor``. Each
worker only reads the shared, already-materialized rows and returns its own
result list; results are merged after every worker has finished, in chunk
order, so the outcome never depends on scheduling.
"""
import csv
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TypeVar

from ledgerlens.errors import FormatError, LedgerLensError
from ledgerlens.log import get_logger
from ledgerlens.models import Definition, DefinitionKey, Expense
from ledgerlens.registry import DefinitionRegistry, registry as default_registry
from ledgerlens.transformer import parse
from ledgerlens.validator import validate

logger = get_logger(__name__)

DEFAULT_WORKERS = 4
DEFINITION_CHUNK_SIZE = 2
ROW_CHUNK_SIZE = 256

InT = TypeVar("InT")
OutT = TypeVar("OutT")


def materialize_rows(rows: Iterable[Sequence[str]]) -> list[Sequence[str]]:
    """Read every row into memory, turning reader failures and non-text rows into FormatError."""
    try:
        materialized = list(rows)
    except csv.Error as exc:
        raise FormatError(f"Malformed delimited text: {exc}") from exc
    for index, row in enumerate(materialized):
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise FormatError(f"Row is not a sequence of cells: {row!r}", row_index=index)
        if not all(isinstance(cell, str) for cell in row):
            raise FormatError("Row contains non-text cells", row_index=index)
    return materialized


def chunked(items: Sequence[InT], size: int) -> list[Sequence[InT]]:
    if not isinstance(size, int) or size < 1:
        raise ValueError("chunk size must be a positive integer")
    return [items[i:i + size] for i in range(0, len(items), size)]


def _run_chunks(
    worker: Callable[[Sequence[InT]], list[OutT]],
    chunks: list[Sequence[InT]],
    workers: int,
) -> list[OutT]:
    if not isinstance(workers, int) or workers < 1:
        raise ValueError("workers must be a positive integer")
    merged: list[OutT] = []
    if not chunks:
        return merged
    with ThreadPoolExecutor(max_workers=min(workers, len(chunks))) as pool:
        futures: list[Future] = [pool.submit(worker, chunk) for chunk in chunks]
        for fut in futures:
            try:
                merged.extend(fut.result())
            except Exception:
                # Nothing left is worth running once a chunk has failed
                pool.shutdown(wait=False, cancel_futures=True)
                raise
    return merged


def _definition_matches(definition: Definition, rows: list[Sequence[str]]) -> bool:
    data = definition.data_rows(rows)
    if not data:
        # A header-only or empty file must not match vacuously
        return False
    return all(validate(row, definition) for row in data)


def find_definitions(
    rows: Iterable[Sequence[str]],
    registry: DefinitionRegistry = default_registry,
    *,
    workers: int | None = None,
    chunk_size: int | None = None,
) -> set[DefinitionKey] | None:
    """Return every definition key whose columns fit all rows, or None if none do."""
    materialized = materialize_rows(rows)

    def match_chunk(chunk: Sequence[tuple[DefinitionKey, Definition]]) -> list[DefinitionKey]:
        return [key for key, definition in chunk if _definition_matches(definition, materialized)]

    chunks = chunked(registry.items(), DEFINITION_CHUNK_SIZE if chunk_size is None else chunk_size)
    matched = set(_run_chunks(match_chunk, chunks, DEFAULT_WORKERS if workers is None else workers))
    logger.info(
        "Checked %d rows against %d definitions, matched: %s",
        len(materialized), len(registry), sorted(key.value for key in matched) or "none",
    )
    return matched or None


def parse_all(
    rows: Iterable[Sequence[str]],
    key: DefinitionKey,
    registry: DefinitionRegistry = default_registry,
    *,
    workers: int | None = None,
    chunk_size: int | None = None,
) -> list[Expense]:
    """Parse every data row with one definition. The first failing row aborts the batch."""
    definition = registry[key]
    materialized = materialize_rows(rows)
    start = 1 if definition.has_header else 0
    indexed = list(enumerate(materialized))[start:]

    def parse_chunk(chunk: Sequence[tuple[int, Sequence[str]]]) -> list[Expense]:
        parsed = []
        for index, row in chunk:
            try:
                parsed.append(parse(row, definition))
            except LedgerLensError as exc:
                raise exc.with_context(row_index=index, definition=key) from exc
        return parsed

    chunks = chunked(indexed, ROW_CHUNK_SIZE if chunk_size is None else chunk_size)
    expenses = _run_chunks(parse_chunk, chunks, DEFAULT_WORKERS if workers is None else workers)
    logger.info("Parsed %d rows with definition %s", len(expenses), key.value)
    return expenses

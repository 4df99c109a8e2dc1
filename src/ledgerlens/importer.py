import sqlite3
from pathlib import Path

from ledgerlens.db import add_expenses
from ledgerlens.log import get_logger
from ledgerlens.matcher import find_definitions, parse_all
from ledgerlens.models import DefinitionKey
from ledgerlens.sources import read_rows

logger = get_logger(__name__)


def detect_file(
    file_path: Path,
    *,
    workers: int | None = None,
    chunk_size: int | None = None,
) -> set[DefinitionKey] | None:
    """Return the definitions a statement file satisfies, or None if its format is unknown."""
    rows = read_rows(file_path)
    return find_definitions(rows, workers=workers, chunk_size=chunk_size)


def import_file(
    conn: sqlite3.Connection,
    file_path: Path,
    key: DefinitionKey,
    *,
    workers: int | None = None,
    chunk_size: int | None = None,
) -> dict:
    """Parse a statement with the chosen definition and store it. Returns counts of imported/skipped."""
    rows = read_rows(file_path)
    expenses = parse_all(rows, key, workers=workers, chunk_size=chunk_size)
    stored = add_expenses(conn, expenses, source=key.value)
    imported = sum(stored)
    logger.info("Imported %d expenses from %s (%d duplicates)", imported, file_path.name, len(stored) - imported)
    return {"imported": imported, "skipped": len(stored) - imported, "definition": key}

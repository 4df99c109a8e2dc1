import hashlib
import json
import sqlite3
from datetime import datetime
from pathlib import Path

from ledgerlens.models import Expense

SCHEMA = """
CREATE TABLE IF NOT EXISTS expenses (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL,
    description TEXT NOT NULL,
    amount REAL NOT NULL,
    tags TEXT NOT NULL DEFAULT '[]',
    source TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(date);
"""


def get_connection(db_path: Path) -> sqlite3.Connection:
    """Open a SQLite connection with WAL mode enabled."""
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create tables. Idempotent."""
    conn.executescript(SCHEMA)


def expense_id(expense: Expense) -> str:
    """Deterministic id from description, date and amount."""
    key = f"{expense.description}:{expense.date.strftime('%Y-%m-%d')}:{expense.amount}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def add_expenses(conn: sqlite3.Connection, expenses: list[Expense], source: str | None = None) -> list[bool]:
    """Store a batch. Returns, per expense, True if newly stored or False if it was a duplicate."""
    stored: list[bool] = []
    for expense in expenses:
        expense.id = expense_id(expense)
        cursor = conn.execute(
            "INSERT OR IGNORE INTO expenses (id, date, description, amount, tags, source) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                expense.id,
                expense.date.strftime("%Y-%m-%d"),
                expense.description,
                expense.amount,
                json.dumps(sorted(expense.tags)),
                source,
            ),
        )
        stored.append(cursor.rowcount == 1)
    conn.commit()
    return stored


def list_expenses(conn: sqlite3.Connection) -> list[Expense]:
    rows = conn.execute(
        "SELECT id, date, description, amount, tags FROM expenses ORDER BY date, description"
    ).fetchall()
    return [
        Expense(
            id=row["id"],
            date=datetime.strptime(row["date"], "%Y-%m-%d"),
            description=row["description"],
            amount=row["amount"],
            tags=set(json.loads(row["tags"])),
        )
        for row in rows
    ]

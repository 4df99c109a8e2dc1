import csv
from pathlib import Path

from ledgerlens.definitions import MIGRATION_DATE_FORMAT, MIGRATION_HEADER
from ledgerlens.models import Expense


def export_expenses(expenses: list[Expense], file_path: Path) -> int:
    """Write expenses in the migration layout, which the MIGRATION definition reads back.

    Only the first tag (alphabetically) fits the single Tags column.
    """
    with open(file_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(MIGRATION_HEADER)
        for expense in expenses:
            tags = sorted(expense.tags)
            writer.writerow([
                tags[0] if tags else "",
                expense.date.strftime(MIGRATION_DATE_FORMAT),
                expense.description,
                repr(expense.amount),
            ])
    return len(expenses)

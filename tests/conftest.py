from pathlib import Path

import pytest

from ledgerlens.db import get_connection, init_db
from ledgerlens.models import (
    ColumnRole, ColumnSpec, DateType, Definition, FloatType, Sign, StringType,
)

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def db(tmp_path):
    """Provide an initialized temp DB connection."""
    db_path = tmp_path / "test.db"
    conn = get_connection(db_path)
    init_db(conn)
    yield conn
    conn.close()


def make_definition(sign: Sign = Sign.STANDARD, **kwargs) -> Definition:
    """Date@0, Description@1, Amount@2 plus an optional Tag@3."""
    return Definition(
        name="Test",
        has_header=kwargs.pop("has_header", True),
        primary_columns={
            ColumnRole.DATE: ColumnSpec(0, DateType("%Y-%m-%d")),
            ColumnRole.DESCRIPTION: ColumnSpec(1, StringType()),
            ColumnRole.AMOUNT: ColumnSpec(2, FloatType(sign)),
            ColumnRole.TAG: ColumnSpec(3, StringType(), required=False),
        },
        **kwargs,
    )


@pytest.fixture
def definition():
    return make_definition()

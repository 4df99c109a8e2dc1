"""Statement layouts for every supported institution.

Each entry is policy data only. Adding an institution means adding one
``Definition`` here; the caster, validator and transformer never change.
"""
from ledgerlens.models import (
    ArgKind, ColumnRole, ColumnSpec, DateType, Definition, DefinitionKey,
    FloatType, Sign, StringType,
)

SHEKELS_PER_DOLLAR = 3.7

MIGRATION_HEADER = ["Tags", "Date", "Description", "Amount"]
MIGRATION_DATE_FORMAT = "%Y-%m-%d"

_STANDARD = FloatType(Sign.STANDARD)
_INVERTED = FloatType(Sign.INVERTED)
_TEXT = StringType()


def build_definitions() -> dict[DefinitionKey, Definition]:
    return {
        # Our own export (see ledgerlens.exporter)
        DefinitionKey.MIGRATION: Definition(
            name="Ledgerlens Export",
            has_header=True,
            primary_columns={
                ColumnRole.TAG: ColumnSpec(0, _TEXT, required=False),
                ColumnRole.DATE: ColumnSpec(1, DateType(MIGRATION_DATE_FORMAT)),
                ColumnRole.DESCRIPTION: ColumnSpec(2, _TEXT),
                ColumnRole.AMOUNT: ColumnSpec(3, _STANDARD),
            },
        ),
        # No header; "date","amount","*","","description"; debits are negative
        DefinitionKey.WELLS_FARGO: Definition(
            name="Wells Fargo Account Activity",
            has_header=False,
            primary_columns={
                ColumnRole.DATE: ColumnSpec(0, DateType("%m/%d/%Y")),
                ColumnRole.AMOUNT: ColumnSpec(1, _INVERTED),
                ColumnRole.DESCRIPTION: ColumnSpec(4, _TEXT),
            },
        ),
        # Debit and Credit are separate columns; exactly one is filled per row
        DefinitionKey.CAPITAL_ONE: Definition(
            name="Capital One Card Transactions",
            has_header=True,
            primary_columns={
                ColumnRole.DATE: ColumnSpec(0, DateType("%Y-%m-%d")),
                ColumnRole.DESCRIPTION: ColumnSpec(3, _TEXT),
                ColumnRole.TAG: ColumnSpec(4, _TEXT, required=False),
                ColumnRole.AMOUNT: ColumnSpec(5, _STANDARD, required=False),
            },
            auxiliary_columns={
                ColumnRole.CREDIT_AMOUNT: ColumnSpec(6, _INVERTED, required=False),
            },
        ),
        DefinitionKey.AMERICAN_EXPRESS: Definition(
            name="American Express Card Activity",
            has_header=True,
            primary_columns={
                ColumnRole.DATE: ColumnSpec(0, DateType("%m/%d/%Y")),
                ColumnRole.DESCRIPTION: ColumnSpec(1, _TEXT),
                ColumnRole.AMOUNT: ColumnSpec(4, _STANDARD),
                ColumnRole.TAG: ColumnSpec(12, _TEXT, required=False),
            },
        ),
        DefinitionKey.DISCOVER: Definition(
            name="Discover Card Activity",
            has_header=True,
            primary_columns={
                ColumnRole.DATE: ColumnSpec(0, DateType("%m/%d/%Y")),
                ColumnRole.DESCRIPTION: ColumnSpec(2, _TEXT),
                ColumnRole.AMOUNT: ColumnSpec(3, _STANDARD),
                ColumnRole.TAG: ColumnSpec(4, _TEXT, required=False),
            },
        ),
        # Amounts are unsigned; the indicator column says which way money moved
        DefinitionKey.NAVY_FEDERAL: Definition(
            name="Navy Federal Transactions",
            has_header=True,
            primary_columns={
                ColumnRole.DATE: ColumnSpec(1, DateType("%m/%d/%Y")),
                ColumnRole.AMOUNT: ColumnSpec(2, _STANDARD),
                ColumnRole.TAG: ColumnSpec(5, _TEXT, required=False),
                ColumnRole.DESCRIPTION: ColumnSpec(7, _TEXT),
            },
            auxiliary_columns={
                ColumnRole.CREDIT_DEBIT_INDICATOR: ColumnSpec(3, _TEXT, args={ArgKind.QUERY: "Credit"}),
            },
        ),
        # Charged in shekels; dollar purchases carry the original amount in column 7
        DefinitionKey.MAX_CARD: Definition(
            name="Max Credit Card (ILS)",
            has_header=True,
            primary_columns={
                ColumnRole.DATE: ColumnSpec(0, DateType("%d-%m-%Y")),
                ColumnRole.DESCRIPTION: ColumnSpec(1, _TEXT),
                ColumnRole.TAG: ColumnSpec(2, _TEXT, required=False),
                ColumnRole.AMOUNT: ColumnSpec(5, _STANDARD),
                ColumnRole.CURRENCY: ColumnSpec(
                    8, _TEXT, required=False,
                    args={ArgKind.QUERY: "$", ArgKind.CONVERSION_DIVISOR: SHEKELS_PER_DOLLAR},
                ),
            },
            auxiliary_columns={
                ColumnRole.AMOUNT: ColumnSpec(7, _STANDARD, required=False),
            },
        ),
    }

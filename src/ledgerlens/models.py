from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class ColumnRole(Enum):
    DATE = "Date"
    DESCRIPTION = "Description"
    AMOUNT = "Amount"
    TAG = "Tag"
    CURRENCY = "Currency"
    CREDIT_AMOUNT = "CreditAmount"
    CREDIT_DEBIT_INDICATOR = "CreditDebitIndicator"

    def __str__(self) -> str:
        return self.value


class Sign(Enum):
    STANDARD = 1
    INVERTED = -1


class ArgKind(Enum):
    QUERY = "query"  # literal a cell must equal
    CONVERSION_DIVISOR = "conversion_divisor"


@dataclass(frozen=True)
class StringType:
    pass


@dataclass(frozen=True)
class FloatType:
    sign: Sign = Sign.STANDARD


@dataclass(frozen=True)
class DateType:
    format: str = "%Y-%m-%d"


ColumnDataType = StringType | FloatType | DateType


@dataclass(frozen=True)
class ColumnSpec:
    """Where a column lives in a row and how its cell is cast."""
    position: int
    data_type: ColumnDataType
    required: bool = True
    args: Mapping[ArgKind, object] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.position, bool) or not isinstance(self.position, int) or self.position < 0:
            raise ValueError(f"Column position must be a non-negative integer, got {self.position!r}")
        object.__setattr__(self, "args", MappingProxyType(dict(self.args)))

    def arg(self, kind: ArgKind, default=None):
        return self.args.get(kind, default)


@dataclass(frozen=True)
class Definition:
    """A named statement layout: primary columns are emitted, auxiliary ones only steer other roles."""
    name: str
    has_header: bool
    primary_columns: Mapping[ColumnRole, ColumnSpec]
    auxiliary_columns: Mapping[ColumnRole, ColumnSpec] = field(default_factory=dict)

    def __post_init__(self):
        date_spec = self.primary_columns.get(ColumnRole.DATE)
        if date_spec is None or not date_spec.required:
            raise ValueError(f"Definition {self.name!r} needs a required Date column")
        # dict keeps insertion order, which is the order roles are processed in
        object.__setattr__(self, "primary_columns", MappingProxyType(dict(self.primary_columns)))
        object.__setattr__(self, "auxiliary_columns", MappingProxyType(dict(self.auxiliary_columns)))

    def data_rows(self, rows: list) -> list:
        return rows[1:] if self.has_header else rows


class DefinitionKey(Enum):
    MIGRATION = "migration"
    WELLS_FARGO = "wells_fargo"
    CAPITAL_ONE = "capital_one"
    AMERICAN_EXPRESS = "american_express"
    DISCOVER = "discover"
    NAVY_FEDERAL = "navy_federal"
    MAX_CARD = "max_card"


@dataclass
class Expense:
    """Normalized record produced by the transformer before it is stored."""
    description: str
    amount: float  # normalized: positive = expense, negative = income/credit
    date: datetime  # always midnight
    tags: set[str] = field(default_factory=set)
    id: str | None = None  # assigned by the store

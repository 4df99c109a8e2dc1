"""Turn a statement row into an :class:`Expense` under a chosen definition.

Primary columns are read in the order the definition declares them, so the
first required column that fails is the one reported. The amount is then
resolved through the auxiliary columns:

1. a credit amount column replaces an empty (optional) debit amount;
2. a credit/debit indicator equal to its query negates a required amount;
3. a currency column equal to its marker takes the auxiliary second amount
   verbatim, and otherwise rescales by the conversion divisor.

Realistic definitions wire at most one of these, but they are applied in
this order so a currency override always wins.
"""
import math
from collections.abc import Sequence

from ledgerlens.caster import cast, normalize_whitespace
from ledgerlens.errors import CastError, InternalInvariantError, RequiredFieldError
from ledgerlens.log import get_logger
from ledgerlens.models import ArgKind, ColumnRole, ColumnSpec, Definition, Expense

logger = get_logger(__name__)


def read_cell(row: Sequence[str], role: ColumnRole, spec: ColumnSpec) -> str | None:
    """Return the normalized cell, or None if an optional column is absent from the row."""
    if spec.position >= len(row):
        if spec.required:
            raise RequiredFieldError(f"Column {spec.position} is missing for required role {role}", role=role)
        return None
    value = normalize_whitespace(row[spec.position])
    if not value and spec.required:
        raise RequiredFieldError(f"Column value is an empty string for required role {role}", role=role)
    return value


def cast_role(row: Sequence[str], role: ColumnRole, spec: ColumnSpec):
    """Cast a role's cell. Optional roles that are absent, empty or uncastable give None."""
    value = read_cell(row, role, spec)
    if not value:
        return None
    try:
        return cast(value, spec.data_type, spec.required)
    except CastError as exc:
        if spec.required:
            raise CastError(f"{exc.message} for required role {role}", role=role) from exc
        logger.debug("Ignoring uncastable optional %s value %r", role, value)
        return None


def _resolve_amount(row: Sequence[str], definition: Definition, values: dict) -> float:
    amount_spec = definition.primary_columns.get(ColumnRole.AMOUNT)
    amount = values.get(ColumnRole.AMOUNT)
    if amount is None:
        amount = math.nan
    aux = definition.auxiliary_columns

    credit_spec = aux.get(ColumnRole.CREDIT_AMOUNT)
    if credit_spec is not None and amount_spec is not None and not amount_spec.required:
        credit = cast_role(row, ColumnRole.CREDIT_AMOUNT, credit_spec)
        if credit is not None and not math.isnan(credit):
            amount = credit

    indicator_spec = aux.get(ColumnRole.CREDIT_DEBIT_INDICATOR)
    if indicator_spec is not None and amount_spec is not None and amount_spec.required:
        query = indicator_spec.arg(ArgKind.QUERY)
        if query is None:
            raise InternalInvariantError(
                "No query configured for role CreditDebitIndicator",
                role=ColumnRole.CREDIT_DEBIT_INDICATOR,
            )
        if read_cell(row, ColumnRole.CREDIT_DEBIT_INDICATOR, indicator_spec) == query:
            amount = -amount

    currency_spec = definition.primary_columns.get(ColumnRole.CURRENCY)
    if currency_spec is not None:
        currency = values.get(ColumnRole.CURRENCY)
        second_spec = aux.get(ColumnRole.AMOUNT)
        if currency is not None and currency == currency_spec.arg(ArgKind.QUERY) and second_spec is not None:
            second = cast_role(row, ColumnRole.AMOUNT, second_spec)
            if second is not None and not math.isnan(second):
                return second
        divisor = currency_spec.arg(ArgKind.CONVERSION_DIVISOR)
        if not divisor:
            raise InternalInvariantError(
                "No conversion divisor configured for role Currency", role=ColumnRole.CURRENCY
            )
        amount = amount / divisor

    return amount


def parse(row: Sequence[str], definition: Definition) -> Expense:
    """Build an Expense from a row. Raises TransformError on bad input."""
    values = {}
    for role, spec in definition.primary_columns.items():
        values[role] = cast_role(row, role, spec)

    amount = _resolve_amount(row, definition, values)
    if math.isnan(amount):
        raise InternalInvariantError("Amount did not resolve to a number", role=ColumnRole.AMOUNT)

    tags = set()
    tag = values.get(ColumnRole.TAG)
    if tag:
        tags.add(tag)

    return Expense(
        description=values.get(ColumnRole.DESCRIPTION) or "",
        amount=amount,
        date=values[ColumnRole.DATE],
        tags=tags,
    )

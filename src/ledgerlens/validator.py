from collections.abc import Sequence

from ledgerlens.caster import is_castable, normalize_whitespace
from ledgerlens.models import ColumnRole, ColumnSpec, Definition


def _cell(row: Sequence[str], spec: ColumnSpec) -> str:
    if spec.position >= len(row):
        return ""
    return normalize_whitespace(row[spec.position])


def _column_fits(row: Sequence[str], spec: ColumnSpec) -> bool:
    value = _cell(row, spec)
    if not value:
        return not spec.required
    return is_castable(value, spec.data_type, spec.required)


def _amount_resolves(row: Sequence[str], definition: Definition) -> bool:
    # An optional amount needs a value of its own or a credit amount to replace it
    amount_spec = definition.primary_columns.get(ColumnRole.AMOUNT)
    if amount_spec is None or amount_spec.required:
        return True
    candidates = [amount_spec]
    credit_spec = definition.auxiliary_columns.get(ColumnRole.CREDIT_AMOUNT)
    if credit_spec is not None:
        candidates.append(credit_spec)
    for spec in candidates:
        value = _cell(row, spec)
        if value and is_castable(value, spec.data_type, spec.required):
            return True
    return False


def validate(row: Sequence[str], definition: Definition) -> bool:
    """Return True if every primary column and every required auxiliary column fits the row,
    and the row carries an amount."""
    for spec in definition.primary_columns.values():
        if not _column_fits(row, spec):
            return False
    for spec in definition.auxiliary_columns.values():
        if spec.required and not _column_fits(row, spec):
            return False
    return _amount_resolves(row, definition)

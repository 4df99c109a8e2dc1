"""Error taxonomy for matching and parsing statement rows.

A row that simply does not fit a definition is not an error: the validator
returns ``False``. Everything below is raised to the immediate caller.
"""


class LedgerLensError(Exception):
    """Base error. Optional context is appended to the message when present."""

    def __init__(self, message: str, *, row_index: int | None = None, role=None, definition=None):
        super().__init__(message)
        self.message = message
        self.row_index = row_index
        self.role = role
        self.definition = definition

    def __str__(self) -> str:
        context = []
        if self.definition is not None:
            context.append(f"definition={getattr(self.definition, 'value', self.definition)}")
        if self.row_index is not None:
            context.append(f"row={self.row_index}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"

    def with_context(self, *, row_index: int | None = None, definition=None) -> "LedgerLensError":
        """Return a copy of this error with row/definition context filled in."""
        return type(self)(
            self.message,
            row_index=self.row_index if row_index is None else row_index,
            role=self.role,
            definition=self.definition if definition is None else definition,
        )


class FormatError(LedgerLensError):
    """The underlying delimited text is malformed; fatal for the whole file."""


class TransformError(LedgerLensError, ValueError):
    """A record could not be turned into an expense."""


class RequiredFieldError(TransformError):
    """A required column is missing or empty."""


class CastError(TransformError):
    """A cell is present but cannot be converted to its declared type."""


class InternalInvariantError(LedgerLensError, RuntimeError):
    """A definition is wired inconsistently (e.g. an amount that never resolves)."""


class UnknownDefinitionError(LedgerLensError, KeyError):
    """No definition is registered under the requested key."""

    def __str__(self) -> str:
        return LedgerLensError.__str__(self)

"""Error taxonomy shared by every layer.

Numeric edge cases (a collapsing stability, an empty queue) are not errors;
they are absorbed by floors and clamps where they occur.
"""


class LexiqError(Exception):
    """Base class for all lexiq errors."""


class InvalidArgumentError(LexiqError, ValueError):
    """A caller passed a value outside an operation's contract (bad rating, negative size)."""


class DataError(LexiqError, ValueError):
    """Signal data from a feature extractor is non-finite or out of range."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

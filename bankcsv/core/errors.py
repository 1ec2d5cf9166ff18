"""
Exceptions raised by the statement parsing core.
"""


class StatementError(Exception):
    """Base class for statement parsing failures surfaced to the caller."""


class NoTransactionsError(StatementError, ValueError):
    """Raised when a parser that requires transaction rows extracted none."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class ProfileError(StatementError, ValueError):
    """Raised when a bank profile is missing or invalid."""

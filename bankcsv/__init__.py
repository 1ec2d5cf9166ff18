"""
Bank Statement CSV Parser

Turns South African bank statement exports (ABSA, FNB, Standard Bank and
generic delimited files) into one canonical transaction schema, with
sample-bounded format detection and hint-based parser selection.
"""

__version__ = "1.0.0"
__author__ = "BankCSV Team"

from .core.runner import parse_statement, StatementParser
from .core.resolver import FormatResolver, default_parsers, detect_template, resolve_parser
from .core.errors import StatementError, NoTransactionsError, ProfileError
from .models.schema import Transaction, ParseResult, ParseStatus, DetectionResult, COLUMN_LABELS

__all__ = [
    "parse_statement",
    "StatementParser",
    "FormatResolver",
    "default_parsers",
    "detect_template",
    "resolve_parser",
    "StatementError",
    "NoTransactionsError",
    "ProfileError",
    "Transaction",
    "ParseResult",
    "ParseStatus",
    "DetectionResult",
    "COLUMN_LABELS",
]

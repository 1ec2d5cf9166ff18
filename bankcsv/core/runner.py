"""
End-to-end parsing orchestration and export.
"""
import csv
from pathlib import Path
from typing import Optional, Union
import logging

from .resolver import FormatResolver
from ..models.schema import COLUMN_LABELS, ParseResult

logger = logging.getLogger(__name__)


class StatementParser:
    """Main parser class that resolves the format and parses one file."""

    def __init__(self, bank_hint: Optional[str] = None, verbose: bool = False,
                 resolver: Optional[FormatResolver] = None):
        self.bank_hint = bank_hint
        self.verbose = verbose
        self.resolver = resolver or FormatResolver()

        if verbose:
            logging.basicConfig(level=logging.DEBUG)

    def parse(self, path: Union[str, Path]) -> ParseResult:
        """
        Parse a statement file into canonical records.

        Args:
            path: Path to the CSV/TXT export

        Returns:
            ParseResult with status ok or empty

        Raises:
            FileNotFoundError: the file does not exist
            NoTransactionsError: the selected parser found no rows and requires some
        """
        path = Path(path)
        parser = self.resolver.resolve(self.bank_hint, path)
        result = parser.parse_result(path)
        return result.raise_for_status()


def parse_statement(path: Union[str, Path], bank_hint: Optional[str] = None,
                    verbose: bool = False) -> ParseResult:
    """
    Parse a bank statement export.

    Args:
        path: Path to the CSV/TXT export
        bank_hint: Optional free text bank hint, e.g. "FNB cheque"
        verbose: Enable verbose logging

    Returns:
        ParseResult object
    """
    parser = StatementParser(bank_hint, verbose)
    return parser.parse(path)


def write_json(result: ParseResult, output: Path) -> None:
    """Write the full parse result as JSON."""
    output.write_text(result.model_dump_json(indent=2), encoding="utf-8")
    logger.info(f"Wrote {len(result.transactions)} rows to {output}")


def write_csv(result: ParseResult, output: Path) -> None:
    """Write the records as CSV with the canonical column labels."""
    with open(output, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(COLUMN_LABELS.values()))
        writer.writeheader()
        for transaction in result.transactions:
            writer.writerow(transaction.to_row())
    logger.info(f"Wrote {len(result.transactions)} rows to {output}")

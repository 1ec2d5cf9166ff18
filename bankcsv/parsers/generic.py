"""
Fallback parser for arbitrary delimited statement files.
"""
from pathlib import Path
from typing import List
import logging

from .base import BankParser, make_transaction
from ..core.detectors import GenericDetector
from ..core.loader import StatementLoader
from ..core.normalize import ZERO_AMOUNT, is_date_like, normalize_amount, normalize_date
from ..core.tokenizer import detect_delimiter, split_line
from ..models.schema import ParseResult

logger = logging.getLogger(__name__)

REFERENCE_INDEX = 1
DATE_INDEX = 2
DESCRIPTION_INDEX = 3
AMOUNT_INDEX = 4


def is_header_row(values: List[str]) -> bool:
    """A leading row that names a DATE column instead of carrying one."""
    if len(values) > DATE_INDEX and is_date_like(values[DATE_INDEX]):
        return False
    return any("DATE" in v.upper() for v in values)


class GenericParser(BankParser):
    """
    Index-based parser used when no bank-specific format matches.

    Columns are mapped by position: reference (1), date (2), description (3)
    and signed amount (4). Missing columns leave the field at its default.
    """

    template_id = "generic"
    detector_class = GenericDetector

    def _parse(self, path: Path) -> ParseResult:
        transactions = []
        delimiter = None
        seq = 1

        for raw in StatementLoader(path).iter_lines():
            if not raw.strip():
                continue

            first = delimiter is None
            if first:
                delimiter = detect_delimiter(raw)
                logger.debug(f"Generic delimiter for {path.name}: {delimiter!r}")

            values = [v.strip() for v in split_line(raw, delimiter)]
            if first and is_header_row(values):
                logger.debug(f"Skipping header row: {raw}")
                continue

            reference = values[REFERENCE_INDEX] if len(values) > REFERENCE_INDEX else ""
            transaction_date = normalize_date(values[DATE_INDEX]) if len(values) > DATE_INDEX else ""
            description = values[DESCRIPTION_INDEX] if len(values) > DESCRIPTION_INDEX else ""
            if len(values) > AMOUNT_INDEX:
                amounts = normalize_amount(values[AMOUNT_INDEX])
            else:
                amounts = (ZERO_AMOUNT, ZERO_AMOUNT)

            transactions.append(make_transaction(str(seq), reference, transaction_date, description, amounts))
            seq += 1

        return self._result(path, transactions)

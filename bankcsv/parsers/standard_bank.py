"""
Standard Bank statement exports.

Two layout generations exist. The new layout opens with account metadata
followed by a named header row (Date, Value Date, Statement Description,
Amount, Balance, Type, Originator, Customer Reference). The legacy layout has
no header: rows are either heavily quoted ACB records with a zero-padded date
and a signed, zero-padded amount, or plain delimited rows led by a date.
"""
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional
import logging

from .base import BankParser, make_transaction
from ..core.detectors import StandardBankDetector
from ..core.loader import StatementLoader
from ..core.normalize import (
    STANDARD_BANK_AMOUNT_RULES,
    is_compact_date,
    is_padded_compact_date,
    is_signed_padded_amount,
    normalize_date,
    parse_amount,
    split_amount,
)
from ..core.tokenizer import is_quoted_row, split_quoted_line, tokenize
from ..models.schema import ParseResult, Transaction

logger = logging.getLogger(__name__)

TRANSACTION_DATE_RE = re.compile(r"^(\d{1,2}/\d{1,2}/\d{4}|\d{1,2}-\d{1,2}-\d{4}|20\d{6})$")

LEGACY_SKIP_MARKERS = (
    "ACCOUNT",
    "BRANCH",
    "ACC-NO",
    "OPEN BALANCE",
    "CLOSE BALANCE",
    "OPENING BALANCE",
    "CLOSING BALANCE",
)

BALANCE_ROW_MARKERS = ("OPENING BALANCE", "CLOSING BALANCE")

# Positional fallbacks when the header names no description or amount column
DEFAULT_DESCRIPTION_INDEX = 3
DEFAULT_AMOUNT_INDEX = 4


class Layout(Enum):
    UNDETERMINED = "undetermined"
    NEW = "new"
    LEGACY = "legacy"


@dataclass(frozen=True)
class HeaderBinding:
    """Column positions of a new-layout header row; -1 marks an absent column."""
    date: int = -1
    value_date: int = -1
    description: int = -1
    amount: int = -1
    balance: int = -1
    type: int = -1
    originator: int = -1
    customer_reference: int = -1


def is_header_line(line: str) -> bool:
    upper = line.upper()
    return "DATE" in upper and "AMOUNT" in upper and "BALANCE" in upper


def is_transaction_date(value: str) -> bool:
    """Strict date shape used to tell data rows from metadata in the new layout."""
    return bool(value) and TRANSACTION_DATE_RE.match(value.strip()) is not None


def bind_header(values: List[str]) -> HeaderBinding:
    """Map new-layout header names onto column positions."""
    roles = {}
    for i, value in enumerate(values):
        h = value.upper()
        if "DATE" in h and "VALUE" not in h:
            roles["date"] = i
        elif "VALUE" in h and "DATE" in h:
            roles["value_date"] = i
        elif "DESC" in h:
            roles["description"] = i
        elif "AMOUNT" in h:
            roles["amount"] = i
        elif "BALANCE" in h:
            roles["balance"] = i
        elif "TYPE" in h:
            roles["type"] = i
        elif "ORIGINATOR" in h:
            roles["originator"] = i
        elif "REFERENCE" in h or "CUSTOMER" in h:
            roles["customer_reference"] = i
    return HeaderBinding(**roles)


def field(values: List[str], index: int, default: Optional[int] = None) -> str:
    """Trimmed value at ``index``; falls back to ``default`` when unbound or out of range."""
    if 0 <= index < len(values):
        return values[index].strip()
    if default is not None and default < len(values):
        return values[default].strip()
    return ""


def safe_id(value: str, seq: int) -> str:
    """Quote-stripped source ID, or the sequence number when blank."""
    trimmed = (value or "").strip().strip('"')
    return trimmed or str(seq)


class StandardBankParser(BankParser):
    """Layout-aware parser for Standard Bank CSV/TXT exports."""

    template_id = "standard_bank"
    detector_class = StandardBankDetector

    @property
    def probe_lines(self) -> int:
        return self.detector.config.layout_probe_lines

    def detect_layout(self, path: Path) -> Layout:
        """Decide the layout once per file from the first lines."""
        for line in StatementLoader(path).sample(self.probe_lines):
            if line.strip() and is_header_line(line):
                return Layout.NEW
        return Layout.LEGACY

    def _parse(self, path: Path) -> ParseResult:
        layout = self.detect_layout(path)
        logger.info(f"Standard Bank layout for {path.name}: {layout.value}")

        if layout == Layout.NEW:
            transactions = list(self._parse_new_layout(path))
        else:
            transactions = list(self._parse_legacy_layout(path))

        return self._result(path, transactions)

    def _parse_new_layout(self, path: Path) -> Iterator[Transaction]:
        binding = None
        probed = 0
        seq = 1

        for raw in StatementLoader(path).iter_lines():
            if binding is None:
                probed += 1
                if probed > self.probe_lines:
                    logger.warning(f"No Standard Bank header found in {path.name}")
                    return
                if raw.strip() and is_header_line(raw):
                    binding = bind_header(tokenize(raw))
                    logger.debug(f"Standard Bank header columns: {binding}")
                    if binding.date < 0:
                        logger.warning(f"Standard Bank header without a Date column in {path.name}")
                        return
                continue

            if not raw.strip():
                continue

            values = tokenize(raw)
            if len(values) < 4:
                continue

            date_value = field(values, binding.date, default=0)
            if not is_transaction_date(date_value):
                logger.debug(f"Skipping non-transaction row: {raw}")
                continue

            description = field(values, binding.description, default=DEFAULT_DESCRIPTION_INDEX)
            if any(marker in description.upper() for marker in BALANCE_ROW_MARKERS):
                continue

            transaction_id = field(values, binding.type) or str(seq)
            reference = field(values, binding.originator) or field(values, binding.customer_reference)
            amount = parse_amount(
                field(values, binding.amount, default=DEFAULT_AMOUNT_INDEX), STANDARD_BANK_AMOUNT_RULES
            )

            yield make_transaction(
                transaction_id, reference, normalize_date(date_value), description, split_amount(amount)
            )
            seq += 1

    def _parse_legacy_layout(self, path: Path) -> Iterator[Transaction]:
        seq = 1

        for raw in StatementLoader(path).iter_lines():
            if not raw.strip():
                continue

            upper = raw.upper()
            if any(marker in upper for marker in LEGACY_SKIP_MARKERS) or upper.startswith('"ALL"'):
                continue

            if is_quoted_row(raw):
                values = split_quoted_line(raw)
            else:
                values = tokenize(raw)

            if len(values) >= 5 and is_padded_compact_date(values[1]) and is_signed_padded_amount(values[3]):
                transaction_id = safe_id(values[0], seq)
                transaction_date = normalize_date(values[1])
                reference = values[2]
                amount = parse_amount(values[3], STANDARD_BANK_AMOUNT_RULES)
                description = values[4]
            elif len(values) >= 4 and (
                "/" in values[0] or "-" in values[0]
                or is_padded_compact_date(values[0]) or is_compact_date(values[0])
            ):
                transaction_id = str(seq)
                transaction_date = normalize_date(values[0])
                reference = values[1]
                amount = parse_amount(values[2], STANDARD_BANK_AMOUNT_RULES)
                description = values[3]
            else:
                logger.debug(f"Skipping unrecognized row: {raw}")
                continue

            yield make_transaction(
                transaction_id, reference, transaction_date, description, split_amount(amount)
            )
            seq += 1

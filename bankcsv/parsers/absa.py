"""
ABSA statement exports.

Rows carry a 20YYMMDD date somewhere near the start, a DT/CT transaction
type followed by a D/C flag and the amount, then free text codes and the
narrative. Delimiters vary between exports, including multi-space aligned text.
"""
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Tuple
import logging

from .base import BankParser, make_transaction
from ..core.detectors import AbsaDetector
from ..core.normalize import (
    ABSA_AMOUNT_RULES,
    clean_description,
    extract_reference,
    is_compact_date,
    parse_amount,
    parse_date,
    split_amount,
)
from ..core.loader import StatementLoader
from ..core.tokenizer import tokenize
from ..models.schema import ParseResult

logger = logging.getLogger(__name__)

SKIP_MARKERS = ("BALANCE B/FORWARD", "BALANCE B\\FORWARD", "ACCOUNT")

# Column codes such as DID, CMT, ACC are at most this long
MAX_CODE_LENGTH = 5

MIN_REFERENCE_DIGITS = 7


class AbsaParser(BankParser):
    """Positional parser for ABSA CSV/TXT exports."""

    template_id = "absa"
    detector_class = AbsaDetector

    def _parse(self, path: Path) -> ParseResult:
        transactions = []
        seq = 1

        for raw in StatementLoader(path).iter_lines():
            if not raw.strip():
                continue

            tokens = tokenize(raw)
            if len(tokens) < 4:
                continue

            joined = ",".join(tokens).upper()
            if any(marker in joined for marker in SKIP_MARKERS) or joined.startswith("ALL,"):
                continue

            transaction_date = find_date(tokens)
            if not transaction_date:
                logger.debug(f"Skipping row without date: {raw}")
                continue

            type_index, amount_index, amount = find_amount(tokens)
            if amount is None:
                logger.debug(f"Skipping row without amount: {raw}")
                continue

            description = build_description(tokens, max(type_index, amount_index))
            reference = extract_reference(description) or find_long_number(tokens)

            transactions.append(
                make_transaction(str(seq), reference, transaction_date, description, split_amount(amount))
            )
            seq += 1

        return self._result(path, transactions)


def find_date(tokens: List[str]) -> str:
    """
    Locate the transaction date in a row.

    The first valid 20YYMMDD token wins; otherwise the first token that parses
    as a date in any supported format.

    Returns:
        ISO date string, or "" when the row carries no date
    """
    for token in tokens:
        if is_compact_date(token):
            parsed = parse_date(token)
            if parsed:
                return parsed.isoformat()
            break

    for token in tokens:
        parsed = parse_date(token)
        if parsed:
            return parsed.isoformat()

    return ""


def find_amount(tokens: List[str]) -> Tuple[int, int, Optional[Decimal]]:
    """
    Locate the amount of a row.

    Preferred shape is ``DT|CT, D|C, amount`` where the D/C flag decides the
    sign. Otherwise the first signed numeric token that is not a compact date
    is taken, signed by the DT/CT code when present.

    Returns:
        (type index, amount index, signed amount or None)
    """
    upper = [t.upper() for t in tokens]
    type_index = next((i for i, t in enumerate(upper) if t in ("DT", "CT")), -1)

    credit = None
    if type_index >= 0:
        credit = upper[type_index] == "CT"
        flag_index = type_index + 1
        if flag_index < len(tokens) and upper[flag_index] in ("D", "C"):
            credit = upper[flag_index] == "C"
            amount_index = flag_index + 1
            if amount_index < len(tokens):
                value = parse_amount(tokens[amount_index], ABSA_AMOUNT_RULES)
                if value is not None:
                    return type_index, amount_index, abs(value) if credit else -abs(value)

    for i, token in enumerate(tokens):
        if is_compact_date(token):
            continue
        value = parse_amount(token, ABSA_AMOUNT_RULES)
        if value is not None:
            if credit is None:
                credit = value >= 0
            return type_index, i, value if credit else -abs(value)

    return type_index, -1, None


def build_description(tokens: List[str], start_index: int) -> str:
    """
    Join the narrative tokens that follow the amount.

    Stops at the next compact date and drops short all-letter column codes.
    """
    if start_index < 0:
        start_index = 0

    parts = []
    for token in tokens[start_index + 1:]:
        if is_compact_date(token):
            break
        value = token.strip()
        if not value:
            continue
        if len(value) <= MAX_CODE_LENGTH and value.isalpha():
            continue
        parts.append(value)

    return clean_description(" ".join(parts))


def find_long_number(tokens: List[str]) -> str:
    """First all-digit token long enough to be a reference that is not a date."""
    for token in tokens:
        if not is_compact_date(token) and token.isdigit() and len(token) >= MIN_REFERENCE_DIGITS:
            return token
    return ""

"""
FNB statement exports.

FNB files come with or without a header row, delimited or multi-space
aligned, and with either a single signed Amount column or separate
Debit/Credit columns. Column roles are bound once per file, from the header
when one is recognized, otherwise from the first date-led data row.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple
import logging

from .base import BankParser, make_transaction
from ..core.detectors import FnbDetector
from ..core.loader import StatementLoader
from ..core.normalize import (
    FNB_AMOUNT_RULES,
    FNB_REFERENCE_PATTERNS,
    ZERO_AMOUNT,
    extract_reference,
    format_amount,
    is_date_like,
    normalize_date,
    parse_amount,
    split_amount,
)
from ..core.tokenizer import tokenize
from ..models.schema import ParseResult, ParseStatus

logger = logging.getLogger(__name__)

MIN_HEADER_SCORE = 2

NO_DATA_MESSAGE = "No valid transaction data found in FNB file."


@dataclass(frozen=True)
class ColumnBinding:
    """Column roles of an FNB file; -1 marks an absent role."""
    date: int = 0
    description: int = -1
    amount: int = -1
    credit: int = -1
    debit: int = -1
    reference: int = -1
    from_header: bool = False

    def claimed(self) -> Tuple[int, ...]:
        return (self.date, self.amount, self.credit, self.debit, self.reference)


def cell(values: List[str], index: int) -> Optional[str]:
    """Value at ``index`` or None when the row is too short or the role is unbound."""
    if 0 <= index < len(values):
        return values[index]
    return None


def is_numeric(value: str) -> bool:
    return parse_amount(value, FNB_AMOUNT_RULES) is not None


def is_likely_header(values: List[str]) -> bool:
    """A row naming at least two known columns is treated as a header."""
    if len(values) < 2:
        return False

    score = 0
    for value in values:
        t = value.strip().upper()
        if "DATE" in t:
            score += 1
        elif "DESC" in t or "NARRATION" in t:
            score += 1
        elif "AMOUNT" in t:
            score += 1
        elif "DEBIT" in t or t == "DR":
            score += 1
        elif "CREDIT" in t or t == "CR":
            score += 1
        elif "BALANCE" in t:
            score += 1
        elif "REFERENCE" in t or t == "REF":
            score += 1
    return score >= MIN_HEADER_SCORE


def bind_header(values: List[str]) -> ColumnBinding:
    """Map header names onto column roles."""
    roles = {"date": -1, "description": -1, "amount": -1, "credit": -1, "debit": -1, "reference": -1}

    for i, value in enumerate(values):
        h = value.strip().upper()
        if roles["date"] == -1 and "DATE" in h:
            roles["date"] = i
        elif roles["description"] == -1 and ("DESC" in h or "NARRATION" in h or "DETAIL" in h):
            roles["description"] = i
        elif roles["reference"] == -1 and ("REFERENCE" in h or h == "REF" or "REF." in h):
            roles["reference"] = i
        elif roles["amount"] == -1 and "AMOUNT" in h:
            roles["amount"] = i
        elif roles["credit"] == -1 and ("CREDIT" in h or h == "CR" or "CR. RECEIPTS" in h):
            roles["credit"] = i
        elif roles["debit"] == -1 and ("DEBIT" in h or h == "DR" or "DR. PAYMENTS" in h):
            roles["debit"] = i

    # Explicit Credit/Debit columns win over a generic Amount column
    if roles["credit"] >= 0 and roles["debit"] >= 0:
        roles["amount"] = -1

    return ColumnBinding(from_header=True, **roles)


def infer_binding(values: List[str]) -> ColumnBinding:
    """
    Infer column roles from the first data row of a headerless file.

    The date is the first column. One numeric column is the amount, two are
    amount and running balance, three or more start with debit and credit.
    The description is the first remaining text column.
    """
    numeric = [i for i in range(1, len(values)) if is_numeric(values[i])]

    amount = credit = debit = -1
    if len(numeric) == 1:
        amount = numeric[0]
    elif len(numeric) == 2:
        amount = numeric[0]
    elif len(numeric) >= 3:
        debit, credit = numeric[0], numeric[1]

    description = -1
    for i in range(1, len(values)):
        if i in numeric or is_date_like(values[i]):
            continue
        description = i
        break

    return ColumnBinding(date=0, description=description, amount=amount, credit=credit, debit=debit)


def build_description(values: List[str], binding: ColumnBinding) -> str:
    """Join the unclaimed text columns of a row."""
    claimed = binding.claimed()
    parts = []
    for i, value in enumerate(values):
        if i in claimed or not value.strip():
            continue
        if is_numeric(value) or is_date_like(value):
            continue
        parts.append(value.strip())
    return " ".join(parts)


def row_amounts(values: List[str], binding: ColumnBinding) -> Tuple[str, str]:
    """
    Resolve (receipt, disbursement) for a row.

    Order: bound Amount column, then bound Credit/Debit columns, then the
    single numeric token of the row when there is exactly one.
    """
    amount_value = cell(values, binding.amount)
    if amount_value is not None:
        return split_amount(parse_amount(amount_value, FNB_AMOUNT_RULES))

    credit_value = cell(values, binding.credit)
    debit_value = cell(values, binding.debit)
    credit = parse_amount(credit_value, FNB_AMOUNT_RULES) if credit_value is not None else None
    debit = parse_amount(debit_value, FNB_AMOUNT_RULES) if debit_value is not None else None
    if credit is not None or debit is not None:
        receipt = format_amount(abs(credit)) if credit else ZERO_AMOUNT
        disbursement = format_amount(abs(debit)) if debit else ZERO_AMOUNT
        return receipt, disbursement

    candidates = [
        parse_amount(v, FNB_AMOUNT_RULES)
        for i, v in enumerate(values)
        if i != binding.date and is_numeric(v)
    ]
    if len(candidates) == 1:
        return split_amount(candidates[0])

    return ZERO_AMOUNT, ZERO_AMOUNT


class FnbParser(BankParser):
    """Header-aware parser for FNB CSV/TXT exports."""

    template_id = "fnb"
    detector_class = FnbDetector

    def _parse(self, path: Path) -> ParseResult:
        transactions = []
        seq = 1
        binding = None

        for raw in StatementLoader(path, strip_bom=True).iter_lines():
            if not raw.strip():
                continue

            values = tokenize(raw, strip=None, fallback="whole")
            if not values:
                continue

            if binding is None:
                if is_likely_header(values):
                    binding = bind_header(values)
                    logger.debug(f"FNB header columns: {binding}")
                    continue
                if not is_date_like(values[0]):
                    continue
                binding = infer_binding(values)
                logger.debug(f"FNB inferred columns: {binding}")
            elif binding.from_header and is_likely_header(values):
                continue

            date_value = cell(values, binding.date)
            if date_value is None or not is_date_like(date_value):
                continue

            description_value = cell(values, binding.description)
            if description_value is not None:
                description = description_value
            else:
                description = build_description(values, binding)

            reference = (cell(values, binding.reference) or "").strip()
            if not reference:
                reference = extract_reference(description, FNB_REFERENCE_PATTERNS)

            transactions.append(make_transaction(
                str(seq),
                reference,
                normalize_date(date_value),
                description,
                row_amounts(values, binding),
            ))
            seq += 1

        if not transactions:
            logger.warning(f"{NO_DATA_MESSAGE} ({path.name})")
            return self._result(path, transactions, ParseStatus.FAILED, NO_DATA_MESSAGE)

        return self._result(path, transactions)

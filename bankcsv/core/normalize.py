"""
Field normalization: dates, amounts, references and descriptions.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Pattern, Sequence, Tuple
import logging

from dateutil import parser as dtparse

logger = logging.getLogger(__name__)

ZERO_AMOUNT = "0.00"

DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y/%m/%d %H:%M",
    "%Y-%m-%d %H:%M",
    "%d/%m/%Y %H:%M",
    "%d-%m-%Y %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
)

COMPACT_DATE_RE = re.compile(r"^20\d{6}$")
PLAIN_NUMBER_RE = re.compile(r"^[+-]?[\d,]*\.?\d+$")
NUMBER_RE = re.compile(r"^\d+(\.\d*)?$")
GROUPED_NUMBER_RE = re.compile(r"^\d{1,3}(,\d{3})+(\.\d+)?$")


def _parse_general(value: str) -> Optional[date]:
    """Free-form date parsing; bare numbers are never treated as dates."""
    if not any(c.isdigit() for c in value) or PLAIN_NUMBER_RE.match(value):
        return None
    try:
        return dtparse.parse(value, dayfirst=True).date()
    except (ValueError, OverflowError, TypeError):
        return None


def parse_date(token: str) -> Optional[date]:
    """
    Parse a statement date token.

    Handles the zero-prefixed 9 character compact date, ``YYYYMMDD``, a fixed
    list of exact formats and finally general day-first parsing.

    Args:
        token: Raw date token

    Returns:
        Parsed date or None
    """
    value = token.strip() if token else ""
    if not value:
        return None

    if len(value) == 9 and value.startswith("0"):
        value = value[1:]

    if len(value) == 8 and value.isdigit():
        try:
            return date(int(value[:4]), int(value[4:6]), int(value[6:]))
        except ValueError:
            return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    return _parse_general(value)


def normalize_date(token: str) -> str:
    """
    Normalize a date token to ``YYYY-MM-DD``.

    Args:
        token: Raw date token

    Returns:
        ISO date, the trimmed token when it cannot be parsed, or "" for blank input
    """
    if not token or not token.strip():
        return ""

    parsed = parse_date(token)
    if parsed is None:
        logger.warning(f"Could not parse date: {token}")
        return token.strip()
    return parsed.isoformat()


def is_date_like(token: str) -> bool:
    """Permissive date pre-filter used before column-level date checks."""
    if not token:
        return False
    value = token.strip()
    if ("/" in value or "-" in value) and _parse_general(value) is not None:
        return True
    return len(value) >= 4 and value.startswith("20")


def is_compact_date(token: str) -> bool:
    """``20YYMMDD`` shaped token."""
    return bool(token) and COMPACT_DATE_RE.match(token.strip()) is not None


def is_padded_compact_date(token: str) -> bool:
    """``20YYMMDD``, optionally carried as a 9 character zero-prefixed token."""
    if not token or not token.strip():
        return False
    value = token.strip()
    if len(value) == 9 and value.startswith("0"):
        value = value[1:]
    return len(value) == 8 and value.isdigit() and value.startswith("20")


def is_signed_padded_amount(token: str) -> bool:
    """Explicitly signed amount such as ``+000000001250.00``."""
    if not token:
        return False
    value = token.strip()
    if not value.startswith(("+", "-")):
        return False
    body = value[1:].replace(".", "")
    return body.isdigit()


@dataclass(frozen=True)
class AmountRules:
    """Per-institution switches for the amount cleaning pipeline."""
    currency_markers: Tuple[str, ...] = ("R", "r", "$")
    cr_dr_suffix: bool = True
    parentheses: bool = True
    trailing_minus: bool = False
    comma_decimal: bool = False
    grouping_commas: bool = False
    reject_compact_dates: bool = False


DEFAULT_AMOUNT_RULES = AmountRules()

ABSA_AMOUNT_RULES = AmountRules(
    cr_dr_suffix=False,
    trailing_minus=True,
    comma_decimal=True,
    grouping_commas=True,
    reject_compact_dates=True,
)

FNB_AMOUNT_RULES = AmountRules(
    trailing_minus=True,
    comma_decimal=True,
    grouping_commas=True,
)

STANDARD_BANK_AMOUNT_RULES = AmountRules(
    currency_markers=(),
    cr_dr_suffix=False,
    parentheses=False,
    grouping_commas=True,
)


def remove_leading_zeros(value: str) -> str:
    """
    Strip leading zeros from the integer part of a numeric string.

    "000123.45" -> "123.45", "0000" -> "0", "000.50" -> "0.50"
    """
    if not value:
        return value

    if "." in value:
        int_part, _, frac = value.partition(".")
        return f"{int_part.lstrip('0') or '0'}.{frac}"

    return value.lstrip("0") or "0"


def parse_amount(token: str, rules: AmountRules = DEFAULT_AMOUNT_RULES) -> Optional[Decimal]:
    """
    Parse a raw amount token into a signed Decimal.

    Args:
        token: Raw amount (currency markers, grouping, sign prefixes/suffixes)
        rules: Institution specific cleaning switches

    Returns:
        Signed Decimal, or None when the token is not an amount
    """
    if not token or not token.strip():
        return None

    s = token.strip()
    negative = False

    # CR/DR before currency stripping, which would eat the R
    if rules.cr_dr_suffix:
        upper = s.upper()
        if upper.endswith("DR"):
            negative = True
            s = s[:-2].strip()
        elif upper.endswith("CR"):
            s = s[:-2].strip()

    for marker in rules.currency_markers:
        s = s.replace(marker, "")
    s = s.replace(" ", "")

    if rules.parentheses and len(s) >= 2 and s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]

    if rules.trailing_minus and len(s) > 1 and s.endswith("-"):
        negative = True
        s = s[:-1]

    if s.startswith("-"):
        negative = True
        s = s[1:]
    elif s.startswith("+"):
        s = s[1:]

    if rules.reject_compact_dates and len(s) == 8 and s.isdigit():
        return None

    if "," in s and "." in s:
        s = s.replace(",", "")
    elif rules.grouping_commas and s.count(",") > 1:
        s = s.replace(",", "")
    elif rules.comma_decimal and s.count(",") == 1:
        s = s.replace(",", ".")
    elif GROUPED_NUMBER_RE.match(s):
        s = s.replace(",", "")

    s = remove_leading_zeros(s)
    if not NUMBER_RE.match(s):
        return None

    value = Decimal(s)
    return -value if negative else value


def format_amount(value: Decimal) -> str:
    """Two decimal, half-up rendering of an amount; the zero literal when out of range."""
    try:
        return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        logger.warning(f"Amount out of range: {value}")
        return ZERO_AMOUNT


def split_amount(value: Optional[Decimal]) -> Tuple[str, str]:
    """
    Route a signed amount into (receipt, disbursement).

    Non-negative values go to receipt, negative values to disbursement; the
    other column carries the zero literal.
    """
    if value is None:
        return ZERO_AMOUNT, ZERO_AMOUNT

    formatted = format_amount(abs(value))
    if value < 0:
        return ZERO_AMOUNT, formatted
    return formatted, ZERO_AMOUNT


def normalize_amount(token: str, rules: AmountRules = DEFAULT_AMOUNT_RULES) -> Tuple[str, str]:
    """
    Normalize a raw amount token into (receipt, disbursement) strings.

    Args:
        token: Raw amount token
        rules: Institution specific cleaning switches

    Returns:
        Tuple of two-decimal strings; ("0.00", "0.00") when parsing fails
    """
    return split_amount(parse_amount(token, rules))


REFERENCE_PATTERNS = (
    re.compile(r"(?:\bREF:|\bREFERENCE\b:?)\s*(\d+)", re.IGNORECASE),
    re.compile(r"\b(\d{5,})\s*$"),
    re.compile(r"(?:\bCust No|\bCustomer)\s+(\d+)", re.IGNORECASE),
    re.compile(r"\)(\d{5,})"),
    re.compile(r"\b(\d{5,6})\b"),
)

FNB_REFERENCE_PATTERNS = (
    re.compile(r"^(\d{4,})"),
    re.compile(r"(?:REF|REFERENCE)[\s:#]*(\d+)", re.IGNORECASE),
    re.compile(r"(?:TRN|TRANS|TRANSACTION)[\s:#]*(\d+)", re.IGNORECASE),
    re.compile(r"(?:PMT|PAYMENT)[\s:#]*(\d+)", re.IGNORECASE),
    re.compile(r"\b(\d{5,})\b"),
)


def extract_reference(text: str, patterns: Sequence[Pattern] = REFERENCE_PATTERNS) -> str:
    """
    Extract a payment or customer reference from free text.

    Patterns are tried in order and the first match wins.

    Args:
        text: Transaction description or similar text
        patterns: Ordered compiled patterns with one capturing group

    Returns:
        Reference digits, or "" when nothing matches
    """
    if not text:
        return ""

    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)

    return ""


def clean_description(text: str) -> str:
    """Collapse whitespace and trim surrounding spaces, dots and commas."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip(" .,")

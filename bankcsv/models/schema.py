"""
Pydantic models for canonical bank statement transactions.
"""
import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.errors import NoTransactionsError

AMOUNT_RE = re.compile(r"^\d+\.\d{2}$")

# Output header labels in canonical field order
COLUMN_LABELS = {
    "external_transaction_id": "Ext. Tran. ID",
    "external_reference": "Ext. Ref. Nbr.",
    "transaction_date": "Tran. Date",
    "description": "Tran. Desc.",
    "receipt": "Receipt",
    "disbursement": "Disbursement",
}


class Transaction(BaseModel):
    """Canonical transaction record shared by every bank parser."""
    model_config = ConfigDict(frozen=True)

    external_transaction_id: str
    external_reference: str = ""
    transaction_date: str = ""
    description: str = ""
    receipt: str = "0.00"
    disbursement: str = "0.00"

    @field_validator("receipt", "disbursement")
    @classmethod
    def validate_amount_format(cls, v):
        """Amounts are non-negative with exactly two decimals."""
        if not AMOUNT_RE.match(v):
            raise ValueError(f"Amount must be a non-negative two decimal string: {v!r}")
        return v

    def to_row(self) -> Dict[str, str]:
        """Map the record onto the output column labels."""
        return {label: getattr(self, name) for name, label in COLUMN_LABELS.items()}


class ParseStatus(str, Enum):
    """Outcome of a single parse pass."""
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class ParseResult(BaseModel):
    """Records produced by one parser for one file, plus the outcome."""
    bank: str
    short_token: str
    source: str
    status: ParseStatus = ParseStatus.OK
    transactions: List[Transaction] = Field(default_factory=list)
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != ParseStatus.FAILED

    def raise_for_status(self) -> "ParseResult":
        """Raise NoTransactionsError for a structurally failed parse."""
        if self.status == ParseStatus.FAILED:
            raise NoTransactionsError(self.message or "No data parsed.", source=self.source)
        return self


class DetectionResult(BaseModel):
    """Score sheet of one format detector against one file."""
    template_id: str
    matched: bool = False
    score: int = 0
    details: Dict[str, int] = Field(default_factory=dict)
    layout: Optional[str] = None
    error: Optional[str] = None

"""
Common contract for bank statement parsers.
"""
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

from ..core.detectors import FormatDetector
from ..core.normalize import clean_description
from ..core.profiles import BankProfile, ProfileLoader
from ..models.schema import DetectionResult, ParseResult, ParseStatus, Transaction

logger = logging.getLogger(__name__)


class BankParser:
    """
    Base class for a statement format.

    A parser pairs a format detector with the row extraction logic for one
    institution. Instances carry only their profile; everything derived from a
    file lives in locals of a single parse call.
    """

    template_id = ""
    detector_class = FormatDetector

    def __init__(self, profile: Optional[BankProfile] = None):
        self.profile = profile or ProfileLoader().require(self.template_id)
        self.detector = self.detector_class(self.profile)

    def __repr__(self):
        return f"{type(self).__name__}('{self.display_name}')"

    @property
    def display_name(self) -> str:
        """Human friendly bank name."""
        return self.profile.bank

    @property
    def short_token(self) -> str:
        """Token used by callers for file naming, sheet naming and theming."""
        return self.profile.short_token

    @property
    def hint_keywords(self) -> List[str]:
        return self.profile.hint_keywords

    def detect(self, path: Union[str, Path]) -> DetectionResult:
        return self.detector.detect(path)

    def is_match(self, path: Union[str, Path]) -> bool:
        """Lightweight sniff of whether the file is in this parser's format."""
        return self.detect(path).matched

    def parse(self, path: Union[str, Path]) -> List[Transaction]:
        """
        Parse a statement file into canonical records.

        Args:
            path: Path to the CSV/TXT export

        Returns:
            Ordered list of Transaction records

        Raises:
            NoTransactionsError: the parser requires rows and found none
        """
        return self.parse_result(path).raise_for_status().transactions

    def parse_result(self, path: Union[str, Path]) -> ParseResult:
        """Parse a statement file and report the outcome explicitly."""
        path = Path(path)
        result = self._parse(path)
        logger.info(f"{self.display_name} parser produced {len(result.transactions)} rows "
                    f"from {path.name} ({result.status.value})")
        return result

    def _parse(self, path: Path) -> ParseResult:
        raise NotImplementedError

    def _result(self, path: Path, transactions: List[Transaction],
                status: Optional[ParseStatus] = None, message: Optional[str] = None) -> ParseResult:
        if status is None:
            status = ParseStatus.OK if transactions else ParseStatus.EMPTY
        return ParseResult(
            bank=self.display_name,
            short_token=self.short_token,
            source=str(path),
            status=status,
            transactions=transactions,
            message=message,
        )


def make_transaction(transaction_id: str, reference: str, transaction_date: str,
                     description: str, amounts: Tuple[str, str]) -> Transaction:
    """Build a canonical record from extracted fields and a (receipt, disbursement) pair."""
    receipt, disbursement = amounts
    return Transaction(
        external_transaction_id=str(transaction_id),
        external_reference=(reference or "").strip(),
        transaction_date=transaction_date,
        description=clean_description(description),
        receipt=receipt,
        disbursement=disbursement,
    )

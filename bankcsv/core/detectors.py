"""
Format detection: sample-bounded heuristics that score a statement file.
"""
import re
from pathlib import Path
from typing import List, Union
import logging

from pydantic import BaseModel, Field, ValidationError

from .errors import ProfileError
from .loader import StatementLoader
from .normalize import is_compact_date
from .profiles import BankProfile
from .tokenizer import detect_delimiter, is_quoted_row, split_line, tokenize
from ..models.schema import DetectionResult

logger = logging.getLogger(__name__)

# Hard cap on how much of a file any detector may read
MAX_SAMPLE_LINES = 50

FNB_DATE_RE = re.compile(r"DATE", re.IGNORECASE)
FNB_DESC_RE = re.compile(r"DESC|NARRATION|DETAIL", re.IGNORECASE)
FNB_AMOUNT_RE = re.compile(r"AMOUNT|DEBIT|CREDIT|\bDR\b|\bCR\b", re.IGNORECASE)
FNB_REF_RE = re.compile(r"REFERENCE|\bREF\b", re.IGNORECASE)
FNB_DATE_LED_RE = re.compile(r"^\s*(\d{2}[/-]\d{2}[/-]\d{2,4}|\d{4}[/-]\d{2}[/-]\d{2}|20\d{6})")

SIGNED_ZERO_PADDED_RE = re.compile(r"^[+\-]0+\d+(\.\d+)?$")


class AbsaDetection(BaseModel):
    sample_lines: int = Field(40, ge=1, le=MAX_SAMPLE_LINES)
    min_score: int = 3
    date_column: int = 2
    keywords: List[str] = Field(default_factory=lambda: ["CASHFOCUS", "SETTLEMENT"])


class FnbDetection(BaseModel):
    sample_lines: int = Field(40, ge=1, le=MAX_SAMPLE_LINES)
    min_header_score: int = 2
    min_date_lines: int = 5


class StandardBankDetection(BaseModel):
    sample_lines: int = Field(50, ge=1, le=MAX_SAMPLE_LINES)
    layout_probe_lines: int = Field(20, ge=1, le=MAX_SAMPLE_LINES)
    min_header_hits: int = 1
    min_compact_dates: int = 2
    min_signed_amounts: int = 2
    min_quoted_lines: int = 3
    quoted_line_min_quotes: int = 10
    header_keywords: List[str] = Field(default_factory=lambda: ["ACC-NO", "ACCOUNT", "BRANCH"])


class FormatDetector:
    """Base detector; subclasses implement ``_score``."""

    config_model = None

    def __init__(self, profile: BankProfile):
        self.profile = profile
        self.template_id = profile.template_id
        self.config = None
        if self.config_model is not None:
            try:
                self.config = self.config_model(**profile.detection)
            except ValidationError as e:
                raise ProfileError(f"Invalid detection settings for {profile.template_id}: {e}") from e

    def detect(self, path: Union[str, Path]) -> DetectionResult:
        """
        Score a file against this format.

        Any error raised while sniffing is reported as a non-match.

        Args:
            path: Path to the statement file

        Returns:
            DetectionResult
        """
        try:
            result = self._score(Path(path))
        except Exception as e:
            logger.debug(f"Sniff error in {self.template_id} detector for {path}: {e}")
            return DetectionResult(template_id=self.template_id, matched=False, error=str(e))

        logger.debug(f"{self.template_id} detector: matched={result.matched} details={result.details}")
        return result

    def is_match(self, path: Union[str, Path]) -> bool:
        return self.detect(path).matched

    def _score(self, path: Path) -> DetectionResult:
        raise NotImplementedError


class AbsaDetector(FormatDetector):
    """Looks for 20YYMMDD dates in the third column, DT/CT codes and ABSA keywords."""

    config_model = AbsaDetection

    def _score(self, path: Path) -> DetectionResult:
        cfg = self.config
        keywords = [k.upper() for k in cfg.keywords]
        compact_dates = type_codes = keyword_hits = lines = 0

        for line in StatementLoader(path).sample(cfg.sample_lines):
            if not line.strip():
                continue
            lines += 1
            parts = tokenize(line)

            if len(parts) > cfg.date_column and is_compact_date(parts[cfg.date_column]):
                compact_dates += 1

            if any(p.upper() in ("DT", "CT") for p in parts):
                type_codes += 1

            if any(k in p.upper() for p in parts for k in keywords):
                keyword_hits += 1

        score = compact_dates + type_codes + keyword_hits
        return DetectionResult(
            template_id=self.template_id,
            matched=lines > 0 and score >= cfg.min_score,
            score=score,
            details={
                "lines": lines,
                "compact_dates": compact_dates,
                "type_codes": type_codes,
                "keywords": keyword_hits,
            },
        )


class FnbDetector(FormatDetector):
    """Header keyword score plus a count of date-led lines."""

    config_model = FnbDetection

    def _score(self, path: Path) -> DetectionResult:
        cfg = self.config
        header_score = date_lines = 0
        sample = StatementLoader(path).sample(cfg.sample_lines, skip_blank=True)

        for line in sample:
            probe = line.strip()
            for pattern in (FNB_DATE_RE, FNB_DESC_RE, FNB_AMOUNT_RE, FNB_REF_RE):
                if pattern.search(probe):
                    header_score += 1

            if FNB_DATE_LED_RE.match(probe):
                date_lines += 1

        return DetectionResult(
            template_id=self.template_id,
            matched=header_score >= cfg.min_header_score or date_lines >= cfg.min_date_lines,
            score=header_score,
            details={"lines": len(sample), "header_score": header_score, "date_lines": date_lines},
        )


class StandardBankDetector(FormatDetector):
    """Recognizes both the new (metadata + header) and the legacy Standard Bank layouts."""

    config_model = StandardBankDetection

    def _score(self, path: Path) -> DetectionResult:
        cfg = self.config
        keywords = [k.upper() for k in cfg.header_keywords]
        new_layout_hits = header_hits = compact_dates = signed_amounts = quoted_lines = 0

        for line in StatementLoader(path).sample(cfg.sample_lines):
            if not line.strip():
                continue

            upper = line.upper()
            probe = line.strip().strip('"')

            if "DATE" in upper and "AMOUNT" in upper and "BALANCE" in upper:
                new_layout_hits += 1

            if any(k in probe.upper() for k in keywords):
                header_hits += 1

            # Split before quote stripping so "a","b" rows keep their quote pairing
            delimiter = detect_delimiter(probe)
            raw_tokens = split_line(line.strip(), delimiter) if delimiter in probe else probe.split(" ")
            for token in (t.strip().strip('"') for t in raw_tokens):
                if is_compact_date(token):
                    compact_dates += 1
                if SIGNED_ZERO_PADDED_RE.match(token):
                    signed_amounts += 1

            if is_quoted_row(line, cfg.quoted_line_min_quotes):
                quoted_lines += 1

        layout = None
        if new_layout_hits >= 1:
            layout = "new"
        elif header_hits >= cfg.min_header_hits and (
            compact_dates >= cfg.min_compact_dates or signed_amounts >= cfg.min_signed_amounts
        ):
            layout = "legacy"
        elif quoted_lines >= cfg.min_quoted_lines and signed_amounts >= cfg.min_signed_amounts:
            layout = "legacy"

        return DetectionResult(
            template_id=self.template_id,
            matched=layout is not None,
            score=new_layout_hits + header_hits,
            layout=layout,
            details={
                "new_layout_headers": new_layout_hits,
                "header_hits": header_hits,
                "compact_dates": compact_dates,
                "signed_amounts": signed_amounts,
                "quoted_lines": quoted_lines,
            },
        )


class GenericDetector(FormatDetector):
    """Always matches; must be evaluated last."""

    def detect(self, path: Union[str, Path]) -> DetectionResult:
        return DetectionResult(template_id=self.template_id, matched=True)

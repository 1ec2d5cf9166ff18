"""
Format resolution: pick the parser for a statement file.
"""
from pathlib import Path
from typing import List, Optional, Union
import logging

from .anchors import contains_keyword, fuzzy_keyword
from .profiles import ProfileLoader
from ..models.schema import DetectionResult
from ..parsers.absa import AbsaParser
from ..parsers.base import BankParser
from ..parsers.fnb import FnbParser
from ..parsers.generic import GenericParser
from ..parsers.standard_bank import StandardBankParser

logger = logging.getLogger(__name__)

# Detection priority; the generic parser always matches and must stay last
PARSER_CLASSES = (AbsaParser, FnbParser, StandardBankParser, GenericParser)


def default_parsers(loader: Optional[ProfileLoader] = None) -> List[BankParser]:
    """
    Build the parser registry in detection priority order.

    Args:
        loader: Profile source; the bundled templates when omitted

    Returns:
        List of parser instances, generic fallback last
    """
    loader = loader or ProfileLoader()
    return [cls(loader.require(cls.template_id)) for cls in PARSER_CLASSES]


class FormatResolver:
    """Resolves a user hint and/or file content to a parser."""

    def __init__(self, parsers: Optional[List[BankParser]] = None):
        self.parsers = list(parsers) if parsers is not None else default_parsers()
        if not self.parsers:
            raise ValueError("FormatResolver needs at least one parser")

    def resolve(self, hint: Optional[str], path: Union[str, Path]) -> BankParser:
        """
        Pick the parser for a file.

        A non-empty hint naming a known bank wins without looking at the file
        content. Otherwise each detector is asked in priority order and the
        first match is returned.

        Args:
            hint: Optional free text bank hint, e.g. "ABSA savings"
            path: Path to the statement file

        Returns:
            BankParser instance

        Raises:
            FileNotFoundError: the file does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Statement file not found: {path}")

        if hint and hint.strip():
            parser = self.from_hint(hint)
            if parser is not None:
                logger.info(f"Using {parser.display_name} parser from hint '{hint}'")
                return parser
            logger.info(f"Hint '{hint}' names no known bank, detecting from content")

        for parser in self.parsers:
            if parser.is_match(path):
                logger.info(f"Detected {parser.display_name} format for {path.name}")
                return parser

        # Only reachable with a registry lacking the generic fallback
        logger.warning(f"No format matched {path.name}, using {self.parsers[-1].display_name}")
        return self.parsers[-1]

    def from_hint(self, hint: str) -> Optional[BankParser]:
        """Parser whose hint keywords match ``hint``, exact containment before fuzzy."""
        for parser in self.parsers:
            if contains_keyword(hint, parser.hint_keywords):
                return parser

        best = None
        best_confidence = 0
        for parser in self.parsers:
            match = fuzzy_keyword(hint, parser.hint_keywords)
            if match is not None and match.confidence > best_confidence:
                best, best_confidence = parser, match.confidence
        if best is not None:
            logger.debug(f"Fuzzy hint '{hint}' resolved to {best.display_name} ({best_confidence:.1f})")
        return best

    def explain(self, path: Union[str, Path]) -> List[DetectionResult]:
        """Run every detector against the file and return all score sheets."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Statement file not found: {path}")
        return [parser.detect(path) for parser in self.parsers]


def resolve_parser(hint: Optional[str], path: Union[str, Path]) -> BankParser:
    """
    Convenience function to resolve the parser for a statement file.

    Args:
        hint: Optional free text bank hint
        path: Path to the statement file

    Returns:
        BankParser instance
    """
    return FormatResolver().resolve(hint, path)


def detect_template(path: Union[str, Path], hint: Optional[str] = None) -> str:
    """
    Convenience function to detect the profile ID of a statement file.

    Args:
        path: Path to the statement file
        hint: Optional free text bank hint

    Returns:
        Template ID of the resolved parser
    """
    return resolve_parser(hint, path).profile.template_id

"""
Line streaming and bounded sampling of statement export files.
"""
from pathlib import Path
from typing import Iterator, List, Union
import logging

logger = logging.getLogger(__name__)

BOM = "\ufeff"


class StatementLoader:
    """Reads a CSV/TXT statement export line by line."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8", strip_bom: bool = False):
        self.path = Path(path)
        self.encoding = encoding
        self.strip_bom = strip_bom

    def __repr__(self):
        return f"StatementLoader('{self.path}')"

    def iter_lines(self) -> Iterator[str]:
        """
        Stream the file one line at a time without line terminators.

        Undecodable bytes are replaced rather than raised so that a stray
        character in a description never aborts a parse.
        """
        with open(self.path, "r", encoding=self.encoding, errors="replace", newline="") as f:
            first = True
            for raw in f:
                line = raw.rstrip("\r\n")
                if first:
                    first = False
                    if self.strip_bom and line.startswith(BOM):
                        line = line.lstrip(BOM)
                yield line

    def sample(self, max_lines: int, skip_blank: bool = False) -> List[str]:
        """
        Read at most ``max_lines`` lines from the top of the file.

        Args:
            max_lines: Upper bound on lines returned
            skip_blank: When True blank lines are dropped and do not count

        Returns:
            List of lines
        """
        lines = []
        if max_lines <= 0:
            return lines

        for line in self.iter_lines():
            if skip_blank and not line.strip():
                continue
            lines.append(line)
            if len(lines) >= max_lines:
                break

        logger.debug(f"Sampled {len(lines)} lines from {self.path.name}")
        return lines

"""
Delimiter inference and single-line tokenization for statement exports.
"""
import re
from typing import List, Optional

# Tie-break order when several delimiters share the highest count.
DELIMITER_PRIORITY = ("\t", ";", "|", ",")

MULTI_SPACE_RE = re.compile(r"\s{2,}")

QUOTE_STRIP = ' \t"'


def detect_delimiter(line: str) -> str:
    """
    Guess the field delimiter of a single line.

    Args:
        line: Raw line of text

    Returns:
        The candidate with the highest count (tab, semicolon, pipe, comma),
        ties resolved in that order. Comma when no candidate occurs.
    """
    counts = {delim: line.count(delim) for delim in DELIMITER_PRIORITY}
    best = max(counts.values())
    if best == 0:
        return ","

    for delim in DELIMITER_PRIORITY:
        if counts[delim] == best:
            return delim
    return ","


def split_line(line: str, delimiter: str) -> List[str]:
    """
    Split a line on ``delimiter`` honoring RFC4180-style double quotes.

    Delimiters inside a quoted span are literal and a doubled quote inside a
    quoted span yields one quote. An unterminated quote simply runs to the end
    of the line.

    Args:
        line: Raw line to split
        delimiter: Field delimiter

    Returns:
        List of fields, never empty
    """
    fields = []
    current = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        c = line[i]
        if c == '"':
            if in_quotes and i + 1 < length and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif c == delimiter and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(c)
        i += 1

    fields.append("".join(current))
    return fields


def split_quoted_line(line: str) -> List[str]:
    """
    Comma splitter for uniformly quoted exports.

    Every quote toggles quoted mode and is dropped; doubled quotes are not
    unescaped. A trailing empty field is only kept when the line ends inside
    quotes.
    """
    fields = []
    current = []
    in_quotes = False

    for c in line:
        if c == '"':
            in_quotes = not in_quotes
        elif c == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(c)

    if current or in_quotes:
        fields.append("".join(current))

    return fields or [""]


def split_multi_space(line: str) -> List[str]:
    """Split fixed-width style text on runs of two or more whitespace characters."""
    parts = MULTI_SPACE_RE.split(line.strip())
    return [p.strip(QUOTE_STRIP) for p in parts if p.strip(QUOTE_STRIP)]


def tokenize(line: str, strip: Optional[str] = QUOTE_STRIP, fallback: str = "spaces") -> List[str]:
    """
    Tokenize a statement row using the delimiter / multi-space / fallback ladder.

    Args:
        line: Raw line
        strip: Characters stripped from delimited fields (None strips whitespace)
        fallback: "spaces" splits on single spaces, "whole" keeps the trimmed
            line as a single field

    Returns:
        List of tokens (empty for an empty line)
    """
    if not line:
        return []

    delimiter = detect_delimiter(line)
    if delimiter in line:
        return [field.strip(strip) for field in split_line(line, delimiter)]

    if MULTI_SPACE_RE.search(line):
        return split_multi_space(line)

    if fallback == "whole":
        return [line.strip()]
    return line.split()


def is_quoted_row(line: str, min_quotes: int = 10) -> bool:
    """Check for the heavily quoted row shape ("a","b",...) used by legacy exports."""
    return len(line) > 20 and line.startswith('"') and line.count('"') >= min_quotes

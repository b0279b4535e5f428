"""
Line Scanner
============

Splits one line of text into tokens at a set of delimiter characters, honoring
backslash escapes and '#' comments. Both the unit definitions file and the
console use it; each passes its own delimiters.

Usage:
    >>> from ucon.parse.scanner import tokenize
    >>> [t.text for t in tokenize("aliases = in, inch", "=,")]
    ['aliases ', '=', ' in', ',', ' inch']
"""

from dataclasses import dataclass
from typing import Iterable, List

ESCAPE = "\\"
COMMENT = "#"
LINE_END = "\r\n"


@dataclass(frozen=True)
class Token:
    """A run of text between delimiters, or a single delimiter character."""
    text: str
    delim: bool = False
    column: int = 0

    @property
    def is_blank(self) -> bool:
        return not self.delim and not self.text.strip()


class ScanError(ValueError):
    """Raised when a line ends in the middle of an escape sequence."""

    def __init__(self, column: int, message: str):
        self.column = column
        super().__init__(f"column {column}: {message}")


def tokenize(
    line: str,
    delimiters: Iterable[str],
    keep_escapes: bool = False,
) -> List[Token]:
    """
    Tokenize a line.

    Text tokens are emitted between every pair of delimiters, so an empty
    field shows up as an empty token. Whitespace is left untouched; callers
    trim what they consider insignificant.

    Args:
        line: Raw line, with or without its trailing newline
        delimiters: Characters that split tokens and are returned as tokens
        keep_escapes: Leave the backslash in the token text so a later parser
            can still tell escaped characters apart

    Returns:
        List of Token, text and delimiter tokens interleaved

    Raises:
        ScanError: If the line ends right after an escape character
    """
    delimiters = set(delimiters)
    tokens: List[Token] = []
    buffer: List[str] = []
    start = 0
    escaped = False

    for column, ch in enumerate(line):
        if escaped:
            if ch in LINE_END:
                break
            buffer.append(ch)
            escaped = False
        elif ch == ESCAPE:
            if keep_escapes:
                buffer.append(ch)
            escaped = True
        elif ch == COMMENT or ch in LINE_END:
            break
        elif ch in delimiters:
            tokens.append(Token("".join(buffer), column=start))
            tokens.append(Token(ch, delim=True, column=column))
            buffer = []
            start = column + 1
        else:
            buffer.append(ch)
    else:
        column = len(line)

    if escaped:
        raise ScanError(column, "expected a character after '\\'")

    tokens.append(Token("".join(buffer), column=start))
    return tokens


def split_words(line: str) -> List[str]:
    """
    Split a console line at blanks, dropping empty fields.

    Escapes are kept so unit expressions like '\\_x' reach the unit parser
    intact.
    """
    return [
        t.text for t in tokenize(line, " \t", keep_escapes=True)
        if not t.delim and t.text
    ]
